"""
Configuration management using Pydantic Settings.

Loads configuration from environment variables and .env file.
"""

from functools import lru_cache
from typing import Dict

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database (namespace registry)
    database_url: str = "sqlite:///./hub3.db"

    # Elasticsearch
    elasticsearch_url: str = "http://localhost:9200"
    index_name: str = "hub3v2"
    request_timeout: float = 10.0

    # Tenant scoping
    org_id: str = "hub3"
    org_id_key: str = "meta.orgID"
    spec_key: str = "meta.spec"

    # Search defaults
    facet_size: int = 50
    minimum_should_match: str = "2<70%"

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 3000

    # Logging
    log_level: str = "INFO"

    @property
    def default_namespaces(self) -> Dict[str, str]:
        """Namespaces seeded into an empty registry."""
        return {
            "rdf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
            "rdfs": "http://www.w3.org/2000/01/rdf-schema#",
            "dc": "http://purl.org/dc/elements/1.1/",
            "dcterms": "http://purl.org/dc/terms/",
            "skos": "http://www.w3.org/2004/02/skos/core#",
            "edm": "http://www.europeana.eu/schemas/edm/",
            "ore": "http://www.openarchives.org/ore/terms/",
            "foaf": "http://xmlns.com/foaf/0.1/",
            "nave": "http://schemas.delving.eu/nave/terms/",
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
