"""Database CLI commands."""

import click

from hub3.core.config import get_settings
from hub3.core.database import engine, get_db_session
from hub3.core.models.base import Base
from hub3.core.services.namespace import NamespaceService


@click.group()
def db():
    """Database management commands."""
    pass


@db.command("init")
@click.option("--drop", is_flag=True, help="Drop existing tables first")
@click.option("--no-seed", is_flag=True, help="Do not store the default namespaces")
def init_db(drop: bool, no_seed: bool):
    """Initialize the database schema."""
    # Import all models so they're registered
    from hub3.core.models import namespace  # noqa: F401

    if drop:
        click.echo("Dropping existing tables...")
        Base.metadata.drop_all(bind=engine)

    click.echo("Creating tables...")
    Base.metadata.create_all(bind=engine)

    if not no_seed:
        with get_db_session() as session:
            added = NamespaceService(session).seed(get_settings().default_namespaces)
        click.echo(f"Seeded {added} namespaces.")
    click.echo("Database initialized.")


@db.command("info")
def db_info():
    """Show where namespaces are stored and searched."""
    settings = get_settings()
    click.echo(f"Namespace store: {engine.url.render_as_string(hide_password=True)}")
    with get_db_session() as session:
        click.echo(f"Stored namespaces: {len(NamespaceService(session).list_namespaces())}")
    click.echo(f"Elasticsearch: {settings.elasticsearch_url} (index {settings.index_name})")
