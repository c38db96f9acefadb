"""Search CLI commands - offline inspection of requests and cursors."""

import json
from urllib.parse import parse_qs

import click

from hub3.core.config import get_settings
from hub3.core.errors import SearchError
from hub3.core.namespace import NamespaceRegistry
from hub3.core.search.config import SearchConfig
from hub3.core.search.cursor import decode_cursor
from hub3.core.search.request import new_search_request
from hub3.core.services.search import SearchService


def _search_config() -> SearchConfig:
    settings = get_settings()
    return SearchConfig.from_settings(settings, NamespaceRegistry(settings.default_namespaces))


@click.group()
def search():
    """Inspect search requests without calling Elasticsearch."""
    pass


@search.command("decode")
@click.argument("token")
def decode(token: str):
    """Print the search request stored in a scrollID TOKEN."""
    try:
        sr = decode_cursor(token)
    except SearchError as e:
        raise click.ClickException(e.message)
    click.echo(json.dumps(sr.model_dump(by_alias=True, mode="json"), indent=2))


@search.command("compile")
@click.argument("querystring")
@click.option(
    "--echo", "echo_type", default="es", show_default=True,
    help="What to print: es, aggs or searchRequest",
)
def compile_query(querystring: str, echo_type: str):
    """Compile a QUERYSTRING such as 'q=rembrandt&qf[]=dc_subject:painting'."""
    config = _search_config()
    service = SearchService(client=None, config=config)
    try:
        sr = new_search_request(parse_qs(querystring), config)
        value = service.echo(sr, echo_type)
    except (SearchError, ValueError) as e:
        raise click.ClickException(str(e))
    click.echo(json.dumps(value, indent=2))
