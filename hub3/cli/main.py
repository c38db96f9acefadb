"""Main CLI entry point."""

import logging

import click

from hub3 import __version__
from hub3.cli.db import db
from hub3.cli.namespaces import namespaces
from hub3.cli.search import search
from hub3.core.config import get_settings


@click.group()
@click.version_option(version=__version__)
def cli():
    """hub3 search CLI."""
    logging.basicConfig(level=get_settings().log_level)


cli.add_command(db)
cli.add_command(namespaces)
cli.add_command(search)


if __name__ == "__main__":
    cli()
