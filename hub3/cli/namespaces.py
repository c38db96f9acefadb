"""Namespace CLI commands."""

import click

from hub3.core.database import get_db_session
from hub3.core.services.namespace import NamespaceService


@click.group()
def namespaces():
    """Manage the namespace prefixes used by TypeClass filters."""
    pass


@namespaces.command("list")
def list_namespaces():
    """List stored namespaces."""
    with get_db_session() as session:
        stored = NamespaceService(session).list_namespaces()

    if not stored:
        click.echo("No namespaces stored. Run 'hub3 db init' first.")
        return
    for ns in stored:
        click.echo(f"{ns.prefix:<12} {ns.base}")


@namespaces.command("add")
@click.argument("prefix")
@click.argument("base")
def add_namespace(prefix: str, base: str):
    """Create or update PREFIX to expand to BASE."""
    if "_" in prefix:
        raise click.BadParameter("prefix may not contain '_'", param_hint="PREFIX")
    with get_db_session() as session:
        NamespaceService(session).add(prefix, base)
    click.echo(f"Stored {prefix} -> {base}")


@namespaces.command("remove")
@click.argument("prefix")
def remove_namespace(prefix: str):
    """Delete the namespace PREFIX."""
    with get_db_session() as session:
        removed = NamespaceService(session).remove(prefix)
    if not removed:
        raise click.ClickException(f"Namespace {prefix} not found")
    click.echo(f"Removed {prefix}")
