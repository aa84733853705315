"""typelens CLI - tlens command."""

import click

from typelens.cli.query import member_command, members_command, type_command, types_command
from typelens.cli.serve import serve_command
from typelens.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="tlens")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """typelens - Type and member introspection for compiled modules."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(serve_command, name="serve")
cli.add_command(types_command, name="types")
cli.add_command(type_command, name="type")
cli.add_command(members_command, name="members")
cli.add_command(member_command, name="member")


if __name__ == "__main__":
    cli()
