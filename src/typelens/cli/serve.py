"""tlens serve command - run the MCP server."""

from pathlib import Path

import click

from typelens.cli.utils import get_error_console, load_cli_config


@click.command()
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Directory whose .typelens/config.yaml applies (default: cwd)",
)
@click.option(
    "--transport",
    type=click.Choice(["stdio", "http"]),
    help="Override the configured transport",
)
@click.option("--host", help="Override server host (http only)")
@click.option("--port", "-p", type=int, help="Override server port (http only)")
@click.option(
    "--search-root",
    "search_roots",
    multiple=True,
    type=click.Path(exists=True, file_okay=False),
    help="Directory to resolve relative module paths against (repeatable)",
)
@click.pass_context
def serve_command(
    ctx: click.Context,
    root: Path | None,
    transport: str | None,
    host: str | None,
    port: int | None,
    search_roots: tuple[str, ...],
) -> None:
    """Start the typelens MCP server.

    Runs in the foreground on stdio by default. Logs go to stderr so the
    protocol stream on stdout stays clean.
    """
    from typelens.core.logging import configure_logging
    from typelens.mcp.server import run_server

    config = load_cli_config(root)
    if transport is not None:
        config.server.transport = transport  # type: ignore[assignment]
    if host is not None:
        config.server.host = host
    if port is not None:
        config.server.port = port
    if search_roots:
        config.inspection.search_roots = [
            *config.inspection.search_roots,
            *(str(Path(r).resolve()) for r in search_roots),
        ]

    if ctx.obj and ctx.obj.get("verbose"):
        config.logging.level = "DEBUG"
    configure_logging(config=config.logging)

    if config.server.transport == "http":
        get_error_console().print(
            f"typelens MCP endpoint: http://{config.server.host}:{config.server.port}/mcp",
            style="green",
            highlight=False,
        )

    try:
        run_server(config)
    except KeyboardInterrupt:
        click.echo("\nStopped", err=True)
