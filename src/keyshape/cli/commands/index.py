"""Search index commands."""

import logging
from typing import Annotated

import typer

from keyshape.cli.context import CLIContext
from keyshape.cli.output import OutputFormatter
from keyshape.exceptions import KeyShapeError
from keyshape.search import build_index_definition

logger = logging.getLogger(__name__)

app = typer.Typer(help="Compile search index definitions")


@app.command("compile")
def index_compile(
    ctx: typer.Context,
    schema_file: Annotated[str, typer.Argument(help="Path to the schema JSON file")],
    full: Annotated[
        bool,
        typer.Option("--full", "-F", help="Print the whole FT.CREATE command"),
    ] = False,
) -> None:
    """Compile a schema into search index arguments.

    Examples:

        # Field arguments only
        keyshape index compile bigfoot.json

        # Whole command, as JSON
        keyshape --json index compile bigfoot.json --full
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        schema = cli_ctx.load_schema(schema_file)
        definition = build_index_definition(schema)
    except (KeyShapeError, OSError, ValueError) as e:
        formatter.print_error(e)
        raise typer.Exit(code=1) from e

    definition.log_warnings(logger)
    tokens = definition.command if full else definition.arguments
    formatter.print_command(tokens, definition.warnings)


@app.command("fingerprint")
def index_fingerprint(
    ctx: typer.Context,
    schema_file: Annotated[str, typer.Argument(help="Path to the schema JSON file")],
) -> None:
    """Print the digest stored alongside the index to detect stale definitions."""
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        schema = cli_ctx.load_schema(schema_file)
        definition = build_index_definition(schema)
    except (KeyShapeError, OSError, ValueError) as e:
        formatter.print_error(e)
        raise typer.Exit(code=1) from e

    formatter.print_success(
        f"Fingerprint for '{schema.index_name}'",
        {"key": schema.index_hash_name, "fingerprint": definition.fingerprint},
    )
