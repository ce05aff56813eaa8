"""Schema inspection commands."""

from typing import Annotated

import typer

from keyshape.cli.context import CLIContext
from keyshape.cli.output import OutputFormatter
from keyshape.exceptions import KeyShapeError

app = typer.Typer(help="Inspect schema files")


@app.command("describe")
def schema_describe(
    ctx: typer.Context,
    schema_file: Annotated[str, typer.Argument(help="Path to the schema JSON file")],
) -> None:
    """Show the resolved fields of a schema, with their storage locations."""
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        schema = cli_ctx.load_schema(schema_file)
        formatter.print_schema(schema)
    except (KeyShapeError, OSError, ValueError) as e:
        formatter.print_error(e)
        raise typer.Exit(code=1) from e
