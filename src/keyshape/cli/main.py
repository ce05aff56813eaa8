"""KeyShape CLI - Main entry point."""

import logging
import sys
from typing import Annotated

import typer

import keyshape
from keyshape.cli.context import CLIContext, get_data_structure

# Create main Typer app
app = typer.Typer(
    name="keyshape",
    help="KeyShape CLI - Hash/JSON payloads and search index definitions from schema files",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    structure: Annotated[
        str | None,
        typer.Option(
            "--structure",
            "-s",
            envvar="KEYSHAPE_DATA_STRUCTURE",
            help="Data structure override: HASH or JSON",
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON (machine-readable)",
        ),
    ] = False,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            envvar="KEYSHAPE_LOG_LEVEL",
            help="Logging level for diagnostics on stderr",
        ),
    ] = "WARNING",
) -> None:
    """Initialize CLI context with global options."""
    level = logging.getLevelNamesMapping().get(log_level.upper())
    if level is None:
        raise typer.BadParameter(f"Unknown log level '{log_level}'", param_hint="--log-level")
    # Diagnostics go to stderr so stdout stays parseable
    logging.basicConfig(level=level, stream=sys.stderr)

    try:
        data_structure = get_data_structure(structure)
    except ValueError as e:
        raise typer.BadParameter(
            f"Invalid data structure '{structure}'. Valid: HASH, JSON",
            param_hint="--structure",
        ) from e

    ctx.obj = CLIContext(
        data_structure=data_structure,
        json_output=json_output,
    )


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"KeyShape v{keyshape.__version__}")


# Register command groups
from keyshape.cli.commands import data, index, schema  # noqa: E402

app.add_typer(schema.app, name="schema")
app.add_typer(index.app, name="index")
app.add_typer(data.app, name="data")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
