"""Entity data conversion commands."""

from typing import Annotated

import typer

from keyshape.cli.context import CLIContext
from keyshape.cli.output import OutputFormatter
from keyshape.cli.parsing import read_json_object
from keyshape.core.types import DataStructure
from keyshape.data import from_hash, from_json, to_hash, to_json
from keyshape.exceptions import KeyShapeError

app = typer.Typer(help="Convert entity data to and from stored payloads")


@app.command("encode")
def data_encode(
    ctx: typer.Context,
    schema_file: Annotated[str, typer.Argument(help="Path to the schema JSON file")],
    entity_file: Annotated[str, typer.Argument(help="Path to the entity JSON file, or - for stdin")],
    entity_id: Annotated[
        str | None,
        typer.Option("--id", help="Entity id, used to show the storage key"),
    ] = None,
) -> None:
    """Convert entity data into the payload written to the store.

    Date fields accept ISO-8601 strings or epoch milliseconds; point fields
    accept {"longitude": ..., "latitude": ...}.
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        schema = cli_ctx.load_schema(schema_file)
        entity = read_json_object(entity_file, "entity")
        if schema.data_structure == DataStructure.JSON:
            conversion = to_json(schema, entity)
            payload, empty = conversion.data, conversion.is_empty
        else:
            hash_conversion = to_hash(schema, entity)
            payload, empty = hash_conversion.data, hash_conversion.is_empty
    except (KeyShapeError, OSError, ValueError) as e:
        formatter.print_error(e)
        raise typer.Exit(code=1) from e

    key = schema.key_for(entity_id) if entity_id else None
    if empty:
        details = {"empty": True}
        if key:
            details["key"] = key
        formatter.print_success("Nothing to store: delete the key instead of writing it", details)
    elif cli_ctx.json_output:
        formatter.print_data({"empty": False, "key": key, "data": payload})
    else:
        if key:
            formatter.print_success(f"Payload for {key}")
        formatter.print_data(payload)


@app.command("decode")
def data_decode(
    ctx: typer.Context,
    schema_file: Annotated[str, typer.Argument(help="Path to the schema JSON file")],
    payload_file: Annotated[str, typer.Argument(help="Path to the stored payload JSON file, or - for stdin")],
) -> None:
    """Convert a stored Hash or JSON payload back into entity data."""
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        schema = cli_ctx.load_schema(schema_file)
        payload = read_json_object(payload_file, "payload")
        if schema.data_structure == DataStructure.JSON:
            entity = from_json(schema, payload)
        else:
            entity = from_hash(schema, payload)
    except (KeyShapeError, OSError, ValueError) as e:
        formatter.print_error(e)
        raise typer.Exit(code=1) from e

    formatter.print_data(entity)
