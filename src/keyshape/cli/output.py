"""Output formatting for CLI commands."""

import json
from datetime import datetime
from typing import Any

from pydantic import BaseModel
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from keyshape.exceptions import KeyShapeError, describe_value
from keyshape.schema import Schema

console = Console()


def to_jsonable(value: Any) -> Any:
    """json.dumps default for entity values (datetimes, points)."""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, BaseModel):
        return value.model_dump()
    return str(value)


class OutputFormatter:
    """Formats output for terminal or JSON mode."""

    def __init__(self, json_mode: bool = False) -> None:
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON instead of Rich formatting
        """
        self.json_mode = json_mode

    def print_schema(self, schema: Schema) -> None:
        """Print a schema's resolved fields.

        Args:
            schema: Schema to display
        """
        if self.json_mode:
            output = {
                "entity": schema.entity_name,
                "data_structure": schema.data_structure.value,
                "prefix": schema.prefix,
                "index_name": schema.index_name,
                "fields": [definition.to_dict() for definition in schema],
            }
            print(json.dumps(output, indent=2))
            return

        console.print(f"\n[bold]Entity:[/bold] {schema.entity_name}")
        console.print(f"Data structure: {schema.data_structure.value}")
        console.print(f"Key prefix: {schema.prefix}:")
        console.print(f"Index: {schema.index_name}")

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Name")
        table.add_column("Type")
        table.add_column("Stored at")
        table.add_column("Sortable")
        table.add_column("Indexed")
        table.add_column("Separator")
        for definition in schema:
            table.add_row(
                definition.name,
                definition.type.value,
                definition.storage_path,
                "✓" if definition.spec.sortable else "",
                "✓" if definition.spec.indexed else "",
                definition.separator,
            )
        console.print(table)

    def print_command(self, tokens: list[str], warnings: list[str]) -> None:
        """Print an index command.

        Warnings are only part of JSON output; in terminal mode they are
        logged to stderr by the caller.

        Args:
            tokens: Command arguments
            warnings: Ignored-option warnings
        """
        if self.json_mode:
            print(json.dumps({"arguments": tokens, "warnings": warnings}, indent=2))
            return

        # Paths like $.tags[*] must not be read as markup
        console.print(" ".join(tokens), markup=False, highlight=False)

    def print_success(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Print success message.

        Args:
            message: Success message
            details: Optional details to display
        """
        if self.json_mode:
            output = {"success": True, "message": message}
            if details:
                output.update(details)
            print(json.dumps(output, default=to_jsonable, indent=2))
        else:
            console.print(f"✓ {message}", style="green")
            if details:
                for key, value in details.items():
                    console.print(f"  {key}: {value}", style="dim")

    def print_error(self, error: Exception) -> None:
        """Print an error, with its context when it is a KeyShapeError.

        Conversion errors name the field and the value that was received;
        terminal mode lays those out as a grid under the message.
        """
        if self.json_mode:
            body = (
                error.to_dict() if isinstance(error, KeyShapeError) else {"error": str(error)}
            )
            print(json.dumps(body, default=to_jsonable, indent=2))
            return

        title = f"[red]{type(error).__name__}[/red]"
        if not isinstance(error, KeyShapeError) or not error.context:
            console.print(Panel(Text(str(error)), title=title, border_style="red"))
            return

        grid = Table.grid(padding=(0, 2))
        grid.add_column(style="bold")
        grid.add_column()
        for key, value in error.context.items():
            shown = value if isinstance(value, str) and key != "value" else describe_value(value)
            grid.add_row(key, Text(shown))
        console.print(
            Panel(Group(Text(error.message), Text(""), grid), title=title, border_style="red")
        )

    def print_data(self, data: Any) -> None:
        """Print generic data (dict, list, etc.).

        Args:
            data: Data to print
        """
        if self.json_mode:
            print(json.dumps(data, default=to_jsonable, indent=2))
        else:
            console.print_json(json.dumps(data, default=to_jsonable))
