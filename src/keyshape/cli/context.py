"""CLI context: resolved options shared by every command."""

import os
from dataclasses import dataclass

from keyshape.cli.parsing import read_json_object
from keyshape.core.types import DataStructure
from keyshape.schema import Schema


def get_data_structure(value: str | None) -> DataStructure | None:
    """Resolve the data structure override.

    Priority:
    1. Explicit --structure argument
    2. KEYSHAPE_DATA_STRUCTURE environment variable
    3. None: the schema file decides (HASH when it doesn't say)
    """
    if value:
        return DataStructure.parse(value)
    if env_value := os.getenv("KEYSHAPE_DATA_STRUCTURE"):
        return DataStructure.parse(env_value)
    return None


@dataclass
class CLIContext:
    """Shared context for CLI commands."""

    data_structure: DataStructure | None
    json_output: bool

    def load_schema(self, path: str) -> Schema:
        """Read a schema file, applying the data structure override."""
        data = read_json_object(path, "schema")
        return Schema.from_dict(data, data_structure=self.data_structure)
