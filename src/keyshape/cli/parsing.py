"""Input parsing utilities for CLI commands."""

import json
import sys
from pathlib import Path
from typing import Any

STDIN = "-"


def read_json_object(path: str, what: str = "file") -> dict[str, Any]:
    """Load the JSON object held in a file, or on stdin when path is "-".

    Args:
        path: File path, or "-" for standard input
        what: What the file holds, for error messages ("schema", "payload")

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the content is not valid JSON or not an object
    """
    if path == STDIN:
        source, text = "stdin", sys.stdin.read()
    else:
        file_path = Path(path)
        if not file_path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        source, text = path, file_path.read_text(encoding="utf-8")

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {what} {source}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {what} {source}, found {type(data).__name__}")
    return data
