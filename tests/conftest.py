"""Shared test fixtures for KeyShape."""

import json
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

from keyshape import Point, Schema

A_DATE = datetime(2023, 6, 1, 12, 30, 15, 250000, tzinfo=timezone.utc)
A_DATE_EPOCH = 1685622615250
A_POINT = Point(longitude=12.34, latitude=56.78)
A_POINT_STRING = "12.34,56.78"

BIGFOOT_FIELDS: dict[str, dict[str, Any]] = {
    "title": {"type": "text"},
    "state": {"type": "string"},
    "eyewitness": {"type": "boolean"},
    "temperature": {"type": "number"},
    "location": {"type": "point"},
    "sighted": {"type": "date"},
    "tags": {"type": "string[]"},
    "moreTags": {"type": "string[]", "separator": "&"},
}

A_SIGHTING: dict[str, Any] = {
    "title": "Bigfoot by the river",
    "state": "OH",
    "eyewitness": True,
    "temperature": 75,
    "location": A_POINT,
    "sighted": A_DATE,
    "tags": ["creek", "night"],
    "moreTags": ["tall", "hairy"],
}

A_SIGHTING_HASH: dict[str, str] = {
    "title": "Bigfoot by the river",
    "state": "OH",
    "eyewitness": "1",
    "temperature": "75",
    "location": A_POINT_STRING,
    "sighted": str(A_DATE_EPOCH),
    "tags": "creek|night",
    "moreTags": "tall&hairy",
}

A_SIGHTING_JSON: dict[str, Any] = {
    "title": "Bigfoot by the river",
    "state": "OH",
    "eyewitness": True,
    "temperature": 75,
    "location": A_POINT_STRING,
    "sighted": A_DATE_EPOCH,
    "tags": ["creek", "night"],
    "moreTags": ["tall", "hairy"],
}


@pytest.fixture
def hash_schema() -> Schema:
    """Bigfoot schema stored as a Hash."""
    return Schema("Bigfoot", BIGFOOT_FIELDS)


@pytest.fixture
def json_schema() -> Schema:
    """Bigfoot schema stored as JSON."""
    return Schema("Bigfoot", BIGFOOT_FIELDS, data_structure="JSON")


@pytest.fixture
def write_json(tmp_path: Path) -> Callable[[str, Any], str]:
    """Write an object to a JSON file under tmp_path and return its path."""

    def _write(name: str, content: Any) -> str:
        path = tmp_path / name
        path.write_text(json.dumps(content), encoding="utf-8")
        return str(path)

    return _write
