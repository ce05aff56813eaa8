"""JSON path resolution for document-shaped entity data.

Supports the subset of JSONPath that field locations need::

    $.name  $['name']  $["name"]  $.list[0]  $.list[-1]  $.list[*]  $.object.*

``resolve`` returns every match as a :class:`Location` (container + key) so
callers can read, replace and delete values in place. ``assign`` writes to a
definite path, creating intermediate objects and arrays on the way, and
``remove`` deletes matches along with the containers they leave empty.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from keyshape.exceptions import InvalidJsonPathError

_IDENTIFIER = re.compile(r"[A-Za-z_$][\w$]*")
_INDEX = re.compile(r"-?\d+")


@dataclass(frozen=True)
class Member:
    """Object member step (``.name`` or ``['name']``)."""

    name: str


@dataclass(frozen=True)
class Index:
    """Array element step (``[3]``)."""

    position: int


@dataclass(frozen=True)
class Wildcard:
    """Every child of an object or array (``[*]`` or ``.*``)."""


Step = Member | Index | Wildcard


@dataclass
class Location:
    """A mutable handle on one matched value."""

    container: dict[str, Any] | list[Any]
    key: str | int

    @property
    def value(self) -> Any:
        return self.container[self.key]  # type: ignore[index]

    def set(self, value: Any) -> None:
        self.container[self.key] = value  # type: ignore[index]

    def delete(self) -> None:
        if isinstance(self.container, list):
            self.container.pop(self.key)  # type: ignore[arg-type]
        else:
            del self.container[self.key]  # type: ignore[arg-type]


def member_path(name: str) -> str:
    """Build the root-relative path addressing a top-level member."""
    if _IDENTIFIER.fullmatch(name):
        return f"$.{name}"
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'$["{escaped}"]'


@lru_cache(maxsize=1024)
def parse_path(path: str) -> tuple[Step, ...]:
    """Parse a JSON path into steps.

    Raises:
        InvalidJsonPathError: If the path is not in the supported subset
    """
    if not path.startswith("$"):
        raise InvalidJsonPathError(path, "paths must start at the root '$'")

    steps: list[Step] = []
    pos = 1
    while pos < len(path):
        char = path[pos]
        if char == ".":
            if path.startswith("..", pos):
                raise InvalidJsonPathError(path, "recursive descent '..' is not supported")
            if path.startswith(".*", pos):
                steps.append(Wildcard())
                pos += 2
                continue
            end = pos + 1
            while end < len(path) and path[end] not in ".[":
                end += 1
            name = path[pos + 1 : end]
            if not name:
                raise InvalidJsonPathError(path, f"empty member name at offset {pos}")
            steps.append(Member(name))
            pos = end
        elif char == "[":
            step, pos = _parse_bracket(path, pos)
            steps.append(step)
        else:
            raise InvalidJsonPathError(path, f"unexpected '{char}' at offset {pos}")

    if not steps:
        raise InvalidJsonPathError(path, "path must address a value inside the document")
    return tuple(steps)


def _parse_bracket(path: str, pos: int) -> tuple[Step, int]:
    close = path.find("]", pos)
    if close == -1:
        raise InvalidJsonPathError(path, f"unclosed '[' at offset {pos}")

    inner = path[pos + 1 : close].strip()
    if inner == "*":
        return Wildcard(), close + 1
    if _INDEX.fullmatch(inner):
        return Index(int(inner)), close + 1
    if inner[:1] in ("'", '"'):
        return _parse_quoted(path, pos + 1)
    raise InvalidJsonPathError(path, f"unsupported selector '[{inner}]'")


def _parse_quoted(path: str, pos: int) -> tuple[Step, int]:
    # Quoted names may contain ']' so scan instead of splitting
    quote = path[pos]
    chars: list[str] = []
    i = pos + 1
    while i < len(path):
        char = path[i]
        if char == "\\" and i + 1 < len(path):
            chars.append(path[i + 1])
            i += 2
            continue
        if char == quote:
            break
        chars.append(char)
        i += 1
    else:
        raise InvalidJsonPathError(path, f"unterminated quoted name at offset {pos}")

    if not path.startswith("]", i + 1):
        raise InvalidJsonPathError(path, f"expected ']' at offset {i + 1}")
    return Member("".join(chars)), i + 2


def is_definite(path: str) -> bool:
    """Whether a path can match at most one location."""
    return not any(isinstance(step, Wildcard) for step in parse_path(path))


def strip_wildcard(path: str) -> str:
    """Drop a trailing wildcard so the path addresses the container itself.

    ``$.tags[*]`` becomes ``$.tags``; paths without one come back unchanged.
    """
    steps = parse_path(path)
    if len(steps) < 2 or not isinstance(steps[-1], Wildcard):
        return path
    cut = path.rfind("[") if path.endswith("]") else len(path) - 2
    return path[:cut]


def _children(value: Any, step: Step) -> list[Location]:
    match step:
        case Member(name):
            if isinstance(value, dict) and name in value:
                return [Location(value, name)]
        case Index(position):
            if isinstance(value, list) and -len(value) <= position < len(value):
                return [Location(value, position % len(value))]
        case Wildcard():
            if isinstance(value, dict):
                return [Location(value, key) for key in value]
            if isinstance(value, list):
                return [Location(value, i) for i in range(len(value))]
    return []


def resolve(document: Any, path: str) -> list[Location]:
    """Find every location in ``document`` matched by ``path``."""
    locations: list[Location] = []
    values = [document]
    for step in parse_path(path):
        locations = [loc for value in values for loc in _children(value, step)]
        values = [loc.value for loc in locations]
    return locations


def remove(document: Any, path: str) -> int:
    """Delete every value matched by ``path``.

    Objects and arrays left empty by the deletion are removed too, walking
    back up the path, so a document never keeps ``{"a": {}}`` shells.
    Returns the number of values deleted.
    """
    return _remove(document, parse_path(path))


def _remove(value: Any, steps: tuple[Step, ...]) -> int:
    removed = 0
    # Reversed so popping list elements keeps the remaining indexes valid
    for location in reversed(_children(value, steps[0])):
        if len(steps) == 1:
            location.delete()
            removed += 1
            continue
        child = location.value
        count = _remove(child, steps[1:])
        if count and isinstance(child, (dict, list)) and not child:
            location.delete()
        removed += count
    return removed


def writable_steps(path: str) -> tuple[Step, ...]:
    """Steps that ``assign`` writes through.

    A trailing ``[*]`` addresses the array itself, so it is dropped.

    Raises:
        InvalidJsonPathError: If a wildcard appears anywhere else
    """
    steps = parse_path(path)
    if isinstance(steps[-1], Wildcard):
        steps = steps[:-1]
    if not steps:
        raise InvalidJsonPathError(path, "cannot replace the document root")
    if any(isinstance(step, Wildcard) for step in steps):
        raise InvalidJsonPathError(path, "wildcards can only end a writable path")
    return steps


def _get_child(container: dict[str, Any] | list[Any], step: Step) -> Any:
    if isinstance(container, dict) and isinstance(step, Member):
        return container.get(step.name)
    if isinstance(container, list) and isinstance(step, Index):
        if -len(container) <= step.position < len(container):
            return container[step.position]
    return None


def _put_child(path: str, container: dict[str, Any] | list[Any], step: Step, value: Any) -> None:
    if isinstance(container, dict) and isinstance(step, Member):
        container[step.name] = value
    elif isinstance(container, list) and isinstance(step, Index):
        position = step.position
        if position < 0:
            if position < -len(container):
                raise InvalidJsonPathError(path, f"index {position} is out of range")
            position += len(container)
        container.extend([None] * (position + 1 - len(container)))
        container[position] = value
    else:
        kind = "an array" if isinstance(container, list) else "an object"
        raise InvalidJsonPathError(path, f"{step!r} cannot address {kind}")


def assign(document: dict[str, Any], path: str, value: Any) -> None:
    """Write ``value`` at ``path``, creating containers as needed."""
    steps = writable_steps(path)
    container: dict[str, Any] | list[Any] = document
    for step, following in zip(steps, steps[1:]):
        child = _get_child(container, step)
        if not isinstance(child, (dict, list)):
            child = [] if isinstance(following, Index) else {}
            _put_child(path, container, step, child)
        container = child
    _put_child(path, container, steps[-1], value)
