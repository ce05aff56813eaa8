"""Search index definitions for KeyShape.

Turns a schema into the FT.CREATE command the search module needs:

    definition = build_index_definition(schema)
    definition.arguments  # ['$.title', 'AS', 'title', 'TEXT', ...]
    definition.warnings   # options that were ignored
    definition.command    # ['FT.CREATE', 'Bigfoot:index', 'ON', 'JSON', ...]
"""

from keyshape.search.index_builder import (
    IndexBuilder,
    IndexDefinition,
    build_create_command,
    build_index_arguments,
    build_index_definition,
)

__all__ = [
    "IndexBuilder",
    "IndexDefinition",
    "build_create_command",
    "build_index_arguments",
    "build_index_definition",
]
