"""Entity data conversion for KeyShape.

Converts entity data to and from the two physical representations:
- Hash: a flat field -> string map
- JSON: a nested document addressed by JSON paths
"""

from keyshape.data.hash_codec import HashConversion, from_hash, to_hash
from keyshape.data.json_codec import JsonConversion, from_json, to_json

__all__ = [
    "HashConversion",
    "JsonConversion",
    "from_hash",
    "from_json",
    "to_hash",
    "to_json",
]
