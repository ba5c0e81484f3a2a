"""
JSON codec for setting values.

Primitive values map to plain JSON. Domain types are written as
{"__type__": ..., "value": ...} objects and rebuilt on decode.
"""

import json

from settings.types import PublicKey


class _JSONEncoder(json.JSONEncoder):
    """Handles PublicKey serialization."""

    def default(self, obj):
        if isinstance(obj, PublicKey):
            return {"__type__": "PublicKey", "value": obj.as_hex()}
        return super().default(obj)


def _json_decoder_hook(d):
    """Reconstruct domain types from JSONB."""
    if "__type__" in d:
        t = d["__type__"]
        v = d["value"]
        if t == "PublicKey":
            return PublicKey.from_hex(v)
    return d


def encode(value) -> str:
    """Serialize a setting value to a JSON string for JSONB storage."""
    return json.dumps(value, cls=_JSONEncoder)


def decode(json_text: str):
    """Deserialize a stored JSON string back to a setting value."""
    return json.loads(json_text, object_hook=_json_decoder_hook)
