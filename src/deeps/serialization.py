"""Wire format of a generated floor, as sent to clients.

The payload is the camelCase dictionary built by ``Floor.to_dict()``. The JSON
Schema below pins it down so the networking layer and tests can check a
payload before it leaves the process.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict

from jsonschema import Draft202012Validator

from .dungeon.floor import Floor
from .dungeon.rooms import RoomType
from .dungeon.tiles import TileType
from .errors import PayloadValidationError

logger = logging.getLogger(__name__)

_POSITION = {
    "type": "object",
    "required": ["x", "y"],
    "properties": {"x": {"type": "integer", "minimum": 0}, "y": {"type": "integer", "minimum": 0}},
    "additionalProperties": False,
}

_TILE = {
    "type": "object",
    "required": ["type", "explored", "visible"],
    "properties": {
        "type": {"enum": [t.value for t in TileType]},
        "explored": {"type": "boolean"},
        "visible": {"type": "boolean"},
        "characterId": {"type": "string"},
        "mobId": {"type": "string"},
        "itemId": {"type": "string"},
    },
    "additionalProperties": False,
}

_ROOM = {
    "type": "object",
    "required": ["id", "type", "x", "y", "width", "height", "explored"],
    "properties": {
        "id": {"type": "string"},
        "type": {"enum": [t.value for t in RoomType]},
        "x": {"type": "integer", "minimum": 0},
        "y": {"type": "integer", "minimum": 0},
        "width": {"type": "integer", "minimum": 1},
        "height": {"type": "integer", "minimum": 1},
        "explored": {"type": "boolean"},
    },
    "additionalProperties": False,
}

_ENTITY = {
    "type": "object",
    "required": ["id", "type", "name", "position"],
    "properties": {"id": {"type": "string"}, "position": _POSITION},
}

FLOOR_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["level", "width", "height", "tiles", "rooms", "upStairs", "downStairs", "mobs", "items"],
    "properties": {
        "level": {"type": "integer", "minimum": 1},
        "width": {"type": "integer", "minimum": 1},
        "height": {"type": "integer", "minimum": 1},
        "tiles": {"type": "array", "items": {"type": "array", "items": _TILE}},
        "rooms": {"type": "array", "items": _ROOM},
        "upStairs": {"type": "array", "items": _POSITION},
        "downStairs": {"type": "array", "items": _POSITION},
        "mobs": {"type": "object", "additionalProperties": _ENTITY},
        "items": {"type": "object", "additionalProperties": _ENTITY},
    },
    "additionalProperties": False,
}

_validator = Draft202012Validator(FLOOR_SCHEMA)


def validate_floor_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Validate a serialized floor; raises PayloadValidationError listing every problem."""
    errors = sorted(_validator.iter_errors(payload), key=lambda e: [str(p) for p in e.path])
    if errors:
        raise PayloadValidationError(
            f"At {'.'.join(str(p) for p in err.absolute_path) or '$'}: {err.message}" for err in errors
        )
    # Row-major shape is not expressible in the schema
    tiles = payload["tiles"]
    if len(tiles) != payload["height"] or any(len(row) != payload["width"] for row in tiles):
        raise PayloadValidationError([f"At tiles: expected {payload['height']} rows of {payload['width']} tiles"])
    return payload


def floor_to_json(floor: Floor, **dumps_kwargs: Any) -> str:
    payload = validate_floor_payload(floor.to_dict())
    logger.debug("Serialized floor %d (%dx%d)", floor.level, floor.width, floor.height)
    return json.dumps(payload, **dumps_kwargs)
