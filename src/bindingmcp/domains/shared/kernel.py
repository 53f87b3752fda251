"""Shared Kernel - Core types shared across bounded contexts.

Kept minimal: tool-parameter type aliases used by the MCP surface and the
mapping from a device query to the group tag searched in binding documents.
"""

from __future__ import annotations

import json
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import BeforeValidator

from bindingmcp.domains.bindings import DeviceGroup


# ============================================================
# Type-Constrained Tool Parameters
# ============================================================
#
# Literal type aliases with BeforeValidator for case-insensitive
# normalization.  Produces flat {"enum": [...]} in JSON Schema
# while accepting wrong-case input at runtime.
# ============================================================


def _normalize_str(v: Any) -> Any:
    """Normalize string input: strip whitespace, lowercase."""
    return v.strip().lower() if isinstance(v, str) else v


DeviceQuery = Annotated[
    Literal["keyboard", "gamepad"],
    BeforeValidator(_normalize_str),
]

BinderCategoryName = Annotated[
    Literal["button", "toggle", "owner", "all"],
    BeforeValidator(_normalize_str),
]


def _coerce_string_to_list(v: Any) -> Any:
    """Coerce stringified JSON arrays and comma-separated strings to lists.

    1. JSON array string:  '["ui", "canvas"]' -> ["ui", "canvas"]
    2. Comma-separated:    'ui,canvas'        -> ["ui", "canvas"]
    3. Single value:       'ui'               -> ["ui"]

    Non-string inputs pass through unchanged.
    """
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        v_stripped = v.strip()
        if v_stripped.startswith("["):
            try:
                parsed = json.loads(v_stripped)
                if isinstance(parsed, list):
                    return parsed
            except json.JSONDecodeError:
                pass
        if "," in v_stripped:
            return [item.strip() for item in v_stripped.split(",") if item.strip()]
        if v_stripped:
            return [v_stripped]
    return v


OptionalCoercedStringList = Annotated[
    Optional[List[str]], BeforeValidator(_coerce_string_to_list)
]


# Device query -> group tag searched in a binding's groups field
DEVICE_GROUP_TAGS: Dict[str, str] = {
    "keyboard": DeviceGroup.KEYBOARD_MOUSE,
    "gamepad": DeviceGroup.GAMEPAD,
}


def group_for_device(device: str, overrides: Optional[Dict[str, str]] = None) -> str:
    """Resolve a device query ("keyboard"/"gamepad") to its group tag.

    Unknown devices are returned unchanged so a raw tag can be queried.
    """
    tags = dict(DEVICE_GROUP_TAGS)
    if overrides:
        tags.update(overrides)
    return tags.get(_normalize_str(device), device)
