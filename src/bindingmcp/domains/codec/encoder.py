"""Binding document encoder.

The export document is written by hand rather than through ``json.dumps``.
Previously written documents use a minimal escaping contract: backslash and
double quote are escaped, every other character (control characters
included) is written verbatim. Field order and lowercase booleans are part
of the same contract, so the functions below must stay byte-compatible.

Document layout::

    {"items":[{"source":"...","data":{"name":"...","maps":[...]}}]}
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Optional, Tuple

from bindingmcp.domains.bindings import (
    ActionMap,
    Binding,
    InputAction,
    InputActionAsset,
)


def escape(value: Optional[str]) -> str:
    """Escape a string field: ``\\`` -> ``\\\\`` and ``"`` -> ``\\"`` only.

    None becomes an empty string, never a null token.
    """
    if value is None:
        return ""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _bool(value: bool) -> str:
    return "true" if value else "false"


def _join(parts: Iterable[str]) -> str:
    return ",".join(parts)


def encode_binding(binding: Binding) -> str:
    """Encode one binding object."""
    return (
        "{"
        f'"path":"{escape(binding.path)}",'
        f'"interactions":"{escape(binding.interactions)}",'
        f'"processors":"{escape(binding.processors)}",'
        f'"groups":"{escape(binding.groups)}",'
        f'"action":"{escape(binding.action)}",'
        f'"isComposite":{_bool(binding.is_composite)},'
        f'"isPartOfComposite":{_bool(binding.is_part_of_composite)}'
        "}"
    )


def encode_action(action: InputAction) -> str:
    """Encode one action with its bindings."""
    action_type = None if action.type is None else str(action.type)
    return (
        "{"
        f'"name":"{escape(action.name)}",'
        f'"type":"{escape(action_type)}",'
        f'"expectedControlType":"{escape(action.expected_control_type)}",'
        f'"bindings":[{_join(encode_binding(b) for b in action.bindings)}]'
        "}"
    )


def encode_action_map(action_map: ActionMap) -> str:
    """Encode one action map with its actions."""
    return (
        "{"
        f'"name":"{escape(action_map.name)}",'
        f'"id":"{escape(action_map.id)}",'
        f'"actions":[{_join(encode_action(a) for a in action_map.actions)}]'
        "}"
    )


def encode_asset(asset: InputActionAsset) -> str:
    """Encode one asset as ``{name, maps}``."""
    return (
        "{"
        f'"name":"{escape(asset.name)}",'
        f'"maps":[{_join(encode_action_map(m) for m in asset.maps)}]'
        "}"
    )


def encode_document(entries: Iterable[Tuple[str, InputActionAsset]]) -> str:
    """Encode ``(source, asset)`` pairs as the export document.

    Args:
        entries: Provenance text and asset for every discovered asset, in
            discovery order

    Returns:
        The document text
    """
    items = (
        f'{{"source":"{escape(source)}","data":{encode_asset(asset)}}}'
        for source, asset in entries
    )
    return f'{{"items":[{_join(items)}]}}'


def asset_to_dict(asset: InputActionAsset) -> Dict[str, Any]:
    """Limited-schema representation of an asset.

    Bindings are listed per map (flattened in declaration order) with the
    owning action name as a back link, the shape display readers consume.
    """
    maps: List[Dict[str, Any]] = []
    for action_map in asset.maps:
        maps.append(
            {
                "name": action_map.name or "",
                "id": action_map.id or "",
                "actions": [
                    {
                        "name": action.name or "",
                        "type": "" if action.type is None else str(action.type),
                        "id": action.id or "",
                        "expectedControlType": action.expected_control_type or "",
                    }
                    for action in action_map.actions
                ],
                "bindings": [
                    {
                        "name": binding.name or "",
                        "id": binding.id or "",
                        "path": binding.path or "",
                        "interactions": binding.interactions or "",
                        "processors": binding.processors or "",
                        "groups": binding.groups or "",
                        "action": binding.action or "",
                        "isComposite": binding.is_composite,
                        "isPartOfComposite": binding.is_part_of_composite,
                    }
                    for binding in action_map.bindings
                ],
            }
        )
    return {"name": asset.name or "", "maps": maps}


def encode_asset_json(asset: InputActionAsset) -> str:
    """Encode an asset in the limited schema used by the sentinel artifact."""
    return json.dumps(asset_to_dict(asset), indent=4, ensure_ascii=False)
