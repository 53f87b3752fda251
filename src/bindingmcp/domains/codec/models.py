"""Data transfer objects for decoded binding documents.

These mirror the reduced display schema. They carry no back references and
are never mutated after decoding; every field is optional in the source
document and falls back to an empty, display-safe default.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def _str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _bool(data: Dict[str, Any], key: str) -> bool:
    value = data.get(key)
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def _dicts(data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    value = data.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


@dataclass
class BindingDto:
    """A decoded binding."""
    name: str = ""
    id: str = ""
    path: str = ""
    interactions: str = ""
    processors: str = ""
    groups: str = ""
    action: str = ""
    is_composite: bool = False
    is_part_of_composite: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any], default_action: str = "") -> "BindingDto":
        return cls(
            name=_str(data, "name"),
            id=_str(data, "id"),
            path=_str(data, "path"),
            interactions=_str(data, "interactions"),
            processors=_str(data, "processors"),
            groups=_str(data, "groups"),
            action=_str(data, "action") if "action" in data else default_action,
            is_composite=_bool(data, "isComposite"),
            is_part_of_composite=_bool(data, "isPartOfComposite"),
        )


@dataclass
class ActionDto:
    """A decoded action."""
    name: str = ""
    type: str = ""
    id: str = ""
    expected_control_type: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActionDto":
        return cls(
            name=_str(data, "name"),
            type=_str(data, "type"),
            id=_str(data, "id"),
            expected_control_type=_str(data, "expectedControlType"),
        )


@dataclass
class ActionMapDto:
    """A decoded action map.

    Bindings live at map level and point back to their action by name.
    """
    name: str = ""
    id: str = ""
    actions: List[ActionDto] = field(default_factory=list)
    bindings: List[BindingDto] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActionMapDto":
        actions: List[ActionDto] = []
        bindings = [BindingDto.from_dict(b) for b in _dicts(data, "bindings")]
        for action_data in _dicts(data, "actions"):
            action = ActionDto.from_dict(action_data)
            actions.append(action)
            # Export documents nest bindings under their action
            for binding_data in _dicts(action_data, "bindings"):
                bindings.append(BindingDto.from_dict(binding_data, default_action=action.name))
        return cls(
            name=_str(data, "name"),
            id=_str(data, "id"),
            actions=actions,
            bindings=bindings,
        )

    def bindings_for(self, action_name: str) -> List[BindingDto]:
        return [b for b in self.bindings if b.action == action_name]


@dataclass
class InputActionAssetDto:
    """A decoded asset.

    ``maps`` is None when the document could not be parsed; display code
    renders that as "no data".
    """
    name: str = ""
    maps: Optional[List[ActionMapDto]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InputActionAssetDto":
        maps = None
        if isinstance(data.get("maps"), list):
            maps = [ActionMapDto.from_dict(m) for m in _dicts(data, "maps")]
        return cls(name=_str(data, "name"), maps=maps)

    @property
    def has_data(self) -> bool:
        return self.maps is not None


@dataclass
class DocumentItem:
    """One ``{source, data}`` entry of an export document."""
    source: str
    data: InputActionAssetDto

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DocumentItem":
        asset_data = data.get("data")
        if isinstance(asset_data, dict):
            asset = InputActionAssetDto.from_dict(asset_data)
        else:
            asset = InputActionAssetDto()
        return cls(source=_str(data, "source"), data=asset)
