"""Display lookups over decoded (or live) bindings.

"The keyboard binding of action A" is the first binding, in declaration
order, that belongs to A, is not a composite head, and whose groups field
contains the requested group text. The match is a substring match, so a
binding tagged ``Keyboard&Mouse;Gamepad`` answers both a "Keyboard" and a
"Gamepad" query.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, TypeVar

from bindingmcp.domains.codec.decoder import decode_asset
from bindingmcp.domains.codec.models import ActionMapDto, InputActionAssetDto

logger = logging.getLogger(__name__)

NOT_FOUND = "None"
DEVICE_PREFIXES = ("<Keyboard>/", "<Gamepad>/")

KEYBOARD_GROUP = "Keyboard&Mouse"
GAMEPAD_GROUP = "Gamepad"

B = TypeVar("B")


def strip_device_prefix(path: str) -> str:
    """Remove a leading ``<Keyboard>/`` or ``<Gamepad>/`` from a path."""
    for prefix in DEVICE_PREFIXES:
        if path.startswith(prefix):
            return path[len(prefix):]
    return path


def resolve_binding(bindings: Iterable[B], action_name: str, group: str) -> Optional[B]:
    """First binding of ``action_name`` matching ``group``, or None.

    Works on anything exposing ``action``, ``is_composite`` and ``groups``
    attributes: live Binding entities and decoded BindingDto alike.
    """
    if not group:
        return None
    for binding in bindings:
        if binding.action != action_name or binding.is_composite:
            continue
        if group in (binding.groups or ""):
            return binding
    return None


def find_binding_display(bindings: Iterable[Any], action_name: str, group: str) -> str:
    """Display text for the binding of ``action_name`` in ``group``.

    Returns the path without its device prefix, or ``"None"``.
    """
    binding = resolve_binding(bindings, action_name, group)
    if binding is None:
        return NOT_FOUND
    return strip_device_prefix(binding.path or "")


@dataclass(frozen=True)
class BindingRow:
    """One row of the action -> (keyboard, gamepad) table."""
    map_name: str
    action_name: str
    keyboard: str
    gamepad: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "map": self.map_name,
            "action": self.action_name,
            "keyboard": self.keyboard,
            "gamepad": self.gamepad,
        }


class BindingTableReader:
    """Reads a limited-schema asset document into display rows.

    Only ``Button`` actions are listed. A missing or unparseable document
    gives ``has_data == False`` and no rows.

    Example:
        reader = BindingTableReader(sentinel_path.read_text(encoding="utf-8"))
        for row in reader.rows():
            print(row.action_name, row.keyboard, row.gamepad)
    """

    EMPTY_MESSAGE = "No action maps found or JSON could not be parsed."

    def __init__(
        self,
        json_content: Optional[str],
        keyboard_group: str = KEYBOARD_GROUP,
        gamepad_group: str = GAMEPAD_GROUP,
        log: Optional[logging.Logger] = None,
        asset: Optional[InputActionAssetDto] = None,
    ):
        self.keyboard_group = keyboard_group
        self.gamepad_group = gamepad_group
        if asset is None:
            asset = decode_asset(json_content, log=log or logger)
        self._asset: InputActionAssetDto = asset

    @classmethod
    def from_asset(cls, asset: InputActionAssetDto, **kwargs: Any) -> "BindingTableReader":
        """Reader over an already decoded asset."""
        return cls(None, asset=asset, **kwargs)

    @property
    def asset(self) -> InputActionAssetDto:
        return self._asset

    @property
    def has_data(self) -> bool:
        return self._asset.maps is not None

    def lookup(self, action_map: ActionMapDto, action_name: str, group: str) -> str:
        return find_binding_display(action_map.bindings, action_name, group)

    def rows(self) -> List[BindingRow]:
        rows: List[BindingRow] = []
        for action_map in self._asset.maps or []:
            for action in action_map.actions:
                if action.type != "Button":
                    continue
                rows.append(
                    BindingRow(
                        map_name=action_map.name,
                        action_name=action.name,
                        keyboard=self.lookup(action_map, action.name, self.keyboard_group),
                        gamepad=self.lookup(action_map, action.name, self.gamepad_group),
                    )
                )
        return rows

    def render_text(self) -> str:
        """Plain-text table, one map section at a time."""
        if not self.has_data:
            return self.EMPTY_MESSAGE
        lines = [f"{'Action':<20} {'Keyboard':<20} Gamepad"]
        current_map = None
        for row in self.rows():
            if row.map_name != current_map:
                current_map = row.map_name
                lines.append(f"--- {current_map} Map ---")
            lines.append(f"{row.action_name:<20} {row.keyboard:<20} {row.gamepad}")
        return "\n".join(lines)
