"""Aggregates for the Bindings Context.

The InputActionAsset is the aggregate root: the top-level binding
configuration container holding action maps. Assets are never created by the
discovery pipeline; they are references into containers owned by the host.
Identity is therefore reference equality, not value equality.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from bindingmcp.domains.bindings.entities import ActionMap, Binding, InputAction


@dataclass(eq=False)
class InputActionAsset:
    """Aggregate root for a binding configuration.

    ``eq=False`` keeps the default identity-based ``__eq__``/``__hash__``, so
    two assets with identical content are still two different assets and an
    asset can key a dict.
    """
    name: str
    maps: List[ActionMap] = field(default_factory=list)

    def __post_init__(self) -> None:
        for action_map in self.maps:
            action_map.asset = self

    def add_map(self, name: str, id: Optional[str] = None) -> ActionMap:
        """Create an action map owned by this asset."""
        action_map = ActionMap(name=name) if id is None else ActionMap(name=name, id=id)
        action_map.asset = self
        self.maps.append(action_map)
        return action_map

    def find_action_map(self, name: str) -> Optional[ActionMap]:
        """First map named ``name`` (case-insensitive) or None."""
        lowered = name.lower()
        for action_map in self.maps:
            if action_map.name.lower() == lowered:
                return action_map
        return None

    def find_action(self, action_path: str) -> Optional[InputAction]:
        """Resolve ``"Map/Action"`` or a bare ``"Action"`` name.

        A bare name searches every map in declaration order.
        """
        if "/" in action_path:
            map_name, _, action_name = action_path.partition("/")
            action_map = self.find_action_map(map_name)
            return action_map.find_action(action_name) if action_map else None
        for action_map in self.maps:
            action = action_map.find_action(action_path)
            if action is not None:
                return action
        return None

    def iter_actions(self) -> Iterator[InputAction]:
        """All actions across all maps, in declaration order."""
        for action_map in self.maps:
            yield from action_map.actions

    def iter_bindings(self) -> Iterator[Binding]:
        """All bindings across all maps, in declaration order."""
        for action in self.iter_actions():
            yield from action.bindings

    @property
    def binding_count(self) -> int:
        return sum(1 for _ in self.iter_bindings())

    def __repr__(self) -> str:
        return f"InputActionAsset(name={self.name!r}, maps={len(self.maps)})"


@dataclass(eq=False)
class InputActionReference:
    """A host-side reference to one action inside an asset.

    UI binder components hold references rather than assets. The asset is
    reached with one extra hop: reference -> action -> map -> asset.
    """
    name: str
    action: Optional[InputAction] = None

    @property
    def asset(self) -> Optional[InputActionAsset]:
        if self.action is None or self.action.action_map is None:
            return None
        return self.action.action_map.asset

    @classmethod
    def to(cls, action: InputAction) -> "InputActionReference":
        """Create a reference named after the action it points to."""
        return cls(name=action.qualified_name, action=action)

    def __repr__(self) -> str:
        return f"InputActionReference({self.name!r})"
