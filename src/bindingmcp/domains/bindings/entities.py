"""Entities for the Bindings Context.

Bindings, actions and action maps have identity and a parent. Each entity is
owned by exactly one parent: a binding by its action, an action by its map,
a map by its asset. Parents are kept as back references so that a resolved
action can always reach the asset that holds it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple

from bindingmcp.domains.bindings.value_objects import (
    ActionType,
    DeviceGroup,
    new_binding_id,
)

if TYPE_CHECKING:
    from bindingmcp.domains.bindings.aggregates import InputActionAsset


@dataclass
class Binding:
    """One concrete device-path mapping for an action.

    A composite binding (``is_composite``) is a container for the part
    bindings that follow it (``is_part_of_composite``). Parts never stand on
    their own when a binding is resolved for display.
    """
    path: str = ""
    interactions: str = ""
    processors: str = ""
    groups: str = ""
    action: str = ""
    is_composite: bool = False
    is_part_of_composite: bool = False
    name: str = ""
    id: str = field(default_factory=new_binding_id)

    @property
    def groups_list(self) -> List[str]:
        """Individual device-group tags of this binding."""
        return DeviceGroup.split(self.groups)

    def matches_group(self, group: str) -> bool:
        """Substring tag match against the raw groups field."""
        return bool(group) and group in (self.groups or "")

    def __repr__(self) -> str:
        flags = ""
        if self.is_composite:
            flags = " composite"
        elif self.is_part_of_composite:
            flags = " part"
        return f"Binding({self.path!r}, groups={self.groups!r}{flags})"


@dataclass
class InputAction:
    """A logical input (e.g. "Sort", "NextRound") and its bindings."""
    name: str
    type: ActionType = ActionType.BUTTON
    expected_control_type: str = ""
    id: str = field(default_factory=new_binding_id)
    bindings: List[Binding] = field(default_factory=list)
    action_map: Optional[ActionMap] = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        for binding in self.bindings:
            binding.action = self.name

    def add_binding(
        self,
        path: str,
        groups: str = "",
        interactions: str = "",
        processors: str = "",
    ) -> Binding:
        """Append a plain binding and return it."""
        binding = Binding(
            path=path,
            groups=groups,
            interactions=interactions,
            processors=processors,
            action=self.name,
        )
        self.bindings.append(binding)
        return binding

    def add_composite(
        self,
        name: str,
        parts: Iterable[Tuple[str, str]],
        groups: str = "",
    ) -> Binding:
        """Append a composite binding followed by its parts.

        Args:
            name: Composite kind, e.g. "2DVector"
            parts: (part name, path) pairs, e.g. ("up", "<Keyboard>/w")
            groups: Device groups applied to every part

        Returns:
            The composite head binding
        """
        head = Binding(path=name, name=name, action=self.name, is_composite=True)
        self.bindings.append(head)
        for part_name, path in parts:
            self.bindings.append(
                Binding(
                    path=path,
                    name=part_name,
                    groups=groups,
                    action=self.name,
                    is_part_of_composite=True,
                )
            )
        return head

    def binding_at(self, index: int) -> Optional[Binding]:
        """Binding at ``index`` or None when out of range."""
        if 0 <= index < len(self.bindings):
            return self.bindings[index]
        return None

    def erase_binding(self, index: int) -> Binding:
        """Remove and return the binding at ``index``.

        Raises:
            IndexError: If the index is out of range
        """
        return self.bindings.pop(index)

    @property
    def qualified_name(self) -> str:
        """``Map/Action`` when attached to a map, else the bare name."""
        if self.action_map is not None:
            return f"{self.action_map.name}/{self.name}"
        return self.name


@dataclass
class ActionMap:
    """Named grouping of actions (e.g. "UI", "Gameplay")."""
    name: str
    id: str = field(default_factory=new_binding_id)
    actions: List[InputAction] = field(default_factory=list)
    asset: Optional[InputActionAsset] = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        for action in self.actions:
            action.action_map = self

    def add_action(
        self,
        name: str,
        type: ActionType = ActionType.BUTTON,
        expected_control_type: str = "",
    ) -> InputAction:
        """Create an action owned by this map."""
        if type == ActionType.BUTTON and not expected_control_type:
            expected_control_type = "Button"
        action = InputAction(
            name=name,
            type=type,
            expected_control_type=expected_control_type,
        )
        action.action_map = self
        self.actions.append(action)
        return action

    def find_action(self, name: str) -> Optional[InputAction]:
        """First action named ``name`` (case-insensitive) or None."""
        lowered = name.lower()
        for action in self.actions:
            if action.name.lower() == lowered:
                return action
        return None

    @property
    def bindings(self) -> List[Binding]:
        """All bindings of the map, flattened in declaration order."""
        return [binding for action in self.actions for binding in action.bindings]
