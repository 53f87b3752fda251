"""Domain Services for the Rebind Context.

Overrides are applied in place on live actions. Paths are not validated:
an invalid path only fails later, when the host input layer resolves it.
The applicator is not idempotent; callers that need idempotency gate it
themselves.
"""

from __future__ import annotations

import logging
from typing import Optional

from bindingmcp.domains.bindings import InputAction, InputActionAsset
from bindingmcp.domains.rebind.events import RebindApplied
from bindingmcp.domains.rebind.value_objects import BindingOverride

logger = logging.getLogger(__name__)


class RebindApplicator:
    """Applies binding overrides to resolved assets."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def apply(
        self,
        action: InputAction,
        binding_index: int,
        new_path: str,
        interaction_spec: str = "",
    ) -> Optional[RebindApplied]:
        """Overwrite path and interactions of one binding.

        Only the binding at ``binding_index`` changes; its processors, groups
        and flags are kept.

        Args:
            action: The live action
            binding_index: Index into ``action.bindings``
            new_path: Device control path, e.g. ``<Keyboard>/k``
            interaction_spec: Encoded interactions, e.g. ``hold(duration=1.0)``

        Returns:
            The RebindApplied event, or None if the index is out of range
        """
        binding = action.binding_at(binding_index)
        if binding is None:
            self.log.warning(
                f"Binding index {binding_index} not found on action "
                f"'{action.qualified_name}' ({len(action.bindings)} bindings)"
            )
            return None

        event = RebindApplied(
            action=action.qualified_name,
            binding_index=binding_index,
            old_path=binding.path,
            new_path=new_path,
            old_interactions=binding.interactions,
            new_interactions=interaction_spec or "",
        )
        binding.path = new_path
        binding.interactions = interaction_spec or ""
        self.log.info(f"Rebound {event.action}[{binding_index}]: {event.old_path} -> {new_path}")
        return event

    def apply_override(
        self,
        asset: InputActionAsset,
        override: BindingOverride,
    ) -> Optional[RebindApplied]:
        """Resolve ``override.action_path`` on ``asset`` and apply it."""
        action = asset.find_action(override.action_path)
        if action is None:
            self.log.warning(
                f"Action '{override.action_path}' not found in asset '{asset.name}'"
            )
            return None
        return self.apply(
            action,
            override.binding_index,
            override.new_path,
            override.new_interactions,
        )

    def replace_first_binding(
        self,
        asset: InputActionAsset,
        map_name: str,
        action_name: str,
        new_path: str,
        group: str = "",
    ) -> Optional[InputAction]:
        """Erase the action's first binding and add ``new_path`` in ``group``.

        Returns:
            The modified action, or None if the map or action is missing
        """
        action_map = asset.find_action_map(map_name)
        if action_map is None:
            self.log.error(f"{map_name} Action Map not found!")
            return None
        action = action_map.find_action(action_name)
        if action is None:
            self.log.error(f"{action_name} Action not found!")
            return None

        if action.bindings:
            action.erase_binding(0)
        action.add_binding(new_path, groups=group)
        self.log.info(f"{action_name} binding modified to {new_path}")
        return action
