"""Bindings Domain - Bounded Context for the canonical binding model.

The model is hierarchical: asset -> action map -> action -> binding.

Example usage:
    from bindingmcp.domains.bindings import ActionType, InputActionAsset

    asset = InputActionAsset(name="Controls")
    ui = asset.add_map("UI")
    next_round = ui.add_action("NextRound", ActionType.BUTTON)
    next_round.add_binding("<Keyboard>/space", groups="Keyboard&Mouse")
    next_round.add_binding("<Gamepad>/buttonSouth", groups="Gamepad")

    assert asset.find_action("UI/NextRound") is next_round
"""

# Value Objects
from .value_objects import (
    ActionType,
    DeviceGroup,
    new_binding_id,
)

# Entities
from .entities import (
    ActionMap,
    Binding,
    InputAction,
)

# Aggregates
from .aggregates import (
    InputActionAsset,
    InputActionReference,
)

__all__ = [
    # Value Objects
    "ActionType",
    "DeviceGroup",
    "new_binding_id",
    # Entities
    "ActionMap",
    "Binding",
    "InputAction",
    # Aggregates
    "InputActionAsset",
    "InputActionReference",
]
