"""Value Objects for the Bindings Context.

Value objects are immutable domain primitives identified by their values.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import List


class ActionType(Enum):
    """Behavioral type of an input action.

    The enum value is the name written to binding documents.
    """
    BUTTON = "Button"
    VALUE = "Value"
    PASS_THROUGH = "PassThrough"

    @classmethod
    def from_string(cls, value: str) -> "ActionType":
        """Create an ActionType from its document name.

        Args:
            value: The type name (case-insensitive, e.g. "Button")

        Returns:
            The matching ActionType

        Raises:
            ValueError: If the type name is not recognized
        """
        normalized = value.strip().lower()
        for action_type in cls:
            if action_type.value.lower() == normalized:
                return action_type
        raise ValueError(
            f"Unknown action type: '{value}'. "
            f"Valid types: {[t.value for t in cls]}"
        )

    def __str__(self) -> str:
        return self.value


class DeviceGroup:
    """Well-known device group tags used in binding `groups` fields."""

    KEYBOARD_MOUSE = "Keyboard&Mouse"
    KEYBOARD = "Keyboard"
    GAMEPAD = "Gamepad"
    TOUCH = "Touch"
    JOYSTICK = "Joystick"

    # Separators accepted between tags in a groups field
    SEPARATORS = (";", ",")

    @classmethod
    def split(cls, groups: str) -> List[str]:
        """Split a groups field into its individual tags."""
        if not groups:
            return []
        text = groups
        for separator in cls.SEPARATORS[1:]:
            text = text.replace(separator, cls.SEPARATORS[0])
        return [tag.strip() for tag in text.split(cls.SEPARATORS[0]) if tag.strip()]


def new_binding_id() -> str:
    """Generate a stable identifier for a map, action or binding."""
    return str(uuid.uuid4())
