"""Value Objects for the Rebind Context."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BindingOverride:
    """A single override for one binding of one action.

    ``action_path`` is ``"Map/Action"`` or a bare action name. The override
    is applied destructively and never persisted on its own.
    """
    action_path: str
    binding_index: int
    new_path: str
    new_interactions: str = ""

    def __post_init__(self) -> None:
        if not self.action_path or not self.action_path.strip():
            raise ValueError("Override action path cannot be empty")
