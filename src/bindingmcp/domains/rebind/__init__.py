"""Rebind Domain - Bounded Context for runtime binding overrides.

Example usage:
    from bindingmcp.domains.rebind import BindingOverride, RebindApplicator

    applicator = RebindApplicator()
    event = applicator.apply_override(
        asset,
        BindingOverride("UI/NextRound", 0, "<Keyboard>/k", "hold(duration=1.0)"),
    )
"""

from .value_objects import BindingOverride
from .events import RebindApplied
from .services import RebindApplicator

__all__ = [
    "BindingOverride",
    "RebindApplied",
    "RebindApplicator",
]
