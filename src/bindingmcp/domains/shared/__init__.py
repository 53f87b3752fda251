"""Shared Kernel - Types shared across bounded contexts."""

from bindingmcp.domains.shared.kernel import (
    DEVICE_GROUP_TAGS,
    BinderCategoryName,
    DeviceQuery,
    OptionalCoercedStringList,
    group_for_device,
)

__all__ = [
    "DEVICE_GROUP_TAGS",
    "BinderCategoryName",
    "DeviceQuery",
    "OptionalCoercedStringList",
    "group_for_device",
]
