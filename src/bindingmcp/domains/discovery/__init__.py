"""Discovery Domain - Bounded Context for finding binding assets.

Walks the host's object graph through several independent surfaces,
locates the asset each binder refers to, and merges the findings into one
de-duplicated set with provenance.

Example usage:
    from bindingmcp.adapters.scene_graph import DEFAULT_BINDER_KINDS
    from bindingmcp.domains.discovery import BindingCollector, describe_discovery

    collector = BindingCollector(host, kinds=DEFAULT_BINDER_KINDS)
    for record in collector.collect():
        print(record.source, record.asset.name)

    print(describe_discovery(collector)["binders"])
"""

# Value Objects
from .value_objects import (
    BinderCategory,
    BinderKind,
    DiscoveryRecord,
    FieldInfo,
    LocatedAsset,
    LocatorInspectionError,
    Provenance,
    ProvenanceKind,
)

# Host interface
from .host import (
    Container,
    HostRuntime,
)

# Entity locator
from .locator import (
    BindingExposer,
    EntityLocator,
    FieldInspectable,
    reflect_fields,
)

# Surfaces
from .surfaces import (
    DiscoverySurface,
    ExhaustiveScan,
    HierarchicalScan,
    RegistryScan,
    default_surfaces,
)

# Aggregate
from .collector import (
    BindingCollector,
    describe_discovery,
    merge_first_seen,
)

__all__ = [
    # Value Objects
    "BinderCategory",
    "BinderKind",
    "DiscoveryRecord",
    "FieldInfo",
    "LocatedAsset",
    "LocatorInspectionError",
    "Provenance",
    "ProvenanceKind",
    # Host interface
    "Container",
    "HostRuntime",
    # Entity locator
    "BindingExposer",
    "EntityLocator",
    "FieldInspectable",
    "reflect_fields",
    # Surfaces
    "DiscoverySurface",
    "ExhaustiveScan",
    "HierarchicalScan",
    "RegistryScan",
    "default_surfaces",
    # Aggregate
    "BindingCollector",
    "describe_discovery",
    "merge_first_seen",
]
