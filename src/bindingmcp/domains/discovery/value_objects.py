"""Value Objects for the Discovery Context."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from bindingmcp.domains.bindings import InputActionAsset


class ProvenanceKind(Enum):
    """The discovery surface that found a candidate."""
    REGISTRY = "registry"
    EXHAUSTIVE_SCAN = "exhaustive_scan"
    HIERARCHICAL = "hierarchical"


@dataclass(frozen=True)
class Provenance:
    """Where and how a candidate was found.

    Kept structured inside the pipeline; ``format()`` is only called at the
    log and document boundary.
    """
    kind: ProvenanceKind
    container_kind: str
    owner_name: str
    root_name: Optional[str] = None

    @classmethod
    def registry(cls, container_kind: str, owner_name: str) -> "Provenance":
        return cls(ProvenanceKind.REGISTRY, container_kind, owner_name)

    @classmethod
    def exhaustive(cls, container_kind: str, owner_name: str) -> "Provenance":
        return cls(ProvenanceKind.EXHAUSTIVE_SCAN, container_kind, owner_name)

    @classmethod
    def hierarchical(cls, container_kind: str, owner_name: str, root_name: str) -> "Provenance":
        return cls(ProvenanceKind.HIERARCHICAL, container_kind, owner_name, root_name)

    def format(self) -> str:
        target = f"{self.container_kind} on {self.owner_name}"
        if self.kind == ProvenanceKind.REGISTRY:
            return f"registry: {target}"
        if self.kind == ProvenanceKind.EXHAUSTIVE_SCAN:
            return f"exhaustive scan: {target}"
        return f"hierarchy under {self.root_name}: {target}"

    def __str__(self) -> str:
        return self.format()


class BinderCategory(Enum):
    """How the collector files a found component.

    MOMENTARY and PERSISTENT components are binders (button / toggle
    controls). OWNER components only contribute assets.
    """
    MOMENTARY = "button"
    PERSISTENT = "toggle"
    OWNER = "owner"


@dataclass(frozen=True)
class BinderKind:
    """A component type the collector searches for."""
    type: type
    category: BinderCategory

    @property
    def name(self) -> str:
        return self.type.__name__


@dataclass(frozen=True)
class FieldInfo:
    """One reflected field: ``(name, declared kind, value)``."""
    name: str
    declared_kind: str
    value: Any


@dataclass(frozen=True)
class LocatedAsset:
    """Result of a successful locate: the asset and how it is held."""
    owner_description: str
    asset: "InputActionAsset"


@dataclass(frozen=True)
class DiscoveryRecord:
    """An asset paired with the provenance of its first finding.

    Produced fresh on every collection pass and never persisted.
    """
    asset: "InputActionAsset"
    provenance: Provenance
    owner_description: str = ""

    @property
    def source(self) -> str:
        """Human-readable provenance written to export documents."""
        return self.provenance.format()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "asset": self.asset.name,
            "source": self.source,
            "owner_description": self.owner_description,
            "surface": self.provenance.kind.value,
            "container_kind": self.provenance.container_kind,
            "owner": self.provenance.owner_name,
            "root": self.provenance.root_name,
            "maps": len(self.asset.maps),
            "bindings": self.asset.binding_count,
        }


class LocatorInspectionError(Exception):
    """Reflective inspection of one candidate failed.

    Raised by the entity locator, recovered per candidate by the collector.
    """

    def __init__(self, owner: str, field_name: str, cause: BaseException):
        self.owner = owner
        self.field_name = field_name
        self.cause = cause
        super().__init__(
            f"Could not inspect field '{field_name}' on {owner}: "
            f"{type(cause).__name__}: {cause}"
        )
