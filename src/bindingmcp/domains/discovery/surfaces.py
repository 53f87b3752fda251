"""Discovery surfaces.

Each surface is one independent strategy for finding components of a kind
in the host. Surfaces only report ``(Provenance, candidate)`` pairs; merging
and de-duplication happen centrally in the collector.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Protocol, Sequence, Tuple

from bindingmcp.domains.discovery.host import Container, HostRuntime, owner_name
from bindingmcp.domains.discovery.value_objects import Provenance

logger = logging.getLogger(__name__)

Candidate = Tuple[Provenance, Any]

DEFAULT_MAX_DEPTH = 10
DEFAULT_ROOT_MARKERS = ("ui", "canvas")


class DiscoverySurface(Protocol):
    """A strategy returning candidates of one kind."""

    name: str

    def scan(self, host: HostRuntime, kind: type) -> List[Candidate]:
        ...


class RegistryScan:
    """Live, active instances as reported by the host registry."""

    name = "registry"

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def scan(self, host: HostRuntime, kind: type) -> List[Candidate]:
        found = list(host.find_objects(kind, include_inactive=False))
        self.log.info(f"Found {len(found)} active {kind.__name__} components.")
        return [
            (Provenance.registry(kind.__name__, owner_name(component)), component)
            for component in found
        ]


class ExhaustiveScan:
    """Every instance, inactive ones included, restricted to scene residents.

    Template (prefab) definitions are reported by the host but are not part
    of any loaded scene and are skipped.
    """

    name = "exhaustive"

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def scan(self, host: HostRuntime, kind: type) -> List[Candidate]:
        everything = list(host.find_objects(kind, include_inactive=True))
        self.log.info(
            f"Found {len(everything)} total {kind.__name__} components (including inactive)."
        )
        return [
            (Provenance.exhaustive(kind.__name__, owner_name(component)), component)
            for component in everything
            if host.is_scene_resident(component)
        ]


class HierarchicalScan:
    """Depth-bounded walk below every UI root.

    UI roots are all canvas containers plus every active container whose
    name contains one of ``root_markers`` (case-insensitive) and that carries
    no canvas itself. Depth is counted from each root independently: the
    root is depth 0 and nothing deeper than ``max_depth`` is visited. The
    hierarchy is assumed acyclic; the depth bound is the only termination
    guard.

    A failure while walking one root is logged with the kind name and the
    remaining roots are still walked.
    """

    name = "hierarchical"

    def __init__(
        self,
        max_depth: int = DEFAULT_MAX_DEPTH,
        root_markers: Sequence[str] = DEFAULT_ROOT_MARKERS,
        log: Optional[logging.Logger] = None,
    ):
        self.max_depth = max_depth
        self.root_markers = tuple(marker.lower() for marker in root_markers)
        self.log = log or logger

    def ui_roots(self, host: HostRuntime) -> List[Container]:
        canvas_kind = host.canvas_kind
        roots: List[Container] = []
        for canvas in host.find_objects(canvas_kind, include_inactive=False):
            container = getattr(canvas, "container", None)
            if container is not None:
                roots.append(container)
        for container in host.all_containers():
            lowered = (container.name or "").lower()
            if not any(marker in lowered for marker in self.root_markers):
                continue
            # Canvases were already queued above
            if container.get_component(canvas_kind) is None:
                roots.append(container)
        return roots

    def scan(self, host: HostRuntime, kind: type) -> List[Candidate]:
        candidates: List[Candidate] = []
        try:
            roots = self.ui_roots(host)
        except Exception as e:
            self.log.error(f"Error during UI hierarchy search for {kind.__name__}: {e}")
            return candidates

        for root in roots:
            found: List[Any] = []
            try:
                self._walk(root, kind, 0, found)
            except Exception as e:
                self.log.error(
                    f"Error during UI hierarchy search for {kind.__name__} "
                    f"under {getattr(root, 'name', root)!r}: {e}"
                )
            for component in found:
                candidates.append(
                    (
                        Provenance.hierarchical(kind.__name__, owner_name(component), root.name),
                        component,
                    )
                )
        return candidates

    def _walk(self, container: Container, kind: type, depth: int, found: List[Any]) -> None:
        if depth > self.max_depth:
            return
        component = container.get_component(kind)
        if component is not None:
            found.append(component)
        for child in container.children:
            self._walk(child, kind, depth + 1, found)


def default_surfaces(
    max_depth: int = DEFAULT_MAX_DEPTH,
    root_markers: Sequence[str] = DEFAULT_ROOT_MARKERS,
    log: Optional[logging.Logger] = None,
) -> List[DiscoverySurface]:
    """Registry, exhaustive and hierarchical surfaces, in that order."""
    return [
        RegistryScan(log=log),
        ExhaustiveScan(log=log),
        HierarchicalScan(max_depth=max_depth, root_markers=root_markers, log=log),
    ]
