"""Host collaborator interface for the Discovery Context.

The discovery pipeline does not own the object graph it walks. The host
(the running application, or an in-memory scene for tests and offline
inspection) provides these capabilities only:

- enumerate live instances of a component kind
- enumerate all instances including inactive ones and tell scene-resident
  instances from template definitions
- enumerate containers and walk parent -> children
- read fields off components (done by reflection in the locator)
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, runtime_checkable


@runtime_checkable
class Container(Protocol):
    """A node of the host hierarchy carrying components."""

    name: str

    @property
    def children(self) -> Sequence["Container"]:
        ...

    @property
    def components(self) -> Sequence[Any]:
        ...

    @property
    def active_in_hierarchy(self) -> bool:
        ...

    def get_component(self, kind: type) -> Optional[Any]:
        """First component that is an instance of ``kind``, or None."""
        ...


@runtime_checkable
class HostRuntime(Protocol):
    """Capabilities the discovery pipeline needs from the host."""

    @property
    def canvas_kind(self) -> type:
        """Component type marking a UI canvas root."""
        ...

    def find_objects(self, kind: type, include_inactive: bool = False) -> Sequence[Any]:
        """Components of ``kind``.

        Without ``include_inactive`` only components on active, scene
        resident containers are returned. With it, every instance is
        returned, template definitions included.
        """
        ...

    def is_scene_resident(self, component: Any) -> bool:
        """True if the component lives in a loaded scene (not a template)."""
        ...

    def all_containers(self) -> Sequence[Container]:
        """Every active, scene-resident container, at any depth."""
        ...

    def find_container(self, path: str) -> Optional[Container]:
        """Container at a ``Root/Child/...`` path, or None."""
        ...


def owner_name(component: Any) -> str:
    """Name of the container a component sits on, for logs and provenance."""
    container = getattr(component, "container", None)
    name = getattr(container, "name", None)
    if name:
        return name
    return getattr(component, "name", None) or type(component).__name__


def is_active(component: Any) -> bool:
    container = getattr(component, "container", None)
    return bool(getattr(container, "active_in_hierarchy", False))
