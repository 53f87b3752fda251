"""In-memory scene graph host.

Implements the discovery HostRuntime protocol over plain Python objects:
named nodes arranged in scenes, each carrying components. Nodes that are
not attached to any scene are template definitions (prefabs); they are
visible to an inactive-inclusive enumeration but are not scene residents.

Used for offline inspection of scene descriptions (see scene_loader) and as
the host in tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from bindingmcp.domains.bindings import InputActionAsset, InputActionReference
from bindingmcp.domains.discovery import BinderCategory, BinderKind


class SceneNode:
    """A named container in the hierarchy."""

    def __init__(self, name: str, active: bool = True, scene: Optional[str] = None):
        self.name = name
        self.active_self = active
        self._scene = scene
        self.parent: Optional[SceneNode] = None
        self._children: List[SceneNode] = []
        self._components: List[Component] = []

    @property
    def children(self) -> Tuple["SceneNode", ...]:
        return tuple(self._children)

    @property
    def components(self) -> Tuple["Component", ...]:
        return tuple(self._components)

    @property
    def root(self) -> "SceneNode":
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    @property
    def scene(self) -> Optional[str]:
        """Scene of the root node; None for template definitions."""
        return self.root._scene

    @property
    def active_in_hierarchy(self) -> bool:
        if not self.active_self:
            return False
        return self.parent is None or self.parent.active_in_hierarchy

    @property
    def path(self) -> str:
        names = []
        node: Optional[SceneNode] = self
        while node is not None:
            names.append(node.name)
            node = node.parent
        return "/".join(reversed(names))

    def add_child(self, child: "SceneNode") -> "SceneNode":
        child.parent = self
        self._children.append(child)
        return child

    def child(self, name: str, active: bool = True) -> "SceneNode":
        """Create and attach a child node."""
        return self.add_child(SceneNode(name, active=active))

    def add_component(self, component: "Component") -> "Component":
        component.container = self
        self._components.append(component)
        return component

    def get_component(self, kind: type) -> Optional[Any]:
        for component in self._components:
            if isinstance(component, kind):
                return component
        return None

    def iter_tree(self) -> Iterator["SceneNode"]:
        yield self
        for child in self._children:
            yield from child.iter_tree()

    def __repr__(self) -> str:
        return f"SceneNode({self.path!r}, active={self.active_self})"


@dataclass(eq=False)
class Component:
    """Base for everything attached to a node."""
    container: Optional[SceneNode] = field(default=None, repr=False)

    @property
    def name(self) -> str:
        return self.container.name if self.container is not None else type(self).__name__


@dataclass(eq=False)
class Canvas(Component):
    """Marks a UI canvas root."""


@dataclass(eq=False)
class Button(Component):
    """A momentary UI control."""


@dataclass(eq=False)
class Toggle(Component):
    """A persistent on/off UI control."""
    is_on: bool = False


@dataclass(eq=False)
class ButtonActionBinder(Component):
    """Triggers a button when its action is performed."""
    action: Optional[InputActionReference] = None
    button: Optional[Button] = None

    @property
    def control_name(self) -> Optional[str]:
        return self.button.name if self.button is not None else None


@dataclass(eq=False)
class ToggleActionBinder(Component):
    """Flips the sibling toggle when its action is performed."""
    action: Optional[InputActionReference] = None

    @property
    def control_name(self) -> Optional[str]:
        if self.container is None:
            return None
        toggle = self.container.get_component(Toggle)
        return toggle.name if toggle is not None else None


@dataclass(eq=False)
class PlayerInput(Component):
    """Owns an asset directly."""
    actions: Optional[InputActionAsset] = None


DEFAULT_BINDER_KINDS: Tuple[BinderKind, ...] = (
    BinderKind(PlayerInput, BinderCategory.OWNER),
    BinderKind(ButtonActionBinder, BinderCategory.MOMENTARY),
    BinderKind(ToggleActionBinder, BinderCategory.PERSISTENT),
)

COMPONENT_TYPES: Dict[str, type] = {
    cls.__name__: cls
    for cls in (Canvas, Button, Toggle, ButtonActionBinder, ToggleActionBinder, PlayerInput)
}


class SceneGraphHost:
    """HostRuntime over in-memory scenes and templates.

    Example:
        host = SceneGraphHost()
        ui = host.add_root("MainUI", scene="GameScene")
        ui.add_component(Canvas())
        button = ui.child("Next Round")
        binder = button.add_component(ButtonActionBinder(action=ref))
    """

    canvas_kind = Canvas

    def __init__(
        self,
        roots: Optional[Sequence[SceneNode]] = None,
        templates: Optional[Sequence[SceneNode]] = None,
        binder_kinds: Sequence[BinderKind] = DEFAULT_BINDER_KINDS,
    ):
        self.binder_kinds = tuple(binder_kinds)
        self._roots: List[SceneNode] = list(roots or [])
        self._templates: List[SceneNode] = list(templates or [])
        self.assets: Dict[str, InputActionAsset] = {}

    def add_root(self, name: str, scene: str = "SampleScene", active: bool = True) -> SceneNode:
        node = SceneNode(name, active=active, scene=scene)
        self._roots.append(node)
        return node

    def add_template(self, name: str) -> SceneNode:
        node = SceneNode(name, active=True, scene=None)
        self._templates.append(node)
        return node

    @property
    def roots(self) -> Tuple[SceneNode, ...]:
        return tuple(self._roots)

    @property
    def templates(self) -> Tuple[SceneNode, ...]:
        return tuple(self._templates)

    def _scene_nodes(self) -> Iterator[SceneNode]:
        for root in self._roots:
            yield from root.iter_tree()

    def _all_nodes(self) -> Iterator[SceneNode]:
        yield from self._scene_nodes()
        for template in self._templates:
            yield from template.iter_tree()

    def find_objects(self, kind: type, include_inactive: bool = False) -> List[Any]:
        nodes = self._all_nodes() if include_inactive else self._scene_nodes()
        found: List[Any] = []
        for node in nodes:
            if not include_inactive and not node.active_in_hierarchy:
                continue
            found.extend(c for c in node.components if isinstance(c, kind))
        return found

    def is_scene_resident(self, component: Any) -> bool:
        container = getattr(component, "container", None)
        if container is None:
            return False
        return bool(container.scene)

    def all_containers(self) -> List[SceneNode]:
        return [node for node in self._scene_nodes() if node.active_in_hierarchy]

    def find_container(self, path: str) -> Optional[SceneNode]:
        """Active node at ``Root/Child/...``; a single name matches any depth."""
        parts = [part for part in path.strip("/").split("/") if part]
        if not parts:
            return None
        if len(parts) == 1:
            for node in self.all_containers():
                if node.name == parts[0]:
                    return node
            return None
        for root in self._roots:
            if root.name != parts[0] or not root.active_in_hierarchy:
                continue
            node: Optional[SceneNode] = root
            for part in parts[1:]:
                node = next(
                    (c for c in node.children if c.name == part and c.active_in_hierarchy),
                    None,
                )
                if node is None:
                    break
            if node is not None:
                return node
        return None
