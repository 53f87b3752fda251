"""Host Adapters - Anti-Corruption Layer.

The discovery context talks to its host only through the HostRuntime
protocol. This package provides the in-memory implementation used for
offline inspection of scene descriptions and in tests.

Key Components:
    SceneGraphHost: HostRuntime over in-memory scenes and templates
    SceneNode: A named container carrying components
    SceneLoader: Builds a SceneGraphHost from a JSON scene description

Usage:
    from bindingmcp.adapters import load_scene

    host = load_scene("scenes/game.json")
    collector = BindingCollector(host)
    collector.collect()
"""

from .scene_graph import (
    COMPONENT_TYPES,
    DEFAULT_BINDER_KINDS,
    Button,
    ButtonActionBinder,
    Canvas,
    Component,
    PlayerInput,
    SceneGraphHost,
    SceneNode,
    Toggle,
    ToggleActionBinder,
)
from .scene_loader import SceneLoadError, SceneLoader, build_asset, load_scene

__all__ = [
    # Host
    "SceneGraphHost",
    "SceneNode",
    "DEFAULT_BINDER_KINDS",
    # Components
    "COMPONENT_TYPES",
    "Component",
    "Canvas",
    "Button",
    "Toggle",
    "ButtonActionBinder",
    "ToggleActionBinder",
    "PlayerInput",
    # Loading
    "SceneLoadError",
    "SceneLoader",
    "build_asset",
    "load_scene",
]
