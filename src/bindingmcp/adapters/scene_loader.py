"""Scene description loader.

Builds assets and a SceneGraphHost from a JSON scene description:

    {
      "assets": [
        {"name": "GameControls", "maps": [
          {"name": "UI", "actions": [
            {"name": "Next Round", "type": "Button",
             "bindings": [
               {"path": "<Keyboard>/n", "groups": "Keyboard&Mouse"},
               {"composite": "2DVector", "groups": "Gamepad",
                "parts": {"up": "<Gamepad>/dpad/up"}}
             ]}
          ]}
        ]}
      ],
      "scenes": [
        {"name": "GameScene", "roots": [
          {"name": "MainUI", "components": [{"type": "Canvas"}],
           "children": [
             {"name": "Next Round",
              "components": [
                {"type": "Button"},
                {"type": "ButtonActionBinder", "action": "GameControls/UI/Next Round"}
              ]}
           ]}
        ]}
      ],
      "templates": [ ...nodes outside any scene... ]
    }

Action references are written as ``Asset/Map/Action``; ``PlayerInput``
components name their asset with ``"actions": "Asset"``. A button binder
without an explicit control picks up the ``Button`` on its own node.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from bindingmcp.adapters.scene_graph import (
    COMPONENT_TYPES,
    Button,
    ButtonActionBinder,
    Component,
    PlayerInput,
    SceneGraphHost,
    SceneNode,
    Toggle,
    ToggleActionBinder,
)
from bindingmcp.domains.bindings import (
    ActionType,
    InputActionAsset,
    InputActionReference,
)

logger = logging.getLogger(__name__)


class SceneLoadError(Exception):
    """Raised when a scene description cannot be turned into a host."""


def build_asset(data: Dict[str, Any]) -> InputActionAsset:
    """Create an asset from its description."""
    name = data.get("name")
    if not name:
        raise SceneLoadError("Asset without a name")
    asset = InputActionAsset(name=name)
    for map_data in data.get("maps") or []:
        map_name = map_data.get("name")
        if not map_name:
            raise SceneLoadError(f"Action map without a name in asset '{name}'")
        action_map = asset.add_map(map_name, id=map_data.get("id"))
        for action_data in map_data.get("actions") or []:
            try:
                action_type = ActionType.from_string(action_data.get("type") or "Button")
            except ValueError as e:
                raise SceneLoadError(str(e)) from e
            action = action_map.add_action(
                action_data.get("name", ""),
                type=action_type,
                expected_control_type=action_data.get("expectedControlType", ""),
            )
            if action_data.get("id"):
                action.id = action_data["id"]
            for binding_data in action_data.get("bindings") or []:
                if "composite" in binding_data:
                    action.add_composite(
                        binding_data["composite"],
                        list((binding_data.get("parts") or {}).items()),
                        groups=binding_data.get("groups", ""),
                    )
                else:
                    action.add_binding(
                        binding_data.get("path", ""),
                        groups=binding_data.get("groups", ""),
                        interactions=binding_data.get("interactions", ""),
                        processors=binding_data.get("processors", ""),
                    )
    return asset


class SceneLoader:
    """Turns a scene description into a populated SceneGraphHost.

    Example:
        host = SceneLoader().load_file("scenes/game.json")
        collector = BindingCollector(host)
    """

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def load_file(self, path: Union[str, Path]) -> SceneGraphHost:
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise SceneLoadError(f"Cannot read scene file {path}: {e}") from e
        return self.loads(text)

    def loads(self, text: str) -> SceneGraphHost:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise SceneLoadError(f"Invalid scene JSON: {e}") from e
        return self.build(data)

    def build(self, data: Dict[str, Any]) -> SceneGraphHost:
        if not isinstance(data, dict):
            raise SceneLoadError("Scene description must be a JSON object")

        host = SceneGraphHost()
        for asset_data in data.get("assets") or []:
            asset = build_asset(asset_data)
            if asset.name in host.assets:
                raise SceneLoadError(f"Duplicate asset name '{asset.name}'")
            host.assets[asset.name] = asset

        for scene_data in data.get("scenes") or []:
            scene_name = scene_data.get("name") or "SampleScene"
            for node_data in scene_data.get("roots") or []:
                root = host.add_root(
                    node_data.get("name", ""),
                    scene=scene_name,
                    active=node_data.get("active", True),
                )
                self._populate(host, root, node_data)

        for node_data in data.get("templates") or []:
            template = host.add_template(node_data.get("name", ""))
            template.active_self = node_data.get("active", True)
            self._populate(host, template, node_data)

        self.log.info(
            f"Loaded scene description: {len(host.assets)} assets, "
            f"{len(host.roots)} roots, {len(host.templates)} templates"
        )
        return host

    def _populate(self, host: SceneGraphHost, node: SceneNode, data: Dict[str, Any]) -> None:
        for component_data in data.get("components") or []:
            node.add_component(self._component(host, node, component_data))

        for binder in node.components:
            if isinstance(binder, ButtonActionBinder) and binder.button is None:
                binder.button = node.get_component(Button)

        for child_data in data.get("children") or []:
            child = node.child(child_data.get("name", ""), active=child_data.get("active", True))
            self._populate(host, child, child_data)

    def _component(self, host: SceneGraphHost, node: SceneNode, data: Dict[str, Any]) -> Component:
        type_name = data.get("type")
        kind = COMPONENT_TYPES.get(type_name)
        if kind is None:
            raise SceneLoadError(
                f"Unknown component type '{type_name}' on {node.path}. "
                f"Valid types: {sorted(COMPONENT_TYPES)}"
            )
        if kind in (ButtonActionBinder, ToggleActionBinder):
            return kind(action=self._reference(host, data.get("action"), node))
        if kind is PlayerInput:
            return PlayerInput(actions=self._asset(host, data.get("actions"), node))
        if kind is Toggle:
            return Toggle(is_on=bool(data.get("isOn", False)))
        return kind()

    @staticmethod
    def _asset(host: SceneGraphHost, name: Optional[str], node: SceneNode) -> Optional[InputActionAsset]:
        if not name:
            return None
        asset = host.assets.get(name)
        if asset is None:
            raise SceneLoadError(f"Unknown asset '{name}' referenced on {node.path}")
        return asset

    def _reference(
        self, host: SceneGraphHost, target: Optional[str], node: SceneNode
    ) -> Optional[InputActionReference]:
        if not target:
            return None
        asset_name, _, action_path = target.partition("/")
        asset = self._asset(host, asset_name, node)
        action = asset.find_action(action_path) if asset is not None and action_path else None
        if action is None:
            raise SceneLoadError(f"Unknown action '{target}' referenced on {node.path}")
        return InputActionReference.to(action)


def load_scene(source: Union[str, Path, Dict[str, Any]]) -> SceneGraphHost:
    """Build a host from a scene file path or an already parsed description."""
    loader = SceneLoader()
    if isinstance(source, dict):
        return loader.build(source)
    return loader.load_file(source)

