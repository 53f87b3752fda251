"""Pytest configuration for the binding-mcp test suite."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import pytest


@pytest.fixture
def scene_description() -> Dict[str, Any]:
    """A small game scene: one asset, a UI canvas, a player and a prefab."""
    return {
        "assets": [
            {
                "name": "GameControls",
                "maps": [
                    {
                        "name": "UI",
                        "id": "map-ui",
                        "actions": [
                            {
                                "name": "Next Round",
                                "type": "Button",
                                "bindings": [
                                    {"path": "<Keyboard>/space", "groups": "Keyboard&Mouse"},
                                    {"path": "<Gamepad>/buttonSouth", "groups": "Gamepad"},
                                ],
                            },
                            {
                                "name": "Auto Sort",
                                "type": "Button",
                                "bindings": [
                                    {"path": "<Keyboard>/a", "groups": "Keyboard&Mouse"},
                                ],
                            },
                            {
                                "name": "Move",
                                "type": "Value",
                                "expectedControlType": "Vector2",
                                "bindings": [
                                    {
                                        "composite": "2DVector",
                                        "groups": "Keyboard&Mouse",
                                        "parts": {"up": "<Keyboard>/w", "down": "<Keyboard>/s"},
                                    }
                                ],
                            },
                        ],
                    }
                ],
            }
        ],
        "scenes": [
            {
                "name": "GameScene",
                "roots": [
                    {
                        "name": "MainUI",
                        "components": [{"type": "Canvas"}],
                        "children": [
                            {
                                "name": "Next Round",
                                "components": [
                                    {"type": "Button"},
                                    {"type": "ButtonActionBinder", "action": "GameControls/UI/Next Round"},
                                ],
                            },
                            {
                                "name": "Auto Sort",
                                "components": [
                                    {"type": "Toggle", "isOn": True},
                                    {"type": "ToggleActionBinder", "action": "GameControls/UI/Auto Sort"},
                                ],
                            },
                            {
                                "name": "Options",
                                "active": False,
                                "children": [
                                    {
                                        "name": "Reset",
                                        "components": [
                                            {"type": "Button"},
                                            {"type": "ButtonActionBinder", "action": "GameControls/UI/Next Round"},
                                        ],
                                    }
                                ],
                            },
                        ],
                    },
                    {
                        "name": "Player",
                        "components": [{"type": "PlayerInput", "actions": "GameControls"}],
                    },
                ],
            }
        ],
        "templates": [
            {
                "name": "BinderPrefab",
                "components": [
                    {"type": "Button"},
                    {"type": "ButtonActionBinder", "action": "GameControls/UI/Next Round"},
                ],
            }
        ],
    }


@pytest.fixture
def scene_file(tmp_path: Path, scene_description: Dict[str, Any]) -> Path:
    """The scene description written to disk."""
    path = tmp_path / "scene.json"
    path.write_text(json.dumps(scene_description), encoding="utf-8")
    return path
