"""Pytest fixtures for domain tests.

These fixtures build small in-memory scenes for the bounded contexts:
- Bindings Context
- Codec Context
- Discovery Context
- Rebind Context
- Export Context
"""

from __future__ import annotations

from datetime import datetime

import pytest

from bindingmcp.adapters import (
    Button,
    ButtonActionBinder,
    Canvas,
    PlayerInput,
    SceneGraphHost,
    Toggle,
    ToggleActionBinder,
)
from bindingmcp.domains.bindings import (
    ActionType,
    InputActionAsset,
    InputActionReference,
)


# =============================================================================
# Bindings Domain Fixtures
# =============================================================================


@pytest.fixture
def game_asset() -> InputActionAsset:
    """Asset with one UI map: two buttons and a composite movement action."""
    asset = InputActionAsset(name="GameControls")
    ui = asset.add_map("UI", id="map-ui")

    next_round = ui.add_action("Next Round")
    next_round.add_binding("<Keyboard>/space", groups="Keyboard&Mouse")
    next_round.add_binding("<Gamepad>/buttonSouth", groups="Gamepad")

    sort = ui.add_action("Auto Sort")
    sort.add_binding("<Keyboard>/a", groups="Keyboard&Mouse")

    move = ui.add_action("Move", type=ActionType.VALUE, expected_control_type="Vector2")
    move.add_composite(
        "2DVector",
        [("up", "<Keyboard>/w"), ("down", "<Keyboard>/s")],
        groups="Keyboard&Mouse",
    )
    return asset


@pytest.fixture
def next_round_ref(game_asset: InputActionAsset) -> InputActionReference:
    return InputActionReference.to(game_asset.find_action("UI/Next Round"))


@pytest.fixture
def auto_sort_ref(game_asset: InputActionAsset) -> InputActionReference:
    return InputActionReference.to(game_asset.find_action("UI/Auto Sort"))


# =============================================================================
# Discovery Domain Fixtures
# =============================================================================


@pytest.fixture
def scene_host(
    game_asset: InputActionAsset,
    next_round_ref: InputActionReference,
    auto_sort_ref: InputActionReference,
) -> SceneGraphHost:
    """MainUI canvas with a "Next Round" button and an "Auto Sort" toggle."""
    host = SceneGraphHost()
    host.assets[game_asset.name] = game_asset

    ui = host.add_root("MainUI", scene="GameScene")
    ui.add_component(Canvas())

    button_node = ui.child("Next Round")
    button = button_node.add_component(Button())
    button_node.add_component(ButtonActionBinder(action=next_round_ref, button=button))

    toggle_node = ui.child("Auto Sort")
    toggle_node.add_component(Toggle())
    toggle_node.add_component(ToggleActionBinder(action=auto_sort_ref))
    return host


@pytest.fixture
def player_host(game_asset: InputActionAsset) -> SceneGraphHost:
    """A single scene object owning the asset directly."""
    host = SceneGraphHost()
    player = host.add_root("Player", scene="GameScene")
    player.add_component(PlayerInput(actions=game_asset))
    return host


# =============================================================================
# Export Domain Fixtures
# =============================================================================


@pytest.fixture
def fixed_clock():
    """Clock frozen at 2024-01-02 03:04:05."""
    return lambda: datetime(2024, 1, 2, 3, 4, 5)
