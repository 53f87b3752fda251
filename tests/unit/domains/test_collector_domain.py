"""Tests for the Binding Collector aggregate.

This module tests the Discovery Context end to end over an in-memory host:
- Merge by asset identity with first-seen provenance
- Registry, exhaustive and hierarchical surfaces
- Per-candidate and per-surface failure recovery
- Control-name queries and the discovery report
"""

from __future__ import annotations

import logging

import pytest

from bindingmcp.adapters import (
    DEFAULT_BINDER_KINDS,
    Button,
    ButtonActionBinder,
    PlayerInput,
    SceneGraphHost,
    Toggle,
    ToggleActionBinder,
)
from bindingmcp.domains.bindings import InputActionAsset, InputActionReference
from bindingmcp.domains.discovery import (
    BinderCategory,
    BinderKind,
    BindingCollector,
    DiscoveryRecord,
    HierarchicalScan,
    Provenance,
    ProvenanceKind,
    RegistryScan,
    describe_discovery,
    merge_first_seen,
)


def _asset_with_action(name: str, action_name: str = "Open"):
    asset = InputActionAsset(name=name)
    action = asset.add_map("UI").add_action(action_name)
    action.add_binding("<Keyboard>/escape", groups="Keyboard&Mouse")
    return asset, InputActionReference.to(action)


class ExplodingReference:
    @property
    def action(self):
        raise RuntimeError("reference not loaded")


class FailingSurface:
    name = "broken"

    def scan(self, host, kind):
        raise RuntimeError("registry offline")


# =============================================================================
# Merge policy
# =============================================================================


class TestMergeFirstSeen:
    """The merge policy is one explicit function."""

    def test_first_record_wins(self, game_asset):
        records = {}
        first = DiscoveryRecord(game_asset, Provenance.registry("PlayerInput", "Player"))
        later = DiscoveryRecord(game_asset, Provenance.exhaustive("PlayerInput", "Player"))
        assert merge_first_seen(records, first) is True
        assert merge_first_seen(records, later) is False
        assert records[game_asset] is first

    def test_identity_not_content(self):
        records = {}
        merge_first_seen(records, DiscoveryRecord(InputActionAsset("Same"), Provenance.registry("K", "A")))
        merge_first_seen(records, DiscoveryRecord(InputActionAsset("Same"), Provenance.registry("K", "B")))
        assert len(records) == 2


# =============================================================================
# Dedup invariant
# =============================================================================


class TestDedup:
    """One asset reachable from every surface yields exactly one record."""

    def test_single_record_with_first_surface_provenance(self, scene_host, game_asset):
        collector = BindingCollector(scene_host)
        records = collector.collect()

        assert len(records) == 1
        record = records[0]
        assert record.asset is game_asset
        assert record.provenance == Provenance.registry("ButtonActionBinder", "Next Round")
        assert record.source == "registry: ButtonActionBinder on Next Round"
        assert record.owner_description == (
            "InputActionReference field ButtonActionBinder.action on Next Round"
        )
        assert record.to_dict()["owner_description"] == record.owner_description

    def test_every_surface_saw_the_binder(self, scene_host):
        collector = BindingCollector(scene_host)
        collector.collect()
        counts = collector.surface_counts
        assert counts["registry"]["ButtonActionBinder"] == 1
        assert counts["exhaustive"]["ButtonActionBinder"] == 1
        assert counts["hierarchical"]["ButtonActionBinder"] == 1

    def test_binders_recorded_once(self, scene_host):
        collector = BindingCollector(scene_host)
        collector.collect()
        assert len(collector.button_binders) == 1
        assert len(collector.toggle_binders) == 1
        assert collector.binders == collector.button_binders

    def test_no_duplicate_assets_across_kinds(self, scene_host, game_asset):
        player = scene_host.add_root("Player", scene="GameScene")
        player.add_component(PlayerInput(actions=game_asset))
        collector = BindingCollector(scene_host)
        records = collector.collect()

        assert [r.asset for r in records] == [game_asset]
        assert records[0].provenance.container_kind == "PlayerInput"
        assert len(collector.owners) == 1

    def test_equal_content_assets_are_distinct(self):
        host = SceneGraphHost()
        for name in ("PlayerOne", "PlayerTwo"):
            host.add_root(name).add_component(PlayerInput(actions=InputActionAsset(name="Shared")))
        records = BindingCollector(host).collect()
        assert len(records) == 2
        assert records[0].asset is not records[1].asset


# =============================================================================
# Surfaces
# =============================================================================


class TestSurfaces:
    """Each surface contributes what only it can see."""

    def test_inactive_binder_found_by_exhaustive_scan(self, scene_host):
        hidden_asset, hidden_ref = _asset_with_action("MenuControls")
        hidden = scene_host.roots[0].child("Options", active=False)
        hidden.add_component(ButtonActionBinder(action=hidden_ref))

        records = BindingCollector(scene_host).collect()

        hidden_record = next(r for r in records if r.asset is hidden_asset)
        assert hidden_record.provenance.kind == ProvenanceKind.EXHAUSTIVE_SCAN
        assert hidden_record.source.startswith("exhaustive scan: ButtonActionBinder on Options")

    def test_template_binders_are_ignored(self, scene_host):
        prefab_asset, prefab_ref = _asset_with_action("PrefabControls")
        prefab = scene_host.add_template("BinderPrefab")
        prefab.add_component(ButtonActionBinder(action=prefab_ref))

        collector = BindingCollector(scene_host)
        records = collector.collect()

        assert all(r.asset is not prefab_asset for r in records)
        assert all(b.container is not prefab for b in collector.button_binders)
        assert collector.surface_counts["exhaustive"]["ButtonActionBinder"] == 1

    def test_hierarchical_surface_provenance(self, scene_host, game_asset, caplog):
        caplog.set_level(logging.INFO)
        collector = BindingCollector(scene_host, surfaces=[HierarchicalScan()])
        records = collector.collect()

        assert records[0].provenance == Provenance.hierarchical(
            "ButtonActionBinder", "Next Round", "MainUI"
        )
        assert records[0].source.startswith("hierarchy under MainUI: ButtonActionBinder on Next Round")
        assert "Found ButtonActionBinder in UI hierarchy: Next Round" in caplog.text

    def test_registry_counts_logged(self, scene_host, caplog):
        caplog.set_level(logging.INFO)
        BindingCollector(scene_host).collect()
        assert "Found 1 active ButtonActionBinder components." in caplog.text
        assert "Found 1 total ToggleActionBinder components (including inactive)." in caplog.text

    def test_owner_component(self, player_host, game_asset):
        collector = BindingCollector(player_host)
        records = collector.collect()
        assert records[0].asset is game_asset
        assert records[0].source == "registry: PlayerInput on Player"
        assert records[0].owner_description == "Field PlayerInput.actions on Player"
        assert collector.button_binders == ()

    def test_explicit_kinds(self, scene_host):
        collector = BindingCollector(
            scene_host,
            kinds=[BinderKind(ToggleActionBinder, BinderCategory.PERSISTENT)],
        )
        records = collector.collect()
        assert records[0].provenance.container_kind == "ToggleActionBinder"
        assert collector.button_binders == ()


# =============================================================================
# Failure recovery
# =============================================================================


class TestFailureRecovery:
    """Failures are logged and recovered, never raised out of collect()."""

    def test_locator_failure_skips_one_candidate(self, scene_host, game_asset, caplog):
        caplog.set_level(logging.ERROR)
        broken = scene_host.roots[0].child("Broken")
        broken.add_component(ButtonActionBinder(action=ExplodingReference()))

        collector = BindingCollector(scene_host)
        records = collector.collect()

        assert [r.asset for r in records] == [game_asset]
        assert len(collector.failures) == 1
        assert "Broken" in collector.failures[0]
        assert "Locator failed on ButtonActionBinder at Broken (field action)" in caplog.text

    def test_surface_failure_does_not_stop_others(self, scene_host, game_asset, caplog):
        caplog.set_level(logging.ERROR)
        collector = BindingCollector(scene_host, surfaces=[FailingSurface(), RegistryScan()])
        records = collector.collect()

        assert [r.asset for r in records] == [game_asset]
        assert "broken/ButtonActionBinder: registry offline" in collector.failures
        assert "Discovery surface 'broken' failed" in caplog.text


# =============================================================================
# Lifecycle
# =============================================================================


class TestLifecycle:
    """Each collection starts from an empty state."""

    def test_collect_twice_does_not_accumulate(self, scene_host):
        collector = BindingCollector(scene_host)
        collector.collect()
        collector.collect()
        assert len(collector.records) == 1
        assert len(collector.button_binders) == 1
        assert len(collector.toggle_binders) == 1

    def test_collect_sees_host_changes(self, scene_host):
        collector = BindingCollector(scene_host)
        assert collector.collected_at is None
        collector.collect()
        extra_asset, extra_ref = _asset_with_action("Extra")
        scene_host.roots[0].child("Extra").add_component(ButtonActionBinder(action=extra_ref))
        records = collector.collect()
        assert [r.asset.name for r in records] == ["GameControls", "Extra"]
        assert collector.collected_at is not None

    def test_views_are_read_only_copies(self, scene_host):
        collector = BindingCollector(scene_host)
        collector.collect()
        assert isinstance(collector.records, tuple)
        counts = collector.surface_counts
        counts["registry"]["ButtonActionBinder"] = 99
        assert collector.surface_counts["registry"]["ButtonActionBinder"] == 1

    def test_entries_pair_source_and_asset(self, scene_host, game_asset):
        collector = BindingCollector(scene_host)
        collector.collect()
        assert collector.entries() == [(collector.records[0].source, game_asset)]

    def test_injected_logger(self, scene_host, caplog):
        caplog.set_level(logging.INFO, logger="tests.collector.sink")
        collector = BindingCollector(scene_host, log=logging.getLogger("tests.collector.sink"))
        collector.collect()
        messages = [r.getMessage() for r in caplog.records if r.name == "tests.collector.sink"]
        assert "=== Action Binder Collection Summary ===" in messages
        assert "Button binders: 1" in messages
        assert "Discovered assets: 1" in messages


# =============================================================================
# Queries
# =============================================================================


class TestQueries:
    """Lookups by associated UI-control name."""

    @pytest.fixture
    def collector(self, scene_host) -> BindingCollector:
        collector = BindingCollector(scene_host)
        collector.collect()
        return collector

    def test_find_button_binder(self, collector):
        binder = collector.find_button_binder("Next Round")
        assert isinstance(binder, ButtonActionBinder)
        assert collector.find_button_binder("Auto Sort") is None

    def test_find_toggle_binder(self, collector):
        binder = collector.find_toggle_binder("Auto Sort")
        assert isinstance(binder, ToggleActionBinder)
        assert collector.find_toggle_binder("Next Round") is None

    def test_find_specified_action_ref(self, collector, next_round_ref, auto_sort_ref):
        assert collector.find_specified_action_ref("Next Round") is next_round_ref
        assert collector.find_specified_action_ref("Auto Sort") is auto_sort_ref

    def test_buttons_before_toggles(self, scene_host, next_round_ref, auto_sort_ref):
        ui = scene_host.roots[0]
        toggle_node = ui.child("Shared")
        toggle_node.add_component(Toggle())
        toggle_node.add_component(ToggleActionBinder(action=auto_sort_ref))
        button_node = ui.child("Shared")
        button = button_node.add_component(Button())
        button_node.add_component(ButtonActionBinder(action=next_round_ref, button=button))

        collector = BindingCollector(scene_host)
        collector.collect()
        assert collector.find_specified_action_ref("Shared") is next_round_ref

    def test_not_found_warns(self, collector, caplog):
        caplog.set_level(logging.WARNING)
        assert collector.find_specified_action_ref("Quit") is None
        assert "No action reference found for control 'Quit'" in caplog.text


# =============================================================================
# Report
# =============================================================================


class TestDescribeDiscovery:
    """Tests for the provenance and statistics report."""

    def test_report(self, scene_host):
        scene_host.roots[0].child("Options", active=False).add_component(
            ButtonActionBinder(action=InputActionReference.to(scene_host.assets["GameControls"].find_action("Move")))
        )
        collector = BindingCollector(scene_host, kinds=DEFAULT_BINDER_KINDS)
        collector.collect()
        report = describe_discovery(collector)

        assert report["collected_at"] is not None
        assert len(report["assets"]) == 1
        assert report["assets"][0]["surface"] == "registry"
        assert report["binders"]["button"] == {"total": 2, "active": 1, "inactive": 1}
        assert report["binders"]["toggle"] == {"total": 1, "active": 1, "inactive": 0}
        assert report["binders"]["owner"]["total"] == 0
        assert report["surfaces"]["registry"]["ButtonActionBinder"] == 1
        assert report["surfaces"]["exhaustive"]["ButtonActionBinder"] == 2
        assert report["failures"] == []

    def test_report_before_collect(self, scene_host):
        report = describe_discovery(BindingCollector(scene_host))
        assert report["collected_at"] is None
        assert report["assets"] == []
