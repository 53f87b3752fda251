"""Tests for the Export Context.

This module tests the export pipeline:
- ExportGate sentinel check
- BindingExporter document and sentinel persistence
- Persistence failure recovery
"""

from __future__ import annotations

import json
import logging
import re

import pytest

from bindingmcp.domains.codec import decode_asset, decode_document, encode_asset_json
from bindingmcp.domains.discovery import BindingCollector
from bindingmcp.domains.export import BindingExporter, ExportGate, ExportResult, write_text_atomic
from bindingmcp.domains.export import services as export_services


@pytest.fixture
def export_dir(tmp_path):
    return tmp_path / "exports"


@pytest.fixture
def sentinel(export_dir):
    return export_dir / "modified_bindings.json"


@pytest.fixture
def exporter(scene_host, export_dir, sentinel, fixed_clock) -> BindingExporter:
    return BindingExporter(
        BindingCollector(scene_host),
        ExportGate(sentinel),
        export_dir,
        clock=fixed_clock,
    )


class TestExportGate:
    """The sentinel's presence alone suppresses export."""

    def test_open_without_sentinel(self, sentinel):
        assert ExportGate(sentinel).should_export() is True

    def test_closed_with_sentinel(self, sentinel, caplog):
        caplog.set_level(logging.INFO)
        sentinel.parent.mkdir(parents=True)
        sentinel.write_text("", encoding="utf-8")
        assert ExportGate(sentinel).should_export() is False
        assert "skipping export" in caplog.text

    def test_content_not_compared(self, sentinel):
        sentinel.parent.mkdir(parents=True)
        sentinel.write_text("not even json", encoding="utf-8")
        assert ExportGate(sentinel).should_export() is False


class TestExportRun:
    """A run writes one timestamped document and the sentinel."""

    def test_document_name_and_directory_created(self, exporter, export_dir):
        result = exporter.run()
        assert export_dir.is_dir()
        assert result.document_path == export_dir / "bindings-20240102-030405.json"
        assert re.fullmatch(r"bindings-\d{8}-\d{6}\.json", result.document_path.name)

    def test_default_clock_names_document(self, scene_host, export_dir, sentinel):
        result = BindingExporter(BindingCollector(scene_host), ExportGate(sentinel), export_dir).run()
        assert re.fullmatch(r"bindings-\d{8}-\d{6}\.json", result.document_path.name)

    def test_document_content(self, exporter, game_asset):
        result = exporter.run()
        items = decode_document(result.document_path.read_text(encoding="utf-8"))
        assert [item.data.name for item in items] == ["GameControls"]
        assert items[0].source == exporter.collector.records[0].source
        assert result.asset_count == 1

    def test_sentinel_holds_limited_schema(self, exporter, sentinel, game_asset):
        result = exporter.run()
        assert result.sentinel_path == sentinel
        text = sentinel.read_text(encoding="utf-8")
        assert text == encode_asset_json(game_asset)
        assert decode_asset(text).has_data

    def test_result_dict(self, exporter):
        data = exporter.run().to_dict()
        assert data["success"] is True
        assert data["skipped"] is False
        assert data["document_path"].endswith("bindings-20240102-030405.json")
        assert data["asset_count"] == 1
        assert data["error"] is None


class TestIdempotentExport:
    """The second run after a successful export is suppressed."""

    def test_single_sentinel_write(self, exporter, export_dir, monkeypatch):
        writes = []
        original = export_services.write_text_atomic

        def counting_write(path, content):
            writes.append(path)
            return original(path, content)

        monkeypatch.setattr(export_services, "write_text_atomic", counting_write)

        first = exporter.run()
        second = exporter.run()

        assert first.skipped is False
        assert second.skipped is True
        assert second == ExportResult(skipped=True, sentinel_path=first.sentinel_path)
        assert writes == [first.sentinel_path]
        assert len(list(export_dir.glob("bindings-*.json"))) == 1

    def test_force_writes_new_document(self, exporter, export_dir):
        first = exporter.run()
        forced = exporter.run(force=True)
        assert forced.skipped is False
        assert forced.document_path == export_dir / "bindings-20240102-030405-1.json"
        assert first.document_path.exists()
        assert len(list(export_dir.glob("bindings-*.json"))) == 2

    def test_existing_documents_never_overwritten(self, exporter, export_dir):
        export_dir.mkdir(parents=True)
        earlier = export_dir / "bindings-20240102-030405.json"
        earlier.write_text("earlier run", encoding="utf-8")

        result = exporter.run()

        assert earlier.read_text(encoding="utf-8") == "earlier run"
        assert result.document_path.name == "bindings-20240102-030405-1.json"


class TestEmptyDiscovery:
    """Nothing discovered: an empty document and no sentinel."""

    def test_no_assets(self, player_host, export_dir, sentinel, fixed_clock, caplog):
        caplog.set_level(logging.WARNING)
        player_host.roots[0].components[0].actions = None
        exporter = BindingExporter(
            BindingCollector(player_host), ExportGate(sentinel), export_dir, clock=fixed_clock
        )
        result = exporter.run()

        assert json.loads(result.document_path.read_text(encoding="utf-8")) == {"items": []}
        assert result.sentinel_path is None
        assert not sentinel.exists()
        assert exporter.gate.should_export() is True
        assert "sentinel not written" in caplog.text


class TestPersistenceFailure:
    """I/O failures are logged and returned, never raised."""

    def test_unwritable_export_dir(self, scene_host, tmp_path, fixed_clock, caplog):
        caplog.set_level(logging.ERROR)
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory", encoding="utf-8")
        exporter = BindingExporter(
            BindingCollector(scene_host),
            ExportGate(tmp_path / "sentinel.json"),
            blocker,
            clock=fixed_clock,
        )

        result = exporter.run()

        assert result.success is False
        assert result.error
        assert result.document_path is None
        assert not (tmp_path / "sentinel.json").exists()
        assert "Failed to write bindings document" in caplog.text


class TestDumpControlAsset:
    """Writing the asset behind one named UI control."""

    def test_dump(self, exporter, export_dir, game_asset):
        path = exporter.dump_control_asset("MainUI/Next Round")
        assert path == export_dir / "modified_bindings.json"
        assert path.read_text(encoding="utf-8") == encode_asset_json(game_asset)

    def test_dump_custom_filename(self, exporter, export_dir):
        path = exporter.dump_control_asset("Auto Sort", filename="sort.json")
        assert path == export_dir / "sort.json"

    def test_missing_control(self, exporter, caplog):
        caplog.set_level(logging.ERROR)
        assert exporter.dump_control_asset("MainUI/Quit") is None
        assert "Control at MainUI/Quit not found!" in caplog.text

    def test_control_without_asset(self, exporter, caplog):
        caplog.set_level(logging.ERROR)
        assert exporter.dump_control_asset("MainUI") is None
        assert "Could not retrieve an input action asset from MainUI!" in caplog.text


class TestWriteTextAtomic:
    def test_writes_and_leaves_no_temp_file(self, tmp_path):
        target = tmp_path / "nested" / "out.json"
        assert write_text_atomic(target, "{}") == target
        assert target.read_text(encoding="utf-8") == "{}"
        assert list(target.parent.iterdir()) == [target]
