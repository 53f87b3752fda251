"""Domain Services for the Export Context.

The exporter runs the whole pipeline: gate, discovery, encoding and
persistence. Every export writes a new timestamped document; existing
documents are never overwritten or merged. The first discovered asset is
also written, in the limited schema, to the sentinel file that gates later
runs.

File writes are synchronous. An I/O failure is logged with its exception
and the run ends without raising; there is no retry.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Union

from bindingmcp.domains.codec import encode_asset_json, encode_document
from bindingmcp.domains.discovery import BindingCollector
from bindingmcp.domains.export.gate import ExportGate
from bindingmcp.domains.export.value_objects import (
    DOCUMENT_PREFIX,
    DOCUMENT_SUFFIX,
    TIMESTAMP_FORMAT,
    ExportResult,
)

logger = logging.getLogger(__name__)


def write_text_atomic(path: Path, content: str) -> Path:
    """Write ``content`` to ``path`` through a temp file and rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_suffix(path.suffix + ".tmp")
    with open(temp_path, "w", encoding="utf-8") as f:
        f.write(content)
    temp_path.replace(path)
    return path


class BindingExporter:
    """Runs discovery and persists the export document.

    Example:
        exporter = BindingExporter(collector, ExportGate(sentinel), export_dir)
        result = exporter.run()
        if result.skipped:
            ...
    """

    def __init__(
        self,
        collector: BindingCollector,
        gate: ExportGate,
        export_dir: Union[str, Path],
        clock: Optional[Callable[[], datetime]] = None,
        log: Optional[logging.Logger] = None,
    ):
        self.collector = collector
        self.gate = gate
        self.export_dir = Path(export_dir)
        self.clock = clock or datetime.now
        self.log = log or logger

    def run(self, force: bool = False) -> ExportResult:
        """Export discovered assets unless the sentinel already exists.

        Args:
            force: Bypass the gate (the sentinel is rewritten)

        Returns:
            ExportResult describing what was written
        """
        if not force and not self.gate.should_export():
            return ExportResult(skipped=True, sentinel_path=self.gate.sentinel_path)

        records = self.collector.collect()
        document = encode_document(self.collector.entries())

        try:
            document_path = self._write_document(document)
        except OSError as e:
            self.log.error(f"Failed to write bindings document to {self.export_dir}: {e}", exc_info=True)
            return ExportResult(asset_count=len(records), error=str(e))
        self.log.info(f"Dumped {len(records)} assets to {document_path}")

        if not records:
            self.log.warning("No input action assets discovered; sentinel not written")
            return ExportResult(document_path=document_path)

        try:
            sentinel_path = write_text_atomic(
                self.gate.sentinel_path, encode_asset_json(records[0].asset)
            )
        except OSError as e:
            self.log.error(f"Failed to write sentinel {self.gate.sentinel_path}: {e}", exc_info=True)
            return ExportResult(
                document_path=document_path,
                asset_count=len(records),
                error=str(e),
            )
        self.log.info(f"Bindings saved to: {sentinel_path}")
        return ExportResult(
            document_path=document_path,
            sentinel_path=sentinel_path,
            asset_count=len(records),
        )

    def _write_document(self, document: str) -> Path:
        self.export_dir.mkdir(parents=True, exist_ok=True)
        stamp = self.clock().strftime(TIMESTAMP_FORMAT)
        suffix = 0
        while True:
            tag = stamp if suffix == 0 else f"{stamp}-{suffix}"
            path = self.export_dir / f"{DOCUMENT_PREFIX}{tag}{DOCUMENT_SUFFIX}"
            try:
                # Exclusive create: an earlier document is never overwritten
                with open(path, "x", encoding="utf-8") as f:
                    f.write(document)
                return path
            except FileExistsError:
                suffix += 1

    def dump_control_asset(
        self,
        control_path: str,
        filename: str = "modified_bindings.json",
    ) -> Optional[Path]:
        """Write the asset behind one UI control, e.g. ``MainUI/Next Round``.

        Returns:
            The written path, or None if the control, binder or asset is
            missing or the write failed
        """
        self.log.info("Dump Start")
        container = self.collector.host.find_container(control_path)
        if container is None:
            self.log.error(f"Control at {control_path} not found!")
            return None

        try:
            located = self.collector.locator.locate(container)
        except Exception as e:
            self.log.error(f"Could not inspect {control_path}: {e}")
            return None
        if located is None:
            self.log.error(f"Could not retrieve an input action asset from {control_path}!")
            return None

        path = self.export_dir / filename
        try:
            write_text_atomic(path, encode_asset_json(located.asset))
        except OSError as e:
            self.log.error(f"Failed to write {path}: {e}", exc_info=True)
            return None
        self.log.info(f"Bindings saved to: {path}")
        return path
