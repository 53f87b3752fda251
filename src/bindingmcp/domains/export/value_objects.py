"""Value Objects for the Export Context."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

DOCUMENT_PREFIX = "bindings-"
DOCUMENT_SUFFIX = ".json"
TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"


@dataclass(frozen=True)
class ExportResult:
    """Outcome of one export run.

    ``skipped`` means the gate suppressed the run. ``error`` is set when a
    persistence failure aborted it.
    """
    skipped: bool = False
    document_path: Optional[Path] = None
    sentinel_path: Optional[Path] = None
    asset_count: int = 0
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "skipped": self.skipped,
            "document_path": str(self.document_path) if self.document_path else None,
            "sentinel_path": str(self.sentinel_path) if self.sentinel_path else None,
            "asset_count": self.asset_count,
            "error": self.error,
        }
