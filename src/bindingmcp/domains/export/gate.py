"""Export Gate - idempotency guard for the export pipeline."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


class ExportGate:
    """Decides whether discovery and export should run at all.

    The sentinel file is the only persisted idempotency signal. Its presence
    alone suppresses re-export; content is not compared.
    """

    def __init__(self, sentinel_path: Union[str, Path], log: Optional[logging.Logger] = None):
        self.sentinel_path = Path(sentinel_path)
        self.log = log or logger

    def should_export(self) -> bool:
        if self.sentinel_path.exists():
            self.log.info(f"Sentinel {self.sentinel_path} exists; skipping export")
            return False
        return True
