"""Best-effort decoding of binding documents for display.

Decoding never raises to the caller. A missing or malformed document yields
an empty but valid result and an error log entry.
"""

from __future__ import annotations

import json
import logging
from typing import Any, List, Optional

from bindingmcp.domains.codec.models import DocumentItem, InputActionAssetDto

logger = logging.getLogger(__name__)


def _loads(text: Optional[str], what: str, log: logging.Logger) -> Optional[Any]:
    if text is None or not text.strip():
        log.error("JSON content for %s was null or empty.", what)
        return None
    try:
        # Non-strict: control characters are written verbatim by the encoder
        return json.loads(text, strict=False)
    except (ValueError, RecursionError) as e:
        log.error("Could not parse %s: %s", what, e)
        return None


def decode_asset(
    text: Optional[str],
    log: Optional[logging.Logger] = None,
) -> InputActionAssetDto:
    """Decode a single asset document.

    Accepts both the limited schema (bindings listed per map) and the export
    schema (bindings nested per action).

    Args:
        text: Document text
        log: Logger for decode failures (module logger by default)

    Returns:
        The decoded asset; ``maps`` is None if decoding failed
    """
    log = log or logger
    data = _loads(text, "bindings asset", log)
    if not isinstance(data, dict):
        if data is not None:
            log.error("Bindings asset document is not an object.")
        return InputActionAssetDto()
    return InputActionAssetDto.from_dict(data)


def decode_document(
    text: Optional[str],
    log: Optional[logging.Logger] = None,
) -> List[DocumentItem]:
    """Decode an export document into its ``{source, data}`` items.

    Returns an empty list if decoding failed.
    """
    log = log or logger
    data = _loads(text, "bindings document", log)
    if not isinstance(data, dict):
        if data is not None:
            log.error("Bindings document is not an object.")
        return []
    items = data.get("items")
    if not isinstance(items, list):
        log.error("Bindings document has no items list.")
        return []
    return [DocumentItem.from_dict(item) for item in items if isinstance(item, dict)]
