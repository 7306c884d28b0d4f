from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

PYTHON_LANGUAGE = "python"


def _lookup(metadata: Optional[Mapping[str, Any]], section: str, key: str) -> Optional[str]:
    if not isinstance(metadata, Mapping):
        return None
    block = metadata.get(section)
    if not isinstance(block, Mapping):
        return None
    value = block.get(key)
    if isinstance(value, str) and value.strip():
        return value
    return None


def resolve_preferred_language(metadata: Optional[Mapping[str, Any]]) -> str:
    """Language for code cells that do not name their own.

    language_info.name wins over kernelspec.language; python otherwise.
    """
    return (
        _lookup(metadata, "language_info", "name")
        or _lookup(metadata, "kernelspec", "language")
        or PYTHON_LANGUAGE
    )


def send_language_telemetry(document: Mapping[str, Any]) -> None:
    metadata = document.get("metadata") if isinstance(document, Mapping) else None
    language = _lookup(metadata, "language_info", "name") or _lookup(
        metadata, "kernelspec", "language"
    )
    kernel = _lookup(metadata, "kernelspec", "name")
    logger.debug(
        "Notebook opened: language=%s kernel=%s",
        language or "unknown",
        kernel or "unknown",
    )
