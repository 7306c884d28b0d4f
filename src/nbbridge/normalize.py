"""Shape normalization shared by the decode and encode paths."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from .indent import detect_indent

# Recognized DocumentModel metadata keys; every other key passes through.
NBFORMAT = "nbformat"
NBFORMAT_MINOR = "nbformat_minor"
INDENT_AMOUNT = "indent_amount"
DOCUMENT_ID = "document_id"

DEFAULT_INDENT = " "
DEFAULT_NBFORMAT = 4
DEFAULT_NBFORMAT_MINOR = 2
ORIG_NBFORMAT = 4


def indent_for_text(text: str, default: str = DEFAULT_INDENT) -> str:
    """Indentation unit of ``text``; ``default`` for empty or blank text."""
    if not text or not text.strip():
        return default
    return detect_indent(text).indent


def indent_for_metadata(metadata: Mapping[str, Any], default: str = DEFAULT_INDENT) -> str:
    value = metadata.get(INDENT_AMOUNT)
    if isinstance(value, str):
        return value
    return default


def blank_code_cell() -> Dict[str, Any]:
    return {
        "cell_type": "code",
        "execution_count": None,
        "metadata": {},
        "outputs": [],
        "source": "",
    }


def stored_cells(document: Any) -> Optional[list]:
    """Return the ``cells`` list of a parsed document, or None.

    None covers documents that are not JSON objects, lack ``cells`` or carry
    something other than a list there.
    """
    if not isinstance(document, dict):
        return None
    cells = document.get("cells")
    if not isinstance(cells, list):
        return None
    return cells


def default_stored_notebook() -> Dict[str, Any]:
    return {
        "cells": [],
        "metadata": {"orig_nbformat": ORIG_NBFORMAT},
        NBFORMAT: DEFAULT_NBFORMAT,
        NBFORMAT_MINOR: DEFAULT_NBFORMAT_MINOR,
    }
