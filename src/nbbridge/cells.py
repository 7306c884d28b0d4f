from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Mapping, Optional

import nbformat

from .model import CODE, MARKUP, CellModel, DocumentModel

logger = logging.getLogger(__name__)

MARKDOWN_LANGUAGE = "markdown"
RAW_LANGUAGE = "raw"

# Keys each output type may persist; anything else is transient.
_OUTPUT_KEYS: Dict[str, frozenset] = {
    "stream": frozenset({"output_type", "name", "text"}),
    "error": frozenset({"output_type", "ename", "evalue", "traceback"}),
    "execute_result": frozenset(
        {"output_type", "execution_count", "data", "metadata"}
    ),
    "display_data": frozenset({"output_type", "data", "metadata"}),
}


def join_source(source: Any) -> str:
    if isinstance(source, list):
        return "".join(str(s) for s in source)
    if source is None:
        return ""
    return str(source)


def split_source(source: Any) -> List[str]:
    """Split cell source into lines, each keeping its trailing newline."""
    text = join_source(source)
    parts = text.split("\n")
    lines = [p + "\n" for p in parts[:-1]] + [parts[-1]]
    return [line for line in lines if line]


def _cell_language(metadata: Mapping[str, Any]) -> Optional[str]:
    vscode = metadata.get("vscode")
    if isinstance(vscode, dict):
        lang = vscode.get("languageId")
        if isinstance(lang, str) and lang.strip():
            return lang
    return None


def stored_cell_to_model(cell: Mapping[str, Any], preferred_language: str) -> CellModel:
    cell_type = str(cell.get("cell_type") or "code")
    meta = cell.get("metadata")
    meta = copy.deepcopy(meta) if isinstance(meta, dict) else {}
    source = join_source(cell.get("source", ""))
    cell_id = cell.get("id") if isinstance(cell.get("id"), str) else None

    if cell_type == "markdown":
        attachments = cell.get("attachments")
        return CellModel(
            kind=MARKUP,
            source=source,
            language=MARKDOWN_LANGUAGE,
            cell_type="markdown",
            metadata=meta,
            attachments=copy.deepcopy(attachments) if isinstance(attachments, dict) else None,
            id=cell_id,
        )
    if cell_type == "raw":
        attachments = cell.get("attachments")
        return CellModel(
            kind=CODE,
            source=source,
            language=RAW_LANGUAGE,
            cell_type="raw",
            metadata=meta,
            attachments=copy.deepcopy(attachments) if isinstance(attachments, dict) else None,
            id=cell_id,
        )

    outputs = cell.get("outputs")
    count = cell.get("execution_count")
    return CellModel(
        kind=CODE,
        source=source,
        language=_cell_language(meta) or preferred_language,
        cell_type="code",
        outputs=[copy.deepcopy(o) for o in outputs if isinstance(o, dict)]
        if isinstance(outputs, list)
        else [],
        execution_count=count if isinstance(count, int) else None,
        metadata=meta,
        id=cell_id,
        default_language=preferred_language,
    )


def stored_cells_to_model(
    stripped: Mapping[str, Any],
    cells: List[Any],
    preferred_language: str,
    document: Mapping[str, Any],
) -> DocumentModel:
    """Build a DocumentModel from stored cells.

    stripped is the parsed document without its cells; its fields become the
    model metadata. document is the full parsed notebook and is only read.
    """
    models: List[CellModel] = []
    for idx, cell in enumerate(cells):
        if not isinstance(cell, dict):
            logger.debug("Skipping non-object cell at index %d", idx)
            continue
        models.append(stored_cell_to_model(cell, preferred_language))
    metadata = {k: copy.deepcopy(v) for k, v in stripped.items() if k != "cells"}
    return DocumentModel(cells=models, metadata=metadata)


def model_cell_to_stored_cell(cell: CellModel) -> nbformat.NotebookNode:
    meta = copy.deepcopy(cell.metadata)
    if cell.kind == MARKUP or cell.cell_type == "markdown":
        d: Dict[str, Any] = {}
        if cell.attachments:
            d["attachments"] = copy.deepcopy(cell.attachments)
        d["cell_type"] = "markdown"
        if cell.id is not None:
            d["id"] = cell.id
        d["metadata"] = meta
        d["source"] = cell.source
        return nbformat.from_dict(d)

    if cell.cell_type == "raw":
        d = {}
        if cell.attachments:
            d["attachments"] = copy.deepcopy(cell.attachments)
        d["cell_type"] = "raw"
        if cell.id is not None:
            d["id"] = cell.id
        d["metadata"] = meta
        d["source"] = cell.source
        return nbformat.from_dict(d)

    vscode = meta.get("vscode")
    if isinstance(vscode, dict) and "languageId" in vscode:
        vscode["languageId"] = cell.language
    elif cell.default_language is not None and cell.language != cell.default_language:
        if not isinstance(vscode, dict):
            vscode = meta["vscode"] = {}
        vscode["languageId"] = cell.language
    d = {"cell_type": "code", "execution_count": cell.execution_count}
    if cell.id is not None:
        d["id"] = cell.id
    d["metadata"] = meta
    d["outputs"] = copy.deepcopy(cell.outputs)
    d["source"] = cell.source
    return nbformat.from_dict(d)


def _prune_output(output: Mapping[str, Any]) -> Dict[str, Any]:
    allowed = _OUTPUT_KEYS.get(output.get("output_type"))  # type: ignore[arg-type]
    if allowed is None:
        return {k: v for k, v in output.items() if k != "transient"}
    return {k: v for k, v in output.items() if k in allowed}


def prune_cell(cell: Mapping[str, Any]) -> nbformat.NotebookNode:
    """Drop fields that must not be written to disk.

    Non-code cells lose outputs and execution_count; code cell outputs keep
    only the keys their output_type defines. Source becomes a list of lines.
    """
    result = dict(cell)
    result["source"] = split_source(cell.get("source", ""))
    if result.get("cell_type") != "code":
        result.pop("outputs", None)
        result.pop("execution_count", None)
    else:
        outputs = result.get("outputs") or []
        result["outputs"] = [_prune_output(o) for o in outputs]
    return nbformat.from_dict(result)
