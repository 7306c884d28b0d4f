"""Conversion between stored notebook bytes and the in-memory DocumentModel.

Reading: bytes are parsed as JSON, the cell list is normalized (a notebook
without cells gets one blank code cell), cells are converted and the model
metadata records the schema version, indentation unit and a fresh id.

Writing: cells are converted back, pruned of transient fields and dumped with
the indentation unit the document was read with.
"""

from __future__ import annotations

import copy
import json
import logging
import uuid
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .cells import model_cell_to_stored_cell, prune_cell, stored_cells_to_model
from .config import SerializerOptions
from .errors import MalformedInputError
from .language import resolve_preferred_language, send_language_telemetry
from .model import CellModel, DocumentModel, NotebookDocument
from .normalize import (
    DOCUMENT_ID,
    INDENT_AMOUNT,
    NBFORMAT,
    NBFORMAT_MINOR,
    ORIG_NBFORMAT,
    blank_code_cell,
    default_stored_notebook,
    indent_for_metadata,
    indent_for_text,
    stored_cells,
)

logger = logging.getLogger(__name__)

# Longest indent unit honored when pretty-printing.
_MAX_INDENT = 10


def _generate_id() -> str:
    return str(uuid.uuid4())


def dumps_notebook(stored: Mapping[str, Any], indent: str) -> str:
    """Dump a stored notebook using ``indent`` as the pretty-print unit.

    An empty indent yields compact output with no whitespace.
    """
    indent = indent[:_MAX_INDENT]
    if not indent:
        return json.dumps(stored, ensure_ascii=False, separators=(",", ":"))
    return json.dumps(stored, indent=indent, ensure_ascii=False)


class NotebookSerializer:
    """Reads and writes notebook documents.

    Every collaborator is a plain callable and can be replaced; the defaults
    come from nbbridge.cells and nbbridge.language.
    """

    def __init__(
        self,
        options: Optional[SerializerOptions] = None,
        *,
        resolve_language: Callable[[Optional[Mapping[str, Any]]], str] = resolve_preferred_language,
        send_telemetry: Callable[[Mapping[str, Any]], None] = send_language_telemetry,
        cells_to_model: Callable[..., DocumentModel] = stored_cells_to_model,
        cell_to_stored: Callable[[CellModel], Dict[str, Any]] = model_cell_to_stored_cell,
        prune: Callable[[Dict[str, Any]], Dict[str, Any]] = prune_cell,
        generate_id: Callable[[], str] = _generate_id,
    ) -> None:
        self.options = options or SerializerOptions()
        self._resolve_language = resolve_language
        self._send_telemetry = send_telemetry
        self._cells_to_model = cells_to_model
        self._cell_to_stored = cell_to_stored
        self._prune = prune
        self._generate_id = generate_id

    # ---------- Reading ----------

    def deserialize_notebook(self, content: bytes, token: Any = None) -> DocumentModel:
        try:
            text = bytes(content).decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise MalformedInputError(f"Notebook content is not UTF-8: {e}") from e

        document: Optional[Dict[str, Any]] = None
        if text:
            try:
                parsed = json.loads(text)
            except json.JSONDecodeError as e:
                raise MalformedInputError(f"Notebook content is not valid JSON: {e}") from e
            if stored_cells(parsed) is None:
                logger.debug("Parsed notebook has no cell list; returning empty document")
                return DocumentModel(cells=[], metadata={DOCUMENT_ID: self._generate_id()})
            document = parsed

        indent = indent_for_text(text, self.options.default_indent)

        if document is not None and self.options.telemetry:
            self._notify(document)

        language = self._resolve_language(
            document.get("metadata") if document is not None else None
        )

        cells: List[Any] = []
        if document is not None:
            cells = stored_cells(document) or [blank_code_cell()]
        stripped = (
            {k: v for k, v in document.items() if k != "cells"}
            if document is not None
            else {}
        )
        full = dict(document, cells=cells) if document is not None else {}
        model = self._cells_to_model(stripped, cells, language, full)
        if document is not None and not model.cells:
            # Every stored cell was unusable; keep the model non-empty.
            logger.debug("No convertible cells; substituting a blank code cell")
            cells = [blank_code_cell()]
            model = self._cells_to_model(stripped, cells, language, dict(full, cells=cells))

        metadata = dict(model.metadata)
        metadata[INDENT_AMOUNT] = indent
        metadata[DOCUMENT_ID] = self._generate_id()
        if document is not None:
            for key in (NBFORMAT, NBFORMAT_MINOR):
                if key in document:
                    metadata[key] = document[key]

        logger.debug(
            "Decoded notebook: %d cells, indent=%r, language=%s",
            len(model.cells),
            indent,
            language,
        )
        return DocumentModel(cells=list(model.cells), metadata=metadata)

    def _notify(self, document: Mapping[str, Any]) -> None:
        try:
            self._send_telemetry(document)
        except Exception:  # noqa: BLE001
            logger.warning("Language telemetry failed", exc_info=True)

    # ---------- Writing ----------

    def serialize_notebook(
        self, data: Union[DocumentModel, NotebookDocument], token: Any = None
    ) -> bytes:
        return self._serialize(data).encode("utf-8")

    def serialize_notebook_document(self, document: NotebookDocument) -> str:
        return self._serialize(document)

    def _serialize(self, data: Union[DocumentModel, NotebookDocument]) -> str:
        stored = default_stored_notebook()
        metadata = data.metadata

        if NBFORMAT in metadata:
            stored[NBFORMAT] = metadata[NBFORMAT]
        if NBFORMAT_MINOR in metadata:
            if self.options.legacy_nbformat_minor:
                # Older releases wrote the minor version into nbformat.
                stored[NBFORMAT] = metadata[NBFORMAT_MINOR]
            else:
                stored[NBFORMAT_MINOR] = metadata[NBFORMAT_MINOR]
        indent = indent_for_metadata(metadata, self.options.default_indent)

        notebook_meta = metadata.get("metadata")
        if isinstance(notebook_meta, Mapping):
            merged = copy.deepcopy(dict(notebook_meta))
            merged["orig_nbformat"] = ORIG_NBFORMAT
            stored["metadata"] = merged

        if hasattr(data, "view_type"):
            cells = data.get_cells()
        else:
            cells = data.cells
        stored["cells"] = [self._prune(self._cell_to_stored(c)) for c in cells]

        logger.debug("Encoding notebook: %d cells, indent=%r", len(stored["cells"]), indent)
        return dumps_notebook(stored, indent)


def decode(content: bytes, token: Any = None) -> DocumentModel:
    """Read notebook bytes into a DocumentModel using the default collaborators."""
    return NotebookSerializer().deserialize_notebook(content, token)


def encode(document: Union[DocumentModel, NotebookDocument], token: Any = None) -> bytes:
    """Write a DocumentModel or live NotebookDocument to notebook bytes."""
    return NotebookSerializer().serialize_notebook(document, token)
