from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

CODE = "code"
MARKUP = "markup"


@dataclass
class CellModel:
    """A single cell of an in-memory notebook document.

    kind: "code" or "markup".
    cell_type: the stored cell_type ("code", "markdown" or "raw").
    language: language tag used by the editor for this cell.
    outputs: stored output dicts, kept in file order.
    """

    kind: str
    source: str
    language: str
    cell_type: str = "code"
    outputs: List[Dict[str, Any]] = field(default_factory=list)
    execution_count: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    attachments: Optional[Dict[str, Any]] = None
    id: Optional[str] = None
    # Notebook language resolved when the cell was read; None for new cells.
    default_language: Optional[str] = None


@dataclass
class DocumentModel:
    """Snapshot of a notebook document: ordered cells plus metadata.

    metadata keeps every top-level stored field except ``cells`` along with
    the keys listed in ``nbbridge.normalize``.
    """

    cells: List[CellModel] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def has_metadata(self, key: str) -> bool:
        return key in self.metadata


@dataclass
class NotebookDocument:
    """Live document handle as held by an editor.

    Cells are reached through get_cells(); a DocumentModel exposes them as a
    plain attribute instead.
    """

    view_type: str
    model: DocumentModel
    uri: Optional[str] = None

    @property
    def metadata(self) -> Dict[str, Any]:
        return self.model.metadata

    def get_cells(self) -> List[CellModel]:
        return list(self.model.cells)
