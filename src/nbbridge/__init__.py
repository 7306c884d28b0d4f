"""nbbridge: stored notebook JSON <-> in-memory notebook document model.

Reading and writing are exposed as two free functions, decode and encode.
"""

__all__ = [
    "CellModel",
    "DocumentModel",
    "NotebookDocument",
    "NotebookSerializer",
    "SerializerOptions",
    "MalformedInputError",
    "decode",
    "encode",
]

__version__ = "0.1.0"

from .model import CellModel, DocumentModel, NotebookDocument  # noqa: E402
from .config import SerializerOptions  # noqa: E402
from .errors import MalformedInputError  # noqa: E402
from .serializer import NotebookSerializer, decode, encode  # noqa: E402
