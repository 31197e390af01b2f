"""Document sinks - where rendered index documents go."""

import json
from pathlib import Path
from typing import Protocol

from .document import IndexDocument


class DocumentSink(Protocol):
    """Receives each rendered document; persistence is the sink's business."""

    def __call__(self, document: IndexDocument) -> None: ...


class JsonlDocumentSink:
    """Writes one JSON object per document (NDJSON)."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self.count = 0
        self._handle = None

    def __enter__(self) -> "JsonlDocumentSink":
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = open(self.path, "w", encoding="utf-8")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __call__(self, document: IndexDocument) -> None:
        if self._handle is None:
            raise RuntimeError("JsonlDocumentSink used outside of its with-block")
        self._handle.write(json.dumps(document.to_dict(), ensure_ascii=False) + "\n")
        self.count += 1

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None


class ListDocumentSink:
    """Collects documents in memory."""

    def __init__(self):
        self.documents: list[IndexDocument] = []

    def __call__(self, document: IndexDocument) -> None:
        self.documents.append(document)
