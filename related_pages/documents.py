"""
Document model and the read-only store interface the scorer consumes.

A document is a path plus a free-form mapping of metadata fields; the scorer
never assumes a schema. Field values are scalars or ordered lists of scalars.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Tuple

import numpy as np
from loguru import logger

from .config import NOTE_SUFFIX

PATH_SEPARATOR = "/"


def split_path(path: str) -> List[str]:
    """Split a vault path into non-empty segments."""
    return [seg for seg in str(path).strip().split(PATH_SEPARATOR) if seg]


def as_value_list(value: Any) -> List[Any]:
    """
    Coerce a field value into a list of scalars.

    Robust handling of value shapes:
      - None / "" / [] -> []
      - list/tuple/np.ndarray -> list (None and "" entries dropped)
      - anything else -> [value]
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple, np.ndarray)):
        return [v for v in list(value) if v is not None and v != ""]
    if isinstance(value, str) and not value.strip():
        return []
    return [value]


@dataclass(frozen=True)
class Document:
    """A path-addressed note with arbitrary metadata fields."""

    path: str
    fields: Mapping[str, Any] = field(default_factory=dict)

    @property
    def segments(self) -> List[str]:
        return split_path(self.path)

    @property
    def directory(self) -> Tuple[str, ...]:
        return tuple(self.segments[:-1])

    @property
    def name(self) -> str:
        segs = self.segments
        last = segs[-1] if segs else self.path
        if last.endswith(NOTE_SUFFIX):
            return last[: -len(NOTE_SUFFIX)]
        return last

    def get(self, field_name: str, default: Any = None) -> Any:
        return self.fields.get(field_name, default)


class DocumentStore(Protocol):
    """
    Read-only collaborator supplying documents to the scorer.
    """

    def all_documents(self) -> Sequence[Document]: ...

    def field_value(self, doc: Document, field_name: str) -> Any:
        """Return the scalar or list stored under ``field_name``, or None when absent."""
        ...

    def current_document(self) -> Optional[Document]: ...


class InMemoryDocumentStore:
    """
    Simple store over a fixed list of documents.

    Paths must be unique; later duplicates are dropped with a warning.
    """

    def __init__(self, documents: Iterable[Document], current_path: Optional[str] = None):
        self._docs: List[Document] = []
        self._by_path: Dict[str, Document] = {}
        for doc in documents:
            if doc.path in self._by_path:
                logger.warning("Duplicate document path {}; keeping first occurrence", doc.path)
                continue
            self._by_path[doc.path] = doc
            self._docs.append(doc)
        self._current_path: Optional[str] = None
        if current_path is not None:
            self.set_current(current_path)

    def __len__(self) -> int:
        return len(self._docs)

    def __contains__(self, path: object) -> bool:
        return path in self._by_path

    def all_documents(self) -> Sequence[Document]:
        return tuple(self._docs)

    def field_value(self, doc: Document, field_name: str) -> Any:
        return doc.get(field_name)

    def current_document(self) -> Optional[Document]:
        if self._current_path is None:
            return None
        return self._by_path.get(self._current_path)

    def set_current(self, path: str) -> Document:
        doc = self.get_by_path(path)
        self._current_path = doc.path
        return doc

    def get_by_path(self, path: str) -> Document:
        try:
            return self._by_path[path]
        except KeyError:
            raise KeyError(f"No document with path {path!r}") from None

    def get_by_field(self, field_name: str, values: Any) -> List[Document]:
        """Documents whose ``field_name`` shares at least one value with ``values``."""
        wanted = as_value_list(values)
        if not wanted:
            return []
        out: List[Document] = []
        for doc in self._docs:
            have = as_value_list(self.field_value(doc, field_name))
            if any(v in have for v in wanted):
                out.append(doc)
        return out
