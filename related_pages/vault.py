from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import frontmatter
import numpy as np
import pandas as pd
from loguru import logger

from .config import NOTE_SUFFIX, VAULT_DIR
from .documents import Document, InMemoryDocumentStore


# ---------------------------
# Markdown vault
# ---------------------------

def _is_hidden(rel: Path) -> bool:
    # .obsidian/, .trash/, dotfiles
    return any(part.startswith(".") for part in rel.parts)


def read_note(path: Path, root: Path) -> Document:
    """
    Parse one note's YAML front matter into a Document.

    Unparseable front matter is logged and the note is kept with no fields.
    """
    rel = path.relative_to(root).as_posix()
    try:
        post = frontmatter.load(str(path))
        fields: Dict[str, Any] = dict(post.metadata or {})
    except Exception as e:
        logger.warning("Failed to parse front matter in {}: {}", rel, e)
        fields = {}
    return Document(path=rel, fields=fields)


def load_vault_documents(root: Path = VAULT_DIR) -> List[Document]:
    """All notes under ``root`` in path order, skipping hidden folders."""
    root = Path(root)
    if not root.exists():
        raise FileNotFoundError(f"Vault path not found: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Vault path is not a directory: {root}")

    logger.info("Scanning vault {}", root)
    docs: List[Document] = []
    for md_file in sorted(root.rglob(f"*{NOTE_SUFFIX}")):
        if _is_hidden(md_file.relative_to(root)):
            continue
        docs.append(read_note(md_file, root))
    logger.info("Loaded {} notes from vault", len(docs))
    return docs


def load_vault(root: Path = VAULT_DIR, current_path: Optional[str] = None) -> InMemoryDocumentStore:
    return InMemoryDocumentStore(load_vault_documents(root), current_path=current_path)


# ---------------------------
# Tabular exports
# ---------------------------

def _cell_value(value: Any) -> Any:
    """Convert a DataFrame cell into a plain scalar/list, or None when missing."""
    if isinstance(value, (list, tuple, np.ndarray)):
        items = [_cell_value(v) for v in list(value)]
        return [v for v in items if v is not None]
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    if isinstance(value, np.generic):
        return value.item()
    return value


def documents_from_frame(df: pd.DataFrame, path_col: str = "path") -> List[Document]:
    """
    One Document per row; every non-missing column other than ``path_col``
    becomes a field. Comma-separated strings are kept as single values.
    """
    if path_col not in df.columns:
        raise KeyError(f"DataFrame must contain a '{path_col}' column. Found: {list(df.columns)}")

    field_cols = [c for c in df.columns if c != path_col]
    docs: List[Document] = []
    for _, row in df.iterrows():
        raw_path = _cell_value(row[path_col])
        path = str(raw_path).strip() if raw_path is not None else ""
        if not path:
            logger.warning("Skipping row without a path")
            continue
        fields: Dict[str, Any] = {}
        for col in field_cols:
            val = _cell_value(row[col])
            if val is None or val == []:
                continue
            fields[str(col)] = val
        docs.append(Document(path=path, fields=fields))
    logger.info("Built {} documents from DataFrame", len(docs))
    return docs


def load_csv_store(path: Path, path_col: str = "path", current_path: Optional[str] = None) -> InMemoryDocumentStore:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    logger.info("Loading documents from {}", path)
    df = pd.read_csv(path, encoding="utf-8")
    return InMemoryDocumentStore(documents_from_frame(df, path_col=path_col), current_path=current_path)
