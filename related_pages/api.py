from __future__ import annotations

"""
FastAPI application exposing related-page lookups over a loaded vault.

- GET  /health   -> {"status": "healthy"}
- POST /related  -> ranked related pages for one note path
"""

from typing import Any, Mapping, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from .config import (
    VAULT_DIR,
    HealthResponse,
    RelatedRequest,
    RelatedResponse,
)
from .documents import InMemoryDocumentStore
from .errors import ConfigurationError
from .render import to_api_items
from .scoring import compute_related
from .vault import load_vault


def run_related(
    path: str,
    store: InMemoryDocumentStore,
    options: Optional[Mapping[str, Any]] = None,
) -> RelatedResponse:
    """Score ``path`` against ``store``; raises KeyError / ConfigurationError."""
    reference = store.get_by_path(path)
    results = compute_related(reference, store, options or {})
    return RelatedResponse(reference=reference.path, related=to_api_items(results))


# -----------------------
# FastAPI app + startup
# -----------------------

app = FastAPI()
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

_store: Optional[InMemoryDocumentStore] = None


@app.on_event("startup")
def startup_event() -> None:
    global _store
    logger.info("Starting app warmup...")
    try:
        _store = load_vault(VAULT_DIR)
    except (FileNotFoundError, NotADirectoryError) as e:
        _store = None
        logger.warning("Vault not loaded: {}", e)
        return
    logger.info("Loaded vault with {} notes", len(_store))


def set_store(store: Optional[InMemoryDocumentStore]) -> None:
    global _store
    _store = store


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="healthy")


@app.post("/related", response_model=RelatedResponse)
def related(req: RelatedRequest) -> RelatedResponse:
    path = req.path.strip()
    if not path:
        raise HTTPException(status_code=422, detail="Path must be non-empty")
    if _store is None:
        raise HTTPException(status_code=503, detail="Vault not loaded")
    try:
        return run_related(path, _store, req.options)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown page: {path}")
    except ConfigurationError as e:
        raise HTTPException(status_code=422, detail=str(e))
