from __future__ import annotations

"""Ready-made "related pages" sections built from the option presets."""

from typing import Any, Mapping, Optional

from .config import (
    CONCEPT_FOOTER_OPTIONS,
    DEFAULT_HEADER_LEVEL,
    FOOTER_HEADER,
    HUB_FOOTER_OPTIONS,
    SIMILAR_PAGES_HEADER,
    SIMILAR_PAGES_OPTIONS,
    build_options,
)
from .documents import Document, DocumentStore
from .render import render_results
from .scoring import compute_related
from .trace import TraceSink

RULE = "---"


def similar_pages_section(
    store: DocumentStore,
    reference: Optional[Document] = None,
    options: Optional[Mapping[str, Any]] = None,
    header_text: str = SIMILAR_PAGES_HEADER,
    header_level: int = DEFAULT_HEADER_LEVEL,
    preset: Mapping[str, Any] = SIMILAR_PAGES_OPTIONS,
    tracer: Optional[TraceSink] = None,
) -> str:
    """Score with ``preset`` overridden by ``options`` and render the table."""
    opts = build_options(preset, options)
    results = compute_related(reference, store, opts, tracer=tracer)
    return render_results(results, header_text=header_text, header_level=header_level)


def concept_footer(
    store: DocumentStore,
    reference: Optional[Document] = None,
    options: Optional[Mapping[str, Any]] = None,
    header_text: str = FOOTER_HEADER,
    header_level: int = DEFAULT_HEADER_LEVEL,
) -> str:
    body = similar_pages_section(
        store, reference, options, header_text, header_level, preset=CONCEPT_FOOTER_OPTIONS
    )
    return f"{RULE}\n\n{body}"


def hub_footer(
    store: DocumentStore,
    reference: Optional[Document] = None,
    options: Optional[Mapping[str, Any]] = None,
    header_text: str = FOOTER_HEADER,
    header_level: int = DEFAULT_HEADER_LEVEL,
) -> str:
    body = similar_pages_section(
        store, reference, options, header_text, header_level, preset=HUB_FOOTER_OPTIONS
    )
    return f"{RULE}\n\n{body}"
