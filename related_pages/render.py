from __future__ import annotations
"""
Presentation helpers: turn ranked results into a DataFrame, API items or a
Markdown "Page / Confidence / Match" table.

Nothing here affects scoring; the scorer returns plain results and callers
choose how to show them.
"""

from typing import TYPE_CHECKING, Any, Iterable, List, Sequence

import pandas as pd  # type: ignore
from loguru import logger

from .config import (
    CROSS_REFERENCE_LABEL,
    DEFAULT_HEADER_LEVEL,
    NO_RESULTS_TEXT,
    SAME_PATH_LABEL,
    SIMILAR_PAGES_HEADER,
    RelatedPageItem,
)

if TYPE_CHECKING:  # pragma: no cover
    from .scoring import RelatedResult

RESULT_COLUMNS = ["page", "path", "confidence", "match"]


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value).replace("|", "\\|").replace("\n", " ")


def markdown_table(headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    lines = [
        "| " + " | ".join(_cell(h) for h in headers) + " |",
        "| " + " | ".join("---" for _ in headers) + " |",
    ]
    for row in rows:
        lines.append("| " + " | ".join(_cell(v) for v in row) + " |")
    return "\n".join(lines)


def match_label(in_same_path: bool) -> str:
    return SAME_PATH_LABEL if in_same_path else CROSS_REFERENCE_LABEL


def page_link(name: str) -> str:
    return f"[[{name}]]"


def results_to_frame(results: Sequence["RelatedResult"]) -> pd.DataFrame:
    """One row per result in rank order; confidence rounded to 2 decimals."""
    rows = [
        {
            "page": r.document.name,
            "path": r.document.path,
            "confidence": round(float(r.confidence), 2),
            "match": match_label(r.in_same_path),
        }
        for r in results
    ]
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def to_api_items(results: Sequence["RelatedResult"]) -> List[RelatedPageItem]:
    items: List[RelatedPageItem] = []
    for r in results:
        items.append(
            RelatedPageItem(
                path=r.document.path,
                name=r.document.name,
                confidence=min(100.0, max(0.0, float(r.confidence))),
                in_same_path=r.in_same_path,
                match=match_label(r.in_same_path),
            )
        )
    return items


def render_results(
    results: Sequence["RelatedResult"],
    header_text: str = SIMILAR_PAGES_HEADER,
    header_level: int = DEFAULT_HEADER_LEVEL,
) -> str:
    """
    Markdown section: optional header, then a Page / Confidence / Match table,
    or NO_RESULTS_TEXT when there is nothing to show.

    ``header_level`` <= 0 suppresses the header; levels above 6 are clipped.
    """
    parts: List[str] = []
    if header_level > 0:
        parts.append(f"{'#' * min(header_level, 6)} {header_text}")

    if not results:
        parts.append(NO_RESULTS_TEXT)
        return "\n\n".join(parts)

    df = results_to_frame(results)
    rows = [
        [page_link(page), f"{conf:.2f}%", match]
        for page, conf, match in df[["page", "confidence", "match"]].itertuples(index=False, name=None)
    ]
    parts.append(markdown_table(["Page", "Confidence", "Match"], rows))
    logger.debug("Rendered {} related pages under '{}'", len(rows), header_text)
    return "\n\n".join(parts)
