from __future__ import annotations

"""
Relevance scoring for related pages.

Pipeline per call:
1. resolve match criteria against the reference page
2. path proximity points (same folder = 2, deeper folder = 1)
3. field matches (matching values x score_multiplier per field)
4. confidence = total / max possible score * 100
5. strict-path filter -> sort -> min score -> truncate

Pure function of (reference, store, options); nothing is cached between calls.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from loguru import logger

from .config import PATH_MAX_POINTS, PATH_SCORE_SOURCE, RelatedOptions
from .criteria import (
    CriteriaResolution,
    ResolvedCriterion,
    parse_match_criteria,
    resolve_criteria,
)
from .documents import Document, DocumentStore, as_value_list
from .errors import ConfigurationError
from .paths import directory_of, score_paths
from .trace import LoguruTraceSink, NullTraceSink, TraceSink

OptionsLike = Union[RelatedOptions, Mapping[str, Any], None]


@dataclass
class RelatedResult:
    """One ranked page with its confidence percentage."""

    document: Document
    confidence: float
    in_same_path: bool
    total_score: float = 0.0
    scores: Dict[str, float] = field(default_factory=dict)

    @property
    def path(self) -> str:
        return self.document.path


def _coerce_options(options: OptionsLike) -> RelatedOptions:
    if isinstance(options, RelatedOptions):
        return options
    return RelatedOptions.from_mapping(options)


def max_possible_score(resolution: CriteriaResolution, options: RelatedOptions) -> float:
    """Upper bound of a candidate's total score; identical for every candidate."""
    total = float(PATH_MAX_POINTS) if options.path_scoring_enabled else 0.0
    for crit in resolution.resolved:
        total += crit.max_points(options.score_multiplier)
    return total


def confidence_for(total_score: float, max_score: float) -> float:
    if max_score <= 0:
        return 0.0
    return (total_score / max_score) * 100.0


class RelevanceScorer:
    """
    Rank documents of a store by similarity to a reference document.

    ``tracer`` receives checkpoint events; when omitted, a loguru sink is used
    if ``options.debug`` is set and a no-op sink otherwise.
    """

    def __init__(self, options: OptionsLike = None, tracer: Optional[TraceSink] = None):
        self.options = _coerce_options(options)
        self.criteria = parse_match_criteria(self.options.match_criteria)
        if tracer is None:
            tracer = LoguruTraceSink() if self.options.debug else NullTraceSink()
        self.tracer = tracer

    def _match_field(
        self,
        crit: ResolvedCriterion,
        reference: Document,
        store: DocumentStore,
        documents: List[Document],
    ) -> Dict[str, int]:
        """Map candidate path -> number of target values it carries."""
        matches: Dict[str, int] = {}
        for doc in documents:
            if doc.path == reference.path:
                continue
            have = as_value_list(store.field_value(doc, crit.field))
            if not have:
                continue
            count = sum(1 for t in crit.targets if t in have)
            if count > 0:
                matches[doc.path] = count
        return matches

    def score(self, reference: Document, store: DocumentStore) -> List[RelatedResult]:
        opts = self.options
        documents = list(store.all_documents())
        by_path: Dict[str, Document] = {d.path: d for d in documents}

        resolution = resolve_criteria(self.criteria, reference, store)
        self.tracer.criteria_resolved(reference, opts, resolution)

        accumulator: Dict[str, Dict[str, float]] = {}

        # path proximity
        path_scores: Dict[str, int] = {}
        if opts.path_scoring_enabled:
            path_scores = score_paths(reference, documents)
            for path, pts in path_scores.items():
                accumulator.setdefault(path, {})[PATH_SCORE_SOURCE] = float(pts)
        self.tracer.paths_scored(directory_of(reference.path), path_scores, opts.path_scoring_enabled)

        # field matches
        for crit in resolution.resolved:
            matches = self._match_field(crit, reference, store, documents)
            for path, count in matches.items():
                accumulator.setdefault(path, {})[crit.field] = count * opts.score_multiplier
            self.tracer.field_matched(crit, matches)

        max_score = max_possible_score(resolution, opts)
        if not math.isfinite(max_score):
            raise ConfigurationError(
                f"score_multiplier {opts.score_multiplier} overflows the maximum score for {len(resolution.resolved)} fields"
            )

        results: List[RelatedResult] = []
        for path, scores in accumulator.items():
            total = sum(scores.values())
            conf = confidence_for(total, max_score)
            if conf > 100.0:
                logger.warning(
                    "Confidence {:.2f} for {} exceeds 100 (total={}, max={})", conf, path, total, max_score
                )
            results.append(
                RelatedResult(
                    document=by_path[path],
                    confidence=conf,
                    in_same_path=scores.get(PATH_SCORE_SOURCE, 0.0) > 0,
                    total_score=total,
                    scores=dict(scores),
                )
            )

        considered = len(results)
        if opts.effective_strict_path:
            results = [r for r in results if r.in_same_path]

        results.sort(key=lambda r: (-r.confidence, r.document.path))

        threshold = opts.min_score * 100.0
        results = [r for r in results if r.confidence >= threshold]
        results = results[: opts.max_results]

        self.tracer.ranked(considered, max_score, results)
        logger.info(
            "Found {} related pages for {} ({} candidates)", len(results), reference.path, considered
        )
        return results


def compute_related(
    reference: Optional[Document],
    store: DocumentStore,
    options: OptionsLike = None,
    tracer: Optional[TraceSink] = None,
) -> List[RelatedResult]:
    """
    Ranked related pages for ``reference`` (defaults to the store's current document).

    Raises ConfigurationError for invalid options. Missing fields, empty
    stores and empty criteria simply produce fewer (or no) results.
    """
    scorer = RelevanceScorer(options, tracer=tracer)
    if reference is None:
        reference = store.current_document()
    if reference is None:
        raise ConfigurationError("no reference document given and the store has no current document")
    return scorer.score(reference, store)
