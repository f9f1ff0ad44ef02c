"""
Trace sinks observing the scorer at fixed checkpoints.

The scorer calls, in order:
  criteria_resolved -> paths_scored -> field_matched (once per field) -> ranked

Sinks are purely observational; nothing they do affects the results.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Protocol, Sequence, Tuple

from loguru import logger

from .render import markdown_table

if TYPE_CHECKING:  # pragma: no cover
    from .config import RelatedOptions
    from .criteria import CriteriaResolution, ResolvedCriterion
    from .documents import Document
    from .scoring import RelatedResult


class TraceSink(Protocol):
    def criteria_resolved(
        self, reference: "Document", options: "RelatedOptions", resolution: "CriteriaResolution"
    ) -> None: ...

    def paths_scored(
        self, directory: Tuple[str, ...], scores: Dict[str, int], enabled: bool
    ) -> None: ...

    def field_matched(self, criterion: "ResolvedCriterion", matches: Dict[str, int]) -> None: ...

    def ranked(
        self, considered: int, max_possible_score: float, results: Sequence["RelatedResult"]
    ) -> None: ...


class NullTraceSink:
    def criteria_resolved(self, reference, options, resolution) -> None:
        pass

    def paths_scored(self, directory, scores, enabled) -> None:
        pass

    def field_matched(self, criterion, matches) -> None:
        pass

    def ranked(self, considered, max_possible_score, results) -> None:
        pass


class LoguruTraceSink:
    """Emit every checkpoint as a DEBUG log line."""

    def criteria_resolved(self, reference, options, resolution) -> None:
        logger.debug(
            "Scoring related pages for {} (fields={}, skipped={}, ignored={}, include_path={}, strict={})",
            reference.path,
            resolution.fields,
            resolution.skipped,
            resolution.ignored,
            options.include_path,
            options.effective_strict_path,
        )

    def paths_scored(self, directory, scores, enabled) -> None:
        if not enabled:
            logger.debug("Path scoring disabled")
            return
        logger.debug("Directory '{}': {} pages scored by path", "/".join(directory), len(scores))

    def field_matched(self, criterion, matches) -> None:
        logger.debug(
            "Field '{}' targets {}: {} matching pages", criterion.field, list(criterion.targets), len(matches)
        )

    def ranked(self, considered, max_possible_score, results) -> None:
        logger.debug(
            "Ranked {} of {} candidates (max possible score {})",
            len(results),
            considered,
            max_possible_score,
        )


class RecordingTraceSink:
    """Keep every checkpoint as an ``(event, payload)`` pair."""

    def __init__(self) -> None:
        self.events: List[Tuple[str, Dict[str, Any]]] = []

    def names(self) -> List[str]:
        return [name for name, _ in self.events]

    def criteria_resolved(self, reference, options, resolution) -> None:
        self.events.append(
            (
                "criteria_resolved",
                {
                    "reference": reference.path,
                    "fields": resolution.fields,
                    "targets": {c.field: list(c.targets) for c in resolution.resolved},
                    "skipped": list(resolution.skipped),
                    "ignored": list(resolution.ignored),
                },
            )
        )

    def paths_scored(self, directory, scores, enabled) -> None:
        self.events.append(
            ("paths_scored", {"directory": "/".join(directory), "scores": dict(scores), "enabled": enabled})
        )

    def field_matched(self, criterion, matches) -> None:
        self.events.append(("field_matched", {"field": criterion.field, "matches": dict(matches)}))

    def ranked(self, considered, max_possible_score, results) -> None:
        self.events.append(
            (
                "ranked",
                {
                    "considered": considered,
                    "max_possible_score": max_possible_score,
                    "paths": [r.document.path for r in results],
                },
            )
        )


class MarkdownTraceSink:
    """
    Build a human-readable debug report (parameter dump, per-step counts,
    final table) as Markdown paragraphs.
    """

    def __init__(self, table_fields: Sequence[str] = ("type", "domain", "subject")) -> None:
        self.lines: List[str] = []
        self.table_fields = list(table_fields)

    def render(self) -> str:
        return "\n\n".join(self.lines)

    def criteria_resolved(self, reference, options, resolution) -> None:
        self.lines.append("### DEBUG: related pages")
        self.lines.append(f"**Current file:** {reference.path}")
        for name in self.table_fields:
            self.lines.append(f"**Current {name}:** {reference.get(name)}")
        self.lines.append(f"**Fields to match:** {', '.join(resolution.fields) or 'none'}")
        for crit in resolution.resolved:
            values = ", ".join(str(v) for v in crit.targets)
            self.lines.append(f"- `{crit.field}` ({crit.mode.value}): {values}")
        if resolution.skipped:
            self.lines.append(f"**Skipped (no current value):** {', '.join(resolution.skipped)}")
        if resolution.ignored:
            self.lines.append(f"**Ignored:** {', '.join(resolution.ignored)}")
        self.lines.append(
            f"**Include path:** {options.include_path} | **Strict path:** {options.effective_strict_path}"
            f" | **Min score:** {options.min_score} | **Max results:** {options.max_results}"
            f" | **Score multiplier:** {options.score_multiplier}"
        )
        self.lines.append("---")

    def paths_scored(self, directory, scores, enabled) -> None:
        self.lines.append("**Step 1: path proximity**")
        if not enabled:
            self.lines.append("Path scoring disabled")
        else:
            self.lines.append(f"Directory path: {'/'.join(directory) or '(root)'}")
            self.lines.append(f"Files found under path: {len(scores)}")
            for path, pts in sorted(scores.items()):
                self.lines.append(f"- {path}: {pts}")
        self.lines.append("---")

    def field_matched(self, criterion, matches) -> None:
        values = ", ".join(str(v) for v in criterion.targets)
        self.lines.append(f"**Field '{criterion.field}'** ({values}): {len(matches)} matching pages")
        for path, count in sorted(matches.items()):
            self.lines.append(f"- {path}: {count} matching values")

    def ranked(self, considered, max_possible_score, results) -> None:
        self.lines.append("---")
        self.lines.append(f"**Candidates considered:** {considered} | **Max possible score:** {max_possible_score}")
        self.lines.append(f"**Final results: {len(results)} pages**")
        if not results:
            self.lines.append("No pages found matching the criteria")
            return
        headers = ["Page", "Confidence", "Same Path", "Scores"] + [f.capitalize() for f in self.table_fields]
        rows = []
        for r in results:
            breakdown = ", ".join(f"{k}={v:g}" for k, v in r.scores.items())
            row = [r.document.name, f"{r.confidence:.2f}%", "yes" if r.in_same_path else "no", breakdown]
            row += [r.document.get(f) for f in self.table_fields]
            rows.append(row)
        self.lines.append(markdown_table(headers, rows))
