from __future__ import annotations

"""
Match criteria: parsing the configured field rules and resolving them against
the reference page at call time.

Raw configuration maps a field name to:
- ``True``          -> use the reference page's current value
- ``False``/``None`` -> ignore the field
- scalar or list    -> explicit target value(s)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple

from loguru import logger

from .documents import Document, DocumentStore, as_value_list
from .errors import ConfigurationError

_SCALAR_TYPES = (str, int, float)


class MatchMode(str, Enum):
    USE_CURRENT = "use_current"
    EXPLICIT = "explicit"
    IGNORE = "ignore"


@dataclass(frozen=True)
class MatchCriterion:
    field: str
    mode: MatchMode
    explicit_values: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class ResolvedCriterion:
    """A criterion with concrete, non-empty target values."""

    field: str
    targets: Tuple[Any, ...]
    mode: MatchMode

    def max_points(self, score_multiplier: float) -> float:
        return len(self.targets) * score_multiplier


@dataclass
class CriteriaResolution:
    resolved: List[ResolvedCriterion] = field(default_factory=list)
    # fields dropped because the reference page has no value for them
    skipped: List[str] = field(default_factory=list)
    ignored: List[str] = field(default_factory=list)

    @property
    def fields(self) -> List[str]:
        return [c.field for c in self.resolved]


def _is_scalar(value: Any) -> bool:
    return isinstance(value, _SCALAR_TYPES) and not isinstance(value, bool)


def parse_match_criteria(raw: Optional[Mapping[str, Any]]) -> List[MatchCriterion]:
    """
    Turn the configured mapping into ordered MatchCriterion entries.

    Raises ConfigurationError for anything that is not a mapping of
    field -> bool/None/scalar/list-of-scalars.
    """
    if raw is None:
        return []
    if not isinstance(raw, Mapping):
        raise ConfigurationError(
            f"match criteria must be a mapping, got {type(raw).__name__}"
        )

    out: List[MatchCriterion] = []
    for field_name, value in raw.items():
        if not isinstance(field_name, str) or not field_name.strip():
            raise ConfigurationError(f"invalid match criteria field name: {field_name!r}")
        if value is None or value is False:
            out.append(MatchCriterion(field_name, MatchMode.IGNORE))
        elif value is True:
            out.append(MatchCriterion(field_name, MatchMode.USE_CURRENT))
        elif _is_scalar(value):
            out.append(MatchCriterion(field_name, MatchMode.EXPLICIT, (value,)))
        elif isinstance(value, (list, tuple)):
            bad = [v for v in value if not _is_scalar(v)]
            if bad:
                raise ConfigurationError(
                    f"match criteria for {field_name!r} must hold scalars, got {bad!r}"
                )
            out.append(MatchCriterion(field_name, MatchMode.EXPLICIT, tuple(value)))
        else:
            raise ConfigurationError(
                f"unsupported match criteria value for {field_name!r}: {value!r}"
            )
    return out


def resolve_criteria(
    criteria: List[MatchCriterion],
    reference: Document,
    store: DocumentStore,
) -> CriteriaResolution:
    """
    Resolve each criterion to its target values.

    A USE_CURRENT field the reference page lacks (or an explicit empty list)
    is dropped entirely: it adds nothing to a candidate's score and nothing
    to the maximum achievable score.
    """
    resolution = CriteriaResolution()
    for crit in criteria:
        if crit.mode is MatchMode.IGNORE:
            resolution.ignored.append(crit.field)
            continue

        if crit.mode is MatchMode.USE_CURRENT:
            targets = as_value_list(store.field_value(reference, crit.field))
        else:
            targets = list(crit.explicit_values)

        if not targets:
            logger.debug("No target values for field '{}'; skipping", crit.field)
            resolution.skipped.append(crit.field)
            continue

        resolution.resolved.append(ResolvedCriterion(crit.field, tuple(targets), crit.mode))
    return resolution
