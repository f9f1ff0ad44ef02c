from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Literal, Mapping, Optional, Union

from loguru import logger
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel, to_snake

from .errors import ConfigurationError


# ---------------------------
# Paths
# ---------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[1]

VAULT_DIR = Path(os.getenv("RELATED_PAGES_VAULT_DIR", str(PROJECT_ROOT / "vault")))
NOTE_SUFFIX = ".md"


# ---------------------------
# Scoring defaults
# ---------------------------

# Fields matched against the reference page when no criteria are given
DEFAULT_MATCH_CRITERIA: Dict[str, bool] = {
    "subject": True,
    "type": True,
    "domain": True,
}

DEFAULT_MIN_SCORE = float(os.getenv("RELATED_PAGES_MIN_SCORE", "0.66"))
DEFAULT_MAX_RESULTS = int(os.getenv("RELATED_PAGES_MAX_RESULTS", "10"))
DEFAULT_SCORE_MULTIPLIER = float(os.getenv("RELATED_PAGES_SCORE_MULTIPLIER", "1.5"))

# Path proximity points
PATH_SCORE_SOURCE = "path"
PATH_EXACT_FOLDER_POINTS = 2
PATH_SUBFOLDER_POINTS = 1
PATH_MAX_POINTS = PATH_EXACT_FOLDER_POINTS


# ---------------------------
# Presentation defaults
# ---------------------------

DEFAULT_HEADER_LEVEL = 3
SIMILAR_PAGES_HEADER = "Similar Pages"
FOOTER_HEADER = "Related Content"
NO_RESULTS_TEXT = "*No similar pages found.*"
SAME_PATH_LABEL = "Same path"
CROSS_REFERENCE_LABEL = "Cross-reference"

# Option presets for the standard page sections; caller keys override these
SIMILAR_PAGES_OPTIONS: Dict[str, Any] = {
    "match_criteria": {"type": True, "subject": True},
    "max_results": 5,
}

CONCEPT_FOOTER_OPTIONS: Dict[str, Any] = {
    "match_criteria": {"type": True, "subject": True},
    "max_results": 10,
    "min_score": 0.6,
}

HUB_FOOTER_OPTIONS: Dict[str, Any] = {
    "match_criteria": {"type": True, "subject": True, "domain": True},
    "max_results": 10,
    "min_score": 0.6,
}

PRESETS: Dict[str, Dict[str, Any]] = {
    "similar": SIMILAR_PAGES_OPTIONS,
    "concept": CONCEPT_FOOTER_OPTIONS,
    "hub": HUB_FOOTER_OPTIONS,
}


# ---------------------------
# Logging / observability
# ---------------------------

LOG_DIR = PROJECT_ROOT / "logs"
LOG_LEVEL = os.getenv("RELATED_PAGES_LOG_LEVEL", "INFO")


def configure_logging(level: str = LOG_LEVEL, log_file: Optional[Path] = None) -> None:
    """
    Reset loguru sinks: stderr at ``level`` plus an optional rotating file.

    A bare file name is placed under LOG_DIR.
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper())
    if log_file is not None:
        path = log_file if log_file.is_absolute() else LOG_DIR / log_file
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(path, level="DEBUG", rotation="5 MB", retention=3)
        logger.info("Logging to {}", path)


# ---------------------------
# Pydantic models shared around the app
# ---------------------------

Scalar = Union[StrictStr, StrictInt, StrictFloat]
CriterionValue = Optional[Union[StrictBool, Scalar, List[Scalar]]]


class RelatedOptions(BaseModel):
    """
    Immutable scoring options.

    Accepts snake_case names or the camelCase keys used by the note templates
    (``matchCriteria``, ``includePath``, ...). Unknown keys are rejected.
    Omitting ``match_criteria`` selects DEFAULT_MATCH_CRITERIA; an explicit
    empty mapping means "match no fields".
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    match_criteria: Optional[Dict[str, CriterionValue]] = Field(
        default=None, validate_default=True
    )
    include_path: Union[StrictBool, Literal["strict"]] = True
    strict_path: StrictBool = False
    min_score: float = Field(default=DEFAULT_MIN_SCORE, ge=0.0, le=1.0, allow_inf_nan=False)
    max_results: StrictInt = Field(default=DEFAULT_MAX_RESULTS, gt=0)
    score_multiplier: float = Field(default=DEFAULT_SCORE_MULTIPLIER, gt=0.0, allow_inf_nan=False)
    debug: StrictBool = False

    @field_validator("match_criteria")
    @classmethod
    def _default_and_check_fields(
        cls, v: Optional[Dict[str, CriterionValue]]
    ) -> Dict[str, CriterionValue]:
        if v is None:
            return dict(DEFAULT_MATCH_CRITERIA)
        cleaned: Dict[str, CriterionValue] = {}
        for field_name, value in v.items():
            key = field_name.strip()
            if not key:
                raise ValueError("match criteria field names must be non-empty")
            cleaned[key] = value
        return cleaned

    @property
    def path_scoring_enabled(self) -> bool:
        return self.include_path is not False

    @property
    def effective_strict_path(self) -> bool:
        return self.strict_path or self.include_path == "strict"

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]] = None) -> "RelatedOptions":
        """Validate a plain mapping, converting pydantic errors into ConfigurationError."""
        if raw is None:
            raw = {}
        if not isinstance(raw, Mapping):
            raise ConfigurationError(
                f"options must be a mapping, got {type(raw).__name__}"
            )
        try:
            return cls.model_validate(dict(raw))
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e


def build_options(
    preset: Optional[Mapping[str, Any]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> RelatedOptions:
    """
    Merge a preset with caller overrides (caller wins) and validate once.

    Keys are normalised to snake_case first so ``maxResults`` overrides a
    preset's ``max_results``.
    """
    merged: Dict[str, Any] = {}
    for source in (preset or {}, overrides or {}):
        if not isinstance(source, Mapping):
            raise ConfigurationError(
                f"options must be a mapping, got {type(source).__name__}"
            )
        for key, value in source.items():
            merged[to_snake(str(key))] = value
    return RelatedOptions.from_mapping(merged)


class RelatedPageItem(BaseModel):
    """One ranked page as exposed by the API."""

    path: str
    name: str
    confidence: float = Field(ge=0.0, le=100.0)
    in_same_path: bool
    match: str  # SAME_PATH_LABEL / CROSS_REFERENCE_LABEL


class RelatedRequest(BaseModel):
    """
    Request body for POST /related.
    """

    path: str = Field(..., min_length=1)
    options: Dict[str, Any] = Field(default_factory=dict)


class RelatedResponse(BaseModel):
    """
    Response body for POST /related.
    """

    reference: str
    related: List[RelatedPageItem]


class HealthResponse(BaseModel):
    """
    Response body for GET /health.
    """

    status: str
