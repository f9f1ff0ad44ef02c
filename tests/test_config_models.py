import pytest

from related_pages.config import (
    DEFAULT_MATCH_CRITERIA,
    HUB_FOOTER_OPTIONS,
    HealthResponse,
    RelatedOptions,
    RelatedPageItem,
    RelatedResponse,
    build_options,
)
from related_pages.errors import ConfigurationError


def test_options_defaults():
    opts = RelatedOptions()
    assert opts.match_criteria == DEFAULT_MATCH_CRITERIA
    assert opts.include_path is True
    assert opts.strict_path is False
    assert opts.min_score == pytest.approx(0.66)
    assert opts.max_results == 10
    assert opts.score_multiplier == pytest.approx(1.5)
    assert opts.path_scoring_enabled
    assert not opts.effective_strict_path


def test_options_are_immutable():
    opts = RelatedOptions()
    with pytest.raises(Exception):
        opts.max_results = 3


def test_include_path_strict_forces_strict_path():
    opts = RelatedOptions.from_mapping({"includePath": "strict"})
    assert opts.path_scoring_enabled
    assert opts.effective_strict_path

    off = RelatedOptions.from_mapping({"include_path": False})
    assert not off.path_scoring_enabled


def test_explicit_empty_criteria_is_kept():
    assert RelatedOptions.from_mapping({"match_criteria": {}}).match_criteria == {}


def test_from_mapping_rejects_non_mapping():
    with pytest.raises(ConfigurationError):
        RelatedOptions.from_mapping(["max_results", 3])


def test_build_options_caller_overrides_preset():
    opts = build_options(HUB_FOOTER_OPTIONS, {"maxResults": 3, "matchCriteria": {"type": True}})
    assert opts.max_results == 3
    assert opts.min_score == pytest.approx(0.6)
    assert opts.match_criteria == {"type": True}


def test_response_models():
    item = RelatedPageItem(path="a/b.md", name="b", confidence=75.0, in_same_path=True, match="Same path")
    resp = RelatedResponse(reference="a/r.md", related=[item])
    assert len(resp.related) == 1
    assert HealthResponse(status="healthy").status == "healthy"
