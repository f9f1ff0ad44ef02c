import pytest

from related_pages.criteria import MatchMode, parse_match_criteria, resolve_criteria
from related_pages.documents import Document, InMemoryDocumentStore
from related_pages.errors import ConfigurationError


def test_parse_match_criteria_modes_keep_order():
    crits = parse_match_criteria({"subject": True, "type": False, "domain": None, "level": ["b", "a", "b"]})

    assert [c.field for c in crits] == ["subject", "type", "domain", "level"]
    assert [c.mode for c in crits] == [
        MatchMode.USE_CURRENT,
        MatchMode.IGNORE,
        MatchMode.IGNORE,
        MatchMode.EXPLICIT,
    ]
    assert crits[3].explicit_values == ("b", "a", "b")


def test_parse_match_criteria_scalar_is_explicit():
    (crit,) = parse_match_criteria({"unit": "u1"})
    assert crit.mode is MatchMode.EXPLICIT
    assert crit.explicit_values == ("u1",)


@pytest.mark.parametrize("raw", [["subject"], {"subject": {"a": 1}}, {"tags": ["a", ["b"]]}, {" ": True}])
def test_parse_match_criteria_rejects_malformed(raw):
    with pytest.raises(ConfigurationError):
        parse_match_criteria(raw)


def test_resolve_criteria_reads_current_values_and_skips_absent():
    ref = Document("r.md", {"type": "hub", "tags": ["a", "b"], "empty": ""})
    store = InMemoryDocumentStore([ref])
    crits = parse_match_criteria(
        {"type": True, "tags": True, "domain": True, "empty": True, "level": [], "unit": "u", "x": False}
    )

    res = resolve_criteria(crits, ref, store)

    assert res.fields == ["type", "tags", "unit"]
    assert res.resolved[0].targets == ("hub",)
    assert res.resolved[1].targets == ("a", "b")
    assert res.skipped == ["domain", "empty", "level"]
    assert res.ignored == ["x"]
    assert res.resolved[1].max_points(1.5) == pytest.approx(3.0)
