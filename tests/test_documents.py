import numpy as np
import pytest

from related_pages.documents import Document, InMemoryDocumentStore, as_value_list, split_path


def test_as_value_list_shapes():
    assert as_value_list(None) == []
    assert as_value_list("") == []
    assert as_value_list("  ") == []
    assert as_value_list("a") == ["a"]
    assert as_value_list(["a", None, "", "b"]) == ["a", "b"]
    assert as_value_list(("a",)) == ["a"]
    assert as_value_list(np.array(["x", "y"])) == ["x", "y"]
    assert as_value_list(3) == [3]


def test_document_name_and_directory():
    doc = Document("Tech/Time/Session Open.md", {"type": "concept"})
    assert doc.name == "Session Open"
    assert doc.directory == ("Tech", "Time")
    assert doc.get("type") == "concept"
    assert doc.get("missing") is None
    assert split_path("/a//b/") == ["a", "b"]


def test_store_lookup_and_current():
    a = Document("a.md", {"type": "hub"})
    b = Document("b.md", {"type": ["hub", "concept"]})
    dup = Document("a.md", {"type": "other"})
    store = InMemoryDocumentStore([a, b, dup], current_path="b.md")

    assert len(store) == 2
    assert "a.md" in store
    assert store.get_by_path("a.md").get("type") == "hub"
    assert store.current_document() is b
    assert store.field_value(b, "type") == ["hub", "concept"]

    with pytest.raises(KeyError):
        store.get_by_path("missing.md")


def test_get_by_field_matches_any_shared_value():
    docs = [
        Document("a.md", {"levels": ["1", "2"]}),
        Document("b.md", {"levels": "3"}),
        Document("c.md", {}),
    ]
    store = InMemoryDocumentStore(docs)
    assert [d.path for d in store.get_by_field("levels", ["2", "3"])] == ["a.md", "b.md"]
    assert store.get_by_field("levels", None) == []
