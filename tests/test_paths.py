from related_pages.documents import Document
from related_pages.paths import (
    directory_of,
    documents_under_directory,
    path_proximity_score,
    score_paths,
)


def test_directory_of_drops_file_name():
    assert directory_of("A/B/doc.md") == ("A", "B")
    assert directory_of("doc.md") == ()


def test_path_proximity_score_levels():
    ref = "A/B/doc.md"
    assert path_proximity_score(ref, "A/B/other.md") == 2
    assert path_proximity_score(ref, "A/B/C/other.md") == 1
    assert path_proximity_score(ref, "A/B/C/D/deep.md") == 1
    assert path_proximity_score(ref, "A/other.md") == 0
    assert path_proximity_score(ref, ref) == 0


def test_prefix_is_compared_by_segment():
    assert path_proximity_score("A/B/doc.md", "A/BC/other.md") == 0


def test_reference_at_root_treats_every_folder_as_descendant():
    assert path_proximity_score("root.md", "other.md") == 2
    assert path_proximity_score("root.md", "X/nested.md") == 1


def test_score_paths_omits_zero_scores():
    ref = Document("A/B/doc.md")
    docs = [ref, Document("A/B/x.md"), Document("A/y.md"), Document("A/B/C/z.md")]
    assert score_paths(ref, docs) == {"A/B/x.md": 2, "A/B/C/z.md": 1}


def test_documents_under_directory_excludes_reference():
    ref = Document("Tech/Time/concept.md")
    docs = [ref, Document("Tech/Time/other.md"), Document("Tech/Price/p.md")]
    assert [d.path for d in documents_under_directory(ref, docs)] == ["Tech/Time/other.md"]
