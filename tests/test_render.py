from related_pages.config import NO_RESULTS_TEXT
from related_pages.documents import Document
from related_pages.render import markdown_table, render_results, results_to_frame, to_api_items
from related_pages.scoring import RelatedResult


def _results():
    return [
        RelatedResult(document=Document("A/Near Note.md"), confidence=100.0, in_same_path=True),
        RelatedResult(document=Document("B/far.md"), confidence=66.6666, in_same_path=False),
    ]


def test_results_to_frame_structure():
    df = results_to_frame(_results())
    assert list(df.columns) == ["page", "path", "confidence", "match"]
    assert df["page"].tolist() == ["Near Note", "far"]
    assert df["confidence"].tolist() == [100.0, 66.67]
    assert df["match"].tolist() == ["Same path", "Cross-reference"]


def test_results_to_frame_empty():
    df = results_to_frame([])
    assert df.empty
    assert list(df.columns) == ["page", "path", "confidence", "match"]


def test_render_results_table_and_header():
    text = render_results(_results(), header_text="Related", header_level=2)
    lines = text.splitlines()
    assert lines[0] == "## Related"
    assert "| Page | Confidence | Match |" in lines
    assert "| [[Near Note]] | 100.00% | Same path |" in lines
    assert "| [[far]] | 66.67% | Cross-reference |" in lines


def test_render_results_empty_and_no_header():
    assert render_results([], header_level=0) == NO_RESULTS_TEXT


def test_markdown_table_escapes_pipes_and_joins_lists():
    table = markdown_table(["A", "B"], [["x|y", ["p", "q"]], [None, 3]])
    assert table.splitlines()[2] == "| x\\|y | p, q |"
    assert table.splitlines()[3] == "|  | 3 |"


def test_to_api_items():
    items = to_api_items(_results())
    assert [i.path for i in items] == ["A/Near Note.md", "B/far.md"]
    assert items[0].in_same_path is True
    assert items[1].match == "Cross-reference"
