from related_pages.documents import Document, InMemoryDocumentStore
from related_pages.scoring import compute_related
from related_pages.trace import LoguruTraceSink, MarkdownTraceSink, RecordingTraceSink


def _store():
    ref = Document("A/B/ref.md", {"type": "hub", "subject": "PKM"})
    docs = [
        ref,
        Document("A/B/sib.md", {"type": "hub", "subject": "PKM"}),
        Document("A/B/C/child.md", {"subject": "PKM"}),
        Document("Z/far.md", {"type": "hub"}),
    ]
    return ref, InMemoryDocumentStore(docs)


def test_recording_sink_captures_payloads():
    ref, store = _store()
    tracer = RecordingTraceSink()

    compute_related(ref, store, {"match_criteria": {"type": True, "subject": True, "domain": True}, "min_score": 0}, tracer=tracer)

    events = dict(tracer.events)
    assert events["criteria_resolved"]["targets"] == {"type": ["hub"], "subject": ["PKM"]}
    assert events["criteria_resolved"]["skipped"] == ["domain"]
    assert events["paths_scored"] == {
        "directory": "A/B",
        "scores": {"A/B/sib.md": 2, "A/B/C/child.md": 1},
        "enabled": True,
    }
    assert events["ranked"]["paths"] == ["A/B/sib.md", "A/B/C/child.md", "Z/far.md"]
    assert events["ranked"]["considered"] == 3


def test_markdown_sink_builds_report():
    ref, store = _store()
    tracer = MarkdownTraceSink()

    compute_related(ref, store, {"match_criteria": {"type": True}, "min_score": 0}, tracer=tracer)
    report = tracer.render()

    assert "**Current file:** A/B/ref.md" in report
    assert "Directory path: A/B" in report
    assert "**Field 'type'** (hub): 2 matching pages" in report
    assert "**Final results: 3 pages**" in report
    assert "| sib | 100.00% | yes | path=2, type=1.5 | hub |  | PKM |" in report


def test_markdown_sink_reports_no_results():
    ref, store = _store()
    tracer = MarkdownTraceSink()

    compute_related(ref, store, {"match_criteria": {}, "include_path": False}, tracer=tracer)
    report = tracer.render()

    assert "Path scoring disabled" in report
    assert "No pages found matching the criteria" in report


def test_debug_option_uses_loguru_sink():
    from related_pages.scoring import RelevanceScorer

    assert isinstance(RelevanceScorer({"debug": True}).tracer, LoguruTraceSink)
