# tests/test_snippet.py

import math

import pytest

from ocr_snippets.domain.models import OcrBox, OcrPage
from ocr_snippets.domain.snippet import (
    OcrSnippet,
    SnippetBuilder,
    snippet_sort_key,
    sort_snippets,
)


def _snippet(score: float, text: str = "text") -> OcrSnippet:
    builder = SnippetBuilder(text, [OcrPage("1")], [OcrBox(0, 0, 10, 10, page_id="1")])
    builder.set_score(score)
    return builder.build()


# ── Ordering ──────────────────────────────────────────────────────────────────

def test_ordering_is_trichotomous():
    a, b = _snippet(1.0), _snippet(2.0)
    assert a < b and not a == b and not a > b
    assert a.compare_to(b) == -1
    assert b.compare_to(a) == 1
    assert a.compare_to(_snippet(1.0, text="other")) == 0


def test_ordering_is_transitive():
    low, mid, high = _snippet(-1.5), _snippet(0.0), _snippet(3.0)
    assert low < mid and mid < high and low < high
    assert sorted([high, low, mid]) == [low, mid, high]


def test_equal_scores_compare_equal_but_values_differ():
    a, b = _snippet(1.0, text="a"), _snippet(1.0, text="b")
    assert a <= b and a >= b
    assert a != b


def test_nan_sorts_after_every_number():
    nan, inf = _snippet(float("nan")), _snippet(float("inf"))
    assert inf < nan
    assert nan.compare_to(_snippet(float("nan"))) == 0
    assert sorted([nan, inf, _snippet(-1.0)])[-1] is nan


def test_sort_snippets_descending_keeps_ties_in_input_order():
    first, second = _snippet(1.0, text="first"), _snippet(1.0, text="second")
    nan = _snippet(float("nan"))
    best = _snippet(5.0)

    ranked = sort_snippets([nan, first, best, second])

    assert ranked == [best, first, second, nan]


def test_sort_snippets_ascending():
    ranked = sort_snippets([_snippet(2.0), _snippet(float("nan")), _snippet(1.0)], descending=False)
    assert [s.score for s in ranked[:2]] == [1.0, 2.0]
    assert math.isnan(ranked[2].score)


def test_snippet_sort_key_puts_nan_last_both_ways():
    nan = _snippet(float("nan"))
    assert snippet_sort_key(nan) > snippet_sort_key(_snippet(1e9))
    assert snippet_sort_key(nan, descending=True) > snippet_sort_key(_snippet(-1e9), descending=True)


# ── Builder ───────────────────────────────────────────────────────────────────

def test_highlight_spans_keep_append_order_across_score_changes():
    builder = SnippetBuilder("text")
    g1 = [OcrBox(0, 0, 1, 1), OcrBox(1, 0, 2, 1)]
    g2 = [OcrBox(5, 5, 6, 6)]
    g3 = [OcrBox(9, 9, 10, 10)]

    builder.add_highlight_span(g1)
    builder.set_score(1.0)
    builder.add_highlight_span(g2)
    builder.set_score(2.0)
    builder.add_highlight_span(g3)

    assert builder.highlight_spans == (tuple(g1), tuple(g2), tuple(g3))
    assert builder.build().highlight_spans == (tuple(g1), tuple(g2), tuple(g3))


def test_empty_highlight_group_is_accepted():
    builder = SnippetBuilder("text")
    builder.add_highlight_span([])
    assert builder.build().to_output_tree()["highlights"] == [[]]


def test_score_defaults_to_zero_and_accepts_anything():
    builder = SnippetBuilder("text")
    assert builder.get_score() == 0.0

    builder.set_score(-3.0)
    assert builder.score == -3.0

    builder.score = float("nan")
    assert math.isnan(builder.build().score)


def test_build_is_a_snapshot():
    builder = SnippetBuilder("text")
    builder.add_highlight_span([OcrBox(0, 0, 1, 1)])
    snippet = builder.build()
    tree = snippet.to_output_tree()

    builder.add_highlight_span([OcrBox(2, 2, 3, 3)])

    assert len(snippet.highlight_spans) == 1
    assert tree == snippet.to_output_tree()


def test_adding_highlights_without_tracking_raises():
    builder = SnippetBuilder("text", track_highlights=False)
    with pytest.raises(RuntimeError, match="disabled"):
        builder.add_highlight_span([OcrBox(0, 0, 1, 1)])


def test_with_score_returns_rescored_copy():
    snippet = _snippet(1.0)
    rescored = snippet.with_score(4.0)
    assert rescored.score == 4.0
    assert snippet.score == 1.0
    assert rescored.text == snippet.text


# ── Output tree ───────────────────────────────────────────────────────────────

def test_output_tree_literal_example():
    page = OcrPage("3")
    builder = SnippetBuilder(
        "the [[quick]] fox",
        pages=[page],
        snippet_regions=[OcrBox(0, 0, 100, 20, page_id="3")],
    )
    builder.add_highlight_span([OcrBox(4, 0, 10, 20)])
    builder.set_score(2.5)

    tree = builder.to_output_tree()

    assert tree == {
        "text": "the [[quick]] fox",
        "score": 2.5,
        "pages": [{"id": "3"}],
        "regions": [{"pageIdx": 0, "ulx": 0, "uly": 0, "lrx": 100, "lry": 20}],
        "highlights": [[{"ulx": 4, "uly": 0, "lrx": 10, "lry": 20}]],
    }
    assert list(tree) == ["text", "score", "pages", "regions", "highlights"]


def test_output_tree_omits_pages_when_empty():
    tree = SnippetBuilder("text", pages=[], snippet_regions=[OcrBox(0, 0, 1, 1)]).to_output_tree()
    assert "pages" not in tree
    assert list(tree) == ["text", "score", "regions", "highlights"]


def test_output_tree_includes_single_page():
    tree = SnippetBuilder("text", pages=[OcrPage("p1", 100, 200)]).to_output_tree()
    assert tree["pages"] == [{"id": "p1", "width": 100, "height": 200}]


def test_output_tree_always_has_regions():
    tree = SnippetBuilder("text", pages=[OcrPage("p1")], snippet_regions=[]).to_output_tree()
    assert tree["regions"] == []


def test_highlight_boxes_are_not_resolved_against_pages():
    pages = [OcrPage("a"), OcrPage("b")]
    same_geometry = OcrBox(4, 0, 10, 20, page_id="b")
    builder = SnippetBuilder("text", pages=pages, snippet_regions=[same_geometry])
    builder.add_highlight_span([same_geometry])

    tree = builder.to_output_tree()

    assert tree["regions"][0]["pageIdx"] == 1
    assert "pageIdx" not in tree["highlights"][0][0]


def test_no_highlights_with_tracking_serializes_empty_list():
    tree = SnippetBuilder("text").to_output_tree()
    assert tree["highlights"] == []


def test_no_highlights_without_tracking_omits_key():
    tree = SnippetBuilder("text", track_highlights=False).to_output_tree()
    assert "highlights" not in tree


def test_score_is_serialized_as_float():
    builder = SnippetBuilder("text")
    builder.set_score(3)
    score = builder.to_output_tree()["score"]
    assert isinstance(score, float) and score == 3.0


def test_region_on_foreign_page_fails_serialization():
    snippet = SnippetBuilder(
        "text",
        pages=[OcrPage("1")],
        snippet_regions=[OcrBox(0, 0, 1, 1, page_id="2")],
    ).build()
    with pytest.raises(ValueError, match="'2'"):
        snippet.to_output_tree()
