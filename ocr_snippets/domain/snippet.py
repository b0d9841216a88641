# ocr_snippets/domain/snippet.py

import math
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence, Tuple

from .interfaces import OutputNode
from .models import OcrBox, OcrPage
from .output import OutputTree, build_output_tree, optional, required


HighlightGroup = Tuple[OcrBox, ...]


def _score_key(score: float) -> Tuple[bool, float]:
    # NaN compares greater than every number and equal to another NaN
    if math.isnan(score):
        return (True, 0.0)
    return (False, score)


@dataclass(frozen=True)
class OcrSnippet(OutputNode):
    """
    A finalized, highlighted passage of OCR text.

    Snippets compare by score only (ascending); value equality still
    covers every field. Build them through SnippetBuilder.
    """
    text: str
    pages: Tuple[OcrPage, ...] = ()
    snippet_regions: Tuple[OcrBox, ...] = ()
    highlight_spans: Optional[Tuple[HighlightGroup, ...]] = ()
    score: float = 0.0

    def with_score(self, score: float) -> "OcrSnippet":
        return replace(self, score=score)

    def compare_to(self, other: "OcrSnippet") -> int:
        """Return -1, 0 or 1 comparing the scores of both snippets."""
        mine, theirs = _score_key(self.score), _score_key(other.score)
        return (mine > theirs) - (mine < theirs)

    def __lt__(self, other):
        if not isinstance(other, OcrSnippet):
            return NotImplemented
        return self.compare_to(other) < 0

    def __le__(self, other):
        if not isinstance(other, OcrSnippet):
            return NotImplemented
        return self.compare_to(other) <= 0

    def __gt__(self, other):
        if not isinstance(other, OcrSnippet):
            return NotImplemented
        return self.compare_to(other) > 0

    def __ge__(self, other):
        if not isinstance(other, OcrSnippet):
            return NotImplemented
        return self.compare_to(other) >= 0

    def to_output_tree(self) -> OutputTree:
        """
        Render the snippet for the response.

        Keys, in order: text, score, pages (only when the snippet has pages),
        regions (always), highlights (only when highlights are tracked).
        Regions are resolved against the snippet pages; highlight boxes are
        relative to the snippet region and are rendered without page resolution.
        """
        pages = list(self.pages)
        page_entries = [page.to_output_tree() for page in pages] if pages else None
        regions = [box.to_output_tree(pages) for box in self.snippet_regions]

        highlights = None
        if self.highlight_spans is not None:
            highlights = [
                [box.to_output_tree() for box in group]
                for group in self.highlight_spans
            ]

        return build_output_tree([
            required("text", self.text),
            required("score", float(self.score)),
            optional("pages", page_entries),
            required("regions", regions),
            optional("highlights", highlights),
        ])


class SnippetBuilder:
    """
    Collects highlight spans and the score of a snippet while the
    highlighter is still working on it, then produces an OcrSnippet.

    Lifecycle:
    - construct with text, pages and snippet regions
    - add_highlight_span() once per highlighted occurrence
    - set_score() once the passages of the document are ranked
    - build()
    """

    def __init__(
        self,
        text: str,
        pages: Sequence[OcrPage] = (),
        snippet_regions: Sequence[OcrBox] = (),
        track_highlights: bool = True,
    ):
        self._text = text
        self._pages = tuple(pages)
        self._snippet_regions = tuple(snippet_regions)
        self._highlight_spans: Optional[List[HighlightGroup]] = [] if track_highlights else None
        self._score = 0.0

    @property
    def text(self) -> str:
        return self._text

    @property
    def pages(self) -> Tuple[OcrPage, ...]:
        return self._pages

    @property
    def snippet_regions(self) -> Tuple[OcrBox, ...]:
        return self._snippet_regions

    @property
    def highlight_spans(self) -> Optional[Tuple[HighlightGroup, ...]]:
        if self._highlight_spans is None:
            return None
        return tuple(self._highlight_spans)

    @property
    def score(self) -> float:
        return self._score

    @score.setter
    def score(self, value: float) -> None:
        self._score = value

    def get_score(self) -> float:
        return self._score

    def set_score(self, score: float) -> None:
        self._score = score

    def add_highlight_span(self, span: Iterable[OcrBox]) -> None:
        """
        Add a highlighted occurrence to the snippet.
        The boxes must be relative to the snippet region, not to the page.
        """
        if self._highlight_spans is None:
            raise RuntimeError("Highlight tracking is disabled for this snippet.")
        self._highlight_spans.append(tuple(span))

    def build(self) -> OcrSnippet:
        return OcrSnippet(
            text=self._text,
            pages=self._pages,
            snippet_regions=self._snippet_regions,
            highlight_spans=self.highlight_spans,
            score=self._score,
        )

    def to_output_tree(self) -> OutputTree:
        return self.build().to_output_tree()


def snippet_sort_key(snippet: OcrSnippet, descending: bool = False) -> Tuple[bool, float]:
    """Sort key by score; NaN scores go last in either direction."""
    is_nan, score = _score_key(snippet.score)
    return (is_nan, -score if descending else score)


def sort_snippets(snippets: Iterable[OcrSnippet], descending: bool = True) -> List[OcrSnippet]:
    """
    Sort snippets by score, highest first unless ``descending`` is False.
    The sort is stable: snippets with equal scores keep their input order.
    """
    return sorted(snippets, key=lambda s: snippet_sort_key(s, descending))
