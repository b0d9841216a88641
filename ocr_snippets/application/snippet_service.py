# ocr_snippets/application/snippet_service.py

from typing import Iterable, List

from ocr_snippets.domain.output import OutputTree
from ocr_snippets.domain.snippet import OcrSnippet, SnippetBuilder, sort_snippets


DEFAULT_MAX_PASSAGES = 5


class SnippetRankingService:
    """
    Response-side use case: order the snippets of one document by score,
    keep the best ones and turn them into output trees.

    Scores are assigned upstream by the highlighter; this service only
    compares them. Highest score comes first, NaN scores last, and equal
    scores keep the order the highlighter produced them in.
    """

    def __init__(self, max_passages: int = DEFAULT_MAX_PASSAGES):
        if max_passages < 1:
            raise ValueError("max_passages must be at least 1.")
        self._max_passages = max_passages

    @property
    def max_passages(self) -> int:
        return self._max_passages

    def finalize(self, builders: Iterable[SnippetBuilder]) -> List[OcrSnippet]:
        return [builder.build() for builder in builders]

    def rank(self, snippets: Iterable[OcrSnippet]) -> List[OcrSnippet]:
        return sort_snippets(snippets, descending=True)[: self._max_passages]

    def serialize(self, snippets: Iterable[OcrSnippet]) -> List[OutputTree]:
        """
        Render each snippet. A snippet that cannot be rendered (e.g. a region
        pointing at a page the snippet does not span) is skipped; the rest of
        the result set is still returned.
        """
        trees: List[OutputTree] = []
        for position, snippet in enumerate(snippets):
            try:
                trees.append(snippet.to_output_tree())
            except (ValueError, KeyError, TypeError) as error:
                print(f"[SnippetService] ⚠ Skipping snippet #{position}: {error}")
        return trees

    def render_document(self, snippets: Iterable[OcrSnippet]) -> OutputTree:
        candidates = list(snippets)
        ranked = self.rank(candidates)
        return {
            "snippets": self.serialize(ranked),
            "numTotal": len(candidates),
        }
