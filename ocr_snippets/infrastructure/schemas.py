# ocr_snippets/infrastructure/schemas.py

from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from ocr_snippets.domain.models import OcrBox, OcrPage
from ocr_snippets.domain.snippet import SnippetBuilder


def _page_id_to_str(value: Any) -> Any:
    # Page ids show up as numbers in hand-written documents
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


PageId = Annotated[str, BeforeValidator(_page_id_to_str)]


class PageSchema(BaseModel):
    id: PageId
    width: Optional[float] = None
    height: Optional[float] = None

    def to_domain(self) -> OcrPage:
        return OcrPage(page_id=self.id, width=self.width, height=self.height)


class BoxSchema(BaseModel):
    ulx: float
    uly: float
    lrx: float
    lry: float
    text: Optional[str] = None
    page: Optional[PageId] = None
    parent_region_idx: Optional[int] = Field(default=None, alias="parentRegionIdx")

    model_config = ConfigDict(populate_by_name=True)

    def to_domain(self) -> OcrBox:
        return OcrBox(
            ulx=self.ulx,
            uly=self.uly,
            lrx=self.lrx,
            lry=self.lry,
            text=self.text,
            page_id=self.page,
            parent_region_idx=self.parent_region_idx,
        )


class _SnippetFields(BaseModel):
    text: str
    score: float = 0.0
    regions: List[BoxSchema] = []
    # None (or missing) means the highlighter did not track highlights
    highlights: Optional[List[List[BoxSchema]]] = None

    def _to_builder(self, pages: List[OcrPage]) -> SnippetBuilder:
        builder = SnippetBuilder(
            text=self.text,
            pages=pages,
            snippet_regions=[box.to_domain() for box in self.regions],
            track_highlights=self.highlights is not None,
        )
        for group in self.highlights or []:
            builder.add_highlight_span(box.to_domain() for box in group)
        builder.set_score(self.score)
        return builder


class SnippetSchema(_SnippetFields):
    """A snippet carrying its pages inline, as posted to the render endpoint."""
    pages: List[PageSchema] = []

    def to_builder(self) -> SnippetBuilder:
        return self._to_builder([page.to_domain() for page in self.pages])


class DocumentSnippetSchema(_SnippetFields):
    """A snippet inside a document file; pages are ids into the document pages."""
    pages: List[PageId] = []

    def to_builder(self, pages_by_id: Dict[str, OcrPage]) -> SnippetBuilder:
        unknown = [page_id for page_id in self.pages if page_id not in pages_by_id]
        if unknown:
            raise ValueError(f"Snippet references unknown page '{unknown[0]}'.")
        return self._to_builder([pages_by_id[page_id] for page_id in self.pages])


class DocumentSchema(BaseModel):
    pages: List[PageSchema] = []
    snippets: List[DocumentSnippetSchema]

    def pages_by_id(self) -> Dict[str, OcrPage]:
        return {page.id: page.to_domain() for page in self.pages}
