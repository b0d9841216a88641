# ocr_snippets/domain/models.py

from dataclasses import dataclass
from typing import Optional, Sequence

from .interfaces import OutputNode, PageAwareOutputNode
from .output import OutputTree, build_output_tree, optional, required


@dataclass(frozen=True)
class OcrPage(OutputNode):
    """
    A single scanned page of an OCR document.
    Dimensions are in the pixel space of the page image, when known.
    """
    page_id: str
    width: Optional[float] = None
    height: Optional[float] = None

    def to_output_tree(self) -> OutputTree:
        return build_output_tree([
            required("id", self.page_id),
            optional("width", self.width),
            optional("height", self.height),
        ])


@dataclass(frozen=True)
class OcrBox(PageAwareOutputNode):
    """
    A rectangular region given by its upper-left and lower-right corners.

    Coordinates are either absolute page coordinates or relative to an
    enclosing region (highlight boxes are relative to the snippet region).
    """
    ulx: float
    uly: float
    lrx: float
    lry: float
    text: Optional[str] = None
    page_id: Optional[str] = None
    parent_region_idx: Optional[int] = None

    @property
    def width(self) -> float:
        return self.lrx - self.ulx

    @property
    def height(self) -> float:
        return self.lry - self.uly

    def relative_to(self, region: "OcrBox") -> "OcrBox":
        """Translate this box into the coordinate space of ``region``."""
        return OcrBox(
            ulx=self.ulx - region.ulx,
            uly=self.uly - region.uly,
            lrx=self.lrx - region.ulx,
            lry=self.lry - region.uly,
            text=self.text,
            page_id=self.page_id,
            parent_region_idx=self.parent_region_idx,
        )

    def to_output_tree(self, pages: Optional[Sequence[OcrPage]] = None) -> OutputTree:
        page_idx = None
        if pages is not None and self.page_id is not None:
            page_idx = self._resolve_page_index(pages)

        return build_output_tree([
            optional("pageIdx", page_idx),
            optional("text", self.text),
            required("ulx", self.ulx),
            required("uly", self.uly),
            required("lrx", self.lrx),
            required("lry", self.lry),
            optional("parentRegionIdx", self.parent_region_idx),
        ])

    def _resolve_page_index(self, pages: Sequence[OcrPage]) -> int:
        for idx, page in enumerate(pages):
            if page.page_id == self.page_id:
                return idx
        known = [page.page_id for page in pages]
        raise ValueError(
            f"Box references page '{self.page_id}' which is not among "
            f"the snippet pages {known}"
        )
