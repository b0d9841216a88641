# ocr_snippets/domain/interfaces.py

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from .output import OutputTree


class OutputNode(ABC):
    """Anything that renders itself into the response tree on its own."""

    @abstractmethod
    def to_output_tree(self) -> OutputTree: ...


class PageAwareOutputNode(ABC):
    """
    Renders itself into the response tree, optionally resolved against
    the pages of the snippet it belongs to.
    """

    @abstractmethod
    def to_output_tree(self, pages: Optional[Sequence] = None) -> OutputTree: ...


class SnippetStorePort(ABC):

    @abstractmethod
    def add_document(self, document_id: str, snippets: List) -> None: ...

    @abstractmethod
    def get_snippets(self, document_id: str) -> List:
        """
        Return the snippets stored for a document, in the order they were added.
        Raises KeyError for unknown documents.
        """
        ...

    @abstractmethod
    def remove_document(self, document_id: str) -> None: ...

    @abstractmethod
    def is_ready(self) -> bool: ...

    @abstractmethod
    def get_document_stats(self) -> List[dict]:
        """
        Return a list of stored documents with their snippet counts.
        """
        ...
