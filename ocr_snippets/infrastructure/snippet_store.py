# ocr_snippets/infrastructure/snippet_store.py

from typing import Dict, List

from ocr_snippets.domain.interfaces import SnippetStorePort
from ocr_snippets.domain.snippet import OcrSnippet


class InMemorySnippetStore(SnippetStorePort):
    """
    Keeps the snippets of every loaded document in memory, together with
    the hashes of the files they came from so reloads can skip unchanged ones.
    """

    def __init__(self):
        self._documents: Dict[str, List[OcrSnippet]] = {}
        self._file_hashes: Dict[str, str] = {}

    def add_document(self, document_id: str, snippets: List[OcrSnippet]) -> None:
        self._documents[document_id] = list(snippets)

    def get_snippets(self, document_id: str) -> List[OcrSnippet]:
        if document_id not in self._documents:
            raise KeyError(f"Unknown document: '{document_id}'")
        return list(self._documents[document_id])

    def remove_document(self, document_id: str) -> None:
        self._documents.pop(document_id, None)
        self._file_hashes.pop(document_id, None)
        print(f"[SnippetStore] Removed document '{document_id}'.")

    def is_ready(self) -> bool:
        return bool(self._documents)

    def document_ids(self) -> List[str]:
        return sorted(self._documents)

    def get_document_stats(self) -> List[dict]:
        return [
            {"document_id": doc_id, "count": len(snippets)}
            for doc_id, snippets in sorted(self._documents.items())
        ]

    def get_file_hashes(self) -> dict[str, str]:
        return dict(self._file_hashes)

    def save_file_hashes(self, file_hashes: dict[str, str]) -> None:
        self._file_hashes = dict(file_hashes)
