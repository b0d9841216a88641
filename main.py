# main.py

import sys
from ocr_snippets.infrastructure.snippet_loader import SnippetLoader
from ocr_snippets.infrastructure.snippet_store import InMemorySnippetStore
from ocr_snippets.infrastructure.file_hasher import compute_directory_hashes
from ocr_snippets.application.snippet_service import SnippetRankingService
from ocr_snippets.interface.cli import (
    display_welcome_banner,
    display_loading_status,
    display_documents,
    prompt_for_document,
    display_snippets,
    display_error,
    ask_continue,
)


DATA_DIRECTORY = "data"
MAX_PASSAGES = 5
HIGHLIGHT_PRE_TAG = "<em>"
HIGHLIGHT_POST_TAG = "</em>"


def main() -> None:
    display_welcome_banner()

    # ── 1. Load snippet documents ────────────────────────────────────────────
    store = InMemorySnippetStore()
    loader = SnippetLoader()

    try:
        documents = loader.load_directory(DATA_DIRECTORY)
    except FileNotFoundError as error:
        display_error(str(error))
        sys.exit(1)

    if not documents:
        display_error(f"No snippet documents found in '{DATA_DIRECTORY}/'.")
        sys.exit(1)

    for document_id, snippets in documents.items():
        store.add_document(document_id, snippets)
    store.save_file_hashes(compute_directory_hashes(DATA_DIRECTORY))

    ranking_service = SnippetRankingService(max_passages=MAX_PASSAGES)

    display_loading_status(store.get_document_stats())
    display_documents(store.get_document_stats())

    # ── 2. Interactive loop ──────────────────────────────────────────────────
    while True:
        document_id = prompt_for_document().strip()
        try:
            response = ranking_service.render_document(store.get_snippets(document_id))
            display_snippets(
                document_id,
                response,
                pre_tag=HIGHLIGHT_PRE_TAG,
                post_tag=HIGHLIGHT_POST_TAG,
            )
        except KeyError as error:
            display_error(str(error))

        if not ask_continue():
            break


if __name__ == "__main__":
    main()
