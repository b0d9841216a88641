# ocr_snippets/infrastructure/snippet_loader.py

import json
from pathlib import Path
from typing import Dict, List

from pydantic import ValidationError

from ocr_snippets.domain.snippet import OcrSnippet
from ocr_snippets.infrastructure.schemas import DocumentSchema
from ocr_snippets.infrastructure.file_hasher import SNIPPET_FILE_EXTENSIONS


class SnippetLoader:
    """
    Loads pre-highlighted snippet documents from JSON files.

    One file per document, the file stem is the document id:

        {"pages": [{"id": "3", "width": 2000, "height": 3000}],
         "snippets": [{"text": "...", "score": 2.5, "pages": ["3"],
                       "regions": [{"ulx": 0, "uly": 0, "lrx": 100, "lry": 20, "page": "3"}],
                       "highlights": [[{"ulx": 4, "uly": 0, "lrx": 10, "lry": 20}]]}]}

    A snippet without "highlights" (or with null) is loaded with highlight tracking
    disabled; "highlights": [] means tracking is on but nothing was found.
    """

    def load_directory(self, directory_path: str) -> Dict[str, List[OcrSnippet]]:
        data_dir = Path(directory_path)
        if not data_dir.exists():
            raise FileNotFoundError(f"Data directory not found: {directory_path}")

        documents: Dict[str, List[OcrSnippet]] = {}

        for file_path in sorted(data_dir.glob("*")):
            if not file_path.is_file() or file_path.suffix.lower() not in SNIPPET_FILE_EXTENSIONS:
                continue
            try:
                snippets = self.load_file(file_path)
            except ValueError as error:
                print(f"[SnippetLoader] ⚠ Skipping '{file_path.name}': {error}")
                continue
            documents[file_path.stem] = snippets
            print(f"[SnippetLoader] Loaded {len(snippets)} snippets from {file_path.name}")

        print(f"[SnippetLoader] Total documents loaded: {len(documents)}")
        return documents

    def load_file(self, file_path: Path) -> List[OcrSnippet]:
        """
        Load a single snippet document.
        Raises ValueError if the file is not valid JSON or not a snippet document.
        """
        try:
            raw = json.loads(Path(file_path).read_text(encoding="utf-8"))
        except json.JSONDecodeError as error:
            raise ValueError(f"Invalid JSON: {error}") from error

        try:
            document = DocumentSchema.model_validate(raw)
        except ValidationError as error:
            raise ValueError(f"Not a snippet document: {error}") from error

        pages_by_id = document.pages_by_id()
        return [entry.to_builder(pages_by_id).build() for entry in document.snippets]
