# ocr_snippets/infrastructure/file_hasher.py

import hashlib
from pathlib import Path


SNIPPET_FILE_EXTENSIONS = {".json"}


def compute_file_hash(file_path: str) -> str:
    """
    Compute SHA-256 hash of a file's contents.
    Used to detect whether a snippet document has changed since it was loaded.
    """
    sha256 = hashlib.sha256()
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            sha256.update(chunk)
    return sha256.hexdigest()


def compute_directory_hashes(directory_path: str) -> dict[str, str]:
    """
    Compute SHA-256 hashes for all snippet documents in a directory.
    Returns: { document_id: hash_string }
    """
    data_dir = Path(directory_path)
    if not data_dir.exists():
        return {}

    return {
        file_path.stem: compute_file_hash(str(file_path))
        for file_path in sorted(data_dir.glob("*"))
        if file_path.is_file() and file_path.suffix.lower() in SNIPPET_FILE_EXTENSIONS
    }
