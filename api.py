from fastapi import FastAPI, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import List
import uvicorn
from pathlib import Path

from ocr_snippets.infrastructure.schemas import SnippetSchema
from ocr_snippets.infrastructure.snippet_loader import SnippetLoader
from ocr_snippets.infrastructure.snippet_store import InMemorySnippetStore
from ocr_snippets.infrastructure.file_hasher import compute_directory_hashes
from ocr_snippets.infrastructure.tree_encoder import encode_output_tree
from ocr_snippets.application.snippet_service import SnippetRankingService

# ── Configuration ────────────────────────────────────────────────────────────
DATA_DIRECTORY = "data"
DEFAULT_MAX_PASSAGES = 5
MAX_PASSAGES_LIMIT = 100

# ── API Models ───────────────────────────────────────────────────────────────
class RenderRequest(BaseModel):
    snippets: List[SnippetSchema]
    max_passages: int = Field(default=DEFAULT_MAX_PASSAGES, ge=1, le=MAX_PASSAGES_LIMIT)


def _tree_response(tree: dict) -> Response:
    # Encoded by hand: key order must survive and NaN scores must not break JSON
    return Response(content=encode_output_tree(tree), media_type="application/json")

# ── App Initialization ───────────────────────────────────────────────────────
app = FastAPI(
    title="OCR Snippets API",
    description="Ranked, highlighted passages from OCR documents.",
    version="1.0.0"
)

# ── CORS Middleware ──────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:8080", "http://127.0.0.1:8080"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize infrastructure (global scope for singleton behavior)
snippet_loader = SnippetLoader()
snippet_store = InMemorySnippetStore()


def _reload_changed_documents() -> dict:
    """Load new or modified snippet files and drop documents whose file is gone."""
    current_hashes = compute_directory_hashes(DATA_DIRECTORY)
    stored_hashes = snippet_store.get_file_hashes()

    new_or_changed = sorted(
        name for name, h in current_hashes.items()
        if stored_hashes.get(name) != h
    )
    deleted = sorted(name for name in stored_hashes if name not in current_hashes)

    for document_id in deleted:
        snippet_store.remove_document(document_id)

    loaded = []
    for document_id in new_or_changed:
        file_path = Path(DATA_DIRECTORY) / f"{document_id}.json"
        try:
            snippet_store.add_document(document_id, snippet_loader.load_file(file_path))
            loaded.append(document_id)
            print(f"[API] Reloaded '{document_id}'")
        except ValueError as error:
            print(f"[API] ⚠ Failed to load '{file_path.name}': {error}")
            current_hashes.pop(document_id)

    snippet_store.save_file_hashes(current_hashes)
    return {"processed": loaded, "deleted": deleted}


# Auto-load whatever is already on disk
_reload_changed_documents()
if snippet_store.is_ready():
    print("[API] Snippet documents loaded. Service is READY.")
else:
    print(f"[API] WARNING: No snippet documents found in '{DATA_DIRECTORY}/'.")

# ── Endpoints ────────────────────────────────────────────────────────────────
@app.get("/")
def read_root():
    return {
        "message": "OCR Snippets API is running.",
        "status": "ready" if snippet_store.is_ready() else "no_documents",
    }

@app.get("/status")
def get_status():
    """Returns readiness and how many documents are loaded."""
    return {
        "is_ready": snippet_store.is_ready(),
        "documents_loaded": len(snippet_store.document_ids()),
    }

@app.get("/documents")
def get_documents():
    """Returns the loaded documents and their snippet counts."""
    return {"documents": snippet_store.get_document_stats()}

@app.get("/documents/{document_id}/snippets")
def get_document_snippets(
    document_id: str,
    limit: int = Query(default=DEFAULT_MAX_PASSAGES, ge=1, le=MAX_PASSAGES_LIMIT),
):
    """Ranked snippets of one document, best first."""
    try:
        snippets = snippet_store.get_snippets(document_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Document '{document_id}' not found")

    return _tree_response(SnippetRankingService(max_passages=limit).render_document(snippets))

@app.post("/snippets/render")
def render_snippets(request: RenderRequest):
    """Rank and render snippets handed in by an external highlighter."""
    service = SnippetRankingService(max_passages=request.max_passages)
    snippets = service.finalize(s.to_builder() for s in request.snippets)
    return _tree_response(service.render_document(snippets))

@app.post("/reload")
def trigger_reload():
    """Reload new or changed snippet documents from the data directory."""
    try:
        result = _reload_changed_documents()
    except OSError as e:
        print(f"[API] Reload failed: {e}")
        raise HTTPException(status_code=500, detail=f"Reload failed: {str(e)}")

    return {
        "message": "Reload complete.",
        **result,
        "is_ready": snippet_store.is_ready(),
    }

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
