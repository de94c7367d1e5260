"""FastAPI REST API wrapper for the speccontext engine."""

from typing import Any, Dict, List, Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from .context import SpecsContext, create_context
from .diff import diff_chapters, render_chapter_diffs
from .errors import InvalidDocumentPath
from .models import DocumentClass


# ============ Request/Response Models ============

class ContextRequest(BaseModel):
    """Request body for context ranking."""
    query: str = Field(..., description="Free-text query")
    hint_files: List[str] = Field(default_factory=list, description="Paths to boost in ranking")
    limit: Optional[int] = Field(default=None, ge=1, le=100, description="Results per document class")


class RankedEntryItem(BaseModel):
    """Single ranked document."""
    path: str
    content: str
    score: int


class ContextResponse(BaseModel):
    """Ranked context per document class."""
    query: str
    specs: List[RankedEntryItem]
    design_specs: List[RankedEntryItem]
    requirements: List[RankedEntryItem]


class DiffRequest(BaseModel):
    """Request body for a chapter diff."""
    old_text: str = Field(default="", description="Previous document text")
    new_text: str = Field(default="", description="New document text")
    color: bool = Field(default=False, description="Include ANSI colors in the report")


class DiffOpItem(BaseModel):
    tag: str
    line: str


class ChapterDiffItem(BaseModel):
    heading: str
    changed: bool
    ops: List[DiffOpItem]


class DiffResponse(BaseModel):
    """Rendered report plus structured chapters."""
    report: str
    chapters: List[ChapterDiffItem]


class ReloadRequest(BaseModel):
    """Request body for reloading one document."""
    doc_class: DocumentClass
    path: str


# ============ App Factory ============

def create_app(
    workspace_dir: Optional[str] = None,
    context: Optional[SpecsContext] = None,
    **kwargs
) -> FastAPI:
    """
    Create a FastAPI app wrapping a SpecsContext.

    Args:
        workspace_dir: Workspace holding the specs directory
        context: Pre-built context (skips creation at startup)
        **kwargs: Additional arguments for create_context

    Returns:
        FastAPI app instance
    """

    specs_context: Optional[SpecsContext] = context

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        nonlocal specs_context
        if specs_context is None:
            specs_context = create_context(workspace_dir, **kwargs)
        yield

    app = FastAPI(
        title="Spec Context API",
        description="Relevance ranking and chapter diffs over specification documents",
        version="0.1.0",
        lifespan=lifespan,
    )

    def get_context() -> SpecsContext:
        if specs_context is None:
            raise HTTPException(status_code=503, detail="Context not initialized")
        return specs_context

    # ============ Endpoints ============

    @app.post("/context", response_model=ContextResponse, tags=["Context"])
    async def build_context(request: ContextRequest):
        """Rank specs, design specs and requirements for a query."""
        ctx = get_context()
        bundle = ctx.build_context(request.query, hint_files=request.hint_files, limit=request.limit)
        data = bundle.to_dict()
        return ContextResponse(query=request.query, **data)

    @app.post("/diff", response_model=DiffResponse, tags=["Diff"])
    async def diff(request: DiffRequest):
        """Chapter-aware diff of two markdown texts."""
        chapters = diff_chapters(request.old_text, request.new_text)
        return DiffResponse(
            report=render_chapter_diffs(chapters, color=request.color),
            chapters=[
                ChapterDiffItem(
                    heading=c.heading,
                    changed=c.changed,
                    ops=[DiffOpItem(tag=op.tag, line=op.line) for op in c.ops],
                )
                for c in chapters
            ],
        )

    @app.post("/refresh", tags=["Management"])
    async def refresh():
        """Rebuild every index from the store."""
        ctx = get_context()
        ctx.refresh()
        return ctx.get_stats()

    @app.post("/reload", tags=["Management"])
    async def reload_document(request: ReloadRequest):
        """Re-read and re-index one document."""
        ctx = get_context()
        try:
            ctx.reload_one(request.doc_class, request.path)
        except InvalidDocumentPath as e:
            raise HTTPException(status_code=400, detail=str(e))
        return {"reloaded": True, "doc_class": request.doc_class.value, "path": request.path}

    @app.post("/invalidate", tags=["Management"])
    async def invalidate():
        """Mark the snapshot stale."""
        get_context().invalidate_all()
        return {"invalidated": True}

    @app.get("/stats", tags=["Management"])
    async def get_stats() -> Dict[str, Any]:
        """Get index statistics."""
        return get_context().get_stats()

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "speccontext"}

    return app


# Default app for `uvicorn speccontext.api:app`
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
