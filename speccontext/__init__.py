"""
speccontext - Specification Context & Diff Engine

Keeps three classes of specification documents (specs, design specs and
requirements) ranked against free-text queries, and renders chapter-aware
diffs of markdown documents before changes are persisted.

Key Features:
- Markdown chapter model (ATX headings, level-2 serialization)
- Inverted token index per document class with incremental updates
- Ranking that merges index hits, raw token overlap and path hints
- LCS line alignment per chapter with a deterministic tie-break
- Filesystem and in-memory context stores
- OpenAI-compatible text-generation client with retries
- REST API (FastAPI) and CLI
"""

from .config import SpecContextConfig
from .models import (
    ChapterDiff,
    ContextBundle,
    DiffOp,
    DocumentClass,
    IndexHit,
    RankedEntry,
    SpecDocument,
)
from .errors import (
    DocumentNotFound,
    InvalidDocumentPath,
    LLMConfigurationError,
    LLMResponseError,
    SpecContextError,
)
from .chapters import build_markdown, parse_chapters
from .index import TokenIndex, tokenize
from .search import ContextRanker
from .diff import NO_CHANGES, align_lines, diff_chapters, render_diff
from .storage import ContextStore, FileSystemContextStore, InMemoryContextStore
from .context import SpecsContext, create_context
from .llm import LLMAgentClient, PartsContent, TextContent, TextPart, normalize_content

__version__ = "0.1.0"
__all__ = [
    # Core
    "SpecContextConfig",
    "SpecsContext",
    "create_context",
    # Models
    "ChapterDiff",
    "ContextBundle",
    "DiffOp",
    "DocumentClass",
    "IndexHit",
    "RankedEntry",
    "SpecDocument",
    # Errors
    "DocumentNotFound",
    "InvalidDocumentPath",
    "LLMConfigurationError",
    "LLMResponseError",
    "SpecContextError",
    # Chapters & Diff
    "parse_chapters",
    "build_markdown",
    "NO_CHANGES",
    "align_lines",
    "diff_chapters",
    "render_diff",
    # Index & Ranking
    "TokenIndex",
    "tokenize",
    "ContextRanker",
    # Stores
    "ContextStore",
    "FileSystemContextStore",
    "InMemoryContextStore",
    # Generation service
    "LLMAgentClient",
    "PartsContent",
    "TextContent",
    "TextPart",
    "normalize_content",
]
