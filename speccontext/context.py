"""Specification context engine: indices, ranking and change previews."""

import logging
import threading
from typing import Any, Dict, Iterable, List, Optional

from .config import SpecContextConfig
from .diff import render_diff
from .errors import DocumentNotFound
from .index import TokenIndex, document_tokens
from .loaders import load_all_documents
from .models import ContextBundle, DocumentClass, RankedEntry, SpecDocument
from .search import ContextRanker
from .storage import ContextStore, FileSystemContextStore, normalize_path

logger = logging.getLogger(__name__)


class SpecsContext:
    """
    In-memory context over a store's specs, design specs and requirements.

    Construct one per process and pass it to every consumer. All public
    operations share one re-entrant lock, so a ranking query never sees
    a half-rebuilt snapshot.
    """

    def __init__(self, store: ContextStore, config: Optional[SpecContextConfig] = None):
        self.config = config or SpecContextConfig()
        self.store = store
        self._lock = threading.RLock()

        self.ranker = ContextRanker(
            default_limit=self.config.default_limit,
            index_weight=self.config.index_weight,
            hint_boost=self.config.hint_boost,
        )
        self.indices: Dict[DocumentClass, TokenIndex] = {cls: TokenIndex() for cls in DocumentClass}
        self.documents: Dict[DocumentClass, Dict[str, str]] = {cls: {} for cls in DocumentClass}
        self.loaded = False

    # ============ Snapshot Lifecycle ============

    def refresh(self) -> None:
        """Rebuild all three indices from the store's full listing."""
        snapshot = {cls: load_all_documents(self.store, cls) for cls in DocumentClass}

        with self._lock:
            for doc_class, docs in snapshot.items():
                index = self.indices[doc_class]
                contents = self.documents[doc_class]
                index.clear()
                contents.clear()
                for doc in docs:
                    contents[doc.path] = doc.content
                    index.add(doc.path, document_tokens(doc.path, doc.content))
            self.loaded = True

        logger.info(
            "Context refreshed: %d specs, %d design specs, %d requirements",
            len(snapshot[DocumentClass.SPEC]),
            len(snapshot[DocumentClass.DESIGN_SPEC]),
            len(snapshot[DocumentClass.REQUIREMENT]),
        )

    def ensure_loaded(self) -> None:
        with self._lock:
            if not self.loaded:
                self.refresh()

    def invalidate_all(self) -> None:
        """Drop the snapshot; the next query or refresh repopulates it."""
        with self._lock:
            self.loaded = False
            for doc_class in DocumentClass:
                self.indices[doc_class].clear()
                self.documents[doc_class].clear()

    def reload_one(self, doc_class: DocumentClass, path: str) -> None:
        """
        Re-read and re-index a single document.

        A document that no longer exists in the store is removed from the
        index. If no snapshot is loaded yet, a full refresh runs instead.
        """
        doc_class = DocumentClass(doc_class)
        normalized = normalize_path(path)

        with self._lock:
            if not self.loaded:
                self.refresh()
                return

            try:
                content = self.store.read_document(doc_class, normalized, normalize=False)
            except DocumentNotFound:
                self.remove_one(doc_class, normalized)
                return

            self.documents[doc_class][normalized] = content
            self.indices[doc_class].update(normalized, document_tokens(normalized, content))
            logger.debug("Reloaded %s %s", doc_class.label, normalized)

    def remove_one(self, doc_class: DocumentClass, path: str) -> None:
        """Forget a deleted document. Unknown paths are ignored."""
        doc_class = DocumentClass(doc_class)
        normalized = normalize_path(path)
        with self._lock:
            self.documents[doc_class].pop(normalized, None)
            self.indices[doc_class].remove(normalized)

    # ============ Ranking ============

    def entries(self, doc_class: DocumentClass) -> List[SpecDocument]:
        with self._lock:
            return [
                SpecDocument(path=path, doc_class=doc_class, content=content)
                for path, content in self.documents[doc_class].items()
            ]

    def relevant_for(
        self,
        doc_class: DocumentClass,
        query: Optional[str],
        *,
        hint_files: Optional[Iterable[str]] = None,
        limit: Optional[int] = None,
    ) -> List[RankedEntry]:
        """Rank one class of documents for a query."""
        doc_class = DocumentClass(doc_class)
        with self._lock:
            self.ensure_loaded()
            ranked = self.ranker.rank_entries(
                query,
                self.entries(doc_class),
                hint_files=hint_files,
                limit=limit,
                index=self.indices[doc_class],
            )

        for entry in ranked:
            logger.debug("Considering %s %s (score=%d)", doc_class.label, entry.path, entry.score)
        return ranked

    def build_context(
        self,
        query: Optional[str],
        *,
        hint_files: Optional[Iterable[str]] = None,
        limit: Optional[int] = None,
    ) -> ContextBundle:
        """
        Rank specs, design specs and requirements for a query.

        Args:
            query: Free-text query
            hint_files: Paths boosted regardless of textual score
            limit: Results per class (default from config)

        Returns:
            ContextBundle with one ranked list per class
        """
        hints = list(hint_files or [])
        with self._lock:
            return ContextBundle(
                specs=self.relevant_for(DocumentClass.SPEC, query, hint_files=hints, limit=limit),
                design_specs=self.relevant_for(DocumentClass.DESIGN_SPEC, query, hint_files=hints, limit=limit),
                requirements=self.relevant_for(DocumentClass.REQUIREMENT, query, hint_files=hints, limit=limit),
            )

    # ============ Diffs ============

    def render_diff(self, old_text: Optional[str], new_text: Optional[str], color: Optional[bool] = None) -> str:
        """Chapter-aware diff report of two markdown texts."""
        return render_diff(old_text, new_text, color=self.config.color if color is None else color)

    def preview_change(
        self,
        doc_class: DocumentClass,
        path: str,
        new_content: Optional[str],
        action: str = "update",
        color: Optional[bool] = None,
    ) -> str:
        """
        Report shown before a generated change is persisted.

        The stored document is diffed against the new content; a document
        that does not exist yet is diffed against empty text.
        """
        doc_class = DocumentClass(doc_class)
        label = doc_class.label

        if action == "delete":
            return f"Deleting {label} file '{path}'"

        if action == "create":
            title = f"Creating new {label} file '{path}'"
            old_content = ""
        else:
            title = f"Updating {label} file '{path}'"
            try:
                old_content = self.store.read_document(doc_class, path)
            except DocumentNotFound:
                old_content = ""

        return f"{title}\n{self.render_diff(old_content, new_content or '', color=color)}"

    def get_stats(self) -> Dict[str, Any]:
        """Get engine statistics."""
        with self._lock:
            return {
                "loaded": self.loaded,
                "indices": {cls.value: self.indices[cls].stats() for cls in DocumentClass},
            }


def create_context(
    workspace_dir: Optional[str] = None,
    *,
    default_limit: int = 5,
    color: bool = True,
) -> SpecsContext:
    """
    Create a SpecsContext over a filesystem workspace.

    Example:
        >>> ctx = create_context("./my-project")
        >>> bundle = ctx.build_context("quicksum logging", hint_files=["src/cli/quicksum.js.spec"])
    """
    config = SpecContextConfig.from_env(
        workspace_dir=workspace_dir,
        default_limit=default_limit,
        color=color,
    )
    store = FileSystemContextStore(
        config.workspace_dir,
        specs_dirname=config.specs_dirname,
        reqs_dirname=config.reqs_dirname,
    )
    return SpecsContext(store, config)
