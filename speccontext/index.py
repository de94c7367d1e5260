"""Inverted token index over specification documents."""

import re
from typing import Any, Dict, Iterable, List, Optional, Set

from .models import IndexHit

# Anything outside this set becomes a token separator
_NON_TOKEN_RE = re.compile(r"[^a-z0-9\s\-_.]")


def tokenize(text: Optional[str]) -> List[str]:
    """Lowercase, replace non-token characters with spaces, split on whitespace."""
    if not isinstance(text, str) or not text:
        return []
    return _NON_TOKEN_RE.sub(" ", text.lower()).split()


def document_tokens(path: str, content: Optional[str]) -> List[str]:
    """Tokens for a document: its path followed by its content."""
    return tokenize(f"{path} {content or ''}")


class TokenIndex:
    """Maintains id -> token set and token -> id set (posting lists)."""

    def __init__(self):
        self.docs: Dict[str, Set[str]] = {}
        self.postings: Dict[str, Set[str]] = {}

    def add(self, doc_id: str, tokens: Iterable[str]) -> None:
        """Index a document. Re-adding an id replaces its previous tokens."""
        if doc_id in self.docs:
            self.remove(doc_id)

        unique = set(tokens)
        self.docs[doc_id] = unique
        for token in unique:
            self.postings.setdefault(token, set()).add(doc_id)

    def update(self, doc_id: str, tokens: Iterable[str]) -> None:
        """Replace a document's tokens wholesale."""
        self.remove(doc_id)
        self.add(doc_id, tokens)

    def remove(self, doc_id: str) -> None:
        """Drop a document from every posting list. Unknown ids are ignored."""
        existing = self.docs.pop(doc_id, None)
        if existing is None:
            return

        for token in existing:
            bucket = self.postings.get(token)
            if bucket is None:
                continue
            bucket.discard(doc_id)
            if not bucket:
                del self.postings[token]

    def clear(self) -> None:
        """Remove every document and posting."""
        self.docs.clear()
        self.postings.clear()

    def search(self, query_tokens: Optional[Iterable[str]], limit: int = 5) -> List[IndexHit]:
        """
        Presence-based search.

        Each id scores one point per distinct query token whose posting list
        contains it. Results are sorted by score descending, then id.

        Args:
            query_tokens: Tokens to look up (None or empty gives no hits)
            limit: Maximum number of hits to return

        Returns:
            List of IndexHit objects
        """
        if not query_tokens:
            return []

        scores: Dict[str, int] = {}
        for token in set(query_tokens):
            bucket = self.postings.get(token)
            if not bucket:
                continue
            for doc_id in bucket:
                scores[doc_id] = scores.get(doc_id, 0) + 1

        ranked = sorted(scores.items(), key=lambda item: (-item[1], item[0]))
        return [IndexHit(id=doc_id, score=score) for doc_id, score in ranked[:max(0, limit)]]

    def tokens_for(self, doc_id: str) -> Set[str]:
        """Token set of an indexed document (empty if unknown)."""
        return set(self.docs.get(doc_id, ()))

    def stats(self) -> Dict[str, Any]:
        return {"documents": len(self.docs), "tokens": len(self.postings)}

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self.docs

    def __len__(self) -> int:
        """Get number of indexed documents."""
        return len(self.docs)
