"""Context ranking: index candidates merged with token overlap and hints."""

from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence

from .index import TokenIndex, document_tokens, tokenize
from .models import RankedEntry, SpecDocument


def overlap_score(query_tokens: Sequence[str], target_tokens: Sequence[str]) -> int:
    """Sum, over query tokens, of how often each occurs in the target."""
    if not query_tokens or not target_tokens:
        return 0
    counts = Counter(target_tokens)
    return sum(counts[token] for token in query_tokens if token in counts)


class ContextRanker:
    """Ranks one class of documents against a free-text query."""

    def __init__(
        self,
        default_limit: int = 5,
        index_weight: int = 2,
        hint_boost: int = 5,
    ):
        self.default_limit = default_limit
        self.index_weight = index_weight
        self.hint_boost = hint_boost

    def rank_entries(
        self,
        query: Optional[str],
        entries: Sequence[SpecDocument],
        *,
        hint_files: Optional[Iterable[str]] = None,
        limit: Optional[int] = None,
        index: Optional[TokenIndex] = None,
    ) -> List[RankedEntry]:
        """
        Rank documents for a query.

        Index hits are seeded at `index_weight` times their score, every
        document then adds its raw token overlap, and hinted paths get a
        flat `hint_boost`.

        Args:
            query: Free-text query (non-text is treated as empty)
            entries: Candidate documents of one class
            hint_files: Paths to boost regardless of textual score
            limit: Number of results (defaults to `default_limit`)
            index: Optional relevance index for this class

        Returns:
            RankedEntry list sorted by score descending, then path
        """
        limit = limit or self.default_limit
        query_tokens = tokenize(query)
        hints = {path.lower() for path in (hint_files or []) if isinstance(path, str)}
        scores: Dict[str, int] = {}

        if index is not None and query_tokens:
            for hit in index.search(query_tokens, limit * 2):
                scores[hit.id] = scores.get(hit.id, 0) + hit.score * self.index_weight

        for entry in entries:
            simple = overlap_score(query_tokens, document_tokens(entry.path, entry.content))
            if simple > 0 or entry.path in scores:
                scores[entry.path] = scores.get(entry.path, 0) + simple
            if entry.path.lower() in hints:
                scores[entry.path] = scores.get(entry.path, 0) + self.hint_boost

        by_path = {entry.path: entry for entry in entries}
        results = [
            RankedEntry(path=path, content=by_path[path].content, score=score)
            for path, score in scores.items()
            if path in by_path
        ]
        results.sort(key=lambda r: (-r.score, r.path))
        return results[:limit]
