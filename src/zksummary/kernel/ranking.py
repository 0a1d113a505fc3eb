"""Frequency ranking with a total, deterministic order."""

from collections import Counter
from typing import Dict, Iterable, List

from zksummary.kernel.models import Keyword

TOP_K = 5


def count_tokens(tokens: Iterable[str]) -> Dict[str, int]:
    """Count occurrences per distinct token."""
    return dict(Counter(tokens))


def rank_keywords(tokens: Iterable[str], limit: int = TOP_K) -> List[Keyword]:
    """Rank tokens by frequency and keep the first `limit` entries.

    Order is count descending, then word ascending, so equal counts never
    produce an ambiguous order. Fewer than `limit` distinct tokens yields all
    of them; no tokens yields an empty list.
    """
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")
    counts = count_tokens(tokens)
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [Keyword(word=word, count=count) for word, count in ranked[:limit]]
