"""Deterministic summarization kernel (the guest-side logic).

Everything in this package is pure: it must produce byte-identical results
for identical input on every platform.
"""

from zksummary.kernel.models import MAX_KEYWORDS, PROGRAM_HASH_PLACEHOLDER, Journal, Keyword

__all__ = [
    "Journal",
    "Keyword",
    "MAX_KEYWORDS",
    "PROGRAM_HASH_PLACEHOLDER",
]
