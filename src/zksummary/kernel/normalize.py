"""Deterministic text normalization.

Rules (must stay identical everywhere a journal is reproduced):
- Input bytes must decode as strict UTF-8
- Only ASCII letters are case-folded; no Unicode normalization
- A token is a maximal run of ASCII lowercase letters; everything else delimits
- Tokens found in the embedded stopword list are dropped
"""

import hashlib
import re
import string
from functools import lru_cache
from importlib.resources import files
from typing import FrozenSet, List

from zksummary.errors import InvalidEncodingError

STOPWORDS_RESOURCE = "stopwords.txt"

_ASCII_FOLD = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)
_TOKEN_RE = re.compile(r"[a-z]+")


def stopwords_bytes() -> bytes:
    """Raw bytes of the embedded stopword resource."""
    return files(__package__).joinpath(STOPWORDS_RESOURCE).read_bytes()


@lru_cache(maxsize=None)
def load_stopwords() -> FrozenSet[str]:
    """Load the stopword set once per process.

    One word per line; surrounding whitespace is stripped and blank lines are
    skipped. The returned set is immutable.
    """
    text = stopwords_bytes().decode("utf-8")
    return frozenset(line.strip() for line in text.splitlines() if line.strip())


def stopwords_digest() -> str:
    """Version fingerprint of the stopword resource (sha256 of its bytes)."""
    return "sha256:" + hashlib.sha256(stopwords_bytes()).hexdigest()


def decode_input(raw: bytes) -> str:
    """Decode raw input as strict UTF-8.

    Raises:
        InvalidEncodingError: If the bytes are not valid UTF-8
    """
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidEncodingError(
            f"Input is not valid UTF-8 (byte offset {exc.start}: {exc.reason})"
        ) from exc


def fold_ascii(text: str) -> str:
    """Lowercase ASCII letters only; all other characters are left untouched."""
    return text.translate(_ASCII_FOLD)


def tokenize(text: str) -> List[str]:
    """Split already-decoded text into tokens, stopwords included."""
    return _TOKEN_RE.findall(fold_ascii(text))


def normalize(raw: bytes) -> List[str]:
    """Normalize raw input bytes into the ordered list of surviving tokens.

    Args:
        raw: Raw input bytes (must be UTF-8)

    Returns:
        Tokens in left-to-right order of appearance, stopwords removed

    Raises:
        InvalidEncodingError: If the bytes are not valid UTF-8
    """
    stopwords = load_stopwords()
    return [token for token in tokenize(decode_input(raw)) if token not in stopwords]
