"""Commitment digests for journals.

Key rules:
- SHA256 over exact bytes (raw input bytes, canonical keyword bytes)
- Rendered as "sha256:" followed by 64 lowercase hex characters
- The same convention is used for inputHash and outputHash
"""

import hashlib
import re
from typing import TYPE_CHECKING, Sequence, Union

if TYPE_CHECKING:
    from zksummary.kernel.models import Keyword

DIGEST_PREFIX = "sha256:"

_DIGEST_RE = re.compile(r"^sha256:[0-9a-f]{64}$")


def digest_bytes(data: Union[bytes, bytearray, memoryview]) -> str:
    """Compute SHA256 of raw bytes, prefixed with "sha256:"."""
    return DIGEST_PREFIX + hashlib.sha256(bytes(data)).hexdigest()


def hash_input(raw: bytes) -> str:
    """Fingerprint of the raw input bytes, exactly as received (no decoding)."""
    return digest_bytes(raw)


def hash_keywords(keywords: Sequence["Keyword"]) -> str:
    """Fingerprint of the canonical encoding of a ranked keyword list."""
    from zksummary.kernel.canonical import encode_keywords

    return digest_bytes(encode_keywords(keywords))


def is_digest(value: str) -> bool:
    """True if value follows the "sha256:<64 lowercase hex>" convention."""
    return isinstance(value, str) and bool(_DIGEST_RE.match(value))
