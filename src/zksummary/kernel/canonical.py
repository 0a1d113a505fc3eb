"""Canonical JSON codec for keywords and journals.

Encoding rules (byte-exact, shared by every conforming implementation):
- UTF-8 output; non-ASCII characters are written raw, never \\uXXXX-escaped
- Record fields in declared order (word, count / programHash, inputHash,
  outputHash, keywords); keys are NOT sorted
- Separators "," and ":" with no whitespace anywhere
- Integers as plain decimal
- Escapes: \\" \\\\ \\b \\f \\n \\r \\t, other control characters as lowercase \\u00xx
"""

import json
from typing import Any, Sequence

from pydantic import ValidationError

from zksummary.errors import JournalDecodeError
from zksummary.kernel.models import Journal, Keyword


def canonical_dumps(obj: Any) -> str:
    """Serialize plain JSON data in canonical form, preserving key order."""
    return json.dumps(
        obj,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def encode_keywords(keywords: Sequence[Keyword]) -> bytes:
    """Canonical bytes of an ordered keyword list."""
    return canonical_dumps([kw.model_dump() for kw in keywords]).encode("utf-8")


def encode_journal(journal: Journal) -> bytes:
    """Canonical bytes of a journal."""
    return canonical_dumps(journal.to_wire()).encode("utf-8")


def decode_journal(data: bytes, strict: bool = True) -> Journal:
    """Inverse of encode_journal().

    Args:
        data: Journal bytes
        strict: If True, the bytes must be exactly the canonical encoding of
            the decoded journal (committed bytes are always canonical). If
            False, any JSON layout is accepted (e.g. hand-formatted files).

    Raises:
        JournalDecodeError: If the bytes are not UTF-8, not JSON, not a
            well-formed journal, or (strict) not canonical
    """
    try:
        text = bytes(data).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise JournalDecodeError(f"Journal bytes are not valid UTF-8: {exc.reason}") from exc

    try:
        obj = json.loads(text)
    except (ValueError, RecursionError) as exc:
        raise JournalDecodeError(f"Journal bytes are not valid JSON: {exc}") from exc

    if not isinstance(obj, dict):
        raise JournalDecodeError(f"Journal must be a JSON object, got {type(obj).__name__}")

    try:
        journal = Journal.model_validate(obj)
    except ValidationError as exc:
        raise JournalDecodeError(f"Malformed journal: {exc}") from exc

    try:
        canonical = encode_journal(journal)
    except UnicodeEncodeError as exc:
        raise JournalDecodeError(f"Journal contains text that is not encodable as UTF-8: {exc.reason}") from exc

    if strict and canonical != bytes(data):
        raise JournalDecodeError("Journal bytes are not in canonical form")
    return journal
