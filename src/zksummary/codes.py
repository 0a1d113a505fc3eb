"""Error and check code constants for zksummary.

These constants prevent stringly-typed error codes and ensure
client code uses the correct codes.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Fatal error kinds. Every kind aborts the current invocation."""

    INVALID_ENCODING = "INVALID_ENCODING"
    PROVE_ERROR = "PROVE_ERROR"
    VERIFY_ERROR = "VERIFY_ERROR"
    JOURNAL_DECODE_ERROR = "JOURNAL_DECODE_ERROR"
    IO_ERROR = "IO_ERROR"
    CONFIG_ERROR = "CONFIG_ERROR"


class CheckCode(str, Enum):
    """Issue codes reported by api.check_journal()."""

    # Journal is self-inconsistent
    OUTPUT_HASH_MISMATCH = "OUTPUT_HASH_MISMATCH"
    PROGRAM_HASH_NOT_FINALIZED = "PROGRAM_HASH_NOT_FINALIZED"

    # Journal does not match the supplied input
    INPUT_HASH_MISMATCH = "INPUT_HASH_MISMATCH"
    KEYWORDS_MISMATCH = "KEYWORDS_MISMATCH"

    # Journal does not match the supplied proof
    RECEIPT_INVALID = "RECEIPT_INVALID"
    RECEIPT_JOURNAL_MISMATCH = "RECEIPT_JOURNAL_MISMATCH"
    PROGRAM_HASH_MISMATCH = "PROGRAM_HASH_MISMATCH"
