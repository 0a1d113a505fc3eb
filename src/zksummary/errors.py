"""Exception hierarchy for zksummary.

Every error is fatal for the current invocation; nothing is retried.
"""

from typing import Optional

from zksummary.codes import ErrorKind


class ZkSummaryError(Exception):
    """Base class for all zksummary failures."""

    kind: Optional[ErrorKind] = None

    def __str__(self) -> str:
        message = super().__str__()
        if self.kind is None:
            return message
        return f"[{self.kind.value}] {message}"


class InvalidEncodingError(ZkSummaryError, ValueError):
    """Raw input is not valid UTF-8."""

    kind = ErrorKind.INVALID_ENCODING


class ProveError(ZkSummaryError):
    """The proving collaborator failed to produce a receipt."""

    kind = ErrorKind.PROVE_ERROR


class VerifyError(ZkSummaryError):
    """A receipt did not verify against the expected program image."""

    kind = ErrorKind.VERIFY_ERROR


class JournalDecodeError(ZkSummaryError, ValueError):
    """Committed bytes are not a well-formed canonical journal."""

    kind = ErrorKind.JOURNAL_DECODE_ERROR


class ArtifactIOError(ZkSummaryError, OSError):
    """Reading the input or writing an artifact failed."""

    kind = ErrorKind.IO_ERROR


class ConfigError(ZkSummaryError, ValueError):
    """A required parameter is missing or invalid."""

    kind = ErrorKind.CONFIG_ERROR
