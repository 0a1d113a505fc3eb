"""Read input and persist journal/proof artifacts.

Artifacts are written as a pair: both targets end up in their final form or
neither is changed. Each file is staged next to its target and moved into
place with os.replace(); a failure while swapping restores whatever was
there before.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from zksummary.errors import ArtifactIOError
from zksummary.kernel.canonical import decode_journal
from zksummary.kernel.models import Journal

logger = logging.getLogger(__name__)


def read_bytes(path: Path, what: str = "file") -> bytes:
    """Read a file, mapping OS errors to ArtifactIOError."""
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise ArtifactIOError(f"Failed to read {what} {path}: {exc}") from exc


def read_input(path: Path) -> bytes:
    return read_bytes(path, "input")


def load_journal(path: Path) -> Journal:
    """Load a persisted journal. Any JSON layout is accepted."""
    return decode_journal(read_bytes(path, "journal"), strict=False)


def _stage(target: Path, data: bytes) -> Path:
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return Path(tmp_name)


def _reserve_backup(target: Path) -> Path:
    fd, name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".bak")
    os.close(fd)
    return Path(name)


def write_artifact_pair(artifacts: Sequence[Tuple[Path, bytes]]) -> None:
    """Atomically persist several artifacts as one unit.

    Args:
        artifacts: (target path, bytes) pairs; targets must be distinct

    Raises:
        ArtifactIOError: If any artifact could not be written. Targets are
            left as they were before the call.
    """
    targets = [Path(target) for target, _ in artifacts]
    if len(set(t.resolve() for t in targets)) != len(targets):
        raise ArtifactIOError("Artifact targets must be distinct paths")

    staged: List[Tuple[Path, Path]] = []
    # (target, backup of previous content or None), in swap order
    swapped: List[Tuple[Path, Optional[Path]]] = []
    try:
        for target, (_, data) in zip(targets, artifacts):
            staged.append((target, _stage(target, data)))

        for target, tmp in staged:
            backup: Optional[Path] = None
            if target.exists():
                backup = _reserve_backup(target)
                try:
                    os.replace(target, backup)
                except BaseException:
                    backup.unlink(missing_ok=True)
                    raise
            swapped.append((target, backup))
            os.replace(tmp, target)
    except BaseException as exc:
        _rollback(swapped)
        if isinstance(exc, OSError) and not isinstance(exc, ArtifactIOError):
            raise ArtifactIOError(f"Failed to write artifacts: {exc}") from exc
        raise
    finally:
        for _, tmp in staged:
            tmp.unlink(missing_ok=True)

    for target, backup in swapped:
        if backup is not None:
            backup.unlink(missing_ok=True)
        logger.debug("Wrote %s", target)


def _rollback(swapped: List[Tuple[Path, Optional[Path]]]) -> None:
    for target, backup in reversed(swapped):
        try:
            if backup is not None:
                os.replace(backup, target)
            else:
                target.unlink(missing_ok=True)
        except OSError as exc:
            logger.error("Could not restore %s after failed write: %s", target, exc)
