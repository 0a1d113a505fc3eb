"""Public API for zksummary.

High-level functions that return complete, structured results.
Callers should use these functions instead of importing from _internal.
"""

import os
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel

from zksummary._internal.io.artifacts import load_journal, read_bytes, read_input
from zksummary.codes import CheckCode
from zksummary.errors import JournalDecodeError
from zksummary.host import HostConfig, HostOrchestrator, HostResult
from zksummary.kernel import guest
from zksummary.kernel.canonical import decode_journal
from zksummary.kernel.hash_utils import hash_input, hash_keywords
from zksummary.kernel.models import Journal
from zksummary.zkvm import DevModeProver, ProgramImage, Prover, Receipt, Verifier, guest_image

PathLike = Union[str, os.PathLike, Path]


def _normalize_path(path: Optional[PathLike]) -> Optional[Path]:
    """Normalize path input to Path object."""
    if path is None:
        return None
    return Path(path) if not isinstance(path, Path) else path


class CheckIssue(BaseModel):
    """A single reason a journal failed a check."""
    code: CheckCode
    message: str


class CheckResult(BaseModel):
    """Result of check_journal()."""
    ok: bool  # True if no issues
    journal: Journal
    issues: List[CheckIssue]  # sorted by (code, message)


def summarize(raw: bytes) -> Journal:
    """Run the guest logic locally, without proving.

    The returned journal carries the programHash placeholder.

    Raises:
        InvalidEncodingError: If raw is not valid UTF-8
    """
    return guest.build_journal(raw)


def prove(
    input_path: PathLike,
    journal_path: PathLike,
    proof_path: PathLike,
    prover: Optional[Prover] = None,
    verifier: Optional[Verifier] = None,
    image: Optional[ProgramImage] = None,
) -> HostResult:
    """Prove one input, verify the receipt, and persist journal and proof.

    Defaults to the bundled guest image and the in-process dev-mode prover.

    Raises:
        ConfigError, ArtifactIOError, ProveError, VerifyError, JournalDecodeError
    """
    config = HostConfig.build(
        input_path=_normalize_path(input_path),
        journal_path=_normalize_path(journal_path),
        proof_path=_normalize_path(proof_path),
    )
    if prover is None or verifier is None:
        dev = DevModeProver()
        prover = prover or dev
        verifier = verifier or dev
    orchestrator = HostOrchestrator(image or guest_image(), prover, verifier)
    return orchestrator.run(config)


def check_journal(
    journal_path: PathLike,
    input_path: Optional[PathLike] = None,
    proof_path: Optional[PathLike] = None,
    verifier: Optional[Verifier] = None,
    image: Optional[ProgramImage] = None,
) -> CheckResult:
    """Check a persisted journal for consistency.

    Always checks outputHash against keywords and that programHash is set.
    With input_path, recomputes inputHash and keywords from the input.
    With proof_path, verifies the receipt against the image and compares its
    committed journal and the image identity with the persisted journal.

    Raises:
        ArtifactIOError: If a file cannot be read
        JournalDecodeError: If the journal file is malformed
        InvalidEncodingError: If the input is not valid UTF-8
    """
    journal = load_journal(_normalize_path(journal_path))
    issues: List[CheckIssue] = []

    if hash_keywords(journal.keywords) != journal.output_hash:
        issues.append(CheckIssue(
            code=CheckCode.OUTPUT_HASH_MISMATCH,
            message=f"outputHash {journal.output_hash} does not match keywords",
        ))
    if not journal.is_finalized:
        issues.append(CheckIssue(
            code=CheckCode.PROGRAM_HASH_NOT_FINALIZED,
            message="programHash still holds the guest placeholder",
        ))

    if input_path is not None:
        raw = read_input(_normalize_path(input_path))
        actual = hash_input(raw)
        if actual != journal.input_hash:
            issues.append(CheckIssue(
                code=CheckCode.INPUT_HASH_MISMATCH,
                message=f"inputHash {journal.input_hash} != {actual}",
            ))
        reference = guest.build_journal(raw)
        if reference.keywords != journal.keywords:
            issues.append(CheckIssue(
                code=CheckCode.KEYWORDS_MISMATCH,
                message="keywords differ from a fresh summary of the input",
            ))

    if proof_path is not None:
        image = image or guest_image()
        issues.extend(_check_proof(journal, _normalize_path(proof_path), verifier or DevModeProver(), image))

    issues.sort(key=lambda i: (i.code.value, i.message))
    return CheckResult(ok=not issues, journal=journal, issues=issues)


def _check_proof(journal: Journal, proof_path: Path, verifier: Verifier, image: ProgramImage) -> List[CheckIssue]:
    issues: List[CheckIssue] = []
    try:
        receipt = Receipt.from_bytes(read_bytes(proof_path, "proof"))
    except ValueError as exc:
        return [CheckIssue(code=CheckCode.RECEIPT_INVALID, message=str(exc))]

    try:
        verdict = verifier.verify(receipt, image)
    except Exception as exc:
        return [CheckIssue(code=CheckCode.RECEIPT_INVALID, message=f"verifier failed: {exc}")]
    if verdict is not True:
        return [CheckIssue(
            code=CheckCode.RECEIPT_INVALID,
            message=f"receipt does not verify against image {image.image_id()}",
        )]

    try:
        committed = decode_journal(receipt.journal_bytes())
    except JournalDecodeError as exc:
        return [CheckIssue(code=CheckCode.RECEIPT_INVALID, message=str(exc))]

    if {**committed.to_wire(), "programHash": journal.program_hash} != journal.to_wire():
        issues.append(CheckIssue(
            code=CheckCode.RECEIPT_JOURNAL_MISMATCH,
            message="journal differs from the journal committed in the receipt",
        ))
    if journal.program_hash != image.image_id():
        issues.append(CheckIssue(
            code=CheckCode.PROGRAM_HASH_MISMATCH,
            message=f"programHash {journal.program_hash} != image {image.image_id()}",
        ))
    return issues
