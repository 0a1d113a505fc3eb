"""Host orchestration: prove, verify, finalize and persist a journal.

State machine:
    IDLE -> INPUT_LOADED -> PROVING -> PROVED -> VERIFIED
         -> JOURNAL_EXTRACTED -> FINALIZED -> PERSISTED
FAILED is terminal and reachable from any state. Nothing is written unless
every step up to and including FINALIZED succeeded.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from zksummary._internal.io.artifacts import read_input, write_artifact_pair
from zksummary.errors import ConfigError, JournalDecodeError, ProveError, VerifyError
from zksummary.kernel.canonical import decode_journal, encode_journal
from zksummary.kernel.hash_utils import hash_keywords
from zksummary.kernel.models import Journal
from zksummary.zkvm import ProgramImage, Prover, Receipt, Verifier

logger = logging.getLogger(__name__)


class HostState(str, Enum):
    IDLE = "IDLE"
    INPUT_LOADED = "INPUT_LOADED"
    PROVING = "PROVING"
    PROVED = "PROVED"
    VERIFIED = "VERIFIED"
    JOURNAL_EXTRACTED = "JOURNAL_EXTRACTED"
    FINALIZED = "FINALIZED"
    PERSISTED = "PERSISTED"
    FAILED = "FAILED"


_NEXT_STATE = {
    HostState.IDLE: HostState.INPUT_LOADED,
    HostState.INPUT_LOADED: HostState.PROVING,
    HostState.PROVING: HostState.PROVED,
    HostState.PROVED: HostState.VERIFIED,
    HostState.VERIFIED: HostState.JOURNAL_EXTRACTED,
    HostState.JOURNAL_EXTRACTED: HostState.FINALIZED,
    HostState.FINALIZED: HostState.PERSISTED,
}


class HostConfig(BaseModel):
    """Paths for one orchestrator run."""
    input_path: Path
    journal_path: Path
    proof_path: Path

    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="after")
    def validate_paths(self) -> "HostConfig":
        paths = [p.resolve() for p in (self.input_path, self.journal_path, self.proof_path)]
        if len(set(paths)) != 3:
            raise ValueError("input, journal and proof paths must be distinct")
        if not self.input_path.is_file():
            raise ValueError(f"input file not found: {self.input_path}")
        return self

    @classmethod
    def build(cls, **values) -> "HostConfig":
        """Validate parameters, raising ConfigError instead of ValidationError."""
        missing = sorted(k for k, v in values.items() if v is None)
        if missing:
            raise ConfigError(f"Missing required parameter(s): {', '.join(missing)}")
        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc


class HostResult(BaseModel):
    """Outcome of a successful run."""
    journal: Journal
    journal_path: Path
    proof_path: Path
    program_hash: str
    states: List[HostState]


class HostOrchestrator:
    """Drives prover and verifier for one input and persists the verified journal.

    An instance runs at most one job; create a new one per input.
    """

    def __init__(self, image: ProgramImage, prover: Prover, verifier: Verifier) -> None:
        self.image = image
        self.prover = prover
        self.verifier = verifier
        self.state = HostState.IDLE
        self.history: List[HostState] = [HostState.IDLE]
        self.failure: Optional[str] = None

    def _advance(self, expected: HostState) -> None:
        nxt = _NEXT_STATE.get(self.state)
        if nxt is not expected:
            raise RuntimeError(f"Illegal transition {self.state.value} -> {expected.value}")
        logger.debug("%s -> %s", self.state.value, nxt.value)
        self.state = nxt
        self.history.append(nxt)

    def _fail(self, exc: BaseException) -> None:
        self.failure = str(exc)
        logger.debug("%s -> FAILED: %s", self.state.value, self.failure)
        self.state = HostState.FAILED
        self.history.append(HostState.FAILED)

    def run(self, config: HostConfig) -> HostResult:
        """Run the full pipeline for one input.

        Raises:
            ArtifactIOError, ProveError, VerifyError, JournalDecodeError:
                On failure at the corresponding step; nothing is persisted.
        """
        if self.state is not HostState.IDLE:
            raise RuntimeError(f"Orchestrator already used (state {self.state.value})")
        try:
            return self._run(config)
        except BaseException as exc:
            self._fail(exc)
            raise

    def submit(self, executor: Executor, config: HostConfig) -> "Future[HostResult]":
        """Run on a background worker; the caller awaits the returned future."""
        return executor.submit(self.run, config)

    def _run(self, config: HostConfig) -> HostResult:
        raw = read_input(config.input_path)
        self._advance(HostState.INPUT_LOADED)

        # Identity comes from the image bytes, never from anything the guest commits.
        program_hash = self.image.image_id()

        self._advance(HostState.PROVING)
        receipt = self._prove(raw)
        self._advance(HostState.PROVED)

        self._verify(receipt)
        self._advance(HostState.VERIFIED)

        journal = self._extract(receipt)
        self._advance(HostState.JOURNAL_EXTRACTED)

        final = journal.finalize(program_hash)
        self._advance(HostState.FINALIZED)

        write_artifact_pair([
            (config.journal_path, encode_journal(final) + b"\n"),
            (config.proof_path, receipt.to_bytes()),
        ])
        self._advance(HostState.PERSISTED)
        logger.info("Persisted journal %s and proof %s", config.journal_path, config.proof_path)

        return HostResult(
            journal=final,
            journal_path=config.journal_path,
            proof_path=config.proof_path,
            program_hash=program_hash,
            states=list(self.history),
        )

    def _prove(self, raw: bytes) -> Receipt:
        try:
            return self.prover.prove(self.image, raw)
        except ProveError:
            raise
        except Exception as exc:
            raise ProveError(f"Prover failed: {exc}") from exc

    def _verify(self, receipt: Receipt) -> None:
        try:
            ok = self.verifier.verify(receipt, self.image)
        except VerifyError:
            raise
        except Exception as exc:
            raise VerifyError(f"Verifier failed: {exc}") from exc
        if ok is not True:
            raise VerifyError(f"Receipt does not verify against image {self.image.name}")

    def _extract(self, receipt: Receipt) -> Journal:
        journal = decode_journal(receipt.journal_bytes())
        if journal.is_finalized:
            logger.warning(
                "Guest committed programHash %r instead of the placeholder; overwriting",
                journal.program_hash,
            )
        if hash_keywords(journal.keywords) != journal.output_hash:
            raise JournalDecodeError("Committed outputHash does not match committed keywords")
        return journal
