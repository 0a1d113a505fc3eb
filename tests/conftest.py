"""Pytest configuration for tests.

No sys.path hacks - tests should import from installed zksummary package.
"""

from pathlib import Path

import pytest

from zksummary.kernel import guest
from zksummary.kernel.canonical import encode_journal
from zksummary.zkvm import ProgramImage, Receipt

QUICK_FOX = b"The quick brown fox jumps over the lazy dog. The dog barks."


class EchoProver:
    """Fast fake collaborator: runs the guest and echoes its journal bytes.

    verify() returns whatever `verdict` is set to, so tests can drive the
    verification gate independently of decoding.
    """

    def __init__(self, verdict=True, journal_override=None, prove_error=None, verify_error=None):
        self.verdict = verdict
        self.journal_override = journal_override
        self.prove_error = prove_error
        self.verify_error = verify_error
        self.prove_calls = 0
        self.verify_calls = 0

    def prove(self, image: ProgramImage, input_bytes: bytes) -> Receipt:
        self.prove_calls += 1
        if self.prove_error is not None:
            raise self.prove_error
        if self.journal_override is not None:
            journal = self.journal_override
        else:
            journal = guest.execute(input_bytes)
        return Receipt(image_id=image.image_id(), journal=journal, seal=b"echo")

    def verify(self, receipt: Receipt, expected_image: ProgramImage) -> bool:
        self.verify_calls += 1
        if self.verify_error is not None:
            raise self.verify_error
        return self.verdict


@pytest.fixture
def fake_image() -> ProgramImage:
    return ProgramImage(name="test-guest", elf=b"\x7fELF test guest image")


@pytest.fixture
def input_file(tmp_path) -> Path:
    path = tmp_path / "input.txt"
    path.write_bytes(QUICK_FOX)
    return path


@pytest.fixture
def committed_quick_fox() -> bytes:
    return encode_journal(guest.build_journal(QUICK_FOX))
