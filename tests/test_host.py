"""Tests for the host orchestrator."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from zksummary.errors import (
    ArtifactIOError,
    ConfigError,
    JournalDecodeError,
    ProveError,
    VerifyError,
)
from zksummary.host import HostConfig, HostOrchestrator, HostState
from zksummary.kernel import guest
from zksummary.kernel.canonical import canonical_dumps, decode_journal, encode_journal
from zksummary.kernel.models import PROGRAM_HASH_PLACEHOLDER
from zksummary.zkvm import DevModeProver, guest_image

from conftest import QUICK_FOX, EchoProver

HAPPY_PATH = [
    HostState.IDLE,
    HostState.INPUT_LOADED,
    HostState.PROVING,
    HostState.PROVED,
    HostState.VERIFIED,
    HostState.JOURNAL_EXTRACTED,
    HostState.FINALIZED,
    HostState.PERSISTED,
]


def _config(tmp_path, input_file):
    return HostConfig.build(
        input_path=input_file,
        journal_path=tmp_path / "out" / "journal.json",
        proof_path=tmp_path / "out" / "proof.bin",
    )


def _assert_nothing_persisted(config):
    assert not config.journal_path.exists()
    assert not config.proof_path.exists()


class TestHostConfig:
    def test_valid(self, tmp_path, input_file):
        config = _config(tmp_path, input_file)
        assert config.input_path == input_file

    def test_missing_parameter(self, tmp_path, input_file):
        with pytest.raises(ConfigError, match="proof_path"):
            HostConfig.build(input_path=input_file, journal_path=tmp_path / "j.json", proof_path=None)

    def test_input_must_exist(self, tmp_path):
        with pytest.raises(ConfigError, match="input file not found"):
            HostConfig.build(
                input_path=tmp_path / "missing.txt",
                journal_path=tmp_path / "j.json",
                proof_path=tmp_path / "p.bin",
            )

    def test_paths_must_be_distinct(self, tmp_path, input_file):
        with pytest.raises(ConfigError, match="distinct"):
            HostConfig.build(
                input_path=input_file,
                journal_path=tmp_path / "same",
                proof_path=tmp_path / "same",
            )
        with pytest.raises(ConfigError, match="distinct"):
            HostConfig.build(
                input_path=input_file,
                journal_path=input_file,
                proof_path=tmp_path / "p.bin",
            )


class TestHappyPath:
    def test_persists_finalized_journal_and_proof(self, tmp_path, input_file, fake_image):
        prover = EchoProver()
        config = _config(tmp_path, input_file)
        result = HostOrchestrator(fake_image, prover, prover).run(config)

        persisted = decode_journal(config.journal_path.read_bytes().rstrip(b"\n"))
        assert persisted == result.journal
        assert persisted.program_hash == fake_image.image_id()
        assert persisted.input_hash == guest.build_journal(QUICK_FOX).input_hash
        assert [kw.word for kw in persisted.keywords] == ["dog", "barks", "brown", "fox", "jumps"]
        assert config.proof_path.exists()
        assert result.program_hash == fake_image.image_id()

    def test_state_history(self, tmp_path, input_file, fake_image):
        prover = EchoProver()
        orchestrator = HostOrchestrator(fake_image, prover, prover)
        result = orchestrator.run(_config(tmp_path, input_file))
        assert orchestrator.state is HostState.PERSISTED
        assert orchestrator.history == HAPPY_PATH
        assert result.states == HAPPY_PATH
        assert orchestrator.failure is None

    def test_persisted_journal_is_canonical_with_newline(self, tmp_path, input_file, fake_image):
        prover = EchoProver()
        config = _config(tmp_path, input_file)
        result = HostOrchestrator(fake_image, prover, prover).run(config)
        assert config.journal_path.read_bytes() == encode_journal(result.journal) + b"\n"

    def test_empty_input(self, tmp_path, fake_image):
        empty = tmp_path / "empty.txt"
        empty.write_bytes(b"")
        prover = EchoProver()
        config = _config(tmp_path, empty)
        result = HostOrchestrator(fake_image, prover, prover).run(config)
        assert result.journal.keywords == []
        assert b'"keywords":[]' in config.journal_path.read_bytes()

    def test_guest_claimed_identity_is_overwritten(self, tmp_path, input_file, fake_image):
        wire = guest.build_journal(QUICK_FOX).to_wire()
        wire["programHash"] = "f" * 64
        prover = EchoProver(journal_override=canonical_dumps(wire).encode("utf-8"))
        config = _config(tmp_path, input_file)
        result = HostOrchestrator(fake_image, prover, prover).run(config)
        assert result.journal.program_hash == fake_image.image_id()

    def test_dev_mode_prover(self, tmp_path, input_file):
        dev = DevModeProver()
        image = guest_image()
        config = _config(tmp_path, input_file)
        result = HostOrchestrator(image, dev, dev).run(config)
        assert result.journal.program_hash == image.image_id()
        assert result.journal.program_hash != PROGRAM_HASH_PLACEHOLDER

    def test_submit_to_executor(self, tmp_path, input_file, fake_image):
        prover = EchoProver()
        orchestrator = HostOrchestrator(fake_image, prover, prover)
        with ThreadPoolExecutor(max_workers=1) as executor:
            result = orchestrator.submit(executor, _config(tmp_path, input_file)).result()
        assert result.states[-1] is HostState.PERSISTED

    def test_orchestrator_is_single_use(self, tmp_path, input_file, fake_image):
        prover = EchoProver()
        orchestrator = HostOrchestrator(fake_image, prover, prover)
        orchestrator.run(_config(tmp_path, input_file))
        with pytest.raises(RuntimeError, match="already used"):
            orchestrator.run(_config(tmp_path, input_file))


class TestFailures:
    def test_verification_gate(self, tmp_path, input_file, fake_image):
        # Journal would decode fine, but verify() says no
        prover = EchoProver(verdict=False)
        config = _config(tmp_path, input_file)
        orchestrator = HostOrchestrator(fake_image, prover, prover)
        with pytest.raises(VerifyError):
            orchestrator.run(config)
        _assert_nothing_persisted(config)
        assert orchestrator.state is HostState.FAILED
        assert orchestrator.history[-2] is HostState.PROVED
        assert orchestrator.failure

    def test_truthy_non_bool_verdict_rejected(self, tmp_path, input_file, fake_image):
        prover = EchoProver(verdict="yes")
        config = _config(tmp_path, input_file)
        with pytest.raises(VerifyError):
            HostOrchestrator(fake_image, prover, prover).run(config)
        _assert_nothing_persisted(config)

    def test_verifier_exception_is_verify_error(self, tmp_path, input_file, fake_image):
        prover = EchoProver(verify_error=RuntimeError("verifier crashed"))
        config = _config(tmp_path, input_file)
        with pytest.raises(VerifyError, match="verifier crashed"):
            HostOrchestrator(fake_image, prover, prover).run(config)
        _assert_nothing_persisted(config)

    def test_prover_exception_is_prove_error(self, tmp_path, input_file, fake_image):
        prover = EchoProver(prove_error=RuntimeError("out of memory"))
        config = _config(tmp_path, input_file)
        orchestrator = HostOrchestrator(fake_image, prover, prover)
        with pytest.raises(ProveError, match="out of memory"):
            orchestrator.run(config)
        _assert_nothing_persisted(config)
        assert prover.verify_calls == 0
        assert orchestrator.history[-2] is HostState.PROVING

    def test_guest_fault(self, tmp_path, fake_image):
        bad = tmp_path / "bad.txt"
        bad.write_bytes(b"\xff\xfe")
        dev = DevModeProver()
        config = _config(tmp_path, bad)
        with pytest.raises(ProveError):
            HostOrchestrator(guest_image(), dev, dev).run(config)
        _assert_nothing_persisted(config)

    def test_malformed_journal(self, tmp_path, input_file, fake_image):
        prover = EchoProver(journal_override=b"not a journal")
        config = _config(tmp_path, input_file)
        orchestrator = HostOrchestrator(fake_image, prover, prover)
        with pytest.raises(JournalDecodeError):
            orchestrator.run(config)
        _assert_nothing_persisted(config)
        assert orchestrator.history[-2] is HostState.VERIFIED

    def test_inconsistent_output_hash(self, tmp_path, input_file, fake_image):
        wire = guest.build_journal(QUICK_FOX).to_wire()
        wire["outputHash"] = guest.build_journal(b"other words").output_hash
        prover = EchoProver(journal_override=canonical_dumps(wire).encode("utf-8"))
        config = _config(tmp_path, input_file)
        with pytest.raises(JournalDecodeError, match="outputHash"):
            HostOrchestrator(fake_image, prover, prover).run(config)
        _assert_nothing_persisted(config)

    def test_input_vanished(self, tmp_path, input_file, fake_image):
        config = _config(tmp_path, input_file)
        input_file.unlink()
        prover = EchoProver()
        orchestrator = HostOrchestrator(fake_image, prover, prover)
        with pytest.raises(ArtifactIOError):
            orchestrator.run(config)
        assert prover.prove_calls == 0
        assert orchestrator.history == [HostState.IDLE, HostState.FAILED]
        _assert_nothing_persisted(config)

    def test_deeply_nested_journal(self, tmp_path, input_file, fake_image):
        prover = EchoProver(journal_override=b"[" * 200000)
        config = _config(tmp_path, input_file)
        with pytest.raises(JournalDecodeError):
            HostOrchestrator(fake_image, prover, prover).run(config)
        _assert_nothing_persisted(config)
