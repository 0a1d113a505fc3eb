"""Seam to the external proving collaborator.

The proof system is opaque to zksummary. The host only needs:
- prove(image, input) -> Receipt
- Receipt.journal_bytes() -> the exact bytes the guest committed
- verify(receipt, expected_image) -> bool
- a content-derived image identity computable without running the image

DevModeProver implements this contract in process for development and tests.
Its seal is a keyed SHA256 over image identity and journal, NOT a
zero-knowledge proof: it shows the pipeline is wired, not that anything was
proven.
"""

from __future__ import annotations

import base64
import hashlib
import json
import logging
from dataclasses import dataclass
from importlib.resources import files
from typing import Protocol, Tuple

from zksummary.errors import ProveError, ZkSummaryError
from zksummary.kernel import guest
from zksummary.kernel.canonical import canonical_dumps

logger = logging.getLogger(__name__)

GUEST_IMAGE_NAME = "zksummary-guest"

# Everything the guest's committed output depends on, in a fixed order.
GUEST_IMAGE_MEMBERS: Tuple[str, ...] = (
    "__init__.py",
    "canonical.py",
    "guest.py",
    "hash_utils.py",
    "models.py",
    "normalize.py",
    "ranking.py",
    "stopwords.txt",
)

DEV_RECEIPT_MAGIC = b"ZKSUMMARY-DEV-RECEIPT/1\n"
_DEV_SEAL_DOMAIN = b"zksummary-dev-seal\x00"


@dataclass(frozen=True)
class ProgramImage:
    """An executable program image; its identity is derived from its bytes."""
    name: str
    elf: bytes

    def image_id(self) -> str:
        """Lowercase hex SHA256 of the image bytes (no prefix)."""
        return hashlib.sha256(self.elf).hexdigest()


@dataclass(frozen=True)
class Receipt:
    """Binds an execution of a specific image to the journal it committed."""
    image_id: str
    journal: bytes
    seal: bytes

    def journal_bytes(self) -> bytes:
        return self.journal

    def to_bytes(self) -> bytes:
        """Serialize for persistence as the proof artifact."""
        body = canonical_dumps({
            "imageId": self.image_id,
            "journal": base64.b64encode(self.journal).decode("ascii"),
            "seal": self.seal.hex(),
        })
        return DEV_RECEIPT_MAGIC + body.encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> "Receipt":
        """Inverse of to_bytes().

        Raises:
            ValueError: If the bytes are not a serialized receipt
        """
        if not data.startswith(DEV_RECEIPT_MAGIC):
            raise ValueError("Not a zksummary receipt (bad magic)")
        try:
            obj = json.loads(data[len(DEV_RECEIPT_MAGIC):].decode("utf-8"))
            return cls(
                image_id=str(obj["imageId"]),
                journal=base64.b64decode(obj["journal"], validate=True),
                seal=bytes.fromhex(obj["seal"]),
            )
        except (UnicodeDecodeError, KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Malformed receipt: {exc}") from exc


class Prover(Protocol):
    def prove(self, image: ProgramImage, input_bytes: bytes) -> Receipt:
        ...


class Verifier(Protocol):
    def verify(self, receipt: Receipt, expected_image: ProgramImage) -> bool:
        ...


def _frame(name: str, content: bytes) -> bytes:
    header = f"{name}\x00{len(content)}\x00".encode("utf-8")
    return header + content


def guest_image() -> ProgramImage:
    """Build the program image of the bundled guest from its source files.

    Any change to the guest logic or the stopword list changes the identity.
    """
    root = files("zksummary.kernel")
    elf = b"".join(
        _frame(member, root.joinpath(member).read_bytes())
        for member in GUEST_IMAGE_MEMBERS
    )
    return ProgramImage(name=GUEST_IMAGE_NAME, elf=elf)


def _dev_seal(image_id: str, journal: bytes) -> bytes:
    h = hashlib.sha256()
    h.update(_DEV_SEAL_DOMAIN)
    h.update(image_id.encode("ascii"))
    h.update(b"\x00")
    h.update(journal)
    return h.digest()


class DevModeProver:
    """In-process prover/verifier pair that runs the bundled guest directly."""

    def __init__(self) -> None:
        self._image_id = guest_image().image_id()

    def prove(self, image: ProgramImage, input_bytes: bytes) -> Receipt:
        image_id = image.image_id()
        if image_id != self._image_id:
            raise ProveError(
                f"Dev-mode prover can only execute the bundled guest image "
                f"(expected {self._image_id}, got {image_id})"
            )
        logger.info("Executing %s on %d input bytes (dev mode)", image.name, len(input_bytes))
        try:
            journal = guest.execute(input_bytes)
        except ZkSummaryError as exc:
            raise ProveError(f"Guest execution faulted: {exc}") from exc
        return Receipt(image_id=image_id, journal=journal, seal=_dev_seal(image_id, journal))

    def verify(self, receipt: Receipt, expected_image: ProgramImage) -> bool:
        expected_id = expected_image.image_id()
        if receipt.image_id != expected_id:
            logger.warning("Receipt image %s does not match expected image %s", receipt.image_id, expected_id)
            return False
        if receipt.seal != _dev_seal(expected_id, receipt.journal):
            logger.warning("Receipt seal does not match its journal")
            return False
        return True
