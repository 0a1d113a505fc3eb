"""Guest program: the deterministic entry point run inside the verifiable environment.

The guest reads nothing but its input bytes: no clock, no randomness, no
environment. Its only observable output is the committed journal bytes.
"""

from zksummary.kernel.canonical import encode_journal
from zksummary.kernel.hash_utils import hash_input, hash_keywords
from zksummary.kernel.models import PROGRAM_HASH_PLACEHOLDER, Journal
from zksummary.kernel.normalize import normalize
from zksummary.kernel.ranking import rank_keywords


def build_journal(raw: bytes) -> Journal:
    """Summarize raw input into an unfinalized journal.

    Raises:
        InvalidEncodingError: If the input is not valid UTF-8
    """
    keywords = rank_keywords(normalize(raw))
    return Journal(
        program_hash=PROGRAM_HASH_PLACEHOLDER,
        input_hash=hash_input(raw),
        output_hash=hash_keywords(keywords),
        keywords=keywords,
    )


def execute(raw: bytes) -> bytes:
    """Run the guest on raw input and return the bytes it commits.

    A failure raises before anything is returned, so a faulted execution
    never yields journal bytes.
    """
    return encode_journal(build_journal(raw))
