"""zksummary: deterministic keyword summaries committed to verifiable journals."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("zksummary")
except PackageNotFoundError:
    __version__ = "dev"

from zksummary.api import summarize, prove, check_journal, CheckIssue, CheckResult
from zksummary.codes import CheckCode, ErrorKind
from zksummary.host import HostResult
from zksummary.kernel.models import Journal, Keyword

__all__ = [
    "__version__",
    "summarize",
    "prove",
    "check_journal",
    "CheckIssue",
    "CheckResult",
    "CheckCode",
    "ErrorKind",
    "HostResult",
    "Journal",
    "Keyword",
]
