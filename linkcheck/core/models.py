from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LinkStatus:
    """Verdict for one checked link.

    ``status_code`` is only meaningful for HTTP checks and is 0 otherwise.
    ``index`` is the position of the link in the batch it was submitted with.
    """

    link: str
    valid: bool
    reason: str = ""
    status_code: int = 0
    index: int = 0


@dataclass(frozen=True)
class ValidationRequest:
    index: int
    link: str
    base_context: str
    timeout: float


@dataclass(frozen=True)
class ExtractedLink:
    target: str
    line: Optional[int] = None


@dataclass(frozen=True)
class ResultEntry:
    status: LinkStatus
    source: str
    line: Optional[int] = None


@dataclass(frozen=True)
class Summary:
    total: int
    valid: int
    invalid: int
