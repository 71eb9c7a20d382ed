from pydantic import BaseModel, Field, HttpUrl
from typing import List, Literal, Optional

from linkcheck.core.models import ResultEntry, Summary


class ScanRequest(BaseModel):
    url: HttpUrl
    only_dead: bool = False
    timeout: Optional[float] = Field(default=None, gt=0)
    workers: Optional[int] = Field(default=None, ge=1)

class ScanResponse(BaseModel):
    task_id: str

class LinkCheckResult(BaseModel):
    url: str
    status: Literal["valid", "invalid", "error"]
    status_code: Optional[int] = None
    error: Optional[str] = None
    source: str
    line: Optional[int] = None

    @classmethod
    def from_entry(cls, entry: ResultEntry) -> "LinkCheckResult":
        status = entry.status
        return cls(
            url=status.link,
            status="valid" if status.valid else "invalid",
            status_code=status.status_code or None,
            error=status.reason or None,
            source=entry.source,
            line=entry.line,
        )

class SummaryModel(BaseModel):
    total: int
    valid: int
    invalid: int
    duration: Optional[str] = None

    @classmethod
    def from_summary(cls, summary: Summary, duration: Optional[str] = None) -> "SummaryModel":
        return cls(total=summary.total, valid=summary.valid, invalid=summary.invalid, duration=duration)

class CheckOutput(BaseModel):
    summary: SummaryModel
    results: List[LinkCheckResult]

class TaskStatus(BaseModel):
    task_id: str
    status: str
    result: Optional[dict] = None

class ResultsResponse(BaseModel):
    task_id: str
    summary: Optional[SummaryModel] = None
    results: List[LinkCheckResult]
    message: Optional[str] = None
