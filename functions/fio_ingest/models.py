from typing import List, Optional

from pydantic import BaseModel, ConfigDict

try:  # pragma: no cover
    from .errors import Stage
except Exception:  # pragma: no cover
    from errors import Stage


class DateRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: str
    end: str


class AccountError(BaseModel):
    model_config = ConfigDict(frozen=True)

    stage: Stage
    kind: str  # exception class name, e.g. "HTTPStatusError"
    detail: str


class AccountResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    account: str
    success: bool
    message: Optional[str] = None
    error: Optional[AccountError] = None

    @property
    def status(self) -> str:
        return "success" if self.success else "failed"


class ResultEntry(BaseModel):
    account: str
    status: str
    message: str = ""
    error: str = ""


class IngestSummary(BaseModel):
    processed: int
    succeeded: int
    failed: int
    results: List[ResultEntry] = []
