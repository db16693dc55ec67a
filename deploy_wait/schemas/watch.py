from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from deploy_wait.core.exceptions import error_message
from deploy_wait.models.enums import Phase

T = TypeVar("T")


class PollConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    timeout_seconds: float = Field(ge=0)
    interval_seconds: float = Field(ge=0)


@dataclass(frozen=True)
class PhaseResult(Generic[T]):
    """Outcome of one phase: either ``value`` or ``error`` is meaningful."""

    phase: Phase
    value: T | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str | None:
        if self.error is None:
            return None
        return error_message(self.error)


class RunResult(BaseModel):
    success: bool
    deploy_id: str | None = None
    url: str | None = None
    failed_phase: Phase | None = None
    error: str | None = None

    @classmethod
    def failed(cls, result: PhaseResult, deploy_id: str | None = None, url: str | None = None) -> "RunResult":
        return cls(success=False, deploy_id=deploy_id, url=url, failed_phase=result.phase, error=result.message)
