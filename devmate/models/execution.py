from dataclasses import dataclass, field
from typing import Any, Optional

# Judge0 status ids: 1 = In Queue, 2 = Processing, >= 3 = finished
STATUS_PROCESSING = 2


@dataclass(frozen=True)
class ExecutionJob:
    """A submitted run, alive only for the duration of one request"""
    token: str
    language_id: int
    submitted_at: float


@dataclass(frozen=True)
class JobResult:
    status_id: int
    status_description: str
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    compile_output: Optional[str] = None
    raw: Any = field(default_factory=dict)

    @property
    def is_terminal(self) -> bool:
        return self.status_id > STATUS_PROCESSING

    @classmethod
    def from_payload(cls, payload: Any) -> "JobResult":
        data = payload if isinstance(payload, dict) else {}
        status = data.get("status") or {}
        if not isinstance(status, dict):
            status = {}
        try:
            status_id = int(status.get("id") or 0)
        except (TypeError, ValueError):
            status_id = 0
        return cls(
            status_id=status_id,
            status_description=status.get("description") or "Unknown",
            stdout=data.get("stdout"),
            stderr=data.get("stderr"),
            compile_output=data.get("compile_output"),
            raw=payload,
        )
