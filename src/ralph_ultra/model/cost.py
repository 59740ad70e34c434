from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any

from ralph_ultra.model.enums import Provider

COST_HISTORY_VERSION = "1.0"


@dataclass(frozen=True)
class InProgressTask:
    task_id: str
    model_id: str
    provider: Provider
    start_time: str
    estimated_cost: float
    retry_count: int = 0


@dataclass(frozen=True)
class ExecutionRecord:
    """Estimated versus actual cost of one finished task execution."""

    task_id: str
    model_id: str
    provider: Provider
    start_time: str
    end_time: str
    estimated_cost: float
    actual_cost: float
    input_tokens: int
    output_tokens: int
    success: bool
    retry_count: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExecutionRecord:
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        values["provider"] = Provider(values["provider"])
        return cls(**values)


@dataclass(frozen=True)
class SessionCosts:
    total_estimated: float
    total_actual: float
    tasks_completed: int
    tasks_successful: int
    records: tuple[ExecutionRecord, ...]
