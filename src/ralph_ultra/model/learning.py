"""Learning records: raw run outcomes and their per-key aggregates."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any

from ralph_ultra.model.enums import Capability, Complexity, Provider, TaskType

LEARNING_DB_VERSION = "1.0"


@dataclass(frozen=True)
class RunMetrics:
    """Measured outcome of one task execution, as reported by the executor."""

    story_id: str
    task_type: TaskType
    provider: Provider
    model_id: str
    duration_minutes: float
    cost_usd: float
    success: bool
    project: str = ""
    story_title: str = ""
    complexity: Complexity = Complexity.MEDIUM
    detected_capabilities: tuple[Capability, ...] = ()
    input_tokens: int = 0
    output_tokens: int = 0
    retry_count: int = 0
    ac_total: int = 0
    ac_passed: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    @property
    def ac_pass_rate(self) -> float:
        """Fraction of acceptance criteria passed.

        With no criteria recorded the run's success flag stands in.
        """
        if self.ac_total <= 0:
            return 1.0 if self.success else 0.0
        return self.ac_passed / self.ac_total


@dataclass(frozen=True)
class ModelPerformanceRecord:
    """Immutable log entry for one completed run."""

    id: str
    timestamp: str
    project: str
    story_id: str
    story_title: str
    task_type: TaskType
    complexity: Complexity
    detected_capabilities: tuple[Capability, ...]
    provider: Provider
    model_id: str
    duration_minutes: float
    input_tokens: int
    output_tokens: int
    total_tokens: int
    cost_usd: float
    success: bool
    retry_count: int
    ac_total: int
    ac_passed: int
    ac_pass_rate: float
    efficiency_score: float
    speed_score: float
    reliability_score: float

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["detected_capabilities"] = [c.value for c in self.detected_capabilities]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModelPerformanceRecord:
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        values["task_type"] = TaskType(values["task_type"])
        values["complexity"] = Complexity(values.get("complexity", Complexity.MEDIUM.value))
        values["provider"] = Provider(values["provider"])
        values["detected_capabilities"] = tuple(
            Capability(c) for c in values.get("detected_capabilities", ())
        )
        return cls(**values)


@dataclass(frozen=True)
class ModelLearning:
    """Aggregate over every run of one (provider, model, task type) key."""

    provider: Provider
    model_id: str
    task_type: TaskType
    total_runs: int
    successful_runs: int
    success_rate: float
    avg_duration_minutes: float
    avg_cost_usd: float
    avg_tokens: float
    avg_ac_pass_rate: float
    efficiency_score: float
    speed_score: float
    reliability_score: float
    overall_score: float
    last_updated: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModelLearning:
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        values["provider"] = Provider(values["provider"])
        values["task_type"] = TaskType(values["task_type"])
        return cls(**values)


@dataclass(frozen=True)
class ModelRecommendation:
    """Cached learned recommendation for one task type."""

    task_type: TaskType
    required_capabilities: tuple[Capability, ...]
    provider: Provider
    model_id: str
    confidence: float
    reason: str
    cheapest: tuple[str, float] | None = None  # (model id, avg cost)
    fastest: tuple[str, float] | None = None  # (model id, avg minutes)
    most_reliable: tuple[str, float] | None = None  # (model id, success rate)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["required_capabilities"] = [c.value for c in self.required_capabilities]
        for key in ("cheapest", "fastest", "most_reliable"):
            if data[key] is not None:
                data[key] = list(data[key])
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModelRecommendation:
        def pair(value: Any) -> tuple[str, float] | None:
            return (str(value[0]), float(value[1])) if value else None

        return cls(
            task_type=TaskType(data["task_type"]),
            required_capabilities=tuple(
                Capability(c) for c in data.get("required_capabilities", ())
            ),
            provider=Provider(data["provider"]),
            model_id=data["model_id"],
            confidence=float(data.get("confidence", 0.5)),
            reason=data.get("reason", ""),
            cheapest=pair(data.get("cheapest")),
            fastest=pair(data.get("fastest")),
            most_reliable=pair(data.get("most_reliable")),
        )


def learning_key(provider: Provider, model_id: str) -> str:
    return f"{provider.value}:{model_id}"


@dataclass
class ModelLearningDB:
    """Run log, aggregates keyed ``"provider:model" -> task type``, and recommendation cache."""

    version: str = LEARNING_DB_VERSION
    last_updated: str = ""
    runs: list[ModelPerformanceRecord] = field(default_factory=list)
    learnings: dict[str, dict[TaskType, ModelLearning]] = field(default_factory=dict)
    recommendations: dict[TaskType, ModelRecommendation] = field(default_factory=dict)

    def iter_learnings(self):
        for per_task in self.learnings.values():
            yield from per_task.values()

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "last_updated": self.last_updated,
            "runs": [r.to_dict() for r in self.runs],
            "learnings": {
                key: {tt.value: learning.to_dict() for tt, learning in per_task.items()}
                for key, per_task in self.learnings.items()
            },
            "recommendations": {
                tt.value: rec.to_dict() for tt, rec in self.recommendations.items()
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModelLearningDB:
        return cls(
            version=data.get("version", LEARNING_DB_VERSION),
            last_updated=data.get("last_updated", ""),
            runs=[ModelPerformanceRecord.from_dict(r) for r in data.get("runs", ())],
            learnings={
                key: {
                    TaskType(tt): ModelLearning.from_dict(learning)
                    for tt, learning in per_task.items()
                }
                for key, per_task in data.get("learnings", {}).items()
            },
            recommendations={
                TaskType(tt): ModelRecommendation.from_dict(rec)
                for tt, rec in data.get("recommendations", {}).items()
            },
        )
