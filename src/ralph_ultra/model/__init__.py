"""Value types shared by the allocation core."""
from __future__ import annotations

from ralph_ultra.model.cost import ExecutionRecord, InProgressTask, SessionCosts
from ralph_ultra.model.enums import (
    Capability,
    Complexity,
    ExecutionMode,
    Provider,
    QuotaStatus,
    QuotaType,
    TaskType,
)
from ralph_ultra.model.learning import (
    ModelLearning,
    ModelLearningDB,
    ModelPerformanceRecord,
    ModelRecommendation,
    RunMetrics,
)
from ralph_ultra.model.model_info import ModelInfo
from ralph_ultra.model.plan import (
    AlternativeModel,
    ExecutionPlan,
    ModelChoice,
    PlanComparisons,
    PlanSummary,
    StoryAllocation,
    StrategyCost,
)
from ralph_ultra.model.quota import ProviderQuota, QuotaSnapshot
from ralph_ultra.model.task import Backlog, Task

__all__ = [
    "AlternativeModel",
    "Backlog",
    "Capability",
    "Complexity",
    "ExecutionMode",
    "ExecutionPlan",
    "ExecutionRecord",
    "InProgressTask",
    "ModelChoice",
    "ModelInfo",
    "ModelLearning",
    "ModelLearningDB",
    "ModelPerformanceRecord",
    "ModelRecommendation",
    "PlanComparisons",
    "PlanSummary",
    "Provider",
    "ProviderQuota",
    "QuotaSnapshot",
    "QuotaStatus",
    "QuotaType",
    "RunMetrics",
    "SessionCosts",
    "StoryAllocation",
    "StrategyCost",
    "Task",
    "TaskType",
]
