"""Ralph Ultra: capability, quota, and cost-aware model allocation."""
from __future__ import annotations

from ralph_ultra.capability import get_recommended_model, get_required_capabilities
from ralph_ultra.catalog import estimate_cost, get_model_info, list_models
from ralph_ultra.classify import detect_task_type
from ralph_ultra.config import RalphConfig
from ralph_ultra.costs import CostTracker
from ralph_ultra.events import EventBus
from ralph_ultra.learning import LearningRecorder
from ralph_ultra.model import Backlog, ExecutionMode, Provider, Task, TaskType
from ralph_ultra.planner import ExecutionPlanner
from ralph_ultra.quota import ProviderChecks, QuotaManager
from ralph_ultra.state import StateStore

__all__ = [
    "Backlog",
    "CostTracker",
    "EventBus",
    "ExecutionMode",
    "ExecutionPlanner",
    "LearningRecorder",
    "Provider",
    "ProviderChecks",
    "QuotaManager",
    "RalphConfig",
    "StateStore",
    "Task",
    "TaskType",
    "detect_task_type",
    "estimate_cost",
    "get_model_info",
    "get_recommended_model",
    "get_required_capabilities",
    "list_models",
]
