"""Event system: bus and event types for quota, planning, and learning."""

from ralph_ultra.events.bus import EventBus
from ralph_ultra.events.types import (
    LearningRecorded,
    PlanReady,
    PlanStarted,
    QuotaUpdated,
    QuotaWarning,
    RalphEvent,
    StateSnapshot,
)

__all__ = [
    "EventBus",
    "LearningRecorded",
    "PlanReady",
    "PlanStarted",
    "QuotaUpdated",
    "QuotaWarning",
    "RalphEvent",
    "StateSnapshot",
]
