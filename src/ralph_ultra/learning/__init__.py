"""Learning system: run scoring, aggregation, and planner confidence."""
from __future__ import annotations

from ralph_ultra.learning.recorder import LearningRecorder
from ralph_ultra.learning.scores import (
    aggregate,
    confidence_from_learning,
    efficiency_score,
    overall_score,
    reliability_score,
    speed_score,
)

__all__ = [
    "LearningRecorder",
    "aggregate",
    "confidence_from_learning",
    "efficiency_score",
    "overall_score",
    "reliability_score",
    "speed_score",
]
