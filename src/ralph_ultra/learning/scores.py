"""Per-run scores, aggregate scoring, and planner confidence.

All scores are on a 0-100 scale.
"""
from __future__ import annotations

from collections.abc import Sequence

from ralph_ultra.model.learning import ModelLearning, ModelPerformanceRecord

RELIABILITY_WEIGHT = 0.4
EFFICIENCY_WEIGHT = 0.35
SPEED_WEIGHT = 0.25

BASE_CONFIDENCE = 0.5
MAX_CONFIDENCE = 1.0


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def efficiency_score(cost_usd: float, pass_rate: float) -> float:
    """Quality per dollar. $0.01 at a 100% pass rate scores 100."""
    if cost_usd == 0:
        return 100.0
    if pass_rate == 0:
        return 0.0
    return _clamp((pass_rate * 100) / (cost_usd * 100), 0.0, 100.0)


def speed_score(duration_minutes: float) -> float:
    """Inverse duration. One minute scores 100, ten minutes score 10."""
    if duration_minutes <= 0:
        return 100.0
    return _clamp(100 / duration_minutes, 0.0, 100.0)


def reliability_score(pass_rate: float, success: bool, retry_count: int) -> float:
    """Pass rate, halved for failed runs, minus 10% per retry."""
    success_weight = 1.0 if success else 0.5
    retry_penalty = max(0.0, 1 - retry_count * 0.1)
    return pass_rate * 100 * success_weight * retry_penalty


def overall_score(reliability: float, efficiency: float, speed: float) -> float:
    return (
        reliability * RELIABILITY_WEIGHT
        + efficiency * EFFICIENCY_WEIGHT
        + speed * SPEED_WEIGHT
    )


def aggregate(
    runs: Sequence[ModelPerformanceRecord], last_updated: str
) -> ModelLearning:
    """Build the aggregate for one key from all of its runs.

    *runs* must be non-empty and share provider, model and task type. The
    overall score weights the averaged per-run scores.
    """
    first = runs[0]
    total = len(runs)
    successful = sum(1 for r in runs if r.success)

    def avg(attr: str) -> float:
        return sum(getattr(r, attr) for r in runs) / total

    efficiency = avg("efficiency_score")
    speed = avg("speed_score")
    reliability = avg("reliability_score")

    return ModelLearning(
        provider=first.provider,
        model_id=first.model_id,
        task_type=first.task_type,
        total_runs=total,
        successful_runs=successful,
        success_rate=successful / total,
        avg_duration_minutes=avg("duration_minutes"),
        avg_cost_usd=avg("cost_usd"),
        avg_tokens=avg("total_tokens"),
        avg_ac_pass_rate=avg("ac_pass_rate"),
        efficiency_score=efficiency,
        speed_score=speed,
        reliability_score=reliability,
        overall_score=overall_score(reliability, efficiency, speed),
        last_updated=last_updated,
    )


def experience_bonus(total_runs: int) -> float:
    if total_runs >= 10:
        return 0.05
    if total_runs >= 5:
        return 0.03
    if total_runs >= 3:
        return 0.01
    return 0.0


def confidence_from_learning(learning: ModelLearning | None) -> float:
    """Planner confidence in [0.5, 1.0] derived from an aggregate.

    No history gives the flat 0.5 baseline.
    """
    if learning is None or learning.total_runs <= 0:
        return BASE_CONFIDENCE
    confidence = BASE_CONFIDENCE + (learning.overall_score / 100) * 0.35
    confidence += _clamp(learning.success_rate, 0.0, 1.0) * 0.10
    confidence += experience_bonus(learning.total_runs)
    return _clamp(confidence, BASE_CONFIDENCE, MAX_CONFIDENCE)
