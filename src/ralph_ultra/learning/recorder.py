"""Learning recorder: append-only run log plus derived per-model aggregates."""
from __future__ import annotations

import copy
import logging
from datetime import datetime, timezone
from typing import Callable

from ralph_ultra.capability import get_required_capabilities
from ralph_ultra.errors import CorruptStoreError
from ralph_ultra.events.bus import EventBus
from ralph_ultra.events.types import LearningRecorded
from ralph_ultra.learning.scores import (
    aggregate,
    confidence_from_learning,
    efficiency_score,
    reliability_score,
    speed_score,
)
from ralph_ultra.model.enums import Provider, TaskType
from ralph_ultra.model.learning import (
    ModelLearning,
    ModelLearningDB,
    ModelPerformanceRecord,
    ModelRecommendation,
    RunMetrics,
    learning_key,
)
from ralph_ultra.store.documents import DocumentStore

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LearningRecorder:
    """Records measured run outcomes and keeps per-key aggregates current.

    Aggregates for a (provider, model, task type) key are rebuilt from the
    full run log every time a run for that key is recorded.
    """

    def __init__(
        self,
        store: DocumentStore,
        bus: EventBus | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._store = store
        self._bus = bus
        self._clock = clock or _utc_now
        self._db = self._load()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _empty_db(self) -> ModelLearningDB:
        return ModelLearningDB(last_updated=self._clock().isoformat())

    def _load(self) -> ModelLearningDB:
        try:
            data = self._store.load()
        except CorruptStoreError as exc:
            logger.warning("Learning store unreadable, starting empty: %s", exc)
            return self._empty_db()
        if data is None:
            return self._empty_db()
        try:
            return ModelLearningDB.from_dict(data)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Learning store has invalid records, starting empty: %s", exc)
            return self._empty_db()

    def _save(self) -> None:
        self._db.last_updated = self._clock().isoformat()
        self._store.save(self._db.to_dict())

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def record_run(self, metrics: RunMetrics) -> ModelPerformanceRecord:
        """Append one run, rebuild its key's aggregate, persist, and publish."""
        now = self._clock()
        pass_rate = metrics.ac_pass_rate
        record = ModelPerformanceRecord(
            id=f"{metrics.story_id}-{int(now.timestamp() * 1000)}",
            timestamp=now.isoformat(),
            project=metrics.project,
            story_id=metrics.story_id,
            story_title=metrics.story_title,
            task_type=metrics.task_type,
            complexity=metrics.complexity,
            detected_capabilities=tuple(metrics.detected_capabilities),
            provider=metrics.provider,
            model_id=metrics.model_id,
            duration_minutes=metrics.duration_minutes,
            input_tokens=metrics.input_tokens,
            output_tokens=metrics.output_tokens,
            total_tokens=metrics.total_tokens,
            cost_usd=metrics.cost_usd,
            success=metrics.success,
            retry_count=metrics.retry_count,
            ac_total=metrics.ac_total,
            ac_passed=metrics.ac_passed,
            ac_pass_rate=pass_rate,
            efficiency_score=efficiency_score(metrics.cost_usd, pass_rate),
            speed_score=speed_score(metrics.duration_minutes),
            reliability_score=reliability_score(
                pass_rate, metrics.success, metrics.retry_count
            ),
        )

        self._db.runs.append(record)
        self._recompute(record.provider, record.model_id, record.task_type)
        self._refresh_recommendation(record.task_type)
        self._save()

        logger.info(
            "Recorded %s run of %s/%s (success=%s, cost=$%.2f)",
            record.task_type.value,
            record.provider.value,
            record.model_id,
            record.success,
            record.cost_usd,
        )
        if self._bus is not None:
            self._bus.emit(LearningRecorded(record))
        return record

    def _recompute(self, provider: Provider, model_id: str, task_type: TaskType) -> None:
        runs = [
            r
            for r in self._db.runs
            if r.provider == provider and r.model_id == model_id and r.task_type == task_type
        ]
        if not runs:
            return
        per_task = self._db.learnings.setdefault(learning_key(provider, model_id), {})
        per_task[task_type] = aggregate(runs, self._clock().isoformat())

    def _refresh_recommendation(self, task_type: TaskType) -> None:
        candidates = self._candidates(task_type, min_runs=1)
        if not candidates:
            self._db.recommendations.pop(task_type, None)
            return
        best = candidates[0]
        cheapest = min(candidates, key=lambda l: l.avg_cost_usd)
        fastest = min(candidates, key=lambda l: l.avg_duration_minutes)
        most_reliable = max(candidates, key=lambda l: l.success_rate)
        self._db.recommendations[task_type] = ModelRecommendation(
            task_type=task_type,
            required_capabilities=tuple(sorted(get_required_capabilities(task_type))),
            provider=best.provider,
            model_id=best.model_id,
            confidence=confidence_from_learning(best),
            reason=f"Best overall score {best.overall_score:.1f} over {best.total_runs} runs",
            cheapest=(cheapest.model_id, cheapest.avg_cost_usd),
            fastest=(fastest.model_id, fastest.avg_duration_minutes),
            most_reliable=(most_reliable.model_id, most_reliable.success_rate),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _candidates(self, task_type: TaskType, min_runs: int) -> list[ModelLearning]:
        found = [
            learning
            for learning in self._db.iter_learnings()
            if learning.task_type == task_type and learning.total_runs >= min_runs
        ]
        # Ties resolve by key so results do not depend on insertion order.
        found.sort(key=lambda l: (-l.overall_score, l.provider.value, l.model_id))
        return found

    def get_model_stats(
        self, provider: Provider, model_id: str, task_type: TaskType
    ) -> ModelLearning | None:
        """Aggregate for one key, or ``None`` with no recorded runs."""
        return self._db.learnings.get(learning_key(provider, model_id), {}).get(task_type)

    def get_best_model_for_task(
        self, task_type: TaskType, min_runs: int = 3
    ) -> ModelLearning | None:
        """Highest overall score among aggregates with at least *min_runs* runs."""
        candidates = self._candidates(task_type, min_runs)
        return candidates[0] if candidates else None

    def confidence_for(self, provider: Provider, model_id: str, task_type: TaskType) -> float:
        return confidence_from_learning(self.get_model_stats(provider, model_id, task_type))

    def get_recommendation(self, task_type: TaskType) -> ModelRecommendation | None:
        return self._db.recommendations.get(task_type)

    def get_all_learnings(self) -> ModelLearningDB:
        """Deep copy of the whole learning database."""
        return copy.deepcopy(self._db)

    def clear_all(self) -> None:
        """Delete every run, aggregate, and cached recommendation."""
        self._db = self._empty_db()
        self._save()
        logger.info("Cleared all learning data")
