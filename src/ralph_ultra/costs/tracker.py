"""Session-scoped ledger of estimated versus actual task cost."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable

from ralph_ultra.errors import CorruptStoreError
from ralph_ultra.model.cost import (
    COST_HISTORY_VERSION,
    ExecutionRecord,
    InProgressTask,
    SessionCosts,
)
from ralph_ultra.model.enums import Provider
from ralph_ultra.store.documents import DocumentStore

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CostTracker:
    """Tracks in-flight tasks and appends finished ones to a persisted history.

    The session view (``get_session_costs``) lives in memory only and can be
    reset with :meth:`clear_session` without touching the history.
    """

    def __init__(
        self,
        store: DocumentStore,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._clock = clock or _utc_now
        self._in_progress: dict[str, InProgressTask] = {}
        self._session: list[ExecutionRecord] = []

    def start_task(
        self,
        task_id: str,
        model_id: str,
        provider: Provider,
        estimated_cost: float,
        retry_count: int = 0,
    ) -> InProgressTask:
        """Begin tracking *task_id*; restarting replaces the previous entry."""
        entry = InProgressTask(
            task_id=task_id,
            model_id=model_id,
            provider=provider,
            start_time=self._clock().isoformat(),
            estimated_cost=estimated_cost,
            retry_count=retry_count,
        )
        self._in_progress[task_id] = entry
        return entry

    def end_task(
        self,
        task_id: str,
        actual_cost: float,
        input_tokens: int,
        output_tokens: int,
        success: bool,
    ) -> ExecutionRecord | None:
        """Finish tracking *task_id* and persist its record.

        Returns ``None`` if the task was never started.
        """
        entry = self._in_progress.pop(task_id, None)
        if entry is None:
            logger.warning("No in-progress task found for %s", task_id)
            return None

        record = ExecutionRecord(
            task_id=entry.task_id,
            model_id=entry.model_id,
            provider=entry.provider,
            start_time=entry.start_time,
            end_time=self._clock().isoformat(),
            estimated_cost=entry.estimated_cost,
            actual_cost=actual_cost,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            success=success,
            retry_count=entry.retry_count,
        )
        self._session.append(record)

        history = self._load_history()
        history.append(record)
        self._save_history(history)
        return record

    @property
    def in_progress(self) -> dict[str, InProgressTask]:
        return dict(self._in_progress)

    def get_session_costs(self) -> SessionCosts:
        return SessionCosts(
            total_estimated=sum(r.estimated_cost for r in self._session),
            total_actual=sum(r.actual_cost for r in self._session),
            tasks_completed=len(self._session),
            tasks_successful=sum(1 for r in self._session if r.success),
            records=tuple(self._session),
        )

    def get_all_history(self) -> list[ExecutionRecord]:
        return self._load_history()

    def clear_session(self) -> None:
        """Forget the session records and in-flight tasks; history is kept."""
        self._session.clear()
        self._in_progress.clear()

    # ------------------------------------------------------------------

    def _load_history(self) -> list[ExecutionRecord]:
        try:
            data = self._store.load()
        except CorruptStoreError as exc:
            logger.warning("Cost history unreadable, treating as empty: %s", exc)
            return []
        if data is None:
            return []
        try:
            return [ExecutionRecord.from_dict(r) for r in data.get("records", ())]
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Cost history has invalid records, treating as empty: %s", exc)
            return []

    def _save_history(self, records: list[ExecutionRecord]) -> None:
        document: dict[str, Any] = {
            "version": COST_HISTORY_VERSION,
            "last_updated": self._clock().isoformat(),
            "records": [r.to_dict() for r in records],
        }
        self._store.save(document)
