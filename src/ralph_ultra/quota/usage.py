"""Subscription usage estimated from local session transcripts.

Transcripts are JSON-lines files under ``<projects_dir>/<project>/*.jsonl``;
lines carrying ``message.usage`` contribute their input and output tokens.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WindowUsage:
    daily_input: int = 0
    daily_output: int = 0
    weekly_input: int = 0
    weekly_output: int = 0
    daily_percent: float = 0.0
    weekly_percent: float = 0.0

    @property
    def peak_percent(self) -> float:
        return max(self.daily_percent, self.weekly_percent)


def _parse_timestamp(value: Any) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        ts = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


class SessionUsageReader:
    """Sums transcript token usage over the current day and the last seven days."""

    def __init__(
        self,
        projects_dir: Path | str,
        daily_capacity: int,
        weekly_capacity: int,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._projects_dir = Path(projects_dir)
        self._daily_capacity = daily_capacity
        self._weekly_capacity = weekly_capacity
        self._clock = clock or (lambda: datetime.now().astimezone())

    def read(self) -> WindowUsage:
        now = self._clock()
        if now.tzinfo is None:
            now = now.astimezone()
        day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        week_start = day_start - timedelta(days=7)

        daily_in = daily_out = weekly_in = weekly_out = 0
        for path in self._transcripts():
            try:
                lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
            except OSError as exc:
                logger.debug("Skipping transcript %s: %s", path, exc)
                continue
            for line in lines:
                if '"usage"' not in line:
                    continue
                try:
                    entry = json.loads(line)
                except ValueError:
                    continue
                if not isinstance(entry, dict):
                    continue
                ts = _parse_timestamp(entry.get("timestamp"))
                message = entry.get("message")
                usage = message.get("usage") if isinstance(message, dict) else None
                if ts is None or not isinstance(usage, dict):
                    continue
                try:
                    tokens_in = int(usage.get("input_tokens") or 0)
                    tokens_out = int(usage.get("output_tokens") or 0)
                except (TypeError, ValueError):
                    continue
                if ts >= day_start:
                    daily_in += tokens_in
                    daily_out += tokens_out
                if ts >= week_start:
                    weekly_in += tokens_in
                    weekly_out += tokens_out

        return WindowUsage(
            daily_input=daily_in,
            daily_output=daily_out,
            weekly_input=weekly_in,
            weekly_output=weekly_out,
            daily_percent=min(100.0, (daily_in + daily_out) / self._daily_capacity * 100),
            weekly_percent=min(100.0, (weekly_in + weekly_out) / self._weekly_capacity * 100),
        )

    def _transcripts(self) -> list[Path]:
        if not self._projects_dir.is_dir():
            return []
        return sorted(self._projects_dir.glob("*/*.jsonl"))
