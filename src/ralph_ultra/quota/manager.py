"""Quota manager: cached, concurrently refreshed view of provider capacity."""
from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Protocol

from ralph_ultra.events.bus import EventBus
from ralph_ultra.events.types import QuotaUpdated, QuotaWarning
from ralph_ultra.model.enums import Provider, QuotaStatus
from ralph_ultra.model.quota import ProviderQuota, QuotaSnapshot
from ralph_ultra.quota.checks import degraded_quota
from ralph_ultra.state.store import StateStore

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 5 * 60

_WARN_STATUSES = frozenset({QuotaStatus.LIMITED, QuotaStatus.EXHAUSTED})


class QuotaChecker(Protocol):
    def check(self, provider: Provider) -> ProviderQuota: ...


class QuotaManager:
    """Best-effort, time-bounded view of remaining capacity for all providers.

    One cache slot covers every provider; a forced refresh re-checks all
    of them. A refresh runs the five checks concurrently and waits for all
    of them; a failing check degrades to an ``error`` record for its own
    provider only.
    """

    def __init__(
        self,
        checker: QuotaChecker,
        *,
        state: StateStore | None = None,
        bus: EventBus | None = None,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._checker = checker
        self._state = state
        self._bus = bus if bus is not None else (state.bus if state is not None else None)
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._snapshot: QuotaSnapshot | None = None
        self._fetched_at: float | None = None

    @property
    def snapshot(self) -> QuotaSnapshot | None:
        """The last completed snapshot, or ``None`` before the first refresh."""
        with self._lock:
            return dict(self._snapshot) if self._snapshot is not None else None

    @property
    def last_fetched(self) -> float | None:
        return self._fetched_at

    def invalidate(self) -> None:
        """Drop the cached snapshot so the next refresh re-checks every provider."""
        with self._lock:
            self._fetched_at = None

    def refresh_all_quotas(self, force: bool = False) -> QuotaSnapshot:
        """Return a snapshot for all five providers, re-checking if stale or forced."""
        now = self._clock()
        with self._lock:
            if (
                not force
                and self._snapshot is not None
                and self._fetched_at is not None
                and now - self._fetched_at < self._ttl
            ):
                logger.debug("Quota cache hit (age %.1fs)", now - self._fetched_at)
                return dict(self._snapshot)
            previous = self._snapshot

        quotas = self._check_all()

        with self._lock:
            self._snapshot = quotas
            self._fetched_at = now

        logger.info(
            "Refreshed quotas: %s",
            ", ".join(f"{p.value}={q.status.value}" for p, q in quotas.items()),
        )
        self._publish(quotas, previous)
        return dict(quotas)

    def _check_all(self) -> QuotaSnapshot:
        results: dict[Provider, ProviderQuota] = {}
        with ThreadPoolExecutor(max_workers=len(Provider)) as pool:
            futures = {pool.submit(self._checker.check, p): p for p in Provider}
            for future in as_completed(futures):
                provider = futures[future]
                try:
                    results[provider] = future.result()
                except Exception as exc:
                    logger.warning("Quota check for %s raised: %s", provider.value, exc)
                    results[provider] = degraded_quota(
                        provider, QuotaStatus.ERROR, str(exc) or type(exc).__name__
                    )
        return {p: results[p] for p in Provider}

    def _publish(self, quotas: QuotaSnapshot, previous: QuotaSnapshot | None) -> None:
        if self._state is not None:
            self._state.update_quotas(quotas)
        elif self._bus is not None:
            self._bus.emit(QuotaUpdated(dict(quotas)))

        for provider, quota in quotas.items():
            if quota.status not in _WARN_STATUSES:
                continue
            before = previous.get(provider) if previous is not None else None
            if before is not None and before.status == quota.status:
                continue
            message = f"{provider.value} quota is {quota.status.value}"
            logger.warning(message)
            if self._bus is not None:
                self._bus.emit(QuotaWarning(provider, message))
