"""Per-provider quota checks.

Each provider reports capacity differently; every check here normalizes
its provider's shape into a ``ProviderQuota``. Checks never raise: a
missing credential becomes ``unknown``, a transport failure ``error``,
and an unreachable local server ``unavailable``.
"""
from __future__ import annotations

import logging
from typing import Any, Callable

import httpx

from ralph_ultra.catalog import (
    LOCAL_MODEL_CAPABILITIES,
    LOCAL_MODEL_CONTEXT_WINDOW,
    list_models,
)
from ralph_ultra.config import RalphConfig
from ralph_ultra.errors import CredentialMissingError, ProviderCheckError, TransportError
from ralph_ultra.model.enums import Provider, QuotaStatus, QuotaType
from ralph_ultra.model.model_info import ModelInfo
from ralph_ultra.model.quota import ProviderQuota
from ralph_ultra.quota._http import ProbeClient
from ralph_ultra.quota.credentials import Credential, CredentialResolver
from ralph_ultra.quota.usage import SessionUsageReader

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "2023-06-01"
PROBE_MODEL = "claude-3-5-haiku-20241022"

# Quota type reported for each provider when no reading is possible.
DEFAULT_QUOTA_TYPES: dict[Provider, QuotaType] = {
    Provider.ANTHROPIC: QuotaType.RATE_LIMIT,
    Provider.OPENAI: QuotaType.SUBSCRIPTION,
    Provider.OPENROUTER: QuotaType.CREDITS,
    Provider.GEMINI: QuotaType.RATE_LIMIT,
    Provider.LOCAL: QuotaType.LOCAL,
}


# ---------------------------------------------------------------------------
# Normalization rules
# ---------------------------------------------------------------------------


def credit_status(remaining: float) -> QuotaStatus:
    """Credit balance: above one unit available, (0, 1] limited, otherwise exhausted."""
    if remaining > 1:
        return QuotaStatus.AVAILABLE
    if remaining > 0:
        return QuotaStatus.LIMITED
    return QuotaStatus.EXHAUSTED


def rate_limit_status(remaining: int, threshold: int = 10_000) -> QuotaStatus:
    return QuotaStatus.AVAILABLE if remaining > threshold else QuotaStatus.LIMITED


def subscription_status(usage_percent: float, threshold: float = 90.0) -> QuotaStatus:
    return QuotaStatus.LIMITED if usage_percent > threshold else QuotaStatus.AVAILABLE


def _catalog_models(provider: Provider) -> tuple[ModelInfo, ...]:
    return tuple(list_models(provider))


def _int_header(headers: dict[str, str], name: str) -> int | None:
    value = headers.get(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def degraded_quota(
    provider: Provider,
    status: QuotaStatus,
    error: str,
    models: tuple[ModelInfo, ...] | None = None,
) -> ProviderQuota:
    """Quota record for a provider whose check could not complete normally."""
    return ProviderQuota(
        provider=provider,
        status=status,
        quota_type=DEFAULT_QUOTA_TYPES[provider],
        models=_catalog_models(provider) if models is None else models,
        error=error,
    )


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------


class ProviderChecks:
    """Runs the quota check for each provider kind."""

    def __init__(
        self,
        config: RalphConfig | None = None,
        credentials: CredentialResolver | None = None,
        usage_reader: SessionUsageReader | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config or RalphConfig()
        self._credentials = credentials or CredentialResolver(self._config.credential_store)
        self._usage = usage_reader or SessionUsageReader(
            self._config.session_transcripts_dir,
            self._config.daily_window_tokens,
            self._config.weekly_window_tokens,
        )
        self._transport = transport

    def check(self, provider: Provider) -> ProviderQuota:
        """Check one provider, absorbing every provider-level failure."""
        handler = self._handlers()[provider]
        try:
            return handler()
        except CredentialMissingError as exc:
            return degraded_quota(provider, QuotaStatus.UNKNOWN, str(exc))
        except ProviderCheckError as exc:
            logger.warning("Quota check for %s failed: %s", provider.value, exc)
            return degraded_quota(provider, QuotaStatus.ERROR, str(exc))

    def _handlers(self) -> dict[Provider, Callable[[], ProviderQuota]]:
        return {
            Provider.ANTHROPIC: self.check_anthropic,
            Provider.OPENAI: self.check_openai,
            Provider.OPENROUTER: self.check_openrouter,
            Provider.GEMINI: self.check_gemini,
            Provider.LOCAL: self.check_local,
        }

    def _require(self, provider: Provider) -> Credential:
        credential = self._credentials.resolve(provider)
        if credential is None:
            raise CredentialMissingError("No API key found", provider=provider.value)
        return credential

    def _client(
        self, provider: Provider, base_url: str, headers: dict[str, str], timeout: float
    ) -> ProbeClient:
        return ProbeClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            provider=provider.value,
            transport=self._transport,
        )

    # --- anthropic: subscription window (OAuth) or rate-limit probe (API key)

    def check_anthropic(self) -> ProviderQuota:
        credential = self._require(Provider.ANTHROPIC)
        if credential.oauth:
            return self._anthropic_subscription()
        return self._anthropic_rate_limit(credential.value)

    def _anthropic_subscription(self) -> ProviderQuota:
        usage = self._usage.read()
        peak = usage.peak_percent
        daily_cap = self._config.daily_window_tokens
        return ProviderQuota(
            provider=Provider.ANTHROPIC,
            status=subscription_status(peak, self._config.subscription_limited_percent),
            quota_type=QuotaType.SUBSCRIPTION,
            usage_percent=peak,
            tokens_remaining=round(daily_cap * (1 - usage.daily_percent / 100)),
            tokens_limit=daily_cap,
            models=_catalog_models(Provider.ANTHROPIC),
        )

    def _anthropic_rate_limit(self, api_key: str) -> ProviderQuota:
        headers = {
            "x-api-key": api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }
        body: dict[str, Any] = {
            "model": PROBE_MODEL,
            "max_tokens": 1,
            "messages": [{"role": "user", "content": "hi"}],
        }
        with self._client(
            Provider.ANTHROPIC,
            self._config.anthropic_base_url,
            headers,
            self._config.remote_probe_timeout,
        ) as client:
            resp = client.post("/v1/messages", json=body)

        remaining = _int_header(resp.headers, "anthropic-ratelimit-input-tokens-remaining")
        limit = _int_header(resp.headers, "anthropic-ratelimit-input-tokens-limit")
        if remaining is not None and limit is not None:
            return ProviderQuota(
                provider=Provider.ANTHROPIC,
                status=rate_limit_status(remaining, self._config.rate_limit_threshold),
                quota_type=QuotaType.RATE_LIMIT,
                tokens_remaining=remaining,
                tokens_limit=limit,
                reset_time=resp.headers.get("anthropic-ratelimit-input-tokens-reset"),
                models=_catalog_models(Provider.ANTHROPIC),
            )
        return ProviderQuota(
            provider=Provider.ANTHROPIC,
            status=QuotaStatus.AVAILABLE if resp.ok else QuotaStatus.LIMITED,
            quota_type=QuotaType.RATE_LIMIT,
            models=_catalog_models(Provider.ANTHROPIC),
        )

    # --- openrouter: credit balance

    def check_openrouter(self) -> ProviderQuota:
        credential = self._require(Provider.OPENROUTER)
        with self._client(
            Provider.OPENROUTER,
            self._config.openrouter_base_url,
            {"Authorization": f"Bearer {credential.value}"},
            self._config.remote_probe_timeout,
        ) as client:
            resp = client.get("/api/v1/credits")

        if not resp.ok:
            raise TransportError(
                f"Credits request failed with HTTP {resp.status_code}",
                provider=Provider.OPENROUTER.value,
                status_code=resp.status_code,
            )
        data = resp.body.get("data")
        if not isinstance(data, dict):
            raise TransportError(
                "Invalid response from OpenRouter", provider=Provider.OPENROUTER.value
            )
        try:
            total = float(data.get("total_credits") or 0)
            used = float(data.get("total_usage") or 0)
        except (TypeError, ValueError) as exc:
            raise TransportError(
                "Invalid response from OpenRouter",
                provider=Provider.OPENROUTER.value,
                cause=exc,
            ) from exc
        remaining = total - used
        return ProviderQuota(
            provider=Provider.OPENROUTER,
            status=credit_status(remaining),
            quota_type=QuotaType.CREDITS,
            credits_remaining=remaining,
            credits_total=total,
            models=_catalog_models(Provider.OPENROUTER),
        )

    # --- openai: subscription with no usage API

    def check_openai(self) -> ProviderQuota:
        self._require(Provider.OPENAI)
        return ProviderQuota(
            provider=Provider.OPENAI,
            status=QuotaStatus.AVAILABLE,
            quota_type=QuotaType.SUBSCRIPTION,
            models=_catalog_models(Provider.OPENAI),
        )

    # --- gemini: credential presence only

    def check_gemini(self) -> ProviderQuota:
        self._require(Provider.GEMINI)
        return ProviderQuota(
            provider=Provider.GEMINI,
            status=QuotaStatus.AVAILABLE,
            quota_type=QuotaType.RATE_LIMIT,
            models=_catalog_models(Provider.GEMINI),
        )

    # --- local: reachability probe listing loaded models

    def check_local(self) -> ProviderQuota:
        try:
            with self._client(
                Provider.LOCAL, self._config.local_base_url, {}, self._config.local_probe_timeout
            ) as client:
                resp = client.get("/models")
        except TransportError as exc:
            logger.info("Local model server unreachable: %s", exc)
            return degraded_quota(
                Provider.LOCAL, QuotaStatus.UNAVAILABLE, "Local model server not running", ()
            )
        if not resp.ok:
            return degraded_quota(
                Provider.LOCAL,
                QuotaStatus.UNAVAILABLE,
                f"Local model server not responding (HTTP {resp.status_code})",
                (),
            )
        return ProviderQuota(
            provider=Provider.LOCAL,
            status=QuotaStatus.AVAILABLE,
            quota_type=QuotaType.LOCAL,
            models=_local_models(resp.body.get("data")),
        )


def _local_models(entries: Any) -> tuple[ModelInfo, ...]:
    models: list[ModelInfo] = []
    for entry in entries if isinstance(entries, list) else ():
        if not isinstance(entry, dict) or not entry.get("id"):
            continue
        model_id = str(entry["id"])
        models.append(
            ModelInfo(
                id=model_id,
                name=model_id.split("/")[-1],
                provider=Provider.LOCAL,
                input_cost_per_million=0.0,
                output_cost_per_million=0.0,
                context_window=LOCAL_MODEL_CONTEXT_WINDOW,
                capabilities=LOCAL_MODEL_CAPABILITIES,
            )
        )
    return tuple(models)
