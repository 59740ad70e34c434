"""Tests for routing tables and quota-aware model recommendation."""
from __future__ import annotations

import pytest

from ralph_ultra.capability import (
    MODE_TABLES,
    REASON_FALLBACK,
    REASON_LAST_RESORT,
    REASON_PRIMARY,
    REASON_PRIMARY_AVAILABLE,
    find_capable_model,
    get_recommended_model,
    get_required_capabilities,
    route_for,
)
from ralph_ultra.catalog import get_capabilities, get_model_info, list_models
from ralph_ultra.errors import UnmappedTaskTypeError
from ralph_ultra.model import (
    Capability,
    ExecutionMode,
    ModelInfo,
    Provider,
    ProviderQuota,
    QuotaStatus,
    QuotaType,
    TaskType,
)


def _quota(provider: Provider, status: QuotaStatus, models=None) -> ProviderQuota:
    return ProviderQuota(
        provider=provider,
        status=status,
        quota_type=QuotaType.RATE_LIMIT,
        models=tuple(list_models(provider)) if models is None else tuple(models),
    )


def _snapshot(default: QuotaStatus = QuotaStatus.AVAILABLE, **overrides: QuotaStatus):
    return {p: _quota(p, overrides.get(p.value, default)) for p in Provider}


ALL_PAIRS = [(tt, mode) for mode in ExecutionMode for tt in TaskType]


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


class TestTables:
    @pytest.mark.parametrize("mode", list(ExecutionMode))
    def test_every_table_is_total(self, mode: ExecutionMode) -> None:
        assert set(MODE_TABLES[mode]) == set(TaskType)

    @pytest.mark.parametrize("task_type,mode", ALL_PAIRS)
    def test_routes_resolve_to_cataloged_models(
        self, task_type: TaskType, mode: ExecutionMode
    ) -> None:
        route = route_for(task_type, mode)
        for ref in (route.primary, route.fallback):
            info = get_model_info(ref.model_id)
            assert info is not None, ref.model_id
            assert info.provider == ref.provider

    def test_balanced_complex_integration(self) -> None:
        route = route_for(TaskType.COMPLEX_INTEGRATION, ExecutionMode.BALANCED)
        assert route.primary.model_id == "claude-opus-4-20250514"
        assert route.fallback.model_id == "claude-sonnet-4-20250514"

    def test_route_accepts_plain_strings(self) -> None:
        route = route_for("testing", "super-saver")  # type: ignore[arg-type]
        assert route.primary.model_id == "gpt-5.1-codex-mini"

    def test_unmapped_task_type_raises(self) -> None:
        with pytest.raises(UnmappedTaskTypeError) as exc_info:
            route_for("interpretive-dance", ExecutionMode.BALANCED)  # type: ignore[arg-type]
        assert exc_info.value.task_type == "interpretive-dance"


# ---------------------------------------------------------------------------
# Required capabilities
# ---------------------------------------------------------------------------


class TestRequiredCapabilities:
    def test_is_primary_capability_set(self) -> None:
        assert get_required_capabilities(TaskType.MATHEMATICAL) == get_capabilities("gpt-5.2")

    def test_mode_aware(self) -> None:
        balanced = get_required_capabilities(TaskType.BACKEND_API, ExecutionMode.BALANCED)
        saver = get_required_capabilities(TaskType.BACKEND_API, ExecutionMode.SUPER_SAVER)
        assert balanced == get_capabilities("claude-sonnet-4-20250514")
        assert saver == get_capabilities("claude-3-5-haiku-20241022")

    @pytest.mark.parametrize("task_type,mode", ALL_PAIRS)
    def test_recommendation_without_quotas_covers_requirements(
        self, task_type: TaskType, mode: ExecutionMode
    ) -> None:
        rec = get_recommended_model(task_type, None, mode)
        assert get_capabilities(rec.model_id) >= get_required_capabilities(task_type, mode)


# ---------------------------------------------------------------------------
# Recommendation cascade
# ---------------------------------------------------------------------------


class TestRecommendation:
    def test_no_snapshot_returns_primary(self) -> None:
        rec = get_recommended_model(TaskType.DEVOPS)
        assert rec.model_id == "claude-3-5-haiku-20241022"
        assert rec.provider == Provider.ANTHROPIC
        assert rec.reason == REASON_PRIMARY

    def test_primary_available(self) -> None:
        rec = get_recommended_model(TaskType.BACKEND_API, _snapshot())
        assert rec.model_id == "claude-sonnet-4-20250514"
        assert rec.reason == REASON_PRIMARY_AVAILABLE

    def test_primary_limited_still_used(self) -> None:
        quotas = _snapshot(anthropic=QuotaStatus.LIMITED)
        rec = get_recommended_model(TaskType.BACKEND_API, quotas)
        assert rec.model_id == "claude-sonnet-4-20250514"

    def test_primary_exhausted_uses_fallback(self) -> None:
        quotas = _snapshot(anthropic=QuotaStatus.EXHAUSTED)
        rec = get_recommended_model(TaskType.BACKEND_API, quotas)
        assert rec.model_id == "gpt-5.2-codex"
        assert rec.provider == Provider.OPENAI
        assert rec.reason == REASON_FALLBACK
        assert "primary quota exhausted" in rec.reason

    @pytest.mark.parametrize(
        "status", [QuotaStatus.UNAVAILABLE, QuotaStatus.UNKNOWN, QuotaStatus.ERROR]
    )
    def test_unusable_statuses_skip_primary(self, status: QuotaStatus) -> None:
        rec = get_recommended_model(TaskType.BACKEND_API, _snapshot(anthropic=status))
        assert rec.reason == REASON_FALLBACK

    def test_missing_provider_counts_as_unusable(self) -> None:
        quotas = _snapshot()
        del quotas[Provider.ANTHROPIC]
        rec = get_recommended_model(TaskType.BACKEND_API, quotas)
        assert rec.model_id == "gpt-5.2-codex"

    def test_alternative_provider_with_superset_model(self) -> None:
        required = get_required_capabilities(TaskType.BACKEND_API)
        generalist = ModelInfo(
            id="router/generalist",
            name="Generalist",
            provider=Provider.OPENROUTER,
            input_cost_per_million=1.0,
            output_cost_per_million=2.0,
            context_window=100_000,
            capabilities=required | {Capability.FAST},
        )
        quotas = _snapshot(anthropic=QuotaStatus.EXHAUSTED, openai=QuotaStatus.EXHAUSTED)
        quotas[Provider.OPENROUTER] = _quota(
            Provider.OPENROUTER,
            QuotaStatus.AVAILABLE,
            [get_model_info("deepseek-coder"), generalist],
        )
        rec = get_recommended_model(TaskType.BACKEND_API, quotas)
        assert rec.model_id == "router/generalist"
        assert rec.provider == Provider.OPENROUTER
        assert "Alternative provider" in rec.reason

    def test_alternative_scan_follows_provider_order(self) -> None:
        required = get_required_capabilities(TaskType.BACKEND_API)

        def model(provider: Provider) -> ModelInfo:
            return ModelInfo(
                id=f"{provider.value}/any",
                name="Any",
                provider=provider,
                input_cost_per_million=0.0,
                output_cost_per_million=0.0,
                context_window=8_000,
                capabilities=required,
            )

        quotas = _snapshot(anthropic=QuotaStatus.EXHAUSTED, openai=QuotaStatus.EXHAUSTED)
        for provider in (Provider.GEMINI, Provider.LOCAL):
            quotas[provider] = _quota(provider, QuotaStatus.AVAILABLE, [model(provider)])
        rec = get_recommended_model(TaskType.BACKEND_API, quotas)
        assert rec.provider == Provider.GEMINI

    def test_last_resort_returns_primary_with_warning(self) -> None:
        quotas = _snapshot(default=QuotaStatus.EXHAUSTED)
        rec = get_recommended_model(TaskType.COMPLEX_INTEGRATION, quotas)
        assert rec.model_id == "claude-opus-4-20250514"
        assert rec.reason == REASON_LAST_RESORT

    def test_no_capable_alternative_falls_to_last_resort(self) -> None:
        # Nothing outside anthropic/openai covers sonnet's capability set.
        quotas = _snapshot(anthropic=QuotaStatus.EXHAUSTED, openai=QuotaStatus.EXHAUSTED)
        rec = get_recommended_model(TaskType.BACKEND_API, quotas)
        assert rec.reason == REASON_LAST_RESORT
        assert rec.model_id == "claude-sonnet-4-20250514"

    def test_mode_changes_primary(self) -> None:
        rec = get_recommended_model(TaskType.UNKNOWN, None, ExecutionMode.FAST_DELIVERY)
        assert rec.model_id == "claude-opus-4-20250514"


class TestFindCapableModel:
    def test_first_match_in_listed_order(self) -> None:
        quota = _quota(Provider.LOCAL, QuotaStatus.AVAILABLE)
        found = find_capable_model(quota, frozenset({Capability.CODE_GENERATION}))
        assert found == "llama-3.1-70b"

    def test_no_match(self) -> None:
        quota = _quota(Provider.LOCAL, QuotaStatus.AVAILABLE)
        assert find_capable_model(quota, frozenset({Capability.MULTIMODAL})) is None

    def test_empty_model_list(self) -> None:
        quota = _quota(Provider.LOCAL, QuotaStatus.AVAILABLE, [])
        assert find_capable_model(quota, frozenset()) is None
