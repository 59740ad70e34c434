"""Tests for the model catalog and cost estimation."""
from __future__ import annotations

import pytest

from ralph_ultra.catalog import (
    MODELS,
    estimate_cost,
    get_capabilities,
    get_model_info,
    list_models,
    models_with_capability,
    round_usd,
)
from ralph_ultra.model import Capability, ModelInfo, Provider


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


class TestLookup:
    def test_known_model(self) -> None:
        info = get_model_info("claude-opus-4-20250514")
        assert info is not None
        assert info.provider == Provider.ANTHROPIC
        assert info.input_cost_per_million == 15.0
        assert info.output_cost_per_million == 75.0

    def test_unknown_model(self) -> None:
        assert get_model_info("nope") is None
        assert get_capabilities("nope") == frozenset()

    def test_ids_are_unique(self) -> None:
        ids = [m.id for m in MODELS]
        assert len(ids) == len(set(ids))

    def test_list_by_provider(self) -> None:
        anthropic = list_models(Provider.ANTHROPIC)
        assert [m.id for m in anthropic][0] == "claude-opus-4-20250514"
        assert all(m.provider == Provider.ANTHROPIC for m in anthropic)

    def test_list_by_provider_string(self) -> None:
        assert list_models("local") == list_models(Provider.LOCAL)

    def test_list_all(self) -> None:
        assert len(list_models()) == len(MODELS)

    def test_every_provider_has_models(self) -> None:
        for provider in Provider:
            assert list_models(provider), provider

    def test_models_with_capability(self) -> None:
        ids = {m.id for m in models_with_capability(Capability.MATHEMATICAL)}
        assert ids == {"claude-opus-4-20250514", "gpt-5.2"}

    def test_local_models_are_free(self) -> None:
        for model in list_models(Provider.LOCAL):
            assert model.input_cost_per_million == 0
            assert model.output_cost_per_million == 0


# ---------------------------------------------------------------------------
# ModelInfo
# ---------------------------------------------------------------------------


class TestModelInfo:
    def test_has_capabilities_superset(self) -> None:
        info = get_model_info("claude-opus-4-20250514")
        assert info.has_capabilities(frozenset({Capability.DEEP_REASONING}))
        assert info.has_capabilities(frozenset())
        assert not info.has_capabilities(frozenset({Capability.FAST}))

    def test_dict_round_trip(self) -> None:
        info = get_model_info("gemini-2.0-flash")
        assert ModelInfo.from_dict(info.to_dict()) == info

    def test_frozen(self) -> None:
        info = get_model_info("gpt-5.2")
        with pytest.raises(AttributeError):
            info.name = "x"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Cost estimation
# ---------------------------------------------------------------------------


class TestEstimateCost:
    @pytest.mark.parametrize("model", MODELS, ids=lambda m: m.id)
    def test_one_million_each_way_is_sum_of_prices(self, model: ModelInfo) -> None:
        expected = model.input_cost_per_million + model.output_cost_per_million
        assert estimate_cost(model.id, 1_000_000, 1_000_000) == pytest.approx(expected)

    def test_unknown_model_costs_nothing(self) -> None:
        assert estimate_cost("not-a-model", 1_000_000, 1_000_000) == 0.0

    def test_complex_story_on_opus(self) -> None:
        # 40k * 15/1M + 15k * 75/1M = 0.6 + 1.125
        assert estimate_cost("claude-opus-4-20250514", 40_000, 15_000) == pytest.approx(1.73)

    def test_rounds_to_cents(self) -> None:
        # 5k * 0.25/1M + 2k * 1.25/1M = 0.00375
        assert estimate_cost("claude-3-5-haiku-20241022", 5_000, 2_000) == 0.0

    def test_zero_tokens(self) -> None:
        assert estimate_cost("claude-sonnet-4-20250514", 0, 0) == 0.0


class TestRoundUsd:
    def test_half_up(self) -> None:
        assert round_usd(0.125) == pytest.approx(0.13)
        assert round_usd(1.124) == pytest.approx(1.12)

    def test_whole_numbers(self) -> None:
        assert round_usd(90.0) == 90.0
