"""Model catalog for looking up model capabilities and pricing."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ralph_ultra.catalog._data import (
    LOCAL_MODEL_CAPABILITIES,
    LOCAL_MODEL_CONTEXT_WINDOW,
    MODELS,
)
from ralph_ultra.model.enums import Capability, Provider
from ralph_ultra.model.model_info import ModelInfo

_BY_ID: dict[str, ModelInfo] = {m.id: m for m in MODELS}

_CENT = Decimal("0.01")
_MILLION = Decimal(1_000_000)


def get_model_info(model_id: str) -> ModelInfo | None:
    """Look up a cataloged model by exact ID, or ``None`` if unknown."""
    return _BY_ID.get(model_id)


def list_models(provider: Provider | str | None = None) -> list[ModelInfo]:
    """Return models, optionally filtered by provider.

    Models are returned in definition order (flagship first per provider).
    """
    if provider is None:
        return list(MODELS)
    return [m for m in MODELS if m.provider == provider]


def models_with_capability(capability: Capability) -> list[ModelInfo]:
    """Return every cataloged model tagged with *capability*."""
    return [m for m in MODELS if capability in m.capabilities]


def get_capabilities(model_id: str) -> frozenset[Capability]:
    """Capability set for *model_id*; empty for models outside the catalog."""
    model = _BY_ID.get(model_id)
    return model.capabilities if model is not None else frozenset()


def _to_cents(amount: Decimal) -> float:
    return float(amount.quantize(_CENT, rounding=ROUND_HALF_UP))


def round_usd(amount: float) -> float:
    """Round half-up to whole cents, using the decimal value *amount* prints as."""
    return _to_cents(Decimal(repr(amount)))


def estimate_cost(model_id: str, input_tokens: int, output_tokens: int) -> float:
    """Estimated USD cost of a run, rounded to cents.

    Unknown model IDs cost ``0.0``; this never raises.
    """
    model = _BY_ID.get(model_id)
    if model is None:
        return 0.0
    cost = (
        Decimal(repr(model.input_cost_per_million)) * input_tokens
        + Decimal(repr(model.output_cost_per_million)) * output_tokens
    ) / _MILLION
    return _to_cents(cost)


__all__ = [
    "LOCAL_MODEL_CAPABILITIES",
    "LOCAL_MODEL_CONTEXT_WINDOW",
    "MODELS",
    "ModelInfo",
    "estimate_cost",
    "get_capabilities",
    "get_model_info",
    "list_models",
    "models_with_capability",
    "round_usd",
]
