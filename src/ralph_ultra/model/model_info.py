"""Static model metadata."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ralph_ultra.model.enums import Capability, Provider


@dataclass(frozen=True)
class ModelInfo:
    """Static metadata about a model."""

    id: str
    """API identifier (e.g., "claude-sonnet-4-20250514")."""

    name: str
    """Human-readable name."""

    provider: Provider
    """Owning provider."""

    input_cost_per_million: float
    """USD per 1M input tokens."""

    output_cost_per_million: float
    """USD per 1M output tokens."""

    context_window: int
    """Max total tokens."""

    capabilities: frozenset[Capability] = field(default_factory=frozenset)
    """Capability tags used for task matching."""

    available: bool = True
    """Whether the model can currently be used."""

    def has_capabilities(self, required: frozenset[Capability]) -> bool:
        """True when this model's capability set is a superset of *required*."""
        return required <= self.capabilities

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "provider": self.provider.value,
            "input_cost_per_million": self.input_cost_per_million,
            "output_cost_per_million": self.output_cost_per_million,
            "context_window": self.context_window,
            "capabilities": sorted(c.value for c in self.capabilities),
            "available": self.available,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModelInfo:
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            provider=Provider(data["provider"]),
            input_cost_per_million=float(data.get("input_cost_per_million", 0.0)),
            output_cost_per_million=float(data.get("output_cost_per_million", 0.0)),
            context_window=int(data.get("context_window", 0)),
            capabilities=frozenset(Capability(c) for c in data.get("capabilities", ())),
            available=bool(data.get("available", True)),
        )
