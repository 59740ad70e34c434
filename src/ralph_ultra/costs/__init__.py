from __future__ import annotations

from ralph_ultra.costs.tracker import CostTracker

__all__ = ["CostTracker"]
