from __future__ import annotations

from ralph_ultra.state.store import CompletedStory, CoreState, ExecutionStatus, StateStore

__all__ = ["CompletedStory", "CoreState", "ExecutionStatus", "StateStore"]
