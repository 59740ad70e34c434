"""Per-mode routing tables: task type -> primary and fallback model.

Each table is written out by hand so a mode can special-case any task
type. Every table must cover every ``TaskType``.
"""
from __future__ import annotations

from dataclasses import dataclass

from ralph_ultra.model.enums import ExecutionMode, Provider, TaskType


@dataclass(frozen=True)
class ModelRef:
    model_id: str
    provider: Provider


@dataclass(frozen=True)
class ModelRoute:
    primary: ModelRef
    fallback: ModelRef


OPUS = ModelRef("claude-opus-4-20250514", Provider.ANTHROPIC)
SONNET = ModelRef("claude-sonnet-4-20250514", Provider.ANTHROPIC)
HAIKU = ModelRef("claude-3-5-haiku-20241022", Provider.ANTHROPIC)
CODEX = ModelRef("gpt-5.2-codex", Provider.OPENAI)
CODEX_MINI = ModelRef("gpt-5.1-codex-mini", Provider.OPENAI)
GPT = ModelRef("gpt-5.2", Provider.OPENAI)
FLASH = ModelRef("gemini-2.0-flash", Provider.GEMINI)

T = TaskType

BALANCED_TABLE: dict[TaskType, ModelRoute] = {
    T.COMPLEX_INTEGRATION: ModelRoute(OPUS, SONNET),
    T.MATHEMATICAL: ModelRoute(GPT, OPUS),
    T.BACKEND_API: ModelRoute(SONNET, CODEX),
    T.BACKEND_LOGIC: ModelRoute(SONNET, CODEX),
    T.FRONTEND_UI: ModelRoute(SONNET, FLASH),
    T.FRONTEND_LOGIC: ModelRoute(SONNET, CODEX_MINI),
    T.DATABASE: ModelRoute(SONNET, CODEX),
    T.TESTING: ModelRoute(CODEX, HAIKU),
    T.DOCUMENTATION: ModelRoute(FLASH, SONNET),
    T.REFACTORING: ModelRoute(SONNET, CODEX),
    T.BUGFIX: ModelRoute(SONNET, CODEX),
    T.DEVOPS: ModelRoute(HAIKU, CODEX_MINI),
    T.CONFIG: ModelRoute(HAIKU, CODEX_MINI),
    T.UNKNOWN: ModelRoute(SONNET, CODEX),
}

# Cheapest model that can still handle the task. Complex and mathematical
# work keeps a reasoning-capable primary.
SUPER_SAVER_TABLE: dict[TaskType, ModelRoute] = {
    T.COMPLEX_INTEGRATION: ModelRoute(SONNET, CODEX),
    T.MATHEMATICAL: ModelRoute(GPT, SONNET),
    T.BACKEND_API: ModelRoute(HAIKU, CODEX_MINI),
    T.BACKEND_LOGIC: ModelRoute(HAIKU, CODEX_MINI),
    T.FRONTEND_UI: ModelRoute(FLASH, HAIKU),
    T.FRONTEND_LOGIC: ModelRoute(HAIKU, CODEX_MINI),
    T.DATABASE: ModelRoute(HAIKU, CODEX_MINI),
    T.TESTING: ModelRoute(CODEX_MINI, HAIKU),
    T.DOCUMENTATION: ModelRoute(FLASH, CODEX_MINI),
    T.REFACTORING: ModelRoute(HAIKU, CODEX_MINI),
    T.BUGFIX: ModelRoute(HAIKU, CODEX_MINI),
    T.DEVOPS: ModelRoute(HAIKU, CODEX_MINI),
    T.CONFIG: ModelRoute(HAIKU, CODEX_MINI),
    T.UNKNOWN: ModelRoute(HAIKU, CODEX_MINI),
}

# Premium models throughout.
FAST_DELIVERY_TABLE: dict[TaskType, ModelRoute] = {
    T.COMPLEX_INTEGRATION: ModelRoute(OPUS, SONNET),
    T.MATHEMATICAL: ModelRoute(GPT, OPUS),
    T.BACKEND_API: ModelRoute(SONNET, CODEX),
    T.BACKEND_LOGIC: ModelRoute(SONNET, CODEX),
    T.FRONTEND_UI: ModelRoute(SONNET, CODEX),
    T.FRONTEND_LOGIC: ModelRoute(SONNET, CODEX),
    T.DATABASE: ModelRoute(SONNET, CODEX),
    T.TESTING: ModelRoute(CODEX, SONNET),
    T.DOCUMENTATION: ModelRoute(SONNET, CODEX),
    T.REFACTORING: ModelRoute(SONNET, CODEX),
    T.BUGFIX: ModelRoute(SONNET, CODEX),
    T.DEVOPS: ModelRoute(SONNET, CODEX),
    T.CONFIG: ModelRoute(SONNET, CODEX),
    T.UNKNOWN: ModelRoute(OPUS, CODEX),
}

MODE_TABLES: dict[ExecutionMode, dict[TaskType, ModelRoute]] = {
    ExecutionMode.BALANCED: BALANCED_TABLE,
    ExecutionMode.SUPER_SAVER: SUPER_SAVER_TABLE,
    ExecutionMode.FAST_DELIVERY: FAST_DELIVERY_TABLE,
}
