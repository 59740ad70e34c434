"""Closed vocabularies shared across the allocation core."""
from __future__ import annotations

from enum import StrEnum


class Provider(StrEnum):
    """Sources of inference capacity, in fixed scan order."""

    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    OPENROUTER = "openrouter"
    GEMINI = "gemini"
    LOCAL = "local"


class Capability(StrEnum):
    """Capability tags attached to cataloged models."""

    DEEP_REASONING = "deep-reasoning"
    MATHEMATICAL = "mathematical"
    CODE_GENERATION = "code-generation"
    STRUCTURED_OUTPUT = "structured-output"
    CREATIVE = "creative"
    LONG_CONTEXT = "long-context"
    MULTIMODAL = "multimodal"
    FAST = "fast"
    CHEAP = "cheap"


class QuotaStatus(StrEnum):
    AVAILABLE = "available"
    LIMITED = "limited"
    EXHAUSTED = "exhausted"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"
    ERROR = "error"


class QuotaType(StrEnum):
    PERCENTAGE = "percentage"
    CREDITS = "credits"
    RATE_LIMIT = "rate-limit"
    UNLIMITED = "unlimited"
    LOCAL = "local"
    SUBSCRIPTION = "subscription"


class TaskType(StrEnum):
    """Work item categories used to select required model capabilities."""

    COMPLEX_INTEGRATION = "complex-integration"
    MATHEMATICAL = "mathematical"
    BACKEND_API = "backend-api"
    BACKEND_LOGIC = "backend-logic"
    FRONTEND_UI = "frontend-ui"
    FRONTEND_LOGIC = "frontend-logic"
    DATABASE = "database"
    TESTING = "testing"
    DOCUMENTATION = "documentation"
    REFACTORING = "refactoring"
    BUGFIX = "bugfix"
    DEVOPS = "devops"
    CONFIG = "config"
    UNKNOWN = "unknown"


class ExecutionMode(StrEnum):
    """Global dial biasing model choice toward quality, cost, or speed."""

    BALANCED = "balanced"
    SUPER_SAVER = "super-saver"
    FAST_DELIVERY = "fast-delivery"


class Complexity(StrEnum):
    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"
