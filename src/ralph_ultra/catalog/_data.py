"""Static model catalog. Flagship first per provider."""
from __future__ import annotations

from ralph_ultra.model.enums import Capability as C
from ralph_ultra.model.enums import Provider
from ralph_ultra.model.model_info import ModelInfo

MODELS: tuple[ModelInfo, ...] = (
    # Anthropic
    ModelInfo(
        id="claude-opus-4-20250514",
        name="Claude Opus 4",
        provider=Provider.ANTHROPIC,
        input_cost_per_million=15.0,
        output_cost_per_million=75.0,
        context_window=200_000,
        capabilities=frozenset(
            {C.DEEP_REASONING, C.MATHEMATICAL, C.CODE_GENERATION, C.LONG_CONTEXT}
        ),
    ),
    ModelInfo(
        id="claude-sonnet-4-20250514",
        name="Claude Sonnet 4",
        provider=Provider.ANTHROPIC,
        input_cost_per_million=3.0,
        output_cost_per_million=15.0,
        context_window=200_000,
        capabilities=frozenset({C.CODE_GENERATION, C.CREATIVE, C.DEEP_REASONING}),
    ),
    ModelInfo(
        id="claude-3-5-haiku-20241022",
        name="Claude Haiku 3.5",
        provider=Provider.ANTHROPIC,
        input_cost_per_million=0.25,
        output_cost_per_million=1.25,
        context_window=200_000,
        capabilities=frozenset({C.CODE_GENERATION, C.FAST, C.CHEAP}),
    ),
    # OpenAI
    ModelInfo(
        id="gpt-5.2-codex",
        name="GPT-5.2 Codex",
        provider=Provider.OPENAI,
        input_cost_per_million=2.5,
        output_cost_per_million=10.0,
        context_window=128_000,
        capabilities=frozenset(
            {C.CODE_GENERATION, C.STRUCTURED_OUTPUT, C.DEEP_REASONING}
        ),
    ),
    ModelInfo(
        id="gpt-5.1-codex-mini",
        name="GPT-5.1 Codex Mini",
        provider=Provider.OPENAI,
        input_cost_per_million=0.15,
        output_cost_per_million=0.6,
        context_window=128_000,
        capabilities=frozenset({C.CODE_GENERATION, C.FAST, C.CHEAP, C.STRUCTURED_OUTPUT}),
    ),
    ModelInfo(
        id="gpt-5.2",
        name="GPT-5.2",
        provider=Provider.OPENAI,
        input_cost_per_million=1.1,
        output_cost_per_million=4.4,
        context_window=128_000,
        capabilities=frozenset({C.MATHEMATICAL, C.DEEP_REASONING}),
    ),
    # Google
    ModelInfo(
        id="gemini-2.0-flash",
        name="Gemini 2.0 Flash",
        provider=Provider.GEMINI,
        input_cost_per_million=0.1,
        output_cost_per_million=0.4,
        context_window=1_000_000,
        capabilities=frozenset({C.FAST, C.CHEAP, C.CREATIVE, C.LONG_CONTEXT}),
    ),
    ModelInfo(
        id="gemini-1.5-pro",
        name="Gemini 1.5 Pro",
        provider=Provider.GEMINI,
        input_cost_per_million=1.25,
        output_cost_per_million=5.0,
        context_window=2_000_000,
        capabilities=frozenset({C.LONG_CONTEXT, C.MULTIMODAL, C.CODE_GENERATION}),
    ),
    # OpenRouter
    ModelInfo(
        id="deepseek-coder",
        name="DeepSeek Coder",
        provider=Provider.OPENROUTER,
        input_cost_per_million=0.14,
        output_cost_per_million=0.28,
        context_window=128_000,
        capabilities=frozenset({C.CODE_GENERATION, C.CHEAP}),
    ),
    # Local
    ModelInfo(
        id="llama-3.1-70b",
        name="Llama 3.1 70B",
        provider=Provider.LOCAL,
        input_cost_per_million=0.0,
        output_cost_per_million=0.0,
        context_window=128_000,
        capabilities=frozenset({C.CODE_GENERATION, C.CHEAP}),
    ),
    ModelInfo(
        id="qwen-2.5-coder",
        name="Qwen 2.5 Coder",
        provider=Provider.LOCAL,
        input_cost_per_million=0.0,
        output_cost_per_million=0.0,
        context_window=128_000,
        capabilities=frozenset({C.CODE_GENERATION, C.CHEAP}),
    ),
)

# Capabilities assumed for models discovered on a local server.
LOCAL_MODEL_CAPABILITIES: frozenset[C] = frozenset({C.CODE_GENERATION, C.CHEAP})
LOCAL_MODEL_CONTEXT_WINDOW = 128_000
