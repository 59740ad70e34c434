from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _default_config_dir() -> Path:
    return Path.home() / ".config" / "ralph-ultra"


@dataclass(frozen=True)
class RalphConfig:
    config_dir: Path = field(default_factory=_default_config_dir)
    credential_store: Path = field(
        default_factory=lambda: Path.home() / ".local" / "share" / "opencode" / "auth.json"
    )
    session_transcripts_dir: Path = field(
        default_factory=lambda: Path.home() / ".claude" / "projects"
    )
    local_base_url: str = "http://localhost:1234/v1"
    anthropic_base_url: str = "https://api.anthropic.com"
    openrouter_base_url: str = "https://openrouter.ai"
    cache_ttl_seconds: float = 300.0
    remote_probe_timeout: float = 3.0
    local_probe_timeout: float = 2.0
    daily_window_tokens: int = 5_000_000
    weekly_window_tokens: int = 30_000_000
    rate_limit_threshold: int = 10_000  # tokens remaining before "limited"
    subscription_limited_percent: float = 90.0

    @property
    def learning_file(self) -> Path:
        return self.config_dir / "learning.json"

    @property
    def cost_history_file(self) -> Path:
        return self.config_dir / "cost-history.json"

    @classmethod
    def from_env(cls) -> RalphConfig:
        """Build a config, letting environment variables override the defaults.

        Reads RALPH_ULTRA_CONFIG_DIR, OPENCODE_AUTH_FILE, CLAUDE_PROJECTS_DIR
        and LM_STUDIO_URL.
        """
        overrides: dict[str, object] = {}
        if os.environ.get("RALPH_ULTRA_CONFIG_DIR"):
            overrides["config_dir"] = Path(os.environ["RALPH_ULTRA_CONFIG_DIR"]).expanduser()
        if os.environ.get("OPENCODE_AUTH_FILE"):
            overrides["credential_store"] = Path(os.environ["OPENCODE_AUTH_FILE"]).expanduser()
        if os.environ.get("CLAUDE_PROJECTS_DIR"):
            overrides["session_transcripts_dir"] = Path(
                os.environ["CLAUDE_PROJECTS_DIR"]
            ).expanduser()
        if os.environ.get("LM_STUDIO_URL"):
            overrides["local_base_url"] = os.environ["LM_STUDIO_URL"].rstrip("/")
        return cls(**overrides)  # type: ignore[arg-type]
