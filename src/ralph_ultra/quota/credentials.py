"""Credential resolution per provider.

Precedence: explicit override (constructor mapping, then environment
variables) over the opencode credential store file. A provider with
neither has no credential.
"""
from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ralph_ultra.model.enums import Provider

logger = logging.getLogger(__name__)

ENV_KEYS: dict[Provider, tuple[str, ...]] = {
    Provider.ANTHROPIC: ("ANTHROPIC_API_KEY",),
    Provider.OPENAI: ("OPENAI_API_KEY",),
    Provider.OPENROUTER: ("OPENROUTER_API_KEY",),
    Provider.GEMINI: ("GOOGLE_API_KEY", "GEMINI_API_KEY"),
    Provider.LOCAL: (),
}

# Entry names used inside the credential store file.
STORE_KEYS: dict[Provider, str] = {
    Provider.ANTHROPIC: "anthropic",
    Provider.OPENAI: "openai",
    Provider.OPENROUTER: "openrouter",
    Provider.GEMINI: "google",
    Provider.LOCAL: "local",
}


@dataclass(frozen=True)
class Credential:
    value: str
    source: str  # "override", "env", or "store"
    oauth: bool = False


class CredentialResolver:
    """Resolves a bearer token or API key for each provider."""

    def __init__(
        self,
        store_path: Path | str | None = None,
        overrides: Mapping[Provider, str] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._store_path = Path(store_path) if store_path is not None else None
        self._overrides = dict(overrides or {})
        self._environ = environ if environ is not None else os.environ

    def resolve(self, provider: Provider) -> Credential | None:
        """Return the credential for *provider*, or ``None`` if none is configured."""
        override = (self._overrides.get(provider) or "").strip()
        if override:
            return Credential(override, "override")

        for name in ENV_KEYS.get(provider, ()):
            value = (self._environ.get(name) or "").strip()
            if value:
                return Credential(value, "env")

        entry = self._store_entry(provider)
        if entry is None:
            return None
        if entry.get("type") == "oauth" and entry.get("access"):
            return Credential(str(entry["access"]), "store", oauth=True)
        if entry.get("type") == "api" and entry.get("key"):
            return Credential(str(entry["key"]), "store")
        value = entry.get("apiKey") or entry.get("key")
        return Credential(str(value), "store") if value else None

    def _store_entry(self, provider: Provider) -> dict[str, Any] | None:
        if self._store_path is None or not self._store_path.is_file():
            return None
        try:
            data = json.loads(self._store_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Credential store %s unreadable: %s", self._store_path, exc)
            return None
        if not isinstance(data, dict):
            return None
        entry = data.get(STORE_KEYS[provider])
        return entry if isinstance(entry, dict) else None
