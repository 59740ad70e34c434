"""Error hierarchy for the Ralph Ultra allocation core."""
from __future__ import annotations

from pathlib import Path


class RalphError(Exception):
    """Base error for all ralph_ultra errors."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


# ---------------------------------------------------------------------------
# Provider errors (absorbed at the quota manager boundary)
# ---------------------------------------------------------------------------


class ProviderCheckError(RalphError):
    """A provider quota check could not produce a normal reading."""

    def __init__(
        self,
        message: str,
        *,
        provider: str = "",
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.provider = provider


class CredentialMissingError(ProviderCheckError):
    """No credential could be resolved for a provider."""


class TransportError(ProviderCheckError):
    """A probe or API call timed out, failed to connect, or returned an error status."""

    def __init__(
        self,
        message: str,
        *,
        provider: str = "",
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, provider=provider, cause=cause)
        self.status_code = status_code


# ---------------------------------------------------------------------------
# Persistence and invariant errors
# ---------------------------------------------------------------------------


class CorruptStoreError(RalphError):
    """A persisted store exists but could not be read or parsed."""

    def __init__(
        self, message: str, *, path: Path | str = "", cause: Exception | None = None
    ) -> None:
        super().__init__(message, cause=cause)
        self.path = str(path)


class UnmappedTaskTypeError(RalphError):
    """A (task type, mode) pair has no routing entry.

    The routing tables are total, so this only fires when they have been
    edited incorrectly.
    """

    def __init__(self, task_type: str, mode: str) -> None:
        super().__init__(f"No routing entry for task type {task_type!r} in mode {mode!r}")
        self.task_type = task_type
        self.mode = mode
