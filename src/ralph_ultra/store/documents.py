"""Whole-document persistence backends for the learning and cost stores.

Each store is read whole, mutated in memory, and written whole. There is
no locking: one writer process per file.
"""
from __future__ import annotations

import copy
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from ralph_ultra.errors import CorruptStoreError


class DocumentStore(Protocol):
    """Backend holding a single JSON-compatible document."""

    def load(self) -> dict[str, Any] | None:
        """Return the stored document, or ``None`` if nothing has been saved.

        Raises :class:`CorruptStoreError` if the document exists but is unreadable.
        """
        ...

    def save(self, document: dict[str, Any]) -> None:
        """Replace the stored document."""
        ...


class JsonFileStore:
    """Stores the document as pretty-printed JSON at *path*."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, Any] | None:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise CorruptStoreError(
                f"Cannot read {self._path}: {exc}", path=self._path, cause=exc
            ) from exc
        if not isinstance(data, dict):
            raise CorruptStoreError(
                f"Expected a JSON object in {self._path}", path=self._path
            )
        return data

    def save(self, document: dict[str, Any]) -> None:
        """Serialise to JSON and atomically replace the file."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(document, fh, indent=2, default=str)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class MemoryStore:
    """In-process backend; keeps a deep copy of the last saved document."""

    def __init__(self, document: dict[str, Any] | None = None) -> None:
        self._document = copy.deepcopy(document)
        self.saves = 0

    def load(self) -> dict[str, Any] | None:
        return copy.deepcopy(self._document)

    def save(self, document: dict[str, Any]) -> None:
        self._document = copy.deepcopy(document)
        self.saves += 1
