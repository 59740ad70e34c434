from __future__ import annotations

from ralph_ultra.store.documents import DocumentStore, JsonFileStore, MemoryStore

__all__ = ["DocumentStore", "JsonFileStore", "MemoryStore"]
