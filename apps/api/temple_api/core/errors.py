from __future__ import annotations

from typing import Any, Dict, Optional


class ConfigurationError(RuntimeError):
    """Required configuration row is missing (e.g. no default memorial rule)."""

    error = "configuration_error"


class PersistenceError(RuntimeError):
    """A read/write against the database failed mid-operation."""

    error = "persistence_error"

    def __init__(self, message: str, *, retryable: bool = False, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.retryable = retryable
        self.details = details or {}
