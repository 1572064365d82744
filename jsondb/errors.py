"""
Error types for JsonDB collection metadata.

This module defines the exception types raised around collection metadata:
- JsonDbError: Base exception
- ConfigurationError: A document type or setting is misconfigured
- UnsupportedOperationError: An operation the collection cannot support

Invariants:
    - All errors inherit from JsonDbError
    - Errors include context for debugging
    - Missing accessors, missing identifiers and duplicate collection
      names are NOT errors; descriptors degrade instead
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class JsonDbError(Exception):
    """Base exception for all JsonDB errors.

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "JSONDB_ERROR"
        self.details = details or {}


class ConfigurationError(JsonDbError):
    """Misconfigured document type or setting.

    Raised when:
    - A document type declares an empty collection name
    - A document type declares an empty schema version
    - An unknown schema comparator is requested
    """

    def __init__(
        self,
        message: str,
        type_name: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            code="CONFIGURATION_ERROR",
            details={"type_name": type_name},
        )
        self.type_name = type_name


class UnsupportedOperationError(JsonDbError):
    """Operation is not supported by the collection.

    Raised by callers (not by the metadata itself) when they attempt
    identifier based access on a collection whose record type has no
    identifier field or no usable getter/setter for it.
    """

    def __init__(
        self,
        message: str,
        collection_name: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            code="UNSUPPORTED_OPERATION",
            details={"collection_name": collection_name},
        )
        self.collection_name = collection_name
