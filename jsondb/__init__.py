"""
JsonDB collection metadata.

A document store keeps each collection as a schema-less JSON file. This
package bridges statically declared record types and that store: for
every type mapped with ``@document`` it builds a CollectionMetaData that
says which field is the identifier, which fields are secret, which
getters/setters exist, and whether the persisted schema version still
matches the declared one.

Invariants:
    - The registry is built once at store start-up and never modified
    - Only actual_schema_version/read_only change afterwards, under the
      collection's write lock held by the store
    - Missing identifiers, missing accessors and duplicate collection
      names degrade silently; only misdeclared documents raise

Example:
    >>> from typing import Annotated
    >>> from jsondb import Id, Secret, build_collection_metadata, document
    >>>
    >>> @document("customers", schema_version="1.0")
    ... class Customer:
    ...     id: Annotated[str, Id()]
    ...     ssn: Annotated[str, Secret()]
    ...
    ...     def get_id(self) -> str:
    ...         return self.id
    ...
    ...     def set_id(self, value: str) -> None:
    ...         self.id = value
    >>>
    >>> registry = build_collection_metadata([Customer], "exact")
    >>> registry["customers"].secret_field_names
    frozenset({'ssn'})
"""

from ._version import __version__
from .errors import ConfigurationError, JsonDbError, UnsupportedOperationError
from .metadata import CollectionMetaData, ReadWriteLock, build_collection_metadata
from .schema import (
    Accessors,
    Id,
    Secret,
    default_comparator,
    document,
    exact_comparator,
    get_comparator,
    major_comparator,
)

__all__ = [
    # Version
    "__version__",
    # Markers
    "document",
    "Id",
    "Secret",
    "Accessors",
    # Metadata
    "CollectionMetaData",
    "ReadWriteLock",
    "build_collection_metadata",
    # Comparators
    "default_comparator",
    "exact_comparator",
    "major_comparator",
    "get_comparator",
    # Errors
    "JsonDbError",
    "ConfigurationError",
    "UnsupportedOperationError",
]
