"""
Schema module for JsonDB.

This module describes how record types are declared and compared:
- Markers (document, Id, Secret, Accessors)
- Type introspection (fields, identifier, getters/setters)
- Schema version comparators

How to change safely:
    - Markers are part of the public declaration surface; add, never rename
    - Comparator names are persisted in configuration; never repurpose one
"""

from .introspect import (
    FieldInfo,
    TypeLayout,
    accessor_names,
    introspect,
    mutator_names,
    walk_fields,
)
from .markers import Accessors, DocumentDef, Id, Secret, document, document_def
from .versions import (
    SchemaComparator,
    default_comparator,
    exact_comparator,
    get_comparator,
    major_comparator,
)

__all__ = [
    # Markers
    "document",
    "document_def",
    "DocumentDef",
    "Id",
    "Secret",
    "Accessors",
    # Introspection
    "FieldInfo",
    "TypeLayout",
    "introspect",
    "walk_fields",
    "accessor_names",
    "mutator_names",
    # Comparators
    "SchemaComparator",
    "default_comparator",
    "exact_comparator",
    "major_comparator",
    "get_comparator",
]
