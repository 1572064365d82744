"""
Collection metadata for JsonDB.

This module provides what the store consults for every collection:
- CollectionMetaData: structural facts about a record type
- build_collection_metadata: the one-shot registry builder
- ReadWriteLock: the per-collection lock

Invariants:
    - The registry is built once, before any concurrent use
    - Metadata never acquires its own lock
"""

from .builder import build_collection_metadata
from .collection import CollectionMetaData
from .locks import ReadWriteLock

__all__ = [
    "CollectionMetaData",
    "ReadWriteLock",
    "build_collection_metadata",
]
