"""
Registry builder for collection metadata.

Builds the collection name -> CollectionMetaData mapping that the store
owns for its lifetime. The builder runs once, single-threaded, at store
start-up; the mapping is not modified afterwards.

Invariants:
    - Types without a document marker are skipped
    - A document type with an empty collection name or schema version
      aborts the build with ConfigurationError
    - A duplicate collection name replaces the earlier entry (last wins)
      and moves it to the end of the mapping

How to change safely:
    - Keep the build a pure function of its inputs
    - Making duplicates an error is a behaviour change for callers that
      rely on last-wins; document it if done
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Union

from ..errors import ConfigurationError
from ..schema.markers import document_def
from ..schema.versions import SchemaComparator, get_comparator
from .collection import CollectionMetaData

logger = logging.getLogger(__name__)


def build_collection_metadata(
    candidate_types: Iterable[type],
    schema_comparator: Union[str, SchemaComparator],
) -> Dict[str, CollectionMetaData]:
    """Build collection metadata for every document type.

    Args:
        candidate_types: Types eligible for mapping
        schema_comparator: Comparator callable or comparator name

    Returns:
        Mapping of collection name to CollectionMetaData, in registration order

    Raises:
        ConfigurationError: If a document type has an empty collection
            name or schema version, or the comparator name is unknown

    Example:
        >>> registry = build_collection_metadata([Customer, Order], "default")
        >>> registry["customers"].id_field_name
        'id'
    """
    comparator = get_comparator(schema_comparator)
    registry: Dict[str, CollectionMetaData] = {}

    for record_type in candidate_types:
        marker = document_def(record_type)
        if marker is None:
            continue

        collection_name = marker.collection
        if not collection_name or not collection_name.strip():
            raise ConfigurationError(
                f"Document type '{record_type.__qualname__}' declares an empty collection name",
                type_name=record_type.__qualname__,
            )
        if not marker.schema_version or not marker.schema_version.strip():
            raise ConfigurationError(
                f"Document type '{record_type.__qualname__}' declares an empty schema version",
                type_name=record_type.__qualname__,
            )

        if collection_name in registry:
            existing = registry.pop(collection_name)
            logger.warning(
                f"Collection '{collection_name}' declared by both "
                f"{existing.record_type.__qualname__} and {record_type.__qualname__}; "
                f"using {record_type.__qualname__}"
            )

        registry[collection_name] = CollectionMetaData(
            collection_name, record_type, marker.schema_version, comparator
        )
        logger.debug(
            f"Registered collection: {collection_name} "
            f"({record_type.__qualname__}, schema_version={marker.schema_version})"
        )

    logger.info(f"Built collection metadata for {len(registry)} collection(s)")
    return registry
