"""
Collection metadata for JsonDB.

A CollectionMetaData is built once per mapped record type and consulted
by the store on every read and write to that collection. It records:
- The collection name and declared schema version
- The identifier field and its getter/setter
- Secret and visible fields, and getters/setters per field
- The actual (persisted) schema version and the derived read-only flag
- The collection's reader/writer lock

Invariants:
    - Everything except actual_schema_version/read_only is fixed at
      construction
    - read_only is False until set_actual_schema_version() is called,
      then equals comparator(schema_version, actual) != 0
    - The metadata never acquires its own lock; callers hold it in
      write mode for set_actual_schema_version() and for record
      mutation, and in read mode for record reads
    - Construction never raises for a malformed record type; it
      degrades to a collection without identifier access. The one
      exception is a Secret-marked annotation that cannot be evaluated,
      which raises ConfigurationError

How to change safely:
    - Keep read accessors side-effect free; they are called concurrently
    - Any new mutable state must be documented as guarded by `lock`
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Callable, FrozenSet, List, Mapping, Optional, Tuple

from ..errors import UnsupportedOperationError
from ..schema.introspect import introspect
from ..schema.versions import SchemaComparator
from .locks import ReadWriteLock

logger = logging.getLogger(__name__)

Operation = Callable[..., Any]


class CollectionMetaData:
    """Structural facts about one collection's record type.

    Attributes:
        collection_name: Stable external key of the collection
        schema_version: Schema version declared by the record type
        actual_schema_version: Version found in the persisted collection
        record_type: The mapped record type
        read_only: Whether the persisted schema is incompatible

    Example:
        >>> meta = CollectionMetaData("customers", Customer, "1.0", default_comparator)
        >>> meta.id_field_name
        'id'
        >>> with meta.lock.write_locked():
        ...     meta.set_actual_schema_version("2.0")
        >>> meta.read_only
        True
    """

    def __init__(
        self,
        collection_name: str,
        record_type: type,
        schema_version: str,
        schema_comparator: SchemaComparator,
    ) -> None:
        """Introspect ``record_type`` and allocate the collection lock.

        Args:
            collection_name: Collection name
            record_type: Record type mapped to the collection
            schema_version: Declared schema version
            schema_comparator: Returns 0 iff two versions are compatible
        """
        self._collection_name = collection_name
        self._record_type = record_type
        self._schema_version = schema_version
        self._schema_comparator = schema_comparator
        self._actual_schema_version: Optional[str] = None
        self._read_only = False
        self._lock = ReadWriteLock()

        layout = introspect(record_type)
        self._field_names: Tuple[str, ...] = tuple(layout.field_names)
        self._id_field_name = layout.id_field_name
        self._secret_field_names = layout.secret_field_names
        self._getters = MappingProxyType(layout.getters)
        self._setters = MappingProxyType(layout.setters)

        self._id_getter = self._getters.get(self._id_field_name) if self._id_field_name else None
        self._id_setter = self._setters.get(self._id_field_name) if self._id_field_name else None

        if self._id_field_name is None:
            logger.debug(f"Collection '{collection_name}': no identifier field declared")
        elif self._id_getter is None or self._id_setter is None:
            logger.debug(
                f"Collection '{collection_name}': identifier '{self._id_field_name}' "
                "has no usable getter/setter"
            )

    @property
    def lock(self) -> ReadWriteLock:
        """The collection's reader/writer lock. Never acquired by this object."""
        return self._lock

    @property
    def collection_name(self) -> str:
        return self._collection_name

    @property
    def schema_version(self) -> str:
        return self._schema_version

    @property
    def actual_schema_version(self) -> Optional[str]:
        return self._actual_schema_version

    @property
    def record_type(self) -> type:
        return self._record_type

    @property
    def read_only(self) -> bool:
        return self._read_only

    def set_actual_schema_version(self, version: str) -> None:
        """Record the persisted schema version and recompute read_only.

        Must be called with the write lock held. Each call recomputes
        read_only from scratch.

        Args:
            version: Schema version found in the persisted collection
        """
        self._actual_schema_version = version
        was_read_only = self._read_only
        self._read_only = self._schema_comparator(self._schema_version, version) != 0

        if self._read_only and not was_read_only:
            logger.warning(
                f"Collection '{self._collection_name}' is read-only: declared schema "
                f"version {self._schema_version}, persisted version {version}"
            )
        elif was_read_only and not self._read_only:
            logger.info(f"Collection '{self._collection_name}' is writable again (version {version})")

    @property
    def id_field_name(self) -> Optional[str]:
        """Name of the identifier field, None if the type declares none."""
        return self._id_field_name

    @property
    def id_getter(self) -> Optional[Operation]:
        return self._id_getter

    @property
    def id_setter(self) -> Optional[Operation]:
        return self._id_setter

    def require_id_field(self) -> Tuple[str, Operation, Operation]:
        """Get the identifier field with its getter and setter.

        For callers that cannot proceed without identifier access.

        Returns:
            Tuple of (field name, getter, setter)

        Raises:
            UnsupportedOperationError: If the identifier or either
                operation is missing
        """
        if self._id_field_name is None:
            raise UnsupportedOperationError(
                f"Collection '{self._collection_name}' has no identifier field",
                collection_name=self._collection_name,
            )
        if self._id_getter is None or self._id_setter is None:
            raise UnsupportedOperationError(
                f"Collection '{self._collection_name}': identifier '{self._id_field_name}' "
                "has no getter/setter",
                collection_name=self._collection_name,
            )
        return self._id_field_name, self._id_getter, self._id_setter

    @property
    def field_names(self) -> List[str]:
        """All field names, own fields first, then inherited ones."""
        return list(self._field_names)

    @property
    def secret_field_names(self) -> FrozenSet[str]:
        return self._secret_field_names

    @property
    def visible_field_names(self) -> List[str]:
        """Field names that are not secret, in field order."""
        return [name for name in self._field_names if name not in self._secret_field_names]

    def is_secret_field(self, field_name: str) -> bool:
        return field_name in self._secret_field_names

    @property
    def has_secret(self) -> bool:
        """Whether any field is secret."""
        return bool(self._secret_field_names)

    @property
    def getters(self) -> Mapping[str, Operation]:
        """Read-only field name -> getter mapping, ordered by field name."""
        return self._getters

    @property
    def setters(self) -> Mapping[str, Operation]:
        """Read-only field name -> setter mapping, ordered by field name."""
        return self._setters

    def getter_for(self, field_name: str) -> Optional[Operation]:
        return self._getters.get(field_name)

    def setter_for(self, field_name: str) -> Optional[Operation]:
        return self._setters.get(field_name)

    def __repr__(self) -> str:
        return (
            f"CollectionMetaData(collection_name={self._collection_name!r}, "
            f"record_type={self._record_type.__qualname__}, "
            f"schema_version={self._schema_version!r}, "
            f"actual_schema_version={self._actual_schema_version!r}, "
            f"read_only={self._read_only})"
        )
