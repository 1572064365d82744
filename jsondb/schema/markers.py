"""
Declaration markers for JsonDB record types.

A record type is mapped to a collection with the ``document`` class
decorator. Individual fields are classified with markers placed in
``typing.Annotated`` metadata:
- Id: the field is the record identifier
- Secret: the field must be redacted from external consumers
- Accessors: explicit getter/setter for the field

Invariants:
    - The document marker belongs to the decorated class only;
      subclasses are not documents unless decorated themselves
    - Markers carry no behaviour; the registry builder validates them

Example:
    >>> @document("customers", schema_version="1.0")
    ... class Customer:
    ...     id: Annotated[str, Id()]
    ...     ssn: Annotated[str, Secret()]
    ...
    ...     def get_id(self) -> str:
    ...         return self.id
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar, Union

T = TypeVar("T", bound=type)

_DOCUMENT_ATTR = "__jsondb_document__"


@dataclass(frozen=True)
class DocumentDef:
    """Collection declaration attached to a record type.

    Attributes:
        collection: Collection name, the stable external key
        schema_version: Schema version the type was written against
    """

    collection: str
    schema_version: str


@dataclass(frozen=True)
class Id:
    """Marks the identifier field of a record type."""


@dataclass(frozen=True)
class Secret:
    """Marks a field whose value must be redacted."""


@dataclass(frozen=True)
class Accessors:
    """Explicit getter/setter references for a field.

    Each reference is either the name of a method declared on the
    record type, or a callable taking ``(record)`` / ``(record, value)``.
    Explicit references win over name-derived resolution.
    """

    getter: Optional[Union[str, Callable[..., Any]]] = None
    setter: Optional[Union[str, Callable[..., Any]]] = None


def document(collection: str, schema_version: str = "1.0") -> Callable[[T], T]:
    """Class decorator mapping a record type to a collection.

    Args:
        collection: Collection name
        schema_version: Declared schema version

    Returns:
        Decorator that attaches a DocumentDef to the class
    """

    def decorate(cls: T) -> T:
        setattr(cls, _DOCUMENT_ATTR, DocumentDef(collection=collection, schema_version=schema_version))
        return cls

    return decorate


def document_def(cls: type) -> Optional[DocumentDef]:
    """Get the document marker declared on ``cls`` itself (not inherited)."""
    marker = cls.__dict__.get(_DOCUMENT_ATTR)
    if isinstance(marker, DocumentDef):
        return marker
    return None
