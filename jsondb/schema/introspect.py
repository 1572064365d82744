"""
Type introspection for JsonDB record types.

This module discovers the structural facts a collection needs about its
record type:
- The ordered field list, walked across the inheritance chain
- Which field is the identifier and which fields are secret
- Getter/setter operations, resolved by naming convention or by
  explicit Accessors markers

The walk is two-phase. Fields are collected from the record type and
then from each ancestor (first base) up to, but excluding, ``object``
or ``pydantic.BaseModel``. Operations are resolved only against the
methods declared on the record type itself; methods inherited from an
ancestor are never searched.

Invariants:
    - Annotations are evaluated field by field; names that cannot be
      resolved become ForwardRefs and the markers around them survive
    - Introspection never raises for a malformed type, with one
      exception: a Secret-marked annotation that cannot be evaluated
      raises ConfigurationError rather than dropping the secret
    - Unusable operations are skipped
    - If several fields carry Id(), the last one in walk order wins
    - Getter/setter maps are ordered by field name

How to change safely:
    - Keep walk order stable: own fields first, then ancestors
    - New naming conventions go at the end of accessor_names /
      mutator_names so existing resolutions do not change
"""

from __future__ import annotations

import builtins
import dataclasses
import inspect
import logging
import re
import sys
from dataclasses import dataclass
from typing import (
    Annotated,
    Any,
    Callable,
    ClassVar,
    Dict,
    ForwardRef,
    FrozenSet,
    List,
    Optional,
    Tuple,
    get_args,
    get_origin,
)

from pydantic import BaseModel

from ..errors import ConfigurationError
from .markers import Accessors, Id, Secret

logger = logging.getLogger(__name__)

# Walking stops before these bases
_TERMINAL_BASES: Tuple[type, ...] = (object, BaseModel)

_CLASS_VAR_SOURCE = re.compile(r"(typing\.)?ClassVar(\[|$)|(dataclasses\.)?InitVar(\[|$)")
_SECRET_MARKER = re.compile(r"\bSecret\s*\(")

GETTER_ARITY = 1
SETTER_ARITY = 2


@dataclass(frozen=True)
class FieldInfo:
    """A field discovered on a record type.

    Attributes:
        name: Field name
        declared_on: Class that declares the annotation
        annotation: Field type with Annotated metadata stripped (a string
            if the annotation could not be evaluated)
        is_id: Field carries the Id marker
        is_secret: Field carries the Secret marker
        accessors: Explicit getter/setter references, if any
    """

    name: str
    declared_on: type
    annotation: Any
    is_id: bool = False
    is_secret: bool = False
    accessors: Optional[Accessors] = None

    @property
    def is_bool(self) -> bool:
        """Whether the field is typed as bool."""
        return self.annotation is bool or self.annotation == "bool"


@dataclass(frozen=True, eq=False)
class TypeLayout:
    """Result of introspecting a record type.

    Attributes:
        record_type: The introspected type
        fields: Fields in walk order (own fields, then ancestors)
        id_field_name: Name of the identifier field, None if not declared
        secret_field_names: Fields carrying the Secret marker
        getters: Field name -> getter, ordered by field name
        setters: Field name -> setter, ordered by field name
    """

    record_type: type
    fields: Tuple[FieldInfo, ...]
    id_field_name: Optional[str]
    secret_field_names: FrozenSet[str]
    getters: Dict[str, Callable[..., Any]]
    setters: Dict[str, Callable[..., Any]]

    @property
    def field_names(self) -> List[str]:
        """Field names in walk order, without duplicates."""
        return list(dict.fromkeys(f.name for f in self.fields))


def type_chain(record_type: type) -> List[type]:
    """Get the record type followed by its ancestors.

    Follows the first base of each class and stops before ``object``
    or ``pydantic.BaseModel``.
    """
    chain: List[type] = []
    klass: Optional[type] = record_type
    while klass is not None and klass not in _TERMINAL_BASES:
        chain.append(klass)
        bases = klass.__bases__
        klass = bases[0] if bases else None
    return chain


class _AnnotationNamespace(dict):
    """Class namespace for evaluating annotation strings.

    Names are looked up in the class body, then the defining module, then
    builtins. Anything else becomes a ForwardRef, so a name imported only
    under TYPE_CHECKING does not hide the markers around it.
    """

    def __init__(self, klass: type) -> None:
        super().__init__(vars(klass))
        module = sys.modules.get(klass.__module__)
        self.module_globals: Dict[str, Any] = vars(module) if module is not None else {}

    def __missing__(self, key: str) -> Any:
        if key in self.module_globals:
            return self.module_globals[key]
        if hasattr(builtins, key):
            return getattr(builtins, key)
        return ForwardRef(key)


def _raw_annotations(klass: type) -> Dict[str, Any]:
    if sys.version_info >= (3, 14):
        import annotationlib

        return annotationlib.get_annotations(klass, format=annotationlib.Format.FORWARDREF)
    return inspect.get_annotations(klass)


def _evaluate(klass: type, name: str, source: str, namespace: _AnnotationNamespace) -> Any:
    try:
        return eval(source, namespace.module_globals, namespace)
    except (AttributeError, NameError, SyntaxError, TypeError) as e:
        if _SECRET_MARKER.search(source):
            raise ConfigurationError(
                f"Cannot evaluate annotation of secret field "
                f"{klass.__qualname__}.{name} ({source!r}): {e}",
                type_name=klass.__qualname__,
            ) from e
        logger.warning(
            f"Cannot evaluate annotation of {klass.__qualname__}.{name}: {e}. "
            "Markers on this field are ignored"
        )
        return source


def _declared_annotations(klass: type) -> Dict[str, Any]:
    """Get the annotations declared on ``klass`` itself, evaluated one by one.

    Raises:
        ConfigurationError: If a Secret-marked annotation cannot be evaluated
    """
    annotations = _raw_annotations(klass)
    if not any(isinstance(value, str) for value in annotations.values()):
        return annotations

    namespace = _AnnotationNamespace(klass)
    return {
        name: _evaluate(klass, name, value, namespace) if isinstance(value, str) else value
        for name, value in annotations.items()
    }


def _is_class_var(annotation: Any) -> bool:
    if annotation is ClassVar or get_origin(annotation) is ClassVar:
        return True
    if isinstance(annotation, dataclasses.InitVar):
        return True
    if isinstance(annotation, str):
        return _CLASS_VAR_SOURCE.match(annotation) is not None
    return False


def _field_info(name: str, klass: type, annotation: Any) -> FieldInfo:
    metadata: Tuple[Any, ...] = ()
    if get_origin(annotation) is Annotated:
        annotation, *rest = get_args(annotation)
        metadata = tuple(rest)

    accessors = None
    for marker in metadata:
        if isinstance(marker, Accessors):
            accessors = marker

    return FieldInfo(
        name=name,
        declared_on=klass,
        annotation=annotation,
        is_id=any(isinstance(m, Id) for m in metadata),
        is_secret=any(isinstance(m, Secret) for m in metadata),
        accessors=accessors,
    )


def walk_fields(record_type: type) -> List[FieldInfo]:
    """Collect fields across the inheritance chain.

    Args:
        record_type: The record type to walk

    Returns:
        Fields of ``record_type`` in declaration order, followed by the
        fields of each ancestor in the same manner
    """
    fields: List[FieldInfo] = []
    for klass in type_chain(record_type):
        for name, annotation in _declared_annotations(klass).items():
            if _is_class_var(annotation):
                continue
            fields.append(_field_info(name, klass, annotation))
    return fields


def _capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


def accessor_names(field_name: str, is_bool: bool = False) -> Tuple[str, ...]:
    """Conventional getter names for a field, in lookup order.

    Example:
        >>> accessor_names("id")
        ('get_id', 'getId')
        >>> accessor_names("active", is_bool=True)
        ('is_active', 'isActive')
    """
    prefix = "is" if is_bool else "get"
    return (f"{prefix}_{field_name}", f"{prefix}{_capitalize(field_name)}")


def mutator_names(field_name: str) -> Tuple[str, ...]:
    """Conventional setter names for a field, in lookup order."""
    return (f"set_{field_name}", f"set{_capitalize(field_name)}")


def declared_operations(record_type: type) -> Dict[str, Callable[..., Any]]:
    """Plain functions declared on ``record_type`` itself (not inherited)."""
    return {
        name: member
        for name, member in vars(record_type).items()
        if inspect.isfunction(member)
    }


def _accepts(func: Callable[..., Any], arity: int) -> bool:
    try:
        inspect.signature(func).bind(*([None] * arity))
    except (TypeError, ValueError):
        return False
    return True


def _resolve(
    record_type: type,
    operations: Dict[str, Callable[..., Any]],
    field_name: str,
    explicit: Any,
    candidates: Tuple[str, ...],
    arity: int,
) -> Optional[Callable[..., Any]]:
    if explicit is not None:
        func = operations.get(explicit) if isinstance(explicit, str) else explicit
        if func is not None and callable(func) and _accepts(func, arity):
            return func
        logger.warning(
            f"Explicit operation {explicit!r} for {record_type.__qualname__}.{field_name} "
            f"is not a declared method taking {arity} argument(s)"
        )
        return None

    for name in candidates:
        func = operations.get(name)
        if func is None:
            continue
        if _accepts(func, arity):
            return func
        logger.debug(f"Ignoring {record_type.__qualname__}.{name}: signature does not match")
    return None


def resolve_operations(
    record_type: type,
    fields: List[FieldInfo],
) -> Tuple[Dict[str, Callable[..., Any]], Dict[str, Callable[..., Any]]]:
    """Resolve getters and setters for the given fields.

    Only methods declared on ``record_type`` itself are considered.
    Fields without a usable operation are left out of the maps.

    Args:
        record_type: The most-derived record type
        fields: Fields from walk_fields

    Returns:
        Tuple of (getters, setters), each ordered by field name
    """
    operations = declared_operations(record_type)
    getters: Dict[str, Callable[..., Any]] = {}
    setters: Dict[str, Callable[..., Any]] = {}

    for info in fields:
        explicit = info.accessors or Accessors()
        getter = _resolve(
            record_type,
            operations,
            info.name,
            explicit.getter,
            accessor_names(info.name, info.is_bool),
            GETTER_ARITY,
        )
        if getter is not None:
            getters[info.name] = getter

        setter = _resolve(
            record_type,
            operations,
            info.name,
            explicit.setter,
            mutator_names(info.name),
            SETTER_ARITY,
        )
        if setter is not None:
            setters[info.name] = setter

    return dict(sorted(getters.items())), dict(sorted(setters.items()))


def introspect(record_type: type) -> TypeLayout:
    """Introspect a record type.

    Args:
        record_type: The record type

    Returns:
        TypeLayout with fields, identifier, secret fields and operations
    """
    fields = walk_fields(record_type)

    id_field_name: Optional[str] = None
    secret: set[str] = set()
    for info in fields:
        if info.is_id:
            if id_field_name is not None and id_field_name != info.name:
                logger.debug(
                    f"{record_type.__qualname__}: identifier '{info.name}' "
                    f"replaces '{id_field_name}'"
                )
            id_field_name = info.name
        if info.is_secret:
            secret.add(info.name)

    getters, setters = resolve_operations(record_type, fields)

    return TypeLayout(
        record_type=record_type,
        fields=tuple(fields),
        id_field_name=id_field_name,
        secret_field_names=frozenset(secret),
        getters=getters,
        setters=setters,
    )
