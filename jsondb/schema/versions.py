"""
Schema version comparators.

A comparator takes the declared schema version and the version found in
the persisted collection and returns 0 iff they are compatible. Any
non-zero result makes the collection read-only once the actual version
is known.

Invariants:
    - Comparators are deterministic and pure
    - Results are normalized to -1, 0 or 1

How to change safely:
    - Add new comparators to _COMPARATORS under a new name
    - Never change the semantics of an existing name; stored
      collections would silently flip to read-only
"""

from __future__ import annotations

from typing import Callable, Dict, List, Union

from ..errors import ConfigurationError

SchemaComparator = Callable[[str, str], int]


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _compare_segment(left: str, right: str) -> int:
    if left.isdigit() and right.isdigit():
        return _sign(int(left) - int(right))
    return _sign((left > right) - (left < right))


def default_comparator(expected: str, actual: str) -> int:
    """Compare dotted versions segment by segment.

    Numeric segments compare as integers, so ``"1.10"`` is newer than
    ``"1.9"``. When one version is a prefix of the other the longer one
    is greater, so ``"1.0"`` and ``"1.0.0"`` are different versions.

    Args:
        expected: Declared schema version
        actual: Persisted schema version

    Returns:
        -1, 0 or 1
    """
    left = expected.split(".")
    right = actual.split(".")
    for a, b in zip(left, right):
        result = _compare_segment(a, b)
        if result != 0:
            return result
    return _sign(len(left) - len(right))


def exact_comparator(expected: str, actual: str) -> int:
    """Versions are compatible only if the strings are identical."""
    return _sign((expected > actual) - (expected < actual))


def major_comparator(expected: str, actual: str) -> int:
    """Versions are compatible if their first segment matches."""
    return _compare_segment(expected.split(".")[0], actual.split(".")[0])


_COMPARATORS: Dict[str, SchemaComparator] = {
    "default": default_comparator,
    "exact": exact_comparator,
    "major": major_comparator,
}


def comparator_names() -> List[str]:
    """Names accepted by get_comparator."""
    return sorted(_COMPARATORS)


def get_comparator(name_or_comparator: Union[str, SchemaComparator]) -> SchemaComparator:
    """Resolve a schema comparator.

    Args:
        name_or_comparator: Comparator name or a comparator callable

    Returns:
        The comparator callable

    Raises:
        ConfigurationError: If the name is unknown or the value is neither
            a string nor a callable
    """
    if callable(name_or_comparator):
        return name_or_comparator
    if not isinstance(name_or_comparator, str):
        raise ConfigurationError(
            f"Schema comparator must be a name or a callable, got {name_or_comparator!r}"
        )

    name = name_or_comparator.strip().lower()
    try:
        return _COMPARATORS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown schema comparator '{name_or_comparator}'. "
            f"Must be one of: {', '.join(comparator_names())}"
        ) from None
