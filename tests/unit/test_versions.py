"""
Unit tests for schema version comparators.
"""

import pytest

from jsondb.errors import ConfigurationError
from jsondb.schema.versions import (
    comparator_names,
    default_comparator,
    exact_comparator,
    get_comparator,
    major_comparator,
)


class TestDefaultComparator:
    """Tests for the dotted-numeric comparator."""

    @pytest.mark.parametrize(
        "expected,actual,result",
        [
            ("1.0", "1.0", 0),
            ("1.0.0", "1.0.0", 0),
            ("1.2", "1.10", -1),
            ("1.10", "1.2", 1),
            ("2.0", "1.9.9", 1),
            ("1.0", "1.0.0", -1),
            ("1.0.1", "1.0", 1),
            ("1.0-beta", "1.0-alpha", 1),
        ],
    )
    def test_compare(self, expected, actual, result):
        """Segments compare numerically, longer versions are greater."""
        assert default_comparator(expected, actual) == result


class TestExactComparator:
    """Tests for the exact comparator."""

    def test_equal(self):
        """Identical strings are compatible."""
        assert exact_comparator("1.0", "1.0") == 0

    def test_not_equal(self):
        """Any difference is incompatible."""
        assert exact_comparator("1.0", "1.0.0") != 0
        assert exact_comparator("1.0", "2.0") == -1
        assert exact_comparator("2.0", "1.0") == 1


class TestMajorComparator:
    """Tests for the major-version comparator."""

    def test_same_major(self):
        """Minor and patch differences are compatible."""
        assert major_comparator("1.0", "1.9.3") == 0

    def test_different_major(self):
        """Major differences are incompatible."""
        assert major_comparator("1.0", "2.0") == -1
        assert major_comparator("10.0", "9.0") == 1


class TestGetComparator:
    """Tests for comparator lookup."""

    def test_by_name(self):
        """Known names resolve to their comparators."""
        assert get_comparator("default") is default_comparator
        assert get_comparator("exact") is exact_comparator
        assert get_comparator(" MAJOR ") is major_comparator

    def test_callable_passthrough(self):
        """Callables are returned unchanged."""

        def custom(a, b):
            return 0

        assert get_comparator(custom) is custom

    def test_unknown_name(self):
        """Unknown names raise ConfigurationError listing valid names."""
        with pytest.raises(ConfigurationError, match="default, exact, major"):
            get_comparator("semver")

    @pytest.mark.parametrize("value", [None, 1, b"default"])
    def test_not_a_name_or_callable(self, value):
        """Values that are neither names nor callables raise ConfigurationError."""
        with pytest.raises(ConfigurationError, match="name or a callable"):
            get_comparator(value)

    def test_names(self):
        """All comparator names are listed."""
        assert comparator_names() == ["default", "exact", "major"]
