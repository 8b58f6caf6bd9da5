"""Tests for domain models and the reactivity table."""

import numpy as np
import pandas as pd
import pytest

from dstruct.domain.exceptions import SchemaViolationError
from dstruct.domain.models import (
    DStructConfig,
    Region,
    TestResult,
    TestStatus,
    default_quality,
)
from dstruct.domain.reactivity import ReactivityTable, parse_label


class TestDefaults:
    """Tests for configuration defaults."""

    @pytest.mark.parametrize(
        "reps, expected",
        [((2, 2), 0.5), ((3, 2), 0.5), ((2, 1), 0.2), ((1, 3), 0.2)],
    )
    def test_default_quality(self, reps, expected):
        assert default_quality(*reps) == expected

    def test_resolved_quality(self):
        assert DStructConfig(reps_A=3, reps_B=3).resolved_quality() == 0.5
        assert DStructConfig(reps_A=3, reps_B=3, quality=0.3).resolved_quality() == 0.3


class TestRegion:
    """Tests for Region."""

    def test_length_and_slice(self):
        region = Region(3, 7)
        assert region.length == 5
        assert list(range(10))[region.to_slice()] == [2, 3, 4, 5, 6]
        assert str(region) == "3-7"

    @pytest.mark.parametrize("bounds", [(0, 4), (5, 4)])
    def test_invalid(self, bounds):
        with pytest.raises(SchemaViolationError):
            Region(*bounds)

    def test_not_tested_is_distinct_from_p_one(self):
        untested = TestResult(Region(1, 2), TestStatus.TEST_UNDEFINED)
        tested = TestResult(Region(1, 2), TestStatus.TESTED, p_value=1.0)
        assert not untested.tested and untested.p_value is None
        assert tested.tested and tested.p_value == 1.0


class TestReactivityTable:
    """Tests for ReactivityTable validation and access."""

    def test_columns_by_label(self):
        table = ReactivityTable([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]], ["B1", "A1", "A2"])
        assert table.reps_A == 2 and table.reps_B == 1
        np.testing.assert_array_equal(table.columns(["A2", "B1"]), [[3.0, 1.0], [6.0, 4.0]])

    def test_unavailable_values_allowed(self):
        table = ReactivityTable([[np.nan, 1.0]], ["A1", "B1"])
        assert np.isnan(table.values[0, 0])

    def test_immutable(self):
        table = ReactivityTable([[1.0, 2.0]], ["A1", "B1"])
        with pytest.raises(ValueError):
            table.values[0, 0] = 5.0

    @pytest.mark.parametrize(
        "labels",
        [
            ["A1", "A1", "B1"],
            ["A1", "A3", "B1"],
            ["A1", "A2", "A3"],
            ["A1", "X1", "B1"],
            ["A0", "A1", "B1"],
        ],
    )
    def test_invalid_labels(self, labels):
        with pytest.raises(SchemaViolationError):
            ReactivityTable(np.ones((2, 3)), labels)

    @pytest.mark.parametrize("bad", [-0.5, np.inf])
    def test_invalid_values(self, bad):
        with pytest.raises(SchemaViolationError):
            ReactivityTable([[1.0, bad]], ["A1", "B1"])

    def test_from_dataframe(self):
        df = pd.DataFrame({"position": [1, 2, 3], "A1": [0.1, None, 0.3], "B1": [1, 2, 3]})
        table = ReactivityTable.from_dataframe(df)
        assert table.labels == ("A1", "B1")
        assert table.n_positions == 3
        assert np.isnan(table.values[1, 0])

    def test_positions_must_be_consecutive(self):
        df = pd.DataFrame({"position": [1, 3, 4], "A1": [0.1, 0.2, 0.3], "B1": [1, 2, 3]})
        with pytest.raises(SchemaViolationError):
            ReactivityTable.from_dataframe(df)

    def test_non_numeric(self):
        df = pd.DataFrame({"A1": ["x", "0.2"], "B1": [1, 2]})
        with pytest.raises(SchemaViolationError):
            ReactivityTable.from_dataframe(df)

    def test_region(self):
        table = ReactivityTable(np.arange(10.0).reshape(5, 2), ["A1", "B1"])
        sub = table.region(Region(2, 4))
        assert sub.n_positions == 3
        assert sub.values[0, 0] == 2.0
        with pytest.raises(SchemaViolationError):
            table.region(Region(4, 6))

    def test_parse_label(self):
        assert parse_label("B12") == ("B", 12)
