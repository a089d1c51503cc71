"""Unit tests for series alignment"""
from promexport.alignment import align_series
from promexport.query import Series


class TestAlignSeries:
    """Test merging sparse series onto one timestamp axis"""

    def test_union_axis_with_gaps(self):
        """Timestamps from either series appear once, gaps are None"""
        series = [
            Series(display_name="a", samples={10: "1", 20: "2"}),
            Series(display_name="b", samples={20: "3", 30: "4"}),
        ]
        grid = align_series(series)

        assert grid.timestamps == [10, 20, 30]
        assert grid.names == ["a", "b"]
        assert grid.values == [["1", None], ["2", "3"], [None, "4"]]

    def test_numeric_order(self):
        """Axis is sorted numerically, not by insertion or string order"""
        series = [Series(display_name="a", samples={1000000000: "x", 999999999: "y", 5: "z"})]
        grid = align_series(series)
        assert grid.timestamps == [5, 999999999, 1000000000]
        assert grid.column(0) == ["z", "y", "x"]

    def test_column_order_and_duplicate_names(self):
        """Columns follow input order; duplicate names stay separate"""
        series = [
            Series(display_name="up", samples={1: "b"}),
            Series(display_name="up", samples={1: "a"}),
        ]
        grid = align_series(series)
        assert grid.names == ["up", "up"]
        assert grid.values == [["b", "a"]]

    def test_rows(self, two_series):
        grid = align_series(two_series)
        assert list(grid.rows()) == [(0, ["1", "0"]), (300, ["1", None])]

    def test_series_without_samples(self):
        series = [
            Series(display_name="a", samples={}),
            Series(display_name="b", samples={7: "1"}),
        ]
        grid = align_series(series)
        assert grid.timestamps == [7]
        assert grid.values == [[None, "1"]]

    def test_empty_input(self):
        grid = align_series([])
        assert grid.timestamps == []
        assert grid.values == []
        assert list(grid.rows()) == []

    def test_input_not_mutated(self, two_series):
        align_series(two_series)
        assert two_series[1].samples == {0: "0"}
