"""Unit tests for label set display names"""
import itertools

from promexport.labels import metric_name


class TestMetricName:
    """Test display name construction from label sets"""

    def test_empty_label_set(self):
        """Empty label set renders as {}"""
        assert metric_name({}) == "{}"

    def test_name_only(self):
        """Only __name__ returns the bare metric name"""
        assert metric_name({"__name__": "cpu"}) == "cpu"

    def test_labels_without_name(self):
        """Missing __name__ leaves an empty base"""
        assert metric_name({"mode": "idle"}) == '{mode="idle"}'

    def test_name_with_labels_sorted(self):
        """Labels are sorted regardless of input order"""
        labels = {"__name__": "up", "job": "api", "instance": "h1"}
        assert metric_name(labels) == 'up{instance="h1",job="api"}'

    def test_independent_of_insertion_order(self):
        """Every permutation of the same label set yields the same name"""
        items = [("__name__", "up"), ("job", "api"), ("instance", "h1"), ("zone", "eu")]
        names = {metric_name(dict(p)) for p in itertools.permutations(items)}
        assert names == {'up{instance="h1",job="api",zone="eu"}'}

    def test_quotes_not_escaped(self):
        """Embedded quotes are substituted literally"""
        assert metric_name({"path": 'a"b'}) == '{path="a"b"}'

    def test_sort_uses_full_fragment(self):
        """Fragments sort by key="value" text, not by key alone"""
        labels = {"a": "2", "a_b": "1"}
        # '"' (0x22) sorts before '_' (0x5f)
        assert metric_name(labels) == '{a="2",a_b="1"}'
