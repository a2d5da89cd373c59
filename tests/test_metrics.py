"""Tests for the metrics aggregator and chart adapter."""

from unittest.mock import MagicMock

from linear_dashboard.metrics import (
    STATUS_BUCKETS,
    ChartJsRenderer,
    MetricsChart,
    count_by_status,
)
from linear_dashboard.models import Issue, IssueState


def _issue(status):
    return Issue(id=status, identifier="ENG-1", title="t", state=IssueState(name=status))


class TestCountByStatus:
    def test_counts_in_fixed_order(self):
        issues = [_issue("Done"), _issue("Todo"), _issue("Done"), _issue("Active")]
        counts = count_by_status(issues)
        assert list(counts) == list(STATUS_BUCKETS)
        assert counts["Done"] == 2
        assert counts["Todo"] == 1
        assert counts["Active"] == 1
        assert counts["Backlog"] == 0

    def test_drops_unknown_statuses(self):
        counts = count_by_status([_issue("Canceled"), _issue("Triage")])
        assert "Canceled" not in counts
        assert sum(counts.values()) == 0


class TestMetricsChart:
    """Tests for MetricsChart lifecycle."""

    def test_destroys_previous_instance(self):
        first, second = MagicMock(), MagicMock()
        renderer = MagicMock()
        renderer.render.side_effect = [first, second]
        chart = MetricsChart(renderer)

        assert chart.draw([_issue("Done")]) is first
        first.destroy.assert_not_called()

        assert chart.draw([_issue("Todo")]) is second
        first.destroy.assert_called_once()
        second.destroy.assert_not_called()
        assert chart.instance is second

    def test_passes_labels_and_counts(self):
        renderer = MagicMock()
        MetricsChart(renderer).draw([_issue("Blocked"), _issue("Blocked")])
        labels, counts = renderer.render.call_args.args
        assert labels == list(STATUS_BUCKETS)
        assert counts[STATUS_BUCKETS.index("Blocked")] == 2

    def test_chartjs_config(self):
        chart = MetricsChart(ChartJsRenderer())
        old = chart.draw([_issue("Done")])
        new = chart.draw([_issue("Done"), _issue("Todo")])
        assert old.destroyed is True
        assert new.config["type"] == "bar"
        assert new.config["data"]["labels"] == list(STATUS_BUCKETS)
        assert new.config["data"]["datasets"][0]["data"] == [0, 1, 0, 0, 0, 0, 1]
