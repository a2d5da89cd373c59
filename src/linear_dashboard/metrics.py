"""Issue counts by status, handed to a bar chart renderer."""

from dataclasses import dataclass, field
from typing import Protocol

from linear_dashboard.models import Issue

STATUS_BUCKETS = ("Backlog", "Todo", "In Progress", "Active", "Blocked", "In Review", "Done")
BUCKET_COLORS = ("#6c757d", "#ffc107", "#fd7e14", "#dc3545", "#6c757d", "#17a2b8", "#28a745")


def count_by_status(issues: list[Issue]) -> dict[str, int]:
    """Count issues per bucket; statuses outside the buckets are dropped."""
    counts = dict.fromkeys(STATUS_BUCKETS, 0)
    for issue in issues:
        if issue.status in counts:
            counts[issue.status] += 1
    return counts


class ChartHandle(Protocol):
    def destroy(self) -> None: ...


class ChartRenderer(Protocol):
    def render(self, labels: list[str], counts: list[int]) -> ChartHandle: ...


@dataclass
class ChartJsChart:
    """A Chart.js bar chart definition, serialized for the browser."""

    config: dict = field(default_factory=dict)
    destroyed: bool = False

    def destroy(self) -> None:
        self.destroyed = True
        self.config = {}


class ChartJsRenderer:
    def render(self, labels: list[str], counts: list[int]) -> ChartJsChart:
        return ChartJsChart(config={
            "type": "bar",
            "data": {
                "labels": list(labels),
                "datasets": [{
                    "label": "Issue Count",
                    "data": list(counts),
                    "backgroundColor": list(BUCKET_COLORS[:len(labels)]),
                    "borderWidth": 0,
                }],
            },
            "options": {
                "responsive": True,
                "maintainAspectRatio": False,
                "plugins": {
                    "legend": {"display": False},
                    "title": {"display": True, "text": "Issues by Status"},
                },
                "scales": {"y": {"beginAtZero": True, "ticks": {"stepSize": 5}}},
            },
        })


class MetricsChart:
    """Owns the single live chart; drawing again discards the old one first."""

    def __init__(self, renderer: ChartRenderer | None = None) -> None:
        self.renderer = renderer or ChartJsRenderer()
        self.instance: ChartHandle | None = None

    def draw(self, issues: list[Issue]) -> ChartHandle:
        counts = count_by_status(issues)
        if self.instance is not None:
            self.instance.destroy()
            self.instance = None
        self.instance = self.renderer.render(list(counts), list(counts.values()))
        return self.instance
