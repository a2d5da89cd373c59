"""The dashboard runtime shared by the web routes."""

import logging
import threading
from datetime import date
from pathlib import Path

from linear_dashboard.dates import format_updated_time
from linear_dashboard.fetcher import DataStore
from linear_dashboard.issue_lists import (
    build_sections,
    render_issue_list,
    render_summary,
    summary_counts,
)
from linear_dashboard.metrics import MetricsChart
from linear_dashboard.models import Snapshot
from linear_dashboard.statuses import StatusClassifier
from linear_dashboard.timeline import (
    MAX_MONTHS,
    MIN_MONTHS,
    build_timeline,
    effective_months,
    render_timeline,
    snap_months,
    zoom_months,
)
from linear_dashboard.view_state import TOGGLE_KINDS, ViewState, save_view_state

logger = logging.getLogger(__name__)


class Dashboard:
    """Current data, the timeline view state and the live metrics chart.

    Every render reads the snapshot and view state fresh and rebuilds all
    fragments from scratch.
    """

    def __init__(
        self,
        store: DataStore,
        view_state: ViewState | None = None,
        classifier: StatusClassifier | None = None,
        metrics: MetricsChart | None = None,
        state_path: Path | None = None,
    ) -> None:
        self.store = store
        self.view_state = view_state or ViewState()
        self.classifier = classifier or StatusClassifier()
        self.metrics = metrics or MetricsChart()
        self.state_path = state_path
        self._lock = threading.Lock()

    @property
    def snapshot(self) -> Snapshot:
        return self.store.snapshot

    def refresh(self) -> Snapshot:
        return self.store.refresh()

    def render_timeline(self, today: date | None = None) -> str:
        today = today or date.today()
        with self._lock:
            timeline = build_timeline(self.snapshot, self.view_state, today, self.classifier)
        return str(render_timeline(timeline))

    def render(self, today: date | None = None) -> dict:
        """Render every dashboard fragment for the current data."""
        today = today or date.today()
        snapshot = self.snapshot
        sections = build_sections(snapshot.issues, today)
        with self._lock:
            chart = self.metrics.draw(snapshot.issues)
        return {
            "timeline": self.render_timeline(today),
            "summary": str(render_summary(summary_counts(snapshot.issues, today))),
            "sections": {
                section: str(render_issue_list(section, items))
                for section, items in sections.items()
            },
            "chart": getattr(chart, "config", None),
            "last_updated": format_updated_time(snapshot.last_updated),
            "view": self.view_state.to_dict(),
        }

    def toggle(self, kind: str, key: str) -> bool:
        if kind not in TOGGLE_KINDS:
            raise ValueError(f"Unknown toggle kind: {kind!r}")
        with self._lock:
            expanded = self.view_state.toggle(kind, key)
        self._persist()
        return expanded

    def set_range(self, months: float | None) -> float | None:
        """Fix the range to ``months`` (snapped), or ``None`` to auto-fit."""
        if months is not None:
            months = snap_months(max(MIN_MONTHS, min(MAX_MONTHS, float(months))))
        with self._lock:
            self.view_state.range_months = months
        self._persist()
        return months

    def zoom(self, delta: float, today: date | None = None) -> float:
        today = today or date.today()
        with self._lock:
            current = effective_months(self.snapshot, self.view_state, today)
            self.view_state.range_months = zoom_months(current, delta)
            months = self.view_state.range_months
        self._persist()
        return months

    def set_label_width(self, width: float) -> int:
        with self._lock:
            width = self.view_state.set_label_width(width)
        self._persist()
        return width

    def _persist(self) -> None:
        if self.state_path is None:
            return
        with self._lock:
            data = ViewState.from_dict(self.view_state.to_dict())
        try:
            save_view_state(data, self.state_path)
        except OSError as e:
            logger.warning("Could not save view state to %s: %s", self.state_path, e)
