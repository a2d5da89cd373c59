"""Interactive timeline view state and its persistence."""

import logging
import math
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

import tomli_w

from linear_dashboard.config import get_view_state_path

logger = logging.getLogger(__name__)

MIN_LABEL_WIDTH = 120
MAX_LABEL_WIDTH = 1000
DEFAULT_LABEL_WIDTH = 280

# Toggle kinds, each backed by its own key set.
INITIATIVE_COMPLETED = "initiative-completed"
PROJECT = "project"
PROJECT_COMPLETED = "project-completed"
TOGGLE_KINDS = (INITIATIVE_COMPLETED, PROJECT, PROJECT_COMPLETED)


def clamp_label_width(width: float) -> int:
    if not math.isfinite(width):
        return DEFAULT_LABEL_WIDTH
    return int(max(MIN_LABEL_WIDTH, min(MAX_LABEL_WIDTH, round(width))))


@dataclass
class ViewState:
    """User-driven timeline state that survives re-renders and refreshes.

    ``range_months`` is ``None`` when the range auto-fits the project dates.
    """

    range_months: float | None = None
    label_width: int = DEFAULT_LABEL_WIDTH
    expanded_initiative_completed: set[str] = field(default_factory=set)
    expanded_projects: set[str] = field(default_factory=set)
    expanded_project_completed: set[str] = field(default_factory=set)

    def _keys(self, kind: str) -> set[str]:
        if kind == INITIATIVE_COMPLETED:
            return self.expanded_initiative_completed
        if kind == PROJECT:
            return self.expanded_projects
        if kind == PROJECT_COMPLETED:
            return self.expanded_project_completed
        raise ValueError(f"Unknown toggle kind: {kind!r}")

    def is_expanded(self, kind: str, key: str) -> bool:
        return key in self._keys(kind)

    def toggle(self, kind: str, key: str) -> bool:
        """Flip ``key`` in the set for ``kind``. Returns the new expanded flag."""
        keys = self._keys(kind)
        if key in keys:
            keys.discard(key)
            return False
        keys.add(key)
        return True

    def set_label_width(self, width: float) -> int:
        self.label_width = clamp_label_width(width)
        return self.label_width

    def to_dict(self) -> dict:
        data: dict = {
            "label_width": self.label_width,
            "expanded_initiative_completed": sorted(self.expanded_initiative_completed),
            "expanded_projects": sorted(self.expanded_projects),
            "expanded_project_completed": sorted(self.expanded_project_completed),
        }
        if self.range_months is not None:
            data["range_months"] = self.range_months
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ViewState":
        range_months = data.get("range_months")
        return cls(
            range_months=float(range_months) if range_months is not None else None,
            label_width=clamp_label_width(data.get("label_width", DEFAULT_LABEL_WIDTH)),
            expanded_initiative_completed=set(data.get("expanded_initiative_completed", [])),
            expanded_projects=set(data.get("expanded_projects", [])),
            expanded_project_completed=set(data.get("expanded_project_completed", [])),
        )


def load_view_state(path: Path | None = None) -> ViewState:
    """Load the persisted view state, or defaults if there is none."""
    path = path or get_view_state_path()
    if not path.exists():
        return ViewState()
    try:
        with open(path, "rb") as f:
            return ViewState.from_dict(tomllib.load(f))
    except (tomllib.TOMLDecodeError, TypeError, ValueError) as e:
        logger.warning("Ignoring unreadable view state at %s: %s", path, e)
        return ViewState()


def save_view_state(state: ViewState, path: Path | None = None) -> None:
    path = path or get_view_state_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        tomli_w.dump(state.to_dict(), f)
