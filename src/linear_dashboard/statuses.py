"""Status classification for Linear projects and issues.

Project status names are free text configured per workspace, so the
category lookup goes through an explicit table first. Names missing from the
table fall back to substring matching on the lowercased name.
"""

ACTIVE = "active"
PAUSED = "paused"
BACKLOG = "backlog"
COMPLETED = "completed"
CANCELLED = "cancelled"
OVERDUE = "overdue"

PROJECT_CATEGORIES = (ACTIVE, PAUSED, BACKLOG, COMPLETED, CANCELLED)

DEFAULT_PROJECT_STATUSES: dict[str, str] = {
    "in progress": ACTIVE,
    "active": ACTIVE,
    "started": ACTIVE,
    "planned": BACKLOG,
    "backlog": BACKLOG,
    "paused": PAUSED,
    "on hold": PAUSED,
    "completed": COMPLETED,
    "canceled": CANCELLED,
    "cancelled": CANCELLED,
}

# Fixed ordering used when listing issues under an expanded project.
ISSUE_STATUS_ORDER = (
    "Active",
    "In Progress",
    "Blocked",
    "In Review",
    "Todo",
    "Backlog",
    "Done",
    "Canceled",
    "Duplicate",
)
CLOSED_ISSUE_STATUSES = frozenset({"Done", "Canceled", "Duplicate"})
CLOSED_ISSUE_STATE_TYPES = frozenset({"completed", "canceled"})


class StatusClassifier:
    """Maps project status names to categories."""

    def __init__(self, overrides: dict[str, str] | None = None) -> None:
        self.table = dict(DEFAULT_PROJECT_STATUSES)
        for name, category in (overrides or {}).items():
            self.table[name.strip().lower()] = category

    def project_category(self, status_name: str | None) -> str:
        """Return one of PROJECT_CATEGORIES for a project status name."""
        name = (status_name or "").strip().lower()
        if name in self.table:
            return self.table[name]
        return _category_from_substring(name)

    def project_rank(self, status_name: str | None) -> int:
        """Tri-level ordering: in progress first, finished last."""
        category = self.project_category(status_name)
        if category == ACTIVE:
            return 0
        if category in (COMPLETED, CANCELLED):
            return 2
        return 1

    def is_project_finished(self, status_name: str | None) -> bool:
        return self.project_category(status_name) in (COMPLETED, CANCELLED)


def _category_from_substring(name: str) -> str:
    if "complet" in name:
        return COMPLETED
    if "cancel" in name:
        return CANCELLED
    if any(token in name for token in ("progress", "active", "started", "inprogress")):
        return ACTIVE
    if "hold" in name or "pause" in name:
        return PAUSED
    return BACKLOG


def bar_category(category: str, overdue: bool) -> str:
    """Styling category for a timeline bar; overdue wins over everything."""
    if overdue:
        return OVERDUE
    return category


def pill_category(category: str, overdue: bool) -> str:
    if overdue:
        return OVERDUE
    if category in (COMPLETED, CANCELLED, ACTIVE):
        return category
    return "default"


def issue_status_rank(status_name: str | None) -> int:
    """Position of an issue status in ISSUE_STATUS_ORDER; unknown names last."""
    try:
        return ISSUE_STATUS_ORDER.index(status_name or "")
    except ValueError:
        return len(ISSUE_STATUS_ORDER)


def is_issue_closed(status_name: str | None, state_type: str | None = None) -> bool:
    """Done, cancelled and duplicate issues count as closed."""
    if status_name in CLOSED_ISSUE_STATUSES:
        return True
    return (state_type or "").lower() in CLOSED_ISSUE_STATE_TYPES


def status_slug(status_name: str | None) -> str:
    """CSS-friendly form of a status name: "In Review" -> "in-review"."""
    return (status_name or "unknown").lower().replace(" ", "-")
