"""Summary counts and filtered issue lists."""

from datetime import date, timedelta

from markupsafe import Markup

from linear_dashboard.dates import format_relative_date
from linear_dashboard.models import Issue
from linear_dashboard.rendering import render_fragment
from linear_dashboard.statuses import status_slug

URGENT_WINDOW_DAYS = 7
URGENT_EXCLUDED_STATUSES = frozenset({"Done", "Canceled", "Duplicate", "In Review"})
ACTIVE_STATUSES = ("Active", "In Progress")
PRIORITY_ORDER = {"Urgent": 0, "High": 1, "Medium": 2, "Low": 3, "No priority": 4}
UNLABELED_PRIORITY_RANK = 5


def is_urgent(issue: Issue, today: date) -> bool:
    """Due within the next week (or overdue) and still waiting on someone."""
    if issue.due_date is None:
        return False
    if issue.status in URGENT_EXCLUDED_STATUSES:
        return False
    return issue.due_date <= today + timedelta(days=URGENT_WINDOW_DAYS)


def urgent_deadlines(issues: list[Issue], today: date) -> list[Issue]:
    return sorted((i for i in issues if is_urgent(i, today)), key=lambda i: i.due_date)


def priority_rank(label: str | None) -> int:
    return PRIORITY_ORDER.get(label or "", UNLABELED_PRIORITY_RANK)


def active_work(issues: list[Issue]) -> list[Issue]:
    """Issues being worked on, most pressing first."""
    active = [i for i in issues if i.status in ACTIVE_STATUSES]
    return sorted(
        active,
        key=lambda i: (
            ACTIVE_STATUSES.index(i.status),
            priority_rank(i.priority_label),
            i.due_date is None,
            i.due_date or date.max,
        ),
    )


def with_status(issues: list[Issue], status: str) -> list[Issue]:
    return [i for i in issues if i.status == status]


def in_review(issues: list[Issue]) -> list[Issue]:
    return with_status(issues, "In Review")


def blocked(issues: list[Issue]) -> list[Issue]:
    return with_status(issues, "Blocked")


def done(issues: list[Issue]) -> list[Issue]:
    return with_status(issues, "Done")


def summary_counts(issues: list[Issue], today: date) -> dict[str, int]:
    return {
        "urgent": sum(1 for i in issues if is_urgent(i, today)),
        "active": sum(1 for i in issues if i.status in ACTIVE_STATUSES),
        "in_review": len(in_review(issues)),
        "blocked": len(blocked(issues)),
        "done": len(done(issues)),
    }


def issue_item(issue: Issue, today: date, show_due_date: bool = False) -> dict:
    """View data for one entry of an issue list."""
    return {
        "identifier": issue.identifier,
        "title": issue.title,
        "url": issue.url,
        "status": issue.status,
        "status_class": f"status-{status_slug(issue.status)}",
        "priority_label": issue.priority_label,
        "priority_class": f"priority-{issue.priority_label.lower()}" if issue.priority_label else "",
        "project_name": issue.project.name if issue.project else None,
        "assignee_name": issue.assignee_name,
        "due_text": format_relative_date(issue.due_date, today) if issue.due_date else "",
        "show_due_date": show_due_date or issue.due_date is not None,
    }


# Section id -> (heading, empty message)
SECTIONS = {
    "urgent-deadlines": ("Urgent Deadlines", "No urgent deadlines in the next 7 days ✅"),
    "active-work": ("Active Work", "No active work"),
    "in-review": ("In Review", "Nothing in review right now"),
    "blocked-issues": ("Blocked", "No blocked issues ✅"),
}


def build_sections(issues: list[Issue], today: date) -> dict[str, list[dict]]:
    return {
        "urgent-deadlines": [issue_item(i, today, show_due_date=True) for i in urgent_deadlines(issues, today)],
        "active-work": [issue_item(i, today) for i in active_work(issues)],
        "in-review": [issue_item(i, today) for i in in_review(issues)],
        "blocked-issues": [issue_item(i, today) for i in blocked(issues)],
    }


def render_issue_list(section: str, items: list[dict]) -> Markup:
    return render_fragment("issue_list.html", items=items, empty_message=SECTIONS[section][1])


def render_summary(counts: dict[str, int]) -> Markup:
    return render_fragment("summary.html", counts=counts)
