"""Tests for summary counts and issue lists."""

from datetime import date

from linear_dashboard.issue_lists import (
    active_work,
    blocked,
    build_sections,
    done,
    in_review,
    is_urgent,
    issue_item,
    render_issue_list,
    render_summary,
    summary_counts,
    urgent_deadlines,
)
from linear_dashboard.models import Issue, IssueState, ProjectRef
from linear_dashboard.rendering import escape_html

TODAY = date(2024, 2, 1)


def _issue(iid, status="Todo", due=None, priority="", project=None, assignee=None):
    return Issue(
        id=iid,
        identifier=f"ENG-{iid}",
        title=f"Issue {iid}",
        state=IssueState(name=status),
        priority_label=priority,
        due_date=due,
        project=ProjectRef(id="p1", name=project) if project else None,
        assignee_name=assignee,
        url=f"https://linear.app/acme/issue/ENG-{iid}",
    )


class TestUrgent:
    """Tests for the urgent deadline rule."""

    def test_due_within_a_week(self):
        assert is_urgent(_issue("1", due=date(2024, 2, 8)), TODAY) is True

    def test_due_after_a_week(self):
        assert is_urgent(_issue("1", due=date(2024, 2, 9)), TODAY) is False

    def test_overdue_counts(self):
        assert is_urgent(_issue("1", status="In Progress", due=date(2024, 1, 1)), TODAY) is True

    def test_excluded_statuses(self):
        for status in ("Done", "Canceled", "Duplicate", "In Review"):
            assert is_urgent(_issue("1", status=status, due=date(2024, 2, 2)), TODAY) is False

    def test_no_due_date(self):
        assert is_urgent(_issue("1", status="Done"), TODAY) is False
        assert is_urgent(_issue("2", status="Todo"), TODAY) is False

    def test_list_sorted_by_due_date(self):
        issues = [
            _issue("1", due=date(2024, 2, 7)),
            _issue("2", due=date(2024, 1, 30)),
            _issue("3"),
            _issue("4", due=date(2024, 2, 3)),
        ]
        assert [i.id for i in urgent_deadlines(issues, TODAY)] == ["2", "4", "1"]


class TestActiveWork:
    """Tests for active_work ordering."""

    def test_filters_and_orders(self):
        issues = [
            _issue("low", status="In Progress", priority="Low"),
            _issue("todo", status="Todo", priority="Urgent"),
            _issue("urgent-nodue", status="In Progress", priority="Urgent"),
            _issue("urgent-due", status="In Progress", priority="Urgent", due=date(2024, 3, 1)),
            _issue("urgent-soon", status="In Progress", priority="Urgent", due=date(2024, 2, 5)),
            _issue("active-low", status="Active", priority="Low"),
            _issue("unlabeled", status="In Progress"),
            _issue("nopriority", status="In Progress", priority="No priority"),
        ]
        assert [i.id for i in active_work(issues)] == [
            "active-low",
            "urgent-soon",
            "urgent-due",
            "urgent-nodue",
            "low",
            "nopriority",
            "unlabeled",
        ]

    def test_priority_outranks_due_date(self):
        issues = [
            _issue("low-due", status="In Progress", priority="Low", due=date(2024, 2, 2)),
            _issue("urgent-nodue", status="In Progress", priority="Urgent"),
        ]
        assert [i.id for i in active_work(issues)] == ["urgent-nodue", "low-due"]


class TestStatusBuckets:
    """Tests for exact-status buckets and counts."""

    ISSUES = [
        _issue("1", status="Blocked"),
        _issue("2", status="In Review", due=date(2024, 2, 2)),
        _issue("3", status="Done"),
        _issue("4", status="In Progress", due=date(2024, 2, 3)),
        _issue("5", status="Active"),
        _issue("6", status="blocked"),
    ]

    def test_exact_matches(self):
        assert [i.id for i in blocked(self.ISSUES)] == ["1"]
        assert [i.id for i in in_review(self.ISSUES)] == ["2"]
        assert [i.id for i in done(self.ISSUES)] == ["3"]

    def test_summary_counts(self):
        assert summary_counts(self.ISSUES, TODAY) == {
            "urgent": 1,
            "active": 2,
            "in_review": 1,
            "blocked": 1,
            "done": 1,
        }


class TestIssueItem:
    """Tests for issue_item view data."""

    def test_fields(self):
        item = issue_item(
            _issue("7", status="In Review", priority="High", due=date(2024, 2, 2),
                   project="Billing", assignee="Ana"),
            TODAY,
        )
        assert item["status_class"] == "status-in-review"
        assert item["priority_class"] == "priority-high"
        assert item["due_text"] == "Tomorrow"
        assert item["project_name"] == "Billing"
        assert item["assignee_name"] == "Ana"

    def test_without_optional_fields(self):
        item = issue_item(_issue("8"), TODAY, show_due_date=True)
        assert item["priority_class"] == ""
        assert item["due_text"] == ""
        assert item["project_name"] is None


class TestRendering:
    """Tests for the list and summary fragments."""

    def test_empty_list_message(self):
        html = render_issue_list("blocked-issues", [])
        assert "No blocked issues" in html

    def test_list_escapes_titles(self):
        issue = _issue("9", status="Blocked")
        issue.title = "<img src=x onerror=alert(1)>"
        sections = build_sections([issue], TODAY)
        html = render_issue_list("blocked-issues", sections["blocked-issues"])
        assert "<img" not in html
        assert "&lt;img" in html

    def test_summary(self):
        html = render_summary({"urgent": 3, "active": 2, "in_review": 0, "blocked": 1, "done": 9})
        assert 'id="urgent-count">3<' in html
        assert 'id="done-count">9<' in html


class TestEscapeHtml:
    def test_escapes_five_characters(self):
        assert escape_html("&<>\"'") == "&amp;&lt;&gt;&#34;&#39;"

    def test_applied_in_fragments(self):
        issue = _issue("9", status="Blocked", project="R&D <core>", assignee="O'Neil")
        issue.title = "Say \"hi\" & <wave>"
        sections = build_sections([issue], TODAY)
        html = render_issue_list("blocked-issues", sections["blocked-issues"])
        assert "Say &#34;hi&#34; &amp; &lt;wave&gt;" in html
        assert "R&amp;D &lt;core&gt;" in html
        assert "O&#39;Neil" in html
        assert "&amp;amp;" not in html

    def test_none(self):
        assert escape_html(None) == ""
