"""Gantt timeline layout: date range, positions, grouping and rows.

The layout is a pure function of the data snapshot, the view state and the
current date. ``build_timeline`` produces plain row objects and
``render_timeline`` turns them into HTML, so the same inputs always give the
same markup.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta

from markupsafe import Markup

from linear_dashboard.dates import (
    add_months,
    format_short_date,
    month_end,
    month_start,
    months_between,
)
from linear_dashboard.models import Initiative, Issue, Project, Snapshot
from linear_dashboard.rendering import render_fragment
from linear_dashboard.statuses import (
    StatusClassifier,
    bar_category,
    is_issue_closed,
    issue_status_rank,
    pill_category,
    status_slug,
)
from linear_dashboard.view_state import (
    INITIATIVE_COMPLETED,
    PROJECT,
    PROJECT_COMPLETED,
    ViewState,
)

MIN_BAR_WIDTH = 0.5  # percent of the timeline
BAR_LABEL_MIN_WIDTH = 8.0

MIN_MONTHS = 1
MAX_MONTHS = 120
NICE_MONTHS = (1, 3, 6, 12, 24, 36)
SNAP_TOLERANCE = 0.2  # 10 must snap to 12 while 15 stays 15; 0.12 breaks the first
ZOOM_DELTA_PER_DOUBLING = 500.0

MONTH_WIDTH_BASE_PX = 1440
MIN_MONTH_WIDTH_PX = 60
MAX_MONTH_WIDTH_PX = 480

UNASSIGNED_KEY = "unassigned"


@dataclass(frozen=True)
class TimelineRange:
    """Inclusive date range shown on the horizontal axis."""

    start: date
    end: date

    @property
    def total_days(self) -> int:
        return (self.end - self.start).days

    @property
    def months(self) -> int:
        return months_between(self.start, self.end)


def compute_range(
    projects: list[Project], today: date, months: float | None = None
) -> TimelineRange:
    """Compute the visible range.

    With ``months`` set the range starts on the first of last month and spans
    that many whole months. Otherwise it auto-fits all project dates, snapped
    out to month boundaries. Either way the range is widened to keep today
    inside it.
    """
    if months is not None:
        span = max(MIN_MONTHS, round(months))
        start = add_months(today, -1)
        end = add_months(start, span) - timedelta(days=1)
    else:
        dates = [d for p in projects for d in (p.start_date, p.target_date) if d]
        if dates:
            start = month_start(min(dates))
            end = month_end(add_months(max(dates), 1))
        else:
            start = add_months(today, -1)
            end = month_end(add_months(today, 3))

    if today <= start:
        start = add_months(today, -1)
    if today >= end:
        end = month_end(add_months(today, 1))

    return TimelineRange(start=start, end=end)


def to_position_percent(d: date, timeline_range: TimelineRange) -> float:
    """Horizontal position of ``d`` as a percentage, saturating at the edges."""
    total = timeline_range.total_days
    if total <= 0:
        return 0.0
    pct = (d - timeline_range.start).days / total * 100
    return max(0.0, min(100.0, pct))


def month_width_px(months: float) -> int:
    """Pixel width of one month; fewer months shown means wider months."""
    months = max(MIN_MONTHS, months)
    return int(max(MIN_MONTH_WIDTH_PX, min(MAX_MONTH_WIDTH_PX, MONTH_WIDTH_BASE_PX / months)))


def canvas_width_px(timeline_range: TimelineRange) -> int:
    months = timeline_range.months
    return month_width_px(months) * months


def snap_months(months: float) -> float:
    """Snap to the nearest round month count when close enough."""
    nearest = min(NICE_MONTHS, key=lambda nice: abs(months - nice))
    if abs(months - nearest) / nearest <= SNAP_TOLERANCE:
        return float(nearest)
    return months


def zoom_months(current: float, delta: float) -> float:
    """Apply a scroll delta to a month count (positive delta zooms out)."""
    factor = 2 ** (delta / ZOOM_DELTA_PER_DOUBLING)
    months = max(MIN_MONTHS, min(MAX_MONTHS, current * factor))
    return snap_months(months)


def effective_months(snapshot: Snapshot, state: ViewState, today: date) -> float:
    """Month count currently on screen, whether fixed or auto-fitted."""
    if state.range_months is not None:
        return state.range_months
    return float(compute_range(snapshot.projects, today).months)


@dataclass
class ProjectGroup:
    """Projects filed under one initiative, or the unassigned bucket."""

    key: str
    name: str
    initiative: Initiative | None = None
    projects: list[Project] = field(default_factory=list)


def group_projects(
    projects: list[Project],
    initiatives: list[Initiative],
    classifier: StatusClassifier | None = None,
) -> tuple[list[ProjectGroup], ProjectGroup]:
    """Group projects under their first initiative.

    Returns the initiative groups in order of first appearance (empty groups
    included) and the bucket of projects without an initiative. Within each
    group projects are ordered in progress, neutral, finished; ties keep
    their input order.
    """
    classifier = classifier or StatusClassifier()
    groups: dict[str, ProjectGroup] = {}
    for initiative in initiatives:
        groups[initiative.id] = ProjectGroup(
            key=initiative.id, name=initiative.name, initiative=initiative
        )

    unassigned = ProjectGroup(key=UNASSIGNED_KEY, name="Projects")
    for project in projects:
        if project.initiatives:
            first = project.initiatives[0]
            if first.id not in groups:
                groups[first.id] = ProjectGroup(key=first.id, name=first.name, initiative=first)
            groups[first.id].projects.append(project)
        else:
            unassigned.projects.append(project)

    for group in [*groups.values(), unassigned]:
        group.projects.sort(key=lambda p: classifier.project_rank(p.status))

    return list(groups.values()), unassigned


def sort_issues(issues: list[Issue]) -> list[Issue]:
    """Status rank first, then due date with dated issues before undated."""
    return sorted(
        issues,
        key=lambda i: (issue_status_rank(i.status), i.due_date is None, i.due_date or date.max),
    )


def is_project_overdue(
    project: Project, today: date, classifier: StatusClassifier | None = None
) -> bool:
    classifier = classifier or StatusClassifier()
    if project.target_date is None or project.target_date >= today:
        return False
    return not classifier.is_project_finished(project.status)


def is_issue_overdue(issue: Issue, today: date) -> bool:
    if issue.due_date is None or issue.due_date >= today:
        return False
    return not is_issue_closed(issue.state.name, issue.state.type)


@dataclass
class Bar:
    left: float
    width: float
    category: str
    title: str = ""
    faded: bool = False

    @property
    def show_label(self) -> bool:
        return self.width > BAR_LABEL_MIN_WIDTH


@dataclass
class Marker:
    position: float
    overdue: bool
    title: str = ""


@dataclass
class TimelineRow:
    """One rendered line of the timeline.

    ``kind`` is one of "heading", "initiative", "project", "accordion" or
    "issue". Rows that can be toggled carry the view-state set (``toggle``)
    and the key flipped in it.
    """

    kind: str
    key: str
    label: str
    depth: int = 0
    url: str = ""
    identifier: str = ""
    status: str = ""
    pill: str = ""
    bar: Bar | None = None
    marker: Marker | None = None
    toggle: str | None = None
    expanded: bool = False
    overdue: bool = False
    note: str = ""


@dataclass
class MonthMark:
    position: float
    label: str


@dataclass
class Timeline:
    range: TimelineRange
    today_position: float
    months: list[MonthMark]
    rows: list[TimelineRow]
    canvas_width: int
    label_width: int
    range_months: float | None = None

    @property
    def is_empty(self) -> bool:
        return not self.rows


def _span_bar(start: date, end: date, timeline_range: TimelineRange, category: str,
              title: str = "", faded: bool = False) -> Bar:
    left = to_position_percent(start, timeline_range)
    right = to_position_percent(end, timeline_range)
    return Bar(left=left, width=max(MIN_BAR_WIDTH, right - left), category=category,
               title=title, faded=faded)


def _month_marks(timeline_range: TimelineRange) -> list[MonthMark]:
    marks = []
    current = month_start(timeline_range.start)
    while current <= timeline_range.end:
        marks.append(MonthMark(
            position=to_position_percent(current, timeline_range),
            label=current.strftime("%b %y"),
        ))
        current = add_months(current, 1)
    return marks


class _RowBuilder:
    """Walks the groups and emits rows according to the view state."""

    def __init__(self, snapshot: Snapshot, state: ViewState, today: date,
                 timeline_range: TimelineRange, classifier: StatusClassifier) -> None:
        self.snapshot = snapshot
        self.state = state
        self.today = today
        self.range = timeline_range
        self.classifier = classifier
        self.rows: list[TimelineRow] = []

    def group(self, group: ProjectGroup, heading: str, kind: str) -> None:
        self.rows.append(TimelineRow(
            kind=kind,
            key=group.key,
            label=heading,
            bar=self._group_bar(group) if kind == "initiative" else None,
        ))

        open_projects = [p for p in group.projects if not self.classifier.is_project_finished(p.status)]
        finished = [p for p in group.projects if self.classifier.is_project_finished(p.status)]

        for project in open_projects:
            self.project(project)

        if finished:
            expanded = self.state.is_expanded(INITIATIVE_COMPLETED, group.key)
            self.rows.append(TimelineRow(
                kind="accordion",
                key=group.key,
                label=f"{len(finished)} completed",
                depth=1,
                toggle=INITIATIVE_COMPLETED,
                expanded=expanded,
            ))
            if expanded:
                for project in finished:
                    self.project(project)

    def _group_bar(self, group: ProjectGroup) -> Bar | None:
        dates = [d for p in group.projects for d in (p.start_date, p.target_date) if d]
        if not dates:
            return None
        target = group.initiative.target_date if group.initiative else None
        return _span_bar(min(dates), target or max(dates), self.range, "initiative", title=group.name)

    def project(self, project: Project) -> None:
        category = self.classifier.project_category(project.status)
        overdue = is_project_overdue(project, self.today, self.classifier)
        issues = self.snapshot.issues_for_project(project.id)
        expanded = bool(issues) and self.state.is_expanded(PROJECT, project.id)

        bar = None
        note = ""
        if project.start_date or project.target_date:
            start = project.start_date or self.today
            end = project.target_date or self.range.end
            dates = (
                f"{format_short_date(project.start_date) if project.start_date else 'No start'}"
                f" → "
                f"{format_short_date(project.target_date) if project.target_date else 'No target'}"
            )
            bar = _span_bar(
                start, end, self.range, bar_category(category, overdue),
                title=f"{project.name} · {project.status} · {dates}",
                faded=project.target_date is None,
            )
        else:
            note = "No dates set"

        self.rows.append(TimelineRow(
            kind="project",
            key=project.id,
            label=project.name,
            depth=1,
            url=project.url,
            status=project.status or "Unknown",
            pill=pill_category(category, overdue),
            bar=bar,
            toggle=PROJECT if issues else None,
            expanded=expanded,
            overdue=overdue,
            note=note,
        ))

        if expanded:
            self.issues(project, issues)

    def issues(self, project: Project, issues: list[Issue]) -> None:
        ordered = sort_issues(issues)
        open_issues = [i for i in ordered if not is_issue_closed(i.state.name, i.state.type)]
        closed = [i for i in ordered if is_issue_closed(i.state.name, i.state.type)]

        for issue in open_issues:
            self.issue(issue)

        if closed:
            expanded = self.state.is_expanded(PROJECT_COMPLETED, project.id)
            self.rows.append(TimelineRow(
                kind="accordion",
                key=project.id,
                label=f"{len(closed)} completed",
                depth=2,
                toggle=PROJECT_COMPLETED,
                expanded=expanded,
            ))
            if expanded:
                for issue in closed:
                    self.issue(issue)

    def issue(self, issue: Issue) -> None:
        overdue = is_issue_overdue(issue, self.today)
        marker = None
        if issue.due_date:
            marker = Marker(
                position=to_position_percent(issue.due_date, self.range),
                overdue=overdue,
                title=f"{issue.identifier} due {format_short_date(issue.due_date)}",
            )
        self.rows.append(TimelineRow(
            kind="issue",
            key=issue.id,
            label=issue.title,
            depth=2,
            url=issue.url,
            identifier=issue.identifier,
            status=issue.status,
            pill=status_slug(issue.status),
            marker=marker,
            overdue=overdue,
        ))


def build_timeline(
    snapshot: Snapshot,
    state: ViewState,
    today: date,
    classifier: StatusClassifier | None = None,
) -> Timeline:
    """Lay out the whole timeline for one render pass."""
    classifier = classifier or StatusClassifier()
    timeline_range = compute_range(snapshot.projects, today, state.range_months)
    timeline = Timeline(
        range=timeline_range,
        today_position=to_position_percent(today, timeline_range),
        months=_month_marks(timeline_range),
        rows=[],
        canvas_width=canvas_width_px(timeline_range),
        label_width=state.label_width,
        range_months=state.range_months,
    )
    if not snapshot.projects:
        return timeline

    groups, unassigned = group_projects(snapshot.projects, snapshot.initiatives, classifier)
    builder = _RowBuilder(snapshot, state, today, timeline_range, classifier)

    filled = [g for g in groups if g.projects]
    for group in filled:
        builder.group(group, group.name, "initiative")

    if unassigned.projects:
        builder.group(unassigned, "Other Projects" if filled else "Projects", "heading")

    timeline.rows = builder.rows
    return timeline


def render_timeline(timeline: Timeline) -> Markup:
    return render_fragment("timeline.html", timeline=timeline)
