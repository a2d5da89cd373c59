"""Data models for the Linear dashboard."""

from dataclasses import dataclass, field
from datetime import date, datetime

from linear_dashboard.dates import parse_local_date


@dataclass(frozen=True)
class IssueState:
    """Workflow state of an issue (e.g. name "In Review", type "started")."""

    name: str
    type: str = ""


@dataclass(frozen=True)
class ProjectRef:
    id: str
    name: str


@dataclass
class Issue:
    """A Linear issue as shown on the dashboard."""

    id: str
    identifier: str
    title: str
    state: IssueState
    priority: int = 0
    priority_label: str = ""
    due_date: date | None = None
    project: ProjectRef | None = None
    assignee_name: str | None = None
    url: str = ""

    @property
    def status(self) -> str:
        return self.state.name

    @classmethod
    def from_node(cls, node: dict) -> "Issue":
        """Build an Issue from a GraphQL ``issues.nodes`` entry."""
        state = node.get("state") or {}
        project = node.get("project")
        assignee = node.get("assignee")
        return cls(
            id=node.get("id", ""),
            identifier=node.get("identifier", ""),
            title=node.get("title", ""),
            state=IssueState(name=state.get("name", ""), type=state.get("type", "")),
            priority=node.get("priority") or 0,
            priority_label=node.get("priorityLabel") or "",
            due_date=parse_local_date(node.get("dueDate")),
            project=ProjectRef(id=project.get("id", ""), name=project.get("name", "")) if project else None,
            assignee_name=assignee.get("name") if assignee else None,
            url=node.get("url", ""),
        )


@dataclass(frozen=True)
class Initiative:
    """A grouping of projects, reconstructed from project links."""

    id: str
    name: str
    target_date: date | None = None

    @classmethod
    def from_node(cls, node: dict) -> "Initiative":
        return cls(
            id=node.get("id", ""),
            name=node.get("name", ""),
            target_date=parse_local_date(node.get("targetDate")),
        )


@dataclass
class Project:
    """A Linear project; ``initiatives`` keeps the order the API returned."""

    id: str
    name: str
    status: str = ""
    start_date: date | None = None
    target_date: date | None = None
    url: str = ""
    color: str | None = None
    initiatives: list[Initiative] = field(default_factory=list)

    @classmethod
    def from_node(cls, node: dict) -> "Project":
        """Build a Project from a GraphQL ``projects.nodes`` entry."""
        status = node.get("status") or {}
        initiative_nodes = (node.get("initiatives") or {}).get("nodes") or []
        return cls(
            id=node.get("id", ""),
            name=node.get("name", ""),
            status=status.get("name", ""),
            start_date=parse_local_date(node.get("startDate")),
            target_date=parse_local_date(node.get("targetDate")),
            url=node.get("url", ""),
            color=node.get("color"),
            initiatives=[Initiative.from_node(n) for n in initiative_nodes],
        )


def derive_initiatives(projects: list[Project]) -> list[Initiative]:
    """Collect the unique initiatives referenced by projects, first seen first."""
    seen: dict[str, Initiative] = {}
    for project in projects:
        for initiative in project.initiatives:
            seen.setdefault(initiative.id, initiative)
    return list(seen.values())


@dataclass
class Snapshot:
    """Everything fetched in the latest refresh cycle."""

    issues: list[Issue] = field(default_factory=list)
    projects: list[Project] = field(default_factory=list)
    initiatives: list[Initiative] = field(default_factory=list)
    last_updated: datetime | None = None

    def issues_for_project(self, project_id: str) -> list[Issue]:
        return [i for i in self.issues if i.project and i.project.id == project_id]
