"""Built-in demo data, so the dashboard can be tried without a Linear key."""

from datetime import date, datetime, timedelta

from linear_dashboard.models import Issue, Project, Snapshot, derive_initiatives

PLATFORM = {"id": "init-platform", "name": "Platform Modernisation", "targetDate": None}
MOBILE = {"id": "init-mobile", "name": "Mobile App Launch", "targetDate": None}


def demo_snapshot(today: date | None = None) -> Snapshot:
    """Projects and issues laid out around ``today``."""
    today = today or date.today()

    def d(offset_days):
        return (today + timedelta(days=offset_days)).isoformat()

    mobile = dict(MOBILE, targetDate=d(150))

    def project(pid, name, status, start, target, initiatives=()):
        return {
            "id": pid, "name": name, "color": "#5e6ad2",
            "startDate": start, "targetDate": target, "url": "#",
            "status": {"name": status},
            "initiatives": {"nodes": list(initiatives)},
        }

    def issue(num, title, state, state_type, priority, due, project_node, assignee):
        return {
            "id": f"issue-{num}", "identifier": f"DEMO-{num}", "title": title,
            "state": {"name": state, "type": state_type},
            "priority": {"Urgent": 1, "High": 2, "Medium": 3, "Low": 4}.get(priority, 0),
            "priorityLabel": priority, "dueDate": due,
            "project": {"id": project_node["id"], "name": project_node["name"]} if project_node else None,
            "url": "#", "assignee": {"name": assignee} if assignee else None,
        }

    project_nodes = [
        project("proj-gateway", "API Gateway migration", "In Progress", d(-45), d(45), [PLATFORM]),
        project("proj-mesh", "Service mesh rollout", "Planned", d(30), d(120), [PLATFORM]),
        project("proj-legacy", "Legacy cutover", "Completed", d(-150), d(-10), [PLATFORM]),
        project("proj-ios", "iOS MVP", "In Progress", d(-20), d(-2), [mobile, PLATFORM]),
        project("proj-android", "Android MVP", "Paused", d(50), None, [mobile]),
        project("proj-docs", "Documentation refresh", "Backlog", None, None),
        project("proj-perf", "Performance budget", "In Progress", d(-10), d(60)),
    ]
    gateway, mesh, _, ios, _, _, perf = project_nodes

    issue_nodes = [
        issue(1, "Route auth traffic through gateway", "In Progress", "started", "High", d(3), gateway, "Ana"),
        issue(2, "Rate limit dashboards", "Todo", "unstarted", "Medium", d(20), gateway, None),
        issue(3, "Decommission old ingress", "Blocked", "started", "Urgent", d(-1), gateway, "Ben"),
        issue(4, "Gateway load test", "Done", "completed", "Low", d(-5), gateway, "Ana"),
        issue(5, "Pick mesh vendor", "Backlog", "backlog", "No priority", None, mesh, None),
        issue(6, "App Store screenshots", "In Review", "started", "Medium", d(1), ios, "Cam"),
        issue(7, "Crash on cold start", "Active", "started", "Urgent", d(0), ios, "Dee"),
        issue(8, "Offline mode", "Canceled", "canceled", "Low", None, ios, None),
        issue(9, "Bundle size report", "In Progress", "started", "Low", None, perf, "Eli"),
        issue(10, "Duplicate of DEMO-7", "Duplicate", "canceled", "Urgent", None, ios, None),
    ]

    projects = [Project.from_node(n) for n in project_nodes]
    return Snapshot(
        issues=[Issue.from_node(n) for n in issue_nodes],
        projects=projects,
        initiatives=derive_initiatives(projects),
        last_updated=datetime.combine(today, datetime.min.time()),
    )
