"""Linear GraphQL client, talking to the API directly or through the proxy."""

import json
import logging

import requests

from linear_dashboard.config import Config
from linear_dashboard.exceptions import (
    LinearApiError,
    LinearAuthError,
    LinearConnectionError,
    LinearRateLimitError,
)

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 15  # seconds
ISSUES_PAGE_SIZE = 250
PROJECTS_PAGE_SIZE = 50

ISSUE_FIELDS = """
            id identifier title
            state { name type }
            priority priorityLabel dueDate
            project { id name }
            url
            assignee { name }
"""

PROJECTS_QUERY = f"""
query {{
    projects(first: {PROJECTS_PAGE_SIZE}, orderBy: updatedAt) {{
        nodes {{
            id name color startDate targetDate url
            status {{ name }}
            initiatives {{ nodes {{ id name targetDate }} }}
        }}
    }}
}}
"""


def issues_query(team_id: str = "", assignee_email: str = "") -> str:
    """Build the issues query, filtered by team or by assignee email."""
    if assignee_email:
        issue_filter = f"{{ assignee: {{ email: {{ eq: {json.dumps(assignee_email)} }} }} }}"
    else:
        issue_filter = f"{{ team: {{ id: {{ eq: {json.dumps(team_id)} }} }} }}"
    return f"""
query {{
    issues(
        first: {ISSUES_PAGE_SIZE}
        filter: {issue_filter}
        orderBy: updatedAt
    ) {{
        nodes {{{ISSUE_FIELDS}        }}
    }}
}}
"""


class LinearClient:
    """Client for the Linear GraphQL API."""

    def __init__(self, config: Config) -> None:
        """Initialize the client with configuration."""
        self.config = config
        self._session: requests.Session | None = None

    @property
    def endpoint(self) -> str:
        return self.config.proxy_url or self.config.linear_api_url

    def _get_session(self) -> requests.Session:
        """Get or create the HTTP session.

        Through the proxy the request identifies itself with an Origin from
        the proxy's allow-list; direct calls carry the API key instead.
        """
        if self._session is None:
            session = requests.Session()
            session.headers["Content-Type"] = "application/json"
            if self.config.proxy_url:
                session.headers["Origin"] = self.config.dashboard_origin
            else:
                session.headers["Authorization"] = self.config.linear_api_key
            self._session = session
        return self._session

    def execute(self, query: str) -> dict:
        """Run a GraphQL query and return its ``data`` object.

        Raises:
            LinearAuthError: If the credentials or origin are rejected
            LinearRateLimitError: If rate limited
            LinearConnectionError: If the endpoint cannot be reached
            LinearApiError: For other HTTP errors and unusable responses
        """
        session = self._get_session()
        try:
            response = session.post(
                self.endpoint, data=json.dumps({"query": query}), timeout=REQUEST_TIMEOUT
            )
        except (requests.ConnectionError, requests.Timeout) as e:
            raise LinearConnectionError(
                f"Cannot connect to {self.endpoint}. Check the URL and your network connection."
            ) from e
        except requests.RequestException as e:
            raise LinearConnectionError(f"Request to {self.endpoint} failed: {e}") from e

        if response.status_code in (401, 403):
            raise LinearAuthError(
                f"Request rejected with HTTP {response.status_code}. "
                "Check the API key or the proxy's allowed origins."
            )
        if response.status_code == 429:
            raise LinearRateLimitError("Rate limited by Linear. Waiting for the next refresh.")
        if not response.ok:
            raise LinearApiError(
                f"Linear returned HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise LinearApiError("Linear returned a response that is not JSON") from e
        if not isinstance(payload, dict):
            raise LinearApiError("Linear returned JSON that is not an object")

        errors = payload.get("errors")
        data = payload.get("data")
        if errors:
            if not data:
                raise LinearApiError(f"GraphQL errors: {_error_messages(errors)}")
            logger.warning("GraphQL errors: %s", _error_messages(errors))
        if not isinstance(data, dict):
            raise LinearApiError("GraphQL response has no data")
        return data

    def fetch_issue_nodes(self) -> list[dict]:
        data = self.execute(issues_query(self.config.team_id, self.config.assignee_email))
        return ((data.get("issues") or {}).get("nodes")) or []

    def fetch_project_nodes(self) -> list[dict]:
        data = self.execute(PROJECTS_QUERY)
        return ((data.get("projects") or {}).get("nodes")) or []


def _error_messages(errors: list) -> str:
    return "; ".join(
        str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors
    )
