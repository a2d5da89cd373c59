"""Refresh cycle: fetch issues and projects, keep the last good data."""

import itertools
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

from linear_dashboard.config import Config, config_exists, get_config_path, load_config
from linear_dashboard.exceptions import ConfigNotFoundError, DashboardError, InvalidConfigError
from linear_dashboard.linear_client import LinearClient
from linear_dashboard.models import Issue, Project, Snapshot, derive_initiatives

logger = logging.getLogger(__name__)


def require_config() -> Config:
    """Load the saved configuration.

    Raises:
        ConfigNotFoundError: If no configuration file exists
        InvalidConfigError: If the configuration is invalid
    """
    if not config_exists():
        raise ConfigNotFoundError(
            f"Configuration not found at {get_config_path()}. Run `linear-dashboard init` first."
        )
    try:
        return load_config()
    except ValueError as e:
        raise InvalidConfigError(str(e))


class DataStore:
    """Holds the latest issues and projects.

    Issues and projects are fetched independently: when one side fails it is
    logged and that side keeps its previous data. Each side only accepts a
    result whose request started after the one it currently shows.
    """

    def __init__(self, client: LinearClient | None) -> None:
        self.client = client
        self._snapshot = Snapshot()
        self._lock = threading.Lock()
        self._refresh_lock = threading.Lock()
        self._sequence = itertools.count(1)
        self._applied = {"issues": 0, "projects": 0}

    @property
    def snapshot(self) -> Snapshot:
        """The current data; replaced wholesale, never mutated in place."""
        with self._lock:
            return self._snapshot

    def replace(self, snapshot: Snapshot) -> None:
        with self._lock:
            self._snapshot = snapshot

    def refresh(self) -> Snapshot:
        """Fetch both collections concurrently and stamp the update time.

        Concurrent callers are serialized.
        """
        if self.client is None:
            raise DashboardError("No Linear client configured")

        with self._refresh_lock:
            sequence = next(self._sequence)
            with ThreadPoolExecutor(max_workers=2) as executor:
                issues_future = executor.submit(self._fetch_issues, sequence)
                projects_future = executor.submit(self._fetch_projects, sequence)
                issues_future.result()
                projects_future.result()

            with self._lock:
                self._snapshot = _copy(self._snapshot, last_updated=datetime.now())
                return self._snapshot

    def _fetch_issues(self, sequence: int) -> None:
        try:
            nodes = self.client.fetch_issue_nodes()
            issues = [Issue.from_node(n) for n in nodes]
        except DashboardError as e:
            logger.error("Issues fetch failed: %s", e)
            return
        except (AttributeError, TypeError, ValueError) as e:
            logger.error("Issues fetch failed on malformed data: %s", e)
            return
        self._apply("issues", sequence, issues=issues)
        logger.info("Fetched %d issues", len(issues))

    def _fetch_projects(self, sequence: int) -> None:
        try:
            nodes = self.client.fetch_project_nodes()
            projects = [Project.from_node(n) for n in nodes]
        except DashboardError as e:
            logger.error("Projects fetch failed: %s", e)
            return
        except (AttributeError, TypeError, ValueError) as e:
            logger.error("Projects fetch failed on malformed data: %s", e)
            return
        self._apply(
            "projects", sequence, projects=projects, initiatives=derive_initiatives(projects)
        )
        logger.info("Fetched %d projects", len(projects))

    def _apply(self, side: str, sequence: int, **changes) -> None:
        with self._lock:
            if sequence <= self._applied[side]:
                logger.debug("Dropping stale %s result from refresh #%d", side, sequence)
                return
            self._applied[side] = sequence
            self._snapshot = _copy(self._snapshot, **changes)


def _copy(snapshot: Snapshot, **changes) -> Snapshot:
    values = {
        "issues": snapshot.issues,
        "projects": snapshot.projects,
        "initiatives": snapshot.initiatives,
        "last_updated": snapshot.last_updated,
    }
    values.update(changes)
    return Snapshot(**values)


class Poller:
    """Calls ``DataStore.refresh`` every ``interval`` seconds on a daemon thread."""

    def __init__(self, store: DataStore, interval: float) -> None:
        self.store = store
        self.interval = interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name="linear-poller", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=5)
            self._thread = None

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.tick()

    def tick(self) -> None:
        try:
            self.store.refresh()
        except DashboardError as e:
            logger.error("Scheduled refresh failed: %s", e)
