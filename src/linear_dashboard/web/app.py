"""Flask application factory for the Linear dashboard web interface."""

import logging
from pathlib import Path

from flask import Flask

from linear_dashboard.config import Config, config_exists, get_view_state_path
from linear_dashboard.dashboard import Dashboard
from linear_dashboard.exceptions import DashboardError
from linear_dashboard.fetcher import DataStore, require_config
from linear_dashboard.linear_client import LinearClient
from linear_dashboard.statuses import StatusClassifier
from linear_dashboard.view_state import load_view_state

logger = logging.getLogger(__name__)

EXTENSION_KEY = "linear_dashboard"


def create_app(
    config: Config | None = None,
    store: DataStore | None = None,
    state_path: Path | None = None,
) -> Flask:
    """Create and configure the Flask application.

    Without an explicit ``config`` the one in ~/.linear-dashboard is used when
    present, and the timeline view state is kept next to it. Otherwise the app
    starts unconfigured and only the demo works.
    """
    app = Flask(__name__)

    app.config["SECRET_KEY"] = "linear-dashboard-local-dev"

    if config is None and config_exists():
        try:
            config = require_config()
            state_path = state_path or get_view_state_path()
        except DashboardError as e:
            logger.error("Ignoring configuration: %s", e)

    if store is None:
        store = DataStore(LinearClient(config) if config else None)

    dashboard = Dashboard(
        store,
        view_state=load_view_state(state_path) if state_path else None,
        classifier=StatusClassifier(config.project_statuses if config else None),
        state_path=state_path,
    )

    app.config["DASHBOARD_CONFIG"] = config
    app.extensions[EXTENSION_KEY] = dashboard

    from linear_dashboard.web.routes import bp
    app.register_blueprint(bp)

    return app
