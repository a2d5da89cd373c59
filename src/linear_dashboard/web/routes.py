"""HTTP route handlers for the Linear dashboard web interface."""

import logging
import math

from flask import Blueprint, current_app, jsonify, render_template, request

from linear_dashboard.dashboard import Dashboard
from linear_dashboard.demo import demo_snapshot
from linear_dashboard.exceptions import DashboardError
from linear_dashboard.fetcher import DataStore

logger = logging.getLogger(__name__)

bp = Blueprint("main", __name__, static_folder="static", template_folder="templates")

DEMO_EXTENSION_KEY = "linear_dashboard_demo"
RANGE_CHOICES = (1, 3, 6, 12, 24, 36)


def _is_demo() -> bool:
    return request.args.get("demo") == "1"


def _dashboard(demo: bool | None = None) -> Dashboard:
    """The live dashboard, or the demo one when the request asks for it."""
    if demo is None:
        demo = _is_demo()
    if not demo:
        return current_app.extensions["linear_dashboard"]
    runtime = current_app.extensions.get(DEMO_EXTENSION_KEY)
    if runtime is None:
        store = DataStore(None)
        store.replace(demo_snapshot())
        runtime = Dashboard(store)
        current_app.extensions[DEMO_EXTENSION_KEY] = runtime
    return runtime


def _has_config() -> bool:
    return current_app.config.get("DASHBOARD_CONFIG") is not None


def _refresh_interval() -> int | None:
    config = current_app.config.get("DASHBOARD_CONFIG")
    return config.refresh_interval if config else None


def _is_number(value) -> bool:
    """A finite JSON number; booleans, NaN and infinities do not count."""
    return (
        not isinstance(value, bool)
        and isinstance(value, (int, float))
        and math.isfinite(value)
    )


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _page(dashboard: Dashboard, demo: bool):
    return render_template(
        "index.html",
        has_config=_has_config() or demo,
        demo=demo,
        refresh_interval=None if demo else _refresh_interval(),
        range_choices=RANGE_CHOICES,
        rendered=dashboard.render(),
    )


@bp.route("/health")
def health():
    """Health check endpoint."""
    if _has_config():
        snapshot = current_app.extensions["linear_dashboard"].snapshot
        return jsonify({
            "status": "ok",
            "config_loaded": True,
            "last_updated": snapshot.last_updated.isoformat() if snapshot.last_updated else None,
        })
    return jsonify({
        "status": "error",
        "config_loaded": False,
        "message": "Configuration not found",
    }), 503


@bp.route("/")
def index():
    """Render the dashboard, fetching data first if nothing is loaded yet."""
    dashboard = _dashboard()
    if _has_config() and dashboard.snapshot.last_updated is None:
        try:
            dashboard.refresh()
        except DashboardError as e:
            logger.error("Initial refresh failed: %s", e)
    return _page(dashboard, demo=False)


@bp.route("/demo")
def demo():
    """Render the dashboard with built-in demo data (no Linear credentials needed)."""
    return _page(_dashboard(demo=True), demo=True)


@bp.route("/api/dashboard")
def api_dashboard():
    """Return every rendered fragment as JSON."""
    return jsonify(_dashboard().render())


@bp.route("/api/refresh", methods=["POST"])
def api_refresh():
    """Fetch fresh data, then return the re-rendered fragments."""
    dashboard = _dashboard()
    if not _is_demo():
        if not _has_config():
            return jsonify({"error": "Configuration not found"}), 503
        try:
            dashboard.refresh()
        except DashboardError as e:
            return jsonify({"error": str(e)}), 503
    return jsonify(dashboard.render())


@bp.route("/api/view")
def api_view():
    return jsonify(_dashboard().view_state.to_dict())


@bp.route("/api/view/toggle", methods=["POST"])
def api_view_toggle():
    """Flip one expand/collapse key and return the new timeline."""
    data = _json_body()
    kind = data.get("kind")
    key = data.get("key")
    if not isinstance(kind, str) or not isinstance(key, str) or not key:
        return jsonify({"error": "Both 'kind' and 'key' are required."}), 400

    dashboard = _dashboard()
    try:
        expanded = dashboard.toggle(kind, key)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify({"expanded": expanded, "timeline": dashboard.render_timeline()})


@bp.route("/api/view/range", methods=["POST"])
def api_view_range():
    """Set the range width in months; null switches back to auto-fit."""
    months = _json_body().get("months")
    if months is not None and not _is_number(months):
        return jsonify({"error": "'months' must be a number or null."}), 400

    dashboard = _dashboard()
    months = dashboard.set_range(months)
    return jsonify({"months": months, "timeline": dashboard.render_timeline()})


@bp.route("/api/view/zoom", methods=["POST"])
def api_view_zoom():
    """Apply a scroll-wheel zoom gesture."""
    delta = _json_body().get("delta")
    if not _is_number(delta):
        return jsonify({"error": "'delta' must be a number."}), 400

    dashboard = _dashboard()
    months = dashboard.zoom(delta)
    return jsonify({"months": months, "timeline": dashboard.render_timeline()})


@bp.route("/api/view/label-width", methods=["POST"])
def api_view_label_width():
    width = _json_body().get("width")
    if not _is_number(width):
        return jsonify({"error": "'width' must be a number."}), 400

    return jsonify({"width": _dashboard().set_label_width(width)})
