"""Credential-injecting proxy in front of the Linear GraphQL API.

The browser-facing dashboard never sees the Linear API key: it posts raw
GraphQL to this app, which adds the key and relays Linear's answer unchanged.
Only origins on the allow-list get an answer.
"""

import logging

import requests
from flask import Blueprint, Flask, Response, current_app, request

from linear_dashboard.config import Config

logger = logging.getLogger(__name__)

UPSTREAM_TIMEOUT = 30  # seconds

bp = Blueprint("proxy", __name__)


def cors_headers(origin: str, allowed_origins: list[str]) -> dict[str, str]:
    """CORS headers for ``origin``; empty when it is not allowed."""
    if origin not in allowed_origins:
        return {}
    return {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Methods": "POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
    }


@bp.route("/", methods=["POST", "OPTIONS"], provide_automatic_options=False)
def forward():
    """Forward a GraphQL request to Linear with the server-held key."""
    config: Config = current_app.config["PROXY_CONFIG"]
    origin = request.headers.get("Origin", "")

    if request.method == "OPTIONS":
        return Response(status=200, headers=cors_headers(origin, config.allowed_origins))

    if origin not in config.allowed_origins:
        logger.warning("Rejected request from origin %r", origin)
        return Response(status=403)

    try:
        upstream = requests.post(
            config.linear_api_url,
            data=request.get_data(),
            headers={
                "Content-Type": "application/json",
                "Authorization": config.linear_api_key,
            },
            timeout=UPSTREAM_TIMEOUT,
        )
    except requests.RequestException as e:
        logger.error("Upstream request to %s failed: %s", config.linear_api_url, e)
        return Response(
            "Bad Gateway",
            status=502,
            headers=cors_headers(origin, config.allowed_origins),
        )

    headers = {"Content-Type": "application/json"}
    headers.update(cors_headers(origin, config.allowed_origins))
    return Response(upstream.content, status=upstream.status_code, headers=headers)


def create_proxy_app(config: Config) -> Flask:
    """Create the proxy Flask application."""
    app = Flask(__name__)
    app.config["PROXY_CONFIG"] = config
    app.register_blueprint(bp)
    return app
