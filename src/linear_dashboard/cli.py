"""Command line entry point: serve the dashboard, run the proxy, write config."""

import argparse
import logging
import sys

from linear_dashboard.config import (
    DEFAULT_REFRESH_INTERVAL,
    Config,
    config_exists,
    get_config_path,
    save_config,
)
from linear_dashboard.exceptions import DashboardError
from linear_dashboard.fetcher import require_config

logger = logging.getLogger(__name__)


def _load_or_exit() -> Config:
    try:
        return require_config()
    except DashboardError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def cmd_serve(args: argparse.Namespace) -> int:
    from linear_dashboard.fetcher import Poller
    from linear_dashboard.web.app import EXTENSION_KEY, create_app

    app = create_app()
    config = app.config["DASHBOARD_CONFIG"]
    if config is None:
        logger.warning("No usable configuration; only /demo will show data")
    else:
        dashboard = app.extensions[EXTENSION_KEY]
        poller = Poller(dashboard.store, config.refresh_interval)
        poller.tick()
        poller.start()

    app.run(host=args.host, port=args.port, debug=args.debug, use_reloader=False)
    return 0


def cmd_proxy(args: argparse.Namespace) -> int:
    from linear_dashboard.proxy import create_proxy_app

    config = _load_or_exit()
    if not config.linear_api_key:
        print("Error: the proxy needs a Linear API key (config or LINEAR_API_KEY)", file=sys.stderr)
        return 1
    create_proxy_app(config).run(host=args.host, port=args.port, debug=args.debug)
    return 0


def cmd_init(args: argparse.Namespace) -> int:
    if config_exists() and not args.force:
        print(f"Configuration already exists at {get_config_path()} (use --force)", file=sys.stderr)
        return 1

    config = Config(
        team_id=args.team_id or "",
        assignee_email=args.assignee_email or "",
        linear_api_key=args.api_key or "",
        proxy_url=args.proxy_url or "",
        refresh_interval=args.refresh_interval,
    )
    if args.allowed_origin:
        config.allowed_origins = list(args.allowed_origin)

    errors = config.validate()
    if errors:
        for error in errors:
            print(f"Error: {error}", file=sys.stderr)
        return 1

    save_config(config)
    print(f"Wrote {get_config_path()}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="linear-dashboard", description=__doc__)
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the dashboard web app")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--debug", action="store_true")
    serve.set_defaults(func=cmd_serve)

    proxy = sub.add_parser("proxy", help="run the Linear API proxy")
    proxy.add_argument("--host", default="127.0.0.1")
    proxy.add_argument("--port", type=int, default=8787)
    proxy.add_argument("--debug", action="store_true")
    proxy.set_defaults(func=cmd_proxy)

    init = sub.add_parser("init", help="write ~/.linear-dashboard/config.toml")
    init.add_argument("--team-id")
    init.add_argument("--assignee-email")
    init.add_argument("--api-key")
    init.add_argument("--proxy-url")
    init.add_argument("--refresh-interval", type=int, default=DEFAULT_REFRESH_INTERVAL)
    init.add_argument("--allowed-origin", action="append")
    init.add_argument("--force", action="store_true")
    init.set_defaults(func=cmd_init)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
