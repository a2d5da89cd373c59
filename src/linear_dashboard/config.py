"""Configuration management for the Linear dashboard."""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlparse

import tomli_w

from linear_dashboard.statuses import PROJECT_CATEGORIES

LINEAR_API_URL = "https://api.linear.app/graphql"
DEFAULT_REFRESH_INTERVAL = 10 * 60  # seconds
DEFAULT_ALLOWED_ORIGINS = ["http://localhost:8000"]


@dataclass
class Config:
    """Configuration for the Linear connection, dashboard and proxy."""

    team_id: str = ""
    assignee_email: str = ""
    linear_api_key: str = ""
    linear_api_url: str = LINEAR_API_URL
    proxy_url: str = ""
    dashboard_origin: str = "http://localhost:8000"
    refresh_interval: int = DEFAULT_REFRESH_INTERVAL
    allowed_origins: list[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS))
    project_statuses: dict[str, str] = field(default_factory=dict)

    def validate(self) -> list[str]:
        """Validate configuration values. Returns list of error messages."""
        errors: list[str] = []

        for label, url in (
            ("Linear API URL", self.linear_api_url),
            ("Proxy URL", self.proxy_url),
        ):
            if not url:
                continue
            parsed = urlparse(url)
            if parsed.scheme not in ("http", "https"):
                errors.append(f"{label} must start with http:// or https://")
            if not parsed.netloc:
                errors.append(f"{label} must include a domain")

        if not self.proxy_url and not self.linear_api_key:
            errors.append("Either a proxy URL or a Linear API key is required")

        if not self.team_id and not self.assignee_email:
            errors.append("A team ID or an assignee email is required")
        elif self.assignee_email and "@" not in self.assignee_email:
            errors.append("Assignee email must be a valid email address")

        if self.refresh_interval <= 0:
            errors.append("Refresh interval must be a positive number of seconds")

        for name, category in self.project_statuses.items():
            if category not in PROJECT_CATEGORIES:
                errors.append(
                    f"Unknown category {category!r} for project status {name!r}; "
                    f"expected one of {', '.join(PROJECT_CATEGORIES)}"
                )

        return errors


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    return Path.home() / ".linear-dashboard"


def get_config_path() -> Path:
    """Get the configuration file path."""
    return get_config_dir() / "config.toml"


def get_view_state_path() -> Path:
    """Get the path of the persisted timeline view state."""
    return get_config_dir() / "view.toml"


def config_exists() -> bool:
    """Check if configuration file exists."""
    return get_config_path().exists()


def load_config() -> Config:
    """Load configuration from TOML file.

    The ``LINEAR_API_KEY`` environment variable takes precedence over the
    key stored in the file.

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is invalid
    """
    config_path = get_config_path()

    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration not found at {config_path}. "
            "Run `linear-dashboard init` or create ~/.linear-dashboard/config.toml."
        )

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    config = config_from_dict(data)

    errors = config.validate()
    if errors:
        raise ValueError(f"Invalid configuration: {'; '.join(errors)}")

    return config


def config_from_dict(data: dict) -> Config:
    """Build a Config from parsed TOML sections."""
    linear_section = data.get("linear", {})
    dashboard_section = data.get("dashboard", {})
    proxy_section = data.get("proxy", {})
    statuses_section = data.get("statuses", {})

    try:
        refresh_interval = int(dashboard_section.get("refresh_interval", DEFAULT_REFRESH_INTERVAL))
    except (TypeError, ValueError):
        raise ValueError("Invalid configuration: refresh_interval must be an integer")

    return Config(
        team_id=linear_section.get("team_id", ""),
        assignee_email=linear_section.get("assignee_email", ""),
        linear_api_key=os.environ.get("LINEAR_API_KEY") or linear_section.get("api_key", ""),
        linear_api_url=linear_section.get("api_url", LINEAR_API_URL),
        proxy_url=dashboard_section.get("proxy_url", ""),
        dashboard_origin=dashboard_section.get("origin", "http://localhost:8000"),
        refresh_interval=refresh_interval,
        allowed_origins=list(proxy_section.get("allowed_origins", DEFAULT_ALLOWED_ORIGINS)),
        project_statuses={
            name: str(category).lower()
            for name, category in statuses_section.get("projects", {}).items()
        },
    )


def save_config(config: Config) -> None:
    """Save configuration to TOML file."""
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    config_path = get_config_path()

    linear_data: dict[str, str] = {"api_url": config.linear_api_url}
    if config.team_id:
        linear_data["team_id"] = config.team_id
    if config.assignee_email:
        linear_data["assignee_email"] = config.assignee_email
    if config.linear_api_key:
        linear_data["api_key"] = config.linear_api_key

    dashboard_data: dict = {
        "origin": config.dashboard_origin,
        "refresh_interval": config.refresh_interval,
    }
    if config.proxy_url:
        dashboard_data["proxy_url"] = config.proxy_url

    data: dict = {
        "linear": linear_data,
        "dashboard": dashboard_data,
        "proxy": {"allowed_origins": list(config.allowed_origins)},
    }

    if config.project_statuses:
        data["statuses"] = {"projects": dict(config.project_statuses)}

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
