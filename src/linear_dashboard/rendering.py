"""Jinja2 environment for the HTML fragments of the dashboard."""

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape
from markupsafe import Markup, escape


def escape_html(text: object) -> Markup:
    """Escape ``& < > " '`` for safe inclusion in HTML text and attributes.

    Registered as a template filter; the result is markup, so autoescaping
    leaves it alone.
    """
    return escape("" if text is None else text)


def _pct(value: float) -> str:
    return f"{value:.2f}"


_env = Environment(
    loader=PackageLoader("linear_dashboard.web", "templates"),
    autoescape=select_autoescape(["html"]),
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
)
_env.filters["pct"] = _pct
_env.filters["escape_html"] = escape_html


def render_fragment(template_name: str, **context) -> Markup:
    """Render a partial template to markup that can be embedded as-is."""
    return Markup(_env.get_template(template_name).render(**context))
