"""Status dashboard for Linear issues, projects and initiatives."""

__version__ = "0.1.0"
