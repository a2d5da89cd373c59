"""Flask web interface for the Linear dashboard."""
