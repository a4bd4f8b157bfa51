"""Web exporter: serves published GNSS snapshots as JSON and over WebSocket."""

from nmeastat_server.main import create_app, serve_in_background

__all__ = ["create_app", "serve_in_background"]
