"""HTTP surface: the FastAPI app, its routes and error rendering."""

from agri_vision.server._app import create_app
from agri_vision.server._routes import read_analyze_request, run_until_disconnected

__all__ = ["create_app", "read_analyze_request", "run_until_disconnected"]
