"""Page routes for the TrioRelevan front-end."""

from __future__ import annotations

import datetime
from typing import Any, Dict, Optional, Tuple, Union

from flask import Blueprint, current_app, jsonify, render_template, request

from ..services.search_client import SearchBackendError

pages_bp = Blueprint("pages", __name__)


def _page_context(query: str) -> Dict[str, Any]:
    settings = current_app.config["SETTINGS"]
    return {
        "app_title": settings.get("app", "title", default="TrioRelevan"),
        "app_tagline": settings.get("app", "tagline", default=""),
        "app_footer": settings.get("app", "footer", default=""),
        "query": query,
    }


def _run_page_search(query: str) -> Optional[Dict[str, Any]]:
    """Search for the page view; failures are logged and yield None."""
    settings = current_app.config["SETTINGS"]
    max_length = int(settings.get("search", "max_query_length", default=1000))
    if len(query) > max_length:
        current_app.logger.warning("Rejected page query longer than %d characters", max_length)
        return None

    k = int(settings.get("search", "page_k", default=10))
    try:
        backend = current_app.extensions["search_backend"]
        return backend.search(query, k)
    except (SearchBackendError, KeyError) as e:
        current_app.logger.error(f"Search failed: {e}")
        return None


def _render_page_safely(template_name: str, **context: Any) -> Union[str, Tuple[str, int]]:
    """Safely render a template with error handling."""
    try:
        return render_template(template_name, **context)
    except Exception as e:
        current_app.logger.error(f"Error rendering {template_name}: {e}")
        return "Something went wrong, please try again.", 500


@pages_bp.route("/")
def index() -> Union[str, Tuple[str, int]]:
    """Render the search page, with results when ``q`` is given."""
    query = request.args.get("q", "").strip()
    context = _page_context(query)
    context["has_searched"] = bool(query)
    context["results"] = _run_page_search(query) if query else None
    return _render_page_safely("index.html", **context)


@pages_bp.route("/health")
def health_check():
    backend = current_app.extensions.get("search_backend")
    return jsonify({
        "status": "healthy",
        "backend": getattr(backend, "name", None),
        "timestamp": datetime.datetime.now().isoformat(),
    })


@pages_bp.app_errorhandler(404)
def page_not_found(error):
    """Handle 404 errors; API paths get JSON."""
    if request.path.startswith("/api/"):
        return jsonify({"error": "API endpoint not found"}), 404
    return "Page not found", 404


@pages_bp.app_errorhandler(405)
def method_not_allowed(error):
    """Handle 405 errors; API paths get JSON."""
    if request.path.startswith("/api/"):
        return jsonify({"error": "HTTP method not allowed"}), 405
    return "Method not allowed", 405
