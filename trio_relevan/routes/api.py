"""API routes for the TrioRelevan front-end."""

from __future__ import annotations

from typing import Any, Dict, Tuple

from flask import Blueprint, current_app, jsonify, request

from ..services.search_client import SearchBackendError
from ..services.text_blocks import parse_blocks, render_blocks

api_bp = Blueprint("api", __name__)

# Constants
DEFAULT_ERROR_MESSAGE = "Internal server error"
MISSING_QUERY_MESSAGE = "Query parameter is required"
INVALID_K_MESSAGE = "Parameter k must be a positive integer"


def _get_search_backend():
    """Get the search backend from Flask app extensions.

    Raises:
        RuntimeError: If no backend is configured
    """
    backend = current_app.extensions.get("search_backend")
    if backend is None:
        current_app.logger.error("Search backend not found in app extensions")
        raise RuntimeError("Search backend not configured")
    return backend


def _search_setting(key: str, default: Any) -> Any:
    return current_app.config["SETTINGS"].get("search", key, default=default)


def _create_error_response(message: str, status_code: int = 500) -> Tuple[Dict[str, str], int]:
    return {"error": message}, status_code


def _validate_search_query(query: str) -> str | None:
    """Return an error message for an unusable query, None if valid."""
    if not query:
        return MISSING_QUERY_MESSAGE

    max_length = int(_search_setting("max_query_length", 1000))
    if len(query) > max_length:
        return f"Query must be at most {max_length} characters"

    return None


def _parse_k(raw: str | None) -> int | None:
    """Parse the ``k`` parameter; None means the value is invalid."""
    if raw is None or raw.strip() == "":
        return int(_search_setting("default_k", 5))
    try:
        k = int(raw.strip())
    except ValueError:
        return None
    if k < 1:
        return None
    return min(k, int(_search_setting("max_k", 50)))


@api_bp.get("/search")
def search():
    """Forward a query to the configured search backend.

    Query Parameters:
        q (str): Search query string
        k (int, optional): Number of documents to return

    Returns:
        JSON search response or error message
    """
    query = request.args.get("q", "").strip()

    error_msg = _validate_search_query(query)
    if error_msg:
        return _create_error_response(error_msg, 400)

    k = _parse_k(request.args.get("k"))
    if k is None:
        return _create_error_response(INVALID_K_MESSAGE, 400)

    try:
        backend = _get_search_backend()
        return jsonify(backend.search(query, k))
    except SearchBackendError as e:
        current_app.logger.error(f"Search backend error: {e}")
        return _create_error_response(DEFAULT_ERROR_MESSAGE)
    except RuntimeError as e:
        current_app.logger.error(f"Configuration error in search: {e}")
        return _create_error_response(DEFAULT_ERROR_MESSAGE)


@api_bp.post("/format")
def format_text():
    """Format free text into paragraph and list blocks.

    Request Body:
        JSON object with:
        - 'text' field containing the raw text
        - 'escape' field (optional) to HTML-escape captured text

    Returns:
        JSON response with rendered html and the block structure
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    text = payload.get("text", "")
    if not isinstance(text, str):
        return _create_error_response("Field text must be a string", 400)

    escape = bool(payload.get("escape", False))
    blocks = parse_blocks(text)
    return jsonify({
        "html": render_blocks(blocks, escape=escape),
        "blocks": [block.to_dict() for block in blocks],
    })


@api_bp.errorhandler(500)
def api_internal_error(error):
    """Handle 500 errors for API endpoints."""
    current_app.logger.error(f"API internal server error: {error}")
    return jsonify({"error": DEFAULT_ERROR_MESSAGE}), 500
