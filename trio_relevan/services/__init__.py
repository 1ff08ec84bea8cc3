"""Services package for the TrioRelevan front-end.

This package contains the pieces the routes are built on:
- text_blocks: free-text answer formatting into paragraph/list markup
- SearchClient: pass-through client for the external search backend
- MockSearchBackend: canned results following the same response contract
"""

from .mock_search import MockSearchBackend
from .search_client import SearchBackendError, SearchClient, normalize_search_response
from .text_blocks import format_text_with_lists, parse_blocks, render_blocks

__all__ = [
    "MockSearchBackend",
    "SearchBackendError",
    "SearchClient",
    "format_text_with_lists",
    "normalize_search_response",
    "parse_blocks",
    "render_blocks",
]
