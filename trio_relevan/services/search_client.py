"""Pass-through client for the external search backend."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://127.0.0.1:8000"
DEFAULT_TIMEOUT = 10.0


class SearchBackendError(RuntimeError):
    """The search backend could not produce a usable response."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _as_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ("" if value is None else str(value))


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _normalize_document(item: Dict[str, Any], position: int) -> Optional[Dict[str, Any]]:
    doc_id = _as_str(item.get("id"))
    url = _as_str(item.get("url"))
    if not doc_id or not url:
        return None

    highlights = _as_dict(item.get("highlights"))
    timestamp = item.get("timestamp")
    return {
        "rank": _as_int(item.get("rank"), position),
        "id": doc_id,
        "score": _as_float(item.get("score")),
        "title": _as_str(item.get("title")) or url,
        "url": url,
        "snippet": _as_str(item.get("snippet")),
        "timestamp": _as_str(timestamp) if timestamp else None,
        "highlights": {
            "main_text": _as_str(highlights.get("main_text")),
            "title": _as_str(highlights.get("title")),
        },
    }


def normalize_search_response(payload: Any, query: str = "", k: int = 0) -> Dict[str, Any]:
    """Coerce a backend payload into the response shape the front-end serves.

    Missing sections get typed defaults; documents without an id or url are
    dropped.
    """
    data = _as_dict(payload)
    query_info = _as_dict(data.get("query"))
    results = _as_dict(data.get("search_results"))
    answer = _as_dict(data.get("rag_answer"))

    raw_documents = results.get("documents")
    documents: List[Dict[str, Any]] = []
    for position, item in enumerate(raw_documents if isinstance(raw_documents, list) else [], start=1):
        if not isinstance(item, dict):
            continue
        document = _normalize_document(item, position)
        if document is not None:
            documents.append(document)

    expanded = query_info.get("expanded_terms")
    return {
        "query": {
            "original": _as_str(query_info.get("original")) or query,
            "expanded_terms": [_as_str(term) for term in expanded] if isinstance(expanded, list) else [],
            "final_search_query": _as_str(query_info.get("final_search_query")) or query,
        },
        "search_results": {
            "total_found": _as_int(results.get("total_found"), len(documents)),
            "returned_count": _as_int(results.get("returned_count"), len(documents)),
            "k_requested": _as_int(results.get("k_requested"), k),
            "documents": documents,
        },
        "rag_answer": {
            "answer": _as_str(answer.get("answer")),
            "confidence": _as_str(answer.get("confidence")) or "unknown",
        },
    }


class SearchClient:
    """Forward queries to ``{base_url}/search`` and normalise the reply."""

    name = "http"

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {"Accept": "application/json"}

    def search(self, query: str, k: int) -> Dict[str, Any]:
        endpoint = f"{self.base_url}/search"
        params = {"q": query, "k": k}
        logger.debug("Forwarding search to %s with %s", endpoint, params)

        try:
            response = self.session.get(endpoint, params=params, headers=self.headers, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            raise SearchBackendError(f"Search backend unreachable: {exc}") from exc

        if response.status_code >= 400:
            raise SearchBackendError(
                f"Search backend returned {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise SearchBackendError("Search backend returned malformed JSON", status_code=response.status_code) from exc

        if not isinstance(payload, dict):
            raise SearchBackendError("Search backend returned an unexpected payload", status_code=response.status_code)

        result = normalize_search_response(payload, query=query, k=k)
        logger.info(
            "Search for %r returned %d documents",
            query,
            result["search_results"]["returned_count"],
        )
        return result
