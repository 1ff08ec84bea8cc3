"""Tests for the pass-through search client and payload normalisation."""

from __future__ import annotations

from typing import Any, Dict, List

import pytest
import requests

from trio_relevan.services.search_client import (
    SearchBackendError,
    SearchClient,
    normalize_search_response,
)

BACKEND_PAYLOAD: Dict[str, Any] = {
    "query": {
        "original": "flu vaccine",
        "expanded_terms": ["influenza", "immunization"],
        "final_search_query": "flu vaccine influenza immunization",
    },
    "search_results": {
        "total_found": 120,
        "returned_count": 2,
        "k_requested": 2,
        "documents": [
            {
                "rank": 1,
                "id": "doc-1",
                "score": 12.3456,
                "title": "<em>Flu</em> vaccine efficacy",
                "url": "https://example.org/1",
                "snippet": "Efficacy varies by season.",
                "timestamp": "2024-01-01",
                "highlights": {"main_text": "", "title": "<em>Flu</em> vaccine"},
            },
            {
                "rank": 2,
                "id": "doc-2",
                "score": "8.5",
                "title": "Immunization schedules",
                "url": "https://example.org/2",
                "snippet": "1. Infants\n2. Adults",
                "highlights": {"main_text": "<em>immunization</em>", "title": ""},
            },
        ],
    },
    "rag_answer": {"answer": "Vaccines help.\n- Annual shot", "confidence": "high"},
}


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = "", bad_json: bool = False) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self._bad_json = bad_json

    def json(self) -> Any:
        if self._bad_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response


# ── SearchClient ────────────────────────────────────────────────────


class TestSearchClient:
    def test_forwards_query_and_k(self) -> None:
        session = FakeSession(FakeResponse(payload=BACKEND_PAYLOAD))
        client = SearchClient("http://backend:8000/", timeout=3, session=session)

        result = client.search("flu vaccine", 2)

        assert session.calls == [{
            "url": "http://backend:8000/search",
            "params": {"q": "flu vaccine", "k": 2},
            "headers": {"Accept": "application/json"},
            "timeout": 3,
        }]
        assert result["query"]["expanded_terms"] == ["influenza", "immunization"]
        assert result["search_results"]["total_found"] == 120
        assert [d["id"] for d in result["search_results"]["documents"]] == ["doc-1", "doc-2"]

    def test_network_error_raises_backend_error(self) -> None:
        session = FakeSession(error=requests.exceptions.ConnectionError("refused"))
        client = SearchClient(session=session)

        with pytest.raises(SearchBackendError, match="unreachable"):
            client.search("q", 5)

    def test_timeout_raises_backend_error(self) -> None:
        session = FakeSession(error=requests.exceptions.Timeout("slow"))
        with pytest.raises(SearchBackendError):
            SearchClient(session=session).search("q", 5)

    def test_http_error_status_raises(self) -> None:
        session = FakeSession(FakeResponse(status_code=502, text="bad gateway"))

        with pytest.raises(SearchBackendError) as excinfo:
            SearchClient(session=session).search("q", 5)
        assert excinfo.value.status_code == 502

    def test_malformed_json_raises(self) -> None:
        session = FakeSession(FakeResponse(bad_json=True, text="<html>"))
        with pytest.raises(SearchBackendError, match="malformed JSON"):
            SearchClient(session=session).search("q", 5)

    def test_non_object_json_raises(self) -> None:
        session = FakeSession(FakeResponse(payload=["not", "an", "object"]))
        with pytest.raises(SearchBackendError, match="unexpected payload"):
            SearchClient(session=session).search("q", 5)


# ── normalize_search_response ───────────────────────────────────────


class TestNormalizeSearchResponse:
    def test_full_payload_is_preserved(self) -> None:
        result = normalize_search_response(BACKEND_PAYLOAD, query="flu vaccine", k=2)
        first, second = result["search_results"]["documents"]
        assert first["score"] == pytest.approx(12.3456)
        assert first["timestamp"] == "2024-01-01"
        assert second["score"] == pytest.approx(8.5)
        assert second["timestamp"] is None
        assert result["rag_answer"] == {"answer": "Vaccines help.\n- Annual shot", "confidence": "high"}

    def test_empty_payload_gets_defaults(self) -> None:
        result = normalize_search_response({}, query="cough", k=7)
        assert result == {
            "query": {"original": "cough", "expanded_terms": [], "final_search_query": "cough"},
            "search_results": {"total_found": 0, "returned_count": 0, "k_requested": 7, "documents": []},
            "rag_answer": {"answer": "", "confidence": "unknown"},
        }

    def test_documents_without_id_or_url_are_dropped(self) -> None:
        payload = {
            "search_results": {
                "documents": [
                    {"id": "a", "url": "https://example.org/a", "score": "n/a"},
                    {"id": "", "url": "https://example.org/b"},
                    {"id": "c"},
                    "garbage",
                ]
            }
        }
        documents = normalize_search_response(payload)["search_results"]["documents"]
        assert len(documents) == 1
        assert documents[0]["score"] == 0.0
        assert documents[0]["title"] == "https://example.org/a"
        assert documents[0]["rank"] == 1
        assert documents[0]["highlights"] == {"main_text": "", "title": ""}
