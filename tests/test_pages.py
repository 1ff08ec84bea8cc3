"""Tests for the server-rendered search page."""

from __future__ import annotations

from conftest import RecordingBackend

from trio_relevan import create_app
from trio_relevan.services.search_client import SearchBackendError, SearchClient, normalize_search_response


def test_initial_state(client) -> None:
    response = client.get("/")
    assert response.status_code == 200
    page = response.get_data(as_text=True)
    assert "Start Your Search" in page
    assert "TrioRelevan" in page
    assert "Your Medical Research Assistant" in page


def test_results_are_rendered(client) -> None:
    page = client.get("/?q=diabetes").get_data(as_text=True)

    assert "About 2 results" in page
    assert "<strong>Expanded terms:</strong> glucose, insulin" in page
    assert "medium confidence" in page
    assert '<ol class="list-decimal' in page
    assert '<ul class="list-disc' in page
    assert "<em>diabetes</em>" in page
    assert "https://example.org/articles/metformin-type-2-diabetes" in page
    assert "2.50 Score" in page
    assert "Rank #1" in page
    assert "2023-04-12" in page


def test_page_uses_page_k(app, client) -> None:
    backend = RecordingBackend(normalize_search_response({}, query="asthma", k=10))
    app.extensions["search_backend"] = backend
    client.get("/?q=asthma")
    assert backend.calls == [("asthma", 10)]


def test_backend_failure_shows_no_results(app, client) -> None:
    app.extensions["search_backend"] = RecordingBackend(error=SearchBackendError("down"))
    response = client.get("/?q=asthma")
    assert response.status_code == 200
    assert "No results found" in response.get_data(as_text=True)


def test_query_text_is_escaped_in_form(client) -> None:
    page = client.get("/", query_string={"q": '"><script>x</script>'}).get_data(as_text=True)
    assert "<script>x</script>" not in page


def test_http_backend_is_default(monkeypatch) -> None:
    monkeypatch.setenv("SEARCH_API_BASE_URL", "http://search.internal:9000/")
    app = create_app()
    backend = app.extensions["search_backend"]
    assert isinstance(backend, SearchClient)
    assert backend.base_url == "http://search.internal:9000"


def test_backend_selected_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("SEARCH_BACKEND", "mock")
    assert create_app().extensions["search_backend"].name == "mock"
