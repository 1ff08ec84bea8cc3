"""Mock search backend serving canned medical research documents.

Used for demos and local development when no retrieval backend is running.
Responses follow the same contract as ``SearchClient``.
"""

from __future__ import annotations

import html
import logging
import re
from typing import Dict, List, Optional, Tuple

from .search_client import normalize_search_response

logger = logging.getLogger(__name__)

DocumentDict = Dict[str, Optional[str]]

MOCK_DOCUMENTS: List[DocumentDict] = [
    {
        "id": "pmc-1001",
        "title": "Metformin as first-line therapy for type 2 diabetes",
        "url": "https://example.org/articles/metformin-type-2-diabetes",
        "snippet": "Metformin lowers hepatic glucose production and remains the recommended first-line therapy for type 2 diabetes in most adults.",
        "timestamp": "2023-04-12",
    },
    {
        "id": "pmc-1002",
        "title": "Lifestyle intervention and diabetes prevention",
        "url": "https://example.org/articles/lifestyle-diabetes-prevention",
        "snippet": "Structured diet and exercise programmes reduced progression from prediabetes to diabetes by more than half over three years.",
        "timestamp": "2022-11-03",
    },
    {
        "id": "pmc-1003",
        "title": "Hypertension management in older adults",
        "url": "https://example.org/articles/hypertension-older-adults",
        "snippet": "Blood pressure targets for older adults balance cardiovascular benefit against the risk of falls and kidney injury.",
        "timestamp": "2021-08-19",
    },
    {
        "id": "pmc-1004",
        "title": "Early warning signs of stroke",
        "url": "https://example.org/articles/stroke-warning-signs",
        "snippet": "Sudden facial drooping, arm weakness and speech difficulty are the most common early signs of stroke and need emergency care.",
        "timestamp": "2020-05-27",
    },
    {
        "id": "pmc-1005",
        "title": "Antibiotic resistance in community-acquired pneumonia",
        "url": "https://example.org/articles/antibiotic-resistance-pneumonia",
        "snippet": "Rising macrolide resistance is changing empirical antibiotic choices for community-acquired pneumonia.",
        "timestamp": "2023-01-30",
    },
    {
        "id": "pmc-1006",
        "title": "Sleep duration and cardiovascular risk",
        "url": "https://example.org/articles/sleep-cardiovascular-risk",
        "snippet": "Both short and long sleep duration were associated with higher cardiovascular risk and hypertension in a large cohort.",
        "timestamp": None,
    },
    {
        "id": "pmc-1007",
        "title": "Vitamin D supplementation and bone health",
        "url": "https://example.org/articles/vitamin-d-bone-health",
        "snippet": "Vitamin D supplementation improved bone mineral density only in participants with baseline deficiency.",
        "timestamp": "2019-09-14",
    },
    {
        "id": "pmc-1008",
        "title": "Managing chronic migraine",
        "url": "https://example.org/articles/chronic-migraine",
        "snippet": "Preventive treatment, trigger tracking and limiting analgesic overuse are central to managing chronic migraine.",
        "timestamp": "2022-02-08",
    },
]

QUERY_EXPANSIONS: Dict[str, List[str]] = {
    "diabetes": ["glucose", "insulin"],
    "hypertension": ["blood pressure"],
    "stroke": ["cerebrovascular"],
    "pneumonia": ["lung infection"],
    "sleep": ["insomnia"],
    "migraine": ["headache"],
    "heart": ["cardiovascular"],
}

TERM_RE = re.compile(r"[a-z0-9]+")


def _terms(text: str) -> List[str]:
    return [term for term in TERM_RE.findall(text.lower()) if len(term) > 1]


def expand_query(query: str) -> Tuple[List[str], str]:
    """Return ``(expanded_terms, final_search_query)`` for ``query``."""
    expanded: List[str] = []
    for term in _terms(query):
        for extra in QUERY_EXPANSIONS.get(term, []):
            if extra not in expanded:
                expanded.append(extra)
    final_query = " ".join([query.strip(), *expanded]).strip()
    return expanded, final_query


def highlight(text: str, terms: List[str]) -> str:
    """Wrap every occurrence of ``terms`` in ``<em>`` tags."""
    if not terms:
        return ""
    pattern = re.compile(r"\b(" + "|".join(re.escape(t) for t in terms) + r")", re.IGNORECASE)
    if not pattern.search(text):
        return ""
    return pattern.sub(r"<em>\1</em>", text)


def _confidence(hit_count: int) -> str:
    if hit_count >= 3:
        return "high"
    if hit_count >= 1:
        return "medium"
    return "low"


def _build_answer(query: str, documents: List[Dict[str, object]]) -> str:
    query = html.escape(query)
    if not documents:
        return (
            f"No documents in the collection matched \"{query}\".\n"
            "\n"
            "Try one of these:\n"
            "- Use broader medical terms\n"
            "- Check the spelling of drug or condition names"
        )

    lines = [
        f"Based on {len(documents)} matching documents, here is a summary for \"{query}\".",
        "",
        "Key findings:",
    ]
    for position, document in enumerate(documents[:3], start=1):
        lines.append(f"{position}. {document['snippet']}")
    lines.extend([
        "",
        "Sources consulted:",
    ])
    lines.extend(f"- {document['title']}" for document in documents[:3])
    lines.extend([
        "",
        "This answer is generated from mock data and is not medical advice.",
    ])
    return "\n".join(lines)


class MockSearchBackend:
    """Answer queries from ``MOCK_DOCUMENTS`` by simple term matching."""

    name = "mock"

    def __init__(self, documents: List[DocumentDict] | None = None) -> None:
        self.documents = documents if documents is not None else MOCK_DOCUMENTS

    def search(self, query: str, k: int) -> Dict[str, object]:
        expanded, final_query = expand_query(query)
        terms = _terms(final_query)

        scored: List[Tuple[float, int, DocumentDict]] = []
        for index, document in enumerate(self.documents):
            haystack = f"{document['title']} {document['snippet']}".lower()
            matched = [term for term in terms if term in haystack]
            if not matched:
                continue
            title_terms = [term for term in matched if term in document["title"].lower()]
            score = len(matched) + 0.5 * len(title_terms)
            scored.append((score, index, document))

        scored.sort(key=lambda entry: (-entry[0], entry[1]))
        top = scored[:k]

        documents = [
            {
                "rank": rank,
                "id": document["id"],
                "score": score,
                "title": document["title"],
                "url": document["url"],
                "snippet": document["snippet"],
                "timestamp": document.get("timestamp"),
                "highlights": {
                    "title": highlight(document["title"], terms),
                    "main_text": highlight(document["snippet"], terms),
                },
            }
            for rank, (score, _, document) in enumerate(top, start=1)
        ]
        logger.debug("Mock search for %r matched %d documents", query, len(scored))

        payload = {
            "query": {
                "original": query,
                "expanded_terms": expanded,
                "final_search_query": final_query,
            },
            "search_results": {
                "total_found": len(scored),
                "returned_count": len(documents),
                "k_requested": k,
                "documents": documents,
            },
            "rag_answer": {
                "answer": _build_answer(query, documents),
                "confidence": _confidence(len(scored)),
            },
        }
        return normalize_search_response(payload, query=query, k=k)
