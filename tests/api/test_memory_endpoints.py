"""
Test suite for memory retrieval endpoints.

Covers status codes and response shapes for semantic search, keyword
search, context selection and summary management.

System role: Verification of memory HTTP API
"""

from unittest.mock import AsyncMock

import pytest

from memory_backend.api.deps import get_store
from memory_backend.core.exceptions import StoreUnavailableError
from memory_backend.core.record_store import RecordStore

BASE = "/api/v1/memory"


@pytest.fixture
def stocked(client, similar_vector):
    """Two embedded summaries (0.92, 0.55) and one pending."""
    ids = []
    for text, score in (("sleep trouble", 0.92), ("weekend plans", 0.55)):
        response = client.post(
            f"{BASE}/summaries",
            json={"summary_text": text, "turn_ids": [], "embedding": similar_vector(score)},
        )
        ids.append(response.json()["id"])
    response = client.post(f"{BASE}/summaries", json={"summary_text": "pending anxiety note"})
    ids.append(response.json()["id"])
    return ids


def _broken_store(app, error: Exception) -> None:
    store = AsyncMock(spec=RecordStore)
    store.list_summaries_with_embedding.side_effect = error
    app.dependency_overrides[get_store] = lambda: store


class TestSemanticSearchEndpoint:
    """Test suite for POST /memory/search."""

    def test_ranked_results(self, client, stocked, query) -> None:
        # Act
        response = client.post(f"{BASE}/search", json={"message": "can't sleep", "query_embedding": query})

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body["query"] == "can't sleep"
        assert [r["summary_text"] for r in body["results"]] == ["sleep trouble"]
        assert body["results"][0]["similarity_score"] == 0.92
        assert body["results"][0]["relevance_level"] == "very_high"
        assert body["search_params"] == {"limit": 5, "similarity_threshold": 0.7, "include_turns": False}

    def test_empty_result_is_200(self, client, query) -> None:
        # Act
        response = client.post(f"{BASE}/search", json={"query_embedding": query})

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body["results"] == []
        assert body["total_matches"] == 0
        assert body["suggestion"] is not None

    def test_wrong_dimension_is_400(self, client) -> None:
        # Act
        response = client.post(f"{BASE}/search", json={"query_embedding": [1.0, 0.0]})

        # Assert
        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["error_type"] == "InvalidQueryError"
        assert detail["details"]["expected"] == 4
        assert detail["details"]["actual"] == 2

    def test_missing_embedding_is_400(self, client) -> None:
        response = client.post(f"{BASE}/search", json={"message": "hi"})
        assert response.status_code == 400
        assert response.json()["detail"]["error_type"] == "InvalidQueryError"

    def test_store_unavailable_is_503(self, app, client, query) -> None:
        # Arrange
        _broken_store(app, StoreUnavailableError("down", operation="list_summaries_with_embedding"))

        # Act
        response = client.post(f"{BASE}/search", json={"query_embedding": query})

        # Assert
        assert response.status_code == 503
        assert response.headers["Retry-After"] == "1"
        assert response.json()["detail"]["details"]["retryable"] is True

    def test_unexpected_error_is_500(self, app, client, query) -> None:
        # Arrange
        _broken_store(app, RuntimeError("bug"))

        # Act
        response = client.post(f"{BASE}/search", json={"query_embedding": query})

        # Assert
        assert response.status_code == 500
        assert response.json()["detail"]["error_type"] == "RuntimeError"


class TestTextAndContextEndpoints:
    """Test suite for keyword search and context selection."""

    def test_keyword_search(self, client, stocked) -> None:
        # Act
        response = client.post(f"{BASE}/search/text", json={"search_query": "anxiety"})

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body["total_matches"] == 1
        assert "embedding" not in body["results"][0]

    def test_blank_keyword_is_400(self, client) -> None:
        response = client.post(f"{BASE}/search/text", json={"search_query": "  "})
        assert response.status_code == 400

    def test_context_prefers_semantic(self, client, stocked, query) -> None:
        # Act
        response = client.post(f"{BASE}/context", json={"message": "sleep", "query_embedding": query})

        # Assert
        assert response.status_code == 200
        assert response.json()["mode"] == "semantic"

    def test_context_falls_back_to_keyword(self, client, stocked) -> None:
        # Act
        response = client.post(f"{BASE}/context", json={"message": "sleep"})

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body["mode"] == "keyword"
        assert body["keyword"]["total_matches"] == 1


class TestSummaryEndpoints:
    """Test suite for summary management endpoints."""

    def test_stats(self, client, stocked) -> None:
        # Act
        response = client.get(f"{BASE}/stats")

        # Assert
        assert response.status_code == 200
        assert response.json() == {
            "total": 3,
            "with_embedding": 2,
            "without_embedding": 1,
            "coverage_ratio": 0.6667,
            "semantic_search_ready": True,
        }

    def test_pending_and_set_embedding(self, client, stocked, query) -> None:
        # Arrange
        pending_id = stocked[2]

        # Act
        pending = client.get(f"{BASE}/summaries/pending")
        updated = client.put(f"{BASE}/summaries/{pending_id}/embedding", json={"embedding": query})

        # Assert
        assert [s["id"] for s in pending.json()["summaries"]] == [pending_id]
        assert updated.status_code == 200
        assert updated.json()["has_embedding"] is True
        assert client.get(f"{BASE}/summaries/pending").json()["count"] == 0

    def test_set_embedding_errors(self, client, stocked, query) -> None:
        # Act
        wrong_length = client.put(f"{BASE}/summaries/{stocked[2]}/embedding", json={"embedding": [1.0]})
        unknown = client.put(f"{BASE}/summaries/999/embedding", json={"embedding": query})

        # Assert
        assert wrong_length.status_code == 400
        assert wrong_length.json()["detail"]["error_type"] == "DimensionMismatchError"
        assert unknown.status_code == 404

    def test_get_summary(self, client, stocked) -> None:
        # Act
        found = client.get(f"{BASE}/summaries/{stocked[0]}")
        missing = client.get(f"{BASE}/summaries/999")

        # Assert
        assert found.status_code == 200
        assert found.json()["summary_text"] == "sleep trouble"
        assert missing.status_code == 404

    def test_create_summary_validation(self, client) -> None:
        assert client.post(f"{BASE}/summaries", json={"summary_text": " "}).status_code == 400
        assert (
            client.post(
                f"{BASE}/summaries",
                json={"summary_text": "ok", "embedding": [1.0, 2.0]},
            ).status_code
            == 400
        )

    def test_summaries_by_turn(self, client) -> None:
        # Arrange
        client.post(f"{BASE}/summaries", json={"summary_text": "about t1", "turn_ids": ["t1"]})

        # Act
        response = client.get(f"{BASE}/summaries/by-turn/t1")

        # Assert
        assert response.status_code == 200
        assert [s["summary_text"] for s in response.json()] == ["about t1"]
