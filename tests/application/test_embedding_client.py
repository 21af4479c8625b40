"""
Test suite for the embedding provider HTTP client.

Uses httpx.MockTransport to script provider responses: index re-ordering,
retry on 429/5xx/transport errors, fail-fast on other statuses and
response-shape normalisation.

System role: Verification of the embedding provider adapter
"""

import json

import httpx
import pytest

from restaurant_rag.boundary.embeddings.client import (
    EmbeddingClient,
    parse_embedding_response,
)
from restaurant_rag.core.exceptions import ConfigurationError, EmbeddingProviderError


def make_client(handler, api_key: str | None = "test-key", max_retries: int = 3) -> EmbeddingClient:
    http_client = httpx.AsyncClient(
        base_url="https://embeddings.test/v1",
        transport=httpx.MockTransport(handler),
    )
    return EmbeddingClient(
        api_key=api_key,
        model="text-embedding-3-small",
        dimension=3,
        max_retries=max_retries,
        backoff_initial=0,
        http_client=http_client,
    )


class TestEmbeddingClientRequests:
    """Test suite for EmbeddingClient.embed_batch()."""

    @pytest.mark.asyncio
    async def test_sends_model_inputs_and_bearer_token(self) -> None:
        # Arrange
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"data": [{"index": 0, "embedding": [1, 0, 0]}]})

        client = make_client(handler)

        # Act
        vectors = await client.embed_batch(["fryer"])

        # Assert
        assert vectors == [[1.0, 0.0, 0.0]]
        assert seen[0].url.path == "/v1/embeddings"
        assert seen[0].headers["Authorization"] == "Bearer test-key"
        assert json.loads(seen[0].content) == {
            "model": "text-embedding-3-small",
            "input": ["fryer"],
        }

    @pytest.mark.asyncio
    async def test_reorders_by_index(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={
                    "data": [
                        {"index": 1, "embedding": [0, 1, 0]},
                        {"index": 0, "embedding": [1, 0, 0]},
                    ]
                },
            )

        vectors = await make_client(handler).embed_batch(["first", "second"])

        assert vectors == [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]]

    @pytest.mark.asyncio
    async def test_retries_after_rate_limit(self) -> None:
        # Arrange
        responses = [
            httpx.Response(429, json={"error": "slow down"}),
            httpx.Response(200, json={"embeddings": [[1, 2, 3]]}),
        ]
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return responses[len(calls) - 1]

        # Act
        vectors = await make_client(handler).embed_batch(["menu"])

        # Assert
        assert len(calls) == 2
        assert vectors == [[1.0, 2.0, 3.0]]

    @pytest.mark.asyncio
    async def test_server_errors_exhaust_retries(self) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(503, text="unavailable")

        with pytest.raises(EmbeddingProviderError) as exc_info:
            await make_client(handler, max_retries=3).embed_batch(["menu"])

        assert len(calls) == 3
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_client_error_is_not_retried(self) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(400, json={"error": "bad input"})

        with pytest.raises(EmbeddingProviderError) as exc_info:
            await make_client(handler).embed_batch(["menu"])

        assert len(calls) == 1
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_transport_error_is_retried_then_raised(self) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(EmbeddingProviderError) as exc_info:
            await make_client(handler, max_retries=2).embed_batch(["menu"])

        assert len(calls) == 2
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_missing_api_key_fails_at_call_time(self) -> None:
        # Arrange
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json=[[1, 2, 3]])

        client = make_client(handler, api_key=None)

        # Act & Assert
        assert client.configured is False
        with pytest.raises(ConfigurationError):
            await client.embed_batch(["menu"])
        assert calls == []

    @pytest.mark.asyncio
    async def test_wrong_dimension_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[[1, 2]])

        with pytest.raises(EmbeddingProviderError):
            await make_client(handler).embed_batch(["menu"])


class TestParseEmbeddingResponse:
    """Test suite for parse_embedding_response()."""

    def test_data_without_index_keeps_array_order(self) -> None:
        payload = {"data": [{"embedding": [1, 1]}, {"embedding": [2, 2]}]}

        assert parse_embedding_response(payload, 2, 2) == [[1.0, 1.0], [2.0, 2.0]]

    def test_bare_list(self) -> None:
        assert parse_embedding_response([[0.5, 0.5]], 1, 2) == [[0.5, 0.5]]

    def test_count_mismatch_raises(self) -> None:
        with pytest.raises(EmbeddingProviderError):
            parse_embedding_response({"embeddings": [[1, 1]]}, 2, 2)

    def test_indices_must_cover_inputs(self) -> None:
        payload = {"data": [{"index": 0, "embedding": [1, 1]}, {"index": 5, "embedding": [2, 2]}]}

        with pytest.raises(EmbeddingProviderError):
            parse_embedding_response(payload, 2, 2)

    def test_unknown_shape_raises(self) -> None:
        with pytest.raises(EmbeddingProviderError):
            parse_embedding_response({"vectors": []}, 0, 2)
