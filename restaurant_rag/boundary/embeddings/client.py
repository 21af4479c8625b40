"""
Embedding provider HTTP client.

Calls an OpenAI-compatible ``POST /embeddings`` endpoint with httpx and
normalises the response into vectors in input order. Throttling (429),
server errors and transport failures are retried with jittered exponential
backoff; everything else fails immediately.

Dependencies: httpx, tenacity, restaurant_rag.configs, restaurant_rag.core.exceptions
System role: Embedding provider adapter
"""

import logging
from collections.abc import Sequence
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from restaurant_rag.configs.embedding import EmbeddingSettings
from restaurant_rag.core.exceptions import ConfigurationError, EmbeddingProviderError

logger = logging.getLogger(__name__)


class EmbeddingClient:
    """Async client for one embedding model."""

    def __init__(
        self,
        api_key: str | None,
        model: str,
        dimension: int,
        base_url: str = "https://api.openai.com/v1",
        timeout_seconds: float = 30.0,
        max_retries: int = 3,
        backoff_initial: float = 1.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Args:
            api_key: Bearer token; None defers the failure to the first call
            model: Provider model identifier
            dimension: Expected vector length
            base_url: Endpoint root exposing /embeddings
            timeout_seconds: Per-request deadline
            max_retries: Attempts per batch for retryable failures
            backoff_initial: First backoff delay in seconds
            http_client: Pre-built client (tests inject one with a MockTransport)
        """
        self.model = model
        self.dimension = dimension
        self._api_key = api_key
        self._max_retries = max_retries
        self._backoff_initial = backoff_initial
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
        )

    @classmethod
    def from_settings(cls, settings: EmbeddingSettings) -> "EmbeddingClient":
        return cls(
            api_key=settings.api_key.get_secret_value() if settings.api_key else None,
            model=settings.model,
            dimension=settings.dimension,
            base_url=settings.base_url,
            timeout_seconds=settings.timeout_seconds,
            max_retries=settings.max_retries,
        )

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        """
        Embed one provider-sized batch.

        Args:
            texts: Inputs for a single request

        Returns:
            list[list[float]]: One vector per input, in input order

        Raises:
            ConfigurationError: If no API key is configured
            EmbeddingProviderError: On non-2xx status, malformed body or transport failure
        """
        if not self._api_key:
            raise ConfigurationError("Embedding API key is not configured", setting="EMBEDDING_API_KEY")

        retrying = AsyncRetrying(
            retry=retry_if_exception(_is_retryable),
            stop=stop_after_attempt(self._max_retries),
            wait=wait_exponential_jitter(
                initial=self._backoff_initial, max=30, jitter=self._backoff_initial
            ),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:embed_batch - Retry {retry_state.attempt_number}/{self._max_retries}",
                extra={"batch_size": len(texts)},
            ),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                payload = await self._post(texts)
        return parse_embedding_response(payload, len(texts), self.dimension)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def _post(self, texts: Sequence[str]) -> Any:
        try:
            response = await self._http.post(
                "/embeddings",
                json={"model": self.model, "input": list(texts)},
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
        except httpx.HTTPError as e:
            raise EmbeddingProviderError(
                f"Embedding request failed: {type(e).__name__}",
                details={"error": str(e), "retryable": True},
            ) from e

        if not response.is_success:
            raise EmbeddingProviderError(
                f"Embedding provider returned HTTP {response.status_code}",
                status_code=response.status_code,
                details={
                    "detail": response.text[:500],
                    "retryable": response.status_code == 429 or response.status_code >= 500,
                },
            )
        try:
            return response.json()
        except ValueError as e:
            raise EmbeddingProviderError(
                "Embedding provider returned a non-JSON body",
                status_code=response.status_code,
            ) from e


def parse_embedding_response(
    payload: Any,
    expected_count: int,
    dimension: int,
) -> list[list[float]]:
    """
    Normalise a provider response into vectors in input order.

    Accepted shapes:
        {"data": [{"index": i, "embedding": [...]}, ...]}  (re-sorted by index)
        {"data": [{"embedding": [...]}, ...]}              (array order)
        {"embeddings": [[...], ...]}                        (array order)
        [[...], ...]                                        (array order)

    Raises:
        EmbeddingProviderError: If the shape, count or vector dimension is wrong
    """
    if isinstance(payload, dict) and isinstance(payload.get("data"), list):
        items = payload["data"]
        if items and all(isinstance(item, dict) and "index" in item for item in items):
            if sorted(item["index"] for item in items) != list(range(len(items))):
                raise EmbeddingProviderError(
                    "Embedding response indices are not a permutation of the inputs",
                    details={"indices": [item["index"] for item in items]},
                )
            items = sorted(items, key=lambda item: item["index"])
        try:
            vectors = [item["embedding"] for item in items]
        except (KeyError, TypeError) as e:
            raise EmbeddingProviderError("Embedding response item has no embedding") from e
    elif isinstance(payload, dict) and isinstance(payload.get("embeddings"), list):
        vectors = payload["embeddings"]
    elif isinstance(payload, list):
        vectors = payload
    else:
        raise EmbeddingProviderError(
            "Unrecognised embedding response shape",
            details={"type": type(payload).__name__},
        )

    if len(vectors) != expected_count:
        raise EmbeddingProviderError(
            f"Expected {expected_count} embeddings, got {len(vectors)}",
        )
    for position, vector in enumerate(vectors):
        if not isinstance(vector, list) or len(vector) != dimension:
            raise EmbeddingProviderError(
                f"Embedding {position} does not have dimension {dimension}",
                details={"position": position},
            )
    return [[float(value) for value in vector] for vector in vectors]


def _is_retryable(error: BaseException) -> bool:
    return isinstance(error, EmbeddingProviderError) and bool(error.details.get("retryable"))
