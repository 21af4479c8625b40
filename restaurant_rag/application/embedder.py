"""
Embedding batcher.

Turns any number of passages into vectors through a provider that accepts
bounded batches. Batches run one after another with a pacing delay and
their results are concatenated in input order. Any failed batch fails the
whole call; no partial result is returned.

Dependencies: restaurant_rag.boundary.embeddings
System role: Embedding stage of ingestion and query flows
"""

import asyncio
import logging
from collections.abc import Sequence
from typing import Protocol

from restaurant_rag.core.exceptions import EmbeddingProviderError, ValidationError

logger = logging.getLogger(__name__)


class EmbeddingProvider(Protocol):
    """Anything that embeds one batch, preserving input order."""

    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        ...


class EmbeddingBatcher:
    """Batches, paces and reassembles embedding calls."""

    def __init__(
        self,
        provider: EmbeddingProvider,
        max_batch_size: int = 100,
        batch_delay_seconds: float = 0.2,
        call_timeout_seconds: float | None = None,
    ) -> None:
        """
        Args:
            provider: Batch embedding provider
            max_batch_size: Largest number of inputs per provider call
            batch_delay_seconds: Sleep between successive calls
            call_timeout_seconds: Deadline for each provider call (retries included)
        """
        if max_batch_size <= 0:
            raise ValueError("max_batch_size must be positive")
        self.provider = provider
        self.max_batch_size = max_batch_size
        self.batch_delay_seconds = batch_delay_seconds
        self.call_timeout_seconds = call_timeout_seconds

    @property
    def configured(self) -> bool:
        """False when the provider reports missing credentials."""
        return getattr(self.provider, "configured", True)

    async def embed(self, texts: Sequence[str]) -> list[list[float]]:
        """
        Embed texts in order.

        Args:
            texts: Passages to embed

        Returns:
            list[list[float]]: output[i] is the vector of texts[i]

        Raises:
            EmbeddingProviderError: If any batch fails
            ConfigurationError: If the provider is not configured
        """
        if not texts:
            return []

        vectors: list[list[float]] = []
        batches = [
            texts[start:start + self.max_batch_size]
            for start in range(0, len(texts), self.max_batch_size)
        ]
        for number, batch in enumerate(batches, start=1):
            if number > 1 and self.batch_delay_seconds > 0:
                await asyncio.sleep(self.batch_delay_seconds)
            batch_vectors = await self._call(batch)
            if len(batch_vectors) != len(batch):
                raise EmbeddingProviderError(
                    f"Provider returned {len(batch_vectors)} vectors for {len(batch)} inputs",
                    details={"batch": number},
                )
            vectors.extend(batch_vectors)

        logger.info(
            f"{__name__}:embed - Embedded {len(texts)} texts",
            extra={"batches": len(batches), "inputs": len(texts)},
        )
        return vectors

    async def embed_query(self, text: str) -> list[float]:
        """
        Embed a single query string.

        Raises:
            ValidationError: If the query is blank
            EmbeddingProviderError: If the provider call fails
        """
        if not text.strip():
            raise ValidationError("Query text must not be empty", field="query")
        return (await self.embed([text]))[0]

    async def _call(self, batch: Sequence[str]) -> list[list[float]]:
        if self.call_timeout_seconds is None:
            return await self.provider.embed_batch(batch)
        try:
            return await asyncio.wait_for(
                self.provider.embed_batch(batch), timeout=self.call_timeout_seconds
            )
        except asyncio.TimeoutError as e:
            raise EmbeddingProviderError(
                f"Embedding call exceeded {self.call_timeout_seconds}s",
                details={"batch_size": len(batch)},
            ) from e
