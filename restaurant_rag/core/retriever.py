"""
Dual retriever.

Runs the semantic and lexical searches for one tenant concurrently, each
under its own deadline. The semantic branch is the primary signal: its
failure or timeout fails the retrieval. A lexical index that is missing or
a lexical timeout is logged and degrades to an empty list.

Dependencies: restaurant_rag.boundary.vdb, restaurant_rag.core.exceptions
System role: RAG retrieval business logic
"""

import asyncio
import logging
from collections.abc import Sequence

from restaurant_rag.boundary.vdb.chunk_store import ChunkStore
from restaurant_rag.core.exceptions import (
    IndexUnavailableError,
    SearchTimeoutError,
    ValidationError,
)
from restaurant_rag.models.chunk import RetrievedChunk
from restaurant_rag.models.document import DocumentType

logger = logging.getLogger(__name__)


class Retriever:
    """Tenant-scoped semantic + lexical retrieval."""

    def __init__(
        self,
        store: ChunkStore,
        candidate_multiplier: int = 10,
        semantic_timeout_seconds: float | None = 10.0,
        lexical_timeout_seconds: float | None = 5.0,
    ) -> None:
        """
        Args:
            store: Chunk store to query
            candidate_multiplier: Vector candidate pool = fanout x multiplier
            semantic_timeout_seconds: Deadline for the semantic branch
            lexical_timeout_seconds: Deadline for the lexical branch
        """
        self.store = store
        self.candidate_multiplier = candidate_multiplier
        self.semantic_timeout_seconds = semantic_timeout_seconds
        self.lexical_timeout_seconds = lexical_timeout_seconds

    async def retrieve(
        self,
        tenant_id: str,
        query_vector: Sequence[float],
        query_text: str,
        fanout_limit: int,
        document_type: DocumentType | None = None,
    ) -> tuple[list[RetrievedChunk], list[RetrievedChunk]]:
        """
        Run both searches concurrently.

        Args:
            tenant_id: Tenant whose chunks are searched
            query_vector: Embedded query
            query_text: Raw query for keyword search
            fanout_limit: Max hits per branch
            document_type: Optional restriction to one document type

        Returns:
            (semantic_hits, lexical_hits), each ranked from 1

        Raises:
            ValidationError: If fanout_limit is not positive
            StoreError: If the semantic branch fails (IndexUnavailableError,
                SearchTimeoutError included) or the lexical branch fails for
                a reason other than a missing index or timeout
        """
        if fanout_limit <= 0:
            raise ValidationError("fanout_limit must be positive", field="fanout_limit")

        tasks = (
            asyncio.create_task(
                self._semantic(tenant_id, query_vector, fanout_limit, document_type)
            ),
            asyncio.create_task(
                self._lexical(tenant_id, query_text, fanout_limit, document_type)
            ),
        )
        try:
            semantic_hits, lexical_hits = await asyncio.gather(*tasks)
        except BaseException:
            # The surviving branch must not outlive the call
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        logger.info(
            f"{__name__}:retrieve - Retrieved candidates",
            extra={
                "tenant_id": tenant_id,
                "semantic_hits": len(semantic_hits),
                "lexical_hits": len(lexical_hits),
            },
        )
        return semantic_hits, lexical_hits

    async def _semantic(
        self,
        tenant_id: str,
        query_vector: Sequence[float],
        fanout_limit: int,
        document_type: DocumentType | None,
    ) -> list[RetrievedChunk]:
        search = self.store.semantic_search(
            tenant_id,
            query_vector,
            limit=fanout_limit,
            candidates=fanout_limit * self.candidate_multiplier,
            document_type=document_type,
        )
        try:
            return await asyncio.wait_for(search, timeout=self.semantic_timeout_seconds)
        except asyncio.TimeoutError as e:
            raise SearchTimeoutError(
                "Semantic search timed out",
                operation="semantic_search",
                details={"timeout_seconds": self.semantic_timeout_seconds},
            ) from e

    async def _lexical(
        self,
        tenant_id: str,
        query_text: str,
        fanout_limit: int,
        document_type: DocumentType | None,
    ) -> list[RetrievedChunk]:
        search = self.store.lexical_search(
            tenant_id,
            query_text,
            limit=fanout_limit,
            document_type=document_type,
        )
        try:
            return await asyncio.wait_for(search, timeout=self.lexical_timeout_seconds)
        except IndexUnavailableError as e:
            logger.warning(
                f"{__name__}:_lexical - Lexical index unavailable, continuing semantic-only",
                extra={"tenant_id": tenant_id, "index": e.index},
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"{__name__}:_lexical - Lexical search timed out, continuing semantic-only",
                extra={"tenant_id": tenant_id, "timeout_seconds": self.lexical_timeout_seconds},
            )
        return []
