"""
Test suite for the dual retriever.

Tests concurrent branch execution, semantic failure propagation and the
lexical degradation paths (missing index, timeout).

System role: Verification of retrieval degradation rules
"""

import asyncio
import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from restaurant_rag.core.exceptions import (
    IndexUnavailableError,
    SearchTimeoutError,
    StoreError,
    ValidationError,
)
from restaurant_rag.core.retriever import Retriever
from restaurant_rag.models.chunk import ChunkMetadata, ChunkRecord, RetrievedChunk
from restaurant_rag.models.document import DocumentType


def hit(content: str, rank: int = 1) -> RetrievedChunk:
    return RetrievedChunk(
        chunk=ChunkRecord(
            id=uuid.uuid4(),
            tenant_id="fika",
            document_id=uuid.uuid4(),
            content=content,
            position=0,
            metadata=ChunkMetadata(type="sop", title="Fryer Cleaning"),
            created_at=datetime.now(timezone.utc),
        ),
        rank=rank,
        score=0.5,
    )


async def _never_finishes(*args, **kwargs):
    await asyncio.sleep(10)
    return []


@pytest.fixture
def mock_store() -> AsyncMock:
    store = AsyncMock()
    store.semantic_search = AsyncMock(return_value=[hit("semantic")])
    store.lexical_search = AsyncMock(return_value=[hit("lexical")])
    return store


class TestRetrieverRetrieve:
    """Test suite for Retriever.retrieve()."""

    @pytest.mark.asyncio
    async def test_returns_both_branches(self, mock_store: AsyncMock) -> None:
        # Arrange
        retriever = Retriever(mock_store)

        # Act
        semantic, lexical = await retriever.retrieve("fika", [0.1, 0.2], "fryer", 20)

        # Assert
        assert [h.chunk.content for h in semantic] == ["semantic"]
        assert [h.chunk.content for h in lexical] == ["lexical"]

    @pytest.mark.asyncio
    async def test_passes_limit_candidates_and_type(self, mock_store: AsyncMock) -> None:
        # Arrange
        retriever = Retriever(mock_store, candidate_multiplier=10)

        # Act
        await retriever.retrieve("fika", [0.1], "fryer", 20, DocumentType.SOP)

        # Assert
        mock_store.semantic_search.assert_awaited_once_with(
            "fika", [0.1], limit=20, candidates=200, document_type=DocumentType.SOP
        )
        mock_store.lexical_search.assert_awaited_once_with(
            "fika", "fryer", limit=20, document_type=DocumentType.SOP
        )

    @pytest.mark.asyncio
    async def test_missing_lexical_index_degrades_to_semantic_only(
        self, mock_store: AsyncMock
    ) -> None:
        # Arrange
        mock_store.lexical_search.side_effect = IndexUnavailableError(
            "no index", index="chunks_content_fts"
        )
        retriever = Retriever(mock_store)

        # Act
        semantic, lexical = await retriever.retrieve("fika", [0.1], "fryer", 20)

        # Assert
        assert len(semantic) == 1
        assert lexical == []

    @pytest.mark.asyncio
    async def test_lexical_timeout_degrades_to_semantic_only(
        self, mock_store: AsyncMock
    ) -> None:
        # Arrange
        mock_store.lexical_search = _never_finishes
        retriever = Retriever(mock_store, lexical_timeout_seconds=0.01)

        # Act
        semantic, lexical = await retriever.retrieve("fika", [0.1], "fryer", 20)

        # Assert
        assert len(semantic) == 1
        assert lexical == []

    @pytest.mark.asyncio
    async def test_semantic_timeout_is_fatal(self, mock_store: AsyncMock) -> None:
        # Arrange
        mock_store.semantic_search = _never_finishes
        retriever = Retriever(mock_store, semantic_timeout_seconds=0.01)

        # Act & Assert
        with pytest.raises(SearchTimeoutError):
            await retriever.retrieve("fika", [0.1], "fryer", 20)

    @pytest.mark.asyncio
    async def test_semantic_index_missing_is_fatal(self, mock_store: AsyncMock) -> None:
        mock_store.semantic_search.side_effect = IndexUnavailableError(
            "no vector index", index="chunks_embedding_hnsw"
        )

        with pytest.raises(IndexUnavailableError):
            await Retriever(mock_store).retrieve("fika", [0.1], "fryer", 20)

    @pytest.mark.asyncio
    async def test_other_lexical_store_error_propagates(self, mock_store: AsyncMock) -> None:
        mock_store.lexical_search.side_effect = StoreError("connection lost")

        with pytest.raises(StoreError):
            await Retriever(mock_store).retrieve("fika", [0.1], "fryer", 20)

    @pytest.mark.asyncio
    async def test_semantic_failure_cancels_lexical_branch(
        self, mock_store: AsyncMock
    ) -> None:
        # Arrange
        outcome: dict[str, bool] = {"finished": False, "cancelled": False}

        async def slow_lexical(*args, **kwargs):
            try:
                await asyncio.sleep(0.2)
            except asyncio.CancelledError:
                outcome["cancelled"] = True
                raise
            outcome["finished"] = True
            raise StoreError("connection lost")

        mock_store.semantic_search.side_effect = StoreError("vector query failed")
        mock_store.lexical_search = slow_lexical

        # Act
        with pytest.raises(StoreError, match="vector query failed"):
            await Retriever(mock_store).retrieve("fika", [0.1], "fryer", 20)
        pending = [
            task
            for task in asyncio.all_tasks()
            if task is not asyncio.current_task() and not task.done()
        ]
        await asyncio.sleep(0.3)

        # Assert
        assert pending == []
        assert outcome == {"finished": False, "cancelled": True}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("fanout", [0, -1])
    async def test_non_positive_fanout_raises(self, mock_store: AsyncMock, fanout: int) -> None:
        with pytest.raises(ValidationError):
            await Retriever(mock_store).retrieve("fika", [0.1], "fryer", fanout)

        mock_store.semantic_search.assert_not_awaited()
