"""
Test suite for SearchService.

End-to-end hybrid queries over the in-memory store plus limit, fan-out and
validation checks against a mocked retriever.

System role: Verification of query orchestration
"""

from unittest.mock import AsyncMock

import pytest

from restaurant_rag.application.services import DocumentService, SearchService
from restaurant_rag.core.exceptions import ValidationError
from restaurant_rag.models.chunk import HitSource

FRYER_SOP = (
    "# Fryer Cleaning\n\n"
    "Turn off the fryer, drain the oil into the caddy and scrub the basket "
    "with degreaser before refilling."
)


class TestSearchServiceEndToEnd:
    """Hybrid search through the real retriever and in-memory store."""

    @pytest.mark.asyncio
    async def test_finds_ingested_procedure(
        self, document_service: DocumentService, search_service: SearchService
    ) -> None:
        # Arrange
        result = await document_service.ingest("fika", FRYER_SOP, "Fryer Cleaning", "sop")
        await document_service.ingest("fika", "Latte PHP 120. Mocha PHP 140.", "Drinks", "menu")

        # Act
        hits = await search_service.search("fika", "how do I clean the fryer")

        # Assert
        assert hits
        assert hits[0].document_id == result.document_id
        assert hits[0].chunk.metadata.title == "Fryer Cleaning"
        assert hits[0].chunk.metadata.section == "Fryer Cleaning"
        assert hits[0].source == HitSource.BOTH

    @pytest.mark.asyncio
    async def test_typo_still_matches_lexically(
        self, document_service: DocumentService, search_service: SearchService
    ) -> None:
        await document_service.ingest("fika", FRYER_SOP, "Fryer Cleaning", "sop")

        hits = await search_service.search("fika", "fryr")

        assert hits
        assert any(hit.lexical_rank is not None for hit in hits)

    @pytest.mark.asyncio
    async def test_other_tenant_sees_nothing(
        self, document_service: DocumentService, search_service: SearchService
    ) -> None:
        await document_service.ingest("fika", FRYER_SOP, "Fryer Cleaning", "sop")

        assert await search_service.search("harveys_wings", "fryer cleaning") == []

    @pytest.mark.asyncio
    async def test_document_type_filter(
        self, document_service: DocumentService, search_service: SearchService
    ) -> None:
        # Arrange
        await document_service.ingest("fika", "Chicken sandwich PHP 180", "Lunch", "menu")
        await document_service.ingest("fika", "Cook chicken to 74C", "Chicken Safety", "sop")

        # Act
        hits = await search_service.search("fika", "chicken", document_type="menu")

        # Assert
        assert hits
        assert {hit.chunk.metadata.type for hit in hits} == {"menu"}

    @pytest.mark.asyncio
    async def test_limit_is_capped_at_max(
        self, document_service: DocumentService, search_service: SearchService
    ) -> None:
        for i in range(15):
            await document_service.ingest("fika", f"Coffee blend number {i}", f"Blend {i}")

        assert len(await search_service.search("fika", "coffee blend", limit=50)) == 10
        assert len(await search_service.search("fika", "coffee blend")) == 5


class TestSearchServiceValidation:
    """Validation and fan-out with a mocked retriever."""

    @pytest.fixture
    def mock_retriever(self) -> AsyncMock:
        retriever = AsyncMock()
        retriever.retrieve = AsyncMock(return_value=([], []))
        return retriever

    @pytest.fixture
    def service(self, embedder, mock_retriever, tenants) -> SearchService:
        return SearchService(embedder, mock_retriever, tenants, min_fanout=20, fanout_multiplier=4)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit,fanout", [(3, 20), (10, 40)])
    async def test_fanout_is_limit_times_multiplier_with_floor(
        self, service: SearchService, mock_retriever: AsyncMock, limit: int, fanout: int
    ) -> None:
        await service.search("fika", "fryer", limit=limit)

        assert mock_retriever.retrieve.await_args.kwargs["fanout_limit"] == fanout

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "tenant_id,query,limit",
        [("nowhere", "fryer", None), ("fika", "  ", None), ("fika", "fryer", 0)],
    )
    async def test_invalid_requests_rejected(
        self, service: SearchService, mock_retriever: AsyncMock, tenant_id, query, limit
    ) -> None:
        with pytest.raises(ValidationError):
            await service.search(tenant_id, query, limit=limit)

        mock_retriever.retrieve.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_document_type_rejected(self, service: SearchService) -> None:
        with pytest.raises(ValidationError):
            await service.search("fika", "fryer", document_type="brochure")


class TestIngestThenQuery:
    """Ingest a multi-chunk procedure and find it again."""

    @pytest.mark.asyncio
    async def test_fryer_cleaning_round_trip(
        self, document_service: DocumentService, search_service: SearchService
    ) -> None:
        # Arrange
        sentence = "Fryer cleaning: drain the oil, scrub the basket, wipe the walls. "
        first = (sentence * 10)[:600].strip()
        second = ("Refill with fresh oil and record the change in the log. " * 11)[:600].strip()
        content = f"{first}\n\n{second}"
        await document_service.ingest("fika", "Iced latte PHP 150.", "Drinks", "menu")

        # Act
        result = await document_service.ingest(
            "fika",
            content,
            "Fryer Cleaning",
            document_type="sop",
            chunk_max_chars=500,
            chunk_overlap_chars=50,
        )
        hits = await search_service.search("fika", "fryer cleaning")

        # Assert
        assert len(content) >= 1150
        assert result.chunk_count >= 3
        assert hits[0].document_id == result.document_id
        assert hits[0].chunk.metadata.title == "Fryer Cleaning"
