"""
Hybrid search service.

Query flow: embed the query, retrieve semantic and lexical candidates for
the tenant, fuse them with reciprocal rank fusion and return the top hits.

Dependencies: restaurant_rag.application.embedder, restaurant_rag.core
System role: Query orchestration
"""

import logging

from restaurant_rag.application.embedder import EmbeddingBatcher
from restaurant_rag.application.services.validation import parse_document_type, validate_tenant
from restaurant_rag.configs.tenants import TenantSettings
from restaurant_rag.core.exceptions import ValidationError
from restaurant_rag.core.fusion import DEFAULT_RRF_K, reciprocal_rank_fusion
from restaurant_rag.core.retriever import Retriever
from restaurant_rag.models.chunk import RankedHit

logger = logging.getLogger(__name__)


class SearchService:
    """Tenant-scoped hybrid search."""

    def __init__(
        self,
        embedder: EmbeddingBatcher,
        retriever: Retriever,
        tenants: TenantSettings,
        rrf_k: int = DEFAULT_RRF_K,
        default_limit: int = 5,
        max_limit: int = 10,
        fanout_multiplier: int = 4,
        min_fanout: int = 20,
    ) -> None:
        self.embedder = embedder
        self.retriever = retriever
        self.tenants = tenants
        self.rrf_k = rrf_k
        self.default_limit = default_limit
        self.max_limit = max_limit
        self.fanout_multiplier = fanout_multiplier
        self.min_fanout = min_fanout

    async def search(
        self,
        tenant_id: str,
        query: str,
        limit: int | None = None,
        document_type: str | None = None,
    ) -> list[RankedHit]:
        """
        Run a hybrid query.

        Args:
            tenant_id: Tenant to search
            query: Natural-language or keyword query
            limit: Results wanted (default_limit if None, capped at max_limit)
            document_type: Optional document type restriction

        Returns:
            list[RankedHit]: Fused hits, best first

        Raises:
            ValidationError: Unknown tenant or type, blank query, limit < 1
            EmbeddingProviderError: Query embedding failed
            StoreError: Semantic search failed
        """
        validate_tenant(self.tenants, tenant_id)
        if not query or not query.strip():
            raise ValidationError("Query must not be empty", field="query")
        if limit is not None and limit < 1:
            raise ValidationError("limit must be at least 1", field="limit")
        top_n = min(limit or self.default_limit, self.max_limit)
        doc_type = parse_document_type(document_type) if document_type else None
        fanout = max(top_n * self.fanout_multiplier, self.min_fanout)

        query_vector = await self.embedder.embed_query(query)
        semantic_hits, lexical_hits = await self.retriever.retrieve(
            tenant_id,
            query_vector,
            query,
            fanout_limit=fanout,
            document_type=doc_type,
        )
        hits = reciprocal_rank_fusion(semantic_hits, lexical_hits, k=self.rrf_k, top_n=top_n)
        logger.info(
            f"{__name__}:search - Hybrid search finished",
            extra={"tenant_id": tenant_id, "fanout": fanout, "results": len(hits)},
        )
        return hits
