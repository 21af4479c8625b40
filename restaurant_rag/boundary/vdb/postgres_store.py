"""
PostgreSQL chunk store.

Production store on PostgreSQL with pgvector and pg_trgm. The semantic
branch orders by cosine distance over the HNSW index with ``ef_search`` set
to the candidate pool. The lexical branch ranks by full-text rank plus
trigram word similarity, and also admits chunks holding a word within
``fuzzy_max_edits`` Levenshtein edits of a query word (fuzzystrmatch).

Dependencies: sqlalchemy, pgvector, restaurant_rag.boundary.db
System role: Production ChunkStore implementation
"""

import logging
import re
from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import Select, bindparam, func, literal_column, or_, select, text
from sqlalchemy.exc import ProgrammingError, SQLAlchemyError

from restaurant_rag.boundary.db.connection import DatabaseHandle
from restaurant_rag.boundary.db.CRUD import chunk_crud, document_crud
from restaurant_rag.boundary.db.models import ChunkModel, DocumentModel
from restaurant_rag.boundary.vdb.chunk_store import (
    LEXICAL_INDEX,
    SEMANTIC_INDEX,
    empty_stats,
)
from restaurant_rag.core.exceptions import IndexUnavailableError, StoreError
from restaurant_rag.models.chunk import ChunkMetadata, ChunkRecord, NewChunk, RetrievedChunk
from restaurant_rag.models.common import TenantScope
from restaurant_rag.models.document import (
    DeleteResult,
    DocumentRecord,
    DocumentSource,
    DocumentSummary,
    DocumentType,
    KnowledgeBaseStats,
)

logger = logging.getLogger(__name__)

_CHUNK_COLUMNS = (
    ChunkModel.id,
    ChunkModel.tenant_id,
    ChunkModel.document_id,
    ChunkModel.content,
    ChunkModel.position,
    ChunkModel.chunk_metadata,
    ChunkModel.created_at,
)

_WORD = re.compile(r"\w+")
_MAX_FUZZY_TERMS = 8


class PostgresChunkStore:
    """ChunkStore backed by SQLAlchemy async sessions."""

    def __init__(
        self,
        database: DatabaseHandle,
        text_search_config: str = "english",
        trigram_threshold: float = 0.4,
        fuzzy_max_edits: int = 1,
        owns_database: bool = False,
    ) -> None:
        """
        Args:
            database: Connection handle
            text_search_config: PostgreSQL regconfig name for to_tsvector
            trigram_threshold: Minimum word similarity for fuzzy matches
            fuzzy_max_edits: Edit distance admitted between a query word and a chunk word
            owns_database: Dispose the handle on close(); False when injected
        """
        self._database = database
        self._ts_config = literal_column(f"'{text_search_config}'::regconfig")
        self._trigram_threshold = trigram_threshold
        self._fuzzy_max_edits = fuzzy_max_edits
        self._owns_database = owns_database

    async def save_document(
        self,
        document: DocumentRecord,
        chunks: Sequence[NewChunk],
    ) -> None:
        """
        Insert the document row and bulk-insert its chunks in one transaction.

        Raises:
            StoreError: If the transaction fails; nothing is committed
        """
        try:
            async with self._database.session() as session, session.begin():
                await document_crud.create(
                    session,
                    id=document.id,
                    tenant_id=document.tenant_id,
                    title=document.title,
                    doc_type=document.document_type,
                    content=document.content,
                    chunk_count=document.chunk_count,
                    tags=list(document.tags),
                    source=document.source,
                    created_at=document.created_at,
                )
                await chunk_crud.bulk_create(session, document.tenant_id, document.id, chunks)
        except SQLAlchemyError as e:
            raise StoreError(
                "Failed to save document",
                operation="save_document",
                details={"document_id": str(document.id), "error": str(e)},
            ) from e

    async def list_documents(self, tenant_id: str) -> list[DocumentSummary]:
        try:
            async with self._database.session() as session:
                rows = await document_crud.list_by_tenant(session, tenant_id)
        except SQLAlchemyError as e:
            raise StoreError("Failed to list documents", operation="list_documents") from e
        return [_to_summary(row) for row in rows]

    async def find_documents_by_title(
        self,
        tenant_id: str,
        title: str,
        source: DocumentSource | None = None,
    ) -> list[UUID]:
        try:
            async with self._database.session() as session:
                return await document_crud.find_ids_by_title(session, tenant_id, title, source)
        except SQLAlchemyError as e:
            raise StoreError("Failed to look up documents", operation="find_documents") from e

    async def delete_document(self, tenant_id: str, document_id: UUID) -> DeleteResult:
        """Delete the chunks, then the document, in one transaction."""
        try:
            async with self._database.session() as session, session.begin():
                chunks_deleted = await chunk_crud.delete_by_document(
                    session, tenant_id, document_id
                )
                document_deleted = await document_crud.delete_for_tenant(
                    session, tenant_id, document_id
                )
        except SQLAlchemyError as e:
            raise StoreError(
                "Failed to delete document",
                operation="delete_document",
                details={"document_id": str(document_id)},
            ) from e
        return DeleteResult(chunks_deleted=chunks_deleted, document_deleted=document_deleted)

    async def count_chunks(self, tenant_id: str, document_id: UUID) -> int:
        try:
            async with self._database.session() as session:
                return await chunk_crud.count_by_document(session, tenant_id, document_id)
        except SQLAlchemyError as e:
            raise StoreError("Failed to count chunks", operation="count_chunks") from e

    async def semantic_search(
        self,
        tenant_id: str,
        vector: Sequence[float],
        limit: int,
        candidates: int,
        document_type: DocumentType | None = None,
    ) -> list[RetrievedChunk]:
        """
        Rank a tenant's chunks by cosine similarity to the query vector.

        Raises:
            IndexUnavailableError: If pgvector or the chunks table is missing
            StoreError: On any other database failure
        """
        distance = ChunkModel.embedding.cosine_distance(list(vector))
        stmt = (
            select(*_CHUNK_COLUMNS, (1 - distance).label("score"))
            .where(ChunkModel.tenant_id == tenant_id)
            .order_by(distance)
            .limit(limit)
        )
        stmt = _filter_type(stmt, document_type)
        try:
            async with self._database.session() as session, session.begin():
                await session.execute(
                    text(f"SET LOCAL hnsw.ef_search = {max(int(candidates), limit)}")
                )
                rows = (await session.execute(stmt)).all()
        except ProgrammingError as e:
            raise IndexUnavailableError(
                "Vector index is not available",
                index=SEMANTIC_INDEX,
                operation="semantic_search",
                details={"error": str(e.orig)},
            ) from e
        except SQLAlchemyError as e:
            raise StoreError("Semantic search failed", operation="semantic_search") from e
        return _ranked(rows)

    async def lexical_search(
        self,
        tenant_id: str,
        query_text: str,
        limit: int,
        document_type: DocumentType | None = None,
    ) -> list[RetrievedChunk]:
        """
        Rank a tenant's chunks by full-text rank plus trigram word similarity.

        Raises:
            IndexUnavailableError: If pg_trgm, fuzzystrmatch, the FTS config
                or the table is missing
            StoreError: On any other database failure
        """
        stmt = self._lexical_statement(tenant_id, query_text, limit, document_type)
        try:
            async with self._database.session() as session:
                rows = (await session.execute(stmt)).all()
        except ProgrammingError as e:
            raise IndexUnavailableError(
                "Lexical index is not available",
                index=LEXICAL_INDEX,
                operation="lexical_search",
                details={"error": str(e.orig)},
            ) from e
        except SQLAlchemyError as e:
            raise StoreError("Lexical search failed", operation="lexical_search") from e
        return _ranked(rows)

    async def stats(self, scope: TenantScope) -> KnowledgeBaseStats:
        result = empty_stats(scope)
        try:
            async with self._database.session() as session:
                by_type = await document_crud.count_by_type(session, scope)
                total_chunks = await chunk_crud.count(session, scope)
        except SQLAlchemyError as e:
            raise StoreError("Failed to compute stats", operation="stats") from e
        result.documents_by_type.update(by_type)
        result.total_documents = sum(by_type.values())
        result.total_chunks = total_chunks
        return result

    def _lexical_statement(
        self,
        tenant_id: str,
        query_text: str,
        limit: int,
        document_type: DocumentType | None,
    ) -> Select:
        document_vector = func.to_tsvector(self._ts_config, ChunkModel.content)
        query = func.plainto_tsquery(self._ts_config, query_text)
        similarity = func.word_similarity(query_text, ChunkModel.content)
        score = (func.ts_rank_cd(document_vector, query) + similarity).label("score")
        matches = [
            document_vector.op("@@")(query),
            similarity >= self._trigram_threshold,
        ]
        if self._fuzzy_max_edits > 0:
            matches.extend(
                self._within_edits(term, i) for i, term in enumerate(fuzzy_terms(query_text))
            )
        stmt = (
            select(*_CHUNK_COLUMNS, score)
            .where(ChunkModel.tenant_id == tenant_id)
            .where(or_(*matches))
            .order_by(score.desc())
            .limit(limit)
        )
        return _filter_type(stmt, document_type)

    def _within_edits(self, term: str, position: int):
        # Trigram similarity is too coarse for short words ('oul' vs 'oil' scores 0.25)
        name = f"fuzzy_term_{position}"
        return text(
            "EXISTS (SELECT 1 FROM regexp_split_to_table("
            f"lower({ChunkModel.__tablename__}.content), '\\W+') AS word "
            f"WHERE levenshtein(word, :{name}) <= {int(self._fuzzy_max_edits)})"
        ).bindparams(bindparam(name, term))

    async def close(self) -> None:
        if self._owns_database:
            await self._database.dispose()


def fuzzy_terms(query_text: str) -> list[str]:
    """Distinct lowercase query words, in order, capped for the edit-distance match."""
    return list(dict.fromkeys(_WORD.findall(query_text.lower())))[:_MAX_FUZZY_TERMS]


def _filter_type(stmt: Select, document_type: DocumentType | None) -> Select:
    if document_type is None:
        return stmt
    return stmt.join(DocumentModel, DocumentModel.id == ChunkModel.document_id).where(
        DocumentModel.doc_type == document_type
    )


def _ranked(rows) -> list[RetrievedChunk]:
    return [
        RetrievedChunk(
            chunk=ChunkRecord(
                id=row.id,
                tenant_id=row.tenant_id,
                document_id=row.document_id,
                content=row.content,
                position=row.position,
                metadata=ChunkMetadata.model_validate(row.chunk_metadata),
                created_at=row.created_at,
            ),
            rank=rank,
            score=float(row.score),
        )
        for rank, row in enumerate(rows, start=1)
    ]


def _to_summary(row: DocumentModel) -> DocumentSummary:
    return DocumentSummary(
        id=row.id,
        title=row.title,
        document_type=row.doc_type,
        chunk_count=row.chunk_count,
        tags=list(row.tags or []),
        source=row.source,
        created_at=row.created_at,
    )
