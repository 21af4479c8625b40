"""
In-memory chunk store for local development and tests.

Keeps documents and chunks in process. Semantic search is exact cosine
similarity with NumPy; lexical search scores query terms against chunk
tokens, counting a token within ``fuzzy_max_edits`` edits as a partial
match. Writes are serialised with an asyncio lock.

Dependencies: numpy, restaurant_rag.models
System role: Development ChunkStore implementation
"""

import asyncio
import re
import uuid
from collections import Counter
from collections.abc import Sequence
from datetime import datetime, timezone
from uuid import UUID

import numpy as np

from restaurant_rag.boundary.vdb.chunk_store import empty_stats
from restaurant_rag.models.chunk import ChunkRecord, NewChunk, RetrievedChunk
from restaurant_rag.models.common import TenantScope
from restaurant_rag.models.document import (
    DeleteResult,
    DocumentRecord,
    DocumentSource,
    DocumentSummary,
    DocumentType,
    KnowledgeBaseStats,
)

_TOKEN = re.compile(r"\w+")
_FUZZY_WEIGHT = 0.5


class InMemoryChunkStore:
    """ChunkStore kept in dictionaries; not shared between processes."""

    def __init__(self, fuzzy_max_edits: int = 1) -> None:
        self._fuzzy_max_edits = fuzzy_max_edits
        self._documents: dict[UUID, DocumentRecord] = {}
        self._chunks: dict[UUID, ChunkRecord] = {}
        self._vectors: dict[UUID, np.ndarray] = {}
        self._lock = asyncio.Lock()

    async def save_document(
        self,
        document: DocumentRecord,
        chunks: Sequence[NewChunk],
    ) -> None:
        now = datetime.now(timezone.utc)
        records = [
            ChunkRecord(
                id=uuid.uuid4(),
                tenant_id=document.tenant_id,
                document_id=document.id,
                content=chunk.content,
                position=chunk.position,
                metadata=chunk.metadata,
                created_at=now,
            )
            for chunk in chunks
        ]
        vectors = [np.asarray(chunk.embedding, dtype=np.float32) for chunk in chunks]
        async with self._lock:
            self._documents[document.id] = document
            for record, vector in zip(records, vectors):
                self._chunks[record.id] = record
                self._vectors[record.id] = vector

    async def list_documents(self, tenant_id: str) -> list[DocumentSummary]:
        documents = [d for d in self._documents.values() if d.tenant_id == tenant_id]
        documents.sort(key=lambda d: d.created_at, reverse=True)
        return [DocumentSummary.model_validate(d.model_dump()) for d in documents]

    async def find_documents_by_title(
        self,
        tenant_id: str,
        title: str,
        source: DocumentSource | None = None,
    ) -> list[UUID]:
        return [
            d.id
            for d in self._documents.values()
            if d.tenant_id == tenant_id
            and d.title == title
            and (source is None or d.source == source)
        ]

    async def delete_document(self, tenant_id: str, document_id: UUID) -> DeleteResult:
        async with self._lock:
            chunk_ids = [
                chunk_id
                for chunk_id, chunk in self._chunks.items()
                if chunk.tenant_id == tenant_id and chunk.document_id == document_id
            ]
            for chunk_id in chunk_ids:
                del self._chunks[chunk_id]
                del self._vectors[chunk_id]
            document = self._documents.get(document_id)
            document_deleted = document is not None and document.tenant_id == tenant_id
            if document_deleted:
                del self._documents[document_id]
        return DeleteResult(chunks_deleted=len(chunk_ids), document_deleted=document_deleted)

    async def count_chunks(self, tenant_id: str, document_id: UUID) -> int:
        return sum(
            1
            for chunk in self._chunks.values()
            if chunk.tenant_id == tenant_id and chunk.document_id == document_id
        )

    async def semantic_search(
        self,
        tenant_id: str,
        vector: Sequence[float],
        limit: int,
        candidates: int,
        document_type: DocumentType | None = None,
    ) -> list[RetrievedChunk]:
        chunks = self._candidates(tenant_id, document_type)
        if not chunks:
            return []
        query = np.asarray(vector, dtype=np.float32)
        matrix = np.stack([self._vectors[chunk.id] for chunk in chunks])
        norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
        similarities = np.divide(
            matrix @ query,
            norms,
            out=np.zeros(len(chunks), dtype=np.float32),
            where=norms > 0,
        )
        order = np.argsort(-similarities, kind="stable")[:limit]
        return [
            RetrievedChunk(chunk=chunks[i], rank=rank, score=float(similarities[i]))
            for rank, i in enumerate(order, start=1)
        ]

    async def lexical_search(
        self,
        tenant_id: str,
        query_text: str,
        limit: int,
        document_type: DocumentType | None = None,
    ) -> list[RetrievedChunk]:
        terms = _tokens(query_text)
        if not terms:
            return []
        scored = []
        for chunk in self._candidates(tenant_id, document_type):
            score = self._term_score(terms, Counter(_tokens(chunk.content)))
            if score > 0:
                scored.append((score, chunk))
        scored.sort(key=lambda item: item[0], reverse=True)
        return [
            RetrievedChunk(chunk=chunk, rank=rank, score=score)
            for rank, (score, chunk) in enumerate(scored[:limit], start=1)
        ]

    async def stats(self, scope: TenantScope) -> KnowledgeBaseStats:
        result = empty_stats(scope)
        documents = [
            d for d in self._documents.values()
            if scope.include_all or d.tenant_id == scope.tenant_id
        ]
        for document in documents:
            result.documents_by_type[document.document_type.value] += 1
        result.total_documents = len(documents)
        result.total_chunks = sum(
            1 for c in self._chunks.values()
            if scope.include_all or c.tenant_id == scope.tenant_id
        )
        return result

    async def close(self) -> None:
        pass

    def _candidates(
        self,
        tenant_id: str,
        document_type: DocumentType | None,
    ) -> list[ChunkRecord]:
        chunks = [c for c in self._chunks.values() if c.tenant_id == tenant_id]
        if document_type is not None:
            chunks = [
                c for c in chunks
                if self._documents[c.document_id].document_type == document_type
            ]
        return chunks

    def _term_score(self, terms: list[str], token_counts: Counter) -> float:
        score = 0.0
        for term in terms:
            if term in token_counts:
                score += 1.0 + np.log(token_counts[term])
                continue
            fuzzy = sum(
                count
                for token, count in token_counts.items()
                if within_edits(term, token, self._fuzzy_max_edits)
            )
            if fuzzy:
                score += _FUZZY_WEIGHT * (1.0 + np.log(fuzzy))
        return float(score)


def _tokens(text: str) -> list[str]:
    return _TOKEN.findall(text.lower())


def within_edits(a: str, b: str, max_edits: int) -> bool:
    """True if the Levenshtein distance between a and b is at most max_edits."""
    if abs(len(a) - len(b)) > max_edits:
        return False
    if max_edits == 0:
        return a == b
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (char_a != char_b),
                )
            )
        if min(current) > max_edits:
            return False
        previous = current
    return previous[-1] <= max_edits
