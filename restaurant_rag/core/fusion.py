"""
Reciprocal Rank Fusion.

Combines the semantic and lexical rankings into one list. A chunk at 1-based
rank r contributes 1 / (k + r) from each list it appears in; chunks are
merged by persistent id and tagged with the branch(es) that found them.

Dependencies: restaurant_rag.models.chunk
System role: Rank fuser of the hybrid query flow
"""

import uuid
from collections.abc import Sequence

from restaurant_rag.core.exceptions import ValidationError
from restaurant_rag.models.chunk import ChunkRecord, HitSource, RankedHit, RetrievedChunk

DEFAULT_RRF_K = 60


def reciprocal_rank_fusion(
    semantic_hits: Sequence[RetrievedChunk],
    lexical_hits: Sequence[RetrievedChunk],
    k: int = DEFAULT_RRF_K,
    top_n: int | None = None,
) -> list[RankedHit]:
    """
    Fuse two ranked hit lists.

    Args:
        semantic_hits: Vector-search hits, rank 1 first
        lexical_hits: Keyword-search hits, rank 1 first
        k: Smoothing constant
        top_n: Truncate the fused list to this many hits (None keeps all)

    Returns:
        list[RankedHit]: Hits by descending fused score

    Raises:
        ValidationError: If k or top_n is not positive
    """
    if k <= 0:
        raise ValidationError("RRF k must be positive", field="k")
    if top_n is not None and top_n <= 0:
        raise ValidationError("top_n must be positive", field="top_n")

    chunks: dict[uuid.UUID, ChunkRecord] = {}
    scores: dict[uuid.UUID, float] = {}
    semantic_ranks: dict[uuid.UUID, int] = {}
    lexical_ranks: dict[uuid.UUID, int] = {}

    for hits, ranks in ((semantic_hits, semantic_ranks), (lexical_hits, lexical_ranks)):
        for hit in hits:
            chunk_id = hit.chunk.id
            if chunk_id in ranks:
                continue
            ranks[chunk_id] = hit.rank
            chunks.setdefault(chunk_id, hit.chunk)
            scores[chunk_id] = scores.get(chunk_id, 0.0) + 1.0 / (k + hit.rank)

    fused = [
        RankedHit(
            chunk=chunks[chunk_id],
            score=score,
            source=_provenance(chunk_id in semantic_ranks, chunk_id in lexical_ranks),
            semantic_rank=semantic_ranks.get(chunk_id),
            lexical_rank=lexical_ranks.get(chunk_id),
        )
        for chunk_id, score in scores.items()
    ]
    fused.sort(key=lambda hit: hit.score, reverse=True)
    return fused[:top_n] if top_n is not None else fused


def _provenance(in_semantic: bool, in_lexical: bool) -> HitSource:
    if in_semantic and in_lexical:
        return HitSource.BOTH
    return HitSource.SEMANTIC if in_semantic else HitSource.LEXICAL
