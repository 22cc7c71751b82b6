from __future__ import annotations

import math
import threading
from dataclasses import dataclass
from typing import Collection, Iterator, Sequence

import numpy as np

from .config import SearchConfig
from .errors import InvalidQuery, SearchCancelled
from .table import VectorTable


@dataclass(frozen=True)
class Neighbor:
    id: int
    term: str
    score: float


class BoundedRanking:
    """Fixed-capacity list of ``(id, score)`` pairs kept in descending order.

    A candidate goes in front of the first entry it beats strictly, so among
    equal scores the one offered first keeps the better rank. NaN scores are
    refused. Slots that were never filled are simply absent.
    """

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise InvalidQuery(f"ranking capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.ids: list[int] = []
        self.scores: list[float] = []

    def __len__(self) -> int:
        return len(self.ids)

    def __iter__(self) -> Iterator[tuple[int, float]]:
        return iter(zip(self.ids, self.scores))

    @property
    def full(self) -> bool:
        return len(self.ids) >= self.capacity

    @property
    def floor(self) -> float | None:
        """Score a candidate must strictly exceed to get in, or None while not full."""
        return self.scores[-1] if self.full else None

    def offer(self, idx: int, score: float) -> bool:
        if math.isnan(score):
            return False
        for rank, held in enumerate(self.scores):
            if score > held:
                self.ids.insert(rank, idx)
                self.scores.insert(rank, score)
                if len(self.ids) > self.capacity:
                    self.ids.pop()
                    self.scores.pop()
                return True
        if self.full:
            return False
        self.ids.append(idx)
        self.scores.append(score)
        return True


def target_vector(table: VectorTable, ids: Sequence[int]) -> np.ndarray:
    if not ids:
        raise InvalidQuery("at least one seed id is required")
    if len(ids) == 1:
        return table.vector_at(ids[0])
    return table.compose_unit_vector(ids)


def rank_neighbors(
    table: VectorTable,
    target: np.ndarray,
    exclude_ids: Collection[int],
    k: int,
    *,
    chunk_size: int = 8192,
    cancel: threading.Event | None = None,
) -> list[Neighbor]:
    """Exact top-``k`` scan of ``table`` by dot product with ``target``.

    ``target`` must be unit length for the scores to be cosine similarities.
    Rows are visited in id order; rows whose id is in ``exclude_ids`` are
    skipped. When fewer than ``k`` rows are eligible the result is shorter.
    Setting ``cancel`` aborts the scan with :class:`SearchCancelled`.
    """
    if k <= 0:
        raise InvalidQuery(f"k must be positive, got {k}")
    target = np.asarray(target, dtype=np.float64)
    if target.shape != (table.vector_size,):
        raise InvalidQuery(f"target has shape {target.shape}, expected ({table.vector_size},)")
    excluded = frozenset(exclude_ids)
    ranking = BoundedRanking(k)
    chunk_size = max(1, chunk_size)

    for start in range(0, table.vocab_size, chunk_size):
        if cancel is not None and cancel.is_set():
            raise SearchCancelled(f"search cancelled after {start} of {table.vocab_size} rows")
        scores = table.vectors[start : start + chunk_size] @ target
        floor = ranking.floor
        if floor is None:
            # NaN rows come from zero-length vectors and never rank
            candidates = np.flatnonzero(~np.isnan(scores))
        else:
            # rows at or below the floor would be rejected by offer() anyway
            candidates = np.flatnonzero(scores > floor)
        for offset in candidates:
            idx = start + int(offset)
            if idx in excluded:
                continue
            ranking.offer(idx, float(scores[offset]))

    return [Neighbor(id=idx, term=table.term_at(idx), score=score) for idx, score in ranking]


def nearest_neighbors(
    table: VectorTable,
    target: np.ndarray,
    exclude_ids: Collection[int],
    k: int,
) -> dict[str, float]:
    """Return the ``k`` best matches as an ordered ``term -> score`` mapping."""
    return {nb.term: nb.score for nb in rank_neighbors(table, target, exclude_ids, k)}


class NeighborSearch:
    def __init__(self, table: VectorTable, cfg: SearchConfig | None = None):
        self.table = table
        self.cfg = cfg or SearchConfig()

    def similar_to_ids(
        self,
        ids: Sequence[int],
        k: int | None = None,
        cancel: threading.Event | None = None,
    ) -> list[Neighbor]:
        """Neighbors of the seed ids (or of their composite), seeds excluded."""
        target = target_vector(self.table, ids)
        return rank_neighbors(
            self.table,
            target,
            ids,
            self.cfg.top_k if k is None else k,
            chunk_size=self.cfg.chunk_size,
            cancel=cancel,
        )


__all__ = [
    "Neighbor",
    "BoundedRanking",
    "target_vector",
    "rank_neighbors",
    "nearest_neighbors",
    "NeighborSearch",
]
