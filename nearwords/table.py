from __future__ import annotations

from typing import Sequence

import numpy as np

from .errors import InvalidQuery, TermIndexError, ValidationError
from .vocabulary import Vocabulary


def unit_length(vec: np.ndarray) -> np.ndarray:
    """Return ``vec`` scaled to L2 norm 1.

    A zero vector has no direction; the result is then all NaN, matching what
    word2vec tooling produces for such rows.
    """
    norm = vector_norm(vec)
    with np.errstate(divide="ignore", invalid="ignore"):
        return (vec / norm).astype(vec.dtype, copy=False)


def vector_norm(vec: np.ndarray) -> float:
    # accumulate in double precision whatever the storage dtype
    return float(np.sqrt(np.sum(np.square(vec, dtype=np.float64))))


class VectorTable:
    """Immutable table of unit-length term vectors.

    Row ``i`` of :attr:`vectors` belongs to the term with id ``i`` in
    :attr:`vocabulary`. The matrix is read-only once the table is built, so a
    table can be shared between concurrent readers.
    """

    def __init__(
        self,
        vocab_size: int,
        vector_size: int,
        terms: Sequence[str] | None,
        vectors: np.ndarray | None,
    ):
        if terms is None or vectors is None:
            raise ValidationError("terms and vectors must both be provided")
        if vocab_size <= 0 or vector_size <= 0:
            raise ValidationError(
                f"vocab_size and vector_size must be positive, got {vocab_size} and {vector_size}"
            )
        try:
            vectors = np.asarray(vectors, dtype=np.float32)
        except ValueError as exc:
            raise ValidationError(f"vectors are not a rectangular matrix: {exc}") from exc
        if vectors.ndim != 2:
            raise ValidationError(f"vectors must be a 2-d matrix, got {vectors.ndim} dimension(s)")
        if len(terms) != len(vectors):
            raise ValidationError(f"{len(terms)} terms but {len(vectors)} vectors")
        if len(terms) != vocab_size:
            raise ValidationError(f"{len(terms)} terms but vocab_size is {vocab_size}")
        if vectors.shape[1] != vector_size:
            raise ValidationError(f"rows have {vectors.shape[1]} entries but vector_size is {vector_size}")

        self.vocab_size = vocab_size
        self.vector_size = vector_size
        self.vocabulary = Vocabulary(terms)
        vectors.flags.writeable = False
        self.vectors = vectors

    def __len__(self) -> int:
        return self.vocab_size

    def __repr__(self) -> str:
        return f"VectorTable(vocab_size={self.vocab_size}, vector_size={self.vector_size})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VectorTable):
            return NotImplemented
        return (
            self.vocab_size == other.vocab_size
            and self.vector_size == other.vector_size
            and self.vocabulary.terms == other.vocabulary.terms
            and np.array_equal(self.vectors, other.vectors, equal_nan=True)
        )

    __hash__ = None

    @property
    def nbytes(self) -> int:
        return int(self.vectors.nbytes)

    def _check_id(self, idx: int) -> None:
        if not 0 <= idx < self.vocab_size:
            raise TermIndexError(f"term id {idx} out of range [0, {self.vocab_size})")

    def vector_at(self, idx: int) -> np.ndarray:
        self._check_id(idx)
        return self.vectors[idx]

    def term_at(self, idx: int) -> str:
        return self.vocabulary.term_at(idx)

    def index_of(self, term: str) -> int | None:
        return self.vocabulary.lookup(term)

    lookup = index_of

    def compose_unit_vector(self, ids: Sequence[int]) -> np.ndarray:
        if not ids:
            raise InvalidQuery("cannot compose a vector from an empty id list")
        composite = np.zeros(self.vector_size, dtype=np.float32)
        for idx in ids:
            composite += self.vector_at(idx)
        if not np.any(composite):
            raise InvalidQuery(f"vectors for ids {list(ids)} cancel out to zero")
        return unit_length(composite)


__all__ = ["unit_length", "vector_norm", "VectorTable"]
