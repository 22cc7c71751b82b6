from __future__ import annotations

from typing import Iterable, Iterator

from .errors import TermIndexError, ValidationError

OPTIONAL_ASTERISK = "*"


class Vocabulary:
    """Bidirectional mapping between terms and dense integer ids.

    The id of a term is its position in ``terms``. When the same term appears
    more than once, lookups resolve to the last occurrence.
    """

    def __init__(self, terms: Iterable[str] | None):
        if terms is None:
            raise ValidationError("vocabulary terms must not be None")
        self.terms: tuple[str, ...] = tuple(terms)
        self.term_to_id: dict[str, int] = {term: i for i, term in enumerate(self.terms)}

    def __len__(self) -> int:
        return len(self.terms)

    def __iter__(self) -> Iterator[str]:
        return iter(self.terms)

    def __contains__(self, term: object) -> bool:
        return isinstance(term, str) and self.lookup(term) is not None

    def lookup(self, term: str) -> int | None:
        # Some models mark entries with a leading "*"; fall back to that spelling.
        idx = self.term_to_id.get(term)
        if idx is None:
            idx = self.term_to_id.get(OPTIONAL_ASTERISK + term)
        return idx

    def term_at(self, idx: int) -> str:
        if not 0 <= idx < len(self.terms):
            raise TermIndexError(f"term id {idx} out of range [0, {len(self.terms)})")
        return self.terms[idx]


__all__ = ["OPTIONAL_ASTERISK", "Vocabulary"]
