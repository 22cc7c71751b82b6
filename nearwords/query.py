from __future__ import annotations

from dataclasses import dataclass, field

from .preprocess import normalize_preserving_underscores, tokenize
from .table import VectorTable


@dataclass
class Query:
    text: str
    normalized: str
    ids: list[int] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)

    @property
    def resolved(self) -> bool:
        return bool(self.ids)


def resolve_query(table: VectorTable, text: str) -> Query:
    """Map a line of user input to seed ids.

    The whole normalized phrase is tried first so multi-word vocabulary
    entries win; otherwise every token that resolves on its own becomes a
    seed, in input order. A repeated token is kept and weighs more in the
    composite.
    """
    normalized = normalize_preserving_underscores(text)
    query = Query(text=text, normalized=normalized)
    idx = table.index_of(normalized)
    if idx is not None:
        query.ids.append(idx)
        return query
    for token in tokenize(normalized):
        idx = table.index_of(token)
        if idx is None:
            query.missing.append(token)
        else:
            query.ids.append(idx)
    return query


__all__ = ["Query", "resolve_query"]
