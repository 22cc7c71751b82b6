from __future__ import annotations

import json

from .neighbors import Neighbor
from .query import Query
from .table import VectorTable


class ReportFormatter:
    def __init__(self, table: VectorTable, query: Query, neighbors: list[Neighbor]):
        self.table = table
        self.query = query
        self.neighbors = neighbors

    def _seeds(self) -> list[dict]:
        return [{"term": self.table.term_at(idx), "id": idx} for idx in self.query.ids]

    def to_table(self, show_positions: bool = True) -> str:
        lines = []
        if show_positions:
            for seed in self._seeds():
                lines.append(f"\nWord: {seed['term']}  Position in vocabulary: {seed['id']}")
        lines.append(f"\n{'Related Term':>50}{'Cosine Similarity':>22}")
        lines.append("-" * 76)
        for nb in self.neighbors:
            lines.append(f"{nb.term:>50}{nb.score:22.6f}")
        return "\n".join(lines)

    def to_json(self, indent: int = 2) -> str:
        payload = {
            "query": self.query.text,
            "seeds": self._seeds(),
            "neighbors": [{"term": nb.term, "id": nb.id, "score": nb.score} for nb in self.neighbors],
        }
        return json.dumps(payload, indent=indent)

    def to_markdown(self) -> str:
        terms = ", ".join(seed["term"] for seed in self._seeds())
        lines = [f"### Neighbors of: {terms}", "| Term | Cosine Similarity |", "| --- | --- |"]
        for nb in self.neighbors:
            lines.append(f"| {nb.term} | {nb.score:.4f} |")
        lines.append("")
        return "\n".join(lines)

    def render(self, output: str, show_positions: bool = True) -> str:
        if output == "json":
            return self.to_json()
        if output == "markdown":
            return self.to_markdown()
        if output == "table":
            return self.to_table(show_positions)
        raise ValueError(f"Unknown output format: {output}")


__all__ = ["ReportFormatter"]
