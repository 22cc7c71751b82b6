from __future__ import annotations

import logging
from typing import TextIO

from .config import ShellConfig
from .errors import InvalidQuery
from .neighbors import Neighbor, NeighborSearch
from .query import Query, resolve_query
from .report import ReportFormatter

logger = logging.getLogger(__name__)

OUT_OF_DICTIONARY = "\nOut of dictionary word!"


class Shell:
    """Read-eval-print loop over a loaded table.

    The shell owns only its streams; every answer comes from the
    :class:`NeighborSearch` it is given.
    """

    def __init__(self, search: NeighborSearch, cfg: ShellConfig, stdin: TextIO, stdout: TextIO):
        self.search = search
        self.cfg = cfg
        self.stdin = stdin
        self.stdout = stdout

    def answer(self, line: str, k: int | None = None) -> tuple[Query, list[Neighbor]]:
        query = resolve_query(self.search.table, line)
        if not query.resolved:
            return query, []
        if query.missing:
            logger.info("ignoring unknown tokens: %s", " ".join(query.missing))
        return query, self.search.similar_to_ids(query.ids, k)

    def respond(self, line: str, k: int | None = None) -> str:
        try:
            query, neighbors = self.answer(line, k)
        except InvalidQuery as exc:
            return f"\nCannot search: {exc}"
        if not query.resolved:
            return OUT_OF_DICTIONARY
        report = ReportFormatter(self.search.table, query, neighbors)
        return report.render(self.cfg.output, self.cfg.show_positions)

    def run(self, k: int | None = None) -> int:
        answered = 0
        while True:
            self.stdout.write(self.cfg.prompt)
            self.stdout.flush()
            line = self.stdin.readline()
            if not line:
                break
            line = line.rstrip("\r\n")
            if line == self.cfg.exit_word:
                break
            print(self.respond(line, k), file=self.stdout)
            answered += 1
        return answered


__all__ = ["OUT_OF_DICTIONARY", "Shell"]
