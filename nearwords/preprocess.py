from __future__ import annotations

PUNCTUATION_PLACEHOLDER = "#PUNC#"


def _normalize(text: str, keep: frozenset[str]) -> str:
    out: list[str] = []
    pending_space = False
    for ch in text:
        if ch.isalnum() or ch in keep:
            if pending_space and out:
                out.append(" ")
            pending_space = False
            out.append(ch.lower())
        elif ch.isspace():
            pending_space = True
        # any other character is punctuation and is dropped
    if not out:
        return PUNCTUATION_PLACEHOLDER
    return "".join(out)


def normalize_preserving_underscores(text: str) -> str:
    """Normalize a query the way phrase vocabularies spell their entries.

    Letters and digits are lower-cased, runs of whitespace collapse to a single
    space, punctuation is dropped and ``_`` is kept so phrase tokens such as
    ``new_york`` survive. Input with no content maps to
    :data:`PUNCTUATION_PLACEHOLDER`.
    """
    return _normalize(text, frozenset("_"))


def normalize_text(text: str) -> str:
    """Like :func:`normalize_preserving_underscores` but drops ``_`` too."""
    return _normalize(text, frozenset())


def tokenize(text: str) -> list[str]:
    return text.split()


__all__ = [
    "PUNCTUATION_PLACEHOLDER",
    "normalize_preserving_underscores",
    "normalize_text",
    "tokenize",
]
