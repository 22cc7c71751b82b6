from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import BinaryIO

import numpy as np

from .config import LoaderConfig
from .errors import FormatError, ModelIOError, ValidationError
from .table import VectorTable, unit_length, vector_norm

logger = logging.getLogger(__name__)

# bytes that end a term token in the binary format
_WHITESPACE = frozenset(b" \t\n\r\x0b\x0c")
_HEADER_RE = re.compile(r"(\d+) (\d+)\r?")
_FLOAT_LE = np.dtype("<f4")


def _progress_step(vocab_size: int) -> int:
    return max(1, vocab_size // 100)


def _allocate(vocab_size: int, vector_size: int) -> tuple[list[str], np.ndarray]:
    if vocab_size <= 0 or vector_size <= 0:
        raise FormatError(f"header sizes must be positive, got {vocab_size} {vector_size}")
    try:
        return [], np.zeros((vocab_size, vector_size), dtype=np.float32)
    except (MemoryError, ValueError) as exc:
        raise FormatError(f"header declares {vocab_size} x {vector_size} floats, too large to allocate") from exc


def _read_binary_header(stream: BinaryIO) -> tuple[int, int]:
    line = stream.readline()
    if not line.endswith(b"\n"):
        raise FormatError("header line is not terminated by a newline")
    try:
        text = line[:-1].decode("ascii")
    except UnicodeDecodeError as exc:
        raise FormatError("header line is not ASCII") from exc
    match = _HEADER_RE.fullmatch(text)
    if match is None:
        raise FormatError(f"malformed header {text!r}, expected '<vocab_size> <vector_size>'")
    return int(match.group(1)), int(match.group(2))


def _read_term(stream: BinaryIO, max_bytes: int, encoding: str) -> str:
    """Read the next whitespace-delimited term.

    Leading whitespace is skipped, so files that put a newline after each
    vector and files that don't are both accepted. The terminating whitespace
    byte is consumed.
    """
    ch = stream.read(1)
    while ch and ch[0] in _WHITESPACE:
        ch = stream.read(1)
    if not ch:
        raise FormatError("unexpected end of file while reading a term")
    buf = bytearray()
    while ch and ch[0] not in _WHITESPACE:
        buf += ch
        if len(buf) > max_bytes:
            raise FormatError(f"term longer than {max_bytes} bytes: {bytes(buf[:40])!r}...")
        ch = stream.read(1)
    if not ch:
        raise FormatError(f"unexpected end of file after term {bytes(buf)!r}")
    return buf.decode(encoding, errors="replace")


def _parse_binary(stream: BinaryIO, cfg: LoaderConfig) -> VectorTable:
    vocab_size, vector_size = _read_binary_header(stream)
    logger.info("binary model: %d terms x %d dimensions", vocab_size, vector_size)
    terms, vectors = _allocate(vocab_size, vector_size)
    row_bytes = vector_size * _FLOAT_LE.itemsize
    step = _progress_step(vocab_size)
    zero_rows = 0

    for i in range(vocab_size):
        term = _read_term(stream, cfg.max_term_bytes, cfg.encoding)
        data = stream.read(row_bytes)
        if len(data) != row_bytes:
            raise FormatError(
                f"truncated record {i} ({term!r}): expected {row_bytes} bytes, got {len(data)}"
            )
        row = np.frombuffer(data, dtype=_FLOAT_LE).astype(np.float32)
        if vector_norm(row) == 0.0:
            zero_rows += 1
        terms.append(term)
        vectors[i] = unit_length(row)
        if cfg.progress and i % step == 0:
            logger.debug("read %d/%d records", i + 1, vocab_size)

    if zero_rows:
        logger.warning("%d zero-length vector(s) could not be normalized", zero_rows)
    return VectorTable(vocab_size, vector_size, terms, vectors)


def _parse_text_header(line: str, lineno: int) -> tuple[int, int]:
    fields = line.split()
    if len(fields) < 2:
        raise FormatError(f"line {lineno}: header needs '<vocab_size> <vector_size>', got {line.strip()!r}")
    try:
        return int(fields[0]), int(fields[1])
    except ValueError as exc:
        raise FormatError(f"line {lineno}: header sizes are not integers: {line.strip()!r}") from exc


def _parse_text(lines, cfg: LoaderConfig) -> VectorTable:
    vocab_size = vector_size = 0
    terms: list[str] = []
    vectors: np.ndarray | None = None
    step = 1
    zero_rows = 0

    for lineno, line in enumerate(lines, start=1):
        fields = line.split()
        if not fields:
            continue
        if vectors is None:
            vocab_size, vector_size = _parse_text_header(line, lineno)
            logger.info("text model: %d terms x %d dimensions", vocab_size, vector_size)
            terms, vectors = _allocate(vocab_size, vector_size)
            step = _progress_step(vocab_size)
            continue

        i = len(terms)
        if i >= vocab_size:
            raise FormatError(f"line {lineno}: more records than the declared {vocab_size}")
        term, values = fields[0], fields[1:]
        if len(values) != vector_size:
            if cfg.strict_fields:
                raise FormatError(
                    f"line {lineno}: {term!r} has {len(values)} values, expected {vector_size}"
                )
            # extra values are ignored, missing ones stay zero
            values = values[:vector_size]
        row = np.zeros(vector_size, dtype=np.float32)
        try:
            row[: len(values)] = [float(v) for v in values]
        except ValueError as exc:
            raise FormatError(f"line {lineno}: bad number for {term!r}: {exc}") from exc
        if vector_norm(row) == 0.0:
            zero_rows += 1
        terms.append(term)
        vectors[i] = unit_length(row)
        if cfg.progress and i % step == 0:
            logger.debug("read %d/%d records", i + 1, vocab_size)

    if vectors is None:
        raise FormatError("model file is empty")
    if len(terms) != vocab_size:
        raise FormatError(f"header declares {vocab_size} records but the file has {len(terms)}")
    if zero_rows:
        logger.warning("%d zero-length vector(s) could not be normalized", zero_rows)
    return VectorTable(vocab_size, vector_size, terms, vectors)


def load_binary(path: str | Path, cfg: LoaderConfig | None = None) -> VectorTable:
    """Load a word2vec binary model (little-endian float32 rows)."""
    cfg = cfg or LoaderConfig()
    try:
        with open(path, "rb") as stream:
            return _parse_binary(stream, cfg)
    except OSError as exc:
        raise ModelIOError(f"cannot read model {path}: {exc}") from exc


def load_text(path: str | Path, cfg: LoaderConfig | None = None) -> VectorTable:
    """Load a word2vec text model (one whitespace-separated record per line)."""
    cfg = cfg or LoaderConfig()
    try:
        with open(path, "r", encoding=cfg.encoding, errors="replace") as lines:
            return _parse_text(lines, cfg)
    except OSError as exc:
        raise ModelIOError(f"cannot read model {path}: {exc}") from exc


def detect_format(path: str | Path, cfg: LoaderConfig) -> str:
    if cfg.format == "auto":
        return "binary" if Path(path).suffix.lower() == ".bin" else "text"
    if cfg.format not in {"binary", "text"}:
        raise ValidationError(f"unknown model format: {cfg.format}")
    return cfg.format


def load(path: str | Path, cfg: LoaderConfig | None = None) -> VectorTable:
    cfg = cfg or LoaderConfig()
    if detect_format(path, cfg) == "binary":
        return load_binary(path, cfg)
    return load_text(path, cfg)


__all__ = ["load", "load_binary", "load_text", "detect_format"]
