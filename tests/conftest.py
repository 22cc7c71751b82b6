import struct

import numpy as np
import pytest

from nearwords.table import VectorTable

ANIMALS = [("cat", [3.0, 4.0]), ("dog", [0.0, 5.0]), ("bird", [1.0, 1.0])]


def binary_model(rows, newline=True):
    dim = len(rows[0][1])
    out = bytearray(f"{len(rows)} {dim}\n".encode("ascii"))
    for term, vec in rows:
        out += term.encode("utf-8") + b" " + struct.pack(f"<{dim}f", *vec)
        if newline:
            out += b"\n"
    return bytes(out)


def text_model(rows):
    dim = len(rows[0][1])
    lines = [f"{len(rows)} {dim}"]
    for term, vec in rows:
        lines.append(" ".join([term] + [repr(float(v)) for v in vec]))
    return "\n".join(lines) + "\n"


@pytest.fixture
def write_binary(tmp_path):
    def _write(rows, name="model.bin", newline=True):
        path = tmp_path / name
        path.write_bytes(binary_model(rows, newline=newline))
        return path

    return _write


@pytest.fixture
def write_text(tmp_path):
    def _write(rows, name="model.txt"):
        path = tmp_path / name
        path.write_text(text_model(rows), encoding="utf-8")
        return path

    return _write


def _make_table(rows):
    terms = [term for term, _ in rows]
    vecs = np.array([vec for _, vec in rows], dtype=np.float32)
    vecs /= np.linalg.norm(vecs, axis=1, keepdims=True)
    return VectorTable(len(terms), vecs.shape[1], terms, vecs)


@pytest.fixture
def animals():
    return _make_table(ANIMALS)


@pytest.fixture
def make_table():
    return _make_table
