import logging

import numpy as np
import pytest

from nearwords.config import LoaderConfig
from nearwords.errors import FormatError, ModelIOError
from nearwords.loader import detect_format, load, load_binary, load_text

ANIMALS = [("cat", [3.0, 4.0]), ("dog", [0.0, 5.0]), ("bird", [1.0, 1.0])]


def test_binary_scenario_normalizes_rows(write_binary):
    table = load_binary(write_binary(ANIMALS))
    assert (table.vocab_size, table.vector_size) == (3, 2)
    assert list(table.vocabulary) == ["cat", "dog", "bird"]
    assert table.vector_at(0) == pytest.approx([0.6, 0.8], abs=1e-6)
    assert table.vector_at(1) == pytest.approx([0.0, 1.0], abs=1e-6)
    assert table.vector_at(2) == pytest.approx([0.7071, 0.7071], abs=1e-4)


def test_binary_without_record_separators(write_binary):
    table = load_binary(write_binary(ANIMALS, newline=False))
    assert table.index_of("bird") == 2
    assert table.vector_at(2) == pytest.approx([0.7071, 0.7071], abs=1e-4)


def test_binary_rows_are_unit_length(write_binary):
    rng = np.random.RandomState(7)
    rows = [(f"w{i}", list(rng.uniform(-3, 3, 5))) for i in range(50)]
    table = load_binary(write_binary(rows))
    assert table.vectors.shape == (50, 5)
    assert np.linalg.norm(table.vectors, axis=1) == pytest.approx(np.ones(50), abs=1e-5)


def test_binary_utf8_and_asterisk_terms(write_binary):
    table = load_binary(write_binary([("*café", [1.0, 0.0]), ("naïve", [0.0, 2.0])]))
    assert table.index_of("café") == 0
    assert table.index_of("naïve") == 1


@pytest.mark.parametrize("header", [b"3,2\n", b"3 two\n", b"32\n", b"0 2\n", b"3 2"])
def test_binary_malformed_header(tmp_path, header):
    path = tmp_path / "bad.bin"
    path.write_bytes(header)
    with pytest.raises(FormatError):
        load_binary(path)


def test_binary_truncated_record(tmp_path, write_binary):
    data = write_binary(ANIMALS).read_bytes()
    path = tmp_path / "short.bin"
    path.write_bytes(data[:-6])
    with pytest.raises(FormatError):
        load_binary(path)


def test_binary_missing_records(tmp_path):
    path = tmp_path / "few.bin"
    path.write_bytes(b"2 1\nonly " + np.array([1.0], dtype="<f4").tobytes())
    with pytest.raises(FormatError):
        load_binary(path)


def test_binary_term_too_long(write_binary):
    path = write_binary([("elephant", [1.0, 0.0])])
    with pytest.raises(FormatError):
        load_binary(path, LoaderConfig(max_term_bytes=4))


def test_missing_file_is_io_error(tmp_path):
    with pytest.raises(ModelIOError) as info:
        load(tmp_path / "nope.bin")
    assert isinstance(info.value, OSError)
    assert isinstance(info.value.__cause__, FileNotFoundError)


def test_zero_row_becomes_nan_with_warning(write_binary, caplog):
    with caplog.at_level(logging.WARNING, logger="nearwords.loader"):
        table = load_binary(write_binary([("void", [0.0, 0.0]), ("one", [1.0, 0.0])]))
    assert np.isnan(table.vector_at(0)).all()
    assert "zero-length" in caplog.text


def test_text_matches_binary(write_binary, write_text):
    binary = load_binary(write_binary(ANIMALS))
    text = load_text(write_text(ANIMALS))
    assert list(text.vocabulary) == list(binary.vocabulary)
    assert text.vectors == pytest.approx(binary.vectors, abs=1e-6)


def test_text_skips_blank_lines(tmp_path):
    path = tmp_path / "model.txt"
    path.write_text("\n2 2\nx 1 0\n\ny 0 3\n")
    table = load_text(path)
    assert table.term_at(1) == "y"
    assert table.vector_at(1) == pytest.approx([0.0, 1.0])


def test_text_field_count_mismatch_is_tolerated(tmp_path):
    path = tmp_path / "model.txt"
    path.write_text("2 3\nlong 0 4 0 9 9\nshort 2\n")
    table = load_text(path)
    assert table.vector_at(0) == pytest.approx([0.0, 1.0, 0.0])
    assert table.vector_at(1) == pytest.approx([1.0, 0.0, 0.0])


def test_text_field_count_mismatch_strict(tmp_path):
    path = tmp_path / "model.txt"
    path.write_text("1 3\nshort 2\n")
    with pytest.raises(FormatError):
        load_text(path, LoaderConfig(strict_fields=True))


@pytest.mark.parametrize(
    "content",
    [
        "",
        "two 2\nx 1 0\n",
        "2 2\nx 1 0\n",
        "1 2\nx 1 0\ny 0 1\n",
        "1 2\nx 1 zero\n",
    ],
)
def test_text_malformed(tmp_path, content):
    path = tmp_path / "model.txt"
    path.write_text(content)
    with pytest.raises(FormatError):
        load_text(path)


def test_format_detection(tmp_path, write_binary, write_text):
    assert detect_format("vectors.bin", LoaderConfig()) == "binary"
    assert detect_format("vectors.txt", LoaderConfig()) == "text"
    assert detect_format("vectors.bin", LoaderConfig(format="text")) == "text"
    assert load(write_binary(ANIMALS)).index_of("dog") == 1
    assert load(write_text(ANIMALS, name="model.vec")).index_of("dog") == 1


def test_oversized_header_is_format_error(tmp_path):
    path = tmp_path / "huge.bin"
    path.write_bytes(b"99999999999 300\nx ")
    with pytest.raises(FormatError):
        load_binary(path)
