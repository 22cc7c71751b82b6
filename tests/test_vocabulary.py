import pytest

from nearwords.errors import TermIndexError, ValidationError
from nearwords.vocabulary import Vocabulary


def test_lookup_returns_position():
    vocab = Vocabulary(["the", "cat", "sat"])
    assert vocab.lookup("the") == 0
    assert vocab.lookup("sat") == 2
    assert vocab.lookup("dog") is None


def test_lookup_falls_back_to_asterisk_entry():
    vocab = Vocabulary(["</s>", "*new_york", "paris"])
    assert vocab.lookup("new_york") == 1
    assert "new_york" in vocab
    assert "*paris" not in vocab


def test_exact_match_wins_over_asterisk_entry():
    vocab = Vocabulary(["*rome", "rome"])
    assert vocab.lookup("rome") == 1


def test_duplicate_terms_keep_last_id():
    vocab = Vocabulary(["a", "b", "a"])
    assert vocab.lookup("a") == 2
    assert len(vocab) == 3


def test_term_at_rejects_out_of_range():
    vocab = Vocabulary(["a", "b"])
    assert vocab.term_at(1) == "b"
    with pytest.raises(TermIndexError):
        vocab.term_at(2)
    with pytest.raises(IndexError):
        vocab.term_at(-1)


def test_none_terms_rejected():
    with pytest.raises(ValidationError):
        Vocabulary(None)
