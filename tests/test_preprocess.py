from nearwords.preprocess import (
    PUNCTUATION_PLACEHOLDER,
    normalize_preserving_underscores,
    normalize_text,
    tokenize,
)


def test_normalize_preserving_underscores():
    assert normalize_preserving_underscores("Hello_World!  foo") == "hello_world foo"
    assert normalize_preserving_underscores("  New   York\tCity ") == "new york city"
    assert normalize_preserving_underscores("don't") == "dont"


def test_punctuation_only_maps_to_placeholder():
    assert normalize_preserving_underscores("?!...") == PUNCTUATION_PLACEHOLDER
    assert normalize_preserving_underscores("") == PUNCTUATION_PLACEHOLDER
    assert normalize_text("___") == PUNCTUATION_PLACEHOLDER


def test_normalize_text_drops_underscores():
    assert normalize_text("Hello_World 42") == "helloworld 42"


def test_tokenize():
    assert tokenize("new_york city") == ["new_york", "city"]
