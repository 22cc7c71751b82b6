from nearwords.query import resolve_query


def test_whole_phrase_wins(make_table):
    table = make_table([("new_york", [1.0, 0.0]), ("new", [0.0, 1.0]), ("york", [1.0, 1.0])])
    query = resolve_query(table, "New_York")
    assert query.ids == [0]
    assert query.normalized == "new_york"


def test_falls_back_to_tokens(animals):
    query = resolve_query(animals, "Cat, horse & DOG cat")
    assert query.ids == [0, 1, 0]
    assert query.missing == ["horse"]
    assert query.resolved


def test_nothing_resolves(animals):
    query = resolve_query(animals, "!!!")
    assert not query.resolved
    assert query.normalized == "#PUNC#"


def test_repeated_token_weighs_more(animals):
    query = resolve_query(animals, "dog dog bird")
    assert query.ids == [1, 1, 2]
