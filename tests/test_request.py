from postbatch.request import FetchRequest


def test_requests_compare_and_hash_by_value() -> None:
    a = FetchRequest("http://example.com/api", [("id", "1"), ("q", "x")])
    b = FetchRequest("http://example.com/api", (("id", "1"), ("q", "x")))

    assert a == b
    assert hash(a) == hash(b)
    assert {a: "body"}[b] == "body"


def test_param_order_is_part_of_identity() -> None:
    a = FetchRequest("http://example.com/api", [("a", "1"), ("b", "2")])
    b = FetchRequest("http://example.com/api", [("b", "2"), ("a", "1")])

    assert a != b


def test_mapping_params_are_normalized_in_order() -> None:
    req = FetchRequest("http://example.com/api", {"a": 1, "b": "two"})

    assert req.params == (("a", "1"), ("b", "two"))


def test_param_lookup_returns_first_value_or_empty_string() -> None:
    req = FetchRequest("http://example.com/api", [("k", "1"), ("k", "2")])

    assert req.param("k") == "1"
    assert req.param("missing") == ""


def test_str_renders_query_string() -> None:
    assert str(FetchRequest("http://h/p")) == "http://h/p"
    assert str(FetchRequest("http://h/p", [("a", "1 2")])) == "http://h/p?a=1+2"
