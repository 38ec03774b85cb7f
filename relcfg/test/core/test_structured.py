from __future__ import annotations

from relcfg.core.structured import as_obj_list, as_str_dict, get_str, get_table, truthy


def test_as_str_dict_rejects_non_string_keys() -> None:
    assert as_str_dict({"a": 1}) == {"a": 1}
    assert as_str_dict({1: "a"}) is None
    assert as_str_dict(["a"]) is None


def test_as_obj_list_accepts_tuples() -> None:
    assert as_obj_list(("a", "b")) == ["a", "b"]
    assert as_obj_list("ab") is None


def test_get_str_strips_and_drops_empty() -> None:
    table: dict[str, object] = {"a": "  x ", "b": "   ", "c": 3}
    assert get_str(table, "a") == "x"
    assert get_str(table, "b") is None
    assert get_str(table, "c") is None
    assert get_str(table, "missing") is None


def test_get_table() -> None:
    table: dict[str, object] = {"t": {"k": 1}, "s": "x"}
    assert get_table(table, "t") == {"k": 1}
    assert get_table(table, "s") is None


def test_truthy_follows_json_semantics() -> None:
    assert not truthy(None)
    assert not truthy("")
    assert not truthy([])
    assert not truthy({})
    assert not truthy(0)
    assert not truthy(False)
    assert truthy("jest")
    assert truthy({"registry": "x"})
    assert truthy(True)
