from __future__ import annotations

from relflow.core.structured import as_obj_list, as_str_dict, get_int, get_str, get_str_list


def test_as_str_dict() -> None:
    assert as_str_dict({"a": 1}) == {"a": 1}
    assert as_str_dict({1: "a"}) is None
    assert as_str_dict([1]) is None


def test_as_obj_list() -> None:
    assert as_obj_list([1, "a"]) == [1, "a"]
    assert as_obj_list("a") is None


def test_get_str_strips_and_rejects_blank() -> None:
    assert get_str({"k": "  v  "}, "k") == "v"
    assert get_str({"k": "   "}, "k") is None
    assert get_str({"k": 3}, "k") is None


def test_get_int_rejects_bool() -> None:
    assert get_int({"k": 4}, "k") == 4
    assert get_int({"k": True}, "k") is None


def test_get_str_list() -> None:
    assert get_str_list({"k": ["a", "b"]}, "k") == ["a", "b"]
    assert get_str_list({"k": "a"}, "k") is None
