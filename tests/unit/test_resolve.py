"""Unit tests for runtime helpers: path resolution, output and comparison."""

import pytest

from vellum import ABSENT, resolve
from vellum.template.helpers import compare, default, iter_items, split_path, str_safe


class TestResolve:
    def test_dotted_string(self):
        assert resolve({"user": {"tags": ["a", "b"]}}, "user.tags.1") == "b"

    def test_segments(self):
        assert resolve({"a": {"b": 1}}, ("a", "b")) == 1

    def test_whitespace_around_segments(self):
        assert resolve({"a": {"b": 1}}, " a . b ") == 1

    @pytest.mark.parametrize(
        "path",
        ["missing", "user.missing", "user.tags.9", "user.tags.x", "user.name.first", "none.x"],
    )
    def test_missing_is_absent(self, path):
        ctx = {"user": {"tags": ["a"], "name": "Ada"}, "none": None}
        assert resolve(ctx, path) is ABSENT

    def test_none_value_is_returned(self):
        assert resolve({"a": None}, "a") is None

    def test_tuple_index(self):
        assert resolve({"t": ("x", "y")}, "t.0") == "x"

    def test_split_path(self):
        assert split_path("a.b.c") == ("a", "b", "c")


class TestAbsent:
    def test_singleton_and_falsy(self):
        assert type(ABSENT)() is ABSENT
        assert not ABSENT
        assert str(ABSENT) == ""
        assert repr(ABSENT) == "ABSENT"


class TestStrSafe:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(None, ""), (ABSENT, ""), ("x", "x"), (3, "3"), (False, "False")],
    )
    def test_conversion(self, value, expected):
        assert str_safe(value) == expected


class TestDefault:
    def test_coalesces(self):
        assert default(ABSENT, "x") == "x"
        assert default(None, "x") == "x"
        assert default(0, "x") == 0


class TestCompare:
    @pytest.mark.parametrize(
        ("op", "left", "right", "expected"),
        [
            ("==", 1, 1, True),
            ("!=", "a", "b", True),
            ("<", 1, 2, True),
            ("<=", 2, 2, True),
            (">", 1, 2, False),
            (">=", 3, 2, True),
            ("==", ABSENT, None, True),
            (">", ABSENT, 1, False),
            ("<", 1, None, False),
        ],
    )
    def test_operators(self, op, left, right, expected):
        assert compare(op, left, right) is expected

    def test_incompatible_types_raise(self):
        with pytest.raises(TypeError):
            compare("<", "a", 1)

    def test_unknown_operator(self):
        with pytest.raises(ValueError):
            compare("<>", 1, 2)


class TestIterItems:
    def test_collections(self):
        assert list(iter_items([1, 2])) == [1, 2]
        assert list(iter_items({"a": 1, "b": 2})) == [1, 2]

    @pytest.mark.parametrize("value", ["abc", 5, None, ABSENT])
    def test_non_collections(self, value):
        assert list(iter_items(value)) == []
