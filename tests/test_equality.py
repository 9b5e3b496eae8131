"""Tests for structural equality and cloning."""

import re
from datetime import datetime

from frozendict import frozendict

from hookloop import clone, equals

VALUES = {
    "foo": "bar",
    "baz": {
        "re": re.compile("regex"),
        "now": datetime.now(),
        "buzz": ["BAZZINGA"],
    },
}


class TestEquals:
    def test_same_value_is_equal(self) -> None:
        assert equals(VALUES, VALUES)

    def test_arrays_of_different_length_differ(self) -> None:
        assert not equals([], [1])
        assert not equals([1, 2], [1])

    def test_nested_difference_is_detected(self) -> None:
        other = {
            "foo": "BAR",
            "baz": {
                "re": re.compile("nope"),
                "new": datetime(2000, 1, 1),
                "buzz": ["BAZZINGA", "!"],
            },
        }
        assert not equals(VALUES, other)

    def test_key_order_does_not_matter(self) -> None:
        a = {"x": 1, "y": [1, {"z": 2}]}
        b = {"y": [1, {"z": 2}], "x": 1}
        assert equals(a, b)

    def test_missing_key_differs(self) -> None:
        assert not equals({"x": 1}, {"x": 1, "y": None})

    def test_dict_and_frozendict_compare_structurally(self) -> None:
        assert equals({"a": 1}, frozendict(a=1))

    def test_list_and_tuple_differ(self) -> None:
        assert not equals([1, 2], (1, 2))

    def test_scalars_compare_by_value(self) -> None:
        assert equals(1, 1.0)
        assert equals("a", "a")
        assert equals(None, None)
        assert not equals(1, "1")
        assert not equals(None, [])

    def test_bool_is_not_a_number(self) -> None:
        assert not equals(True, 1)
        assert equals(False, False)

    def test_other_objects_compare_by_identity(self) -> None:
        class Point:
            def __init__(self, x: int) -> None:
                self.x = x

            def __eq__(self, other: object) -> bool:
                return isinstance(other, Point) and other.x == self.x

        p = Point(1)
        assert equals(p, p)
        assert not equals(p, Point(1))
        assert not equals(datetime(2000, 1, 1), datetime(2000, 1, 1))


class TestClone:
    def test_clone_is_equal_to_source(self) -> None:
        assert equals(clone(VALUES), VALUES)
        assert clone(VALUES) == VALUES

    def test_mutating_clone_leaves_source_untouched(self) -> None:
        source = {"items": [1, 2, {"deep": [3]}]}
        copy = clone(source)

        copy["items"].append(4)
        copy["items"][2]["deep"].append(5)
        copy["extra"] = True

        assert source == {"items": [1, 2, {"deep": [3]}]}

    def test_tuples_and_frozendicts_are_rebuilt(self) -> None:
        inner = [1]
        source = (inner, frozendict(k=inner))
        copy = clone(source)

        assert copy[0] is not inner
        assert copy[1]["k"] is not inner
        assert isinstance(copy[1], frozendict)

    def test_opaque_values_are_shared(self) -> None:
        pattern = re.compile("x")
        moment = datetime.now()
        marker = object()

        assert clone(pattern) is pattern
        assert clone(moment) is moment
        assert clone(marker) is marker
