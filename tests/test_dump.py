"""Tests for deep rendering of events and contexts."""

from enum import Enum
from pathlib import Path

from launcher.dump import render


class Point:
    __slots__ = ("x", "y")

    def __init__(self, x, y):
        self.x = x
        self.y = y


class Node:
    def __init__(self, name, child=None):
        self.name = name
        self.child = child


class Color(Enum):
    RED = 1


def test_render_scalars():
    """Test scalars are rendered with repr."""
    assert render("a") == "'a'"
    assert render(3) == "3"
    assert render(None) == "None"
    assert render(True) == "True"


def test_render_short_mapping_on_one_line():
    """Test small structures stay on one line."""
    assert render({"port": 8080}) == "{'port': 8080}"
    assert render([1, (2,), {"a": []}]) == "[1, (2,), {'a': []}]"


def test_render_empty_containers():
    """Test empty containers."""
    assert render({}) == "{}"
    assert render([]) == "[]"
    assert render(()) == "()"
    assert render(set()) == "set()"


def test_render_does_not_truncate_deep_nesting():
    """Test every level of a deeply nested value is shown."""
    value = {"leaf": "bottom"}
    for i in range(20):
        value = {f"level{i}": value}

    text = render(value)

    assert "'bottom'" in text
    assert "level0" in text and "level19" in text


def test_render_long_values_span_lines():
    """Test wide structures are indented one item per line."""
    value = {"key": "x" * 100, "other": [1, 2]}

    assert render(value) == (
        "{\n"
        f"  'key': '{'x' * 100}',\n"
        "  'other': [1, 2],\n"
        "}"
    )


def test_render_objects_by_attributes():
    """Test plain objects show their instance attributes."""
    assert render(Node("a", Node("b"))) == "Node(name='a', child=Node(name='b', child=None))"


def test_render_slotted_objects():
    """Test objects with __slots__ show their slots."""
    assert render(Point(1, 2)) == "Point(x=1, y=2)"


def test_render_enum_and_callables_opaque():
    """Test enums, classes and functions fall back to repr."""
    assert render(Color.RED) == repr(Color.RED)
    assert render(Node) == repr(Node)
    assert render(len) == repr(len)


def test_render_detects_cycles():
    """Test self-referencing values terminate."""
    value = {"name": "loop"}
    value["self"] = value

    assert render(value) == "{'name': 'loop', 'self': <Circular>}"


def test_render_object_cycle():
    """Test object graphs with cycles terminate."""
    a = Node("a")
    b = Node("b", a)
    a.child = b

    assert "<Circular>" in render(a)


def test_render_shared_reference_is_not_a_cycle():
    """Test the same object appearing twice is rendered twice."""
    shared = [1]

    assert render({"a": shared, "b": shared}) == "{'a': [1], 'b': [1]}"


def test_render_max_depth_guard():
    """Test nesting beyond max_depth is elided."""
    assert render({"a": {"b": {"c": 1}}}, max_depth=2) == "{'a': {'b': {...}}}"
    assert render([[[]]], max_depth=0) == "[...]"


def test_render_uses_own_repr():
    """Test objects with their own __repr__ are not expanded into internals."""
    path = Path("/var/task/uniqueport")

    assert render(path) == repr(path)
    assert render({"exe": path}) == f"{{'exe': {path!r}}}"
