"""Deep text rendering of arbitrary values for the invocation log."""

from collections.abc import Mapping
from enum import Enum
from typing import Any, List, Optional, Tuple

INDENT = "  "
WIDTH = 80

_SCALARS = (str, bytes, bytearray, int, float, complex, bool, type(None))


def render(value: Any, max_depth: int = 64) -> str:
    """
    Render a value with all of its nested structure.

    Mappings, sequences, sets and plain objects (through their instance
    attributes) are expanded recursively. Objects with their own __repr__
    are shown through it. A value that contains itself is
    rendered as ``<Circular>``; nesting beyond ``max_depth`` is elided.

    Args:
        value: Anything, typically a Lambda event or context
        max_depth: Deepest container level that is still expanded

    Returns:
        Rendered text, single-line when it fits in ``WIDTH`` columns
    """
    return _Renderer(max_depth).render(value, 0)


class _Renderer:
    def __init__(self, max_depth: int):
        self.max_depth = max_depth
        self._path: set = set()

    def render(self, value: Any, level: int) -> str:
        if isinstance(value, _SCALARS):
            return repr(value)
        if id(value) in self._path:
            return "<Circular>"

        split = self._split(value, level)
        if split is None:
            return repr(value)
        opener, closer, items = split

        if not items:
            return opener + closer
        if level >= self.max_depth:
            return f"{opener}...{closer}"

        self._path.add(id(value))
        try:
            parts = [prefix + self.render(item, level + 1) for prefix, item in items]
        finally:
            self._path.discard(id(value))

        if isinstance(value, tuple) and len(parts) == 1:
            parts[0] += ","
        return self._join(opener, closer, parts, level)

    def _split(
        self, value: Any, level: int
    ) -> Optional[Tuple[str, str, List[Tuple[str, Any]]]]:
        """Return (opener, closer, [(prefix, child)]) or None for opaque values."""
        if isinstance(value, Mapping):
            items = [
                (f"{self.render(key, level + 1)}: ", item)
                for key, item in value.items()
            ]
            return "{", "}", items
        if isinstance(value, list):
            return "[", "]", [("", item) for item in value]
        if isinstance(value, tuple):
            return "(", ")", [("", item) for item in value]
        if isinstance(value, (set, frozenset)):
            if not value:
                return None
            return "{", "}", [("", item) for item in value]

        if isinstance(value, (type, Enum)) or callable(value):
            return None
        if type(value).__repr__ is not object.__repr__:
            return None
        attrs = _instance_attributes(value)
        if attrs is None:
            return None
        name = type(value).__name__
        return f"{name}(", ")", [(f"{key}=", item) for key, item in attrs.items()]

    @staticmethod
    def _join(opener: str, closer: str, parts: List[str], level: int) -> str:
        one_line = opener + ", ".join(parts) + closer
        if "\n" not in one_line and len(INDENT * level) + len(one_line) <= WIDTH:
            return one_line

        inner = INDENT * (level + 1)
        body = ",\n".join(inner + part for part in parts)
        return f"{opener}\n{body},\n{INDENT * level}{closer}"


def _instance_attributes(value: Any) -> Optional[dict]:
    try:
        return dict(vars(value))
    except TypeError:
        pass

    slots = []
    for cls in type(value).__mro__:
        declared = cls.__dict__.get("__slots__", ())
        slots.extend([declared] if isinstance(declared, str) else declared)
    if not slots:
        return None
    return {
        slot: getattr(value, slot)
        for slot in slots
        if not slot.startswith("__") and hasattr(value, slot)
    }
