"""
Standard JSON stringify transform.

Serializes values the way the well-known stringify algorithm does: compact
separators unless a space argument is given, ``null`` for non-finite numbers,
``to_json`` customization, value-replacing replacer functions and key
inclusion lists. The raw-text engine in ``jsonraw`` falls back to this when no
replacer function is supplied and uses its quoting and formatting primitives.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Any
from typing import Final

MAX_GAP: Final = 10
# Largest valid array index is 2**32 - 2
_ARRAY_INDEX_LIMIT: Final = 2**32 - 1
_PRIMITIVE_TYPES: Final = (bool, int, float, str)


class _Undefined(Enum):
    """Marker for an absent value, distinct from ``None`` (JSON null)."""

    UNDEFINED = "undefined"

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED: Final = _Undefined.UNDEFINED


class CircularReferenceError(ValueError):
    """
    Signals a container reached again while it is still being serialized.

    Holds the offending container so callers can report where the cycle
    closes.
    """

    def __init__(self, container: Any) -> None:
        self.container = container
        super().__init__("Circular reference detected")


class TraversalStack:
    """
    Containers currently being serialized, compared by identity.

    Only answers membership questions; the order of entries mirrors the
    recursion depth into containers.
    """

    def __init__(self) -> None:
        self._containers: list[Any] = []

    def __len__(self) -> int:
        return len(self._containers)

    def __contains__(self, container: Any) -> bool:
        return any(entry is container for entry in self._containers)

    @contextmanager
    def descend(self, container: Any) -> Iterator[None]:
        """Holds ``container`` on the stack for the duration of the block."""
        if container in self:
            raise CircularReferenceError(container)
        self._containers.append(container)
        try:
            yield
        finally:
            self._containers.pop()


def unwrap_primitive(value: Any) -> Any:
    """Converts instances of bool/int/float/str subclasses to the builtin."""
    if type(value) in _PRIMITIVE_TYPES or not isinstance(
        value, _PRIMITIVE_TYPES
    ):
        return value
    if isinstance(value, int):
        return int.__int__(value)
    if isinstance(value, float):
        return float.__float__(value)
    return str.__str__(value)


def compute_gap(space: Any) -> str:
    """Derives the per-level indentation unit from a space argument."""
    space = unwrap_primitive(space)
    if isinstance(space, bool):
        return ""
    if isinstance(space, int | float):
        # NaN compares false here as well
        if not space >= 1:
            return ""
        return " " * int(min(space, MAX_GAP))
    if isinstance(space, str):
        return space[:MAX_GAP]
    return ""


def number_text(number: int | float) -> str:
    """Encode numeric values, mapping NaN and infinities to null."""
    if isinstance(number, float) and not math.isfinite(number):
        return "null"
    return str(number)


def quote(value: Any) -> str:
    """Encode string with proper escape sequences."""
    if not isinstance(value, str):
        msg = f"Object of type {type(value).__name__} is not JSON serializable"
        raise TypeError(msg)

    result = ['"']
    for char in value:
        if char == '"':
            result.append('\\"')
        elif char == "\\":
            result.append("\\\\")
        elif char == "\b":
            result.append("\\b")
        elif char == "\f":
            result.append("\\f")
        elif char == "\n":
            result.append("\\n")
        elif char == "\r":
            result.append("\\r")
        elif char == "\t":
            result.append("\\t")
        elif char < " " or "\ud800" <= char <= "\udfff":
            result.append(f"\\u{ord(char):04x}")
        else:
            result.append(char)
    result.append('"')
    return "".join(result)


def key_text(key: Any) -> str:
    """Converts a mapping key to the property name used in the output."""
    key = unwrap_primitive(key)
    if isinstance(key, str):
        return key
    if key is True:
        return "true"
    if key is False:
        return "false"
    if key is None:
        return "null"
    if isinstance(key, int | float):
        return str(key)
    msg = f"keys must be str, int, float, bool or None, not {type(key).__name__}"
    raise TypeError(msg)


def _array_index(name: str) -> int | None:
    """Returns the index a property name denotes, or None if it is no index."""
    if not (name.isascii() and name.isdigit()):
        return None
    if len(name) > 1 and name.startswith("0"):
        return None
    index = int(name)
    return index if index < _ARRAY_INDEX_LIMIT else None


def own_keys(mapping: dict[Any, Any]) -> list[tuple[Any, str]]:
    """
    Lists a mapping's keys with their property names in enumeration order.

    Names that are canonical array indices come first in ascending numeric
    order, followed by all other names in insertion order.
    """
    indexed: list[tuple[int, Any, str]] = []
    named: list[tuple[Any, str]] = []
    for key in list(mapping):
        name = key_text(key)
        index = _array_index(name)
        if index is None:
            named.append((key, name))
        else:
            indexed.append((index, key, name))

    indexed.sort(key=lambda entry: entry[0])
    return [(key, name) for _, key, name in indexed] + named


def item_at(sequence: list[Any] | tuple[Any, ...], index: int) -> Any:
    """Reads a sequence position, treating positions past the end as absent."""
    return sequence[index] if index < len(sequence) else UNDEFINED


def apply_to_json(value: Any, key: str) -> Any:
    """Replaces an object with the result of its ``to_json(key)`` method."""
    if value is None or type(value) in _PRIMITIVE_TYPES:
        return value
    if isinstance(value, type):
        return value
    to_json = getattr(value, "to_json", None)
    if callable(to_json):
        return to_json(key)
    return value


def is_container(value: Any) -> bool:
    """Checks whether a value serializes as an array or an object."""
    return isinstance(value, list | tuple | dict) and not callable(value)


def scalar_text(value: Any) -> str | None:
    """
    Serializes a value that is not a container.

    Returns None for values with no JSON form (absent values and callables),
    which omits them from objects and turns them into null inside arrays.
    """
    if value is None:
        return "null"

    value = unwrap_primitive(value)
    if value is UNDEFINED or callable(value):
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return number_text(value)
    return quote(value)


def join_entries(
    entries: list[str], brackets: str, gap: str, indent: str
) -> str:
    """Wraps serialized entries in brackets with optional indentation."""
    if not entries:
        return brackets

    opening, closing = brackets
    if not gap:
        return opening + ",".join(entries) + closing

    new_indent = indent + gap
    separator = ",\n" + new_indent
    return (
        f"{opening}\n{new_indent}{separator.join(entries)}\n{indent}{closing}"
    )


@dataclass
class _ReferenceState:
    """Settings and cycle tracking for one reference serialization."""

    replacer: Callable[[Any, str, Any], Any] | None
    property_list: list[str] | None
    gap: str
    stack: TraversalStack = field(default_factory=TraversalStack)


def _property_list(names: list[Any] | tuple[Any, ...]) -> list[str]:
    """Builds the inclusion list from str and number items, dropping repeats."""
    result: list[str] = []
    for item in names:
        item = unwrap_primitive(item)
        if isinstance(item, bool) or not isinstance(item, str | int | float):
            continue
        name = key_text(item)
        if name not in result:
            result.append(name)
    return result


def _serialize_property(
    holder: Any, key: str, value: Any, state: _ReferenceState, indent: str
) -> str | None:
    value = apply_to_json(value, key)
    if state.replacer is not None:
        value = state.replacer(holder, key, value)

    if not is_container(value):
        return scalar_text(value)

    with state.stack.descend(value):
        if isinstance(value, dict):
            return _serialize_object(value, state, indent)
        return _serialize_array(value, state, indent)


def _serialize_array(
    array: list[Any] | tuple[Any, ...], state: _ReferenceState, indent: str
) -> str:
    new_indent = indent + state.gap
    entries = []
    for index in range(len(array)):
        text = _serialize_property(
            array, str(index), item_at(array, index), state, new_indent
        )
        entries.append("null" if text is None else text)
    return join_entries(entries, "[]", state.gap, indent)


def _serialize_object(
    mapping: dict[Any, Any], state: _ReferenceState, indent: str
) -> str:
    new_indent = indent + state.gap
    if state.property_list is None:
        keys = own_keys(mapping)
    else:
        by_name = {name: key for key, name in own_keys(mapping)}
        keys = [
            (by_name[name], name)
            for name in state.property_list
            if name in by_name
        ]

    entries = []
    for key, name in keys:
        text = _serialize_property(
            mapping, name, mapping.get(key, UNDEFINED), state, new_indent
        )
        if text is not None:
            colon = ": " if state.gap else ":"
            entries.append(f"{quote(name)}{colon}{text}")
    return join_entries(entries, "{}", state.gap, indent)


def reference_stringify(
    value: Any, replacer: Any = None, space: Any = None
) -> str | None:
    """
    Serializes a value with the standard stringify algorithm.

    A callable replacer is called as ``replacer(holder, key, value)`` and its
    return value replaces the value; returning ``UNDEFINED`` omits it. A list
    or tuple replacer names the object keys to include, in output order.
    Returns None when the value itself has no JSON form.
    """
    property_list = None
    if not callable(replacer):
        if isinstance(replacer, list | tuple):
            property_list = _property_list(replacer)
        replacer = None

    state = _ReferenceState(replacer, property_list, compute_gap(space))
    return _serialize_property({"": value}, "", value, state, "")
