"""
JSON stringify with a replacer that emits raw serialized text.

Follows the standard stringify algorithm, but a replacer function returns the
already-serialized text for a value instead of a replacement value. This
allows output the standard encoding cannot express, such as ``NaN`` markers or
numbers formatted with custom precision.
"""

import os
import time
from collections.abc import Callable
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from enum import Enum
from typing import IO
from typing import Any
from typing import TypeAlias

from ._reference import MAX_GAP
from ._reference import UNDEFINED
from ._reference import CircularReferenceError
from ._reference import TraversalStack
from ._reference import apply_to_json
from ._reference import compute_gap
from ._reference import is_container
from ._reference import item_at
from ._reference import join_entries
from ._reference import own_keys
from ._reference import quote
from ._reference import reference_stringify
from ._reference import scalar_text
from ._reference import unwrap_primitive

__version__ = "0.1.0"

# Replacers receive the holder first, then the property name and its value
Replacer: TypeAlias = Callable[[Any, str, Any], str | bool | None]
# Non-callable replacers are forwarded to the reference algorithm
ReplacerOrFilter: TypeAlias = (
    Replacer | list[str | int | float] | tuple[str | int | float, ...] | None
)
Space: TypeAlias = int | float | str | None

# Profiling infrastructure - zero-cost when disabled
PROFILE_HOT_PATHS = __debug__ and "JSONRAW_PROFILE" in os.environ


@dataclass
class HotPathStats:
    """Statistics for profiling hot paths during serialization."""

    function_name: str
    call_count: int = 0
    total_time_ns: int = 0
    entries_emitted: int = 0

    def record_call(self, duration_ns: int, entries: int = 0) -> None:
        """Records a function call with timing and emitted entry count."""
        self.call_count += 1
        self.total_time_ns += duration_ns
        self.entries_emitted += entries


if PROFILE_HOT_PATHS:
    _hot_path_stats: dict[str, HotPathStats] = {}

    class ProfileContext:
        """Context manager for profiling hot paths."""

        def __init__(self, func_name: str, entries: int = 0):
            self.func_name = func_name
            self.entries = entries
            self.start_time = 0

        def __enter__(self) -> "ProfileContext":
            self.start_time = time.perf_counter_ns()
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            duration = time.perf_counter_ns() - self.start_time
            if self.func_name not in _hot_path_stats:
                _hot_path_stats[self.func_name] = HotPathStats(self.func_name)
            _hot_path_stats[self.func_name].record_call(duration, self.entries)

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        """Returns current profiling statistics."""
        return _hot_path_stats.copy()

    def clear_hot_path_stats() -> None:
        """Clears profiling statistics."""
        _hot_path_stats.clear()

else:
    # Zero-cost in production - ignore arguments
    class ProfileContext:  # type: ignore[no-redef]
        def __init__(self, func_name: str, entries: int = 0) -> None:
            pass

        def __enter__(self) -> "ProfileContext":
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            pass

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        return {}

    def clear_hot_path_stats() -> None:
        pass


class ReplacerResponseError(TypeError):
    """
    Signals a replacer response outside the supported kinds.

    Replacers may return text, a boolean, or None/UNDEFINED; anything else
    aborts serialization. The offending value is kept on ``response``.
    """

    def __init__(self, response: Any) -> None:
        self.response = response
        super().__init__(
            f"replacer returned non-string, non-boolean value: {response!r}"
        )


class ResponseKind(Enum):
    """
    Meaning of a replacer response.

    LITERAL responses are emitted verbatim, EXCLUDE omits the property, and
    INCLUDE and DEFAULT both continue with standard serialization.
    """

    LITERAL = "literal"
    INCLUDE = "include"
    EXCLUDE = "exclude"
    DEFAULT = "default"


def classify_response(response: Any) -> ResponseKind:
    """Maps a replacer return value to its kind, rejecting anything else."""
    if response is False:
        return ResponseKind.EXCLUDE
    if isinstance(response, str):
        return ResponseKind.LITERAL
    if response is True:
        return ResponseKind.INCLUDE
    if response is None or response is UNDEFINED:
        return ResponseKind.DEFAULT
    raise ReplacerResponseError(response)


@dataclass(frozen=True)
class StringifyConfig:
    """
    Configures raw-text serialization with immutable settings.

    Holds the replacer function and the indentation unit derived from the
    caller's space argument.
    """

    replacer: Replacer
    gap: str = ""

    def __post_init__(self) -> None:
        if not callable(self.replacer):
            raise TypeError("replacer must be callable")
        if not isinstance(self.gap, str):
            raise TypeError("gap must be a string")
        if len(self.gap) > MAX_GAP:
            msg = f"gap must be at most {MAX_GAP} characters"
            raise ValueError(msg)

    @classmethod
    def from_arguments(
        cls, replacer: Replacer, space: Any
    ) -> "StringifyConfig":
        """Builds the configuration for a stringify call."""
        return cls(replacer=replacer, gap=compute_gap(space))


# Shared by nested stringify calls made from inside a replacer
_traversal_stack: ContextVar[TraversalStack | None] = ContextVar(
    "jsonraw_traversal_stack", default=None
)


@contextmanager
def _active_traversal_stack() -> Iterator[TraversalStack]:
    """Yields the stack of the outermost call, creating it if needed."""
    stack = _traversal_stack.get()
    if stack is not None:
        yield stack
        return

    stack = TraversalStack()
    token = _traversal_stack.set(stack)
    try:
        yield stack
    finally:
        _traversal_stack.reset(token)


def _emit_property(
    holder: Any,
    key: str,
    value: Any,
    config: StringifyConfig,
    stack: TraversalStack,
    indent: str,
) -> str | None:
    """
    Serializes one property of ``holder``, consulting the replacer first.

    The value's own ``to_json`` runs before the replacer, which then sees its
    result. Returns None when the property is omitted or has no JSON form.
    """
    value = apply_to_json(value, key)

    with ProfileContext("replacer"):
        response = config.replacer(holder, key, value)

    kind = classify_response(response)
    if kind is ResponseKind.EXCLUDE:
        return None
    if kind is ResponseKind.LITERAL:
        return unwrap_primitive(response)

    if not is_container(value):
        return scalar_text(value)

    with stack.descend(value):
        if isinstance(value, dict):
            return _emit_mapping(value, config, stack, indent)
        return _emit_sequence(value, config, stack, indent)


def _emit_sequence(
    sequence: list[Any] | tuple[Any, ...],
    config: StringifyConfig,
    stack: TraversalStack,
    indent: str,
) -> str:
    """Serializes every position of a sequence, using null for omissions."""
    with ProfileContext("emit_sequence", len(sequence)):
        new_indent = indent + config.gap
        entries = []
        for index in range(len(sequence)):
            text = _emit_property(
                sequence,
                str(index),
                item_at(sequence, index),
                config,
                stack,
                new_indent,
            )
            entries.append("null" if text is None else text)
        return join_entries(entries, "[]", config.gap, indent)


def _emit_mapping(
    mapping: dict[Any, Any],
    config: StringifyConfig,
    stack: TraversalStack,
    indent: str,
) -> str:
    """Serializes the properties of a mapping that produce output."""
    with ProfileContext("emit_mapping", len(mapping)):
        new_indent = indent + config.gap
        colon = ": " if config.gap else ":"
        entries = []
        for key, name in own_keys(mapping):
            text = _emit_property(
                mapping,
                name,
                mapping.get(key, UNDEFINED),
                config,
                stack,
                new_indent,
            )
            if text is not None:
                entries.append(f"{quote(name)}{colon}{text}")
        return join_entries(entries, "{}", config.gap, indent)


def stringify(
    value: Any, replacer: ReplacerOrFilter = None, space: Space = None
) -> str | None:
    """
    Serializes a value to JSON text, letting a replacer supply raw text.

    The replacer is called as ``replacer(holder, key, value)`` for the root
    (with key ``""``) and every nested property. It returns a string to emit
    verbatim, False to omit the property, or True/None to serialize the value
    normally. Without a callable replacer this is ``reference_stringify``.

    Returns None when the value has no representation.
    """
    if not callable(replacer):
        return reference_stringify(value, replacer, space)

    config = StringifyConfig.from_arguments(replacer, space)
    with _active_traversal_stack() as stack:
        return _emit_property({"": value}, "", value, config, stack, "")


def dump(
    value: Any,
    fp: IO[str],
    replacer: ReplacerOrFilter = None,
    space: Space = None,
) -> None:
    """
    Serializes a value to a file-like object.

    Nothing is written when the value has no representation.
    """
    if not hasattr(fp, "write"):
        raise TypeError("fp must have a write() method")

    text = stringify(value, replacer, space)
    if text is not None:
        fp.write(text)


__all__ = [
    "UNDEFINED",
    "CircularReferenceError",
    "HotPathStats",
    "ReplacerResponseError",
    "ResponseKind",
    "StringifyConfig",
    "TraversalStack",
    "classify_response",
    "clear_hot_path_stats",
    "compute_gap",
    "dump",
    "get_hot_path_stats",
    "quote",
    "reference_stringify",
    "stringify",
    "unwrap_primitive",
]
