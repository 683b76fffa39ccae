"""
Pytest configuration and shared fixtures for jsonraw tests.

Provides immutable test data fixtures covering every value kind the
serializers distinguish, plus the space arguments used for parity checks.
"""

import math
from dataclasses import dataclass
from enum import IntEnum
from enum import StrEnum
from typing import Any

import pytest

from jsonraw import UNDEFINED


@dataclass(frozen=True)
class StringifyTestCase:
    """
    Immutable container for serialization test case data.

    Holds the input value, the space argument and the expected text.
    """

    description: str
    value: Any
    expected: str | None
    space: Any = None


class Level(IntEnum):
    LOW = 1
    HIGH = 2


class Color(StrEnum):
    RED = "red"


class Tagged:
    """Object serialized through its ``to_json`` method."""

    def __init__(self, tag: str) -> None:
        self.tag = tag

    def to_json(self, key: str) -> dict[str, str]:
        return {"tag": self.tag, "key": key}


def identity(arg: Any) -> Any:
    return arg


@pytest.fixture
def mixed_value() -> dict[Any, Any]:
    """
    Provides a mapping holding every kind of value and key.

    Mirrors the mixed object used to compare the raw engine against the
    reference algorithm, including index-like keys out of insertion order.
    """
    return {
        "undefined": UNDEFINED,
        "null": None,
        "true": True,
        "false": False,
        "IntEnum(2)": Level.HIGH,
        1: 1,
        0: 0,
        0.5: 0.5,
        "Infinity": math.inf,
        "-Infinity": -math.inf,
        "NaN": math.nan,
        "StrEnum(red)": Color.RED,
        "text": 'quote " backslash \\ newline \n control \x01 é',
        "emptyObj": {},
        "emptyArray": [],
        "sparseArray": [1, UNDEFINED, None],
        "tuple": (True, UNDEFINED, 1),
        "nested": {"10": "ten", "2": "two", "b": [{"c": None}]},
        "tagged": Tagged("x"),
        "function": identity,
        "lambda": lambda arg: arg,
        2.5: "float key",
        None: "none key",
    }


@pytest.fixture
def space_options() -> list[Any]:
    """
    Provides space arguments covering numbers, text and ignored kinds.
    """
    return [
        None,
        2,
        Level.HIGH,
        2.6,
        15,
        -1,
        0,
        math.inf,
        math.nan,
        True,
        "X",
        Color.RED,
        "",
        "XXXXXXXXXXXXXXX",
        ["ignored"],
    ]


@pytest.fixture
def basic_cases() -> list[StringifyTestCase]:
    """
    Provides values with known serializations under default handling.
    """
    return [
        StringifyTestCase("null", None, "null"),
        StringifyTestCase("true", True, "true"),
        StringifyTestCase("false", False, "false"),
        StringifyTestCase("integer", 42, "42"),
        StringifyTestCase("big integer", 2**70, "1180591620717411303424"),
        StringifyTestCase("negative float", -2.5, "-2.5"),
        StringifyTestCase("nan", math.nan, "null"),
        StringifyTestCase("infinity", -math.inf, "null"),
        StringifyTestCase("IntEnum", Level.LOW, "1"),
        StringifyTestCase("StrEnum", Color.RED, '"red"'),
        StringifyTestCase("string", 'a"b', '"a\\"b"'),
        StringifyTestCase("absent", UNDEFINED, None),
        StringifyTestCase("function", identity, None),
        StringifyTestCase("empty list", [], "[]"),
        StringifyTestCase("empty dict", {}, "{}"),
        StringifyTestCase("empty list indented", [], "[]", 2),
        StringifyTestCase("empty dict indented", {}, "{}", 2),
        StringifyTestCase(
            "absent in list", [UNDEFINED, identity], "[null,null]"
        ),
        StringifyTestCase(
            "absent in dict",
            {"a": UNDEFINED, "b": identity, "c": 1},
            '{"c":1}',
        ),
        StringifyTestCase(
            "nested indented",
            {"a": [1, "x", None, True], "b": {"c": 1.5}},
            '{\n  "a": [\n    1,\n    "x",\n    null,\n    true\n  ],\n'
            '  "b": {\n    "c": 1.5\n  }\n}',
            2,
        ),
        StringifyTestCase(
            "text indent",
            [{"a": 1}],
            '[\n--{\n----"a": 1\n--}\n]',
            "--",
        ),
        StringifyTestCase(
            "index keys first",
            {"b": 1, "2": 2, "a": 3, "1": 4, 10: 5, "01": 6},
            '{"1":4,"2":2,"10":5,"b":1,"a":3,"01":6}',
        ),
        StringifyTestCase(
            "converted keys",
            {True: 1, None: 2, 1.5: 3, Level.HIGH: 4},
            '{"2":4,"true":1,"null":2,"1.5":3}',
        ),
    ]
