"""
Memory usage benchmarks for JSON encoding.

Measures peak memory consumption while encoding across different JSON
libraries and the jsonraw engines.
"""

import json
import tracemalloc
from typing import Any

import orjson
import ujson  # type: ignore[import-untyped]

import jsonraw
from benchmarks.data_generators import generate_test_data

DATA_TYPES = [
    "small_object",
    "large_object",
    "mixed_array",
    "nested_structure",
    "string_heavy",
]


def measure_memory_usage(func: Any, *args: Any) -> tuple[Any, int]:
    """
    Measures peak memory usage during function execution.

    Returns:
        Tuple of (function_result, peak_memory_bytes)
    """
    tracemalloc.start()
    try:
        result = func(*args)
        current, peak = tracemalloc.get_traced_memory()
        return result, peak
    finally:
        tracemalloc.stop()


def _pass_through(holder: Any, key: str, value: Any) -> None:
    return None


class TestMemoryUsage:
    """Memory usage benchmarks for JSON encoding."""

    def test_memory_comparison_summary(self) -> None:
        """Generates a memory usage comparison across encoders."""
        encoders = {
            "stdlib_json": json.dumps,
            "orjson": orjson.dumps,
            "ujson": ujson.dumps,
            "reference": jsonraw.reference_stringify,
            "jsonraw": lambda value: jsonraw.stringify(value, _pass_through),
        }
        results: dict[str, dict[str, int]] = {}

        for data_type in DATA_TYPES:
            test_data = generate_test_data(data_type)
            results[data_type] = {}
            for name, encode in encoders.items():
                result, peak = measure_memory_usage(encode, test_data)
                assert result
                results[data_type][name] = peak

        # Print comparison table
        print("\n" + "=" * 80)
        print("MEMORY USAGE COMPARISON (bytes)")
        print("=" * 80)
        print(f"{'Data Type':<20}" + "".join(f"{n:<12}" for n in encoders))
        print("-" * 80)
        for data_type, measurements in results.items():
            print(
                f"{data_type:<20}"
                + "".join(f"{measurements[n]:<12,}" for n in encoders)
            )
        print("=" * 80)

        # Calculate and display efficiency ratios
        print("\nMEMORY EFFICIENCY vs stdlib_json")
        print("-" * 40)
        for data_type, measurements in results.items():
            baseline = measurements["stdlib_json"]
            ratios = " ".join(
                f"{name}={measurements[name] / baseline:.2f}x"
                for name in encoders
                if name != "stdlib_json"
            )
            print(f"{data_type}: {ratios}")

        assert len(results) == len(DATA_TYPES)
