"""
Document generators for parsing benchmarks.

Every generator is seeded so runs compare the same documents. Strings only
use escapes both the lenient and the strict grammar accept, and avoid
``\\u`` sequences, which jvariant keeps undecoded.
"""

import json
import random
import string
from collections.abc import Callable
from typing import Any

_SEED = 20240115
_SAFE_ESCAPES = ['\\"', "\\\\", "\\/", "\\b", "\\f", "\\n", "\\r", "\\t"]


def generate_test_data(data_type: str) -> str:
    """Returns the benchmark document named by ``data_type``."""
    generators: dict[str, Callable[[random.Random], Any]] = {
        "small_object": _small_object,
        "mixed_array": _mixed_array,
        "nested_structure": _nested_structure,
        "escape_heavy": _escape_heavy,
        "wide_array": _wide_array,
    }

    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    rng = random.Random(_SEED)
    data = generators[data_type](rng)
    # Escape-heavy content is built as raw JSON text already.
    return data if isinstance(data, str) else json.dumps(data)


def _word(rng: random.Random, length: int) -> str:
    return "".join(rng.choices(string.ascii_letters, k=length))


def _small_object(rng: random.Random) -> dict[str, Any]:
    return {
        "math": True,
        "english": "good",
        "score": 87,
        "ratio": 0.875,
        "tags": ["a", "b", "c"],
        "notes": None,
    }


def _scalar(rng: random.Random) -> Any:
    match rng.randrange(5):
        case 0:
            return rng.randint(-(2**31), 2**31 - 1)
        case 1:
            return round(rng.uniform(-1e6, 1e6), 4)
        case 2:
            return _word(rng, rng.randint(3, 24))
        case 3:
            return rng.random() < 0.5
        case _:
            return None


def _mixed_array(rng: random.Random) -> list[Any]:
    items: list[Any] = []
    for i in range(300):
        if i % 7 == 0:
            items.append({"index": i, "label": _word(rng, 8)})
        else:
            items.append(_scalar(rng))
    return items


def _nested_structure(rng: random.Random) -> dict[str, Any]:
    def level(depth: int) -> dict[str, Any]:
        if depth == 0:
            return {"leaf": _scalar(rng)}
        return {
            "depth": depth,
            "name": _word(rng, 6),
            "children": [level(depth - 1) for _ in range(2)],
        }

    return level(7)


def _escape_heavy(rng: random.Random) -> str:
    def escaped() -> str:
        return "".join(
            rng.choice(_SAFE_ESCAPES)
            if rng.random() < 0.3
            else rng.choice(string.ascii_letters + " ")
            for _ in range(60)
        )

    entries = ", ".join(f'"k{i}": "{escaped()}"' for i in range(80))
    return "{" + entries + "}"


def _wide_array(rng: random.Random) -> list[int]:
    return [rng.randint(0, 10_000) for _ in range(5_000)]
