"""Serialisable model inputs and proofs, stored as JSON."""

from __future__ import annotations

import json
import math
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

__all__ = ["ModelInput", "Proof"]

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1

PathLike = str | os.PathLike[str]


def _require(data: Mapping[str, Any], key: str) -> Any:
    if not isinstance(data, Mapping):
        raise ValueError("expected a JSON object")
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field `{key}`") from None


def _list_of_lists(value: Any, name: str, convert: Any) -> list[list[Any]]:
    if not isinstance(value, list):
        raise ValueError(f"field `{name}` must be a list of lists")
    rows = []
    for row in value:
        if not isinstance(row, list):
            raise ValueError(f"field `{name}` must be a list of lists")
        rows.append([convert(item, name) for item in row])
    return rows


def _as_float(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"field `{name}` must hold numbers, got {value!r}")
    return float(value)


def _as_int(value: Any, name: str, low: int, high: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field `{name}` must hold integers, got {value!r}")
    if not low <= value <= high:
        raise ValueError(f"field `{name}` value {value} out of range [{low}, {high}]")
    return value


def _as_usize(value: Any, name: str) -> int:
    return _as_int(value, name, 0, 2**64 - 1)


def _as_i32(value: Any, name: str) -> int:
    return _as_int(value, name, _I32_MIN, _I32_MAX)


def _json_float(value: float) -> float | None:
    # JSON has no NaN or infinity; they are written as null.
    return value if math.isfinite(value) else None


def _read_json(path: PathLike) -> Any:
    with open(path, encoding="utf-8") as handle:
        return json.load(handle)


@dataclass
class ModelInput:
    """Float inputs with their shapes, and the expected float outputs, of a model."""

    input_data: list[list[float]] = field(default_factory=list)
    input_shapes: list[list[int]] = field(default_factory=list)
    output_data: list[list[float]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ModelInput":
        """Build from a decoded JSON object; raises ValueError on malformed data."""
        return cls(
            input_data=_list_of_lists(_require(data, "input_data"), "input_data", _as_float),
            input_shapes=_list_of_lists(
                _require(data, "input_shapes"), "input_shapes", _as_usize
            ),
            output_data=_list_of_lists(
                _require(data, "output_data"), "output_data", _as_float
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        """The JSON-ready representation."""
        return {
            "input_data": [[_json_float(x) for x in row] for row in self.input_data],
            "input_shapes": [list(row) for row in self.input_shapes],
            "output_data": [[_json_float(x) for x in row] for row in self.output_data],
        }

    @classmethod
    def load(cls, path: PathLike) -> "ModelInput":
        """Read a JSON-serialised model input from `path`."""
        return cls.from_dict(_read_json(path))


@dataclass
class Proof:
    """A proof as bytes together with the public inputs it was made for."""

    public_inputs: list[list[int]] = field(default_factory=list)
    proof: bytes = b""

    def __post_init__(self) -> None:
        self.proof = bytes(self.proof)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Proof":
        """Build from a decoded JSON object; raises ValueError on malformed data."""
        public_inputs = _list_of_lists(
            _require(data, "public_inputs"), "public_inputs", _as_i32
        )
        raw = _require(data, "proof")
        if not isinstance(raw, list):
            raise ValueError("field `proof` must be a list of bytes")
        proof = bytes(_as_int(b, "proof", 0, 255) for b in raw)
        return cls(public_inputs=public_inputs, proof=proof)

    def to_dict(self) -> dict[str, Any]:
        """The JSON-ready representation; the proof bytes become a list of integers."""
        return {
            "public_inputs": [list(row) for row in self.public_inputs],
            "proof": list(self.proof),
        }

    def save(self, path: PathLike) -> None:
        """Write the proof as compact JSON to `path`."""
        text = json.dumps(self.to_dict(), separators=(",", ":"))
        with open(path, "w", encoding="utf-8") as handle:
            handle.write(text)

    @classmethod
    def load(cls, path: PathLike) -> "Proof":
        """Read a JSON-serialised proof from `path`."""
        return cls.from_dict(_read_json(path))