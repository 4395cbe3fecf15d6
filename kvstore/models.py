"""
File: kvstore/models.py
Value types stored by the KV store and the rules for turning request bodies
into values and values into response bodies.
"""
import json
import math
from typing import Any, Dict, Literal, Union

from pydantic import BaseModel, Field

JSON_WHITESPACE = " \t\n\r"

# Escaped in every JSON response body
_HTML_ESCAPES = str.maketrans({
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
})


class RawValue(BaseModel):
    """Uninterpreted text payload."""
    kind: Literal["raw"] = "raw"
    text: str = Field(..., description="Request body as text")

    def to_json(self) -> Any:
        return self.text


class StructuredValue(BaseModel):
    """Payload that decoded to a JSON object."""
    kind: Literal["structured"] = "structured"
    data: Dict[str, Any] = Field(..., description="Decoded JSON object")

    def to_json(self) -> Any:
        return self.data


Value = Union[RawValue, StructuredValue]


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON literal: {name}")


def _parse_finite_float(literal: str) -> float:
    value = float(literal)
    if not math.isfinite(value):
        raise ValueError(f"number out of range: {literal}")
    return value


_decoder = json.JSONDecoder(parse_constant=_reject_constant, parse_float=_parse_finite_float)


def decode_body(body: bytes) -> Value:
    """
    Decide how a write body is stored.

    The first JSON value in the body is decoded; anything after it is ignored.
    Only a JSON object becomes a StructuredValue. Invalid JSON, JSON that is
    not an object, numbers too large for a float and empty bodies are kept
    verbatim as a RawValue.

    Args:
        body: Raw request body

    Returns:
        Value: The value to store
    """
    text = body.decode("utf-8", errors="replace")

    try:
        data, _ = _decoder.raw_decode(text.lstrip(JSON_WHITESPACE))
    except (ValueError, RecursionError):
        return RawValue(text=text)

    if not isinstance(data, dict):
        return RawValue(text=text)

    return StructuredValue(data=data)


def encode_json(payload: Any) -> str:
    """
    Encode a payload as a compact, newline-terminated JSON document.

    Raises:
        TypeError: payload contains a type JSON cannot represent
        ValueError: payload contains NaN or an infinity
    """
    encoded = json.dumps(payload, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    return encoded.translate(_HTML_ESCAPES) + "\n"
