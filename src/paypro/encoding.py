"""
Encoding utilities for the payment protocol
"""

import hashlib
import json
from typing import Any


def to_bytes(data: str | bytes) -> bytes:
    """Return data as bytes, encoding text as UTF-8"""
    if isinstance(data, str):
        return data.encode("utf-8")
    return data


def sha256_hex(data: str | bytes) -> str:
    """SHA-256 of data as a lowercase hex string"""
    return hashlib.sha256(to_bytes(data)).hexdigest()


def encode_json_body(payload: Any) -> bytes:
    """Encode a request body (pydantic model or plain value) as JSON bytes"""
    if hasattr(payload, "model_dump"):
        payload = payload.model_dump(by_alias=True)
    return json.dumps(payload).encode("utf-8")


def decode_json_body(raw_body: str | bytes) -> Any:
    """Decode a response body. Raises ValueError on malformed JSON or bad UTF-8."""
    return json.loads(raw_body)


def hex_to_bytes(hex_str: str) -> bytes:
    """Convert hex string to bytes"""
    if hex_str.startswith("0x"):
        hex_str = hex_str[2:]
    return bytes.fromhex(hex_str)

