"""Binary payload decoding for seed records.

Seed files carry binary values as ``{"type": "Buffer", "data": [...]}``
markers. This module turns those markers back into ``bytes`` in place.
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping

from core.constants import BUFFER_TYPE_TAG


def is_buffer_marker(value: Any) -> bool:
    """Return whether a value matches the tagged binary schema.

    A marker is a mapping whose ``type`` is ``"Buffer"`` and whose
    ``data`` is a list of integers in ``0..255``. Anything else is
    treated as ordinary seed data.
    """
    if not isinstance(value, Mapping):
        return False
    if value.get("type") != BUFFER_TYPE_TAG:
        return False
    data = value.get("data")
    if not isinstance(data, list):
        return False
    return all(
        isinstance(item, int) and not isinstance(item, bool) and 0 <= item <= 255
        for item in data
    )


def encode_buffer(payload: bytes) -> dict[str, Any]:
    """Encode raw bytes as a tagged binary marker.

    Args:
        payload: Binary value to encode.

    Returns:
        JSON-compatible marker mapping.
    """
    return {"type": BUFFER_TYPE_TAG, "data": list(payload)}


def decode_buffers(seed: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """Replace every tagged binary marker in a seed with ``bytes``.

    Nested mappings and lists are walked as well, so the returned seed
    holds no residual markers. ``None`` values and markers with an
    invalid ``data`` payload are left untouched.

    Args:
        seed: Seed mapping, mutated in place.

    Returns:
        The same seed mapping.
    """
    for key, value in seed.items():
        seed[key] = _decode_value(value)
    return seed


def _decode_value(value: Any) -> Any:
    if value is None:
        return value
    if is_buffer_marker(value):
        return bytes(value["data"])
    if isinstance(value, dict):
        return decode_buffers(value)
    if isinstance(value, list):
        for index, item in enumerate(value):
            value[index] = _decode_value(item)
    return value
