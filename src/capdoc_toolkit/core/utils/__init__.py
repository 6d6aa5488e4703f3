"""Serialization helpers shared by the settings and content models."""

from .serialization import load_json_payload, normalize_keys, to_snake

__all__ = [
    "load_json_payload",
    "normalize_keys",
    "to_snake",
]
