"""Core content models and serialization helpers."""
