"""
Serialization Utilities

Helpers shared by the settings and content models.

Print settings are persisted by the configuration UI as camelCase JSON
(``includeCover``, ``pageNumberFormat``), while the Python models use
snake_case fields. Everything that crosses that boundary goes through
``normalize_keys`` so either spelling is accepted.

Loading is forgiving: a missing or corrupted file yields an empty payload
and the caller falls back to model defaults.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def to_snake(key: str) -> str:
    """
    Convert a camelCase key to snake_case.

    Example:
        >>> to_snake("pageNumberFormat")
        'page_number_format'
    """
    return _CAMEL_BOUNDARY.sub(r"_\1", key).replace("-", "_").lower()


def normalize_keys(data: Any) -> dict[str, Any]:
    """
    Return a shallow copy of ``data`` with snake_case keys.

    Non-mapping input yields an empty dict so ``from_dict`` callers can
    fall back to defaults instead of failing.
    """
    if not isinstance(data, dict):
        return {}
    return {to_snake(str(key)): value for key, value in data.items()}


def load_json_payload(path: Path) -> dict[str, Any]:
    """
    Read a JSON object from disk.

    Args:
        path: File to read

    Returns:
        Parsed object, or ``{}`` if the file is missing, unreadable,
        not valid JSON, or not a JSON object.
    """
    if not path.exists():
        logger.warning(f"Payload file not found, using defaults: {path}")
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        logger.warning(f"Payload file is corrupted, using defaults: {path} ({e})")
        return {}
    except OSError as e:
        logger.warning(f"Failed to read payload file, using defaults: {path} ({e})")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Payload file is not a JSON object, using defaults: {path}")
        return {}
    return data
