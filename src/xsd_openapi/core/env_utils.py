#!/usr/bin/env python3
"""
Typed readers for XSD_OPENAPI_* environment variables.

Values are cleaned of stray whitespace and CRLF line endings (common when a
.env file was edited on Windows). Values that cannot be converted fall back
to the default with a warning instead of failing at import time.
"""

import os
import logging
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

TRUE_VALUES = ("true", "1", "yes", "on")
FALSE_VALUES = ("false", "0", "no", "off", "")


def getenv_clean(key: str, default: str = None, strip: bool = True) -> Optional[str]:
    """Read an environment variable, stripping whitespace and line endings.

    Example:
        >>> # .env file has: XSD_OPENAPI_HTTP_METHOD=put\r\n
        >>> getenv_clean("XSD_OPENAPI_HTTP_METHOD", "post")
        'put'
    """
    raw_value = os.getenv(key, default)
    if raw_value is None or not strip:
        return raw_value

    cleaned = raw_value.strip()
    if cleaned != raw_value:
        logger.warning(f"Environment variable {key} had surrounding whitespace: {raw_value!r} -> {cleaned!r}")
    return cleaned


def _fallback(key: str, raw_value: str, kind: str, default):
    logger.warning(f"Environment variable {key} is not a valid {kind}: {raw_value!r}. Using default: {default}")
    return default


def getenv_bool(key: str, default: bool = False) -> bool:
    raw_value = getenv_clean(key)
    if raw_value is None:
        return default

    lowered = raw_value.lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    return _fallback(key, raw_value, "boolean", default)


def getenv_int(key: str, default: int) -> int:
    raw_value = getenv_clean(key)
    if raw_value is None:
        return default

    try:
        return int(raw_value)
    except ValueError:
        return _fallback(key, raw_value, "integer", default)


def getenv_choice(key: str, default: str, choices: Iterable[str]) -> str:
    """Read a case-insensitive value restricted to `choices` (returned lowercased)."""
    raw_value = getenv_clean(key)
    if raw_value is None:
        return default

    lowered = raw_value.lower()
    if lowered in choices:
        return lowered
    return _fallback(key, raw_value, f"choice of {sorted(choices)}", default)


def getenv_list(key: str, default: list[str] = None, separator: str = ",") -> list[str]:
    """Read a separated list; empty items are dropped.

    Example:
        >>> # .env file has: CORS_ORIGINS=http://localhost:3000,http://localhost:8080\r\n
        >>> getenv_list("CORS_ORIGINS", ["http://localhost:3000"])
        ['http://localhost:3000', 'http://localhost:8080']
    """
    default = default if default is not None else []

    raw_value = getenv_clean(key)
    if not raw_value:
        return default

    items = [item.strip() for item in raw_value.split(separator) if item.strip()]
    return items or default
