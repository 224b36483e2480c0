"""Logging set-up for the SeerEngine CLI and embedding applications."""

from __future__ import annotations

import logging
import os
from typing import Any

__all__ = ["configure_logging", "resolve_level"]

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"
_ENV_VAR = "LOG_LEVEL"


def resolve_level(value: str | int | None, default: int = logging.INFO) -> int:
    """Turn a level name (any case) or number into a ``logging`` level.

    Empty or unknown values resolve to ``default``.
    """

    if value is None:
        return default
    if isinstance(value, int):
        return value
    candidate = value.strip()
    if not candidate:
        return default
    if candidate.isdigit():
        return int(candidate)
    resolved = logging.getLevelName(candidate.upper())
    return resolved if isinstance(resolved, int) else default


def configure_logging(
    *,
    level: str | int | None = None,
    default: str | int | None = None,
    **kwargs: Any,
) -> int:
    """Configure the root logger and return the level applied.

    Parameters
    ----------
    level:
        Explicit level. When omitted the ``LOG_LEVEL`` environment variable
        is used, then ``default`` (typically the settings file value).
    default:
        Fallback level when neither ``level`` nor ``LOG_LEVEL`` is set.
    kwargs:
        Forwarded to :func:`logging.basicConfig`.
    """

    fallback = resolve_level(default)
    requested = level if level is not None else os.environ.get(_ENV_VAR)
    effective = resolve_level(requested, fallback)

    logging.basicConfig(
        level=effective,
        format=kwargs.pop("format", _FORMAT),
        datefmt=kwargs.pop("datefmt", _DATEFMT),
        force=kwargs.pop("force", True),
        **kwargs,
    )
    logging.getLogger("seerengine").debug("Logging configured at %s", logging.getLevelName(effective))
    return effective
