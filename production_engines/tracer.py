"""
ENGINE_TRACE logging for pure engine calls.

``@traced_engine`` wraps an engine function and, after it returns, logs one
``ENGINE_TRACE`` record carrying the engine's name and version, how long the
call took, and a fingerprint of its keyword inputs.  Two calls on identical
snapshots produce the same fingerprint, so a suggestion run can be matched to
the settlement that followed it by grepping the logs.

Only keyword arguments are fingerprinted; engines are called with keywords
throughout.  Nothing here does I/O beyond emitting the log record.
"""

from __future__ import annotations

import dataclasses
import functools
import hashlib
import time
from collections.abc import Callable, Mapping
from typing import Any

from production_kernel.logging_config import get_logger

logger = get_logger("engines.tracer")

FINGERPRINT_LENGTH = 16


def _canonical(value: Any) -> str:
    if value is None:
        return "null"
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _canonical(
            {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
        )
    if isinstance(value, Mapping):
        items = sorted((str(k), _canonical(v)) for k, v in value.items())
        return "{" + ",".join(f"{k}:{v}" for k, v in items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_canonical(v) for v in value) + "]"
    # int, Decimal, UUID and str all have stable str() forms
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    kwargs: Mapping[str, Any],
) -> str:
    """SHA-256 prefix over the named kwargs; absent names hash as null."""
    canonical = "|".join(
        f"{name}={_canonical(kwargs.get(name))}" for name in fingerprint_fields
    )
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    return digest[:FINGERPRINT_LENGTH]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """
    Decorate an engine entry point so each call emits ENGINE_TRACE.

    Args:
        engine_name: e.g. "production_planner".
        engine_version: bumped when the engine's output for a given input
            changes.
        fingerprint_fields: keyword arguments hashed into input_fingerprint.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fingerprint = (
                compute_input_fingerprint(fingerprint_fields, kwargs)
                if fingerprint_fields else ""
            )
            started = time.monotonic()
            result = func(*args, **kwargs)
            logger.info(
                "ENGINE_TRACE",
                extra={
                    "trace_type": "ENGINE_TRACE",
                    "engine_name": engine_name,
                    "engine_version": engine_version,
                    "function": func.__qualname__,
                    "input_fingerprint": fingerprint,
                    "duration_ms": round((time.monotonic() - started) * 1000, 2),
                },
            )
            return result

        return wrapper

    return decorator
