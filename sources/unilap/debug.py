"""
Simple system to debug the solvers via process output messages.

Solvers report their progress to an optional *tracer*, i.e. any callable that
accepts an event name and keyword fields. When no tracer is given and the
environment variable ``UNILAP_DEBUG`` is set to a truthy value, the events are
printed with :func:`print_trace`.
"""

from __future__ import annotations

import functools
import os
import typing as T

from .consts import ENV_DEBUG

__all__ = ["Tracer", "check_debug_enabled", "print_trace", "resolve_tracer"]


class Tracer(T.Protocol):
    def __call__(self, event: str, /, **fields: T.Any) -> None:
        ...


@functools.cache
def check_debug_enabled() -> bool:
    """
    Check whether debugging is enabled by reading the environment
    variable ``UNILAP_DEBUG``.
    """
    value = os.environ.get(ENV_DEBUG, "")
    return value.strip().lower() in {"1", "true", "yes", "on"}


def print_trace(event: str, /, **fields: T.Any) -> None:
    """
    Tracer that prints every event on a single line.
    """
    info = " ".join(f"{k}={v}" for k, v in fields.items())
    print(f"unilap: {event} {info}".rstrip())


def resolve_tracer(trace: Tracer | None) -> Tracer | None:
    """
    Returns the tracer a solver should report to, or ``None`` when tracing is
    disabled.
    """
    if trace is not None:
        return trace
    if check_debug_enabled():
        return print_trace
    return None
