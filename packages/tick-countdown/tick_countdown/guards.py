"""Argument guards shared by the timer, its config, and the schedulers."""
from __future__ import annotations

import inspect
import numbers
from typing import Any

from tick_countdown.types import Callback, InvalidArgument


def non_negative_int(value: Any, name: str) -> int:
    """Return value as an int. Raises InvalidArgument unless it is an integer >= 0."""
    # bool is an Integral; True/False are never a valid duration.
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidArgument(
            name, value, f"{name} must be an integer, got {type(value).__name__}"
        )
    if value < 0:
        raise InvalidArgument(name, value, f"{name} must be >= 0, got {value}")
    return int(value)


def positive_int(value: Any, name: str) -> int:
    """Like non_negative_int, but zero is rejected as well."""
    result = non_negative_int(value, name)
    if result == 0:
        raise InvalidArgument(name, value, f"{name} must be > 0, got 0")
    return result


def optional_callback(value: Any, name: str) -> Callback | None:
    """Accept None or anything invocable with zero arguments."""
    if value is None:
        return None
    if not callable(value):
        raise InvalidArgument(
            name, value, f"{name} is optional, but must be callable if given"
        )
    try:
        signature = inspect.signature(value)
    except (TypeError, ValueError):
        # Some builtins expose no signature; trust callable().
        return value
    try:
        signature.bind()
    except TypeError:
        raise InvalidArgument(
            name, value, f"{name} must be callable with no arguments"
        ) from None
    return value
