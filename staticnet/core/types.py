"""Core typing contracts for staticnet."""

from __future__ import annotations

import operator
from typing import Callable, Sequence, Union

import numpy as np

Array = np.ndarray

Scalar = Union[float, Array]
InputVector = Union[Sequence[float], Array]

ActivationFn = Callable[[Scalar, Array], Scalar]
FeedbackFn = Callable[[Scalar, Array, Array], Scalar]

EMPTY = np.zeros(0, dtype=np.float64)
EMPTY.setflags(write=False)


class ConfigurationError(ValueError):
    """Raised when a topology cannot be built (e.g. mismatched layer interfaces)."""


class UsageError(ValueError):
    """Raised when a constructed network is called with incompatible arguments."""


def as_index(value: object, what: str) -> int:
    """Return ``value`` as an ``int``; floats, strings and bools are rejected."""

    if isinstance(value, (bool, np.bool_)):
        raise ConfigurationError(f"{what} must be an integer, got {value!r}")
    try:
        return operator.index(value)
    except TypeError:
        raise ConfigurationError(f"{what} must be an integer, got {value!r}") from None


__all__ = [
    "Array",
    "ActivationFn",
    "ConfigurationError",
    "EMPTY",
    "FeedbackFn",
    "InputVector",
    "Scalar",
    "UsageError",
    "as_index",
]
