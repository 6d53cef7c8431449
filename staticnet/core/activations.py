"""Activation rules for staticnet neurons.

Every rule is a pure element-wise transform of the (feedback-filtered)
weighted sum ``u``.  Rules work on Python floats as well as on numpy arrays,
so a layer can evaluate all of its neurons with a single call; ``params`` then
carries one row of extra per-neuron parameters for each ``u``.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass, field
from typing import Dict, Sequence, Tuple

import numpy as np

from .types import EMPTY, ActivationFn, Array, ConfigurationError, Scalar, as_index

_FLOAT_MAX = float(np.finfo(np.float64).max)


@dataclass(frozen=True)
class ActivationRule:
    """Scalar transform with a declared codomain ``[minimum, maximum]``."""

    name: str
    minimum: float
    maximum: float
    fn: ActivationFn = field(compare=False, repr=False)
    state_size: int = 0
    slope: Tuple[int, int] | None = None

    @property
    def bounds(self) -> Tuple[float, float]:
        return self.minimum, self.maximum

    def apply(self, u: Scalar, params: Array = EMPTY) -> Scalar:
        """Return the activation of ``u`` using the rule's extra ``params``."""

        return self.fn(u, params)


def _zero(u: Scalar, params: Array) -> Scalar:
    return np.zeros_like(u, dtype=np.float64)


def _identity(u: Scalar, params: Array) -> Scalar:
    return u


def _step_bipolar(u: Scalar, params: Array) -> Scalar:
    # u == 0 takes the "not greater than zero" branch
    return np.where(np.greater(u, 0.0), -1.0, 1.0)


def _step_unipolar(u: Scalar, params: Array) -> Scalar:
    return np.where(np.greater(u, 0.0), 0.0, 1.0)


def _rectified(u: Scalar, params: Array) -> Scalar:
    # NaN is not greater than zero and maps to 0
    return np.where(np.greater(u, 0.0), u, 0.0)


def _tanh_bipolar(u: Scalar, params: Array) -> Scalar:
    return np.tanh(u)


def _tanh_unipolar(u: Scalar, params: Array) -> Scalar:
    return 0.5 * (np.tanh(u) + 1.0)


def _bipolar_sigmoid(a: Scalar, u: Scalar) -> Scalar:
    e = np.exp(np.multiply(a, u))
    return (1.0 - e) / (1.0 + e)


def _unipolar_sigmoid(a: Scalar, u: Scalar) -> Scalar:
    return 1.0 / (1.0 + np.exp(np.multiply(a, u)))


def _varsig_bipolar(u: Scalar, params: Array) -> Scalar:
    return _bipolar_sigmoid(-np.asarray(params)[..., 0], u)


def _varsig_unipolar(u: Scalar, params: Array) -> Scalar:
    return _unipolar_sigmoid(-np.asarray(params)[..., 0], u)


ZERO = ActivationRule("zero", 0.0, 0.0, _zero)
IDENTITY = ActivationRule("identity", -_FLOAT_MAX, _FLOAT_MAX, _identity)
STEP_BIPOLAR = ActivationRule("step_bipolar", -1.0, 1.0, _step_bipolar)
STEP_UNIPOLAR = ActivationRule("step_unipolar", 0.0, 1.0, _step_unipolar)
RECTIFIED = ActivationRule("rectified", 0.0, _FLOAT_MAX, _rectified)
TANH_BIPOLAR = ActivationRule("tanh_bipolar", -1.0, 1.0, _tanh_bipolar)
TANH_UNIPOLAR = ActivationRule("tanh_unipolar", 0.0, 1.0, _tanh_unipolar)
VARSIG_BIPOLAR = ActivationRule("varsig_bipolar", -1.0, 1.0, _varsig_bipolar, state_size=1)
VARSIG_UNIPOLAR = ActivationRule("varsig_unipolar", 0.0, 1.0, _varsig_unipolar, state_size=1)


def _check_slope(n: int, d: int) -> Tuple[int, int, float]:
    n = as_index(n, "Sigmoid slope numerator")
    d = as_index(d, "Sigmoid slope denominator")
    if d == 0:
        raise ConfigurationError("Sigmoid slope denominator must be non-zero")
    return n, d, -float(n) / float(d)


@functools.lru_cache(maxsize=None)
def sigmoid_bipolar(n: int = 1, d: int = 1) -> ActivationRule:
    """Bipolar sigmoid with the fixed slope ``n/d``."""

    n, d, a = _check_slope(n, d)
    return ActivationRule(
        "sigmoid_bipolar",
        -1.0,
        1.0,
        lambda u, params: _bipolar_sigmoid(a, u),
        slope=(n, d),
    )


@functools.lru_cache(maxsize=None)
def sigmoid_unipolar(n: int = 1, d: int = 1) -> ActivationRule:
    """Unipolar sigmoid with the fixed slope ``n/d``."""

    n, d, a = _check_slope(n, d)
    return ActivationRule(
        "sigmoid_unipolar",
        0.0,
        1.0,
        lambda u, params: _unipolar_sigmoid(a, u),
        slope=(n, d),
    )


ACTIVATIONS: Dict[str, ActivationRule] = {
    rule.name: rule
    for rule in (
        ZERO,
        IDENTITY,
        STEP_BIPOLAR,
        STEP_UNIPOLAR,
        RECTIFIED,
        TANH_BIPOLAR,
        TANH_UNIPOLAR,
        VARSIG_BIPOLAR,
        VARSIG_UNIPOLAR,
    )
}

_SLOPED = {"sigmoid_bipolar": sigmoid_bipolar, "sigmoid_unipolar": sigmoid_unipolar}


def resolve_activation(name: str, slope: Sequence[int] | None = None) -> ActivationRule:
    """Return the activation rule registered under ``name``.

    ``slope`` is only meaningful for the fixed-slope sigmoids and defaults to
    ``(1, 1)`` there.
    """

    if name in _SLOPED:
        terms = (1, 1) if slope is None else tuple(slope)
        if len(terms) != 2:
            raise ConfigurationError("Sigmoid slope must be a [numerator, denominator] pair")
        n = as_index(terms[0], "Sigmoid slope numerator")
        d = as_index(terms[1], "Sigmoid slope denominator")
        return _SLOPED[name](n, d)
    if slope is not None:
        raise ConfigurationError(f"Activation '{name}' does not take a slope")
    try:
        return ACTIVATIONS[name]
    except KeyError:
        raise ConfigurationError(f"Unknown activation rule: {name}") from None


def activation_names() -> list[str]:
    return sorted([*ACTIVATIONS, *_SLOPED])


__all__ = [
    "ACTIVATIONS",
    "ActivationRule",
    "IDENTITY",
    "RECTIFIED",
    "STEP_BIPOLAR",
    "STEP_UNIPOLAR",
    "TANH_BIPOLAR",
    "TANH_UNIPOLAR",
    "VARSIG_BIPOLAR",
    "VARSIG_UNIPOLAR",
    "ZERO",
    "activation_names",
    "resolve_activation",
    "sigmoid_bipolar",
    "sigmoid_unipolar",
]
