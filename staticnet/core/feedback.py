"""Feedback rules applied to a neuron's weighted sum before activation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

import numpy as np

from .types import EMPTY, Array, ConfigurationError, FeedbackFn, Scalar


@dataclass(frozen=True)
class FeedbackRule:
    """Possibly stateful transform of the weighted sum.

    ``param_size`` cells of parameters and ``scratch_size`` cells of
    persistent memory follow the activation parameters in a neuron's state.
    """

    name: str
    fn: FeedbackFn = field(compare=False, repr=False)
    param_size: int = 0
    scratch_size: int = 0

    @property
    def stateful(self) -> bool:
        return self.scratch_size > 0

    def apply(self, u: Scalar, params: Array = EMPTY, scratch: Array = EMPTY) -> Scalar:
        """Return the filtered sum; may update ``scratch`` in place."""

        return self.fn(u, params, scratch)


def _none(u: Scalar, params: Array, scratch: Array) -> Scalar:
    return u


def _direct(u: Scalar, params: Array, scratch: Array) -> Scalar:
    out = np.add(u, params[..., 0] * scratch[..., 0])
    scratch[..., 0] = out
    return out


NONE = FeedbackRule("none", _none)
DIRECT = FeedbackRule("direct", _direct, param_size=1, scratch_size=1)

FEEDBACKS: Dict[str, FeedbackRule] = {rule.name: rule for rule in (NONE, DIRECT)}


def resolve_feedback(name: str | None) -> FeedbackRule:
    if name is None:
        return NONE
    try:
        return FEEDBACKS[name]
    except KeyError:
        raise ConfigurationError(f"Unknown feedback rule: {name}") from None


__all__ = ["DIRECT", "FEEDBACKS", "FeedbackRule", "NONE", "resolve_feedback"]
