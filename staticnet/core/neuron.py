"""Neuron descriptors and their private state layout.

A neuron owns a fixed sub-range of the network state laid out as::

    [bias?, w_0 .. w_{n-1} | activation params | feedback params | feedback scratch]

The accessors below slice along the last axis, so the same neuron can read
either its own 1-d slice or the ``(size, state_size)`` view of a whole layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

import numpy as np

from .activations import ActivationRule
from .feedback import NONE, FeedbackRule
from .types import Array, ConfigurationError, InputVector, as_index


@dataclass(frozen=True)
class Neuron:
    """Weighted-sum unit combining a feedback rule and an activation rule."""

    input_size: int
    activation: ActivationRule
    feedback: FeedbackRule = NONE
    biased: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "input_size", as_index(self.input_size, "Neuron input size"))
        if self.input_size < 1:
            raise ConfigurationError(
                f"Neuron input size must be positive, got {self.input_size}"
            )

    # ------------------------------------------------------------------
    # Layout

    @property
    def input_weights(self) -> int:
        return self.input_size + (1 if self.biased else 0)

    @property
    def activation_state(self) -> int:
        return self.activation.state_size

    @property
    def feedback_state(self) -> int:
        return self.feedback.param_size

    @property
    def feedback_scratch(self) -> int:
        return self.feedback.scratch_size

    @property
    def total_weights(self) -> int:
        """Cells that are parameters rather than scratch memory."""

        return self.input_weights + self.activation_state + self.feedback_state

    @property
    def state_size(self) -> int:
        return self.total_weights + self.feedback_scratch

    @property
    def activation_begin(self) -> int:
        return self.input_weights

    @property
    def feedback_begin(self) -> int:
        return self.activation_begin + self.activation_state

    @property
    def feedback_scratch_begin(self) -> int:
        return self.feedback_begin + self.feedback_state

    @property
    def minimum(self) -> float:
        return self.activation.minimum

    @property
    def maximum(self) -> float:
        return self.activation.maximum

    # ------------------------------------------------------------------
    # State views

    def weights(self, state: Array) -> Array:
        return state[..., : self.input_weights]

    def activation_params(self, state: Array) -> Array:
        return state[..., self.activation_begin : self.feedback_begin]

    def feedback_params(self, state: Array) -> Array:
        return state[..., self.feedback_begin : self.feedback_scratch_begin]

    def scratch(self, state: Array) -> Array:
        return state[..., self.feedback_scratch_begin : self.state_size]

    # ------------------------------------------------------------------
    # Evaluation

    def weighted_sum(self, inputs: InputVector, state: Array):
        x = np.asarray(inputs, dtype=state.dtype)
        if self.biased:
            return state[..., 0] + state[..., 1 : self.input_weights] @ x
        return state[..., : self.input_size] @ x

    def feed(self, inputs: InputVector, state: Array) -> float:
        """Evaluate this neuron against its own ``state`` slice.

        The order weighted sum, feedback, activation is part of the contract.
        """

        u = self.weighted_sum(inputs, state)
        u = self.feedback.apply(u, self.feedback_params(state), self.scratch(state))
        return float(self.activation.apply(u, self.activation_params(state)))

    def feed_rows(self, inputs: InputVector, states: Array) -> Array:
        """Evaluate one neuron of this kind per row of ``states``."""

        u = self.weighted_sum(inputs, states)
        u = self.feedback.apply(u, self.feedback_params(states), self.scratch(states))
        out = self.activation.apply(u, self.activation_params(states))
        return np.asarray(out, dtype=states.dtype)

    def describe(self) -> Dict[str, object]:
        desc: Dict[str, object] = {
            "inputs": self.input_size,
            "activation": self.activation.name,
            "feedback": self.feedback.name,
            "biased": self.biased,
        }
        if self.activation.slope is not None:
            desc["slope"] = list(self.activation.slope)
        return desc


def unbiased_neuron(
    input_size: int, activation: ActivationRule, feedback: FeedbackRule = NONE
) -> Neuron:
    return Neuron(input_size, activation, feedback, biased=False)


__all__ = ["Neuron", "unbiased_neuron"]
