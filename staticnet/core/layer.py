"""Homogeneous layers of neurons."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

import numpy as np

from .neuron import Neuron
from .types import Array, ConfigurationError, InputVector, as_index


@dataclass(frozen=True)
class Layer:
    """``size`` neurons of one kind sharing the same input vector."""

    neuron: Neuron
    size: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "size", as_index(self.size, "Layer size"))
        if self.size < 1:
            raise ConfigurationError(f"Layer size must be positive, got {self.size}")

    @property
    def input_size(self) -> int:
        return self.neuron.input_size

    @property
    def output_size(self) -> int:
        return self.size

    @property
    def state_size(self) -> int:
        return self.size * self.neuron.state_size

    @property
    def minimum(self) -> float:
        return self.neuron.minimum

    @property
    def maximum(self) -> float:
        return self.neuron.maximum

    def rows(self, state: Array) -> Array:
        """Return ``state`` viewed as one row per neuron (no copy)."""

        return state[: self.state_size].reshape(self.size, self.neuron.state_size)

    def neuron_state(self, state: Array, index: int) -> Array:
        if not 0 <= index < self.size:
            raise IndexError(f"Neuron index {index} out of range for layer of {self.size}")
        width = self.neuron.state_size
        return state[index * width : (index + 1) * width]

    def feed(self, inputs: InputVector, state: Array) -> Array:
        """Evaluate every neuron in order; ``state`` starts at the layer offset.

        Feedback scratch cells are updated in place.
        """

        return np.array(self.neuron.feed_rows(inputs, self.rows(state)), dtype=state.dtype)

    def describe(self) -> Dict[str, object]:
        return {"size": self.size, **self.neuron.describe()}


__all__ = ["Layer"]
