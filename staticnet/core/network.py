"""Feed-forward networks over a single contiguous state buffer."""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Dict, Iterator, Mapping, Sequence, Tuple

import numpy as np

from .layer import Layer
from .neuron import Neuron
from .types import Array, ConfigurationError, InputVector, UsageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NetworkLayout:
    """Immutable layout table computed once per topology."""

    layers: Tuple[Layer, ...]
    offsets: Tuple[int, ...]
    state_size: int

    def __post_init__(self) -> None:
        layers = tuple(self.layers)
        if not layers:
            raise ConfigurationError("A network needs at least one layer")
        for idx, (lower, upper) in enumerate(zip(layers[:-1], layers[1:])):
            if lower.output_size != upper.input_size:
                raise ConfigurationError(
                    f"Layer interfaces don't match: layer {idx} outputs {lower.output_size} "
                    f"values but layer {idx + 1} expects {upper.input_size}"
                )
        offsets, total = _prefix_offsets(layers)
        if tuple(self.offsets) != offsets or self.state_size != total:
            raise ConfigurationError(
                f"Layout table {tuple(self.offsets)}/{self.state_size} does not match "
                f"layer sizes {offsets}/{total}"
            )
        object.__setattr__(self, "layers", layers)
        object.__setattr__(self, "offsets", offsets)

    @classmethod
    def from_layers(cls, layers: Sequence[Layer]) -> "NetworkLayout":
        return _build_layout(tuple(layers))

    @property
    def input_size(self) -> int:
        return self.layers[0].input_size

    @property
    def output_size(self) -> int:
        return self.layers[-1].output_size

    @property
    def coordinates(self) -> Tuple[Tuple[int, int], ...]:
        """Every ``(layer, neuron)`` pair, layer-major."""

        return tuple(
            (i, j) for i, layer in enumerate(self.layers) for j in range(layer.size)
        )

    def layer_range(self, index: int) -> Tuple[int, int]:
        if not 0 <= index < len(self.layers):
            raise IndexError(f"Layer index {index} out of range for {len(self.layers)} layers")
        begin = self.offsets[index]
        return begin, begin + self.layers[index].state_size

    def neuron_range(self, layer: int, neuron: int) -> Tuple[int, int]:
        begin, _ = self.layer_range(layer)
        entry = self.layers[layer]
        if not 0 <= neuron < entry.size:
            raise IndexError(f"Neuron index {neuron} out of range for layer of {entry.size}")
        width = entry.neuron.state_size
        begin += neuron * width
        return begin, begin + width

    def scratch_mask(self) -> Array:
        """Boolean mask of the buffer cells holding feedback memory."""

        mask = np.zeros(self.state_size, dtype=bool)
        for layer, offset in zip(self.layers, self.offsets):
            rows = layer.rows(mask[offset:])
            layer.neuron.scratch(rows)[...] = True
        return mask


def _prefix_offsets(layers: Sequence[Layer]) -> Tuple[Tuple[int, ...], int]:
    offsets = []
    total = 0
    for layer in layers:
        offsets.append(total)
        total += layer.state_size
    return tuple(offsets), total


@functools.lru_cache(maxsize=128)
def _build_layout(layers: Tuple[Layer, ...]) -> NetworkLayout:
    offsets, total = _prefix_offsets(layers)
    layout = NetworkLayout(layers=layers, offsets=offsets, state_size=total)
    logger.debug(
        "Built layout for %d layers: state_size=%d offsets=%s", len(layers), total, offsets
    )
    return layout


class Network:
    """Evaluate a fixed stack of layers over an exclusively owned buffer.

    The buffer is filled with ``fill`` and every feedback scratch cell is then
    set to zero, so each new instance starts with an empty evaluation
    history.  Successive :meth:`evaluate` calls on one instance are order
    dependent whenever a layer uses stateful feedback; calls on one instance
    must therefore be serialised by the caller.
    """

    def __init__(
        self,
        layers: Sequence[Layer] | NetworkLayout,
        fill: float = 0.0,
        *,
        dtype: np.dtype | type = np.float64,
    ) -> None:
        if isinstance(layers, NetworkLayout):
            self.layout = layers
        else:
            self.layout = NetworkLayout.from_layers(layers)
        self._state = np.full(self.layout.state_size, fill, dtype=dtype)
        self.reset_scratch()

    # ------------------------------------------------------------------
    # Topology

    @property
    def layers(self) -> Tuple[Layer, ...]:
        return self.layout.layers

    @property
    def input_size(self) -> int:
        return self.layout.input_size

    @property
    def output_size(self) -> int:
        return self.layout.output_size

    @property
    def state_size(self) -> int:
        return self.layout.state_size

    @property
    def output_bounds(self) -> Tuple[float, float]:
        last = self.layout.layers[-1]
        return last.minimum, last.maximum

    # ------------------------------------------------------------------
    # Buffer access

    @property
    def state(self) -> Array:
        """Mutable view of the whole buffer."""

        return self._state[:]

    @property
    def cstate(self) -> Array:
        """Read-only view of the whole buffer."""

        view = self._state[:]
        view.setflags(write=False)
        return view

    def __len__(self) -> int:
        return self.layout.state_size

    def __iter__(self) -> Iterator[float]:
        return (float(v) for v in self._state)

    def get_layer(self, index: int) -> Tuple[Layer, Array]:
        begin, end = self.layout.layer_range(index)
        return self.layout.layers[index], self._state[begin:end]

    def get_neuron(self, layer: int, neuron: int) -> Tuple[Neuron, Array]:
        begin, end = self.layout.neuron_range(layer, neuron)
        return self.layout.layers[layer].neuron, self._state[begin:end]

    def reset_scratch(self) -> None:
        """Clear all feedback memory, leaving weights and parameters alone."""

        self._state[self.layout.scratch_mask()] = 0

    def parameter_count(self) -> int:
        return int(self.layout.state_size - np.count_nonzero(self.layout.scratch_mask()))

    # ------------------------------------------------------------------
    # Evaluation

    def evaluate(self, inputs: InputVector) -> Array:
        x = np.asarray(inputs, dtype=self._state.dtype)
        if x.ndim != 1 or x.shape[0] != self.input_size:
            raise UsageError(
                f"Expected an input vector of length {self.input_size}, got shape {x.shape}"
            )
        for layer, offset in zip(self.layout.layers, self.layout.offsets):
            x = layer.feed(x, self._state[offset : offset + layer.state_size])
        return x

    def __call__(self, *values) -> Array:
        if len(values) == 1 and np.ndim(values[0]) > 0:
            return self.evaluate(values[0])
        return self.evaluate(values)

    # ------------------------------------------------------------------
    # Copying and state transfer

    def copy(self) -> "Network":
        clone = self.__class__.__new__(self.__class__)
        clone.layout = self.layout
        clone._state = self._state.copy()
        return clone

    __copy__ = copy

    def __deepcopy__(self, memo) -> "Network":
        return self.copy()

    def assign(self, other: "Network") -> None:
        """Overwrite this buffer with ``other``'s state."""

        if other.layout != self.layout:
            raise ConfigurationError("Cannot assign state between different topologies")
        np.copyto(self._state, other._state)

    def state_dict(self) -> Mapping[str, Array]:
        return {
            f"L{idx}": layer.rows(self.get_layer(idx)[1]).copy()
            for idx, layer in enumerate(self.layout.layers)
        }

    def load_state_dict(self, state: Mapping[str, Array]) -> None:
        """Load every layer or none: all entries are checked before any write."""

        staged = []
        for idx, layer in enumerate(self.layout.layers):
            key = f"L{idx}"
            if key not in state:
                raise KeyError(f"Missing layer {key} in state dict")
            rows = np.asarray(state[key])
            expected = (layer.size, layer.neuron.state_size)
            if rows.shape != expected:
                raise UsageError(f"Layer {key} has shape {rows.shape}, expected {expected}")
            staged.append(rows)
        for idx, (layer, rows) in enumerate(zip(self.layout.layers, staged)):
            layer.rows(self.get_layer(idx)[1])[...] = rows

    def describe(self) -> Dict[str, object]:
        return {"layers": [layer.describe() for layer in self.layout.layers]}

    def __repr__(self) -> str:
        sizes = [self.input_size, *(layer.size for layer in self.layout.layers)]
        return f"{self.__class__.__name__}({'-'.join(map(str, sizes))}, state_size={self.state_size})"


__all__ = ["Network", "NetworkLayout"]
