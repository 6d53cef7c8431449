"""Neuron-by-neuron traversal of a network's state."""

from __future__ import annotations

from typing import Callable, Iterator, NamedTuple

from .network import Network
from .neuron import Neuron
from .types import Array

Visitor = Callable[[Neuron, Array, int, int], object]


class NeuronSite(NamedTuple):
    neuron: Neuron
    state: Array
    layer: int
    index: int


def iter_neurons(network: Network) -> Iterator[NeuronSite]:
    """Yield every neuron with a writable view of its state, layer-major."""

    for layer_idx, neuron_idx in network.layout.coordinates:
        neuron, state = network.get_neuron(layer_idx, neuron_idx)
        yield NeuronSite(neuron, state, layer_idx, neuron_idx)


def visit_neurons(network: Network, visitor: Visitor) -> None:
    """Call ``visitor(neuron, state, layer, index)`` once for every neuron.

    The visitor may write through ``state``; what it does with the slice is
    up to the caller (initialisation, mutation, scoring, serialisation).
    """

    for site in iter_neurons(network):
        visitor(*site)


__all__ = ["NeuronSite", "Visitor", "iter_neurons", "visit_neurons"]
