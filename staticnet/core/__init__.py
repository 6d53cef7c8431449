"""Core numerical primitives for staticnet."""

from . import activations, feedback, layer, network, neuron, traversal, types

__all__ = ["activations", "feedback", "layer", "network", "neuron", "traversal", "types"]
