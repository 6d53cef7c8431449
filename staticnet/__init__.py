"""staticnet public API."""

from .core import activations, feedback, types  # noqa: F401
from .core.layer import Layer
from .core.network import Network, NetworkLayout
from .core.neuron import Neuron, unbiased_neuron
from .core.traversal import NeuronSite, iter_neurons, visit_neurons
from .core.types import ConfigurationError, UsageError
from .topologies import build_network, load_preset, parse_topology, presets, topology_hash

__all__ = [
    "ConfigurationError",
    "Layer",
    "Network",
    "NetworkLayout",
    "Neuron",
    "NeuronSite",
    "UsageError",
    "activations",
    "build_network",
    "feedback",
    "iter_neurons",
    "load_preset",
    "parse_topology",
    "presets",
    "topology_hash",
    "types",
    "unbiased_neuron",
    "visit_neurons",
]
