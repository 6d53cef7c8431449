"""Topology registry helpers for staticnet."""

from .registry import (
    build_network,
    config_hash,
    load_preset,
    load_topology_file,
    parse_topology,
    presets,
    topology_hash,
)

__all__ = [
    "build_network",
    "config_hash",
    "load_preset",
    "load_topology_file",
    "parse_topology",
    "presets",
    "topology_hash",
]
