"""Topology presets, file loading and hashing."""

from __future__ import annotations

import hashlib
import json
import logging
from copy import deepcopy
from pathlib import Path
from typing import Dict, List, Mapping, Sequence

import numpy as np
import yaml

from ..core.activations import resolve_activation
from ..core.feedback import resolve_feedback
from ..core.layer import Layer
from ..core.network import Network, NetworkLayout
from ..core.neuron import Neuron
from ..core.types import ConfigurationError, as_index

logger = logging.getLogger(__name__)

_PRESETS: Dict[str, Mapping[str, object]] = {
    "perceptron": {
        "layers": [{"size": 1, "inputs": 2, "activation": "step_unipolar"}],
    },
    "forager-tanh": {
        "layers": [
            {"size": 8, "inputs": 9, "activation": "tanh_bipolar"},
            {"size": 1, "activation": "tanh_bipolar"},
        ],
    },
    "forager-recurrent": {
        "layers": [
            {"size": 8, "inputs": 9, "activation": "tanh_bipolar", "feedback": "direct"},
            {"size": 1, "activation": "sigmoid_unipolar", "slope": [1, 2]},
        ],
    },
    "forager-varsig": {
        "layers": [
            {"size": 6, "inputs": 9, "activation": "varsig_bipolar"},
            {"size": 4, "activation": "rectified", "biased": False},
            {"size": 1, "activation": "varsig_unipolar"},
        ],
    },
}

_PRESET_DIR = Path(__file__).resolve().parents[2] / "configs" / "topologies"
_FILE_PRESETS_CACHE: Dict[str, Mapping[str, object]] | None = None

_LAYER_KEYS = {"size", "inputs", "activation", "slope", "feedback", "biased"}


def _normalise(value):
    if isinstance(value, Mapping):
        return {str(k): _normalise(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalise(v) for v in value]
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, np.generic):
        return value.item()
    return value


def config_hash(config: Mapping[str, object]) -> str:
    """Return a stable 12-character hash for ``config``."""

    canonical = json.dumps(_normalise(config), sort_keys=True, separators=(",", ":"))
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    return digest[:12]


def _as_int(entry: Mapping[str, object], key: str, idx: int, default=None) -> int:
    value = entry.get(key, default)
    if value is None:
        raise ConfigurationError(f"Layer {idx} must declare '{key}'")
    return as_index(value, f"Layer {idx} field '{key}'")


def parse_topology(config: Mapping[str, object]) -> List[Layer]:
    """Turn a ``{"layers": [...]}`` mapping into validated layer descriptors.

    ``inputs`` is required on the first layer and defaults to the size of
    the preceding layer afterwards.
    """

    if not isinstance(config, Mapping):
        raise ConfigurationError("Topology config must be a mapping")
    entries = config.get("layers")
    if isinstance(entries, (str, bytes)) or not isinstance(entries, Sequence) or not entries:
        raise ConfigurationError("Topology config needs a non-empty 'layers' list")

    layers: List[Layer] = []
    previous: int | None = None
    for idx, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            raise ConfigurationError(f"Layer {idx} must be a mapping")
        unknown = set(entry) - _LAYER_KEYS
        if unknown:
            raise ConfigurationError(
                f"Layer {idx} has unknown fields: {', '.join(sorted(map(str, unknown)))}"
            )
        if "activation" not in entry:
            raise ConfigurationError(f"Layer {idx} must declare 'activation'")
        size = _as_int(entry, "size", idx)
        inputs = _as_int(entry, "inputs", idx, default=previous)
        slope = entry.get("slope")
        if slope is not None and (not isinstance(slope, Sequence) or len(slope) != 2):
            raise ConfigurationError(f"Layer {idx} slope must be a [numerator, denominator] pair")
        activation = resolve_activation(str(entry["activation"]), slope)
        feedback = resolve_feedback(entry.get("feedback"))
        biased = entry.get("biased", True)
        if not isinstance(biased, bool):
            raise ConfigurationError(
                f"Layer {idx} field 'biased' must be true or false, got {biased!r}"
            )
        neuron = Neuron(inputs, activation, feedback, biased=biased)
        layers.append(Layer(neuron, size))
        previous = size

    NetworkLayout.from_layers(layers)
    return layers


def topology_hash(config: Mapping[str, object]) -> str:
    """Hash of the resolved topology, insensitive to omitted defaults."""

    layers = parse_topology(config)
    return config_hash({"layers": [layer.describe() for layer in layers]})


def _read_topology_file(path: Path) -> Mapping[str, object]:
    text = path.read_text()
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        data = yaml.safe_load(text) or {}
    elif suffix == ".json":
        data = json.loads(text or "{}")
    else:
        raise ValueError(f"Unsupported topology file type: {path.suffix}")

    if not isinstance(data, Mapping):
        raise TypeError(f"Topology {path.name} must decode to a mapping")
    return data


def load_topology_file(path: str | Path) -> Mapping[str, object]:
    """Load and validate a JSON/YAML topology description."""

    path = Path(path)
    data = _read_topology_file(path)
    parse_topology(data)
    return json.loads(json.dumps(_normalise(data)))


def _file_presets() -> Dict[str, Mapping[str, object]]:
    global _FILE_PRESETS_CACHE
    if _FILE_PRESETS_CACHE is None:
        found: Dict[str, Mapping[str, object]] = {}
        if _PRESET_DIR.exists():
            for file in sorted(_PRESET_DIR.iterdir()):
                if file.suffix.lower() not in {".yaml", ".yml", ".json"}:
                    continue
                found[file.stem] = load_topology_file(file)
                logger.debug("Loaded topology preset %s from %s", file.stem, file)
        _FILE_PRESETS_CACHE = found
    cache = _FILE_PRESETS_CACHE or {}
    return {name: deepcopy(cfg) for name, cfg in cache.items()}


def presets() -> Mapping[str, Mapping[str, object]]:
    combined: Dict[str, Mapping[str, object]] = {}
    combined.update({name: deepcopy(cfg) for name, cfg in _PRESETS.items()})
    combined.update(_file_presets())
    return combined


def load_preset(name: str) -> Mapping[str, object]:
    file_overrides = _file_presets()
    if name in file_overrides:
        return file_overrides[name]
    try:
        return deepcopy(_PRESETS[name])
    except KeyError:
        raise KeyError(f"Unknown topology preset: {name}") from None


def build_network(
    topology: str | Mapping[str, object],
    fill: float = 0.0,
    *,
    dtype: np.dtype | type = np.float64,
) -> Network:
    """Construct a network from a preset name or a topology mapping."""

    config = load_preset(topology) if isinstance(topology, str) else topology
    return Network(parse_topology(config), fill, dtype=dtype)


__all__ = [
    "build_network",
    "config_hash",
    "load_preset",
    "load_topology_file",
    "parse_topology",
    "presets",
    "topology_hash",
]
