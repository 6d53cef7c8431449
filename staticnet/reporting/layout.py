"""Layout table helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List

from ..core.network import Network
from ..topologies.registry import config_hash


def _bound(value: float) -> float | None:
    # open-ended codomains are reported as null
    return None if abs(value) > 1e300 else float(value)


def describe_layout(network: Network) -> Dict[str, object]:
    """Return a JSON-serialisable description of ``network``'s buffer layout."""

    layout = network.layout
    layers: List[Dict[str, object]] = []
    for idx, (layer, offset) in enumerate(zip(layout.layers, layout.offsets)):
        neuron = layer.neuron
        layers.append(
            {
                "index": idx,
                "offset": offset,
                "state_size": layer.state_size,
                "neuron_state_size": neuron.state_size,
                "input_size": layer.input_size,
                "output_size": layer.output_size,
                "kind": layer.describe(),
                "segments": {
                    "weights": neuron.input_weights,
                    "activation": neuron.activation_state,
                    "feedback": neuron.feedback_state,
                    "scratch": neuron.feedback_scratch,
                },
                "bounds": [_bound(layer.minimum), _bound(layer.maximum)],
            }
        )
    return {
        "version": 1,
        "topology_hash": config_hash(network.describe()),
        "input_size": network.input_size,
        "output_size": network.output_size,
        "state_size": network.state_size,
        "parameter_count": network.parameter_count(),
        "layers": layers,
    }


def write_layout(path: str | Path, network: Network) -> str:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(describe_layout(network), indent=2, sort_keys=True))
    return str(path)


__all__ = ["describe_layout", "write_layout"]
