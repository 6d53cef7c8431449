"""Deterministic state summaries for external observers."""

from __future__ import annotations

from typing import Dict, Mapping

import numpy as np

from ..core.network import Network
from ..core.types import Array


def _stats(values: Array) -> Mapping[str, float]:
    if values.size == 0:
        return {"count": 0}
    arr = np.asarray(values, dtype=np.float64)
    return {
        "count": int(arr.size),
        "min": float(np.min(arr)),
        "max": float(np.max(arr)),
        "mean": float(np.mean(arr)),
    }


def summarize_state(network: Network) -> Dict[str, object]:
    """Per-layer statistics of weights, rule parameters and feedback memory."""

    layers = []
    for idx, layer in enumerate(network.layers):
        _, state = network.get_layer(idx)
        rows = layer.rows(state)
        neuron = layer.neuron
        layers.append(
            {
                "index": idx,
                "weights": _stats(neuron.weights(rows)),
                "activation": _stats(neuron.activation_params(rows)),
                "feedback": _stats(neuron.feedback_params(rows)),
                "scratch": _stats(neuron.scratch(rows)),
            }
        )
    return {"version": 1, "state": _stats(network.cstate), "layers": layers}


__all__ = ["summarize_state"]
