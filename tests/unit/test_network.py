import copy

import numpy as np
import pytest

from staticnet.core.activations import IDENTITY, RECTIFIED, STEP_UNIPOLAR, TANH_BIPOLAR
from staticnet.core.feedback import DIRECT
from staticnet.core.layer import Layer
from staticnet.core.network import Network, NetworkLayout
from staticnet.core.neuron import Neuron, unbiased_neuron
from staticnet.core.types import ConfigurationError, UsageError


def _identity_net():
    # 2 inputs -> 2 identity neurons -> 1 identity neuron
    layers = [Layer(Neuron(2, IDENTITY), 2), Layer(Neuron(2, IDENTITY), 1)]
    net = Network(layers)
    net.state[:] = [
        1.0, 1.0, 0.0,  # n00: 1 + x0
        0.0, 2.0, 3.0,  # n01: 2 x0 + 3 x1
        0.5, 1.0, -1.0,  # n10: 0.5 + h0 - h1
    ]
    return net


def _feedback_net(gain=0.5):
    net = Network([Layer(Neuron(1, IDENTITY, DIRECT), 1)])
    net.state[:] = [0.0, 1.0, gain, 0.0]
    return net


def test_layout_offsets_and_sizes():
    layers = [Layer(Neuron(3, TANH_BIPOLAR, DIRECT), 4), Layer(Neuron(4, RECTIFIED), 2)]
    layout = NetworkLayout.from_layers(layers)
    assert layout.offsets == (0, 4 * 6)
    assert layout.state_size == 4 * 6 + 2 * 5
    assert (layout.input_size, layout.output_size) == (3, 2)
    assert layout.coordinates == ((0, 0), (0, 1), (0, 2), (0, 3), (1, 0), (1, 1))
    assert NetworkLayout.from_layers(tuple(layers)) is layout


def test_layout_rejects_interface_mismatch():
    layers = [Layer(Neuron(3, IDENTITY), 4), Layer(Neuron(5, IDENTITY), 1)]
    with pytest.raises(ConfigurationError, match="don't match"):
        Network(layers)
    with pytest.raises(ConfigurationError):
        Network([])


def test_hand_built_layout_is_validated():
    layers = (Layer(Neuron(3, IDENTITY), 4), Layer(Neuron(5, IDENTITY), 1))
    with pytest.raises(ConfigurationError, match="don't match"):
        Network(NetworkLayout(layers=layers, offsets=(0, 16), state_size=22))
    good = (Layer(Neuron(2, IDENTITY), 2), Layer(Neuron(2, IDENTITY), 1))
    with pytest.raises(ConfigurationError, match="Layout table"):
        NetworkLayout(layers=good, offsets=(0, 5), state_size=9)
    with pytest.raises(ConfigurationError, match="Layout table"):
        NetworkLayout(layers=good, offsets=(0, 6), state_size=12)
    with pytest.raises(ConfigurationError):
        NetworkLayout(layers=(), offsets=(), state_size=0)
    layout = NetworkLayout(layers=list(good), offsets=[0, 6], state_size=9)
    assert layout == NetworkLayout.from_layers(good)
    assert Network(layout).evaluate([1.0, 1.0]).shape == (1,)


def test_evaluate_hand_computed():
    net = _identity_net()
    out = net.evaluate([2.0, 1.0])
    # h = [3, 7]; y = 0.5 + 3 - 7
    assert out.shape == (1,)
    assert out[0] == pytest.approx(-3.5)
    assert net(2.0, 1.0)[0] == pytest.approx(-3.5)
    assert net([2.0, 1.0])[0] == pytest.approx(-3.5)


def test_evaluate_rejects_wrong_input_length():
    net = _identity_net()
    with pytest.raises(UsageError):
        net.evaluate([1.0])
    with pytest.raises(UsageError):
        net.evaluate([1.0, 2.0, 3.0])
    with pytest.raises(UsageError):
        net.evaluate(np.ones((1, 2)))


def test_feedback_history_and_reset():
    net = _feedback_net()
    assert [net.evaluate([1.0])[0] for _ in range(3)] == [1.0, 1.5, 1.75]
    net.reset_scratch()
    assert net.evaluate([1.0])[0] == 1.0
    assert net.state[2] == 0.5


def test_uniform_fill_leaves_scratch_zeroed():
    layers = [Layer(Neuron(2, TANH_BIPOLAR, DIRECT), 3), Layer(Neuron(3, IDENTITY), 1)]
    net = Network(layers, fill=0.25)
    mask = net.layout.scratch_mask()
    assert mask.sum() == 3
    assert np.all(net.state[mask] == 0.0)
    assert np.all(net.state[~mask] == 0.25)
    assert net.parameter_count() == net.state_size - 3
    assert np.all(Network(layers).state == 0.0)


def test_addressed_access_writes_through():
    net = _identity_net()
    layer, view = net.get_layer(1)
    assert layer.size == 1 and view.shape == (3,)
    neuron, nview = net.get_neuron(0, 1)
    assert neuron.input_size == 2
    assert np.array_equal(nview, [0.0, 2.0, 3.0])
    nview[:] = 0.0
    assert np.all(net.state[3:6] == 0.0)
    with pytest.raises(IndexError):
        net.get_layer(2)
    with pytest.raises(IndexError):
        net.get_neuron(1, 1)


def test_whole_buffer_access():
    net = _identity_net()
    assert len(net) == 9
    assert list(net)[:3] == [1.0, 1.0, 0.0]
    with pytest.raises(ValueError):
        net.cstate[0] = 5.0
    net.state[0] = 5.0
    assert net.cstate[0] == 5.0


def test_copy_does_not_alias():
    net = _identity_net()
    clone = net.copy()
    clone.state[:] = 0.0
    assert net.evaluate([2.0, 1.0])[0] == pytest.approx(-3.5)
    assert clone.evaluate([2.0, 1.0])[0] == 0.0
    for other in (copy.copy(net), copy.deepcopy(net)):
        assert other.layout is net.layout
        assert not np.shares_memory(other.state, net.state)


def test_assign_copies_state_between_instances():
    src = _identity_net()
    dst = Network(src.layers)
    dst.assign(src)
    assert np.array_equal(dst.state, src.state)
    other = Network([Layer(Neuron(2, IDENTITY), 1)])
    with pytest.raises(ConfigurationError):
        other.assign(src)


def test_state_dict_round_trip():
    net = _identity_net()
    snapshot = net.state_dict()
    assert snapshot["L0"].shape == (2, 3)
    net.state[:] = 0.0
    net.load_state_dict(snapshot)
    assert net.evaluate([2.0, 1.0])[0] == pytest.approx(-3.5)
    with pytest.raises(KeyError):
        net.load_state_dict({"L0": snapshot["L0"]})
    with pytest.raises(UsageError):
        net.load_state_dict({"L0": snapshot["L0"], "L1": np.zeros((2, 3))})


def test_output_bounds_and_dtype():
    net = Network([Layer(unbiased_neuron(2, STEP_UNIPOLAR), 2)], dtype=np.float32)
    assert net.output_bounds == (0.0, 1.0)
    out = net.evaluate([1.0, -1.0])
    assert out.dtype == np.float32
    assert np.array_equal(out, [1.0, 1.0])
    assert "state_size=4" in repr(net)


def test_load_state_dict_is_all_or_nothing():
    net = _identity_net()
    net.state[:] = 1.0
    before = net.state.copy()
    with pytest.raises(UsageError):
        net.load_state_dict({"L0": np.full((2, 3), 9.0), "L1": np.zeros((5, 5))})
    assert np.array_equal(net.state, before)
    with pytest.raises(KeyError):
        net.load_state_dict({"L0": np.full((2, 3), 9.0)})
    assert np.array_equal(net.state, before)
