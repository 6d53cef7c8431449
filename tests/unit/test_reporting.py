import json

from staticnet.reporting import describe_layout, summarize_state, write_layout
from staticnet.topologies import build_network, load_preset, topology_hash


def test_describe_layout_forager_recurrent():
    net = build_network("forager-recurrent")
    table = describe_layout(net)
    assert table["state_size"] == 105
    assert table["parameter_count"] == 97
    assert [layer["offset"] for layer in table["layers"]] == [0, 96]
    assert table["layers"][0]["segments"] == {
        "weights": 10,
        "activation": 0,
        "feedback": 1,
        "scratch": 1,
    }
    assert table["layers"][1]["kind"]["slope"] == [1, 2]
    assert table["topology_hash"] == topology_hash(load_preset("forager-recurrent"))


def test_write_layout_is_valid_json(tmp_path):
    net = build_network("forager-varsig")
    path = write_layout(tmp_path / "out" / "layout.json", net)
    data = json.loads(open(path, encoding="utf-8").read())
    assert data["input_size"] == 9
    # rectified neurons have no finite upper bound
    assert data["layers"][1]["bounds"] == [0.0, None]


def test_summarize_state_separates_scratch():
    net = build_network("forager-recurrent", fill=1.0)
    summary = summarize_state(net)
    first = summary["layers"][0]
    assert first["weights"]["mean"] == 1.0
    assert first["scratch"] == {"count": 8, "min": 0.0, "max": 0.0, "mean": 0.0}
    assert first["activation"] == {"count": 0}
    assert summary["state"]["count"] == net.state_size
