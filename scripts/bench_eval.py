from __future__ import annotations

import argparse
import csv
import json
import sys
import time
from pathlib import Path
from statistics import mean, pstdev

PRESETS = ["perceptron", "forager-tanh", "forager-recurrent", "forager-varsig"]


def _fmt_mu_sigma(vals):
    mu = mean(vals)
    sd = pstdev(vals) if len(vals) > 1 else 0.0
    return f"{mu:.2f} ± {sd:.2f}"


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {text}")
    return value


def _time_passes(name: str, seed: int, passes: int) -> dict:
    import numpy as np

    from staticnet.topologies import build_network

    net = build_network(name)
    rng = np.random.default_rng(seed)
    net.state[:] = rng.uniform(-1.0, 1.0, size=net.state_size)
    net.reset_scratch()
    inputs = rng.uniform(-1.0, 1.0, size=(passes, net.input_size))
    out = np.zeros(net.output_size)
    start = time.perf_counter()
    for x in inputs:
        out = net.evaluate(x)
    elapsed = time.perf_counter() - start
    return {
        "us_per_pass": 1e6 * elapsed / max(1, passes),
        "state_size": net.state_size,
        "last_output": float(out[0]),
    }


def main():
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))

    ap = argparse.ArgumentParser()
    ap.add_argument("--seeds", nargs="+", type=int, default=[123, 124, 125])
    ap.add_argument("--passes", type=_positive_int, default=1000)
    ap.add_argument("--out", type=str, default=".artifacts/bench")
    args = ap.parse_args()

    out = Path(args.out)
    out.mkdir(parents=True, exist_ok=True)
    runs = []
    for name in PRESETS:
        for s in args.seeds:
            r = _time_passes(name, seed=s, passes=args.passes)
            runs.append({"preset": name, "seed": s, **r})
    (out / "results.jsonl").write_text(
        "\n".join(json.dumps(x) for x in runs), encoding="utf-8"
    )

    csv_path = out / "bench_eval.csv"
    with csv_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(["preset", "seeds", "passes", "state_size", "us_per_pass_mu", "us_per_pass_sd"])
        for name in PRESETS:
            times = [r["us_per_pass"] for r in runs if r["preset"] == name]
            size = next(r["state_size"] for r in runs if r["preset"] == name)
            w.writerow(
                [
                    name,
                    len(times),
                    args.passes,
                    size,
                    f"{mean(times):.4f}",
                    f"{pstdev(times) if len(times) > 1 else 0.0:.4f}",
                ]
            )

    md_path = out / "bench_eval.md"
    lines = []
    lines.append("### Micro-Benchmark: forward pass per topology preset")
    lines.append("")
    lines.append(f"- Seeds: `{args.seeds}`; Passes: `{args.passes}`")
    lines.append("")
    lines.append("| Preset | State size | µs per pass (μ±σ) | Seeds |")
    lines.append("|---|---:|---:|---:|")
    for name in PRESETS:
        times = [r["us_per_pass"] for r in runs if r["preset"] == name]
        size = next(r["state_size"] for r in runs if r["preset"] == name)
        lines.append(f"| {name} | {size} | {_fmt_mu_sigma(times)} | {len(times)} |")
    md_path.write_text("\n".join(lines), encoding="utf-8")
    print("Wrote:", csv_path, md_path)


if __name__ == "__main__":
    main()
