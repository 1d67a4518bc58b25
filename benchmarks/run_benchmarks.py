#!/usr/bin/env python3
"""Benchmark suite for PySkip comparing against a bisect-backed sorted list."""

import argparse
import bisect
import json
import random
import time
from pathlib import Path
from typing import Dict, List

import numpy as np
import plotly.graph_objects as go
from tqdm import tqdm

from pyskip import SkipList


class Metrics:
    def __init__(self):
        self.insert_latencies: List[float] = []
        self.find_latencies: List[float] = []
        self.erase_latencies: List[float] = []
        self.levels: List[int] = []

    def to_dict(self) -> Dict:
        return {
            name: {
                "p50": np.percentile(values, 50),
                "p95": np.percentile(values, 95),
                "p99": np.percentile(values, 99),
            }
            for name, values in (
                ("insert_latencies", self.insert_latencies),
                ("find_latencies", self.find_latencies),
                ("erase_latencies", self.erase_latencies),
            )
        } | {"max_levels": max(self.levels, default=0)}

    def plot_latencies(self, title: str, output_path: Path):
        fig = go.Figure()

        for name, values in (
            ("Insert Latency", self.insert_latencies),
            ("Find Latency", self.find_latencies),
            ("Erase Latency", self.erase_latencies),
        ):
            fig.add_trace(go.Box(y=values, name=name, boxpoints="outliers"))

        fig.update_layout(
            title=title,
            yaxis_title="Latency (µs)",
            boxmode="group"
        )

        fig.write_html(output_path)


class BenchmarkSuite:
    def __init__(self, num_entries: int, seed: int):
        self.num_entries = num_entries
        rng = random.Random(seed)
        self._keys = rng.sample(range(num_entries * 10), num_entries)
        self.seed = seed

    def run_pyskip_benchmark(self) -> Metrics:
        metrics = Metrics()
        sl = SkipList(seed=self.seed)

        for key in tqdm(self._keys, desc="PySkip Insert"):
            start = time.perf_counter()
            sl.insert(key)
            metrics.insert_latencies.append((time.perf_counter() - start) * 1e6)
            metrics.levels.append(sl.level)

        for key in tqdm(self._keys, desc="PySkip Find"):
            start = time.perf_counter()
            sl.contains(key)
            metrics.find_latencies.append((time.perf_counter() - start) * 1e6)

        assert sl.validate(), "structure corrupted during benchmark"

        for key in tqdm(self._keys, desc="PySkip Erase"):
            start = time.perf_counter()
            sl.erase(key)
            metrics.erase_latencies.append((time.perf_counter() - start) * 1e6)

        return metrics

    def run_bisect_benchmark(self) -> Metrics:
        metrics = Metrics()
        items: List[int] = []

        for key in tqdm(self._keys, desc="bisect Insert"):
            start = time.perf_counter()
            pos = bisect.bisect_left(items, key)
            if pos == len(items) or items[pos] != key:
                items.insert(pos, key)
            metrics.insert_latencies.append((time.perf_counter() - start) * 1e6)

        for key in tqdm(self._keys, desc="bisect Find"):
            start = time.perf_counter()
            pos = bisect.bisect_left(items, key)
            _ = pos < len(items) and items[pos] == key
            metrics.find_latencies.append((time.perf_counter() - start) * 1e6)

        for key in tqdm(self._keys, desc="bisect Erase"):
            start = time.perf_counter()
            pos = bisect.bisect_left(items, key)
            if pos < len(items) and items[pos] == key:
                del items[pos]
            metrics.erase_latencies.append((time.perf_counter() - start) * 1e6)

        return metrics


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--size", type=int, default=100000, help="Number of entries")
    parser.add_argument("--seed", type=int, default=42, help="Seed for keys and levels")
    parser.add_argument("--output", type=Path, default=Path("benchmark_results"), help="Output directory")
    args = parser.parse_args()

    args.output.mkdir(parents=True, exist_ok=True)

    suite = BenchmarkSuite(args.size, args.seed)
    pyskip_metrics = suite.run_pyskip_benchmark()
    bisect_metrics = suite.run_bisect_benchmark()

    pyskip_metrics.plot_latencies(
        "PySkip Latency Distribution",
        args.output / "pyskip_latencies.html"
    )

    with open(args.output / "metrics.json", "w") as f:
        json.dump({
            "pyskip": pyskip_metrics.to_dict(),
            "bisect": bisect_metrics.to_dict(),
        }, f, indent=2)


if __name__ == "__main__":
    main()
