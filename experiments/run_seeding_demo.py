#!/usr/bin/env python3
"""Compare center initialization strategies.

Loads weighted vectors from a delimited text file (or generates
Gaussian blobs), runs every init strategy over several seeds, and
reports the mean clustering cost of each.

Usage:
    python experiments/run_seeding_demo.py --k 6 --seeds 20
    python experiments/run_seeding_demo.py --strategy parallel --seed 7
    python experiments/run_seeding_demo.py --input data.txt --dimensions 3
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import argparse
import logging
import time

import numpy as np

from kmeans_init.clustering import compare_strategies, weighted_points
from kmeans_init.config import KMeansInitConfig
from kmeans_init.data import load_weighted_vectors


def make_blobs(n_points: int, k: int, dimensions: int, seed: int):
    """Gaussian blobs with random integer weights."""
    rng = np.random.default_rng(seed)
    means = rng.uniform(-50, 50, size=(k, dimensions))
    labels = rng.integers(k, size=n_points)
    vectors = means[labels] + rng.normal(size=(n_points, dimensions))
    weights = rng.integers(1, 10, size=n_points)
    return weighted_points(vectors, weights)


def parse_args():
    parser = argparse.ArgumentParser(description="Compare k-means init strategies")
    parser.add_argument("--input", type=str, default=None, help="Delimited numeric text file")
    parser.add_argument("--dimensions", type=int, default=2)
    parser.add_argument("--k", type=int, default=6)
    parser.add_argument("--n-points", type=int, default=2000)
    parser.add_argument(
        "--strategy", type=str, default="all",
        help="random, plus_plus, parallel, or all to compare every strategy",
    )
    parser.add_argument("--seed", type=int, default=42, help="First random seed")
    parser.add_argument("--seeds", type=int, default=10, help="Number of seeds to average over")
    parser.add_argument("--workers", type=int, default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args()


def main():
    """Run strategy comparison."""
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    seeding = {"n_clusters": args.k, "seed": args.seed, "n_workers": args.workers}
    if args.strategy != "all":
        seeding["strategy"] = args.strategy
    config = KMeansInitConfig.from_dict({
        "seeding": seeding,
        "input": {"path": args.input, "dimensions": args.dimensions},
    })
    strategies = None if args.strategy == "all" else [config.seeding.strategy]
    seeds = config.seeding.seed_range(args.seeds)

    print("=" * 60)
    print("Weighted k-means initialization")
    print("=" * 60)

    if config.input.path:
        points = load_weighted_vectors(config.input.path, config.input.dimensions, seed=seeds.start)
        print(f"Loaded {len(points)} vectors from {config.input.path}")
    else:
        points = make_blobs(args.n_points, config.seeding.n_clusters, config.input.dimensions, seed=seeds.start)
        print(f"Generated {len(points)} weighted points in {config.seeding.n_clusters} blobs")
    print()

    start = time.time()
    results = compare_strategies(
        points,
        config.seeding.n_clusters,
        seeds=seeds,
        strategies=strategies,
        n_workers=config.seeding.n_workers,
    )
    elapsed = time.time() - start

    print(
        f"Mean clustering cost over seeds {seeds.start}..{seeds.stop - 1} "
        f"(k={config.seeding.n_clusters}):"
    )
    for strategy, cost in results.items():
        print(f"  {strategy.value:<10} {cost:.4f}")
    print(f"Runtime: {elapsed:.2f}s")

    return results


if __name__ == "__main__":
    main()
