#!/usr/bin/env python3
"""
Benchmark the layout modes on generated schemas of growing size.

Usage:
    python scripts/benchmark_layouts.py [--sizes N,...] [--modes MODE,...]

Examples:
    python scripts/benchmark_layouts.py
    python scripts/benchmark_layouts.py --sizes 50,200 --modes force
    python scripts/benchmark_layouts.py --iterations 50 --output results.json
"""

from __future__ import annotations

import argparse
import json
import random
import time
from typing import Any

from erd_layout import LayoutOrchestrator, Relationship

DEFAULT_SIZES = [10, 50, 100, 200, 500]
DEFAULT_MODES = ["grid", "hierarchical", "force"]


def generate_schema(
    num_entities: int, refs_per_entity: int = 2, seed: int = 42
) -> tuple[list[str], list[Relationship]]:
    """
    Generate a schema where each entity references a few earlier ones.

    Most relationships are N:1; roughly one in ten is N:N.
    """
    rng = random.Random(seed)
    entities = [f"entity_{i}" for i in range(num_entities)]
    relationships = []
    for i in range(1, num_entities):
        for _ in range(min(refs_per_entity, i)):
            target = rng.randrange(i)
            cardinality = "N:N" if rng.random() < 0.1 else "N:1"
            relationships.append(Relationship(entities[i], entities[target], cardinality))
    return entities, relationships


def benchmark_mode(
    orchestrator: LayoutOrchestrator,
    mode: str,
    entities: list[str],
    relationships: list[Relationship],
) -> dict[str, Any]:
    """
    Benchmark a single layout mode.

    Returns:
        Dict with timing and result info
    """
    start = time.perf_counter()
    positions = orchestrator.recompute(mode, entities, relationships)
    elapsed = time.perf_counter() - start

    return {
        "time_seconds": elapsed,
        "num_nodes": len(entities),
        "num_edges": len(relationships),
        "num_positions": len(positions or {}),
    }


def run_benchmarks(
    sizes: list[int],
    modes: list[str],
    iterations: int = 100,
) -> list[dict]:
    """Run benchmarks on generated schemas."""
    orchestrator = LayoutOrchestrator(
        random_seed=42, force_options={"iterations": iterations}
    )
    results = []

    print(f"\nBenchmarking {len(modes)} modes on {len(sizes)} schema sizes")
    print(f"Force iterations: {iterations}")
    print("=" * 60)

    for size in sizes:
        entities, relationships = generate_schema(size)
        print(f"\n{size} entities, {len(relationships)} relationships")
        print("-" * 40)

        for mode in modes:
            result = benchmark_mode(orchestrator, mode, entities, relationships)
            print(f"  {mode:14s}: {result['time_seconds']:.4f}s")
            results.append({"size": size, "mode": mode, **result})

    # Summary
    print("\n" + "=" * 60)
    print("SUMMARY (times in seconds)")
    print("=" * 60)

    print(f"{'Entities':<12s}", end="")
    for mode in modes:
        print(f"{mode:>14s}", end="")
    print()
    print("-" * (12 + 14 * len(modes)))

    for size in sizes:
        print(f"{size:<12d}", end="")
        for mode in modes:
            matching = [r for r in results if r["size"] == size and r["mode"] == mode]
            print(f"{matching[0]['time_seconds']:>14.4f}", end="")
        print()

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark ERD layout modes")
    parser.add_argument("--sizes", help="Comma-separated entity counts (e.g., '10,100,500')")
    parser.add_argument("--modes", help="Comma-separated layout modes (e.g., 'grid,force')")
    parser.add_argument("--iterations", type=int, default=100, help="Force layout iterations")
    parser.add_argument("--output", help="Output JSON file for results")

    args = parser.parse_args()

    sizes = [int(s) for s in args.sizes.split(",")] if args.sizes else DEFAULT_SIZES
    modes = args.modes.split(",") if args.modes else DEFAULT_MODES

    results = run_benchmarks(sizes, modes, iterations=args.iterations)

    if args.output and results:
        with open(args.output, "w") as f:
            json.dump(results, f, indent=2)
        print(f"\nResults saved to {args.output}")


if __name__ == "__main__":
    main()
