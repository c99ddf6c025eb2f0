"""Micro-benchmarks for pulling terms from a generator.

Each benchmark keeps pulling from a single generator, so the measured cost
includes the arithmetic on ever larger operands.  The wrapping policy is used
by default because a checked fixed-width generator is exhausted after a
handful of pulls and would only measure the early-exit path.

Results can be persisted as CSV with a deterministic header for regression
tracking::

    python -m fibext.benchmark --types u32,u64 --iterations 100000
"""

from __future__ import annotations

import argparse
import csv
from dataclasses import dataclass
import logging
from pathlib import Path
import time
from typing import Iterable, List, Optional, Sequence, Union

from .config import (
    ConfigError,
    FeatureDisabledError,
    FeatureFlags,
    OverflowPolicy,
    add_feature_arguments,
    features_from_arguments,
)
from .numeric import UnsignedInteger
from .sequence import Fibonacci

logger = logging.getLogger(__name__)

__all__ = [
    "BenchmarkResult",
    "DEFAULT_BENCHMARK_TYPES",
    "benchmark_pull",
    "main",
    "write_benchmarks_to_csv",
]

DEFAULT_BENCHMARK_TYPES = ("u32", "u64")
DEFAULT_ITERATIONS = 100_000


@dataclass(frozen=True)
class BenchmarkResult:
    """Timing captured for one element type."""

    element_type: str
    policy: str
    iterations: int
    total_seconds: float

    @property
    def nanoseconds_per_pull(self) -> float:
        if self.iterations == 0:
            return 0.0
        return self.total_seconds * 1e9 / self.iterations

    def to_row(self) -> List[str]:
        """Serialise the result for CSV persistence."""

        return [
            self.element_type,
            self.policy,
            str(self.iterations),
            f"{self.total_seconds:.9f}",
            f"{self.nanoseconds_per_pull:.3f}",
        ]


def benchmark_pull(
    element_type: Union[str, UnsignedInteger],
    iterations: int = DEFAULT_ITERATIONS,
    policy: Union[str, OverflowPolicy] = OverflowPolicy.WRAPPING,
    *,
    features: Optional[FeatureFlags] = None,
) -> BenchmarkResult:
    """Time *iterations* pulls from a fresh generator."""

    if not isinstance(iterations, int) or isinstance(iterations, bool):
        raise TypeError("iterations must be an integer")
    if iterations < 0:
        raise ValueError("iterations must be non-negative")

    generator = Fibonacci(element_type, policy, features=features)
    pull = generator.pull
    start = time.perf_counter()
    for _ in range(iterations):
        pull()
    elapsed = time.perf_counter() - start

    result = BenchmarkResult(
        element_type=str(generator.element_type),
        policy=generator.policy.value,
        iterations=iterations,
        total_seconds=elapsed,
    )
    logger.debug(
        "%s/%s: %d pulls in %.6fs (%.1f ns/pull)",
        result.element_type,
        result.policy,
        iterations,
        elapsed,
        result.nanoseconds_per_pull,
    )
    return result


def write_benchmarks_to_csv(
    path: Path, results: Iterable[BenchmarkResult], *, newline: str = ""
) -> None:
    """Persist benchmark results to ``path`` using a deterministic header."""

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline=newline) as handle:
        writer = csv.writer(handle)
        writer.writerow(
            ["element_type", "policy", "iterations", "total_seconds", "ns_per_pull"]
        )
        for result in results:
            writer.writerow(result.to_row())


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point for benchmarking generator pulls."""

    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--types",
        default=",".join(DEFAULT_BENCHMARK_TYPES),
        help="Comma separated element types to benchmark (default: u32,u64)",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=DEFAULT_ITERATIONS,
        help="Number of pulls per element type",
    )
    parser.add_argument(
        "--policy",
        choices=[member.value for member in OverflowPolicy],
        default=OverflowPolicy.WRAPPING.value,
        help="Overflow policy used by the benchmarked generators",
    )
    add_feature_arguments(parser)
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Optional CSV file receiving the results",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        help="Logging verbosity for diagnostic output.",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level))

    names = [name.strip() for name in args.types.split(",") if name.strip()]
    if not names:
        parser.error("--types must name at least one element type")

    results: List[BenchmarkResult] = []
    try:
        features = features_from_arguments(args)
        for name in names:
            results.append(
                benchmark_pull(name, args.iterations, args.policy, features=features)
            )
    except (ConfigError, FeatureDisabledError, TypeError, ValueError) as exc:
        logger.error("Benchmark failed: %s", exc)
        return 1

    for result in results:
        print(
            f"{result.element_type:>8} {result.policy:<8} "
            f"{result.nanoseconds_per_pull:10.1f} ns/pull"
        )

    if args.output is not None:
        write_benchmarks_to_csv(args.output, results)
        logger.info("Benchmarks written to %s", args.output)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry
    raise SystemExit(main())
