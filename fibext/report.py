"""Fibonacci sequence reports and their command line front end.

Running the module (or ``python -m fibext``) prints the first ``--count``
terms for the chosen element type and overflow policy, optionally writing the
same payload as JSON so different element types or policies can be diffed
against each other.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from .config import (
    ConfigError,
    FeatureDisabledError,
    FeatureFlags,
    OverflowPolicy,
    add_feature_arguments,
    features_from_arguments,
)
from .numeric import ELEMENT_TYPES, U64, UnsignedInteger
from .sequence import Fibonacci

logger = logging.getLogger(__name__)

__all__ = [
    "SequenceReport",
    "main",
    "sequence_report",
    "write_sequence_report",
]


@dataclass(frozen=True)
class SequenceReport:
    """Terms emitted by one generator run."""

    element_type: str
    policy: str
    requested: int
    terms: List[int]
    exhausted: bool

    def to_dict(self) -> Dict[str, object]:
        """Return a serialisable representation of the report."""

        return {
            "element_type": self.element_type,
            "policy": self.policy,
            "requested": self.requested,
            "terms": list(self.terms),
            "exhausted": self.exhausted,
        }


def _validate_count(count: int) -> None:
    if not isinstance(count, int) or isinstance(count, bool):
        raise TypeError("count must be an integer")
    if count < 0:
        raise ValueError("count must be non-negative")


def sequence_report(
    count: int,
    element_type: Union[str, UnsignedInteger] = U64,
    policy: Optional[Union[str, OverflowPolicy]] = None,
    *,
    features: Optional[FeatureFlags] = None,
) -> SequenceReport:
    """Pull up to *count* terms and describe the outcome.

    Under the checked policy the report may hold fewer than *count* terms, in
    which case ``exhausted`` is ``True``.
    """

    _validate_count(count)
    generator = Fibonacci(element_type, policy, features=features)
    terms: List[int] = []
    while len(terms) < count:
        value = generator.pull()
        if value is None:
            break
        terms.append(value)
    return SequenceReport(
        element_type=str(generator.element_type),
        policy=generator.policy.value,
        requested=count,
        terms=terms,
        exhausted=generator.exhausted,
    )


def write_sequence_report(report: SequenceReport, output: Path, indent: int = 2) -> Path:
    """Write *report* to ``output`` as JSON."""

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(
        json.dumps(report.to_dict(), indent=indent, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    return output


def _non_negative_int(value: str) -> int:
    try:
        parsed = int(value, 10)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("Count must be an integer") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("Count must be non-negative")
    return parsed


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fibext",
        description="Generate Fibonacci terms over a chosen unsigned integer type.",
    )
    parser.add_argument(
        "--count",
        type=_non_negative_int,
        default=10,
        help="Maximum number of terms to generate (default: 10)",
    )
    parser.add_argument(
        "--type",
        dest="element_type",
        choices=list(ELEMENT_TYPES),
        default=U64.name,
        help="Element type the sequence is computed in (default: u64)",
    )
    parser.add_argument(
        "--policy",
        choices=[member.value for member in OverflowPolicy],
        default=None,
        help="Overflow policy; defaults to the one selected by the enabled features",
    )
    add_feature_arguments(parser)
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Optional path of a JSON report to write",
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        choices=["json", "text"],
        default="text",
        help="Print the terms as text lines or as a JSON document",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        help="Logging verbosity for diagnostic output.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point; returns a process exit code."""

    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level))

    try:
        features = features_from_arguments(args)
        report = sequence_report(
            args.count, args.element_type, args.policy, features=features
        )
    except (ConfigError, FeatureDisabledError) as exc:
        logger.error("%s", exc)
        return 2

    logger.info(
        "Generated %d of %d %s terms (%s policy)",
        len(report.terms),
        report.requested,
        report.element_type,
        report.policy,
    )

    if args.output is not None:
        write_sequence_report(report, args.output)
        logger.info("Report written to %s", args.output)

    if args.output_format == "json":
        print(json.dumps(report.to_dict()))
    else:
        for term in report.terms:
            print(term)
        if report.exhausted:
            print(f"-- {report.element_type} sequence exhausted after {len(report.terms)} terms")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry
    raise SystemExit(main())
