"""Command line demonstration of the two overflow policies.

Running the script prints, for each built-in case, how many terms a
generator produced within a pull budget together with the tail of the
emitted sequence.  The checked cases show the sequence ending once the next
sum no longer fits the element type; the wrapping cases show the values
folding back into range and the sequence carrying on.

The heavy lifting lives in ``fibext.sequence``; this script only
orchestrates pre-defined demo inputs and emits human-readable status lines.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List

from fibext import U8, U16, Fibonacci, OverflowPolicy, UnsignedInteger


@dataclass(frozen=True)
class DemoCase:
    """A generator configuration and the outcome it is expected to have."""

    element_type: UnsignedInteger
    policy: OverflowPolicy
    pulls: int
    expected_exhausted: bool

    @property
    def name(self) -> str:
        return f"{self.element_type} {self.policy.value}"

    def run(self) -> List[int]:
        """Pull up to ``pulls`` terms and return the ones emitted."""

        generator = Fibonacci(self.element_type, self.policy)
        terms: List[int] = []
        for _ in range(self.pulls):
            value = generator.pull()
            if value is None:
                break
            terms.append(value)
        return terms


def _iter_demo_cases() -> Iterator[DemoCase]:
    """Yield the built-in demonstration cases."""

    yield DemoCase(U8, OverflowPolicy.CHECKED, pulls=256, expected_exhausted=True)
    yield DemoCase(U8, OverflowPolicy.WRAPPING, pulls=16, expected_exhausted=False)
    yield DemoCase(U16, OverflowPolicy.CHECKED, pulls=256, expected_exhausted=True)


def _format_report(case: DemoCase, terms: List[int]) -> List[str]:
    """Return formatted output lines for *case* and its emitted *terms*."""

    exhausted = len(terms) < case.pulls
    if exhausted != case.expected_exhausted:
        raise RuntimeError(
            "Demo case expectation mismatch:"
            f" {case.name} expected exhausted={case.expected_exhausted}"
            f" but received exhausted={exhausted}"
        )

    status = "exhausted" if exhausted else "still running"
    header = f"{case.name}: {len(terms)} of {case.pulls} pulls emitted a term ({status})"
    tail = " ".join(str(term) for term in terms[-5:])
    return [header, f"last terms: {tail}"]


def main() -> None:
    """Execute the demonstration flow for all configured cases."""

    for case in _iter_demo_cases():
        for line in _format_report(case, case.run()):
            print(line)
        print()  # Spacer between cases


if __name__ == "__main__":
    main()
