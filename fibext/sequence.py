"""Lazy Fibonacci generator over configurable unsigned element types."""

from __future__ import annotations

from typing import Iterator, Optional, Tuple, Union

from .config import DEFAULT_FEATURES, FeatureFlags, OverflowPolicy, resolve_policy
from .numeric import U64, UnsignedInteger, resolve_element_type

__all__ = ["Fibonacci"]


class Fibonacci(Iterator[int]):
    """Fibonacci sequence seeded at ``(0, 1)``.

    Each pull emits ``current`` and advances the pair to
    ``(next, current + next)``.  Under :attr:`OverflowPolicy.CHECKED` the
    sequence ends as soon as that sum no longer fits the element type and it
    stays ended; under :attr:`OverflowPolicy.WRAPPING` the sum is reduced
    modulo the type's range and the sequence never ends.

    The generator is a plain value: it holds no resources and two instances
    never share state.
    """

    __slots__ = ("element_type", "policy", "features", "current", "next", "_exhausted")

    def __init__(
        self,
        element_type: Union[str, UnsignedInteger] = U64,
        policy: Optional[Union[str, OverflowPolicy]] = None,
        *,
        features: Optional[FeatureFlags] = None,
    ) -> None:
        self.features = DEFAULT_FEATURES if features is None else features
        self.element_type = resolve_element_type(element_type)
        if not self.element_type.is_bounded:
            self.features.require("large-numbers", f"{self.element_type} element type")
        self.policy = (
            self.features.default_policy if policy is None else resolve_policy(policy)
        )
        self.current = self.element_type.zero()
        self.next = self.element_type.one()
        self._exhausted = False

    @property
    def state(self) -> Tuple[int, int]:
        """The ``(current, next)`` pair that the next pull works from."""

        return self.current, self.next

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def pull(self) -> Optional[int]:
        """Return the next term, or ``None`` once the sequence has ended."""

        self.features.require("iterator", "Pulling from a Fibonacci generator")
        return self._advance()

    def __iter__(self) -> "Fibonacci":
        self.features.require("iterator", "Iterating a Fibonacci generator")
        return self

    def __next__(self) -> int:
        value = self.pull()
        if value is None:
            raise StopIteration
        return value

    def _advance(self) -> Optional[int]:
        if self._exhausted:
            return None

        if self.policy is OverflowPolicy.CHECKED:
            candidate = self.element_type.checked_add(self.current, self.next)
            if candidate is None:
                # The recurrence can never shrink back into range.
                self._exhausted = True
                return None
        else:
            candidate = self.element_type.wrapping_add(self.current, self.next)

        emitted = self.current
        self.current = self.next
        self.next = candidate
        return emitted

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(element_type={self.element_type}, "
            f"policy={self.policy.value}, current={self.current}, next={self.next})"
        )
