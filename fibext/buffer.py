"""Helpers that materialise Fibonacci terms into buffers.

``fill_fibonacci_sequence`` writes consecutive terms, starting at F(0), into a
caller supplied mutable sequence.  Python lists and numpy arrays are both
accepted; for numpy arrays the element type is inferred from the dtype when
it is not given explicitly.

If the checked policy runs out of representable terms before the buffer is
full a :class:`SequenceExhaustedError` is raised.  Slots written before the
overflow keep their values and the error reports how many there are, so the
caller can decide whether a partial buffer is useful.
"""

from __future__ import annotations

from typing import MutableSequence, Optional, TypeVar, Union

import numpy as np

from .config import DEFAULT_FEATURES, FeatureFlags, OverflowPolicy
from .numeric import (
    U64,
    ArithmeticOverflowError,
    UnsignedInteger,
    element_type_for_dtype,
    resolve_element_type,
)
from .sequence import Fibonacci

__all__ = [
    "SequenceExhaustedError",
    "fibonacci_array",
    "fill_fibonacci_sequence",
]

BufferT = TypeVar("BufferT", bound=MutableSequence)


class SequenceExhaustedError(ArithmeticOverflowError):
    """Raised when the sequence ends before a buffer could be filled."""

    def __init__(self, element_type: UnsignedInteger, filled: int, requested: int) -> None:
        super().__init__(
            f"{element_type} Fibonacci sequence overflowed after {filled} of "
            f"{requested} terms"
        )
        self.element_type = element_type
        self.filled = filled
        self.requested = requested


def fill_fibonacci_sequence(
    buffer: BufferT,
    element_type: Optional[Union[str, UnsignedInteger]] = None,
    *,
    policy: Optional[Union[str, OverflowPolicy]] = None,
    features: Optional[FeatureFlags] = None,
) -> BufferT:
    """Fill *buffer* in place with F(0), F(1), ... and return it.

    A fresh generator is used for every call; its state is discarded once the
    buffer is full.
    """

    active = DEFAULT_FEATURES if features is None else features
    if isinstance(buffer, np.ndarray):
        active.require("std", "Filling a numpy array")
        if buffer.ndim != 1:
            raise ValueError("numpy buffers must be one-dimensional")
        if element_type is None:
            element_type = element_type_for_dtype(buffer.dtype)
        else:
            element_type = resolve_element_type(element_type)
            if buffer.dtype not in (element_type.dtype, np.dtype(object)):
                raise TypeError(
                    f"dtype {buffer.dtype} cannot hold {element_type} values; "
                    f"expected {element_type.dtype} or object"
                )
    elif element_type is None:
        element_type = U64

    generator = Fibonacci(element_type, policy, features=active)
    length = len(buffer)
    for index in range(length):
        value = generator._advance()
        if value is None:
            raise SequenceExhaustedError(generator.element_type, index, length)
        buffer[index] = value
    return buffer


def fibonacci_array(
    count: int,
    element_type: Union[str, UnsignedInteger] = U64,
    *,
    policy: Optional[Union[str, OverflowPolicy]] = None,
    features: Optional[FeatureFlags] = None,
) -> np.ndarray:
    """Return the first *count* terms as a numpy array of the element's dtype."""

    if not isinstance(count, int) or isinstance(count, bool):
        raise TypeError("count must be an integer")
    if count < 0:
        raise ValueError("count must be non-negative")

    active = DEFAULT_FEATURES if features is None else features
    active.require("std", "fibonacci_array")

    resolved = resolve_element_type(element_type)
    buffer = np.zeros(count, dtype=resolved.dtype)
    return fill_fibonacci_sequence(buffer, resolved, policy=policy, features=active)
