"""Unsigned integer element types for sequence generation.

Every element type is described by a small descriptor object that knows how
to produce the additive identity, the unit seed and how to add two values
under either overflow policy.  Values themselves are plain Python ``int``
objects; the descriptor is responsible for keeping them inside the range of
the type it models.

Two families of descriptors are provided:

* ``FixedWidthUnsigned`` – 8, 16, 32, 64 and 128-bit unsigned integers.  Each
  descriptor advertises the matching numpy ``dtype`` so buffers can be
  allocated natively (numpy has no 128-bit unsigned type, so ``U128`` falls
  back to ``object``).
* ``ArbitraryPrecisionUnsigned`` – backed by Python's unbounded integers, for
  which overflow cannot occur.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
import operator
from typing import Dict, Mapping, Optional, Union

import numpy as np

__all__ = [
    "ArithmeticOverflowError",
    "UnsignedInteger",
    "FixedWidthUnsigned",
    "ArbitraryPrecisionUnsigned",
    "U8",
    "U16",
    "U32",
    "U64",
    "U128",
    "BIG_UINT",
    "ELEMENT_TYPES",
    "resolve_element_type",
    "element_type_for_dtype",
]


class ArithmeticOverflowError(OverflowError):
    """Raised when adding two values exceeds the element type's range."""

    def __init__(self, message: str = "Arithmetic operation overflowed") -> None:
        super().__init__(message)


class UnsignedInteger(ABC):
    """Capability set an element type must provide."""

    name: str

    @abstractmethod
    def zero(self) -> int:
        """Return the additive identity."""

    @abstractmethod
    def one(self) -> int:
        """Return the unit value used as the second seed."""

    @abstractmethod
    def checked_add(self, lhs: int, rhs: int) -> Optional[int]:
        """Return ``lhs + rhs`` or ``None`` when the sum is out of range."""

    @abstractmethod
    def wrapping_add(self, lhs: int, rhs: int) -> int:
        """Return ``lhs + rhs`` reduced into the type's range."""

    @property
    @abstractmethod
    def dtype(self) -> np.dtype:
        """numpy dtype used when materialising values of this type."""

    @property
    def is_bounded(self) -> bool:
        return True

    def safe_add(self, lhs: int, rhs: int) -> int:
        """Return ``lhs + rhs`` raising :class:`ArithmeticOverflowError` on overflow."""

        result = self.checked_add(lhs, rhs)
        if result is None:
            raise ArithmeticOverflowError()
        return result

    def coerce(self, value: object) -> int:
        """Validate *value* and return it as a Python ``int``."""

        if isinstance(value, (bool, np.bool_)):
            raise TypeError(f"{self.name} values must be integers, not booleans")
        try:
            number = operator.index(value)  # type: ignore[arg-type]
        except TypeError as exc:
            raise TypeError(f"{self.name} values must be integers") from exc
        if number < 0:
            raise ValueError(f"{self.name} values must be non-negative")
        return number

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class FixedWidthUnsigned(UnsignedInteger):
    """Unsigned integer of a fixed bit width."""

    name: str
    bits: int
    numpy_type: Optional[type] = None

    def __post_init__(self) -> None:
        if self.bits <= 0:
            raise ValueError("bits must be positive")

    @property
    def max_value(self) -> int:
        return (1 << self.bits) - 1

    @property
    def dtype(self) -> np.dtype:
        if self.numpy_type is None:
            return np.dtype(object)
        return np.dtype(self.numpy_type)

    def zero(self) -> int:
        return 0

    def one(self) -> int:
        return 1

    def checked_add(self, lhs: int, rhs: int) -> Optional[int]:
        total = self.coerce(lhs) + self.coerce(rhs)
        if total > self.max_value:
            return None
        return total

    def wrapping_add(self, lhs: int, rhs: int) -> int:
        return (self.coerce(lhs) + self.coerce(rhs)) & self.max_value

    def coerce(self, value: object) -> int:
        number = super().coerce(value)
        if number > self.max_value:
            raise ValueError(f"{number} does not fit in {self.name}")
        return number


@dataclass(frozen=True)
class ArbitraryPrecisionUnsigned(UnsignedInteger):
    """Unbounded unsigned integer; additions never overflow."""

    name: str = "biguint"

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(object)

    @property
    def is_bounded(self) -> bool:
        return False

    def zero(self) -> int:
        return 0

    def one(self) -> int:
        return 1

    def checked_add(self, lhs: int, rhs: int) -> Optional[int]:
        return self.coerce(lhs) + self.coerce(rhs)

    def wrapping_add(self, lhs: int, rhs: int) -> int:
        return self.coerce(lhs) + self.coerce(rhs)


U8 = FixedWidthUnsigned("u8", 8, np.uint8)
U16 = FixedWidthUnsigned("u16", 16, np.uint16)
U32 = FixedWidthUnsigned("u32", 32, np.uint32)
U64 = FixedWidthUnsigned("u64", 64, np.uint64)
U128 = FixedWidthUnsigned("u128", 128)
BIG_UINT = ArbitraryPrecisionUnsigned()

ELEMENT_TYPES: Mapping[str, UnsignedInteger] = {
    element_type.name: element_type
    for element_type in (U8, U16, U32, U64, U128, BIG_UINT)
}

_DTYPE_ELEMENT_TYPES: Dict[np.dtype, UnsignedInteger] = {
    element_type.dtype: element_type for element_type in (U8, U16, U32, U64)
}


def resolve_element_type(element_type: Union[str, UnsignedInteger]) -> UnsignedInteger:
    """Return the descriptor registered under *element_type*.

    Descriptors are passed through unchanged so callers can accept either a
    name (as supplied on the command line) or an already resolved type.
    """

    if isinstance(element_type, UnsignedInteger):
        return element_type
    if not isinstance(element_type, str):
        raise TypeError("element type must be a name or an UnsignedInteger")
    key = element_type.strip().lower()
    try:
        return ELEMENT_TYPES[key]
    except KeyError:
        choices = ", ".join(ELEMENT_TYPES)
        raise ValueError(
            f"Unknown element type {element_type!r}; expected one of: {choices}"
        ) from None


def element_type_for_dtype(dtype: object) -> UnsignedInteger:
    """Map a numpy unsigned integer dtype to its element type."""

    resolved = np.dtype(dtype)
    try:
        return _DTYPE_ELEMENT_TYPES[resolved]
    except KeyError:
        raise TypeError(
            f"dtype {resolved} has no matching unsigned element type; "
            "pass element_type explicitly"
        ) from None
