"""Fibonacci sequences over fixed-width and arbitrary-precision unsigned integers."""

from .buffer import SequenceExhaustedError, fibonacci_array, fill_fibonacci_sequence
from .config import (
    DEFAULT_FEATURES,
    ConfigError,
    FeatureDisabledError,
    FeatureFlags,
    OverflowPolicy,
    load_features,
)
from .numeric import (
    BIG_UINT,
    ELEMENT_TYPES,
    U8,
    U16,
    U32,
    U64,
    U128,
    ArbitraryPrecisionUnsigned,
    ArithmeticOverflowError,
    FixedWidthUnsigned,
    UnsignedInteger,
    element_type_for_dtype,
    resolve_element_type,
)
from .sequence import Fibonacci

__version__ = "0.2.1"

__all__ = [
    "ArbitraryPrecisionUnsigned",
    "ArithmeticOverflowError",
    "BIG_UINT",
    "ConfigError",
    "DEFAULT_FEATURES",
    "ELEMENT_TYPES",
    "FeatureDisabledError",
    "FeatureFlags",
    "Fibonacci",
    "FixedWidthUnsigned",
    "OverflowPolicy",
    "SequenceExhaustedError",
    "U8",
    "U16",
    "U32",
    "U64",
    "U128",
    "UnsignedInteger",
    "element_type_for_dtype",
    "fibonacci_array",
    "fill_fibonacci_sequence",
    "load_features",
    "resolve_element_type",
]
