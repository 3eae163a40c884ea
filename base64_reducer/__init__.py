"""Fit images under binary-size and base64-length ceilings."""

from base64_reducer.codec import Codec, EncodeAttempt, PillowCodec, TargetFormat
from base64_reducer.errors import (
    CompressionExhausted,
    DecodeError,
    EncodeError,
    InvalidConstraints,
    OptimizationError,
)
from base64_reducer.limits import Constraints, estimate_base64_length, validate_limits
from base64_reducer.optimizer import (
    optimize,
    optimize_source,
    optimize_to_base64,
    optimize_to_bytes,
    optimize_to_data_uri,
)
from base64_reducer.search import SearchPolicy

__all__ = [
    "Codec",
    "CompressionExhausted",
    "Constraints",
    "DecodeError",
    "EncodeAttempt",
    "EncodeError",
    "InvalidConstraints",
    "OptimizationError",
    "PillowCodec",
    "SearchPolicy",
    "TargetFormat",
    "estimate_base64_length",
    "optimize",
    "optimize_source",
    "optimize_to_base64",
    "optimize_to_bytes",
    "optimize_to_data_uri",
    "validate_limits",
]
