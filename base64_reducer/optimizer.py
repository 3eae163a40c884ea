"""
Fit an image under a binary-size and/or base64-length ceiling.

Search order:
    1. optional pre-resize to ``max_size``
    2. quality search at that resolution, ``[min_quality, initial_quality]``
    3. only when ``max_size == 0``: the fallback tiers (800, 600, 400 px),
       each searched over ``[min_quality, max(50, min_quality)]``

The first satisfying encoding wins; otherwise ``CompressionExhausted``.
"""

import os
from typing import BinaryIO, Optional, Union

from base64_reducer.codec import Codec, EncodeAttempt, PillowCodec, SizedImage, TargetFormat
from base64_reducer.errors import CompressionExhausted
from base64_reducer.limits import Constraints
from base64_reducer.search import DEFAULT_POLICY, SearchPolicy, quality_range, run_tiers, search_quality

DEFAULT_FORMAT = TargetFormat.WEBP
DEFAULT_INITIAL_QUALITY = 90
DEFAULT_MIN_QUALITY = 30

Source = Union[str, os.PathLike, bytes, BinaryIO]


def optimize(
    image: SizedImage,
    constraints: Constraints,
    fmt: TargetFormat = DEFAULT_FORMAT,
    max_size: int = 0,
    initial_quality: int = DEFAULT_INITIAL_QUALITY,
    min_quality: int = DEFAULT_MIN_QUALITY,
    codec: Optional[Codec] = None,
    policy: SearchPolicy = DEFAULT_POLICY,
) -> EncodeAttempt:
    """
    Return the best-quality encoding of *image* that satisfies
    *constraints*.

    *image* is left untouched; resized copies are released before
    returning. An explicit *max_size* disables the fallback tiers.

    Raises:
        InvalidConstraints: no ceiling, or a ceiling <= 0.
        EncodeError: the codec failed to encode.
        CompressionExhausted: nothing fit.
    """
    constraints.validate()
    codec = codec or PillowCodec()

    working = image
    searched_side = max(image.width, image.height)
    if max_size > 0 and max(image.width, image.height) > max_size:
        working = codec.resize(image, max_size)
        searched_side = max(working.width, working.height)

    try:
        attempt = search_quality(
            codec,
            working,
            fmt,
            quality_range(min_quality, initial_quality, policy),
            constraints,
            policy.step,
        )
    finally:
        if working is not image:
            codec.release(working)

    if attempt is not None:
        return attempt

    if max_size > 0:
        raise CompressionExhausted(min_quality, searched_side)

    attempt = run_tiers(codec, image, fmt, min_quality, constraints, policy)
    if attempt is not None:
        return attempt

    final_size = policy.final_tier or max(image.width, image.height)
    raise CompressionExhausted(min_quality, final_size)


def _read_source(source: Source) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    if isinstance(source, (str, os.PathLike)):
        with open(source, "rb") as f:
            return f.read()
    return source.read()


def optimize_source(
    source: Source,
    max_base64_chars: Optional[int] = None,
    max_binary_bytes: Optional[int] = None,
    fmt: TargetFormat = DEFAULT_FORMAT,
    max_size: int = 0,
    initial_quality: int = DEFAULT_INITIAL_QUALITY,
    min_quality: int = DEFAULT_MIN_QUALITY,
    codec: Optional[Codec] = None,
    policy: SearchPolicy = DEFAULT_POLICY,
) -> EncodeAttempt:
    """Decode *source* (path, bytes or binary file object) and ``optimize`` it."""
    constraints = Constraints(
        max_binary_bytes=max_binary_bytes, max_base64_chars=max_base64_chars
    )
    # Reject bad ceilings before paying for a decode.
    constraints.validate()
    codec = codec or PillowCodec()

    image = codec.decode(_read_source(source))
    try:
        return optimize(
            image,
            constraints,
            fmt=fmt,
            max_size=max_size,
            initial_quality=initial_quality,
            min_quality=min_quality,
            codec=codec,
            policy=policy,
        )
    finally:
        codec.release(image)


def optimize_to_bytes(source: Source, **kwargs) -> bytes:
    return optimize_source(source, **kwargs).binary_data


def optimize_to_base64(source: Source, **kwargs) -> str:
    return optimize_source(source, **kwargs).to_base64()


def optimize_to_data_uri(source: Source, **kwargs) -> str:
    """``"{mime};base64,{data}"`` for the optimized image."""
    return optimize_source(source, **kwargs).to_data_uri()
