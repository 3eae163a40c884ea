from dataclasses import dataclass
from typing import Optional, Tuple

from base64_reducer.codec import Codec, EncodeAttempt, SizedImage, TargetFormat, encode_attempt
from base64_reducer.limits import Constraints, is_within_limits

QUALITY_STEP = 5
FALLBACK_SIZES = (800, 600, 400)
FALLBACK_QUALITY_CEILING = 50
MIN_ENCODER_QUALITY = 1
MAX_ENCODER_QUALITY = 100


@dataclass(frozen=True)
class SearchPolicy:
    step: int = QUALITY_STEP
    tiers: Tuple[int, ...] = FALLBACK_SIZES
    fallback_quality_ceiling: int = FALLBACK_QUALITY_CEILING
    min_encoder_quality: int = MIN_ENCODER_QUALITY
    max_encoder_quality: int = MAX_ENCODER_QUALITY

    def __post_init__(self) -> None:
        if self.step < 1:
            raise ValueError("step must be >= 1")
        if any(size <= 0 for size in self.tiers):
            raise ValueError("tier sizes must be > 0")

    @property
    def final_tier(self) -> Optional[int]:
        return self.tiers[-1] if self.tiers else None


DEFAULT_POLICY = SearchPolicy()


def quality_range(
    min_quality: int, initial_quality: int, policy: SearchPolicy = DEFAULT_POLICY
) -> Tuple[int, int]:
    """
    Clamp ``[min_quality, initial_quality]`` into the encoder's quality
    domain. An *initial_quality* below *min_quality* collapses the range
    to *min_quality*.
    """
    low = min(max(min_quality, policy.min_encoder_quality), policy.max_encoder_quality)
    high = min(policy.max_encoder_quality, max(low, initial_quality))
    return low, high


def search_quality(
    codec: Codec,
    image: SizedImage,
    fmt: TargetFormat,
    qualities: Tuple[int, int],
    constraints: Constraints,
    step: int = QUALITY_STEP,
) -> Optional[EncodeAttempt]:
    """
    Binary-search the highest quality in *qualities* whose encoding fits
    *constraints*. Returns None when no probe fits.

    Relies on encoded size never shrinking as quality grows. Probes move
    by *step* rather than 1, so with step > 1 the optimum may sit between
    two probes and be missed.
    """
    low, high = qualities
    best = None

    while low <= high:
        mid = (low + high) // 2
        attempt = encode_attempt(codec, image, fmt, mid)

        if is_within_limits(attempt, constraints):
            best = attempt
            low = mid + step       # try a higher (better) quality
        else:
            high = mid - step      # need stronger compression

    return best


def run_tiers(
    codec: Codec,
    original: SizedImage,
    fmt: TargetFormat,
    min_quality: int,
    constraints: Constraints,
    policy: SearchPolicy = DEFAULT_POLICY,
) -> Optional[EncodeAttempt]:
    """
    Shrink *original* to each fallback size in turn and search again with
    the quality ceiling lowered to the fallback ceiling. Every tier is
    derived from *original*, never from the previous tier.
    """
    qualities = quality_range(
        min_quality, max(policy.fallback_quality_ceiling, min_quality), policy
    )
    for size in policy.tiers:
        resized = codec.resize(original, size)
        try:
            attempt = search_quality(
                codec, resized, fmt, qualities, constraints, policy.step
            )
        finally:
            codec.release(resized)
        if attempt is not None:
            return attempt
    return None
