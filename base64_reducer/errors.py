"""Exceptions raised while fitting an image under size ceilings."""


class OptimizationError(Exception):
    """Base class for every error raised by base64_reducer."""


class InvalidConstraints(OptimizationError, ValueError):
    """No ceiling was supplied, or a supplied ceiling is not positive."""


class DecodeError(OptimizationError):
    """The input bytes could not be decoded into an image."""


class EncodeError(OptimizationError):
    """The encoder refused to write the image at the requested quality."""


class CompressionExhausted(OptimizationError):
    """Every quality and every fallback size failed to satisfy the ceilings."""

    def __init__(self, min_quality: int, final_size: int) -> None:
        self.min_quality = min_quality
        self.final_size = final_size
        super().__init__(
            "Failed to compress image to satisfy limits. "
            f"Tried down to quality={min_quality} and size={final_size}px."
        )
