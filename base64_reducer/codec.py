"""
Codec collaborators: decode bytes into an image, encode an image at a
quality, shrink an image to a maximum side.

The search logic only talks to the ``Codec`` protocol; ``PillowCodec`` is
the default implementation.
"""

import base64
import io
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from PIL import Image, UnidentifiedImageError

from base64_reducer.errors import DecodeError, EncodeError
from base64_reducer.limits import estimate_base64_length


class TargetFormat(Enum):
    JPEG = "jpeg"
    WEBP = "webp"

    @property
    def mime_type(self) -> str:
        return _MIME_TYPES[self]

    @classmethod
    def parse(cls, value: str) -> "TargetFormat":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"Unsupported format: {value!r}") from None


_MIME_TYPES = {
    TargetFormat.JPEG: "image/jpeg",
    TargetFormat.WEBP: "image/webp",
}

# Modes the JPEG writer accepts as-is; anything else is flattened to RGB.
_JPEG_MODES = ("RGB", "L", "CMYK")


class SizedImage(Protocol):
    width: int
    height: int


class Codec(Protocol):
    """What the quality search needs from an image library."""

    def decode(self, data: bytes) -> SizedImage:
        ...

    def encode(self, image: SizedImage, fmt: TargetFormat, quality: int) -> bytes:
        ...

    def resize(self, image: SizedImage, max_side: int) -> SizedImage:
        """Return a new image whose larger side is at most *max_side*."""
        ...

    def release(self, image: SizedImage) -> None:
        ...


@dataclass(frozen=True)
class EncodeAttempt:
    """One encoded candidate and the parameters that produced it."""

    binary_data: bytes
    quality: int
    format: TargetFormat
    width: int
    height: int

    @property
    def base64_length(self) -> int:
        return estimate_base64_length(len(self.binary_data))

    def to_base64(self) -> str:
        return base64.b64encode(self.binary_data).decode("ascii")

    def to_data_uri(self) -> str:
        return f"{self.format.mime_type};base64,{self.to_base64()}"


def encode_attempt(
    codec: Codec, image: SizedImage, fmt: TargetFormat, quality: int
) -> EncodeAttempt:
    return EncodeAttempt(
        binary_data=codec.encode(image, fmt, quality),
        quality=quality,
        format=fmt,
        width=image.width,
        height=image.height,
    )


class PillowCodec:
    def decode(self, data: bytes) -> Image.Image:
        try:
            img = Image.open(io.BytesIO(data))
            img.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
            raise DecodeError(f"Cannot decode image: {exc}") from exc
        return img

    def encode(self, image: Image.Image, fmt: TargetFormat, quality: int) -> bytes:
        buf = io.BytesIO()
        try:
            if fmt is TargetFormat.JPEG:
                if image.mode not in _JPEG_MODES:
                    image = image.convert("RGB")
                image.save(buf, format="JPEG", quality=quality, optimize=True)
            else:
                image.save(buf, format="WEBP", quality=quality, lossless=False)
        except (OSError, ValueError, KeyError) as exc:
            raise EncodeError(
                f"Cannot encode {fmt.name} at quality={quality}: {exc}"
            ) from exc
        return buf.getvalue()

    def resize(self, image: Image.Image, max_side: int) -> Image.Image:
        # thumbnail() keeps the aspect ratio and never enlarges.
        resized = image.copy()
        resized.thumbnail((max_side, max_side), Image.Resampling.LANCZOS)
        return resized

    def release(self, image: Image.Image) -> None:
        image.close()
