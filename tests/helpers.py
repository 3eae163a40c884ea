import random
from dataclasses import dataclass

from PIL import Image


@dataclass
class FakeImage:
    width: int
    height: int


class FakeCodec:
    """
    Deterministic codec for search tests. ``size_fn(width, height, quality)``
    decides how many bytes an encoding produces.
    """

    def __init__(self, size_fn):
        self.size_fn = size_fn
        self.probes = []
        self.resizes = []
        self.released = []

    def decode(self, data):
        raise NotImplementedError

    def encode(self, image, fmt, quality):
        self.probes.append((image.width, image.height, quality))
        return b"\x00" * self.size_fn(image.width, image.height, quality)

    def resize(self, image, max_side):
        self.resizes.append((image, max_side))
        scale = min(1.0, max_side / max(image.width, image.height))
        return FakeImage(
            max(1, round(image.width * scale)), max(1, round(image.height * scale))
        )

    def release(self, image):
        self.released.append(image)

    def probed_qualities(self):
        return [q for _, _, q in self.probes]


def per_pixel(width, height, quality):
    """Bytes grow with both area and quality."""
    return width * height * quality // 1000


def gradient_image(width=320, height=240, mode="RGB"):
    return Image.linear_gradient("L").resize((width, height)).convert(mode)


def noise_image(width, height, seed=0):
    rng = random.Random(seed)
    return Image.frombytes("RGB", (width, height), rng.randbytes(width * height * 3))
