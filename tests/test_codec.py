"""Tests for the Pillow codec and EncodeAttempt."""

import base64
import io

import pytest
from PIL import Image

from base64_reducer.codec import EncodeAttempt, PillowCodec, TargetFormat
from base64_reducer.errors import DecodeError
from tests.helpers import gradient_image


@pytest.fixture
def codec():
    return PillowCodec()


class TestTargetFormat:
    def test_mime_types(self):
        assert TargetFormat.JPEG.mime_type == "image/jpeg"
        assert TargetFormat.WEBP.mime_type == "image/webp"

    @pytest.mark.parametrize("value", ["jpeg", "JPEG", " webp ", "WebP"])
    def test_parse(self, value):
        assert TargetFormat.parse(value).value == value.strip().lower()

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unsupported format"):
            TargetFormat.parse("png")


class TestPillowCodec:
    """Tests for PillowCodec."""

    def test_decode(self, codec, png_bytes):
        image = codec.decode(png_bytes)
        assert (image.width, image.height) == (320, 240)

    def test_decode_garbage(self, codec):
        with pytest.raises(DecodeError):
            codec.decode(b"\x00\x01garbage")

    def test_decode_oversized_image(self, codec, png_bytes, monkeypatch):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
        with pytest.raises(DecodeError):
            codec.decode(png_bytes)

    def test_encode_jpeg(self, codec):
        data = codec.encode(gradient_image(), TargetFormat.JPEG, 80)
        assert data[:2] == b"\xff\xd8"

    def test_encode_jpeg_flattens_alpha(self, codec):
        data = codec.encode(gradient_image(mode="RGBA"), TargetFormat.JPEG, 80)
        assert Image.open(io.BytesIO(data)).mode == "RGB"

    def test_encode_jpeg_palette(self, codec):
        data = codec.encode(gradient_image(mode="P"), TargetFormat.JPEG, 80)
        assert data[:2] == b"\xff\xd8"

    def test_encode_webp(self, codec):
        data = codec.encode(gradient_image(mode="RGBA"), TargetFormat.WEBP, 80)
        assert data[:4] == b"RIFF"
        assert data[8:12] == b"WEBP"

    def test_lower_quality_is_smaller(self, codec):
        image = gradient_image(640, 480)
        assert len(codec.encode(image, TargetFormat.JPEG, 20)) < len(
            codec.encode(image, TargetFormat.JPEG, 95)
        )

    def test_resize_keeps_aspect_ratio(self, codec):
        resized = codec.resize(gradient_image(1600, 1200), 400)
        assert resized.size == (400, 300)

    def test_resize_portrait(self, codec):
        resized = codec.resize(gradient_image(600, 1200), 800)
        assert resized.size == (400, 800)

    def test_resize_never_enlarges(self, codec):
        resized = codec.resize(gradient_image(100, 50), 400)
        assert resized.size == (100, 50)

    def test_resize_returns_copy(self, codec):
        original = gradient_image(1600, 1200)
        resized = codec.resize(original, 400)
        assert resized is not original
        assert original.size == (1600, 1200)


class TestEncodeAttempt:
    """Tests for EncodeAttempt."""

    def _attempt(self, data, fmt=TargetFormat.WEBP):
        return EncodeAttempt(binary_data=data, quality=50, format=fmt, width=1, height=1)

    @pytest.mark.parametrize("n", [0, 1, 2, 3, 10])
    def test_base64_length(self, n):
        attempt = self._attempt(b"x" * n)
        assert attempt.base64_length == len(attempt.to_base64())

    def test_to_base64(self):
        assert self._attempt(b"hello").to_base64() == base64.b64encode(b"hello").decode()

    def test_to_data_uri(self):
        attempt = self._attempt(b"hi", TargetFormat.JPEG)
        assert attempt.to_data_uri() == "image/jpeg;base64,aGk="
