import io

import pytest

from tests.helpers import FakeCodec, gradient_image, per_pixel


@pytest.fixture
def area_codec():
    return FakeCodec(per_pixel)


@pytest.fixture
def png_bytes():
    buf = io.BytesIO()
    gradient_image().save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def png_path(tmp_path, png_bytes):
    path = tmp_path / "gradient.png"
    path.write_bytes(png_bytes)
    return path
