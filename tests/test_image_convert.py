import base64
import io

import pytest
from PIL import Image

from conftest import make_image
from core.errors import ParseFailed, UnsupportedFileType
from image_convert import encode_image


@pytest.mark.parametrize(
    "fmt, mime_type",
    [("PNG", "image/png"), ("JPEG", "image/jpeg"), ("WEBP", "image/webp")],
)
def test_encode_supported_formats(fmt: str, mime_type: str) -> None:
    data = make_image(fmt)
    material = encode_image(data, mime_type)
    assert material.mime_type == mime_type
    assert base64.b64decode(material.data) == data


def test_decoded_format_wins_over_declared_type() -> None:
    material = encode_image(make_image("PNG"), "image/jpeg")
    assert material.mime_type == "image/png"


def test_gif_is_not_supported() -> None:
    with pytest.raises(UnsupportedFileType):
        encode_image(make_image("GIF"), "image/gif")


def test_garbage_bytes_fail_to_parse() -> None:
    with pytest.raises(ParseFailed):
        encode_image(b"\x89PNG but not really", "image/png")


def test_multi_picture_jpeg_is_accepted_as_jpeg() -> None:
    buffer = io.BytesIO()
    frames = [Image.new("RGB", (10, 10), color=c) for c in ("red", "blue")]
    frames[0].save(buffer, format="MPO", save_all=True, append_images=frames[1:])
    data = buffer.getvalue()

    material = encode_image(data, "image/jpeg")

    assert material.mime_type == "image/jpeg"
    assert base64.b64decode(material.data) == data
