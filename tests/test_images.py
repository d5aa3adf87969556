"""Tests for PNG encoding helpers."""
import pytest
from PIL import Image

from mistipad.images import decode_image, encode_png, to_png_bytes


class TestEncodePng:
    """Tests for encode_png."""

    def test_encode_when_rgb_then_png_signature(self, sample_image):
        data = encode_png(sample_image)

        assert data.startswith(b"\x89PNG\r\n\x1a\n")

    def test_encode_when_cmyk_then_converted(self):
        """Modes PNG cannot hold are converted before saving."""
        image = Image.new("CMYK", (4, 4))

        decoded = decode_image(encode_png(image))

        assert decoded.mode == "RGBA"
        assert decoded.size == (4, 4)


class TestToPngBytes:
    """Tests for to_png_bytes."""

    def test_bytes_pass_through_untouched(self):
        assert to_png_bytes(b"raw") == b"raw"
        assert to_png_bytes(bytearray(b"raw")) == b"raw"

    def test_pil_image_is_encoded(self, sample_image, png_bytes):
        assert to_png_bytes(sample_image) == png_bytes

    def test_other_types_raise(self):
        with pytest.raises(TypeError, match="Expected bytes"):
            to_png_bytes("A-q0.png")


class TestDecodeImage:
    """Tests for decode_image."""

    def test_decode_when_png_then_same_pixels(self, sample_image, png_bytes):
        decoded = decode_image(png_bytes)

        assert decoded.size == sample_image.size
        assert decoded.getpixel((0, 0)) == (255, 255, 255)

    def test_decode_when_garbage_then_none(self):
        assert decode_image(b"not an image") is None

    def test_decode_when_over_pixel_limit_then_none(self, png_bytes, monkeypatch):
        """Images far beyond Pillow's pixel limit are refused, not raised."""
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)

        assert decode_image(png_bytes) is None
