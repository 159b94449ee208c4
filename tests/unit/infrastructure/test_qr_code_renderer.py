"""
Name: QR Code Renderer Tests

Responsibilities:
  - Validate PNG output for checkpoint tokens
"""

import pytest

from outpass.infrastructure.rendering import PNG_MEDIA_TYPE, QrCodeRenderer

pytestmark = pytest.mark.unit

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def test_render_png_returns_png_bytes():
    png = QrCodeRenderer().render_png('{"v":1,"request_id":"abc"}')
    assert png.startswith(PNG_SIGNATURE)
    assert PNG_MEDIA_TYPE == "image/png"


def test_larger_box_size_produces_larger_image():
    payload = "x" * 40
    small = QrCodeRenderer(box_size=2).render_png(payload)
    large = QrCodeRenderer(box_size=10).render_png(payload)
    assert len(large) > len(small)


def test_empty_payload_is_rejected():
    with pytest.raises(ValueError):
        QrCodeRenderer().render_png("")
