"""
===============================================================================
TARJETA CRC — infrastructure/rendering/qr_code_renderer.py
===============================================================================

Clase:
    QrCodeRenderer

Responsabilidades:
    - Convertir el token de checkpoint (string) en una imagen PNG de QR.
    - Tamaño configurable por módulo (box_size) y borde fijo.

Colaboradores:
    - qrcode (+ Pillow para PNG)
    - interfaces/api/http/routers/outpasses.py (GET /outpasses/{id}/token.png)

Notas:
    - Solo genera imágenes. La lectura de QR la hace el dispositivo del
      checkpoint, que envía el texto decodificado al endpoint de escaneo.
===============================================================================
"""

from __future__ import annotations

import io

import qrcode
from qrcode.constants import ERROR_CORRECT_M

PNG_MEDIA_TYPE = "image/png"


class QrCodeRenderer:
    def __init__(self, *, box_size: int = 8, border: int = 2) -> None:
        self._box_size = box_size
        self._border = border

    def render_png(self, payload: str) -> bytes:
        """Devuelve los bytes PNG del QR que codifica `payload`."""
        if not payload:
            raise ValueError("payload must not be empty")

        qr = qrcode.QRCode(
            version=None,
            error_correction=ERROR_CORRECT_M,
            box_size=self._box_size,
            border=self._border,
        )
        qr.add_data(payload)
        qr.make(fit=True)

        image = qr.make_image(fill_color="black", back_color="white")
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()
