"""
===============================================================================
APPLICATION LAYER (Public API / Exports)
===============================================================================

Expone los puntos de entrada estables de la capa de aplicación:
  - checkpoint_codec: encode/decode del token de checkpoint (QR / manual)

Nota:
  - Los casos de uso se importan desde `usecases/` (outpass, checkpoint).
  - Las capacidades por rol viven en `capabilities.py`.
===============================================================================
"""

from .checkpoint_codec import (
    TOKEN_VERSION,
    MalformedTokenError,
    decode_token,
    encode_token,
)

__all__ = [
    "TOKEN_VERSION",
    "MalformedTokenError",
    "decode_token",
    "encode_token",
]
