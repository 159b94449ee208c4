from .qr_code_renderer import PNG_MEDIA_TYPE, QrCodeRenderer

__all__ = ["PNG_MEDIA_TYPE", "QrCodeRenderer"]
