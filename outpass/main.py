"""
Name: Backend ASGI Entrypoint (outpass.main)

Responsibilities:
  - Re-export the FastAPI app for ASGI servers (outpass.main:app)

Notes:
  - No configuration or IO here; wiring lives in outpass.api.main
"""

from outpass.api.main import app

__all__ = ["app"]
