"""Mini README: Web interface package exposing the FastAPI factory."""

from .web_app import create_application

__all__ = ["create_application"]
