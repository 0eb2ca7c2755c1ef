"""
Outer surfaces: FastAPI dashboard.
"""

from .web import create_app

__all__ = ["create_app"]
