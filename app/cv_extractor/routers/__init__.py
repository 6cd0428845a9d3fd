"""
Routers package for FastAPI endpoints.

- extract: CV extraction, summary rendering and supported formats
"""

from . import extract

__all__ = ["extract"]
