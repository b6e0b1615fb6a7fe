"""HTTP surface for the tournament service."""

from .app import create_app

__all__ = ["create_app"]
