"""UpPaws tournament, bracket and skill-rating service."""

__version__ = "1.0.0"
