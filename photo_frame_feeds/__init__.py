"""Rotating photo feeds built from publicly shared albums."""

__version__ = "0.1.0"
