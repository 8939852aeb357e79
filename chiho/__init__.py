"""Hex-to-image conversion, fragmented relic storage and an area-based transforming file store."""

__version__ = "0.1.0"