"""Mosaic - Wave Function Collapse tile placement on a square grid."""

__version__ = "0.1.0"
