"""Base exception for Mosaic.

Each module declares its own exceptions on top of this base, so callers can
catch every loading failure with a single ``except MosaicError``.
"""


class MosaicError(Exception):
    """Base exception for all Mosaic errors."""

    pass
