from __future__ import annotations


class CutoutError(RuntimeError):
    """Base class for fatal errors raised by the cutout pipeline."""


class DecodeError(CutoutError):
    """Input could not be turned into a valid RasterImage."""


class EncodeError(CutoutError):
    """An RGBA result could not be composed or written."""
