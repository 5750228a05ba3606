from __future__ import annotations


class DataFormatError(ValueError):
    """Input resource is absent, unreadable, or has no baseline-period records."""


class DegenerateFitWarning(UserWarning):
    """Joint least-squares matrix is singular; previous coefficients were kept."""


__all__ = ["DataFormatError", "DegenerateFitWarning"]
