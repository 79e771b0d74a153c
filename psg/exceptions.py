"""
Exception types for the psg engine.

Missing personalisation data is never an error; these cover programming
and configuration faults only.
"""


class PsgError(Exception):
    """Base class for psg errors."""


class StyleVectorFormatError(PsgError, ValueError):
    """A persisted learning style string could not be parsed."""
