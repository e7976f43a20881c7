"""
Error Kinds Module

Exceptions raised by the evochase engine. Both derive from ValueError, so
callers that only care about "bad input" can catch that instead.

Classes:
    ShapeMismatchError: A weight vector or input vector has the wrong length
    GenomeFormatError:  A persisted genome record could not be parsed
"""

class ShapeMismatchError(ValueError):
    """A vector does not have the length required by the network topology."""

class GenomeFormatError(ValueError):
    """A persisted genome record is corrupt (empty, non-numeric or non-finite token)."""
