"""
Errors
======

Exceptions raised while building a metropolis network or generating
customers and taxis on it.
"""


class MetropolisError(Exception):
    """Base class for all generator errors."""


class InvalidParameterError(MetropolisError, ValueError):
    """A size, count, rate or time window is out of its valid range."""


class HorizonTooSmallError(MetropolisError, ValueError):
    """The requested time window is shorter than one time step."""


class DegenerateZoneError(MetropolisError, RuntimeError):
    """A same-zone trip was requested in a zone with a single node."""
