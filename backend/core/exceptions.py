"""
Domain Exceptions
Raised by the reducer and the sink; surfaced to callers unchanged.
"""


class RatioMonitorError(Exception):
    """Base class for pair ratio monitor errors"""


class InvalidInputError(RatioMonitorError, ValueError):
    """
    Quote pair cannot be reduced.

    Raised when the pair does not hold exactly two snapshots, a snapshot
    lacks price fields, or the two timestamps cannot be compared.
    Fatal to the single reduction call; never retried here.
    """


class SchemaMismatchError(RatioMonitorError, ValueError):
    """Row submitted to a sink does not match its declared schema"""
