"""
Exceptions for strong motion noise check operations.
"""


class NoiseCheckError(Exception):
    """Base exception for noise check errors."""

    pass


class ConfigurationError(NoiseCheckError):
    """Missing credential or invalid setting."""

    pass


class DatabaseConnectionError(NoiseCheckError):
    """Error opening or pinging the hazard database."""

    pass


class QueryError(NoiseCheckError):
    """Error executing a check query or decoding its rows."""

    pass


class ReportWriteError(NoiseCheckError):
    """Error creating or appending to a report file."""

    pass
