"""
Error taxonomy for the dStruct pipeline.
"""


class DStructError(Exception):
    """Base class for all dStruct errors"""


class InsufficientDataError(DStructError):
    """No valid within-group or between-group combination can be formed"""


class SchemaViolationError(DStructError, ValueError):
    """Malformed reactivity table, combination or region"""
