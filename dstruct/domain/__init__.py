"""
This package contains the domain layer for the dStruct pipeline.

The domain layer is responsible for the scoring, grouping, scanning and testing
logic of the pipeline.
"""

from .exceptions import DStructError, InsufficientDataError, SchemaViolationError
from .models import (
    DStructConfig,
    Region,
    TestResult,
    TestStatus,
    TranscriptResult,
    default_quality,
)
from .reactivity import ReactivityTable

__all__ = [
    "DStructConfig",
    "DStructError",
    "InsufficientDataError",
    "ReactivityTable",
    "Region",
    "SchemaViolationError",
    "TestResult",
    "TestStatus",
    "TranscriptResult",
    "default_quality",
]
