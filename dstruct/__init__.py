"""
dStruct Differential Reactivity Package

A pipeline for identifying differentially reactive regions from RNA structurome
profiling data. This package provides a clean, modular architecture with
separation of concerns for d-score computation, region discovery, statistical
testing, and batch processing.
"""

from .domain.models import DStructConfig, Region, TestResult, TestStatus
from .domain.reactivity import ReactivityTable
from .application.transcript_pipeline import TranscriptPipeline
from .application.batch_runner import BatchRunner

__version__ = "0.1.0"

__all__ = [
    "BatchRunner",
    "DStructConfig",
    "ReactivityTable",
    "Region",
    "TestResult",
    "TestStatus",
    "TranscriptPipeline",
]
