"""
This package contains the application layer for the dStruct pipeline.

The application layer is responsible for orchestrating per-transcript analysis
and batch processing with multiple-testing correction.
"""

from .batch_runner import BatchRunner, benjamini_hochberg
from .dstruct_service import DStructService
from .transcript_pipeline import TranscriptPipeline

__all__ = [
    "BatchRunner",
    "DStructService",
    "TranscriptPipeline",
    "benjamini_hochberg",
]
