"""
Data access package for the dStruct pipeline.

This package contains loading and saving components for reactivity tables,
replicate combinations and result tables.
"""

from .data_loader import ReactivityDataLoader
from .data_saver import ResultSaver

__all__ = ["ReactivityDataLoader", "ResultSaver"]
