"""
Scoring, grouping, scanning and testing services for the dStruct pipeline.
"""

from .combination_generator import CombinationGenerator
from .dissimilarity_scorer import DissimilarityScorer, calc_dis
from .group_aggregator import GroupAggregator
from .region_scanner import RegionScanner
from .signal_strength import SignalStrengthChecker
from .significance_tester import SignificanceTester

__all__ = [
    "CombinationGenerator",
    "DissimilarityScorer",
    "GroupAggregator",
    "RegionScanner",
    "SignalStrengthChecker",
    "SignificanceTester",
    "calc_dis",
]
