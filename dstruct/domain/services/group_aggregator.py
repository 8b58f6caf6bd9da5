"""
Averaging of d-scores over replicate combinations.
"""

from typing import Optional, Sequence

import numpy as np

from dstruct.domain.reactivity import ReactivityTable
from dstruct.domain.services.dissimilarity_scorer import DissimilarityScorer
from dstruct.infrastructure.logger import Logger


class GroupAggregator:
    """Nucleotide-wise d-scores averaged across a set of combinations"""

    def __init__(self, scorer: Optional[DissimilarityScorer] = None):
        self.logger = Logger()
        self.scorer = scorer or DissimilarityScorer()

    def d_combs(
        self, table: ReactivityTable, combs: Sequence[Sequence[str]]
    ) -> np.ndarray:
        """
        Mean d-score per position over all combinations.

        Each combination selects replicate columns of the table; its
        d-scores are computed row-wise, then averaged per position ignoring
        NaN. A position unavailable in every combination stays NaN.

        Args:
            table: Reactivities of one transcript or region
            combs: Combinations of replicate labels

        Returns:
            np.ndarray: One d-score per position of the table
        """
        d = np.full((table.n_positions, len(combs)), np.nan)
        for i, comb in enumerate(combs):
            d[:, i] = self.scorer.score_rows(table.columns(list(comb)))

        available = ~np.isnan(d)
        counts = available.sum(axis=1)
        totals = np.where(available, d, 0.0).sum(axis=1)
        with np.errstate(invalid="ignore", divide="ignore"):
            means = totals / counts
        means[counts == 0] = np.nan
        return means
