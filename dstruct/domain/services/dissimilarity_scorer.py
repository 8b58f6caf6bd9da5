"""
Nucleotide-wise dissimilarity (d-score) of replicate reactivities.
"""

import numpy as np

from dstruct.infrastructure.logger import Logger


def calc_dis(values) -> np.ndarray:
    """
    d-score of each row of replicate reactivities.

    The d-score is (2/pi) * arctan(|sd / mean|) over the available (non-NaN)
    values of a row, where sd is the sample standard deviation (0 for a single
    value). Rows with no available value or a zero mean score NaN.

    Args:
        values: 1-D vector (a single nucleotide) or 2-D positions x replicates

    Returns:
        np.ndarray: d-score per row (a 0-d array for vector input)
    """
    x = np.asarray(values, dtype=np.float64)
    vector_input = x.ndim == 1
    if vector_input:
        x = x.reshape(1, -1)

    available = ~np.isnan(x)
    counts = available.sum(axis=1)
    filled = np.where(available, x, 0.0)

    with np.errstate(divide="ignore", invalid="ignore"):
        means = filled.sum(axis=1) / counts
        squared = np.where(available, (x - means[:, None]) ** 2, 0.0).sum(axis=1)
        sds = np.where(counts > 1, np.sqrt(squared / (counts - 1)), 0.0)
        scores = 2.0 * np.arctan(np.abs(sds / means)) / np.pi

    scores[(counts == 0) | (means == 0)] = np.nan

    if vector_input:
        return scores[0]
    return scores


class DissimilarityScorer:
    """Row-wise d-scores over a subset of replicate columns"""

    def __init__(self):
        self.logger = Logger()

    def score(self, values) -> float:
        """d-score of a single nucleotide's replicate values"""
        return float(calc_dis(np.asarray(values, dtype=np.float64).ravel()))

    def score_rows(self, matrix: np.ndarray) -> np.ndarray:
        """d-score of every row of a positions x replicates matrix"""
        scores = calc_dis(np.atleast_2d(matrix))
        if self.logger.debug_enabled():
            self.logger.log_debug(
                "d-score calculation",
                f"{int(np.sum(~np.isnan(scores)))}/{len(scores)} positions scored",
            )
        return scores
