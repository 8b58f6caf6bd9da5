"""
De novo discovery of contiguous regions with higher between-group variation.
"""

from typing import List

import numpy as np

from dstruct.domain.models import Region
from dstruct.infrastructure.logger import Logger


class RegionScanner:
    """
    Finds maximal runs of positions where the between-group d-score exceeds
    the within-group d-score.

    A position with an unavailable d-score on either side is never flagged
    and so ends the current run; no gaps are bridged.
    """

    def __init__(self):
        self.logger = Logger()

    def flag_positions(self, d_within: np.ndarray, d_between: np.ndarray) -> np.ndarray:
        """Boolean mask of positions with between - within > 0"""
        d_within = np.asarray(d_within, dtype=np.float64)
        d_between = np.asarray(d_between, dtype=np.float64)
        if d_within.shape != d_between.shape:
            raise ValueError(
                f"d-score sequences differ in length: {d_within.shape} vs {d_between.shape}"
            )
        with np.errstate(invalid="ignore"):
            flagged = (d_between - d_within) > 0
        # NaN comparisons are already False
        return flagged

    def contig_regions(self, flagged: np.ndarray) -> List[Region]:
        """Maximal runs of flagged positions, as 1-based closed regions"""
        flagged = np.asarray(flagged, dtype=bool)
        if flagged.size == 0:
            return []

        padded = np.concatenate(([False], flagged, [False])).astype(np.int8)
        edges = np.diff(padded)
        starts = np.flatnonzero(edges == 1)
        ends = np.flatnonzero(edges == -1)
        # starts are 0-based first indices; ends are 0-based exclusive
        return [Region(int(s) + 1, int(e)) for s, e in zip(starts, ends)]

    def get_regions(
        self, d_within: np.ndarray, d_between: np.ndarray, min_length: int = 11
    ) -> List[Region]:
        """
        Discover candidate differential regions.

        Args:
            d_within: Within-group d-score per position
            d_between: Between-group d-score per position
            min_length: Minimum region length in nucleotides

        Returns:
            List[Region]: Non-overlapping regions sorted by start
        """
        if min_length < 1:
            raise ValueError(f"min_length must be at least 1, got {min_length}")

        flagged = self.flag_positions(d_within, d_between)
        candidates = self.contig_regions(flagged)
        regions = [region for region in candidates if region.length >= min_length]

        self.logger.log_debug(
            "Region scan",
            f"{len(candidates)} runs, {len(regions)} of length >= {min_length}",
        )
        return regions
