"""
Quality and evidence gates followed by a one-sided Wilcoxon signed-rank test.
"""

from typing import Optional, Sequence

import numpy as np
from scipy.stats import wilcoxon

from dstruct.domain.models import Region, TestResult, TestStatus
from dstruct.infrastructure.logger import Logger

EXACT_TEST_MAX_PAIRS = 50


def wilcoxon_method(differences: np.ndarray) -> str:
    """
    Exact null distribution for fewer than 50 pairs without zeros or ties,
    normal approximation otherwise.
    """
    nonzero = differences[differences != 0]
    has_zeros = nonzero.size < differences.size
    has_ties = np.unique(np.abs(nonzero)).size < nonzero.size
    if nonzero.size < EXACT_TEST_MAX_PAIRS and not has_zeros and not has_ties:
        return "exact"
    return "approx"


class SignificanceTester:
    """Tests whether between-group d-scores exceed within-group d-scores"""

    def __init__(self):
        self.logger = Logger()

    def test_region(
        self,
        d_within: np.ndarray,
        d_between: np.ndarray,
        region: Region,
        quality: float,
        evidence: float = 0.0,
        check_quality: bool = True,
        pooled_regions: Sequence[Region] = (),
    ) -> TestResult:
        """
        Gate and test the d-scores of one region.

        Args:
            d_within: Within-group d-scores restricted to the region
            d_between: Between-group d-scores restricted to the region
            region: Region the d-scores belong to
            quality: Worst allowed mean within-group d-score
            evidence: Minimum median of between - within
            check_quality: Apply the quality gate
            pooled_regions: Regions pooled into this test, in collective mode

        Returns:
            TestResult: p-value and effect size, or a not-tested status
        """
        d_within = np.asarray(d_within, dtype=np.float64)
        d_between = np.asarray(d_between, dtype=np.float64)

        paired = ~np.isnan(d_within) & ~np.isnan(d_between)
        differences = d_between[paired] - d_within[paired]

        mean_within = self._nan_mean(d_within)
        effect_size = float(np.median(differences)) if differences.size else None

        def result(status: TestStatus, p_value: Optional[float] = None) -> TestResult:
            return TestResult(
                region=region,
                status=status,
                p_value=p_value,
                effect_size=effect_size,
                mean_within=mean_within,
                pooled_regions=tuple(pooled_regions),
            )

        if check_quality and mean_within is not None and mean_within > quality:
            self.logger.log_debug(
                "Quality gate", f"{region}: mean within d {mean_within:.4f} > {quality}"
            )
            return result(TestStatus.QUALITY_GATE)

        if effect_size is not None and effect_size < evidence:
            self.logger.log_debug(
                "Evidence gate", f"{region}: median delta d {effect_size:.4f} < {evidence}"
            )
            return result(TestStatus.EVIDENCE_GATE)

        p_value = self.signed_rank_p_value(d_within[paired], d_between[paired])
        if p_value is None:
            return result(TestStatus.TEST_UNDEFINED)

        self.logger.log_test(str(region), p_value, effect_size)
        return result(TestStatus.TESTED, p_value)

    def signed_rank_p_value(
        self, d_within: np.ndarray, d_between: np.ndarray
    ) -> Optional[float]:
        """
        One-sided paired signed-rank p-value for within < between.

        Returns None when the test is undefined for the data, e.g. no pairs
        or only zero differences.
        """
        differences = d_within - d_between
        if not np.any(differences != 0):
            return None

        try:
            _, p_value = wilcoxon(
                d_within,
                d_between,
                zero_method="wilcox",
                correction=True,
                alternative="less",
                method=wilcoxon_method(differences),
            )
        except ValueError as e:
            self.logger.log_warning(f"Signed-rank test undefined: {e}")
            return None

        p_value = float(p_value)
        if not np.isfinite(p_value):
            return None
        return min(max(p_value, 0.0), 1.0)

    @staticmethod
    def _nan_mean(values: np.ndarray) -> Optional[float]:
        available = values[~np.isnan(values)]
        if available.size == 0:
            return None
        return float(available.mean())
