"""
Per-transcript orchestration of the dStruct pipeline.
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np

from dstruct.domain.exceptions import SchemaViolationError
from dstruct.domain.models import DStructConfig, Region, TestResult, TestStatus
from dstruct.domain.reactivity import ReactivityTable
from dstruct.domain.services.combination_generator import (
    Combination,
    CombinationGenerator,
)
from dstruct.domain.services.group_aggregator import GroupAggregator
from dstruct.domain.services.region_scanner import RegionScanner
from dstruct.domain.services.signal_strength import SignalStrengthChecker
from dstruct.domain.services.significance_tester import SignificanceTester
from dstruct.infrastructure.logger import Logger


class TranscriptPipeline:
    """Discovers and tests differentially reactive regions of one transcript"""

    def __init__(self, config: DStructConfig):
        self.config = config
        self.logger = Logger()

        self.combination_generator = CombinationGenerator()
        self.group_aggregator = GroupAggregator()
        self.region_scanner = RegionScanner()
        self.significance_tester = SignificanceTester()
        self.signal_checker = SignalStrengthChecker()

        self.quality = config.resolved_quality()
        self._combs: Optional[Tuple[List[Combination], List[Combination]]] = None

    def combinations(self) -> Tuple[List[Combination], List[Combination]]:
        """Within- and between-group combinations, built on first use"""
        if self._combs is None:
            self._combs = self.combination_generator.generate(
                self.config.reps_A,
                self.config.reps_B,
                self.config.batches,
                self.config.within_combs,
                self.config.between_combs,
            )
        return self._combs

    def d_scores(self, table: ReactivityTable) -> Tuple[np.ndarray, np.ndarray]:
        """
        Within-group and between-group d-scores of every position.

        Args:
            table: Reactivities of one transcript or region

        Returns:
            Tuple[np.ndarray, np.ndarray]: d_within, d_between
        """
        self._check_design(table)
        within_combs, between_combs = self.combinations()
        d_within = self.group_aggregator.d_combs(table, within_combs)
        d_between = self.group_aggregator.d_combs(table, between_combs)
        return d_within, d_between

    def run_denovo(self, table: ReactivityTable) -> List[TestResult]:
        """
        De novo discovery: scan the whole transcript, then test its regions.

        With ind_regions each discovered region is tested on its own;
        otherwise the positions of all regions are pooled into one test whose
        region spans the first start to the last end.

        Args:
            table: Reactivities of one transcript

        Returns:
            List[TestResult]: One result per region, or one pooled result
        """
        self.combinations()
        self._check_design(table)
        if self._low_signal(table):
            return [TestResult(region=table.whole(), status=TestStatus.LOW_SIGNAL)]

        d_within, d_between = self.d_scores(table)
        regions = self.region_scanner.get_regions(
            d_within, d_between, self.config.min_length
        )
        self.logger.log_debug("De novo discovery", f"{len(regions)} regions found")
        if not regions:
            return []

        if self.config.ind_regions:
            return [
                self._test(d_within, d_between, region, [region.to_slice()])
                for region in regions
            ]

        span = Region(regions[0].start, regions[-1].end)
        return [
            self._test(
                d_within,
                d_between,
                span,
                [region.to_slice() for region in regions],
                pooled_regions=regions,
            )
        ]

    def run_guided(
        self, table: ReactivityTable, region: Optional[Region] = None
    ) -> List[TestResult]:
        """
        Guided discovery: test a user-defined region without scanning.

        Args:
            table: Reactivities of a transcript, or of the region itself
            region: Region of the table to test; the whole table if omitted

        Returns:
            List[TestResult]: A single result for the region
        """
        self.combinations()
        self._check_design(table)
        if region is None:
            region = table.whole()
            region_table = table
        else:
            region_table = table.region(region)

        if self._low_signal(region_table):
            return [TestResult(region=region, status=TestStatus.LOW_SIGNAL)]

        d_within, d_between = self.d_scores(region_table)
        return [self._test(d_within, d_between, region, [slice(None)])]

    def _test(
        self,
        d_within: np.ndarray,
        d_between: np.ndarray,
        region: Region,
        slices: List[slice],
        pooled_regions: Sequence[Region] = (),
    ) -> TestResult:
        within = np.concatenate([d_within[s] for s in slices])
        between = np.concatenate([d_between[s] for s in slices])
        return self.significance_tester.test_region(
            within,
            between,
            region,
            quality=self.quality,
            evidence=self.config.evidence,
            check_quality=self.config.check_quality,
            pooled_regions=pooled_regions,
        )

    def _low_signal(self, table: ReactivityTable) -> bool:
        if not self.config.check_signal_strength:
            return False
        return not self.signal_checker.passes(table, self.config.signal_strength)

    def _check_design(self, table: ReactivityTable) -> None:
        if (table.reps_A, table.reps_B) != (self.config.reps_A, self.config.reps_B):
            raise SchemaViolationError(
                f"Table has {table.reps_A}+{table.reps_B} replicates, "
                f"configured for {self.config.reps_A}+{self.config.reps_B}"
            )
