"""
Main application service orchestrating a command line dStruct run.
"""

import pandas as pd

from dstruct.application.batch_runner import BatchRunner
from dstruct.domain.models import DStructConfig
from dstruct.infrastructure.argument_parser import RunOptions
from dstruct.infrastructure.data.data_loader import ReactivityDataLoader
from dstruct.infrastructure.data.data_saver import ResultSaver
from dstruct.infrastructure.logger import Logger


class DStructService:
    """Loads reactivities, runs the batch and saves its results"""

    def __init__(self, config: DStructConfig, options: RunOptions):
        self.config = config
        self.options = options
        self.logger = Logger()

        self.data_loader = ReactivityDataLoader()
        self.result_saver = ResultSaver()

    def process(self) -> pd.DataFrame:
        """
        Main processing pipeline.

        Returns:
            pd.DataFrame: Batch results with FDR-adjusted p-values
        """
        self.logger.log_step("Processing pipeline", f"Starting {self.options.mode} run")

        # Step 1: Load reactivities
        units = self.data_loader.load_reactivities(
            self.options.data_file, self.options.id_column
        )
        if not units:
            raise ValueError(f"No reactivities found in {self.options.data_file}")

        # Step 2: Resolve the replicate design
        if not self.config.reps_A or not self.config.reps_B:
            first = next(iter(units.values()))
            reps_A, reps_B = self.data_loader.infer_replicates(first.columns)
            self.config.reps_A = self.config.reps_A or reps_A
            self.config.reps_B = self.config.reps_B or reps_B

        if self.options.within_combs_file:
            self.config.within_combs = self.data_loader.load_combinations(
                self.options.within_combs_file
            )
        if self.options.between_combs_file:
            self.config.between_combs = self.data_loader.load_combinations(
                self.options.between_combs_file
            )

        self.logger.log_threshold("Quality", self.config.resolved_quality())
        self.logger.log_threshold("Evidence", self.config.evidence)

        # Step 3: Discover and test regions
        runner = BatchRunner(self.config)
        results = runner.run(units, mode=self.options.mode)

        # Step 4: Save results
        self.result_saver.save_results(
            results, self.options.out_dir, self.options.sample_name
        )
        self.result_saver.save_summary(
            results,
            self.config,
            self.options.out_dir,
            self.options.sample_name,
            self.options.mode,
            n_units=len(units),
        )

        self.logger.log_success("Processing pipeline completed successfully")
        return results
