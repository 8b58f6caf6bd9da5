"""
Data saving functionality for the dStruct pipeline.
"""

import csv
import os
from typing import Optional

import pandas as pd

from dstruct.domain.models import DStructConfig, TestStatus
from dstruct.infrastructure.logger import Logger


class ResultSaver:
    """Responsible for saving batch results and run summaries"""

    def __init__(self):
        self.logger = Logger()

    def save_results(self, results: pd.DataFrame, out_dir: str, sample_name: str) -> str:
        """
        Save the batch result table to CSV.

        Args:
            results: Output of BatchRunner.run
            out_dir: Output directory
            sample_name: Prefix of the output file

        Returns:
            str: Path of the written file
        """
        try:
            os.makedirs(out_dir, exist_ok=True)
            file_path = os.path.join(out_dir, f"{sample_name}_dstruct_results.csv")
            results.to_csv(file_path, index=False, na_rep="NA")
            self.logger.log_save(file_path)
            return file_path

        except Exception as e:
            self.logger.log_error(e, f"Saving results to {out_dir}")
            raise

    def save_summary(
        self,
        results: pd.DataFrame,
        config: DStructConfig,
        out_dir: str,
        sample_name: str,
        mode: str,
        alpha: float = 0.05,
        n_units: Optional[int] = None,
    ) -> str:
        """
        Append a one-row summary of the run to dstruct_summary.csv.

        Args:
            results: Output of BatchRunner.run
            config: Configuration used for the run
            out_dir: Output directory
            sample_name: Sample name recorded in the summary
            mode: 'denovo' or 'guided'
            alpha: FDR level used to count significant records
            n_units: Number of units analysed; units without records are
                otherwise not counted

        Returns:
            str: Path of the summary file
        """
        try:
            os.makedirs(out_dir, exist_ok=True)
            summary_file = os.path.join(out_dir, "dstruct_summary.csv")

            significant = results["fdr"].notna() & (results["fdr"] <= alpha)
            summary_data = {
                "Sample": [sample_name],
                "Mode": [mode],
                "reps_A": [config.reps_A],
                "reps_B": [config.reps_B],
                "batches": [config.batches],
                "min_length": [config.min_length],
                "quality": [config.resolved_quality()],
                "evidence": [config.evidence],
                "ind_regions": [config.ind_regions],
                "Units": [n_units if n_units is not None else results["id"].nunique()],
                "Records": [len(results)],
                "Tested": [int(results["p_value"].notna().sum())],
                f"Significant_FDR_{alpha}": [int(significant.sum())],
                "FailedUnits": [
                    int((results["status"] == TestStatus.FAILED.value).sum())
                ],
            }

            write_header = not os.path.exists(summary_file)
            pd.DataFrame(summary_data).to_csv(
                summary_file,
                mode="a",
                header=write_header,
                index=False,
                quoting=csv.QUOTE_ALL,
            )
            self.logger.log_save(summary_file)
            return summary_file

        except Exception as e:
            self.logger.log_error(e, "Saving summary")
            raise
