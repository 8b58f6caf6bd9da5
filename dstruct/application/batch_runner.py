"""
Batch application of the dStruct pipeline over many transcripts or regions.
"""

import multiprocessing as mp
from typing import Callable, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
from statsmodels.stats.multitest import fdrcorrection

from dstruct.application.transcript_pipeline import TranscriptPipeline
from dstruct.domain.models import DStructConfig, TestStatus, TranscriptResult
from dstruct.domain.reactivity import ReactivityTable
from dstruct.infrastructure.logger import Logger

RESULT_COLUMNS = [
    "id",
    "start",
    "end",
    "pooled_regions",
    "p_value",
    "effect_size",
    "fdr",
    "status",
    "mean_within",
    "error",
]

MODES = ("denovo", "guided")

UnitData = Union[pd.DataFrame, ReactivityTable]
Task = Tuple[str, UnitData, DStructConfig, str]


def benjamini_hochberg(p_values: Sequence[Optional[float]]) -> List[Optional[float]]:
    """
    Benjamini-Hochberg adjusted p-values, ignoring missing entries.

    Args:
        p_values: Raw p-values; None, NA or NaN marks an untested record

    Returns:
        List[Optional[float]]: Adjusted values in input order, None where missing
    """
    raw = np.array(
        [np.nan if pd.isna(p) else float(p) for p in p_values], dtype=np.float64
    )
    adjusted: List[Optional[float]] = [None] * len(raw)
    tested = np.flatnonzero(~np.isnan(raw))
    if tested.size:
        _, corrected = fdrcorrection(raw[tested], alpha=0.05)
        for idx, value in zip(tested, corrected):
            adjusted[idx] = float(value)
    return adjusted


def run_unit(task: Task) -> TranscriptResult:
    """Run the pipeline on one unit, recording any failure instead of raising"""
    unit_id, data, config, mode = task
    pipeline = TranscriptPipeline(config)
    try:
        if isinstance(data, ReactivityTable):
            table = data
        else:
            table = ReactivityTable.from_dataframe(data)

        if mode == "denovo":
            results = pipeline.run_denovo(table)
        else:
            results = pipeline.run_guided(table)
    except Exception as e:
        pipeline.logger.log_error(e, f"Processing {unit_id}")
        return TranscriptResult(unit_id=unit_id, error=f"{type(e).__name__}: {e}")

    pipeline.logger.log_regions(unit_id, len(results))
    return TranscriptResult(unit_id=unit_id, results=results)


class BatchRunner:
    """Runs the pipeline over a named collection and corrects for FDR"""

    def __init__(
        self,
        config: DStructConfig,
        map_fn: Optional[Callable[[Callable, Iterable], Iterable]] = None,
    ):
        """
        Args:
            config: Run configuration shared by every unit
            map_fn: Order-preserving map used to run units; by default a
                process pool when config.processes > 1, else the builtin map
        """
        self.config = config
        self.map_fn = map_fn
        self.logger = Logger()

    def run(self, units: Mapping[str, UnitData], mode: str = "denovo") -> pd.DataFrame:
        """
        Apply the pipeline to every unit and adjust p-values across all of them.

        Args:
            units: Transcript (de novo) or region (guided) id to reactivities
            mode: 'denovo' or 'guided'

        Returns:
            pd.DataFrame: One row per test result, in input order
        """
        if mode not in MODES:
            raise ValueError(f"Unknown mode {mode!r}, expected one of {MODES}")

        self.logger.log_step(
            "Batch processing", f"{len(units)} units in {mode} mode"
        )
        tasks = [(unit_id, data, self.config, mode) for unit_id, data in units.items()]
        transcript_results = self._map(tasks)

        df = self.to_dataframe(transcript_results)
        df["fdr"] = pd.array(benjamini_hochberg(df["p_value"].tolist()), dtype="Float64")

        failed = sum(1 for result in transcript_results if result.failed)
        tested = int(df["p_value"].notna().sum())
        self.logger.log_statistics(
            "Significant at FDR 0.05", int((df["fdr"] < 0.05).sum())
        )
        if failed:
            self.logger.log_warning(f"{failed} of {len(units)} units failed")
        self.logger.log_success(
            f"Batch completed: {len(df)} records, {tested} tested"
        )
        return df

    def _map(self, tasks: List[Task]) -> List[TranscriptResult]:
        if self.map_fn is not None:
            return list(self.map_fn(run_unit, tasks))
        if self.config.processes > 1 and len(tasks) > 1:
            with mp.Pool(self.config.processes) as pool:
                return pool.map(run_unit, tasks)
        return [run_unit(task) for task in tasks]

    @staticmethod
    def to_dataframe(transcript_results: Sequence[TranscriptResult]) -> pd.DataFrame:
        """Flatten unit results into records, keeping unit order"""
        rows = []
        for unit in transcript_results:
            if unit.failed:
                rows.append(
                    {
                        "id": unit.unit_id,
                        "status": TestStatus.FAILED.value,
                        "error": unit.error,
                    }
                )
                continue
            for result in unit.results:
                rows.append(
                    {
                        "id": unit.unit_id,
                        "start": result.region.start,
                        "end": result.region.end,
                        "pooled_regions": ";".join(
                            str(region) for region in result.pooled_regions
                        )
                        or None,
                        "p_value": result.p_value,
                        "effect_size": result.effect_size,
                        "status": result.status.value,
                        "mean_within": result.mean_within,
                    }
                )

        df = pd.DataFrame(rows, columns=RESULT_COLUMNS)
        for column in ("start", "end"):
            df[column] = pd.to_numeric(df[column]).astype("Int64")
        for column in ("p_value", "effect_size", "fdr", "mean_within"):
            df[column] = pd.array(df[column].tolist(), dtype="Float64")
        df["id"] = df["id"].astype(str)
        return df
