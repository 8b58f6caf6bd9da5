"""
Data loading and initial validation for the dStruct pipeline.
"""

import csv
from typing import Dict, List, Sequence, Tuple

import pandas as pd

from dstruct.domain.exceptions import SchemaViolationError
from dstruct.domain.reactivity import LABEL_PATTERN
from dstruct.infrastructure.logger import Logger


class ReactivityDataLoader:
    """Responsible for loading reactivity tables and combination files"""

    def __init__(self):
        self.logger = Logger()

    def _read(self, file_path: str, **kwargs) -> pd.DataFrame:
        """Read a CSV or TSV file, choosing the delimiter from the extension"""
        try:
            if file_path.endswith(".tsv") or file_path.endswith(".txt"):
                return pd.read_csv(file_path, sep="\t", **kwargs)
            if file_path.endswith(".csv"):
                return pd.read_csv(file_path, **kwargs)

            with open(file_path, newline="") as handle:
                dialect = csv.Sniffer().sniff(handle.read(4096), delimiters=",\t;")
            return pd.read_csv(file_path, sep=dialect.delimiter, **kwargs)

        except FileNotFoundError:
            self.logger.log_error(
                FileNotFoundError(f"File not found: {file_path}"), "Data loading"
            )
            raise
        except (pd.errors.ParserError, csv.Error, UnicodeDecodeError) as e:
            self.logger.log_error(e, f"Reading {file_path}")
            raise SchemaViolationError(f"Invalid file format: {file_path}") from e

    def load_reactivities(
        self, file_path: str, id_column: str = "transcript"
    ) -> Dict[str, pd.DataFrame]:
        """
        Load a long-form reactivity file and split it per transcript.

        Args:
            file_path: Path to a CSV/TSV file with an id column, an optional
                position column and replicate columns A1.., B1..
            id_column: Column naming the transcript or region of each row

        Returns:
            Dict[str, pd.DataFrame]: Per-unit tables in order of first appearance
        """
        df = self._read(file_path)
        self.logger.log_table_shape("Loaded reactivities", df.shape)

        if id_column not in df.columns:
            raise SchemaViolationError(
                f"Missing id column {id_column!r} in {file_path}"
            )

        missing = df[id_column].isna()
        if missing.any():
            rows = (missing[missing].index + 1).tolist()
            raise SchemaViolationError(
                f"Missing {id_column!r} in {file_path} at data rows {rows[:10]}"
            )

        units = {
            str(unit_id): group.drop(columns=[id_column]).reset_index(drop=True)
            for unit_id, group in df.groupby(id_column, sort=False)
        }
        self.logger.log_success(f"Loaded {len(units)} units from {file_path}")
        return units

    def load_combinations(self, file_path: str) -> List[List[str]]:
        """
        Load replicate combinations, one combination per column.

        The file has no header; blank cells are skipped so columns may have
        different lengths.
        """
        df = self._read(file_path, header=None, dtype=str)
        combs = []
        for column in df.columns:
            labels = [label.strip() for label in df[column].dropna() if label.strip()]
            if labels:
                combs.append(labels)
        self.logger.log_step(
            "Combination loading", f"{len(combs)} combinations from {file_path}"
        )
        return combs

    def infer_replicates(self, columns: Sequence[str]) -> Tuple[int, int]:
        """Count replicate columns of groups A and B"""
        groups = [
            LABEL_PATTERN.match(str(column)).group(1)
            for column in columns
            if LABEL_PATTERN.match(str(column))
        ]
        reps_A, reps_B = groups.count("A"), groups.count("B")
        self.logger.log_step("Replicates", f"Inferred reps_A={reps_A}, reps_B={reps_B}")
        return reps_A, reps_B
