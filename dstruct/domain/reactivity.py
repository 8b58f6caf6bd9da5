"""
Reactivity table with validated replicate labels.
"""

import re
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .exceptions import SchemaViolationError
from .models import Region

LABEL_PATTERN = re.compile(r"^([AB])([1-9][0-9]*)$")
POSITION_COLUMN = "position"


def parse_label(label: str) -> Tuple[str, int]:
    """
    Split a replicate label such as 'B2' into its group and replicate number.

    Raises:
        SchemaViolationError: If the label is not of the form A<n> or B<n>
    """
    match = LABEL_PATTERN.match(str(label))
    if match is None:
        raise SchemaViolationError(f"Invalid replicate label: {label!r}")
    return match.group(1), int(match.group(2))


class ReactivityTable:
    """
    Immutable per-nucleotide reactivities of one transcript (or region).

    Rows are nucleotide positions 1..n; columns are replicates labelled
    A1..An and B1..Bm. Unavailable reactivities are stored as NaN. The
    label-to-column map is built and validated once, at construction.
    """

    def __init__(self, values: np.ndarray, labels: Sequence[str]):
        values = np.array(values, dtype=np.float64)
        if values.ndim == 1:
            values = values.reshape(-1, 1)
        if values.ndim != 2:
            raise SchemaViolationError("Reactivities must form a 2-D table")

        labels = [str(label) for label in labels]
        if values.shape[1] != len(labels):
            raise SchemaViolationError(
                f"Table has {values.shape[1]} columns but {len(labels)} labels"
            )

        self._index = self._build_index(labels)
        self._check_values(values)

        values.setflags(write=False)
        self._values = values
        self._labels = tuple(labels)
        self._reps = {
            group: sum(1 for label in labels if label.startswith(group))
            for group in ("A", "B")
        }

    @staticmethod
    def _build_index(labels: List[str]) -> Dict[str, int]:
        index: Dict[str, int] = {}
        numbers: Dict[str, List[int]] = {"A": [], "B": []}
        for idx, label in enumerate(labels):
            if label in index:
                raise SchemaViolationError(f"Duplicate replicate label: {label}")
            group, number = parse_label(label)
            numbers[group].append(number)
            index[label] = idx

        for group, found in numbers.items():
            if not found:
                raise SchemaViolationError(f"No replicates found for group {group}")
            if sorted(found) != list(range(1, len(found) + 1)):
                raise SchemaViolationError(
                    f"Replicates of group {group} must be numbered 1..{len(found)}, "
                    f"got {sorted(found)}"
                )
        return index

    @staticmethod
    def _check_values(values: np.ndarray) -> None:
        available = values[~np.isnan(values)]
        if np.isinf(available).any():
            raise SchemaViolationError("Reactivities must be finite")
        if (available < 0).any():
            raise SchemaViolationError("Reactivities must be non-negative")

    @classmethod
    def from_dataframe(
        cls, df: pd.DataFrame, position_column: Optional[str] = POSITION_COLUMN
    ) -> "ReactivityTable":
        """
        Build a table from a DataFrame of replicate columns.

        An optional position column must hold 1..n in order; it is dropped.
        Every other column must be a replicate label.
        """
        df = df.copy()
        if position_column and position_column in df.columns:
            positions = pd.to_numeric(df[position_column], errors="coerce").to_numpy()
            expected = np.arange(1, len(df) + 1)
            if len(positions) != len(expected) or not np.array_equal(positions, expected):
                raise SchemaViolationError(
                    "Positions must be consecutive integers starting at 1"
                )
            df = df.drop(columns=[position_column])

        try:
            values = df.apply(pd.to_numeric, errors="raise").to_numpy(dtype=np.float64)
        except (ValueError, TypeError) as e:
            raise SchemaViolationError(f"Non-numeric reactivity: {e}") from e
        return cls(values, list(df.columns))

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def labels(self) -> Tuple[str, ...]:
        return self._labels

    @property
    def n_positions(self) -> int:
        return self._values.shape[0]

    @property
    def reps_A(self) -> int:
        return self._reps["A"]

    @property
    def reps_B(self) -> int:
        return self._reps["B"]

    def __len__(self) -> int:
        return self.n_positions

    def has_label(self, label: str) -> bool:
        return label in self._index

    def columns(self, labels: Sequence[str]) -> np.ndarray:
        """Reactivity columns for the given labels, in the given order"""
        missing = [label for label in labels if label not in self._index]
        if missing:
            raise SchemaViolationError(f"Unknown replicate labels: {missing}")
        return self._values[:, [self._index[label] for label in labels]]

    def region(self, region: Region) -> "ReactivityTable":
        """Rows of the given region as a new table renumbered from 1"""
        if region.end > self.n_positions:
            raise SchemaViolationError(
                f"Region {region} exceeds table length {self.n_positions}"
            )
        return ReactivityTable(self._values[region.to_slice()], self._labels)

    def whole(self) -> Region:
        """Region spanning every row"""
        if self.n_positions == 0:
            raise SchemaViolationError("Empty reactivity table")
        return Region(1, self.n_positions)

    def to_dataframe(self) -> pd.DataFrame:
        df = pd.DataFrame(self._values, columns=list(self._labels))
        df.insert(0, POSITION_COLUMN, np.arange(1, self.n_positions + 1))
        return df
