"""
Signal-strength screening of reactivity tables.
"""

import numpy as np

from dstruct.domain.reactivity import ReactivityTable
from dstruct.infrastructure.logger import Logger


class SignalStrengthChecker:
    """Screens out tables whose replicates carry too little reactivity signal"""

    def __init__(self):
        self.logger = Logger()

    def replicate_strength(self, table: ReactivityTable) -> dict:
        """Median available reactivity of each replicate, NaN if none"""
        strengths = {}
        for label in table.labels:
            column = table.columns([label])[:, 0]
            column = column[~np.isnan(column)]
            strengths[label] = float(np.median(column)) if column.size else np.nan
        return strengths

    def passes(self, table: ReactivityTable, threshold: float) -> bool:
        """
        True if each group has a replicate with median reactivity >= threshold.

        Args:
            table: Reactivities of one transcript or region
            threshold: Minimum median reactivity

        Returns:
            bool: Whether the table has enough signal to be analysed
        """
        strengths = self.replicate_strength(table)
        for group in ("A", "B"):
            group_strengths = [
                value for label, value in strengths.items() if label.startswith(group)
            ]
            if not any(value >= threshold for value in group_strengths):
                self.logger.log_debug(
                    "Signal strength",
                    f"group {group} below {threshold}: {group_strengths}",
                )
                return False
        return True
