"""Table builders shared by the dStruct tests."""

import math

import numpy as np
import pandas as pd

from dstruct.domain.reactivity import ReactivityTable


def d_pair(x: float, y: float) -> float:
    """d-score of two replicate values"""
    sd = abs(x - y) / math.sqrt(2)
    return 2 * math.atan(sd / ((x + y) / 2)) / math.pi


def block_table(n, blocks, reps_A=2, reps_B=2, base=1.0, shifted=3.0):
    """
    Table where every replicate reads `base`, except group B reads `shifted`
    inside the given 1-based closed blocks.
    """
    labels = [f"A{i}" for i in range(1, reps_A + 1)] + [
        f"B{i}" for i in range(1, reps_B + 1)
    ]
    values = np.full((n, len(labels)), base)
    for start, end in blocks:
        values[start - 1 : end, reps_A:] = shifted
    return ReactivityTable(values, labels)


def block_frame(n, blocks, **kwargs) -> pd.DataFrame:
    return block_table(n, blocks, **kwargs).to_dataframe()
