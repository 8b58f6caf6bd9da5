"""Shared fixtures for the dStruct tests."""

import numpy as np
import pytest

from dstruct.domain.reactivity import ReactivityTable
from tests.helpers import block_table


@pytest.fixture
def guided_table():
    """11-row region, A1 == A2, B1 drifting away by distinct amounts"""
    b1 = [1.0 + 0.1 * i for i in range(1, 12)]
    values = np.column_stack([np.ones(11), np.ones(11), b1])
    return ReactivityTable(values, ["A1", "A2", "B1"])


@pytest.fixture
def denovo_table():
    """60 nucleotides, 2+2 replicates, groups differ at positions 21-40"""
    return block_table(60, [(21, 40)])
