"""
Core domain models for the dStruct pipeline.
Contains data structures for configuration, regions and test results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .exceptions import SchemaViolationError


def default_quality(reps_A: int, reps_B: int) -> float:
    """
    Worst allowed mean within-group d-score when no quality is supplied.

    Args:
        reps_A: Number of replicates of group A
        reps_B: Number of replicates of group B

    Returns:
        float: 0.5 when both groups have replicates, otherwise 0.2
    """
    if min(reps_A, reps_B) >= 2:
        return 0.5
    return 0.2


@dataclass
class DStructConfig:
    """Configuration for a dStruct run"""

    reps_A: int
    reps_B: int
    batches: bool = False
    min_length: int = 11
    quality: Optional[float] = None
    evidence: float = 0.0
    check_quality: bool = True
    check_signal_strength: bool = False
    signal_strength: float = 0.1
    ind_regions: bool = True
    within_combs: Optional[List[List[str]]] = None
    between_combs: Optional[List[List[str]]] = None
    processes: int = 1

    def resolved_quality(self) -> float:
        """Explicit quality threshold, or the replicate-count default"""
        if self.quality is not None:
            return float(self.quality)
        return default_quality(self.reps_A, self.reps_B)


@dataclass(frozen=True)
class Region:
    """Closed interval [start, end] of 1-based nucleotide positions"""

    start: int
    end: int

    def __post_init__(self):
        if self.start < 1 or self.end < self.start:
            raise SchemaViolationError(
                f"Invalid region [{self.start}, {self.end}]"
            )

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def to_slice(self) -> slice:
        """Zero-based row slice covering the region"""
        return slice(self.start - 1, self.end)

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


class TestStatus(Enum):
    """Outcome of testing a region"""

    __test__ = False

    TESTED = "tested"
    QUALITY_GATE = "quality_gate"
    EVIDENCE_GATE = "evidence_gate"
    TEST_UNDEFINED = "test_undefined"
    LOW_SIGNAL = "low_signal"
    FAILED = "failed"


@dataclass
class TestResult:
    """Significance of one region (or of pooled regions in collective mode)"""

    __test__ = False

    region: Region
    status: TestStatus
    p_value: Optional[float] = None
    effect_size: Optional[float] = None
    mean_within: Optional[float] = None
    pooled_regions: Tuple[Region, ...] = ()

    @property
    def tested(self) -> bool:
        return self.status is TestStatus.TESTED


@dataclass
class TranscriptResult:
    """All test results for one transcript or guided region"""

    unit_id: str
    results: List[TestResult] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

