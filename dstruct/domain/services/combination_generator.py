"""
Regrouping of replicates into within-group and between-group combinations.
"""

from itertools import combinations
from typing import List, Optional, Sequence, Tuple

from dstruct.domain.exceptions import InsufficientDataError, SchemaViolationError
from dstruct.domain.reactivity import parse_label
from dstruct.infrastructure.logger import Logger

Combination = Tuple[str, ...]


def replicate_labels(group: str, reps: int) -> List[str]:
    """Labels of one group, e.g. ['A1', 'A2', 'A3']"""
    return [f"{group}{i}" for i in range(1, reps + 1)]


def shares_batch(combination: Sequence[str]) -> bool:
    """True if two labels of the combination carry the same replicate number"""
    numbers = [parse_label(label)[1] for label in combination]
    return len(numbers) != len(set(numbers))


class CombinationGenerator:
    """
    Builds the replicate groupings used to estimate within-group and
    between-group variation.

    Every automatic combination has the same arity, max(reps_A, reps_B).
    Within-group combinations are the subsets of that size drawn from a single
    group, so only a group holding the larger replicate count contributes.
    Between-group combinations are the subsets of that size holding at least
    one replicate of each group. With batches, replicates sharing a replicate
    number belong to the same batch and never appear together in one
    combination. Combinations are listed in lexicographic order of the label
    sequence A1..An, B1..Bm.
    """

    def __init__(self):
        self.logger = Logger()

    def generate(
        self,
        reps_A: int,
        reps_B: int,
        batches: bool = False,
        within_combs: Optional[Sequence[Sequence[str]]] = None,
        between_combs: Optional[Sequence[Sequence[str]]] = None,
    ) -> Tuple[List[Combination], List[Combination]]:
        """
        Within-group and between-group combinations for a design.

        User-supplied sets are validated against the design and used as-is;
        missing sets are generated.

        Args:
            reps_A: Number of replicates of group A
            reps_B: Number of replicates of group B
            batches: Whether replicates with equal numbers share a batch
            within_combs: Optional user-supplied within-group combinations
            between_combs: Optional user-supplied between-group combinations

        Returns:
            Tuple[List[Combination], List[Combination]]: within, between

        Raises:
            InsufficientDataError: If either set would be empty
            SchemaViolationError: If a supplied label is not in the design
        """
        if reps_A < 1 or reps_B < 1:
            raise SchemaViolationError(
                f"Both groups need replicates (reps_A={reps_A}, reps_B={reps_B})"
            )

        if within_combs is not None:
            within = self.validate(within_combs, reps_A, reps_B)
        else:
            within = self.within_group(reps_A, reps_B)

        if between_combs is not None:
            between = self.validate(between_combs, reps_A, reps_B)
        else:
            between = self.between_group(reps_A, reps_B, batches)

        if not within:
            raise InsufficientDataError(
                f"No within-group combination for reps_A={reps_A}, reps_B={reps_B}"
            )
        if not between:
            raise InsufficientDataError(
                f"No between-group combination for reps_A={reps_A}, "
                f"reps_B={reps_B}, batches={batches}"
            )

        self.logger.log_debug(
            "Combination generation",
            f"{len(within)} within-group, {len(between)} between-group",
        )
        return within, between

    def within_group(self, reps_A: int, reps_B: int) -> List[Combination]:
        """Same-group subsets of size max(reps_A, reps_B); never batch-mixed"""
        size = max(reps_A, reps_B)
        if size < 2:
            return []

        within: List[Combination] = []
        for group, reps in (("A", reps_A), ("B", reps_B)):
            if reps < size:
                continue
            within.extend(combinations(replicate_labels(group, reps), size))

        return within

    def between_group(self, reps_A: int, reps_B: int, batches: bool = False) -> List[Combination]:
        """Mixed subsets of size max(reps_A, reps_B) with both groups present"""
        size = max(reps_A, reps_B)
        if size < 2:
            return []

        labels = replicate_labels("A", reps_A) + replicate_labels("B", reps_B)
        between = []
        for comb in combinations(labels, size):
            groups = {label[0] for label in comb}
            if len(groups) < 2:
                continue
            if batches and shares_batch(comb):
                continue
            between.append(comb)
        return between

    def validate(
        self, combs: Sequence[Sequence[str]], reps_A: int, reps_B: int
    ) -> List[Combination]:
        """Check that supplied combinations only name replicates of the design"""
        reps = {"A": reps_A, "B": reps_B}
        validated = []
        for comb in combs:
            comb = tuple(str(label) for label in comb)
            if not comb:
                raise SchemaViolationError("Empty combination")
            if len(set(comb)) != len(comb):
                raise SchemaViolationError(f"Repeated label in combination {comb}")
            for label in comb:
                group, number = parse_label(label)
                if number > reps[group]:
                    raise SchemaViolationError(
                        f"Combination {comb} names {label} but group {group} "
                        f"has {reps[group]} replicates"
                    )
            validated.append(comb)
        return validated
