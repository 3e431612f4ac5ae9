"""
per-breakend bookkeeping of the ploidy (and the number of logical copies) still free to be linked
"""
import math
from collections import namedtuple
from typing import Dict, Iterable, List, Optional

from ..error import PloidyAllocationError
from ..util import copy_numbers_equal, logger, round_half_up
from ..variant import Breakend, StructuralVariant
from .link import LinkedPair

PloidyRange = namedtuple('PloidyRange', ['min', 'max'])


def cluster_ploidy_range(variants: Iterable[StructuralVariant]) -> PloidyRange:
    """
    The integer ploidy range of a cluster. If a single integer ploidy lies within the bounds of every variant the
    cluster is uniform at that ploidy, otherwise the range is taken from the rounded ploidy of each variant

    Example:
        >>> cluster_ploidy_range([StructuralVariant(... ploidy=1.2, ploidy_min=0.8, ploidy_max=1.6), ...])
        PloidyRange(min=1, max=1)
    """
    variants = list(variants)
    lowest = max([max(math.ceil(v.ploidy_min), 1) for v in variants])
    highest = min([math.floor(v.ploidy_max) for v in variants])
    if lowest <= highest:
        return PloidyRange(lowest, lowest)
    implied = [v.implied_ploidy for v in variants]
    return PloidyRange(min(implied), max(implied))


def replication_counts(
    variants: Iterable[StructuralVariant],
    ploidy_range: PloidyRange,
    chaining_sv_limit: int = 2000,
    assembled_counts: Optional[Dict[StructuralVariant, int]] = None,
) -> Dict[StructuralVariant, int]:
    """
    the number of logical copies of each variant, the ratio of its ploidy to the cluster minimum (or its
    number of assembled partners if greater), scaled down when the total would exceed the limit
    """
    variants = list(variants)
    assembled_counts = assembled_counts or {}
    counts = {}
    for variant in variants:
        multiple = max(round_half_up(variant.implied_ploidy / ploidy_range.min), 1)
        counts[variant] = max(multiple, assembled_counts.get(variant, 1))
    total = sum(counts.values())
    if total > chaining_sv_limit:
        factor = chaining_sv_limit / total
        logger.debug(f'scaling replication of {total} copies by {factor:.3f}')
        counts = {v: max(round_half_up(c * factor), 1) for v, c in counts.items()}
    return counts


class PloidyAllocator:
    """
    Tracks for each breakend the ploidy not yet linked and the number of logical copies not yet linked. A commit
    decrements both breakends of a pair together or not at all
    """

    def __init__(
        self,
        variants: Iterable[StructuralVariant],
        min_chaining_ploidy: float = 0.05,
        chaining_sv_limit: int = 2000,
        cn_abs_tolerance: float = 0.5,
        cn_relative_tolerance: float = 0.15,
        assembled_counts: Optional[Dict[StructuralVariant, int]] = None,
    ):
        variants = list(variants)
        self.min_chaining_ploidy = min_chaining_ploidy
        self.cn_abs_tolerance = cn_abs_tolerance
        self.cn_relative_tolerance = cn_relative_tolerance
        self.ploidy_range = cluster_ploidy_range(variants)
        assembled_counts = assembled_counts or {}
        self.requires_replication = self.ploidy_range.max > self.ploidy_range.min or any(
            [c > 1 for c in assembled_counts.values()]
        )
        if self.requires_replication:
            self.replication = replication_counts(variants, self.ploidy_range, chaining_sv_limit, assembled_counts)
        else:
            self.replication = {v: 1 for v in variants}
        self._remaining = {}
        self._copies = {}
        for variant in variants:
            for breakend in variant.breakends:
                self._remaining[breakend] = variant.ploidy
                self._copies[breakend] = self.replication[variant]

    def __contains__(self, breakend):
        return breakend in self._remaining

    def remaining(self, breakend: Breakend) -> float:
        return self._remaining[breakend]

    def copies_remaining(self, breakend: Breakend) -> int:
        return self._copies[breakend]

    def consumed(self, breakend: Breakend) -> float:
        return breakend.ploidy - self._remaining[breakend]

    def copy_ploidy(self, breakend: Breakend) -> float:
        """the ploidy of one of the remaining logical copies of the breakend"""
        copies = self._copies[breakend]
        if copies <= 0:
            return 0.0
        return self._remaining[breakend] / copies

    def is_allocatable(self, breakend: Breakend) -> bool:
        if breakend not in self._remaining:
            return False
        return self._copies[breakend] > 0 and self._remaining[breakend] >= self.min_chaining_ploidy

    def ploidy_match(self, first: Breakend, second: Breakend) -> bool:
        """True if the ploidy not yet linked at both breakends is the same"""
        return copy_numbers_equal(
            self._remaining[first], self._remaining[second], self.cn_abs_tolerance, self.cn_relative_tolerance
        )

    def matched_ploidy(self, pair: LinkedPair) -> float:
        return min(self._remaining[pair.lower], self._remaining[pair.upper])

    def link_ploidy(self, pair: LinkedPair) -> float:
        return min(self.copy_ploidy(pair.lower), self.copy_ploidy(pair.upper))

    def commit(self, pair: LinkedPair) -> float:
        """
        Allocate one copy at each breakend of the pair

        Returns:
            float: the ploidy allocated to the link

        Raises:
            PloidyAllocationError: either breakend cannot be allocated
        """
        for breakend in pair.breakends:
            if not self.is_allocatable(breakend):
                raise PloidyAllocationError(
                    f'{breakend} has no ploidy left to link (remaining={self._remaining.get(breakend)}, '
                    f'copies={self._copies.get(breakend)})'
                )
        ploidy = self.link_ploidy(pair)
        if pair.lower == pair.upper:
            raise PloidyAllocationError(f'cannot link a breakend to itself {pair.lower}')
        for breakend in pair.breakends:
            if self._remaining[breakend] - ploidy < 0 or self._copies[breakend] < 1:
                raise PloidyAllocationError(f'linking {ploidy:.2f} would leave negative ploidy at {breakend}')
        for breakend in pair.breakends:
            self._remaining[breakend] -= ploidy
            self._copies[breakend] -= 1
        return ploidy

    def commit_all(self, pairs: List[LinkedPair]) -> List[float]:
        """
        commit several pairs, none of them are committed if any fails
        """
        affected = {b for pair in pairs for b in pair.breakends}
        saved = {b: (self._remaining.get(b), self._copies.get(b)) for b in affected}
        result = []
        try:
            for pair in pairs:
                result.append(self.commit(pair))
        except PloidyAllocationError:
            for breakend, (remaining, copies) in saved.items():
                if remaining is not None:
                    self._remaining[breakend] = remaining
                    self._copies[breakend] = copies
            raise
        return result
