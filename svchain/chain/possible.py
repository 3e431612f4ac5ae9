"""
enumerates the legal templated insertions between the breakends of a cluster
"""
from collections import namedtuple
from typing import Dict, Iterable, List, Optional

from ..constants import ORIENT, SVTYPE
from ..util import chromosome_sort_key, logger
from ..variant import Breakend, StructuralVariant, min_templated_insertion_length
from .link import LinkArena, LinkedPair

ComplexDup = namedtuple('ComplexDup', ['variant', 'duplicated', 'pairs'])
"""
Attributes:
    variant (StructuralVariant): the lower ploidy variant whose breakends both link into the duplicated segment
    duplicated (StructuralVariant): the higher ploidy variant faced by the first breakend of the variant
    pairs (Tuple[LinkedPair, LinkedPair]): the two links, the adjacent one first
"""


class PossibleLinks:
    """
    For each chromosome, pairs every breakend with orientation -1 with each breakend of another variant further
    along the chromosome with orientation +1 which is at least the minimum templated insertion length away.
    Pairs are registered in the arena in scan order (chromosome, then lower breakend position) and cached per
    breakend nearest first
    """

    def __init__(
        self,
        variants: Iterable[StructuralVariant],
        arena: Optional[LinkArena] = None,
        min_templated_insertion_length: int = 30,
        min_chaining_ploidy: float = 0.05,
    ):
        self.arena = arena if arena is not None else LinkArena()
        self.min_templated_insertion_length = min_templated_insertion_length
        self.variants = [v for v in variants if v.ploidy >= min_chaining_ploidy]
        breakends = [b for v in self.variants for b in v.breakends]
        self._breakends = sorted(breakends, key=lambda b: (chromosome_sort_key(b.chr), b.sort_key))
        self._chromosomes: Dict[str, List[Breakend]] = {}
        for breakend in self._breakends:
            self._chromosomes.setdefault(breakend.chr, []).append(breakend)
        self._candidates: Dict[Breakend, List[LinkedPair]] = {b: [] for b in self._breakends}
        self._scan()

    def _scan(self):
        for breakends in self._chromosomes.values():
            for i, lower in enumerate(breakends):
                if lower.orient != ORIENT.RIGHT:
                    continue
                for upper in breakends[i + 1:]:
                    if upper.orient != ORIENT.LEFT or upper.variant == lower.variant:
                        continue
                    if not self.is_legal(lower, upper):
                        continue
                    assembled = bool(set(lower.linked_by) & set(upper.linked_by))
                    pair = self.arena.pair(lower, upper, assembled=assembled)
                    self._candidates[lower].append(pair)
                    self._candidates[upper].append(pair)
        for pairs in self._candidates.values():
            pairs.sort(key=lambda p: (p.length, p.id))
        logger.debug(f'{len(self.arena)} possible links between {len(self._breakends)} breakends')

    def is_legal(self, lower: Breakend, upper: Breakend) -> bool:
        if lower.position > upper.position or not lower.faces(upper):
            return False
        minimum = min_templated_insertion_length(lower, upper, self.min_templated_insertion_length)
        return upper.position - lower.position >= minimum

    def __contains__(self, breakend):
        return breakend in self._candidates

    def chromosomes(self) -> List[str]:
        return list(self._chromosomes.keys())

    def breakends(self) -> List[Breakend]:
        """the breakends which may be linked, in chromosome then position order"""
        return list(self._breakends)

    def chromosome_breakends(self, chrom: str) -> List[Breakend]:
        return list(self._chromosomes.get(chrom, []))

    def candidates(self, breakend: Breakend) -> List[LinkedPair]:
        return list(self._candidates.get(breakend, []))

    def pairs(self) -> List[LinkedPair]:
        return self.arena.pairs()

    def __len__(self):
        return len(self.arena)


def find_assembled_links(possible: PossibleLinks) -> List[LinkedPair]:
    """
    the legal pairs whose breakends share an assembly tag, in arena order
    """
    return [p for p in possible.pairs() if p.assembled]


def assembled_partner_counts(pairs: Iterable[LinkedPair]) -> Dict[StructuralVariant, int]:
    """the largest number of assembled partners at either breakend of each variant"""
    breakend_counts = {}
    for pair in pairs:
        for breakend in pair.breakends:
            breakend_counts[breakend] = breakend_counts.get(breakend, 0) + 1
    result = {}
    for breakend, count in breakend_counts.items():
        result[breakend.variant] = max(result.get(breakend.variant, 0), count)
    return result


def ploidy_match_for_split(
    variant: StructuralVariant, other: StructuralVariant, min_ratio: float = 2.0, max_ratio: float = 4.0
) -> bool:
    """
    True when the ploidy of the other variant lies within the min and max ratio multiples of the variant ploidy,
    each widened by the ploidy uncertainty of both variants
    """
    lowest = (variant.ploidy - variant.ploidy_uncertainty) * min_ratio - other.ploidy_uncertainty
    highest = (variant.ploidy + variant.ploidy_uncertainty) * max_ratio + other.ploidy_uncertainty
    return lowest <= other.ploidy <= highest


def _duplicates(variant: StructuralVariant, other: StructuralVariant, min_ratio: float, max_ratio: float) -> bool:
    if variant == other or other.type == SVTYPE.SGL:
        return False
    if variant.ploidy > other.ploidy:
        return False
    if variant.ploidy_min * min_ratio > other.ploidy_max:
        return False
    return ploidy_match_for_split(variant, other, min_ratio, max_ratio)


def _next_unassembled(breakends: List[Breakend], start: int, step: int) -> Optional[int]:
    index = start + step
    while 0 <= index < len(breakends):
        if not breakends[index].linked_by:
            return index
        index += step
    return None


def _facing_from(possible: PossibleLinks, breakend: Breakend) -> Optional[Breakend]:
    """
    walk from a breakend in the direction it faces, skipping assembled breakends, to the first breakend facing
    back toward it. The walk stops at a breakend with the same orientation
    """
    breakends = possible.chromosome_breakends(breakend.chr)
    step = 1 if breakend.orient == ORIENT.RIGHT else -1
    index = breakends.index(breakend) + step
    while 0 <= index < len(breakends):
        current = breakends[index]
        index += step
        if current.linked_by:
            continue
        if current.orient == breakend.orient:
            return None
        return current
    return None


def _pair_between(possible: PossibleLinks, first: Breakend, second: Breakend) -> Optional[LinkedPair]:
    pair = possible.arena.get(first, second)
    if pair is None or pair not in possible.candidates(first):
        return None
    return pair


def find_complex_dups(
    possible: PossibleLinks, complex_dup_min_ratio: float = 2.0, complex_dup_max_ratio: float = 4.0
) -> List[ComplexDup]:
    """
    Find the variants whose two breakends both link into a segment of at least double their ploidy. The first
    link joins adjacent facing breakends (ignoring assembled breakends between them) of the variant and the
    duplicated variant. The second link joins the other breakend of the variant to the first breakend it faces,
    which must belong to a variant passing the same ploidy ratio test

    Args:
        possible: the possible links of the cluster
        complex_dup_min_ratio: the smallest ratio of the duplicated ploidy to the variant ploidy
        complex_dup_max_ratio: the largest ratio of the duplicated ploidy to the variant ploidy
    """
    result = []
    seen = set()
    for chrom in possible.chromosomes():
        breakends = possible.chromosome_breakends(chrom)
        for i, lower in enumerate(breakends):
            if lower.orient != ORIENT.RIGHT or lower.linked_by:
                continue
            j = _next_unassembled(breakends, i, 1)
            if j is None:
                continue
            upper = breakends[j]
            if upper.orient != ORIENT.LEFT:
                continue
            pair = _pair_between(possible, lower, upper)
            if pair is None:
                continue
            if lower.ploidy <= upper.ploidy:
                variant_breakend, other_breakend = lower, upper
            else:
                variant_breakend, other_breakend = upper, lower
            variant, other = variant_breakend.variant, other_breakend.variant
            if variant.type in {SVTYPE.SGL, SVTYPE.DEL} or variant.is_single or variant.ploidy_max < 1:
                continue
            if not _duplicates(variant, other, complex_dup_min_ratio, complex_dup_max_ratio):
                continue
            far = variant_breakend.other
            if far is None or far not in possible:
                continue
            found = _facing_from(possible, far)
            if found is None or found.variant == variant:
                continue
            if not _duplicates(variant, found.variant, complex_dup_min_ratio, complex_dup_max_ratio):
                continue
            second = _pair_between(possible, far, found)
            if second is None or second == pair:
                continue
            key = (variant.id, pair.id, second.id)
            if key in seen:
                continue
            seen.add(key)
            logger.debug(f'complex duplication of {other} by {variant} via {pair} and {second}')
            result.append(ComplexDup(variant, other, (pair, second)))
    return result
