"""
per-chromosome position-ordered lookup of breakends
"""
from typing import Dict, Iterable, Optional, Tuple

from .util import chromosome_sort_key
from .variant import Breakend, StructuralVariant


class BreakendIndex:
    """
    Position-ordered breakends for each chromosome. The ordered sequences are immutable tuples and the position of a
    breakend in its sequence is held here rather than on the breakend. Removing variants produces a new index
    (see :meth:`exclude`) so any index handed out stays consistent

    Example:
        >>> index = BreakendIndex(variants)
        >>> index.breakends_on_chromosome('1')
        (Breakend(1:1000+ sv=1 start), Breakend(1:1050- sv=2 start))
    """

    def __init__(self, variants: Iterable[StructuralVariant] = (), _chromosomes: Optional[Dict] = None):
        if _chromosomes is not None:
            self._breakends = _chromosomes
        else:
            grouped = {}
            for variant in variants:
                for breakend in variant.breakends:
                    grouped.setdefault(breakend.chr, []).append(breakend)
            self._breakends = {chrom: self._order(breakends) for chrom, breakends in grouped.items()}
        self._positions = {}
        for breakends in self._breakends.values():
            for i, breakend in enumerate(breakends):
                self._positions[breakend] = i

    @staticmethod
    def _order(breakends) -> Tuple[Breakend, ...]:
        return tuple(sorted(breakends, key=lambda b: b.sort_key))

    def chromosomes(self):
        return sorted(self._breakends.keys(), key=chromosome_sort_key)

    def breakends_on_chromosome(self, chrom: str) -> Tuple[Breakend, ...]:
        return self._breakends.get(chrom, ())

    def index_of(self, breakend: Breakend) -> int:
        """
        Raises:
            KeyError: the breakend is not part of this index
        """
        return self._positions[breakend]

    def __contains__(self, breakend):
        return breakend in self._positions

    def __len__(self):
        return len(self._positions)

    def __iter__(self):
        for chrom in self.chromosomes():
            yield chrom, self._breakends[chrom]

    def variants(self):
        """the variants with breakends in this index, ordered by id"""
        return sorted({b.variant for b in self._positions}, key=lambda v: v.id)

    def neighbours(self, breakend: Breakend) -> Tuple[Optional[Breakend], Optional[Breakend]]:
        """
        Returns:
            tuple: the previous and next breakend on the same chromosome (None at either end)
        """
        breakends = self._breakends[breakend.chr]
        i = self.index_of(breakend)
        prev_breakend = breakends[i - 1] if i > 0 else None
        next_breakend = breakends[i + 1] if i < len(breakends) - 1 else None
        return prev_breakend, next_breakend

    def exclude(self, variants: Iterable[StructuralVariant]) -> 'BreakendIndex':
        """
        Build a new index without the breakends of the given variants. Chromosomes holding none of
        the excluded breakends keep the same ordered sequence
        """
        removed = {b for v in variants for b in v.breakends}
        chromosomes = {}
        for chrom, breakends in self._breakends.items():
            if any([b in removed for b in breakends]):
                remaining = tuple([b for b in breakends if b not in removed])
                if remaining:
                    chromosomes[chrom] = remaining
            else:
                chromosomes[chrom] = breakends
        return BreakendIndex(_chromosomes=chromosomes)
