from typing import Iterable, Optional, Tuple

from .constants import ARM, ORIENT, SIMPLE_SVTYPES, SINGLE_BREAKEND_SVTYPES, SVTYPE
from .error import InvalidRearrangement
from .interval import Interval
from .util import get_chromosome_arm, normalize_chromosome, round_half_up


class Breakend:
    """
    one end of a structural variant, coordinates are given as 1-indexed

    the breakend is attached to its variant when the variant is created and its
    position and orientation are not changed after that
    """

    def __init__(
        self,
        chr: str,
        position: int,
        orient: int,
        cn_low: Optional[float] = None,
        cn_high: Optional[float] = None,
        major_ploidy_low: Optional[float] = None,
        major_ploidy_high: Optional[float] = None,
        linked_by: Iterable[str] = (),
        anchor_distance: int = 0,
        arm: Optional[str] = None,
    ):
        """
        Args:
            chr: the chromosome
            position: the genomic position of the break
            orient: the orientation (which side is retained at the break)
            cn_low: copy number of the segment immediately before (lower positions) the break
            cn_high: copy number of the segment immediately after (higher positions) the break
            major_ploidy_low: major allele ploidy of the lower segment
            major_ploidy_high: major allele ploidy of the upper segment
            linked_by: assembly tags. breakends sharing a tag were assembled into the same contig
            anchor_distance: positional uncertainty of the break
            arm: the chromosome arm, computed from the position when not given
        """
        self.chr = normalize_chromosome(chr)
        self.position = int(position)
        self.orient = ORIENT.enforce(orient)
        self.arm = ARM.enforce(arm) if arm else get_chromosome_arm(self.chr, self.position)
        self.cn_low = float(cn_low) if cn_low is not None else None
        self.cn_high = float(cn_high) if cn_high is not None else None
        self.major_ploidy_low = major_ploidy_low
        self.major_ploidy_high = major_ploidy_high
        self.linked_by = tuple(linked_by)
        self.anchor_distance = int(anchor_distance)
        self.variant = None
        self.is_start = True

    @property
    def key(self):
        if self.variant is None:
            return (None, self.chr, self.position, self.orient)
        return (self.variant.id, self.is_start)

    def __eq__(self, other):
        if not hasattr(other, 'key'):
            return False
        return self.key == other.key

    def __hash__(self):
        return hash(self.key)

    def __repr__(self):
        orient = '+' if self.orient == ORIENT.LEFT else '-'
        if self.variant is None:
            return f'Breakend({self.chr}:{self.position}{orient})'
        side = 'start' if self.is_start else 'end'
        return f'Breakend({self.chr}:{self.position}{orient} sv={self.variant.id} {side})'

    @property
    def sort_key(self):
        return (self.position, self.key[0] if self.variant else -1, 0 if self.is_start else 1)

    @property
    def other(self):
        """:class:`Breakend`: the opposite end of the same variant, None for single breakends"""
        if self.is_start:
            return self.variant.end
        return self.variant.start

    @property
    def ploidy(self) -> float:
        return self.variant.ploidy

    @property
    def has_copy_number(self) -> bool:
        return self.cn_low is not None and self.cn_high is not None

    @property
    def copy_number_change(self) -> float:
        if not self.has_copy_number:
            return 0.0
        return abs(self.cn_low - self.cn_high)

    @property
    def outer_major_ploidy(self) -> Optional[float]:
        """major allele ploidy of the segment lost at the break"""
        return self.major_ploidy_high if self.orient == ORIENT.LEFT else self.major_ploidy_low

    def faces(self, other: 'Breakend') -> bool:
        """
        True when the two breakends on the same chromosome face each other: the lower one
        retains the higher positions and the upper one retains the lower positions
        """
        if self.chr != other.chr:
            return False
        lower, upper = (self, other) if self.position <= other.position else (other, self)
        return lower.orient == ORIENT.RIGHT and upper.orient == ORIENT.LEFT

    def to_dict(self):
        return {
            'chr': self.chr,
            'position': self.position,
            'orientation': self.orient,
            'arm': self.arm,
            'cn_low': self.cn_low,
            'cn_high': self.cn_high,
        }


class StructuralVariant:
    """
    a single rearrangement junction with its (one or) two breakends and its ploidy estimate
    """

    def __init__(
        self,
        id: int,
        type: str,
        start: Breakend,
        end: Optional[Breakend] = None,
        ploidy: float = 1.0,
        ploidy_min: Optional[float] = None,
        ploidy_max: Optional[float] = None,
        foldback: bool = False,
    ):
        """
        Args:
            id: unique identifier of the variant
            type (SVTYPE): the type of structural variant
            start: the first breakend, the lower position when both breakends are on the same chromosome
            end: the second breakend. Must not be given for single breakends
            ploidy: the ploidy estimate
            ploidy_min: lower bound of the ploidy estimate
            ploidy_max: upper bound of the ploidy estimate
            foldback: the variant folds back on itself

        Raises:
            InvalidRearrangement: the breakends given are not compatible with the type
        """
        self.id = int(id)
        self.type = SVTYPE.enforce(type)
        if self.type in SINGLE_BREAKEND_SVTYPES:
            if end is not None:
                raise InvalidRearrangement(f'single breakend variant ({self.id}) cannot have a second breakend')
        elif end is None:
            raise InvalidRearrangement(f'{self.type} variant ({self.id}) requires a second breakend')
        elif start.chr == end.chr and start.position > end.position:
            raise InvalidRearrangement(
                f'start breakend must precede end breakend on the same chromosome ({self.id})', start, end
            )
        elif self.type == SVTYPE.BND and start.chr == end.chr:
            raise InvalidRearrangement(f'translocation ({self.id}) breakends must be on different chromosomes')
        elif self.type != SVTYPE.BND and start.chr != end.chr:
            raise InvalidRearrangement(f'{self.type} variant ({self.id}) breakends must be on the same chromosome')

        self.start = start
        self.end = end
        start.variant = self
        start.is_start = True
        if end is not None:
            end.variant = self
            end.is_start = False

        self.ploidy = float(ploidy)
        self.ploidy_min = float(ploidy_min) if ploidy_min is not None else self.ploidy
        self.ploidy_max = float(ploidy_max) if ploidy_max is not None else self.ploidy
        if not self.ploidy_min <= self.ploidy <= self.ploidy_max:
            raise AttributeError('ploidy must lie within its bounds', self.ploidy_min, self.ploidy, self.ploidy_max)
        self.foldback = foldback
        self.cluster_id = None
        self.cluster_reasons = []

    def __eq__(self, other):
        if not hasattr(other, 'id') or not hasattr(other, 'breakends'):
            return False
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        end = f'-{self.end.chr}:{self.end.position}' if self.end is not None else ''
        return f'{self.type}({self.id}:{self.start.chr}:{self.start.position}{end} ploidy={self.ploidy:.2f})'

    def breakend(self, is_start: bool) -> Optional[Breakend]:
        return self.start if is_start else self.end

    @property
    def breakends(self) -> Tuple[Breakend, ...]:
        if self.end is None:
            return (self.start,)
        return (self.start, self.end)

    @property
    def is_single(self) -> bool:
        return self.type in SINGLE_BREAKEND_SVTYPES

    @property
    def is_simple_type(self) -> bool:
        return self.type in SIMPLE_SVTYPES

    @property
    def is_cross_arm(self) -> bool:
        if self.end is None:
            return False
        return self.start.chr != self.end.chr or self.start.arm != self.end.arm

    @property
    def length(self) -> int:
        """distance between the breakends, zero for translocations and single breakends"""
        if self.end is None or self.start.chr != self.end.chr:
            return 0
        return self.end.position - self.start.position

    @property
    def span(self) -> Interval:
        if self.end is None or self.start.chr != self.end.chr:
            return Interval(self.start.position)
        return Interval(self.start.position, self.end.position)

    @property
    def implied_ploidy(self) -> int:
        return max(round_half_up(self.ploidy), 1)

    @property
    def ploidy_uncertainty(self) -> float:
        return (self.ploidy_max - self.ploidy_min) / 2

    @property
    def has_assembly_links(self) -> bool:
        return any([b.linked_by for b in self.breakends])

    @property
    def reason_string(self) -> str:
        return ';'.join(self.cluster_reasons)

    def to_dict(self):
        return {
            'id': self.id,
            'type': self.type,
            'start': self.start.to_dict(),
            'end': self.end.to_dict() if self.end is not None else None,
            'ploidy': self.ploidy,
            'ploidy_min': self.ploidy_min,
            'ploidy_max': self.ploidy_max,
            'foldback': self.foldback,
            'cluster_id': self.cluster_id,
            'cluster_reasons': self.reason_string,
        }


def min_templated_insertion_length(first: Breakend, second: Breakend, minimum: int = 30) -> int:
    """
    the shortest templated insertion allowed between two breakends, widened by the positional uncertainty of each
    """
    return max(minimum, first.anchor_distance + second.anchor_distance)
