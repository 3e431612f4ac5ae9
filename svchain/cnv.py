"""
copy number events (loss of heterozygosity, homozygous loss) supplied by the copy number caller

The events reference the ids of the variants bounding them. They are tied to the breakends of those
variants by :func:`svchain.cluster.merge.associate_breakend_cn_events` before clustering uses them
"""
from typing import Iterable, Optional

from .constants import ARM, SvChainNamespace
from .interval import Interval
from .util import normalize_chromosome

SEGMENT_TYPE = SvChainNamespace(TELOMERE='TELOMERE', CENTROMERE='CENTROMERE', BND='BND', NONE='NONE')
"""
the kind of copy number segment boundary at each end of an event
"""

NO_VARIANT = -1


class HomLossEvent:
    def __init__(
        self,
        chr: str,
        start: int,
        end: int,
        start_variant: Optional[int] = NO_VARIANT,
        end_variant: Optional[int] = NO_VARIANT,
        segment_start: str = SEGMENT_TYPE.BND,
        segment_end: str = SEGMENT_TYPE.BND,
    ):
        """
        Args:
            chr: the chromosome
            start: the first position of the lost segment
            end: the last position of the lost segment
            start_variant: id of the variant bounding the start of the segment
            end_variant: id of the variant bounding the end of the segment
            segment_start (SEGMENT_TYPE): the type of boundary at the start
            segment_end (SEGMENT_TYPE): the type of boundary at the end
        """
        self.chr = normalize_chromosome(chr)
        self.interval = Interval(start, end)
        self.start_variant = NO_VARIANT if start_variant is None else int(start_variant)
        self.end_variant = NO_VARIANT if end_variant is None else int(end_variant)
        self.segment_start = SEGMENT_TYPE.enforce(segment_start)
        self.segment_end = SEGMENT_TYPE.enforce(segment_end)
        self.start_breakend = None
        self.end_breakend = None

    @property
    def start(self):
        return self.interval.start

    @property
    def end(self):
        return self.interval.end

    def set_breakend(self, breakend, is_start):
        if is_start:
            self.start_breakend = breakend
        else:
            self.end_breakend = breakend

    def breakend(self, is_start):
        return self.start_breakend if is_start else self.end_breakend

    def clear_breakends(self):
        self.start_breakend = None
        self.end_breakend = None

    def is_sv_event(self) -> bool:
        return self.start_variant != NO_VARIANT or self.end_variant != NO_VARIANT

    @property
    def matched_both(self) -> bool:
        return self.start_breakend is not None and self.end_breakend is not None

    @property
    def same_variant(self) -> bool:
        return self.matched_both and self.start_breakend.variant == self.end_breakend.variant

    @property
    def missed_bounds(self) -> int:
        """number of bounding variants given which could not be tied to a breakend"""
        missed = 0
        if self.start_variant != NO_VARIANT and self.start_breakend is None:
            missed += 1
        if self.end_variant != NO_VARIANT and self.end_breakend is None:
            missed += 1
        return missed

    def clustered(self, partition) -> bool:
        return self.matched_both and partition.same_cluster(self.start_breakend.variant, self.end_breakend.variant)

    def __repr__(self):
        return '{}({}:{}-{} variants={}/{})'.format(
            self.__class__.__name__, self.chr, self.start, self.end, self.start_variant, self.end_variant
        )


class LohEvent(HomLossEvent):
    """
    a loss of heterozygosity segment, which may contain nested homozygous loss events
    """

    def __init__(self, *pos, hom_loss_events: Iterable[HomLossEvent] = (), **kwargs):
        HomLossEvent.__init__(self, *pos, **kwargs)
        self.hom_loss_events = list(hom_loss_events)

    @property
    def has_incomplete_hom_loss_events(self) -> bool:
        """True if any nested hom-loss event is not bounded at both ends by the same variant"""
        return any([not h.matched_both or not h.same_variant for h in self.hom_loss_events])

    def arm_loss(self, arm=None) -> bool:
        p_arm = self.segment_start == SEGMENT_TYPE.TELOMERE and self.segment_end == SEGMENT_TYPE.CENTROMERE
        q_arm = self.segment_start == SEGMENT_TYPE.CENTROMERE and self.segment_end == SEGMENT_TYPE.TELOMERE
        if arm == ARM.P:
            return p_arm
        elif arm == ARM.Q:
            return q_arm
        return p_arm or q_arm

    def chromosome_loss(self) -> bool:
        return self.segment_start == SEGMENT_TYPE.TELOMERE and self.segment_end == SEGMENT_TYPE.TELOMERE

    def whole_arm_loss(self) -> bool:
        return self.arm_loss() or self.chromosome_loss()

    def nests(self, hom_loss: HomLossEvent) -> bool:
        """True when the hom-loss event lies strictly inside this LOH segment"""
        return self.interval.strictly_contains(hom_loss.interval)
