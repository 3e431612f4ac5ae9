from typing import Dict, Iterable, List, Optional, Tuple

from ..constants import RESOLVED_TYPE, SVTYPE
from ..util import chromosome_sort_key
from ..variant import Breakend, StructuralVariant


class Cluster:
    """
    a group of structural variants believed to come from the same mutational event

    clusters are not changed while clustering, merging two clusters builds a new cluster (see :meth:`merged`).
    Chains and the chaining state are attached once clustering is complete
    """

    def __init__(
        self,
        id: int,
        variants: Iterable[StructuralVariant],
        reasons: Iterable[str] = (),
        resolved: bool = False,
        resolved_type: str = RESOLVED_TYPE.NONE,
        loh_events: Iterable = (),
    ):
        self.id = id
        self.variants = tuple(sorted(variants, key=lambda v: v.id))
        if not self.variants:
            raise AttributeError('a cluster requires at least one variant')
        self.reasons = []
        for reason in reasons:
            if reason not in self.reasons:
                self.reasons.append(reason)
        self.resolved = resolved
        self.resolved_type = RESOLVED_TYPE.enforce(resolved_type)
        self.loh_events = tuple(loh_events)
        self.chains = []
        self.chain_state = None
        self.ploidy_range = None

    def __repr__(self):
        return f'Cluster({self.id} svs={len(self)} type={self.resolved_type} reasons={self.reason_string})'

    def __len__(self):
        return len(self.variants)

    def __iter__(self):
        return iter(self.variants)

    def __contains__(self, variant):
        return variant in self.variants

    @property
    def reason_string(self) -> str:
        return ';'.join(self.reasons)

    @property
    def foldbacks(self) -> List[StructuralVariant]:
        return [v for v in self.variants if v.foldback]

    @property
    def is_solo_single(self) -> bool:
        return len(self.variants) == 1 and self.variants[0].type == SVTYPE.SGL

    def breakends(self) -> List[Breakend]:
        """all breakends, ordered by chromosome then position"""
        breakends = [b for v in self.variants for b in v.breakends]
        return sorted(breakends, key=lambda b: (chromosome_sort_key(b.chr), b.sort_key))

    def arm_groups(self) -> Dict[Tuple[str, str], List[Breakend]]:
        """breakends grouped by chromosome arm, position ordered within each group"""
        result = {}
        for breakend in self.breakends():
            result.setdefault((breakend.chr, breakend.arm), []).append(breakend)
        return result

    def merged(self, other: 'Cluster', reason: Optional[str] = None) -> 'Cluster':
        """
        Build the cluster combining this and another cluster. The id of the larger of the two is kept
        (this cluster's on a tie). The merged cluster is unresolved
        """
        keep_id = other.id if len(other) > len(self) else self.id
        reasons = self.reasons + other.reasons
        if reason:
            reasons.append(reason)
        loh_events = list(self.loh_events)
        loh_events.extend([e for e in other.loh_events if e not in self.loh_events])
        return Cluster(keep_id, self.variants + other.variants, reasons=reasons, loh_events=loh_events)

    def with_resolution(self, resolved: bool, resolved_type: str, reason: Optional[str] = None) -> 'Cluster':
        reasons = list(self.reasons)
        if reason:
            reasons.append(reason)
        return Cluster(
            self.id, self.variants, reasons=reasons, resolved=resolved, resolved_type=resolved_type,
            loh_events=self.loh_events,
        )

    def with_loh_event(self, event) -> 'Cluster':
        if event in self.loh_events:
            return self
        return Cluster(
            self.id, self.variants, reasons=self.reasons, resolved=self.resolved,
            resolved_type=self.resolved_type, loh_events=self.loh_events + (event,),
        )

    def to_dict(self):
        return {
            'id': self.id,
            'variants': [v.id for v in self.variants],
            'resolved': self.resolved,
            'resolved_type': self.resolved_type,
            'reasons': self.reason_string,
            'chain_state': self.chain_state,
            'chains': [c.to_dict() for c in self.chains],
        }
