"""
merge rules joining proximity clusters on copy number event and structural overlap evidence

every rule takes the current partition and returns a new partition with the merge records it produced
"""
from typing import Dict, Iterable, List, Optional, Tuple

from ..cnv import HomLossEvent, LohEvent
from ..constants import CLUSTER_REASON, ORIENT, RESOLVED_TYPE, SVTYPE
from ..index import BreakendIndex
from ..interval import Interval
from ..util import copy_numbers_equal, logger
from ..variant import Breakend, StructuralVariant
from ..variant import min_templated_insertion_length as min_ti_length
from .cluster import Cluster
from .lengths import LengthCutoffs
from .partition import ClusterPartition, MergeRecord


def associate_breakend_cn_events(
    index: BreakendIndex, loh_events: Iterable[LohEvent], hom_loss_events: Iterable[HomLossEvent] = ()
) -> int:
    """
    Tie each event bound to a breakend of the variant named by the event. The start of an event is
    bound by a breakend with orientation +1 and the end by one with orientation -1

    Returns:
        int: the number of event bounds which could not be matched
    """
    events = []
    for event in loh_events:
        events.append(event)
        events.extend(event.hom_loss_events)
    events.extend(hom_loss_events)

    missed = 0
    seen = set()
    for event in events:
        if id(event) in seen:
            continue
        seen.add(id(event))
        event.clear_breakends()
        if not event.is_sv_event():
            continue
        for breakend in index.breakends_on_chromosome(event.chr):
            if breakend.orient == ORIENT.LEFT and breakend.variant.id == event.start_variant:
                event.set_breakend(breakend, True)
            if breakend.orient == ORIENT.RIGHT and breakend.variant.id == event.end_variant:
                event.set_breakend(breakend, False)
            if event.matched_both:
                break
        missed += event.missed_bounds
    if missed:
        logger.warning(f'missed {missed} links to LOH and hom-loss events')
    return missed


def attach_loh_events(partition: ClusterPartition, loh_events: Iterable[LohEvent]) -> ClusterPartition:
    """record each LOH event on the clusters of its matched breakends"""
    for event in loh_events:
        for breakend in [event.start_breakend, event.end_breakend]:
            if breakend is None:
                continue
            cluster = partition.cluster_of(breakend.variant)
            updated = cluster.with_loh_event(event)
            if updated is not cluster:
                partition = partition.replace(updated)
    return partition


def _merge_breakend_clusters(partition, first: Breakend, second: Breakend, reason: str):
    first_cluster = partition.cluster_of(first.variant)
    second_cluster = partition.cluster_of(second.variant)
    if first_cluster.id == second_cluster.id:
        return partition, None
    return partition.merge(first_cluster, second_cluster, reason, (first.variant, second.variant))


def merge_on_loh_events(
    partition: ClusterPartition, loh_events: Iterable[LohEvent]
) -> Tuple[ClusterPartition, List[MergeRecord]]:
    """
    - an LOH bounded by matched breakends without any incomplete hom-loss event joins the clusters at each bound
    - an LOH already clustered (or covering a whole arm) joins the bounds of each unclustered hom-loss event
      strictly inside it
    - an unclustered LOH whose nested hom-loss events are all clustered joins its bounds
    - when all but two of the LOH and hom-loss bounds pair off within a cluster, the remaining two are joined
    """
    records = []
    loh_events = list(loh_events)

    for event in loh_events:
        if not event.matched_both or event.has_incomplete_hom_loss_events:
            continue
        partition, record = _merge_breakend_clusters(
            partition, event.start_breakend, event.end_breakend, CLUSTER_REASON.LOH
        )
        if record:
            records.append(record)

    for event in loh_events:
        if not event.has_incomplete_hom_loss_events:
            continue

        if event.clustered(partition) or event.whole_arm_loss():
            unclustered = [
                h for h in event.hom_loss_events
                if h.matched_both and not h.same_variant and event.nests(h) and not h.clustered(partition)
            ]
            for hom_loss in unclustered:
                partition, record = _merge_breakend_clusters(
                    partition, hom_loss.start_breakend, hom_loss.end_breakend, CLUSTER_REASON.HOM_LOSS
                )
                if record:
                    records.append(record)
            continue

        if not event.matched_both:
            continue

        incomplete = False
        for hom_loss in event.hom_loss_events:
            if not event.nests(hom_loss) or not hom_loss.matched_both or not hom_loss.clustered(partition):
                incomplete = True
                break
        if not incomplete:
            partition, record = _merge_breakend_clusters(
                partition, event.start_breakend, event.end_breakend, CLUSTER_REASON.HOM_LOSS
            )
            if record:
                records.append(record)

        if not all([h.matched_both for h in event.hom_loss_events]):
            continue
        unpaired = []
        for is_start in [True, False]:
            unpaired.append(event.breakend(is_start))
            unpaired.extend([h.breakend(is_start) for h in event.hom_loss_events])
        i = 0
        while i < len(unpaired):
            for j in range(i + 1, len(unpaired)):
                if partition.same_cluster(unpaired[i].variant, unpaired[j].variant):
                    del unpaired[j]
                    del unpaired[i]
                    break
            else:
                i += 1
        if len(unpaired) == 2:
            partition, record = _merge_breakend_clusters(partition, unpaired[0], unpaired[1], CLUSTER_REASON.HOM_LOSS)
            if record:
                records.append(record)
    return partition, records


def long_ddi_variants(cluster: Cluster, cutoffs: LengthCutoffs) -> Dict[Tuple[str, str], List[StructuralVariant]]:
    """
    the long deletions and duplications of a cluster, and its inversions (unless the cluster resolved
    as a simple event), grouped by the chromosome arm holding both of their breakends
    """
    result = {}
    simple = cluster.resolved and cluster.resolved_type in {RESOLVED_TYPE.DEL, RESOLVED_TYPE.DUP, RESOLVED_TYPE.INS}
    for arm, breakends in cluster.arm_groups().items():
        for breakend in breakends:
            variant = breakend.variant
            if not breakend.is_start or variant.is_cross_arm:
                continue
            if variant.type in {SVTYPE.DEL, SVTYPE.DUP} and cutoffs.exceeds(variant):
                result.setdefault(arm, []).append(variant)
            elif variant.type == SVTYPE.INV and not simple:
                result.setdefault(arm, []).append(variant)
    return result


def breakends_in_loh_and_hom_loss_events(
    partition: ClusterPartition, loh_breakend: Breakend, hom_loss_breakend: Breakend
) -> bool:
    """
    True if an LOH event of the cluster of the first breakend contains a hom-loss event bounded by the second breakend
    """
    cluster = partition.cluster_of(loh_breakend.variant)
    for event in cluster.loh_events:
        for hom_loss in event.hom_loss_events:
            if hom_loss_breakend in [hom_loss.start_breakend, hom_loss.end_breakend]:
                return True
    return False


def _has_cn_event_conflict(partition, first: StructuralVariant, second: StructuralVariant) -> bool:
    for breakend in first.breakends:
        for other in second.breakends:
            if breakends_in_loh_and_hom_loss_events(partition, breakend, other):
                return True
            if breakends_in_loh_and_hom_loss_events(partition, other, breakend):
                return True
    return False


def _find_overlapping_ddi(partition, cutoffs, skipped):
    clusters = [(c, long_ddi_variants(c, cutoffs)) for c in partition.clusters()]
    clusters = [(c, arms) for c, arms in clusters if arms]
    for i, (cluster, arms) in enumerate(clusters):
        for other_cluster, other_arms in clusters[i + 1:]:
            pairs = [
                (variant, other)
                for arm, variants in arms.items()
                for variant in variants
                for other in other_arms.get(arm, [])
            ]
            for variant, other in pairs:
                if not Interval.overlaps(variant.span, other.span):
                    continue
                if (variant.id, other.id) in skipped:
                    continue
                if _has_cn_event_conflict(partition, variant, other):
                    logger.info(
                        f'cluster({cluster.id}) {variant} and cluster({other_cluster.id}) {other} overlap but '
                        'have conflicting LOH and hom-loss breakends'
                    )
                    skipped.add((variant.id, other.id))
                    continue
                return cluster, other_cluster, variant, other
    return None


def merge_on_overlapping_inv_dup_dels(
    partition: ClusterPartition, cutoffs: LengthCutoffs
) -> Tuple[ClusterPartition, List[MergeRecord]]:
    """
    join clusters holding long deletions, duplications or inversions on the same arm whose spans overlap
    """
    records = []
    skipped = set()
    while True:
        found = _find_overlapping_ddi(partition, cutoffs, skipped)
        if found is None:
            break
        cluster, other_cluster, variant, other = found
        partition, record = partition.merge(cluster, other_cluster, CLUSTER_REASON.LONG_DEL_DUP_INV, (variant, other))
        records.append(record)
    return partition, records


def mark_single_pair_resolved_type(
    first: StructuralVariant,
    second: StructuralVariant,
    min_templated_insertion_length: int = 30,
    min_deletion_length: int = 32,
    cn_abs_tolerance: float = 0.5,
    cn_relative_tolerance: float = 0.15,
) -> str:
    """
    The simple event a pair of single breakends would make together. Facing breakends make a duplication
    (an insertion when closer than the templated insertion minimum) and breakends facing away make a deletion
    (an insertion when closer than the deletion minimum)

    Returns:
        str: the resolved type, RESOLVED_TYPE.NONE when the pair cannot be resolved
    """
    breakend1 = first.start
    breakend2 = second.start
    if breakend1.orient == breakend2.orient:
        return RESOLVED_TYPE.NONE
    if not copy_numbers_equal(
        breakend1.copy_number_change, breakend2.copy_number_change, cn_abs_tolerance, cn_relative_tolerance
    ):
        return RESOLVED_TYPE.NONE

    facing = (breakend1.position < breakend2.position and breakend1.orient == ORIENT.RIGHT) or (
        breakend2.position < breakend1.position and breakend2.orient == ORIENT.RIGHT
    )
    length = abs(breakend1.position - breakend2.position)
    if facing:
        min_length = min_ti_length(breakend1, breakend2, min_templated_insertion_length)
        return RESOLVED_TYPE.SGL_PAIR_DUP if length >= min_length else RESOLVED_TYPE.SGL_PAIR_INS
    return RESOLVED_TYPE.SGL_PAIR_DEL if length >= min_deletion_length else RESOLVED_TYPE.SGL_PAIR_INS


def _is_unresolved_solo_single(cluster: Cluster) -> bool:
    return cluster.is_solo_single and not cluster.resolved


def _skip_short_simple(breakend: Optional[Breakend], cutoffs: LengthCutoffs) -> Optional[Breakend]:
    if breakend is not None and breakend.variant.is_simple_type and not cutoffs.exceeds(breakend.variant):
        return None
    return breakend


def merge_on_unresolved_singles(
    partition: ClusterPartition, index: BreakendIndex, cutoffs: LengthCutoffs, **kwargs
) -> Tuple[ClusterPartition, List[MergeRecord]]:
    """
    Pair up clusters made of a single unresolved single breakend with their nearest neighbour, ignoring short
    simple variants, when that neighbour is also an unresolved solo single and the two resolve to a simple event
    """
    records = []
    for chrom, breakends in index:
        for i, breakend in enumerate(breakends):
            cluster = partition.cluster_of(breakend.variant)
            if not _is_unresolved_solo_single(cluster):
                continue

            prev_breakend = _skip_short_simple(breakends[i - 1] if i > 0 else None, cutoffs)
            next_breakend = _skip_short_simple(breakends[i + 1] if i < len(breakends) - 1 else None, cutoffs)
            prev_distance = abs(breakend.position - prev_breakend.position) if prev_breakend else -1
            next_distance = abs(breakend.position - next_breakend.position) if next_breakend else -1

            if next_breakend is not None and i < len(breakends) - 2:
                following = breakends[i + 2]
                if _is_unresolved_solo_single(partition.cluster_of(following.variant)):
                    if abs(next_breakend.position - following.position) < next_distance:
                        next_breakend = None

            if next_breakend is None and prev_breakend is None:
                continue
            elif next_breakend is not None and prev_breakend is not None:
                other_breakend = next_breakend if next_distance < prev_distance else prev_breakend
            else:
                other_breakend = next_breakend or prev_breakend

            other_cluster = partition.cluster_of(other_breakend.variant)
            if other_cluster.id == cluster.id or not _is_unresolved_solo_single(other_cluster):
                continue
            resolved_type = mark_single_pair_resolved_type(other_breakend.variant, breakend.variant, **kwargs)
            if resolved_type == RESOLVED_TYPE.NONE:
                continue
            logger.debug(
                f'cluster({cluster.id}) {breakend.variant} and cluster({other_cluster.id}) {other_breakend.variant} '
                f'resolve as {resolved_type}'
            )
            partition, record = partition.merge(
                other_cluster, cluster, CLUSTER_REASON.SOLO_SINGLE, (other_breakend.variant, breakend.variant)
            )
            merged = partition.cluster(record.kept)
            partition = partition.replace(merged.with_resolution(True, resolved_type))
            records.append(record)
    return partition, records


def merge_clusters(
    partition: ClusterPartition,
    index: BreakendIndex,
    cutoffs: LengthCutoffs,
    loh_events: Iterable[LohEvent] = (),
    max_merge_iterations: int = 5,
    **kwargs,
) -> Tuple[ClusterPartition, List[MergeRecord]]:
    """
    apply the evidence based merge rules until they stop merging clusters (or the iteration limit is reached)

    Args:
        partition: the proximity clusters
        index: the breakends taking part in clustering
        cutoffs: lengths above which deletions and duplications are long
        loh_events: LOH events (with nested hom-loss events) already associated with breakends
        max_merge_iterations: the limit on the number of passes of the merge rules
        kwargs: options for resolving pairs of single breakends
    """
    loh_events = list(loh_events)
    records = []
    for iteration in range(max_merge_iterations):
        found = []
        partition, merged = merge_on_loh_events(partition, loh_events)
        found.extend(merged)
        partition, merged = merge_on_overlapping_inv_dup_dels(partition, cutoffs)
        found.extend(merged)
        partition, merged = merge_on_unresolved_singles(partition, index, cutoffs, **kwargs)
        found.extend(merged)
        records.extend(found)
        logger.debug(f'merge iteration {iteration + 1} merged {len(found)} clusters')
        if not found:
            break
    else:
        logger.warning(f'cluster merging did not converge after {max_merge_iterations} iterations')
    return partition, records
