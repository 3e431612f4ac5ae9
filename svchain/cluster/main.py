from collections import namedtuple
from typing import Iterable, List

from ..cnv import HomLossEvent, LohEvent
from ..util import logger, resolve_options
from ..variant import StructuralVariant
from .constants import DEFAULTS
from .lengths import calculate_length_cutoffs
from .merge import associate_breakend_cn_events, attach_loh_events, merge_clusters
from .proximity import initial_partition

ClusteringResult = namedtuple('ClusteringResult', ['partition', 'index', 'cutoffs', 'merges'])
"""
Attributes:
    partition (ClusterPartition): the final clusters
    index (BreakendIndex): the breakends which took part in clustering (excluded variants removed)
    cutoffs (LengthCutoffs): the long deletion/duplication lengths calibrated for the sample
    merges (List[MergeRecord]): audit trail of the evidence based merges, in the order applied
"""


def cluster_variants(
    variants: List[StructuralVariant],
    loh_events: Iterable[LohEvent] = (),
    hom_loss_events: Iterable[HomLossEvent] = (),
    **kwargs,
) -> ClusteringResult:
    """
    Partition the variants of a sample into clusters

    - exclude duplicate and poorly supported calls
    - cluster the remaining breakends on proximity
    - merge clusters on LOH, hom-loss, long DEL/DUP/INV overlap and solo single breakend evidence

    Args:
        variants: all variants of the sample
        loh_events: LOH events, each holding the hom-loss events nested within it
        hom_loss_events: hom-loss events not nested in an LOH event
        kwargs: overrides of :data:`svchain.cluster.constants.DEFAULTS`
    """
    options = resolve_options(DEFAULTS, kwargs)
    variants = list(variants)
    loh_events = list(loh_events)

    partition, index = initial_partition(
        variants,
        proximity_distance=options['proximity_distance'],
        duplicate_breakend_distance=options['duplicate_breakend_distance'],
        sgl_duplicate_distance=options['sgl_duplicate_distance'],
        isolated_bnd_distance=options['isolated_bnd_distance'],
        short_inv_distance=options['short_inv_distance'],
        low_support_cn_change=options['low_support_cn_change'],
    )
    logger.info(f'{len(variants)} variants formed {len(partition)} clusters on proximity')

    cutoffs = calculate_length_cutoffs(
        index.variants(),
        min_del_dup_cutoff=options['min_del_dup_cutoff'],
        max_del_dup_cutoff=options['max_del_dup_cutoff'],
        del_dup_trim_count=options['del_dup_trim_count'],
        max_arm_count=options['max_arm_count'],
    )
    logger.debug(f'long deletion cutoff {cutoffs.deletion}, long duplication cutoff {cutoffs.duplication}')

    associate_breakend_cn_events(index, loh_events, hom_loss_events)
    partition = attach_loh_events(partition, loh_events)
    partition, merges = merge_clusters(
        partition,
        index,
        cutoffs,
        loh_events=loh_events,
        max_merge_iterations=options['max_merge_iterations'],
        min_templated_insertion_length=options['min_templated_insertion_length'],
        min_deletion_length=options['min_deletion_length'],
        cn_abs_tolerance=options['cn_abs_tolerance'],
        cn_relative_tolerance=options['cn_relative_tolerance'],
    )
    logger.info(f'{len(merges)} evidence based merges left {len(partition)} clusters')
    return ClusteringResult(partition, index, cutoffs, merges)
