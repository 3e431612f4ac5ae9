"""
exclusion of duplicate and poorly supported calls, followed by clustering on breakend proximity
"""
from typing import Dict, List, Tuple

import networkx as nx

from ..constants import CLUSTER_REASON, RESOLVED_TYPE, SVTYPE
from ..index import BreakendIndex
from ..util import logger
from ..variant import StructuralVariant
from .cluster import Cluster
from .partition import ClusterPartition

EXCLUSION_REASON = {
    RESOLVED_TYPE.DUP_BE: CLUSTER_REASON.DUP_BE,
    RESOLVED_TYPE.LOW_VAF: CLUSTER_REASON.LOW_VAF,
}


def _low_support(variant: StructuralVariant, threshold: float) -> bool:
    breakends = variant.breakends
    if not all([b.has_copy_number for b in breakends]):
        return False
    return all([b.copy_number_change < threshold for b in breakends])


def _is_isolated(index: BreakendIndex, variant: StructuralVariant, distance: int) -> bool:
    for breakend in variant.breakends:
        for neighbour in index.neighbours(breakend):
            if neighbour is not None and abs(neighbour.position - breakend.position) <= distance:
                return False
    return True


def find_excluded_variants(
    index: BreakendIndex,
    duplicate_breakend_distance: int = 35,
    sgl_duplicate_distance: int = 1,
    isolated_bnd_distance: int = 5000,
    short_inv_distance: int = 100,
    low_support_cn_change: float = 0.2,
) -> Dict[StructuralVariant, str]:
    """
    Scan the ordered breakends of each chromosome for variants which should not take part in clustering.
    Nothing is removed until every chromosome has been scanned

    Returns:
        dict: the excluded variants mapped to the resolved type (DUP_BE or LOW_VAF) they are given
    """
    excluded = {}

    def exclude(variant, resolved_type):
        if variant not in excluded:
            excluded[variant] = resolved_type

    for chrom, breakends in index:
        for i, breakend in enumerate(breakends):
            variant = breakend.variant
            if variant in excluded:
                continue

            if variant.type == SVTYPE.BND and _low_support(variant, low_support_cn_change) \
                    and _is_isolated(index, variant, isolated_bnd_distance):
                logger.debug(f'{variant} excluded as an isolated low support translocation')
                exclude(variant, RESOLVED_TYPE.LOW_VAF)
                continue

            if i >= len(breakends) - 1:
                break
            next_breakend = breakends[i + 1]

            if variant.type == SVTYPE.INV and next_breakend.variant == variant \
                    and variant.length < short_inv_distance and _low_support(variant, low_support_cn_change):
                logger.debug(f'{variant} excluded as a short low support inversion')
                exclude(variant, RESOLVED_TYPE.LOW_VAF)
                continue

            next_variant = next_breakend.variant
            if next_variant == variant or next_variant in excluded:
                continue
            distance = next_breakend.position - breakend.position
            if distance > duplicate_breakend_distance or breakend.orient != next_breakend.orient:
                continue

            if variant.type == SVTYPE.SGL or next_variant.type == SVTYPE.SGL:
                if distance <= sgl_duplicate_distance:
                    for candidate in [variant, next_variant]:
                        if candidate.type == SVTYPE.SGL:
                            logger.debug(f'{candidate} excluded as a duplicate single breakend')
                            exclude(candidate, RESOLVED_TYPE.DUP_BE)
            elif variant.type == next_variant.type:
                other = breakend.other
                next_other = next_breakend.other
                if other.chr != next_other.chr or other.orient != next_other.orient:
                    continue
                if abs(other.position - next_other.position) > duplicate_breakend_distance:
                    continue
                # keep the call supported by assembly where only one of them is
                if not variant.has_assembly_links and next_variant.has_assembly_links:
                    duplicate = variant
                else:
                    duplicate = next_variant
                kept = variant if duplicate is next_variant else next_variant
                logger.debug(f'{duplicate} excluded as a duplicate of {kept}')
                exclude(duplicate, RESOLVED_TYPE.DUP_BE)
    return excluded


def cluster_excluded_variants(excluded: Dict[StructuralVariant, str], start_id: int = 0) -> List[Cluster]:
    """
    each excluded variant is given its own resolved cluster
    """
    clusters = []
    for i, variant in enumerate(sorted(excluded, key=lambda v: v.id)):
        resolved_type = excluded[variant]
        clusters.append(
            Cluster(
                start_id + i, [variant], reasons=[EXCLUSION_REASON[resolved_type]],
                resolved=True, resolved_type=resolved_type,
            )
        )
    return clusters


def cluster_by_proximity(
    index: BreakendIndex, proximity_distance: int = 5000, start_id: int = 0
) -> Tuple[List[Cluster], Dict[int, Tuple[str, ...]]]:
    """
    Single left to right pass over each chromosome joining consecutive breakends no further apart than the
    proximity distance. The variants are the nodes of a graph and the two breakends of a variant are always in
    the same cluster, so the clusters are the connected components of the graph

    Returns:
        tuple: the clusters, numbered in the order they are first reached by the scan, and the proximity
        reason recorded per variant id
    """
    graph = nx.Graph()
    first_seen = {}
    variant_reasons = {}
    for chrom, breakends in index:
        for i, breakend in enumerate(breakends):
            variant = breakend.variant
            graph.add_node(variant.id)
            first_seen.setdefault(variant.id, len(first_seen))
            if i == 0:
                continue
            prev_breakend = breakends[i - 1]
            prev_variant = prev_breakend.variant
            if prev_variant == variant or breakend.position - prev_breakend.position > proximity_distance:
                continue
            graph.add_edge(prev_variant.id, variant.id)
            for current, other in [(variant, prev_variant), (prev_variant, variant)]:
                if current.id not in variant_reasons:
                    variant_reasons[current.id] = (f'{CLUSTER_REASON.PROXIMITY}_{other.id}',)

    variants = {v.id: v for v in index.variants()}
    components = sorted(nx.connected_components(graph), key=lambda c: min([first_seen[n] for n in c]))
    clusters = []
    for i, component in enumerate(components):
        members = [variants[n] for n in component]
        if len(members) > 1:
            clusters.append(Cluster(start_id + i, members, reasons=[CLUSTER_REASON.PROXIMITY]))
        elif members[0].is_simple_type:
            clusters.append(Cluster(start_id + i, members, resolved=True, resolved_type=members[0].type))
        else:
            clusters.append(Cluster(start_id + i, members))
    return clusters, variant_reasons


def initial_partition(variants: List[StructuralVariant], **kwargs) -> Tuple[ClusterPartition, BreakendIndex]:
    """
    Run the exclusion and proximity passes

    Returns:
        tuple: the partition of all variants and the index of the breakends left for the evidence based merges
    """
    proximity_distance = kwargs.pop('proximity_distance', 5000)
    index = BreakendIndex(variants)
    excluded = find_excluded_variants(index, **kwargs)
    if excluded:
        logger.info(f'excluded {len(excluded)} variants from clustering')
    filtered = index.exclude(excluded.keys())
    clusters, variant_reasons = cluster_by_proximity(filtered, proximity_distance=proximity_distance)
    clusters.extend(cluster_excluded_variants(excluded, start_id=len(clusters)))
    for variant, resolved_type in excluded.items():
        variant_reasons[variant.id] = (EXCLUSION_REASON[resolved_type],)
    return ClusterPartition(clusters, variant_reasons), filtered
