"""
minimal test for a double minute: a lone high ploidy duplication forming a closed loop, amplified well above
the genome on either side of it
"""
from .cluster.cluster import Cluster
from .constants import SVTYPE
from .variant import StructuralVariant


def adjacent_ploidy_ratio(variant: StructuralVariant) -> float:
    """
    ratio of the ploidy of the variant to the highest major allele ploidy immediately outside its breakends

    Returns:
        float: the ratio, zero when the ploidy outside the breakends is unknown
    """
    outer = [b.outer_major_ploidy for b in variant.breakends if b.outer_major_ploidy is not None]
    if not outer:
        return 0.0
    highest = max(outer)
    if highest <= 0:
        return float('inf')
    return variant.ploidy / highest


def is_double_minute_candidate(
    cluster: Cluster, dm_ploidy_threshold: float = 8.0, dm_adjacent_ploidy_ratio: float = 2.3
) -> bool:
    """
    Example:
        >>> dup = StructuralVariant(1, SVTYPE.DUP, start, end, ploidy=10)  # major allele ploidy 2 on either side
        >>> is_double_minute_candidate(Cluster(0, [dup]))
        True
    """
    if len(cluster) != 1:
        return False
    variant = cluster.variants[0]
    if variant.type != SVTYPE.DUP or variant.ploidy < dm_ploidy_threshold:
        return False
    if cluster.chains and not any([c.closed for c in cluster.chains]):
        return False
    return adjacent_ploidy_ratio(variant) >= dm_adjacent_ploidy_ratio
