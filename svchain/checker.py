"""
module responsible for checking the clusters and chains of a sample. Any failure here means the results of the
whole sample cannot be trusted
"""
from typing import Dict, Iterable

from .cluster.cluster import Cluster
from .error import ChainStructureError, ClusterMembershipError
from .variant import Breakend, StructuralVariant


def check_partition(variants: Iterable[StructuralVariant], clusters: Iterable[Cluster]):
    """
    check that every variant belongs to exactly one cluster and that its cluster id agrees

    Raises:
        ClusterMembershipError: a variant is missing, duplicated, unknown or has the wrong cluster id
    """
    expected = {v.id for v in variants}
    seen = {}
    for cluster in clusters:
        for variant in cluster.variants:
            if variant.id in seen:
                raise ClusterMembershipError(
                    f'variant ({variant.id}) is in both cluster({seen[variant.id]}) and cluster({cluster.id})'
                )
            if variant.id not in expected:
                raise ClusterMembershipError(f'cluster({cluster.id}) holds an unknown variant ({variant.id})')
            if variant.cluster_id is not None and variant.cluster_id != cluster.id:
                raise ClusterMembershipError(
                    f'variant ({variant.id}) reports cluster({variant.cluster_id}) but is in cluster({cluster.id})'
                )
            seen[variant.id] = cluster.id
    missing = expected - set(seen)
    if missing:
        raise ClusterMembershipError(f'variants not assigned to any cluster: {sorted(missing)}')


def check_chains(cluster: Cluster):
    """
    Raises:
        ChainStructureError: two chains share a link instance or a chain is not contiguous
    """
    owner = {}
    for chain in cluster.chains:
        for link_id in chain.link_ids():
            if link_id in owner:
                raise ChainStructureError(
                    f'link {link_id} of cluster({cluster.id}) is used by chain {owner[link_id]} and chain {chain.id}'
                )
            owner[link_id] = chain.id
        if not chain.is_contiguous():
            raise ChainStructureError(f'chain {chain.id} of cluster({cluster.id}) is not contiguous')


def consumed_ploidy(cluster: Cluster) -> Dict[Breakend, float]:
    """the ploidy linked at each breakend over all the chains of the cluster"""
    consumed = {}
    for chain in cluster.chains:
        for link in chain.links:
            for breakend in (link.first, link.second):
                consumed[breakend] = consumed.get(breakend, 0.0) + link.ploidy * chain.replicates
    return consumed


def check_ploidy_conservation(cluster: Cluster, tolerance: float = 0.05):
    """
    Raises:
        ChainStructureError: the ploidy linked at a breakend exceeds the ploidy of its variant
    """
    for breakend, consumed in consumed_ploidy(cluster).items():
        if consumed > breakend.ploidy + tolerance:
            raise ChainStructureError(
                f'{consumed:.2f} ploidy linked at {breakend} of cluster({cluster.id}) exceeds its ploidy '
                f'{breakend.ploidy:.2f}'
            )
