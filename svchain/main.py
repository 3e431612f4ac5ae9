"""
runs clustering and chaining for all the variants of a sample
"""
from collections import namedtuple
from concurrent import futures
from typing import Dict, Iterable, List, Tuple

from .chain.constants import DEFAULTS as CHAIN_DEFAULTS
from .chain.finder import chain_cluster
from .checker import check_chains, check_partition, check_ploidy_conservation
from .cluster.cluster import Cluster
from .cluster.constants import DEFAULTS as CLUSTER_DEFAULTS
from .cluster.main import cluster_variants
from .cnv import HomLossEvent, LohEvent
from .constants import CHAIN_STATE, RESOLVED_TYPE
from .double_minute import is_double_minute_candidate
from .util import logger, resolve_options
from .variant import StructuralVariant

SampleResult = namedtuple('SampleResult', ['clusters', 'merges', 'cutoffs'])
"""
Attributes:
    clusters (List[Cluster]): all clusters of the sample ordered by id, with their chains
    merges (List[MergeRecord]): the evidence based merges in the order applied
    cutoffs (LengthCutoffs): the long deletion/duplication lengths calibrated for the sample
"""


def split_options(kwargs: Dict) -> Tuple[Dict, Dict]:
    """
    route keyword overrides to the clustering and chaining options. Options known to both are given to both

    Raises:
        TypeError: an option is not known to either
    """
    cluster_options, chain_options = {}, {}
    for key, value in kwargs.items():
        if key not in CLUSTER_DEFAULTS and key not in CHAIN_DEFAULTS:
            raise TypeError(
                f'unexpected option ({key}), expected one of '
                f'{sorted(set(CLUSTER_DEFAULTS.keys()) | set(CHAIN_DEFAULTS.keys()))}'
            )
        if key in CLUSTER_DEFAULTS:
            cluster_options[key] = value
        if key in CHAIN_DEFAULTS:
            chain_options[key] = value
    return cluster_options, chain_options


def chain_clusters(clusters: List[Cluster], workers: int = 1, **kwargs) -> List[Cluster]:
    """
    chain each cluster, in a pool of threads when more than one worker is requested. Clusters are returned in
    the order given
    """
    if workers > 1:
        with futures.ThreadPoolExecutor(max_workers=workers) as executor:
            jobs = [executor.submit(chain_cluster, cluster, **kwargs) for cluster in clusters]
            return [job.result() for job in jobs]
    return [chain_cluster(cluster, **kwargs) for cluster in clusters]


def tag_resolved_type(cluster: Cluster, dm_ploidy_threshold: float = 8.0, dm_adjacent_ploidy_ratio: float = 2.3):
    """
    set the final resolved type of a cluster which was not resolved while clustering
    """
    if is_double_minute_candidate(cluster, dm_ploidy_threshold, dm_adjacent_ploidy_ratio):
        cluster.resolved = False
        cluster.resolved_type = RESOLVED_TYPE.DOUBLE_MINUTE
    elif cluster.resolved:
        return
    elif len(cluster) == 1:
        cluster.resolved_type = RESOLVED_TYPE.enforce(cluster.variants[0].type)
    else:
        cluster.resolved_type = RESOLVED_TYPE.COMPLEX


def analyse_sample(
    variants: Iterable[StructuralVariant],
    loh_events: Iterable[LohEvent] = (),
    hom_loss_events: Iterable[HomLossEvent] = (),
    workers: int = 1,
    **kwargs,
) -> SampleResult:
    """
    Cluster and chain the variants of a sample

    Args:
        variants: all variants of the sample
        loh_events: LOH events, each holding the hom-loss events nested within it
        hom_loss_events: hom-loss events not nested in an LOH event
        workers: the number of clusters chained at the same time
        kwargs: overrides of the clustering and chaining defaults

    Raises:
        TypeError: an unknown option was given
        ClusterMembershipError: a variant is not in exactly one cluster
        ChainStructureError: the chains of a cluster share links, are not contiguous or over-use a breakend
    """
    cluster_options, chain_options = split_options(kwargs)
    chain_options = resolve_options(CHAIN_DEFAULTS, chain_options)
    variants = list(variants)

    clustering = cluster_variants(variants, loh_events=loh_events, hom_loss_events=hom_loss_events, **cluster_options)
    clusters = chain_clusters(clustering.partition.clusters(), workers=workers, **chain_options)
    invalid = [c.id for c in clusters if c.chain_state == CHAIN_STATE.INVALID]
    if invalid:
        logger.warning(f'chaining was abandoned for {len(invalid)} clusters: {invalid}')

    for cluster in clusters:
        tag_resolved_type(
            cluster,
            dm_ploidy_threshold=chain_options['dm_ploidy_threshold'],
            dm_adjacent_ploidy_ratio=chain_options['dm_adjacent_ploidy_ratio'],
        )
        for variant in cluster.variants:
            variant.cluster_id = cluster.id
            variant.cluster_reasons = list(clustering.partition.reasons(variant))

    check_partition(variants, clusters)
    for cluster in clusters:
        check_chains(cluster)
        check_ploidy_conservation(cluster, chain_options['ploidy_tolerance'])
    logger.info(
        f'{len(variants)} variants in {len(clusters)} clusters with '
        f'{sum([len(c.chains) for c in clusters])} chains'
    )
    return SampleResult(clusters, clustering.merges, clustering.cutoffs)
