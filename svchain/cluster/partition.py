"""
the ownership table assigning every variant to exactly one cluster
"""
from collections import namedtuple
from typing import Dict, Iterable, List, Optional, Tuple

from ..error import ClusterMembershipError
from ..util import logger
from .cluster import Cluster


class MergeRecord(namedtuple('MergeRecord', ['reason', 'kept', 'removed', 'variants'])):
    """
    audit entry for a single merge

    Attributes:
        reason (str): the reason tag of the rule that merged the clusters
        kept (int): id of the cluster after the merge
        removed (int): id of the cluster which was absorbed
        variants (Tuple[int, int]): ids of the variants whose evidence triggered the merge
    """

    def __str__(self):
        return f'{self.reason}: cluster({self.removed}) -> cluster({self.kept}) on variants {self.variants}'


class ClusterPartition:
    """
    Maps each variant id to the id of the cluster which owns it. Partitions are not modified in place, the
    methods which change cluster membership return a new partition
    """

    def __init__(self, clusters: Iterable[Cluster], variant_reasons: Optional[Dict[int, Tuple[str, ...]]] = None):
        """
        Raises:
            ClusterMembershipError: a variant is assigned to more than one cluster
        """
        self._clusters = {}
        self._owner = {}
        for cluster in clusters:
            if cluster.id in self._clusters:
                raise ClusterMembershipError(f'duplicate cluster id ({cluster.id})')
            self._clusters[cluster.id] = cluster
            for variant in cluster.variants:
                if variant.id in self._owner:
                    raise ClusterMembershipError(
                        f'variant ({variant.id}) is in both cluster({self._owner[variant.id]}) '
                        f'and cluster({cluster.id})'
                    )
                self._owner[variant.id] = cluster.id
        self.variant_reasons = dict(variant_reasons or {})

    def __len__(self):
        return len(self._clusters)

    def __iter__(self):
        return iter(self.clusters())

    def clusters(self) -> List[Cluster]:
        return [self._clusters[k] for k in sorted(self._clusters)]

    def cluster(self, cluster_id: int) -> Cluster:
        return self._clusters[cluster_id]

    def cluster_of(self, variant) -> Cluster:
        return self._clusters[self._owner[variant.id]]

    def same_cluster(self, first, second) -> bool:
        return self._owner[first.id] == self._owner[second.id]

    def reasons(self, variant) -> Tuple[str, ...]:
        return self.variant_reasons.get(variant.id, ())

    def _with(self, clusters: Iterable[Cluster], variant_reasons: Dict) -> 'ClusterPartition':
        result = ClusterPartition.__new__(ClusterPartition)
        result._clusters = {}
        result._owner = dict(self._owner)
        for cluster in clusters:
            result._clusters[cluster.id] = cluster
            for variant in cluster.variants:
                result._owner[variant.id] = cluster.id
        result.variant_reasons = variant_reasons
        return result

    def replace(self, cluster: Cluster) -> 'ClusterPartition':
        """
        swap in a new version of an existing cluster (same id and members)
        """
        current = self._clusters[cluster.id]
        if {v.id for v in current.variants} != {v.id for v in cluster.variants}:
            raise ClusterMembershipError(f'cannot replace cluster({cluster.id}) with a different set of variants')
        clusters = [c for c in self._clusters.values() if c.id != cluster.id] + [cluster]
        return self._with(clusters, self.variant_reasons)

    def merge(
        self, first: Cluster, second: Cluster, reason: str, variants=()
    ) -> Tuple['ClusterPartition', MergeRecord]:
        """
        merge two clusters of this partition

        Args:
            first: the cluster merging in the other
            second: the cluster being merged in
            reason: the reason tag recorded on the merged cluster
            variants: the pair of variants (if any) whose evidence triggered the merge

        Returns:
            tuple: the new partition and the audit record of the merge

        Raises:
            ClusterMembershipError: the clusters are the same or are not part of this partition
        """
        if first.id == second.id:
            raise ClusterMembershipError(f'cannot merge cluster({first.id}) with itself')
        if self._clusters.get(first.id) is not first or self._clusters.get(second.id) is not second:
            raise ClusterMembershipError('cannot merge clusters which are not part of the current partition')
        merged = first.merged(second, reason)
        removed = second.id if merged.id == first.id else first.id
        clusters = [c for c in self._clusters.values() if c.id not in {first.id, second.id}] + [merged]
        variant_reasons = self.variant_reasons
        if variants:
            variant_reasons = dict(variant_reasons)
            for variant, other in [variants, tuple(reversed(variants))]:
                variant_reasons[variant.id] = variant_reasons.get(variant.id, ()) + (f'{reason}_{other.id}',)
        record = MergeRecord(reason, merged.id, removed, tuple([v.id for v in variants]))
        logger.debug(
            f'cluster({first.id} svs={len(first)}) merges in cluster({second.id} svs={len(second)}) on {reason}'
        )
        return self._with(clusters, variant_reasons), record
