"""
Sub-package Documentation
==========================

The cluster sub-package is responsible for partitioning the variants of a sample into clusters of
variants believed to come from the same mutational event.

Algorithm Overview
--------------------

- Index the breakends of every variant by chromosome and position
- Exclude duplicate calls and poorly supported translocations/inversions (each is resolved in its own cluster)
- Cluster by proximity

    - Scan the breakends of each chromosome left to right
    - Join consecutive breakends no further apart than the proximity distance
    - Clusters are the connected components of the variants joined

- Calibrate the long deletion/duplication length for the sample
- Merge clusters on evidence until no more merges are found

    - LOH events bounded by breakends of different clusters
    - hom-loss events nested in LOH events
    - overlapping long deletions, duplications and inversions
    - pairs of solo single breakends which resolve to a simple event

Every merge is recorded (:class:`~svchain.cluster.partition.MergeRecord`) and the reason tags of each cluster
are the union of the rules which fired for it.
"""
from .cluster import Cluster
from .main import cluster_variants
from .partition import ClusterPartition, MergeRecord
