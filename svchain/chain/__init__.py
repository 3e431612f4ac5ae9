"""
Sub-package Documentation
==========================

The chain sub-package is responsible for ordering the variants of a cluster into chains: paths through the
rearranged genome where consecutive variants are joined by templated insertions.

Algorithm Overview
--------------------

- Enumerate the possible links of the cluster

    - a breakend with orientation -1 may link to a breakend with orientation +1 further along the chromosome
    - the two must be at least the minimum templated insertion length apart
    - every possible link is kept in an arena and addressed by its id

- Calculate the ploidy range of the cluster. Variants of higher ploidy are replicated into several logical
  copies each needing its own links
- Commit the links supported by assembly
- Repeatedly select and commit the next link by the first rule that applies

    1. a breakend with a single candidate link
    2. a breakend covering both ends of a foldback, or a complex duplication
    3. two foldbacks
    4. the highest matching ploidy
    5. the shortest link

- Reconcile chains broken at a replicated variant, close a chain holding the whole cluster and collapse
  identical chains

A cluster whose chaining stops making progress is marked invalid and reports no chains.
"""
from .chain import Chain
from .finder import ChainFinder, chain_cluster
from .link import ChainLink, LinkArena, LinkedPair
