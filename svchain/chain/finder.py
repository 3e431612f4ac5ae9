from typing import List

from ..cluster.cluster import Cluster
from ..constants import CHAIN_STATE, LINK_RULE, RESOLVED_TYPE, SVTYPE
from ..error import ChainingError, PloidyAllocationError
from ..util import logger, resolve_options
from .allocator import PloidyAllocator
from .chain import Chain
from .constants import DEFAULTS
from .link import LinkArena, LinkedPair
from .possible import PossibleLinks, assembled_partner_counts, find_assembled_links, find_complex_dups
from .rules import ChainingState, ProposedLinks, apply_proposal, select_next_link


class ChainFinder:
    """
    Builds the chains of a single cluster

    the finder moves through the states seeding, assembling and extending to end as closed (chaining completed)
    or invalid (chaining abandoned, no chains reported)
    """

    def __init__(self, cluster: Cluster, **kwargs):
        self.cluster = cluster
        self.options = resolve_options(DEFAULTS, kwargs)
        self.state = CHAIN_STATE.SEEDING
        self.chaining = None
        self.iterations = 0

    def _check_breakends(self):
        """
        each breakend must be held by exactly one variant of the cluster. Links are keyed by breakend, so a breakend
        shared by two variants or two variants with the same id would let the same link be committed twice
        """
        seen = set()
        for variant in self.cluster.variants:
            for breakend in variant.breakends:
                if breakend.variant is not variant:
                    raise ChainingError(f'breakend {breakend} of variant {variant.id} is held by another variant')
                if breakend.key in seen:
                    raise ChainingError(f'breakend {breakend} of variant {variant.id} is not unique in the cluster')
                seen.add(breakend.key)

    def _seed(self) -> ChainingState:
        options = self.options
        arena = LinkArena()
        possible = PossibleLinks(
            self.cluster.variants,
            arena,
            min_templated_insertion_length=options['min_templated_insertion_length'],
            min_chaining_ploidy=options['min_chaining_ploidy'],
        )
        assembled = find_assembled_links(possible)
        allocator = PloidyAllocator(
            possible.variants,
            min_chaining_ploidy=options['min_chaining_ploidy'],
            chaining_sv_limit=options['chaining_sv_limit'],
            cn_abs_tolerance=options['cn_abs_tolerance'],
            cn_relative_tolerance=options['cn_relative_tolerance'],
            assembled_counts=assembled_partner_counts(assembled),
        )
        complex_dups = find_complex_dups(
            possible,
            complex_dup_min_ratio=options['complex_dup_min_ratio'],
            complex_dup_max_ratio=options['complex_dup_max_ratio'],
        )
        return ChainingState(
            possible,
            allocator,
            complex_dups=complex_dups,
            foldbacks=self.cluster.foldbacks,
            ploidy_tolerance=options['ploidy_tolerance'],
        )

    def _assemble(self, assembled: List[LinkedPair]):
        partners = {}
        for pair in assembled:
            for breakend in pair.breakends:
                partners[breakend] = partners.get(breakend, 0) + 1
        confident = [p for p in assembled if partners[p.lower] == 1 and partners[p.upper] == 1]
        ambiguous = [p for p in assembled if p not in confident]
        for pair in confident + ambiguous:
            if not self.chaining.is_candidate(pair):
                continue
            try:
                apply_proposal(self.chaining, ProposedLinks(LINK_RULE.ASSEMBLY, (pair,)))
            except PloidyAllocationError as err:
                logger.debug(f'cluster {self.cluster.id} skipped assembled link {pair}: {err}')

    def _extend(self):
        max_iterations = self.options['max_iterations_without_link']
        without_link = 0
        while True:
            proposal = select_next_link(self.chaining)
            if proposal is None:
                return
            self.iterations += 1
            try:
                apply_proposal(self.chaining, proposal)
                without_link = 0
            except PloidyAllocationError as err:
                logger.debug(f'cluster {self.cluster.id} rejected {proposal}: {err}')
                self.chaining.skip(proposal)
                without_link += 1
                if without_link > max_iterations:
                    raise ChainingError(
                        f'no link committed in {without_link} consecutive iterations for cluster {self.cluster.id}'
                    )

    def _self_chain(self) -> List[Chain]:
        """a lone duplication is a loop leaving its end and re-entering at its start"""
        variant = self.cluster.variants[0]
        arena = LinkArena()
        pair = arena.pair(variant.start, variant.end)
        link = arena.new_link(pair, variant.end, variant.ploidy, LINK_RULE.CLOSING)
        return [Chain(0, [link], closed=True)]

    def _reconcile(self):
        """join chains where one ends entering a replicated variant and another starts by leaving the same copy"""
        chains = self.chaining.chains
        merged = True
        while merged:
            merged = False
            chains.sort(key=lambda c: c.id)
            for first in chains:
                for second in chains:
                    if first is second or first.open_end is None or not second.links:
                        continue
                    if first.open_end == second.links[0].first:
                        joined = first.joined(second)
                        chains.remove(first)
                        chains.remove(second)
                        chains.append(joined)
                        logger.debug(f'reconciled chains {first.id} and {second.id} of cluster {self.cluster.id}')
                        merged = True
                        break
                if merged:
                    break

    def _close(self):
        """
        close the chain holding every variant of the cluster when its open ends are the two ends of one variant
        (the chain already loops) or form a legal pair
        """
        variants = set(self.chaining.possible.variants)
        for chain in self.chaining.chains:
            if chain.closed or chain.variants() != variants:
                continue
            if chain.loops():
                chain.close()
                logger.debug(f'chain {chain.id} of cluster {self.cluster.id} loops back to its start')
                continue
            start, end = chain.open_start, chain.open_end
            if start is None or end is None or start == end:
                continue
            pair = self.chaining.arena.get(start, end)
            if pair is None:
                continue
            try:
                ploidy = self.chaining.allocator.commit(pair)
            except PloidyAllocationError as err:
                logger.debug(f'chain {chain.id} of cluster {self.cluster.id} not closed: {err}')
                continue
            link = self.chaining.arena.new_link(pair, end, ploidy, LINK_RULE.CLOSING)
            chain.close(link)
            logger.debug(f'closed chain {chain.id} of cluster {self.cluster.id}')

    def _dedupe(self):
        """collapse structurally identical chains into the first of them, accumulating their ploidy"""
        kept = {}
        result = []
        for chain in sorted(self.chaining.chains, key=lambda c: c.id):
            key = chain.structural_key()
            if key in kept:
                original = kept[key]
                original.ploidy = original.ploidy + chain.ploidy
                original.replicates += chain.replicates
                continue
            kept[key] = chain
            result.append(chain)
        for new_id, chain in enumerate(result):
            chain.id = new_id
        self.chaining.chains = result

    def run(self) -> List[Chain]:
        """
        Returns:
            List[Chain]: the chains of the cluster, empty when chaining was abandoned or not attempted
        """
        cluster = self.cluster
        if len(cluster) == 1:
            variant = cluster.variants[0]
            if variant.type == SVTYPE.DUP and cluster.resolved_type in {RESOLVED_TYPE.NONE, RESOLVED_TYPE.DUP}:
                self.state = CHAIN_STATE.CLOSED
                return self._self_chain()
            self.state = None
            return []
        if cluster.resolved:
            self.state = None
            return []

        try:
            self._check_breakends()
            self.chaining = self._seed()
            self.state = CHAIN_STATE.ASSEMBLING
            self._assemble(find_assembled_links(self.chaining.possible))
            self.state = CHAIN_STATE.EXTENDING
            self._extend()
        except ChainingError as err:
            logger.warning(f'abandoned chaining cluster {cluster.id}: {err}')
            self.state = CHAIN_STATE.INVALID
            return []
        self._reconcile()
        self._close()
        self._dedupe()
        self.state = CHAIN_STATE.CLOSED
        logger.debug(
            f'cluster {cluster.id} formed {len(self.chaining.chains)} chains in {self.iterations} iterations'
        )
        return list(self.chaining.chains)


def chain_cluster(cluster: Cluster, **kwargs) -> Cluster:
    """
    Chain the variants of a cluster. The chains, chaining state and ploidy range are set on the cluster

    Args:
        cluster: the cluster to chain
        kwargs: overrides of :data:`svchain.chain.constants.DEFAULTS`
    """
    finder = ChainFinder(cluster, **kwargs)
    cluster.chains = finder.run()
    cluster.chain_state = finder.state
    if finder.chaining is not None:
        cluster.ploidy_range = finder.chaining.allocator.ploidy_range
    return cluster
