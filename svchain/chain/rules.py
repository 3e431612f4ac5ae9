"""
the priority rules choosing the next link of a cluster and the transition committing it
"""
from collections import namedtuple
from typing import List, Optional, Tuple

from ..constants import LINK_RULE
from ..error import ChainingError
from ..util import copy_numbers_equal, logger
from ..variant import Breakend
from .allocator import PloidyAllocator
from .chain import Chain
from .link import ChainLink, LinkArena, LinkedPair
from .possible import ComplexDup, PossibleLinks


class ProposedLinks(namedtuple('ProposedLinks', ['rule', 'pairs'])):
    """
    Attributes:
        rule (LINK_RULE): the rule proposing the links
        pairs (Tuple[LinkedPair, ...]): one pair, or the two pairs of a foldback or complex duplication
    """

    def __repr__(self):
        return f'ProposedLinks({self.rule} {", ".join([str(p.id) for p in self.pairs])})'


class ChainingState:
    """
    everything the rules look at while a cluster is chained: the links still possible, the ploidy left to
    allocate and the chains built so far
    """

    def __init__(
        self,
        possible: PossibleLinks,
        allocator: PloidyAllocator,
        complex_dups: List[ComplexDup] = (),
        foldbacks=(),
        ploidy_tolerance: float = 0.05,
    ):
        self.possible = possible
        self.allocator = allocator
        self.complex_dups = list(complex_dups)
        self.foldbacks = sorted([f for f in foldbacks if not f.is_single], key=lambda f: f.id)
        self.ploidy_tolerance = ploidy_tolerance
        self.chains: List[Chain] = []
        self.skipped = set()
        self._next_chain_id = 0

    @property
    def arena(self) -> LinkArena:
        return self.possible.arena

    def next_chain_id(self) -> int:
        chain_id = self._next_chain_id
        self._next_chain_id += 1
        return chain_id

    def chain_ends(self, breakend: Breakend) -> List[Tuple[Chain, bool]]:
        """
        the chains with the breakend as an open end, as (chain, True) when it is the end of the chain and
        (chain, False) when it is the start. Ordered by chain id
        """
        result = []
        for chain in sorted(self.chains, key=lambda c: c.id):
            if chain.open_end == breakend:
                result.append((chain, True))
            if chain.open_start == breakend:
                result.append((chain, False))
        return result

    def would_close(self, pair: LinkedPair) -> bool:
        """True if the pair joins the two open ends of a chain"""
        for chain in self.chains:
            ends = {chain.open_start, chain.open_end}
            if None not in ends and ends == {pair.lower, pair.upper}:
                return True
        return False

    def is_candidate(self, pair: LinkedPair) -> bool:
        if pair.id in self.skipped:
            return False
        if not self.allocator.is_allocatable(pair.lower) or not self.allocator.is_allocatable(pair.upper):
            return False
        return not self.would_close(pair)

    def candidates(self, breakend: Breakend) -> List[LinkedPair]:
        return [p for p in self.possible.candidates(breakend) if self.is_candidate(p)]

    def candidate_pairs(self) -> List[LinkedPair]:
        return [p for p in self.possible.pairs() if self.is_candidate(p)]

    def skip(self, proposal: ProposedLinks):
        self.skipped.update([p.id for p in proposal.pairs])


def _single_option(state: ChainingState) -> Optional[ProposedLinks]:
    for breakend in state.possible.breakends():
        if not state.allocator.is_allocatable(breakend):
            continue
        candidates = state.candidates(breakend)
        if len(candidates) == 1:
            return ProposedLinks(LINK_RULE.SINGLE_OPTION, (candidates[0],))
    return None


def _covers_foldback(state: ChainingState, breakend: Breakend, foldback_ploidy: float) -> bool:
    allocator = state.allocator
    if allocator.copies_remaining(breakend) < 2:
        return False
    remaining = allocator.remaining(breakend)
    return remaining + state.ploidy_tolerance >= 2 * foldback_ploidy or copy_numbers_equal(
        remaining, 2 * foldback_ploidy, allocator.cn_abs_tolerance, allocator.cn_relative_tolerance
    )


def _foldback(state: ChainingState) -> Optional[ProposedLinks]:
    allocator = state.allocator
    for foldback in state.foldbacks:
        if not all([allocator.is_allocatable(b) for b in foldback.breakends]):
            continue
        foldback_ploidy = min([allocator.copy_ploidy(b) for b in foldback.breakends])
        for breakend in state.possible.breakends():
            if breakend.variant == foldback or not allocator.is_allocatable(breakend):
                continue
            if not _covers_foldback(state, breakend, foldback_ploidy):
                continue
            pairs = [state.arena.get(breakend, b) for b in foldback.breakends]
            if all([p is not None and state.is_candidate(p) for p in pairs]):
                return ProposedLinks(LINK_RULE.FOLDBACK, tuple(pairs))
    return None


def _complex_dup(state: ChainingState) -> Optional[ProposedLinks]:
    allocator = state.allocator
    for complex_dup in state.complex_dups:
        first, second = complex_dup.pairs
        if not state.is_candidate(first) or not state.is_candidate(second):
            continue
        shared = set(first.breakends) & set(second.breakends)
        if any([allocator.copies_remaining(b) < 2 for b in shared]):
            continue
        return ProposedLinks(LINK_RULE.COMPLEX_DUP, (first, second))
    return None


def _foldback_pair(state: ChainingState) -> Optional[ProposedLinks]:
    pairs = [
        p
        for p in state.candidate_pairs()
        if p.lower.variant.foldback and p.upper.variant.foldback and p.lower.variant != p.upper.variant
    ]
    if not pairs:
        return None
    return ProposedLinks(LINK_RULE.FOLDBACK_PAIR, (min(pairs, key=lambda p: (p.length, p.id)),))


def _ploidy_match(state: ChainingState) -> Optional[ProposedLinks]:
    allocator = state.allocator
    pairs = [p for p in state.candidate_pairs() if allocator.ploidy_match(p.lower, p.upper)]
    if not pairs:
        return None
    best = min(pairs, key=lambda p: (-allocator.matched_ploidy(p), p.length, p.id))
    return ProposedLinks(LINK_RULE.PLOIDY_MATCH, (best,))


def _nearest(state: ChainingState) -> Optional[ProposedLinks]:
    pairs = state.candidate_pairs()
    if not pairs:
        return None
    return ProposedLinks(LINK_RULE.NEAREST, (min(pairs, key=lambda p: (p.length, p.id)),))


RULES = [_single_option, _foldback, _complex_dup, _foldback_pair, _ploidy_match, _nearest]


def select_next_link(state: ChainingState) -> Optional[ProposedLinks]:
    """
    Choose the next link(s) to commit. Does not change the state

    Rules are tried in order until one proposes links:

    1. a breakend with a single remaining candidate
    2. a breakend able to link both ends of a foldback, then complex duplications
    3. the shortest link between two foldbacks
    4. the link whose breakends have the same unlinked ploidy, highest ploidy first (shortest on ties)
    5. the shortest link

    Returns:
        ProposedLinks: the proposal, None when no link remains
    """
    for rule in RULES:
        proposal = rule(state)
        if proposal is not None:
            return proposal
    return None


def _add_link(state: ChainingState, pair: LinkedPair, ploidy: float, rule: str) -> ChainLink:
    lower, upper = pair.lower, pair.upper
    lower_ends = state.chain_ends(lower)
    upper_ends = state.chain_ends(upper)

    for lower_chain, lower_at_end in lower_ends:
        for upper_chain, upper_at_end in upper_ends:
            if lower_chain is upper_chain:
                continue
            link = state.arena.new_link(pair, lower, ploidy, rule)
            head = lower_chain if lower_at_end else lower_chain.reversed()
            tail = upper_chain.reversed() if upper_at_end else upper_chain
            joined = head.concatenated(link, tail)
            state.chains = [c for c in state.chains if c is not lower_chain and c is not upper_chain]
            state.chains.append(joined)
            logger.debug(f'{link} joined chains {lower_chain.id} and {upper_chain.id}')
            return link

    for breakend, ends in [(lower, lower_ends), (upper, upper_ends)]:
        if not ends:
            continue
        chain, at_end = ends[0]
        if at_end:
            link = state.arena.new_link(pair, breakend, ploidy, rule)
            chain.append(link)
        else:
            link = state.arena.new_link(pair, pair.other(breakend), ploidy, rule)
            chain.prepend(link)
        logger.debug(f'{link} extended chain {chain.id}')
        return link

    link = state.arena.new_link(pair, lower, ploidy, rule)
    chain = Chain(state.next_chain_id(), [link])
    state.chains.append(chain)
    logger.debug(f'{link} started chain {chain.id}')
    return link


def apply_proposal(state: ChainingState, proposal: ProposedLinks) -> ChainingState:
    """
    Commit the proposed links: allocate their ploidy and extend a chain, join two chains at the shared breakends
    or start a new chain for each. The state is updated in place and returned

    Raises:
        PloidyAllocationError: the ploidy of the links could not be allocated, nothing is committed
        ChainingError: a link would close a chain
    """
    for pair in proposal.pairs:
        if state.would_close(pair):
            raise ChainingError(f'{pair} would close a chain')
    ploidies = state.allocator.commit_all(list(proposal.pairs))
    for pair, ploidy in zip(proposal.pairs, ploidies):
        _add_link(state, pair, ploidy, proposal.rule)
    state.skipped.clear()
    return state
