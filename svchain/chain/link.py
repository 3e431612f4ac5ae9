"""
linked pairs (candidate templated insertions between two breakends) and the arena giving each a stable id
"""
from collections import namedtuple
from typing import Dict, List, Optional, Tuple

from ..variant import Breakend


class LinkedPair:
    """
    a templated insertion joining the lower breakend (orientation -1) to the upper breakend (orientation +1)

    pairs are created by a :class:`LinkArena` and compared by id
    """

    def __init__(self, id: int, lower: Breakend, upper: Breakend, assembled: bool = False):
        if lower.chr != upper.chr or lower.position > upper.position:
            raise AttributeError(
                'the lower breakend must precede the upper breakend on the same chromosome', lower, upper
            )
        self.id = id
        self.lower = lower
        self.upper = upper
        self.assembled = assembled
        self.repeat_count = 0

    @property
    def length(self) -> int:
        return self.upper.position - self.lower.position

    @property
    def breakends(self) -> Tuple[Breakend, Breakend]:
        return (self.lower, self.upper)

    @property
    def key(self):
        return (self.lower.key, self.upper.key)

    def other(self, breakend: Breakend) -> Breakend:
        if breakend == self.lower:
            return self.upper
        elif breakend == self.upper:
            return self.lower
        raise KeyError('breakend is not part of this pair', breakend, self)

    def __eq__(self, other):
        return isinstance(other, LinkedPair) and self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        assembled = ' asm' if self.assembled else ''
        return (
            f'LinkedPair({self.id} {self.lower.chr}:{self.lower.position} sv={self.lower.variant.id} -> '
            f'{self.upper.position} sv={self.upper.variant.id} len={self.length}{assembled})'
        )


class ChainLink(namedtuple('ChainLink', ['id', 'pair', 'first', 'second', 'ploidy', 'rule'])):
    """
    A committed use of a linked pair. The chain is traversed leaving the variant of the first breakend at the first
    breakend, then entering the variant of the second breakend at the second breakend

    Attributes:
        id (int): the id of this link instance, unique within the arena
        pair (LinkedPair): the pair the link realizes
        first (Breakend): the breakend the traversal leaves from
        second (Breakend): the breakend the traversal enters
        ploidy (float): the ploidy allocated to the link
        rule (LINK_RULE): the rule which proposed the link
    """

    def reversed(self) -> 'ChainLink':
        return self._replace(first=self.second, second=self.first)

    @property
    def key(self):
        return (self.first.key, self.second.key)

    def __repr__(self):
        return (
            f'ChainLink({self.id} sv={self.first.variant.id} -> sv={self.second.variant.id} '
            f'ploidy={self.ploidy:.2f})'
        )


class LinkArena:
    """
    holds every linked pair of a cluster and every committed link, each addressed by an integer id
    """

    def __init__(self):
        self._pairs: List[LinkedPair] = []
        self._by_breakends: Dict[Tuple, LinkedPair] = {}
        self._links: List[ChainLink] = []

    def pair(self, lower: Breakend, upper: Breakend, assembled: bool = False) -> LinkedPair:
        """get the pair joining two breakends, creating it if it does not exist yet"""
        key = (lower.key, upper.key)
        existing = self._by_breakends.get(key)
        if existing is not None:
            if assembled:
                existing.assembled = True
            return existing
        pair = LinkedPair(len(self._pairs), lower, upper, assembled=assembled)
        self._pairs.append(pair)
        self._by_breakends[key] = pair
        return pair

    def get(self, first: Breakend, second: Breakend) -> Optional[LinkedPair]:
        """find the pair joining two breakends given in either order"""
        return self._by_breakends.get((first.key, second.key)) or self._by_breakends.get((second.key, first.key))

    def __getitem__(self, pair_id: int) -> LinkedPair:
        return self._pairs[pair_id]

    def __len__(self):
        return len(self._pairs)

    def pairs(self) -> List[LinkedPair]:
        return list(self._pairs)

    def new_link(self, pair: LinkedPair, first: Breakend, ploidy: float, rule: str) -> ChainLink:
        link = ChainLink(len(self._links), pair, first, pair.other(first), ploidy, rule)
        self._links.append(link)
        pair.repeat_count += 1
        return link
