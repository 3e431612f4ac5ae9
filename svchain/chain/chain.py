from typing import List, Optional, Set

from ..error import ChainingError
from ..variant import Breakend, StructuralVariant
from .link import ChainLink


class Chain:
    """
    an ordered path of links through the variants of a cluster. Between two consecutive links the path traverses
    the variant entered by the second breakend of the first link and leaves it by the first breakend of the next

    Attributes:
        id (int): the chain id, unique within the cluster
        links (List[ChainLink]): the links in traversal order
        closed (bool): the last link joins back to the start of the chain
        replicates (int): the number of structurally identical chains this chain represents
    """

    def __init__(self, id: int, links=(), closed: bool = False, replicates: int = 1, ploidy: Optional[float] = None):
        self.id = id
        self.links: List[ChainLink] = []
        self.closed = False
        self.replicates = replicates
        self._ploidy = ploidy
        for link in links:
            self.append(link)
        self.closed = closed

    def __repr__(self):
        state = 'closed' if self.closed else 'open'
        return f'Chain({self.id} links={len(self.links)} ploidy={self.ploidy:.2f} {state})'

    def __len__(self):
        return len(self.links)

    def __iter__(self):
        return iter(self.links)

    @property
    def ploidy(self) -> float:
        if self._ploidy is not None:
            return self._ploidy
        if not self.links:
            return 0.0
        return min([link.ploidy for link in self.links])

    @ploidy.setter
    def ploidy(self, value):
        self._ploidy = value

    @property
    def open_start(self) -> Optional[Breakend]:
        """the breakend a link prepended to the chain must enter, None for a closed chain or a single breakend"""
        if self.closed or not self.links:
            return None
        return self.links[0].first.other

    @property
    def open_end(self) -> Optional[Breakend]:
        """the breakend a link appended to the chain must leave from, None for a closed chain or a single breakend"""
        if self.closed or not self.links:
            return None
        return self.links[-1].second.other

    def append(self, link: ChainLink):
        if self.closed:
            raise ChainingError('cannot extend a closed chain', self, link)
        if self.links and link.first != self.open_end:
            raise ChainingError('link does not continue from the end of the chain', self, link)
        self.links.append(link)

    def prepend(self, link: ChainLink):
        if self.closed:
            raise ChainingError('cannot extend a closed chain', self, link)
        if self.links and link.second != self.open_start:
            raise ChainingError('link does not lead into the start of the chain', self, link)
        self.links.insert(0, link)

    def close(self, link: Optional[ChainLink] = None):
        """
        Mark the chain as a loop. Given a link, the link joining the open end back to the open start is appended.
        Without one the chain must already end leaving from the breakend its first link leaves from
        """
        if link is None:
            if not self.links or self.open_end != self.links[0].first:
                raise ChainingError('chain does not loop back to its first link', self)
        elif link.first != self.open_end or link.second != self.open_start:
            raise ChainingError('link does not join the open ends of the chain', self, link)
        else:
            self.links.append(link)
        self.closed = True

    def loops(self) -> bool:
        """True if the open end of the chain is the breakend its first link leaves from"""
        return not self.closed and bool(self.links) and self.open_end == self.links[0].first

    def reversed(self) -> 'Chain':
        return Chain(
            self.id,
            [link.reversed() for link in reversed(self.links)],
            closed=self.closed,
            replicates=self.replicates,
            ploidy=self._ploidy,
        )

    def concatenated(self, link: ChainLink, other: 'Chain') -> 'Chain':
        """
        join another chain to the end of this one through a link leaving this chain's open end and entering the
        other chain's open start. The lower of the two chain ids is kept
        """
        if link.first != self.open_end or link.second != other.open_start:
            raise ChainingError('link does not join the two chains', self, link, other)
        return Chain(min(self.id, other.id), self.links + [link] + other.links)

    def joined(self, other: 'Chain') -> 'Chain':
        """join another chain whose first link leaves from the open end of this chain"""
        if not other.links or other.links[0].first != self.open_end:
            raise ChainingError('chains do not share an open breakend', self, other)
        return Chain(min(self.id, other.id), self.links + other.links)

    def is_contiguous(self) -> bool:
        for current, following in zip(self.links, self.links[1:]):
            if current.second.other != following.first:
                return False
        if self.closed and self.links:
            return self.links[-1].second.other == self.links[0].first
        return True

    def link_ids(self) -> List[int]:
        return [link.id for link in self.links]

    def variants(self) -> Set[StructuralVariant]:
        result = set()
        for link in self.links:
            result.update([link.first.variant, link.second.variant])
        return result

    def structural_key(self):
        """identifies chains made of the same sequence of breakend pairs irrespective of the link instances used"""
        forward = tuple([link.key for link in self.links])
        backward = tuple([link.key for link in self.reversed().links])
        return (self.closed, min(forward, backward))

    def to_dict(self):
        return {
            'id': self.id,
            'ploidy': self.ploidy,
            'closed': self.closed,
            'replicates': self.replicates,
            'links': [
                {
                    'first': {'variant': link.first.variant.id, 'is_start': link.first.is_start},
                    'second': {'variant': link.second.variant.id, 'is_start': link.second.is_start},
                    'length': link.pair.length,
                    'ploidy': link.ploidy,
                    'rule': link.rule,
                }
                for link in self.links
            ],
        }
