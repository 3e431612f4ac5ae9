import pytest

from svchain.chain.chain import Chain
from svchain.chain.link import LinkArena, LinkedPair
from svchain.constants import LINK_RULE, ORIENT
from svchain.error import ChainingError

from ...util import create_bnd, create_del, create_dup, create_sgl


class TestLinkArena:
    def test_pair_is_reused(self):
        dup = create_dup(1, '1', 1000, 5000)
        deletion = create_del(2, '1', 2000, 3000)
        arena = LinkArena()
        pair = arena.pair(dup.start, deletion.start)
        assert arena.pair(dup.start, deletion.start) is pair
        assert arena.get(deletion.start, dup.start) is pair
        assert arena[0] is pair
        assert pair.length == 1000
        assert pair.other(dup.start) == deletion.start

    def test_unordered_pair_error(self):
        dup = create_dup(1, '1', 1000, 5000)
        deletion = create_del(2, '1', 2000, 3000)
        with pytest.raises(AttributeError):
            LinkedPair(0, deletion.start, dup.start)

    def test_new_link(self):
        dup = create_dup(1, '1', 1000, 5000)
        deletion = create_del(2, '1', 2000, 3000)
        arena = LinkArena()
        pair = arena.pair(dup.start, deletion.start)
        first = arena.new_link(pair, deletion.start, 1.0, LINK_RULE.NEAREST)
        second = arena.new_link(pair, dup.start, 1.0, LINK_RULE.NEAREST)
        assert (first.id, second.id) == (0, 1)
        assert first.second == dup.start
        assert pair.repeat_count == 2


class TestChain:
    def setup_method(self):
        self.x = create_bnd(1, '1', 1000, ORIENT.RIGHT, '2', 1000, ORIENT.LEFT)
        self.y = create_bnd(2, '1', 2000, ORIENT.LEFT, '2', 5000, ORIENT.RIGHT)
        self.z = create_bnd(3, '2', 8000, ORIENT.LEFT, '3', 100, ORIENT.LEFT)
        self.w = create_sgl(4, '3', 50, ORIENT.RIGHT)
        self.arena = LinkArena()
        self.first = self.arena.new_link(
            self.arena.pair(self.x.start, self.y.start), self.x.start, 1.0, LINK_RULE.NEAREST
        )
        self.second = self.arena.new_link(
            self.arena.pair(self.y.end, self.z.start), self.y.end, 0.8, LINK_RULE.NEAREST
        )
        self.third = self.arena.new_link(
            self.arena.pair(self.w.start, self.z.end), self.z.end, 1.0, LINK_RULE.NEAREST
        )

    def test_open_ends(self):
        chain = Chain(0, [self.first, self.second])
        assert chain.open_start == self.x.end
        assert chain.open_end == self.z.end
        assert chain.is_contiguous()
        assert chain.ploidy == 0.8
        assert chain.variants() == {self.x, self.y, self.z}

    def test_append_not_contiguous_error(self):
        chain = Chain(0, [self.first])
        with pytest.raises(ChainingError):
            chain.append(self.third)

    def test_prepend(self):
        chain = Chain(0, [self.second])
        chain.prepend(self.first)
        assert chain.link_ids() == [0, 1]
        assert chain.is_contiguous()
        with pytest.raises(ChainingError):
            chain.prepend(self.third)

    def test_reversed(self):
        chain = Chain(0, [self.first, self.second])
        backward = chain.reversed()
        assert backward.link_ids() == [1, 0]
        assert backward.open_start == chain.open_end
        assert backward.open_end == chain.open_start
        assert backward.is_contiguous()
        assert backward.structural_key() == chain.structural_key()

    def test_concatenated(self):
        head = Chain(3, [self.first])
        tail = Chain(1, [self.third])
        joined = head.concatenated(self.second, tail)
        assert joined.id == 1
        assert joined.link_ids() == [0, 1, 2]
        assert joined.is_contiguous()
        assert joined.open_end is None

    def test_joined(self):
        joined = Chain(0, [self.first]).joined(Chain(1, [self.second]))
        assert joined.link_ids() == [0, 1]
        with pytest.raises(ChainingError):
            Chain(0, [self.first]).joined(Chain(1, [self.third]))

    def test_ploidy_override(self):
        chain = Chain(0, [self.first, self.second])
        chain.ploidy = 2.5
        assert chain.ploidy == 2.5

    def test_to_dict(self):
        result = Chain(0, [self.first, self.second]).to_dict()
        assert result['closed'] is False
        assert [link['length'] for link in result['links']] == [1000, 3000]
        assert result['links'][0]['first'] == {'variant': 1, 'is_start': True}


class TestClosedChain:
    def setup_method(self):
        self.dup = create_dup(1, '1', 1000, 5000)
        self.deletion = create_del(2, '1', 1100, 4900)
        self.arena = LinkArena()
        self.first = self.arena.new_link(
            self.arena.pair(self.dup.start, self.deletion.start), self.dup.start, 1.0, LINK_RULE.SINGLE_OPTION
        )
        self.second = self.arena.new_link(
            self.arena.pair(self.deletion.end, self.dup.end), self.deletion.end, 1.0, LINK_RULE.SINGLE_OPTION
        )

    def test_loops(self):
        chain = Chain(0, [self.first, self.second])
        assert chain.open_start == self.dup.end
        assert chain.open_end == self.dup.start
        assert chain.loops()
        chain.close()
        assert chain.closed
        assert not chain.loops()
        assert chain.open_start is None
        assert chain.open_end is None
        assert len(chain) == 2
        assert chain.is_contiguous()
        with pytest.raises(ChainingError):
            chain.append(self.first)

    def test_close_without_loop_error(self):
        chain = Chain(0, [self.first])
        assert not chain.loops()
        with pytest.raises(ChainingError):
            chain.close()

    def test_close_with_link(self):
        first = create_bnd(3, '1', 1000, ORIENT.RIGHT, '2', 9000, ORIENT.LEFT)
        second = create_bnd(4, '1', 2000, ORIENT.LEFT, '2', 5000, ORIENT.RIGHT)
        link = self.arena.new_link(self.arena.pair(first.start, second.start), first.start, 1.0, LINK_RULE.NEAREST)
        chain = Chain(0, [link])
        closing = self.arena.pair(second.end, first.end)
        with pytest.raises(ChainingError):
            chain.close(self.arena.new_link(closing, first.end, 1.0, LINK_RULE.CLOSING))
        chain.close(self.arena.new_link(closing, second.end, 1.0, LINK_RULE.CLOSING))
        assert chain.closed
        assert len(chain) == 2
        assert chain.is_contiguous()

    def test_self_loop(self):
        closing = self.arena.pair(self.dup.start, self.dup.end)
        link = self.arena.new_link(closing, self.dup.end, 1.0, LINK_RULE.CLOSING)
        chain = Chain(0, [link], closed=True)
        assert chain.is_contiguous()
        assert chain.variants() == {self.dup}
