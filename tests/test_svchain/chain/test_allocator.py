import pytest

from svchain.chain.allocator import PloidyAllocator, PloidyRange, cluster_ploidy_range, replication_counts
from svchain.chain.link import LinkArena, LinkedPair
from svchain.error import PloidyAllocationError

from ...util import create_del, create_dup


class TestClusterPloidyRange:
    def test_uniform(self):
        variants = [
            create_del(1, '1', 1000, 2000, ploidy=1.2, ploidy_min=0.8, ploidy_max=1.6),
            create_del(2, '1', 3000, 4000, ploidy=1.0, ploidy_min=0.6, ploidy_max=1.4),
        ]
        assert cluster_ploidy_range(variants) == PloidyRange(1, 1)

    def test_varied(self):
        variants = [
            create_del(1, '1', 1000, 2000, ploidy=1),
            create_del(2, '1', 3000, 4000, ploidy=3),
        ]
        assert cluster_ploidy_range(variants) == PloidyRange(1, 3)

    def test_low_ploidy_rounds_to_one(self):
        variants = [create_del(1, '1', 1000, 2000, ploidy=0.3)]
        assert cluster_ploidy_range(variants) == PloidyRange(1, 1)


class TestReplicationCounts:
    def setup_method(self):
        self.low = create_del(1, '1', 1000, 2000, ploidy=1)
        self.high = create_del(2, '1', 3000, 4000, ploidy=3)

    def test_ratio_to_minimum(self):
        counts = replication_counts([self.low, self.high], PloidyRange(1, 3))
        assert counts == {self.low: 1, self.high: 3}

    def test_scaled_to_limit(self):
        counts = replication_counts([self.low, self.high], PloidyRange(1, 3), chaining_sv_limit=2)
        assert counts == {self.low: 1, self.high: 2}

    def test_assembled_partners(self):
        counts = replication_counts([self.low, self.high], PloidyRange(1, 3), assembled_counts={self.low: 2})
        assert counts[self.low] == 2


class TestPloidyAllocator:
    def setup_method(self):
        self.dup = create_dup(1, '1', 1000, 5000)
        self.deletion = create_del(2, '1', 2000, 3000)
        self.other = create_del(3, '1', 2500, 3500)
        self.arena = LinkArena()
        self.first = self.arena.pair(self.dup.start, self.deletion.start)
        self.second = self.arena.pair(self.dup.start, self.other.start)

    def test_uniform_not_replicated(self):
        allocator = PloidyAllocator([self.dup, self.deletion, self.other])
        assert not allocator.requires_replication
        assert allocator.copies_remaining(self.dup.start) == 1
        assert allocator.copy_ploidy(self.dup.start) == 1

    def test_commit(self):
        allocator = PloidyAllocator([self.dup, self.deletion, self.other])
        assert allocator.commit(self.first) == 1
        assert allocator.remaining(self.dup.start) == 0
        assert allocator.remaining(self.deletion.start) == 0
        assert allocator.consumed(self.deletion.start) == 1
        assert allocator.copies_remaining(self.dup.start) == 0
        assert not allocator.is_allocatable(self.dup.start)
        assert allocator.remaining(self.dup.end) == 1

    def test_commit_exhausted_error(self):
        allocator = PloidyAllocator([self.dup, self.deletion, self.other])
        allocator.commit(self.first)
        with pytest.raises(PloidyAllocationError):
            allocator.commit(self.second)
        assert allocator.remaining(self.other.start) == 1

    def test_commit_same_breakend_error(self):
        allocator = PloidyAllocator([self.dup, self.deletion, self.other])
        pair = LinkedPair(10, self.dup.start, self.dup.start)
        with pytest.raises(PloidyAllocationError):
            allocator.commit(pair)
        assert allocator.remaining(self.dup.start) == 1

    def test_commit_all_rolls_back(self):
        allocator = PloidyAllocator([self.dup, self.deletion, self.other])
        with pytest.raises(PloidyAllocationError):
            allocator.commit_all([self.first, self.second])
        assert allocator.remaining(self.dup.start) == 1
        assert allocator.remaining(self.deletion.start) == 1
        assert allocator.copies_remaining(self.dup.start) == 1

    def test_replicated_copies(self):
        high = create_dup(4, '1', 1000, 5000, ploidy=2)
        deletion = create_del(5, '1', 2000, 3000)
        pair = LinkArena().pair(high.start, deletion.start)
        allocator = PloidyAllocator([high, deletion])
        assert allocator.requires_replication
        assert allocator.copies_remaining(high.start) == 2
        assert allocator.copy_ploidy(high.start) == 1
        assert allocator.commit(pair) == 1
        assert allocator.remaining(high.start) == 1
        assert allocator.copies_remaining(high.start) == 1
        assert allocator.is_allocatable(high.start)

    def test_below_minimum_not_allocatable(self):
        low = create_del(4, '1', 1000, 2000, ploidy=0.04)
        allocator = PloidyAllocator([low])
        assert not allocator.is_allocatable(low.start)

    def test_unknown_breakend_not_allocatable(self):
        allocator = PloidyAllocator([self.dup])
        assert self.deletion.start not in allocator
        assert not allocator.is_allocatable(self.deletion.start)

    def test_ploidy_match(self):
        close = create_del(4, '1', 2000, 3000, ploidy=1.3)
        far = create_del(5, '1', 6000, 7000, ploidy=0.3)
        allocator = PloidyAllocator([self.dup, close, far])
        assert allocator.ploidy_match(self.dup.start, close.start)
        assert not allocator.ploidy_match(self.dup.start, far.start)

    def test_ploidy_match_uses_unlinked_ploidy(self):
        high = create_dup(4, '1', 1000, 5000, ploidy=2)
        deletion = create_del(5, '1', 2000, 3000)
        other = create_del(6, '1', 6000, 7000, ploidy=2)
        allocator = PloidyAllocator([high, deletion, other])
        assert allocator.copy_ploidy(high.start) == allocator.copy_ploidy(deletion.start)
        assert not allocator.ploidy_match(high.start, deletion.start)
        assert allocator.ploidy_match(high.start, other.start)
        allocator.commit(LinkArena().pair(high.start, deletion.start))
        assert allocator.ploidy_match(high.start, deletion.end)
