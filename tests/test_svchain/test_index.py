import pytest

from svchain.constants import ORIENT
from svchain.index import BreakendIndex

from ..util import create_bnd, create_del, create_dup


class TestBreakendIndex:
    def setup_method(self):
        self.deletion = create_del(1, '1', 1000, 3000)
        self.duplication = create_dup(2, '1', 1050, 4000)
        self.translocation = create_bnd(3, '2', 500, ORIENT.LEFT, '3', 700, ORIENT.RIGHT)
        self.index = BreakendIndex([self.deletion, self.duplication, self.translocation])

    def test_ordered_by_position(self):
        breakends = self.index.breakends_on_chromosome('1')
        assert [b.position for b in breakends] == [1000, 1050, 3000, 4000]
        assert isinstance(breakends, tuple)

    def test_chromosomes(self):
        assert self.index.chromosomes() == ['1', '2', '3']
        assert [chrom for chrom, _ in self.index] == ['1', '2', '3']

    def test_index_of(self):
        assert self.index.index_of(self.duplication.start) == 1
        assert self.index.index_of(self.deletion.end) == 2
        other = create_del(4, '1', 10, 20)
        with pytest.raises(KeyError):
            self.index.index_of(other.start)

    def test_neighbours(self):
        assert self.index.neighbours(self.deletion.start) == (None, self.duplication.start)
        assert self.index.neighbours(self.translocation.start) == (None, None)

    def test_variants(self):
        assert self.index.variants() == [self.deletion, self.duplication, self.translocation]
        assert len(self.index) == 6

    def test_exclude_builds_new_index(self):
        filtered = self.index.exclude([self.duplication])
        assert filtered is not self.index
        assert [b.position for b in filtered.breakends_on_chromosome('1')] == [1000, 3000]
        assert filtered.index_of(self.deletion.end) == 1
        assert self.index.index_of(self.deletion.end) == 2
        assert self.duplication.start in self.index
        assert self.duplication.start not in filtered

    def test_exclude_keeps_untouched_chromosomes(self):
        filtered = self.index.exclude([self.duplication])
        assert filtered.breakends_on_chromosome('2') is self.index.breakends_on_chromosome('2')

    def test_exclude_drops_empty_chromosome(self):
        filtered = self.index.exclude([self.translocation])
        assert filtered.chromosomes() == ['1']
