from svchain.chain.chain import Chain
from svchain.chain.link import LinkArena
from svchain.cluster.cluster import Cluster
from svchain.constants import LINK_RULE, RESOLVED_TYPE
from svchain.double_minute import adjacent_ploidy_ratio, is_double_minute_candidate
from svchain.main import tag_resolved_type

from ..util import create_del, create_dup


def amplified_dup(ploidy=10, outer=2):
    return create_dup(
        1, '1', 1000, 5000, ploidy=ploidy,
        start_kwargs={'major_ploidy_low': outer}, end_kwargs={'major_ploidy_high': outer},
    )


class TestAdjacentPloidyRatio:
    def test_ratio(self):
        assert adjacent_ploidy_ratio(amplified_dup()) == 5

    def test_highest_outer_ploidy_used(self):
        dup = create_dup(
            1, '1', 1000, 5000, ploidy=10,
            start_kwargs={'major_ploidy_low': 2, 'major_ploidy_high': 8}, end_kwargs={'major_ploidy_high': 4},
        )
        assert adjacent_ploidy_ratio(dup) == 2.5

    def test_unknown(self):
        assert adjacent_ploidy_ratio(create_dup(1, '1', 1000, 5000, ploidy=10)) == 0

    def test_lost_outside(self):
        assert adjacent_ploidy_ratio(amplified_dup(outer=0)) == float('inf')


class TestIsDoubleMinuteCandidate:
    def test_amplified_duplication(self):
        assert is_double_minute_candidate(Cluster(0, [amplified_dup()]))

    def test_low_ploidy(self):
        assert not is_double_minute_candidate(Cluster(0, [amplified_dup(ploidy=6)]))
        assert is_double_minute_candidate(Cluster(0, [amplified_dup(ploidy=6)]), dm_ploidy_threshold=5)

    def test_low_ratio(self):
        assert not is_double_minute_candidate(Cluster(0, [amplified_dup(outer=5)]))

    def test_not_duplication(self):
        deletion = create_del(
            1, '1', 1000, 5000, ploidy=10,
            start_kwargs={'major_ploidy_high': 2}, end_kwargs={'major_ploidy_low': 2},
        )
        assert not is_double_minute_candidate(Cluster(0, [deletion]))

    def test_open_chain(self):
        dup = amplified_dup()
        arena = LinkArena()
        link = arena.new_link(arena.pair(dup.start, dup.end), dup.end, 10, LINK_RULE.CLOSING)
        cluster = Cluster(0, [dup])
        cluster.chains = [Chain(0, [link])]
        assert not is_double_minute_candidate(cluster)
        cluster.chains = [Chain(0, [link], closed=True)]
        assert is_double_minute_candidate(cluster)


class TestTagResolvedType:
    def test_double_minute_unresolved(self):
        cluster = Cluster(0, [amplified_dup()], resolved=True, resolved_type=RESOLVED_TYPE.DUP)
        tag_resolved_type(cluster)
        assert cluster.resolved_type == RESOLVED_TYPE.DOUBLE_MINUTE
        assert not cluster.resolved

    def test_resolved_kept(self):
        cluster = Cluster(0, [create_del(1, '1', 1000, 5000)], resolved=True, resolved_type=RESOLVED_TYPE.DUP_BE)
        tag_resolved_type(cluster)
        assert cluster.resolved_type == RESOLVED_TYPE.DUP_BE

    def test_complex(self):
        cluster = Cluster(0, [create_del(1, '1', 1000, 5000), create_del(2, '1', 6000, 9000)])
        tag_resolved_type(cluster)
        assert cluster.resolved_type == RESOLVED_TYPE.COMPLEX
