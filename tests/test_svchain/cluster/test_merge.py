from svchain.cluster.cluster import Cluster
from svchain.cluster.lengths import LengthCutoffs
from svchain.cluster.main import cluster_variants
from svchain.cluster.merge import (
    associate_breakend_cn_events,
    long_ddi_variants,
    mark_single_pair_resolved_type,
    merge_clusters,
    merge_on_overlapping_inv_dup_dels,
    merge_on_unresolved_singles,
)
from svchain.cluster.proximity import initial_partition
from svchain.cnv import HomLossEvent, LohEvent, SEGMENT_TYPE
from svchain.constants import ARM, CLUSTER_REASON, ORIENT, RESOLVED_TYPE
from svchain.index import BreakendIndex

from ...util import create_bnd, create_del, create_dup, create_inv, create_sgl


class TestAssociateBreakendCnEvents:
    def test_matches_bounding_breakends(self):
        first = create_del(3, '1', 1000, 2000)
        second = create_del(7, '1', 500000, 501000)
        loh = LohEvent('1', 1000, 501000, start_variant=3, end_variant=7)
        missed = associate_breakend_cn_events(BreakendIndex([first, second]), [loh])
        assert missed == 0
        assert loh.start_breakend is first.start
        assert loh.end_breakend is second.end

    def test_missed_bounds(self):
        first = create_del(3, '1', 1000, 2000)
        loh = LohEvent('1', 1000, 501000, start_variant=3, end_variant=7)
        missed = associate_breakend_cn_events(BreakendIndex([first]), [loh])
        assert missed == 1
        assert loh.start_breakend is first.start
        assert loh.end_breakend is None

    def test_nested_hom_loss(self):
        outer_start = create_del(1, '1', 1000, 2000)
        inner = create_del(2, '1', 100000, 200000)
        outer_end = create_del(3, '1', 500000, 501000)
        hom_loss = HomLossEvent('1', 100000, 200000, start_variant=2, end_variant=2)
        loh = LohEvent('1', 1000, 501000, start_variant=1, end_variant=3, hom_loss_events=[hom_loss])
        associate_breakend_cn_events(BreakendIndex([outer_start, inner, outer_end]), [loh])
        assert hom_loss.matched_both
        assert hom_loss.same_variant
        assert not loh.has_incomplete_hom_loss_events


class TestMergeOnLohEvents:
    def test_merge_bounding_clusters(self):
        first = create_del(3, '1', 1000, 2000)
        second = create_del(7, '1', 500000, 501000)
        loh = LohEvent('1', 1000, 501000, start_variant=3, end_variant=7)
        result = cluster_variants([first, second], loh_events=[loh])
        assert len(result.partition) == 1
        cluster = result.partition.cluster_of(first)
        assert CLUSTER_REASON.LOH in cluster.reasons
        assert not cluster.resolved
        assert [m.reason for m in result.merges] == [CLUSTER_REASON.LOH]
        assert result.partition.reasons(first) == ('LOH_7',)
        assert loh in cluster.loh_events

    def test_incomplete_hom_loss_blocks_merge(self):
        first = create_del(3, '1', 1000, 2000)
        second = create_del(7, '1', 500000, 501000)
        hom_loss = HomLossEvent('1', 100000, 200000, start_variant=11, end_variant=12)
        loh = LohEvent('1', 1000, 501000, start_variant=3, end_variant=7, hom_loss_events=[hom_loss])
        result = cluster_variants([first, second], loh_events=[loh])
        assert len(result.partition) == 2
        assert not result.merges

    def test_hom_loss_in_clustered_loh(self):
        loh_start = create_del(1, '1', 1000, 2000)
        loh_end = create_del(2, '1', 3000, 501000)
        hom_start = create_del(3, '1', 100000, 101000)
        hom_end = create_del(4, '1', 150000, 200000)
        hom_loss = HomLossEvent('1', 100000, 200000, start_variant=3, end_variant=4)
        loh = LohEvent('1', 1000, 501000, start_variant=1, end_variant=2, hom_loss_events=[hom_loss])
        result = cluster_variants([loh_start, loh_end, hom_start, hom_end], loh_events=[loh])
        assert result.partition.same_cluster(hom_start, hom_end)
        assert not result.partition.same_cluster(loh_start, hom_start)
        assert [m.reason for m in result.merges] == [CLUSTER_REASON.HOM_LOSS]

    def test_whole_arm_loss(self):
        hom_start = create_del(3, '1', 100000, 101000)
        hom_end = create_del(4, '1', 150000, 200000)
        hom_loss = HomLossEvent('1', 100000, 200000, start_variant=3, end_variant=4)
        loh = LohEvent(
            '1', 1, 123000000, segment_start=SEGMENT_TYPE.TELOMERE, segment_end=SEGMENT_TYPE.CENTROMERE,
            hom_loss_events=[hom_loss],
        )
        assert loh.whole_arm_loss()
        result = cluster_variants([hom_start, hom_end], loh_events=[loh])
        assert len(result.partition) == 1


class TestMergeOnOverlappingInvDupDels:
    def test_overlapping_long_deletions(self):
        first = create_del(1, '1', 100000, 400000)
        second = create_del(2, '1', 200000, 600000)
        partition, _ = initial_partition([first, second])
        assert len(partition) == 2
        assert all([c.resolved_type == RESOLVED_TYPE.DEL for c in partition.clusters()])
        merged, records = merge_on_overlapping_inv_dup_dels(partition, LengthCutoffs(100000, 100000))
        assert len(merged) == 1
        assert not merged.cluster_of(first).resolved
        assert records[0].reason == CLUSTER_REASON.LONG_DEL_DUP_INV
        assert records[0].variants == (1, 2)

    def test_short_deletions_not_merged(self):
        first = create_del(1, '1', 100000, 400000)
        second = create_del(2, '1', 200000, 600000)
        partition, _ = initial_partition([first, second])
        merged, records = merge_on_overlapping_inv_dup_dels(partition, LengthCutoffs(1000000, 1000000))
        assert len(merged) == 2
        assert not records

    def test_inversion_overlapping_duplication(self):
        inversion = create_inv(1, '1', 100000, 400000)
        duplication = create_dup(2, '1', 300000, 900000)
        partition, _ = initial_partition([inversion, duplication])
        merged, records = merge_on_overlapping_inv_dup_dels(partition, LengthCutoffs(100000, 100000))
        assert len(merged) == 1

    def test_different_arms_not_merged(self):
        first = create_inv(1, '1', 100000, 400000)
        second = create_inv(2, '1', 130000000, 140000000)
        partition, _ = initial_partition([first, second])
        merged, records = merge_on_overlapping_inv_dup_dels(partition, LengthCutoffs(100000, 100000))
        assert len(merged) == 2

    def test_cross_arm_ignored(self):
        first = create_inv(1, '1', 100000, 130000000)
        second = create_inv(2, '1', 120000000, 121000000)
        partition, _ = initial_partition([first, second])
        merged, _ = merge_on_overlapping_inv_dup_dels(partition, LengthCutoffs(100000, 100000))
        assert len(merged) == 2

    def test_long_variants_grouped_by_arm(self):
        p_deletion = create_del(1, '1', 1000, 500000)
        q_duplication = create_dup(2, '1', 150000000, 151000000)
        short = create_del(3, '1', 600000, 601000)
        cross = create_inv(4, '1', 100000000, 160000000)
        cluster = Cluster(0, [p_deletion, q_duplication, short, cross])
        groups = long_ddi_variants(cluster, LengthCutoffs(100000, 100000))
        assert groups == {('1', ARM.P): [p_deletion], ('1', ARM.Q): [q_duplication]}


class TestMarkSinglePairResolvedType:
    def test_facing_duplication(self):
        first = create_sgl(1, '1', 10000, ORIENT.RIGHT)
        second = create_sgl(2, '1', 20000, ORIENT.LEFT)
        assert mark_single_pair_resolved_type(first, second) == RESOLVED_TYPE.SGL_PAIR_DUP
        assert mark_single_pair_resolved_type(second, first) == RESOLVED_TYPE.SGL_PAIR_DUP

    def test_facing_insertion(self):
        first = create_sgl(1, '1', 10000, ORIENT.RIGHT)
        second = create_sgl(2, '1', 10010, ORIENT.LEFT)
        assert mark_single_pair_resolved_type(first, second) == RESOLVED_TYPE.SGL_PAIR_INS

    def test_deletion(self):
        first = create_sgl(1, '1', 10000, ORIENT.LEFT)
        second = create_sgl(2, '1', 20000, ORIENT.RIGHT)
        assert mark_single_pair_resolved_type(first, second) == RESOLVED_TYPE.SGL_PAIR_DEL

    def test_short_deletion_is_insertion(self):
        first = create_sgl(1, '1', 10000, ORIENT.LEFT)
        second = create_sgl(2, '1', 10020, ORIENT.RIGHT)
        assert mark_single_pair_resolved_type(first, second) == RESOLVED_TYPE.SGL_PAIR_INS

    def test_same_orientation(self):
        first = create_sgl(1, '1', 10000, ORIENT.LEFT)
        second = create_sgl(2, '1', 20000, ORIENT.LEFT)
        assert mark_single_pair_resolved_type(first, second) == RESOLVED_TYPE.NONE

    def test_copy_number_change_mismatch(self):
        first = create_sgl(1, '1', 10000, ORIENT.RIGHT, start_kwargs={'cn_low': 2, 'cn_high': 4})
        second = create_sgl(2, '1', 20000, ORIENT.LEFT, start_kwargs={'cn_low': 4, 'cn_high': 3})
        assert mark_single_pair_resolved_type(first, second) == RESOLVED_TYPE.NONE


class TestMergeOnUnresolvedSingles:
    def test_pair_of_solo_singles(self):
        first = create_sgl(1, '1', 10000, ORIENT.RIGHT)
        second = create_sgl(2, '1', 20000, ORIENT.LEFT)
        partition, index = initial_partition([first, second])
        assert len(partition) == 2
        merged, records = merge_on_unresolved_singles(partition, index, LengthCutoffs(100000, 100000))
        assert len(merged) == 1
        cluster = merged.cluster_of(first)
        assert cluster.resolved
        assert cluster.resolved_type == RESOLVED_TYPE.SGL_PAIR_DUP
        assert CLUSTER_REASON.SOLO_SINGLE in cluster.reasons
        assert len(records) == 1

    def test_nearest_not_single(self):
        first = create_sgl(1, '1', 10000, ORIENT.RIGHT)
        translocation = create_bnd(2, '1', 20000, ORIENT.LEFT, '2', 1000, ORIENT.LEFT)
        second = create_sgl(3, '1', 30000, ORIENT.LEFT)
        partition, index = initial_partition([first, translocation, second])
        merged, records = merge_on_unresolved_singles(partition, index, LengthCutoffs(100000, 100000))
        assert not records

    def test_short_simple_variants_skipped(self):
        first = create_sgl(1, '1', 10000, ORIENT.RIGHT)
        deletion = create_del(2, '1', 16000, 16500)
        second = create_sgl(3, '1', 30000, ORIENT.LEFT)
        partition, index = initial_partition([first, deletion, second])
        merged, records = merge_on_unresolved_singles(partition, index, LengthCutoffs(100000, 100000))
        assert not records


class TestMergeClusters:
    def test_idempotent(self):
        variants = [
            create_del(3, '1', 1000, 2000),
            create_del(7, '1', 500000, 501000),
            create_inv(8, '2', 100000, 400000),
            create_dup(9, '2', 300000, 900000),
            create_sgl(10, '3', 10000, ORIENT.RIGHT),
            create_sgl(11, '3', 20000, ORIENT.LEFT),
        ]
        loh = LohEvent('1', 1000, 501000, start_variant=3, end_variant=7)
        result = cluster_variants(variants, loh_events=[loh])
        assert len(result.merges) == 3
        again, records = merge_clusters(result.partition, result.index, result.cutoffs, loh_events=[loh])
        assert not records
        assert [sorted([v.id for v in c]) for c in again] == [sorted([v.id for v in c]) for c in result.partition]

    def test_partition_invariant(self):
        variants = [
            create_del(1, '1', 1000, 3000),
            create_dup(2, '1', 1050, 4000),
            create_del(3, '1', 1060, 3020),
            create_sgl(4, '1', 1001, ORIENT.LEFT),
            create_bnd(5, '2', 100, ORIENT.LEFT, '5', 100, ORIENT.RIGHT),
            create_inv(6, '3', 5000, 900000),
            create_inv(7, '3', 400000, 1000000),
        ]
        result = cluster_variants(variants, proximity_distance=100)
        members = [v.id for c in result.partition.clusters() for v in c.variants]
        assert sorted(members) == [1, 2, 3, 4, 5, 6, 7]
        assert len(members) == len(set(members))
