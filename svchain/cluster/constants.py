from ..util import WeakSvChainNamespace


DEFAULTS = WeakSvChainNamespace()
"""
- proximity_distance
- duplicate_breakend_distance
- sgl_duplicate_distance
- isolated_bnd_distance
- short_inv_distance
- low_support_cn_change
- min_del_dup_cutoff
- max_del_dup_cutoff
- del_dup_trim_count
- max_arm_count
- max_merge_iterations
- min_deletion_length
- min_templated_insertion_length
- cn_abs_tolerance
- cn_relative_tolerance
"""
DEFAULTS.add(
    'proximity_distance',
    5000,
    defn='the maximum distance between consecutive breakends for them to be clustered by proximity',
)
DEFAULTS.add(
    'duplicate_breakend_distance',
    35,
    defn='variants of the same type with both breakends within this distance of each other are considered '
    'duplicate calls and all but one are excluded from clustering',
)
DEFAULTS.add(
    'sgl_duplicate_distance',
    1,
    defn='single breakends within this distance of another breakend with the same orientation are excluded as '
    'duplicates',
)
DEFAULTS.add(
    'isolated_bnd_distance',
    5000,
    defn='a translocation with no other breakend within this distance of either end is isolated',
)
DEFAULTS.add(
    'short_inv_distance', 100, defn='inversions shorter than this are short for the low support exclusion'
)
DEFAULTS.add(
    'low_support_cn_change',
    0.2,
    defn='isolated translocations and short inversions with a copy number change below this at both ends are '
    'excluded from clustering',
)
DEFAULTS.add(
    'min_del_dup_cutoff',
    100000,
    defn='the lower bound of the per-sample length above which deletions and duplications are long',
)
DEFAULTS.add(
    'max_del_dup_cutoff',
    5000000,
    defn='the upper bound of the per-sample length above which deletions and duplications are long',
)
DEFAULTS.add(
    'del_dup_trim_count',
    5,
    defn='the number of the longest deletions/duplications to ignore for a sample with every arm free of inversions',
)
DEFAULTS.add('max_arm_count', 41, defn='number of chromosome arms used to scale the trim count')
DEFAULTS.add(
    'max_merge_iterations',
    5,
    defn='the maximum number of times the evidence based merge rules are re-applied while they still merge clusters',
)
DEFAULTS.add(
    'min_deletion_length',
    32,
    defn='the minimum distance between a pair of non-facing single breakends for them to be resolved as a deletion',
)
DEFAULTS.add(
    'min_templated_insertion_length',
    30,
    defn='the minimum distance between a pair of facing single breakends for them to be resolved as a duplication',
)
DEFAULTS.add('cn_abs_tolerance', 0.5, defn='copy numbers differing by no more than this are equal')
DEFAULTS.add('cn_relative_tolerance', 0.15, defn='copy numbers differing by no more than this fraction are equal')
