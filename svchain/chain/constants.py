from ..util import WeakSvChainNamespace


DEFAULTS = WeakSvChainNamespace()
"""
- min_templated_insertion_length
- chaining_sv_limit
- min_chaining_ploidy
- max_iterations_without_link
- complex_dup_min_ratio
- complex_dup_max_ratio
- cn_abs_tolerance
- cn_relative_tolerance
- ploidy_tolerance
"""
DEFAULTS.add(
    'min_templated_insertion_length',
    30,
    defn='the minimum distance between two facing breakends for them to be linked by a templated insertion',
)
DEFAULTS.add(
    'chaining_sv_limit',
    2000,
    defn='the maximum total number of logical copies of the variants of a cluster when high ploidy variants are '
    'replicated. Replication counts are scaled down to fit',
)
DEFAULTS.add(
    'min_chaining_ploidy',
    0.05,
    defn='breakends with less remaining ploidy than this are not linked',
)
DEFAULTS.add(
    'max_iterations_without_link',
    5,
    defn='the chaining of a cluster is abandoned once more than this many consecutive iterations fail to link',
)
DEFAULTS.add(
    'complex_dup_min_ratio',
    2.0,
    defn='the smallest ratio of the ploidy of the duplicated variant to the duplicating variant for a complex '
    'duplication',
)
DEFAULTS.add(
    'complex_dup_max_ratio',
    4.0,
    defn='the largest ratio of the ploidy of the duplicated variant to the duplicating variant for a complex '
    'duplication',
)
DEFAULTS.add('cn_abs_tolerance', 0.5, defn='ploidies differing by no more than this are matched')
DEFAULTS.add('cn_relative_tolerance', 0.15, defn='ploidies differing by no more than this fraction are matched')
DEFAULTS.add(
    'ploidy_tolerance',
    0.05,
    defn='the amount by which the ploidy linked at a breakend may exceed the ploidy of its variant',
)
DEFAULTS.add(
    'dm_ploidy_threshold',
    8.0,
    defn='the minimum ploidy of a duplication for it to be a candidate double minute',
)
DEFAULTS.add(
    'dm_adjacent_ploidy_ratio',
    2.3,
    defn='the minimum ratio of the ploidy of a duplication to the major allele ploidy outside it for a candidate '
    'double minute',
)
