"""
per-sample calibration of the length above which a deletion or duplication is considered long
"""
from collections import namedtuple
from typing import Iterable

import numpy as np

from ..constants import SVTYPE
from ..util import round_half_up
from ..variant import StructuralVariant


class LengthCutoffs(namedtuple('LengthCutoffs', ['deletion', 'duplication'])):
    """
    Attributes:
        deletion (int): deletions longer than this are long
        duplication (int): duplications longer than this are long
    """

    def exceeds(self, variant: StructuralVariant) -> bool:
        if variant.type == SVTYPE.DEL:
            return variant.length > self.deletion
        elif variant.type == SVTYPE.DUP:
            return variant.length > self.duplication
        return False


def _trimmed_cutoff(lengths, trim_count, min_cutoff, max_cutoff):
    if not lengths:
        return min_cutoff
    lengths = np.sort(np.array(lengths, dtype=np.int64))
    cutoff_index = max(len(lengths) - trim_count - 1, 0)
    return int(min(max(lengths[cutoff_index], min_cutoff), max_cutoff))


def calculate_length_cutoffs(
    variants: Iterable[StructuralVariant],
    min_del_dup_cutoff: int = 100000,
    max_del_dup_cutoff: int = 5000000,
    del_dup_trim_count: int = 5,
    max_arm_count: int = 41,
) -> LengthCutoffs:
    """
    The cutoffs are taken from the distribution of deletion and duplication lengths on the chromosome arms
    without any inversion. The longest are trimmed in proportion to the number of arms used and the result
    is kept within the minimum and maximum cutoff
    """
    arms = {}
    for variant in variants:
        if variant.is_single or variant.is_cross_arm:
            continue
        arms.setdefault((variant.start.chr, variant.start.arm), []).append(variant)

    deletions = []
    duplications = []
    simple_arm_count = 0
    for arm_variants in arms.values():
        if any([v.type == SVTYPE.INV for v in arm_variants]):
            continue
        simple_arm_count += 1
        deletions.extend([v.length for v in arm_variants if v.type == SVTYPE.DEL])
        duplications.extend([v.length for v in arm_variants if v.type == SVTYPE.DUP])

    trim_count = round_half_up(simple_arm_count / max_arm_count * del_dup_trim_count)
    return LengthCutoffs(
        _trimmed_cutoff(deletions, trim_count, min_del_dup_cutoff, max_del_dup_cutoff),
        _trimmed_cutoff(duplications, trim_count, min_del_dup_cutoff, max_del_dup_cutoff),
    )
