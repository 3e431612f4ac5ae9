import logging
import re
from typing import Dict

from .constants import ARM, CENTROMERES, SvChainNamespace

logger = logging.getLogger('svchain')


class WeakSvChainNamespace(SvChainNamespace):
    def is_env_overwritable(self, attr):
        return True


def normalize_chromosome(chrom: str) -> str:
    """
    strip a leading 'chr' prefix so that both naming conventions index the same chromosome

    Example:
        >>> normalize_chromosome('chr1')
        '1'
    """
    return re.sub(r'^chr', '', str(chrom))


def chromosome_sort_key(chrom: str):
    """
    sort key giving natural karyotype order: autosomes numerically, then X, Y and the rest alphabetically
    """
    name = normalize_chromosome(chrom)
    if name.isdigit():
        return (0, int(name), '')
    order = {'X': 1, 'Y': 2, 'MT': 3, 'M': 3}
    return (1, order.get(name, 4), name)


def get_chromosome_arm(chrom: str, position: int) -> str:
    """
    Returns:
        str: the arm (P or Q) of the chromosome containing the position. Chromosomes without a known
        centromere are all P
    """
    centromere = CENTROMERES.get(normalize_chromosome(chrom))
    if centromere is None or position < centromere:
        return ARM.P
    return ARM.Q


def copy_numbers_equal(
    first: float, second: float, abs_tolerance: float = 0.5, relative_tolerance: float = 0.15
) -> bool:
    """
    Check if two copy number (or ploidy) values can be considered the same. They are different only when
    they differ by more than both the absolute and the relative tolerance

    Example:
        >>> copy_numbers_equal(2, 2.4)
        True
        >>> copy_numbers_equal(2, 3)
        False
        >>> copy_numbers_equal(20, 22)
        True
    """
    diff = abs(first - second)
    largest = max(abs(first), abs(second))
    if largest == 0:
        return True
    return not (diff > abs_tolerance and diff / largest > relative_tolerance)


def resolve_options(defaults: SvChainNamespace, overrides: Dict) -> Dict:
    """
    combine a namespace of defaults with any keyword overrides

    Raises:
        TypeError: an override is not a member of the defaults
    """
    result = defaults.to_dict()
    for key, value in overrides.items():
        if key not in result:
            raise TypeError(f'unexpected option ({key}), expected one of {sorted(result.keys())}')
        result[key] = value
    return result


def round_half_up(value: float) -> int:
    """
    round half away from zero rather than to the nearest even

    Example:
        >>> round_half_up(2.5)
        3
        >>> round_half_up(0.49)
        0
    """
    if value < 0:
        return -int(-value + 0.5)
    return int(value + 0.5)
