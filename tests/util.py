import os

import pytest

from svchain.constants import ORIENT, SVTYPE
from svchain.variant import Breakend, StructuralVariant


long_running_test = pytest.mark.skipif(
    os.environ.get('RUN_FULL') != '1',
    reason='Only running FAST tests subset',
)


def _create(svtype, id, start, end=None, ploidy=1.0, start_kwargs=None, end_kwargs=None, **kwargs):
    start = Breakend(*start, **(start_kwargs or {}))
    if end is not None:
        end = Breakend(*end, **(end_kwargs or {}))
    return StructuralVariant(id, svtype, start, end, ploidy=ploidy, **kwargs)


def create_del(id, chr, start, end, **kwargs):
    return _create(SVTYPE.DEL, id, (chr, start, ORIENT.LEFT), (chr, end, ORIENT.RIGHT), **kwargs)


def create_dup(id, chr, start, end, **kwargs):
    return _create(SVTYPE.DUP, id, (chr, start, ORIENT.RIGHT), (chr, end, ORIENT.LEFT), **kwargs)


def create_inv(id, chr, start, end, orient=ORIENT.LEFT, **kwargs):
    return _create(SVTYPE.INV, id, (chr, start, orient), (chr, end, orient), **kwargs)


def create_bnd(id, chr1, pos1, orient1, chr2, pos2, orient2, **kwargs):
    return _create(SVTYPE.BND, id, (chr1, pos1, orient1), (chr2, pos2, orient2), **kwargs)


def create_sgl(id, chr, position, orient, **kwargs):
    return _create(SVTYPE.SGL, id, (chr, position, orient), **kwargs)
