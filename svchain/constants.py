"""
controlled vocabularies and reference tables used throughout the svchain package
"""
import os


class SvChainNamespace:
    """
    Namespace to hold module constants and option defaults

    Example:
        >>> nspace = SvChainNamespace(thing=1, otherthing=2)
        >>> nspace.thing
        1
        >>> nspace.otherthing
        2
    """

    def __init__(self, **kwargs):
        object.__setattr__(self, '_defns', {})
        object.__setattr__(self, '_types', {})
        object.__setattr__(self, '_members', {})
        object.__setattr__(self, '_env_prefix', 'SVCHAIN')

        for attr, val in kwargs.items():
            self.add(attr, val)

    def __repr__(self):
        return '{}({})'.format(
            self.__class__.__name__, ', '.join(sorted(['{}={}'.format(k, repr(v)) for k, v in self.items()]))
        )

    def get_env_name(self, attr):
        """
        Example:
            >>> SvChainNamespace(a=1).get_env_name('a')
            'SVCHAIN_A'
        """
        return '{}_{}'.format(self._env_prefix, attr).upper()

    def get_env_var(self, attr):
        """
        the value of the environment variable for an attribute, cast to the type of its default

        Raises:
            KeyError: the environment variable is not set
        """
        env = os.environ[self.get_env_name(attr)].strip()
        return self._types[attr](env)

    def is_env_overwritable(self, attr):
        """
        Returns:
            bool: True if the variable is overridden by specifying the environment variable equivalent
        """
        return False

    def __getattribute__(self, attr):
        try:
            return object.__getattribute__(self, attr)
        except AttributeError as err:
            variables = object.__getattribute__(self, '_members')
            if attr not in variables:
                raise err
            if self.is_env_overwritable(attr):
                try:
                    return self.get_env_var(attr)
                except KeyError:
                    pass
            return variables[attr]

    def __getitem__(self, key):
        return getattr(self, key)

    def __setattr__(self, attr, val):
        raise AttributeError('namespace members are added with add', attr)

    def __contains__(self, attr):
        return attr in self._members

    def keys(self):
        return list(self._members)

    def values(self):
        return [self[k] for k in self._members]

    def items(self):
        """
        Example:
            >>> SvChainNamespace(thing=1, otherthing=2).items()
            [('thing', 1), ('otherthing', 2)]
        """
        return [(k, self[k]) for k in self._members]

    def to_dict(self):
        return dict(self.items())

    def enforce(self, value):
        """
        checks that the current namespace has a given value

        Returns:
            the input value

        Raises:
            KeyError: the value did not exist

        Example:
            >>> SvChainNamespace(thing=1, otherthing=2).enforce(1)
            1
        """
        if value not in self.values():
            raise KeyError('value {0} is not a valid member of '.format(repr(value)), self.values())
        return value

    def define(self, attr):
        """
        Example:
            >>> nspace = SvChainNamespace()
            >>> nspace.add('thing', 1, defn='I am a thing')
            >>> nspace.define('thing')
            'I am a thing'
        """
        return self._defns[attr]

    def add(self, attr, value, defn=None, cast_type=None):
        """
        Add an attribute to the name space

        Args:
            attr (str): name of the attribute being added
            value: the value of the attribute
            defn (str): the definition of the attribute
            cast_type (callable): the function used to cast an environment variable override (the type of the value
                by default)
        """
        if attr.startswith('_'):
            raise ValueError('cannot set private', attr)
        if attr in self._members:
            raise AttributeError('Cannot respecify existing attribute', attr, self._members[attr])
        self._types[attr] = cast_type or type(value)
        if defn:
            self._defns[attr] = defn
        self._members[attr] = value


SVTYPE = SvChainNamespace(
    DEL='DEL',
    DUP='DUP',
    INS='INS',
    INV='INV',
    BND='BND',
    SGL='SGL',
    INF='INF',
)
"""
holds controlled vocabulary for the structural variant types

- ``DEL``: deletion
- ``DUP``: tandem duplication
- ``INS``: insertion
- ``INV``: inversion
- ``BND``: interchromosomal translocation
- ``SGL``: single breakend
- ``INF``: inferred breakend (from copy number alone)
"""

SIMPLE_SVTYPES = {SVTYPE.DEL, SVTYPE.DUP, SVTYPE.INS}

SINGLE_BREAKEND_SVTYPES = {SVTYPE.SGL, SVTYPE.INF}

ORIENT = SvChainNamespace(LEFT=1, RIGHT=-1)
"""
holds controlled vocabulary for allowed orientation values

- ``LEFT``: the segment retained lies to the left (lower positions) of the breakend
- ``RIGHT``: the segment retained lies to the right (higher positions) of the breakend
"""

ARM = SvChainNamespace(P='P', Q='Q')

RESOLVED_TYPE = SvChainNamespace(
    NONE='NONE',
    DEL='DEL',
    DUP='DUP',
    INS='INS',
    INV='INV',
    BND='BND',
    SGL='SGL',
    INF='INF',
    SGL_PAIR_DEL='SGL_PAIR_DEL',
    SGL_PAIR_DUP='SGL_PAIR_DUP',
    SGL_PAIR_INS='SGL_PAIR_INS',
    DUP_BE='DUP_BE',
    LOW_VAF='LOW_VAF',
    DOUBLE_MINUTE='DOUBLE_MINUTE',
    COMPLEX='COMPLEX',
)
"""
tags given to a cluster describing what it was resolved (or left unresolved) as
"""

CLUSTER_REASON = SvChainNamespace(
    PROXIMITY='Prox',
    LOH='LOH',
    HOM_LOSS='HomLoss',
    LONG_DEL_DUP_INV='DelDupInv',
    SOLO_SINGLE='Single',
    DUP_BE='DupBreakend',
    LOW_VAF='LowVaf',
)
"""
reason tags recorded against clusters and variants each time a clustering rule joins them
"""

CHAIN_STATE = SvChainNamespace(
    SEEDING='seeding',
    ASSEMBLING='assembling',
    EXTENDING='extending',
    CLOSED='closed',
    INVALID='invalid',
)

LINK_RULE = SvChainNamespace(
    ASSEMBLY='ASSEMBLY',
    SINGLE_OPTION='ONLY',
    FOLDBACK='FOLDBACK',
    COMPLEX_DUP='COMP_DUP',
    FOLDBACK_PAIR='FB_PAIR',
    PLOIDY_MATCH='PLOIDY_MATCH',
    NEAREST='NEAREST',
    CLOSING='CLOSING',
)
"""
the rule which proposed a committed link, in priority order
"""

CENTROMERES = {
    '1': 123035434,
    '2': 93826171,
    '3': 92004854,
    '4': 51160117,
    '5': 47905641,
    '6': 60330166,
    '7': 59554331,
    '8': 45338887,
    '9': 48867679,
    '10': 40754935,
    '11': 53144205,
    '12': 36356694,
    '13': 17500000,
    '14': 17500000,
    '15': 18500000,
    '16': 36835801,
    '17': 23763006,
    '18': 16960898,
    '19': 26181782,
    '20': 27869569,
    '21': 12788129,
    '22': 14500000,
    'X': 60132012,
    'Y': 11604553,
}
""":class:`dict`: centromere mid-points (GRCh37) used to assign breakends to a chromosome arm"""
