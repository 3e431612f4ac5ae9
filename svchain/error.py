class PloidyAllocationError(Exception):
    """
    raised when committing a link would use more of a breakend than is left to allocate

    the chain builder treats this as local: the link is skipped and other candidates are tried
    """
    pass


class ChainingError(Exception):
    """
    raised when the chain builder reaches a state it cannot continue from (a link instance requested twice, or no
    progress over too many iterations). The cluster is reported as invalid rather than partially chained
    """
    pass


class InvariantViolation(Exception):
    """
    base class for structural errors which invalidate the results for the whole sample
    """
    pass


class ClusterMembershipError(InvariantViolation):
    pass


class ChainStructureError(InvariantViolation):
    pass


class InvalidRearrangement(Exception):
    """
    raised when the breakends given for a structural variant cannot describe its type
    """
    pass
