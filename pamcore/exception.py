"""Custom pamcore-only exceptions.
"""


class ImproperlyConfigured(Exception):
    '''The given configuration is incomplete or otherwise not usable.'''
    pass


class InvalidInputKind(ImproperlyConfigured):
    '''The data kind is neither points nor a distance matrix.'''
    pass


class DataInvalid(Exception):
    '''
    The data looks structurally invalid (mismatched array lengths,
    non-square distance matrices, negative numbers where natural numbers
    are expected, etc).
    '''
    pass


class InvalidMedoidSet(DataInvalid):
    """The initial medoids are empty, out of range for the data, or
    reference the same observation more than once.
    """
    pass


class ConvergenceWarning(UserWarning):
    """An iterative procedure has failed to converge after the maximum
    allowed number of iterations."""
    pass
