"""
error taxonomy for kinqy.

every error derives from KinqyError and from the builtin family a caller would
naturally catch (ValueError, IndexError, TypeError), so `except ValueError`
keeps working around terminal calls.
"""


class KinqyError(Exception):
    """base class for all kinqy errors"""


class EmptySequence(KinqyError, ValueError):
    """a single-value terminal operation was applied to a sequence with no elements"""

    def __init__(self, message: str = "sequence contains no elements"):
        super().__init__(message)


class NoMatch(KinqyError, ValueError):
    """a predicate-qualified first/last found no matching element"""

    def __init__(self, message: str = "no element satisfies the condition"):
        super().__init__(message)


class IndexOutOfRange(KinqyError, IndexError):
    """indexed access past the end of a sequence"""

    def __init__(self, index: int, message: str = None):
        self.index = index
        super().__init__(message or f"index {index} out of range")


class InvalidSpecification(KinqyError, TypeError):
    """a strategy spec, factory argument or combinator target is not acceptable"""


class UnreduceableEmptySequence(KinqyError, ValueError):
    """reduce_left/reduce_right was applied to an empty sequence (no seed available)"""

    def __init__(self, message: str = "reduce of empty sequence"):
        super().__init__(message)
