"""Exception hierarchy.

Precondition violations raise ``ValueError``. Everything under
``ContractViolation`` is a fatal fault: the optimizer never catches it and it
is expected to terminate the process.
"""


class ByteDescentError(Exception):
    """Base class for errors raised by byte_descent."""


class ContractViolation(ByteDescentError):
    """Internal invariant broken; not recoverable by the caller."""


class UnreachableClassification(ContractViolation):
    """A finite-difference probe matched no classification rule.

    Under a total order on integers this cannot happen, so it almost always
    means the objective returned different values for the same input.
    """

    def __init__(self, index: int, f0: int, f_plus: int, f_minus: int) -> None:
        self.index = index
        self.f0 = f0
        self.f_plus = f_plus
        self.f_minus = f_minus
        super().__init__(
            f"unclassifiable probe at dimension {index}: "
            f"f0={f0} f_plus={f_plus} f_minus={f_minus} (is the objective deterministic?)"
        )


class EntropyError(ContractViolation):
    """The entropy channel could not deliver the requested bytes."""
