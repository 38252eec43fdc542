"""Exceptions raised by the pseudo-marginal sampler."""


class PMMHError(Exception):
    """Base class for all sampler errors."""


class InvalidParameter(PMMHError, ValueError):
    """A run parameter is out of range or has the wrong type.

    Raised before any iteration runs, so no partial trace exists.
    """


class DimensionMismatch(PMMHError, ValueError):
    """A supplied function returned a value of the wrong shape.

    Proposals must have the same shape ``(m,)`` as the initial state and
    density evaluations must be a single value.
    """


class NumericalDegenerate(PMMHError, ArithmeticError):
    """The log acceptance ratio is NaN.

    Only raised with ``nan_policy="raise"``; the default policy rejects.
    """
