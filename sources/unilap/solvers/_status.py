r"""
Status codes and errors shared by the solvers.
"""

from __future__ import annotations

import enum

__all__ = [
    "Status",
    "PreconditionViolation",
    "SolverError",
    "InfeasibleCostMatrix",
    "InvalidCostMatrix",
]


class Status(enum.IntEnum):
    """
    Outcome of a rectangular assignment solve.
    """

    OK = 0
    INFEASIBLE = -1
    INVALID = -2


class PreconditionViolation(ValueError):
    """
    The caller broke the calling contract of a solver, e.g. by passing a flat
    buffer that does not match the given shape or output buffers of the wrong
    size. This is a programming error, not a property of the cost matrix.
    """


class SolverError(RuntimeError):
    """
    Base class for errors that describe a cost matrix that cannot be solved.
    """

    status: Status


class InfeasibleCostMatrix(SolverError):
    """No matching of size ``min(nr, nc)`` avoids every forbidden pairing."""

    status = Status.INFEASIBLE


class InvalidCostMatrix(SolverError):
    """The cost matrix contains ``NaN`` or ``-inf``."""

    status = Status.INVALID
