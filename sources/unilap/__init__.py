r"""
UniLAP
======

This module solves the linear assignment problem (LAP) over a cost matrix.

.. math::

    \min_{x} \sum_{i,j} C_{ij} x_{ij}

Each row is matched to at most one column and each column to at most one row,
such that the smaller dimension of the matrix is fully matched.

Terminology
-----------

- **Cost matrix**: An N x M matrix where entry ``(i, j)`` is the cost of matching
    row ``i`` to column ``j``. Forbidden pairings have cost ``+inf``.

- **Assignment**: The matched row-column pairs, where unmatched indices are
    marked with ``-1``.

- **Potentials**: Dual variables ``u`` (rows) and ``v`` (columns) that certify
    the optimality of an assignment.
"""

from __future__ import annotations

__version__ = "1.0.0"

from . import assignment, consts, debug, solvers
from .solvers import (
    DenseSolution,
    InfeasibleCostMatrix,
    InvalidCostMatrix,
    PreconditionViolation,
    RectangularSolution,
    SolverError,
    Status,
    solve_assignment,
    solve_rectangular_assignment,
)
