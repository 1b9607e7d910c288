"""
This package implements solvers for the Linear Assignment Problem (LAP), where a
one-to-one matching of minimal (or maximal) total cost must be computed over a
cost matrix.

Two strategies are available:

- :func:`solve_assignment` uses the Jonker-Volgenant algorithm and trusts its
  caller to pass a finite matrix that admits a complete matching.
- :func:`solve_rectangular_assignment` uses Crouse's shortest augmenting path
  algorithm and reports invalid or infeasible matrices with a :class:`Status`.
"""

from __future__ import annotations

from ._crouse import *
from ._jonker import *
from ._status import *
from ._transform import *
from ._utils import *
