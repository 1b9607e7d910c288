r"""
Implements assignment with Crouse's shortest augmenting path algorithm, which
solves rectangular cost matrices directly.
"""

from __future__ import annotations

import math
from typing import Tuple

import torch
import torch.fx
import typing_extensions as TX

from ..solvers import Status, solve_rectangular_assignment
from ._base import Assignment
from ._utils import as_numpy, extend_cost, gate_cost, split_matches

__all__ = ["Crouse", "crouse_assignment"]


class Crouse(Assignment):
    """
    See :func:`.crouse_assignment` for details.
    """

    @TX.override
    def _assign(
        self, cost_matrix: torch.Tensor
    ) -> Tuple[torch.Tensor, torch.Tensor, torch.Tensor]:
        return crouse_assignment(cost_matrix, self.threshold)


def crouse_assignment(
    cost_matrix: torch.Tensor, threshold: float
) -> Tuple[torch.Tensor, torch.Tensor, torch.Tensor]:
    """
    Perform linear assignment on a rectangular cost matrix.

    Without a threshold, the smaller side of the matrix is matched completely when
    the forbidden pairings allow it. Otherwise, and whenever a finite threshold is
    set, the extended problem of :func:`.extend_cost` is solved such that rows and
    columns are left unmatched rather than paired above the threshold.

    Parameters
    ----------
    cost_matrix : torch.Tensor
        A 2D tensor representing the cost matrix.
    threshold : float
        Pairings at or above this cost are forbidden.

    Returns
    -------
    matches : torch.Tensor
        A tensor containing the indices of matched row-column pairs.
    unmatched_rows : torch.Tensor
        A tensor containing the indices of unmatched rows.
    unmatched_cols : torch.Tensor
        A tensor containing the indices of unmatched columns.
    """

    device = cost_matrix.device
    cost = gate_cost(as_numpy(cost_matrix), threshold)

    solution = None
    if not math.isfinite(threshold):
        solution = solve_rectangular_assignment(cost)
    if solution is None or solution.status == Status.INFEASIBLE:
        solution = solve_rectangular_assignment(extend_cost(cost, threshold))

    solution = solution.unwrap()

    return split_matches(cost, solution.row_ind, solution.col_ind, device=device)


torch.fx.wrap("crouse_assignment")
