r"""
Various utilities for working with assignment problems.
"""

from __future__ import annotations

import math
from typing import Tuple

import numpy as np
import numpy.typing as NP
import torch
from torch import Tensor

__all__ = ["gather_total_cost", "gate_cost", "extend_cost", "split_matches"]


def gather_total_cost(cost_matrix: Tensor, assignment: Tensor) -> Tensor:
    """
    Gather the total cost of an assignment. The amounts to summing all the assigned
    items from the cost matrix.

    Parameters
    ----------
    cost_matrix: Tensor[N, M]
        The cost matrix.
    assignment: Tensor[K, 2]
        The assignment tensor of row-column pairs.

    Returns
    -------
    Tensor[*]
        The total cost of the assignment.
    """

    return cost_matrix[assignment[:, 0], assignment[:, 1]].sum()


def as_numpy(cost_matrix: Tensor) -> NP.NDArray[np.floating]:
    dtype = torch.float64 if cost_matrix.dtype == torch.float64 else torch.float32
    return cost_matrix.detach().to(device="cpu", dtype=dtype).contiguous().numpy()


def gate_cost(
    cost: NP.NDArray[np.floating], threshold: float
) -> NP.NDArray[np.floating]:
    """
    Forbid all pairings that are not finite or reach the threshold.
    """
    with np.errstate(invalid="ignore"):
        return np.where(np.isfinite(cost) & (cost < threshold), cost, np.inf)


def extend_cost(
    cost: NP.NDArray[np.floating], cost_limit: float
) -> NP.NDArray[np.floating]:
    """
    Extend an N x M cost matrix to a square (N+M) x (N+M) matrix that always has a
    complete assignment.

    Every row gains a dummy column and every column a dummy row at a cost of
    ``cost_limit / 2``, such that leaving a row and a column unmatched costs the
    same as matching them at ``cost_limit``. Entries at or above the limit are
    clipped to it. When the limit is infinite, a finite limit is derived that
    exceeds any difference in total cost between two assignments, so that the
    number of matches is maximized first.

    Parameters
    ----------
    cost: NDArray[N, M]
        The gated cost matrix.
    cost_limit: float
        Cost at which a pairing is no better than leaving both sides unmatched.

    Returns
    -------
    NDArray[N+M, N+M]
        The extended cost matrix.
    """
    n, m = cost.shape
    finite = np.isfinite(cost)

    if not math.isfinite(cost_limit):
        magnitude = float(np.abs(cost[finite]).max()) if finite.any() else 0.0
        cost_limit = 2.0 * (min(n, m) + 1) * (magnitude + 1.0)

    extended = np.full((n + m, n + m), cost_limit / 2, dtype=cost.dtype)
    extended[:n, :m] = np.where(finite & (cost < cost_limit), cost, cost_limit)
    extended[n:, m:] = 0

    return extended


def split_matches(
    cost: NP.NDArray[np.floating],
    row_ind: NP.NDArray[np.integer],
    col_ind: NP.NDArray[np.integer],
    device: torch.device | str = "cpu",
) -> Tuple[Tensor, Tensor, Tensor]:
    """
    Convert matched pairs of a (possibly extended) solution into matches, unmatched
    rows and unmatched columns of the N x M matrix ``cost``. Pairs that hit a dummy
    row or column, or a forbidden entry, are dropped.
    """
    n, m = cost.shape

    row_ind = np.asarray(row_ind)
    col_ind = np.asarray(col_ind)
    keep = (row_ind >= 0) & (row_ind < n) & (col_ind >= 0) & (col_ind < m)
    row_ind, col_ind = row_ind[keep], col_ind[keep]

    keep = np.isfinite(cost[row_ind, col_ind])
    row_ind, col_ind = row_ind[keep], col_ind[keep]

    matches = torch.from_numpy(np.column_stack((row_ind, col_ind))).long()
    unmatch_row = torch.from_numpy(np.setdiff1d(np.arange(n), row_ind)).long()
    unmatch_col = torch.from_numpy(np.setdiff1d(np.arange(m), col_ind)).long()

    return matches.to(device), unmatch_row.to(device), unmatch_col.to(device)
