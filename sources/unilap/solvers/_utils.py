r"""
Various utilities for working with assignment problems.
"""

from __future__ import annotations

import numpy as np
import numpy.typing as NP

__all__ = ["gather_total_cost", "reduced_costs", "is_dual_feasible"]


def gather_total_cost(
    cost: NP.NDArray[np.floating], rowsol: NP.NDArray[np.integer]
) -> np.floating:
    """
    Gather the total cost of an assignment. This amounts to summing all the assigned
    items from the cost matrix.

    Parameters
    ----------
    cost: NDArray[N, M]
        The cost matrix.
    rowsol: NDArray[N]
        The column assigned to every row, negative for unassigned rows.

    Returns
    -------
        The total cost of the assignment, in the dtype of the cost matrix.
    """
    rows = np.flatnonzero(rowsol >= 0)
    return cost[rows, rowsol[rows]].sum(dtype=cost.dtype)


def reduced_costs(
    cost: NP.NDArray[np.floating],
    u: NP.NDArray[np.floating],
    v: NP.NDArray[np.floating],
) -> NP.NDArray[np.floating]:
    return cost - u[:, None] - v[None, :]


def is_dual_feasible(
    cost: NP.NDArray[np.floating],
    rowsol: NP.NDArray[np.integer],
    u: NP.NDArray[np.floating],
    v: NP.NDArray[np.floating],
    *,
    rtol: float = 1e-5,
) -> bool:
    """
    Check whether the potentials ``u`` and ``v`` certify the optimality of
    ``rowsol``: reduced costs are zero on every matched pair and non-negative on
    every finite pair.

    The tolerance scales with the largest finite magnitude in the matrix.
    """
    finite = np.isfinite(cost)
    if not finite.any():
        return True

    scale = max(1.0, float(np.abs(cost[finite]).max()))
    tol = rtol * scale * max(cost.shape)

    reduced = reduced_costs(cost, u, v)
    if (reduced[finite] < -tol).any():
        return False

    rows = np.flatnonzero(rowsol >= 0)
    matched = reduced[rows, rowsol[rows]]
    return bool(np.all(np.abs(matched) <= tol))
