r"""
Shortest augmenting path algorithm for the rectangular assignment problem,
based on the pseudocode on pages 1685-1686 of:

    D. F. Crouse. On implementing 2D rectangular assignment algorithms.
    IEEE Transactions on Aerospace and Electronic Systems 52(4):1679-1696, 2016.
    doi: 10.1109/TAES.2016.140952

Unlike :mod:`._jonker`, this solver validates its input and reports matrices
that hold ``NaN`` or ``-inf`` as :attr:`.Status.INVALID` and matrices without a
complete matching as :attr:`.Status.INFEASIBLE`.
"""

from __future__ import annotations

import typing as T

import numpy as np
import numpy.typing as NP

from ..consts import INDEX_DTYPE, UNASSIGNED
from ..debug import Tracer, resolve_tracer
from ._status import InfeasibleCostMatrix, InvalidCostMatrix, Status
from ._transform import (
    as_cost_matrix,
    check_output,
    has_invalid_entries,
    normalize,
    restore_pairs,
    unassigned,
)

__all__ = ["RectangularSolution", "solve_rectangular_assignment", "crouse_sap"]


class RectangularSolution(T.NamedTuple):
    """
    Solution of :func:`.solve_rectangular_assignment`.

    Attributes
    ----------
    status
        Outcome of the solve. All other fields are ``None`` unless ``OK``.
    row_ind
        Matched rows in ascending order, ``min(N, M)`` entries.
    col_ind
        Column matched to the row at the same position in ``row_ind``.
    u, v
        Row and column potentials that certify the solution (of the negated
        matrix when maximizing).
    """

    status: Status
    row_ind: T.Optional[NP.NDArray[np.integer]]
    col_ind: T.Optional[NP.NDArray[np.integer]]
    u: T.Optional[NP.NDArray[np.floating]] = None
    v: T.Optional[NP.NDArray[np.floating]] = None

    @property
    def ok(self) -> bool:
        return self.status == Status.OK

    def unwrap(self) -> RectangularSolution:
        """
        Return the solution, or raise a :class:`.SolverError` when the status
        is not ``OK``.
        """
        if self.status == Status.INVALID:
            raise InvalidCostMatrix("Cost matrix contains NaN or -inf entries")
        if self.status == Status.INFEASIBLE:
            raise InfeasibleCostMatrix("Cost matrix has no complete assignment")
        return self


def solve_rectangular_assignment(
    cost: NP.ArrayLike,
    maximize: bool = False,
    *,
    shape: T.Optional[T.Tuple[int, int]] = None,
    dtype: T.Optional[NP.DTypeLike] = None,
    out: T.Optional[T.Sequence[NP.NDArray[np.integer]]] = None,
    trace: T.Optional[Tracer] = None,
) -> RectangularSolution:
    """
    Solve the linear assignment problem for an arbitrary N x M cost matrix.

    Parameters
    ----------
    cost
        Cost matrix (N x M), or a flat row-major buffer when ``shape`` is given.
        Forbidden pairings are ``+inf``.
    maximize, optional
        Maximize the total cost instead of minimizing it.
    shape, optional
        Dimensions of a flat ``cost`` buffer.
    dtype, optional
        Solve in ``float32`` or ``float64``, see :func:`.as_cost_matrix`.
    out, optional
        Tuple of two integer arrays of length ``min(N, M)`` that receive
        ``row_ind`` and ``col_ind``. Left untouched unless the status is ``OK``.
    trace, optional
        Observer that receives progress events.

    Returns
    -------
        Status and, when ``OK``, the matched row-column pairs.
    """

    cost = as_cost_matrix(cost, shape, dtype)
    nr, nc = cost.shape
    size = min(nr, nc)
    buffers = check_output(out, (size, size))
    trace = resolve_tracer(trace)

    problem = normalize(cost, maximize)
    if problem.is_trivial:
        return RectangularSolution(
            Status.OK,
            np.empty(0, dtype=INDEX_DTYPE) if buffers is None else buffers[0],
            np.empty(0, dtype=INDEX_DTYPE) if buffers is None else buffers[1],
            np.zeros(nr, dtype=cost.dtype),
            np.zeros(nc, dtype=cost.dtype),
        )

    if has_invalid_entries(problem.cost):
        if trace is not None:
            trace("invalid", solver="crouse")
        return RectangularSolution(Status.INVALID, None, None)

    solution = crouse_sap(problem.cost, trace)
    if solution is None:
        return RectangularSolution(Status.INFEASIBLE, None, None)

    col4row, u, v = solution
    row_ind, col_ind = restore_pairs(problem, col4row)
    if problem.transposed:
        u, v = v, u

    if trace is not None:
        trace("done", solver="crouse", matched=size)

    if buffers is not None:
        buffers[0][...] = row_ind
        buffers[1][...] = col_ind
        row_ind, col_ind = buffers

    return RectangularSolution(Status.OK, row_ind, col_ind, u, v)


def _augmenting_path(
    cost: NP.NDArray[np.floating],
    u: NP.NDArray[np.floating],
    v: NP.NDArray[np.floating],
    path: NP.NDArray[np.intp],
    row4col: NP.NDArray[np.intp],
    shortest_path_costs: NP.NDArray[np.floating],
    i: int,
    scanned_rows: NP.NDArray[np.bool_],
    scanned_cols: NP.NDArray[np.bool_],
    remaining: NP.NDArray[np.intp],
) -> T.Optional[T.Tuple[int, np.floating]]:
    """
    Find the shortest augmenting path from row ``i`` to an unassigned column.

    Returns
    -------
        The sink column and the length of the path, or ``None`` when no path
        exists.
    """
    nc = cost.shape[1]
    min_val = cost.dtype.type(0)

    # Filled in reverse so that a constant cost matrix yields the identity
    remaining[:] = np.arange(nc - 1, -1, -1, dtype=INDEX_DTYPE)
    num_remaining = nc

    scanned_rows.fill(False)
    scanned_cols.fill(False)
    shortest_path_costs.fill(np.inf)

    while True:
        scanned_rows[i] = True

        rem = remaining[:num_remaining]
        r = min_val + cost[i, rem] - u[i] - v[rem]
        better = r < shortest_path_costs[rem]
        path[rem[better]] = i
        shortest_path_costs[rem[better]] = r[better]

        # On ties prefer a column that completes the path, otherwise the first
        # one scanned
        candidates = shortest_path_costs[rem]
        lowest = candidates.min()
        ties = np.flatnonzero(candidates == lowest)
        free_ties = ties[row4col[rem[ties]] == UNASSIGNED]
        index = int(free_ties[-1] if free_ties.size > 0 else ties[0])

        min_val = lowest
        if min_val == np.inf:
            return None

        j = int(rem[index])
        scanned_cols[j] = True
        num_remaining -= 1
        remaining[index] = remaining[num_remaining]

        if row4col[j] == UNASSIGNED:
            return j, min_val
        i = int(row4col[j])


def crouse_sap(
    cost: NP.NDArray[np.floating], trace: T.Optional[Tracer] = None
) -> T.Optional[
    T.Tuple[NP.NDArray[np.intp], NP.NDArray[np.floating], NP.NDArray[np.floating]]
]:
    """
    Solve a normalized, validated problem with N <= M rows and columns.

    Returns
    -------
        Column per row (N) and the potentials ``u`` (N) and ``v`` (M), or
        ``None`` when the problem is infeasible.
    """
    nr, nc = cost.shape
    assert nr <= nc, (nr, nc)

    u = np.zeros(nr, dtype=cost.dtype)
    v = np.zeros(nc, dtype=cost.dtype)
    shortest_path_costs = np.empty(nc, dtype=cost.dtype)
    path = unassigned(nc)
    col4row = unassigned(nr)
    row4col = unassigned(nc)
    scanned_rows = np.zeros(nr, dtype=bool)
    scanned_cols = np.zeros(nc, dtype=bool)
    remaining = np.empty(nc, dtype=INDEX_DTYPE)

    for cur_row in range(nr):
        found = _augmenting_path(
            cost,
            u,
            v,
            path,
            row4col,
            shortest_path_costs,
            cur_row,
            scanned_rows,
            scanned_cols,
            remaining,
        )
        if found is None:
            if trace is not None:
                trace("infeasible", solver="crouse", row=cur_row)
            return None

        sink, min_val = found
        if trace is not None:
            trace("augment", solver="crouse", row=cur_row, sink=sink, cost=min_val)

        # Update dual variables
        u[cur_row] += min_val
        others = scanned_rows.copy()
        others[cur_row] = False
        u[others] += min_val - shortest_path_costs[col4row[others]]
        v[scanned_cols] -= min_val - shortest_path_costs[scanned_cols]

        # Augment previous solution
        j = sink
        while True:
            i = int(path[j])
            row4col[j] = i
            col4row[i], j = j, int(col4row[i])
            if i == cur_row:
                break

    return col4row, u, v
