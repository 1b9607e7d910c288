r"""
Jonker-Volgenant algorithm for dense linear assignment problems.

    R. Jonker and A. Volgenant. A shortest augmenting path algorithm for dense
    and sparse linear assignment problems. Computing 38, 325-340, 1987.

The solver runs two passes of *augmenting row reduction*, which usually assigns
most rows cheaply, and completes the remaining free rows with a Dijkstra-style
shortest augmenting path search over the columns.

This solver trusts its caller: the cost matrix must be free of ``NaN`` and
``-inf`` and must admit a complete matching on its smaller dimension. No check
is made, use :func:`.solve_rectangular_assignment` when the input is not
known to be well-formed.
"""

from __future__ import annotations

import typing as T

import numpy as np
import numpy.typing as NP

from ..consts import INDEX_DTYPE, UNASSIGNED
from ..debug import Tracer, resolve_tracer
from ._transform import as_cost_matrix, check_output, normalize, restore_dense, unassigned
from ._utils import gather_total_cost

__all__ = ["DenseSolution", "solve_assignment", "jonker_volgenant"]


class DenseSolution(T.NamedTuple):
    """
    Solution of :func:`.solve_assignment`.

    Attributes
    ----------
    cost
        Achieved optimal total cost of the caller's matrix.
    rowsol
        Column assigned to every row, ``-1`` when unassigned.
    colsol
        Row assigned to every column, ``-1`` when unassigned.
    u, v
        Row and column potentials that certify the solution (of the negated
        matrix when maximizing).
    """

    cost: np.floating
    rowsol: NP.NDArray[np.integer]
    colsol: NP.NDArray[np.integer]
    u: NP.NDArray[np.floating]
    v: NP.NDArray[np.floating]


def solve_assignment(
    cost: NP.ArrayLike,
    maximize: bool = False,
    *,
    shape: T.Optional[T.Tuple[int, int]] = None,
    dtype: T.Optional[NP.DTypeLike] = None,
    out: T.Optional[T.Sequence[NP.NDArray[np.integer]]] = None,
    trace: T.Optional[Tracer] = None,
) -> DenseSolution:
    """
    Solve the linear assignment problem with the Jonker-Volgenant algorithm.

    Parameters
    ----------
    cost
        Cost matrix (N x M), or a flat row-major buffer when ``shape`` is given.
    maximize, optional
        Maximize the total cost instead of minimizing it.
    shape, optional
        Dimensions of a flat ``cost`` buffer.
    dtype, optional
        Solve in ``float32`` or ``float64``, see :func:`.as_cost_matrix`.
    out, optional
        Tuple of integer arrays of length N and M that receive ``rowsol`` and
        ``colsol``.
    trace, optional
        Observer that receives progress events.

    Returns
    -------
        The optimal cost, assignment and dual potentials.
    """

    cost = as_cost_matrix(cost, shape, dtype)
    nr, nc = cost.shape
    buffers = check_output(out, (nr, nc))
    trace = resolve_tracer(trace)

    problem = normalize(cost, maximize)
    if problem.is_trivial:
        rowsol, colsol = unassigned(nr), unassigned(nc)
        u = np.zeros(nr, dtype=cost.dtype)
        v = np.zeros(nc, dtype=cost.dtype)
    else:
        rowsol, colsol, u, v = restore_dense(
            problem, *jonker_volgenant(problem.cost, trace)
        )

    total = gather_total_cost(cost, rowsol)
    if trace is not None:
        trace("done", solver="jv", cost=total)

    if buffers is not None:
        buffers[0][...] = rowsol
        buffers[1][...] = colsol
        rowsol, colsol = buffers

    return DenseSolution(total, rowsol, colsol, u, v)


def _find_umins(
    row: NP.NDArray[np.floating],
    v: NP.NDArray[np.floating],
    colsol: NP.NDArray[np.intp],
) -> T.Tuple[np.floating, np.floating, int, int]:
    """
    Find the minimum and second minimum reduced cost of a row, and their columns.

    ``j1`` is the first column attaining the minimum. ``j2`` is taken among the
    columns attaining the second minimum, preferring an unassigned one.
    """
    h = row - v
    j1 = int(np.argmin(h))
    umin = h[j1]
    if h.shape[0] == 1:
        return umin, umin, j1, UNASSIGNED

    h[j1] = np.inf
    rest_min = h.min()
    usubmin = min(rest_min, np.finfo(h.dtype).max)

    tied = h == rest_min
    tied[j1] = False
    ties = np.flatnonzero(tied)
    free_ties = ties[colsol[ties] < 0]
    j2 = int(free_ties[0] if free_ties.size > 0 else ties[0])

    return umin, usubmin, j1, j2


def _augmenting_row_reduction(
    cost: NP.NDArray[np.floating],
    rowsol: NP.NDArray[np.intp],
    colsol: NP.NDArray[np.intp],
    v: NP.NDArray[np.floating],
    free: T.List[int],
    num_free: int,
) -> int:
    # Rows displaced without a price change are collected at the front of
    # ``free``, which never overtakes the read position ``k``.
    k = 0
    prev_num_free = num_free
    num_free = 0
    while k < prev_num_free:
        i = free[k]
        k += 1

        umin, usubmin, j1, j2 = _find_umins(cost[i], v, colsol)

        i0 = int(colsol[j1])
        vj1_new = v[j1] - (usubmin - umin)
        vj1_lowers = vj1_new < v[j1]
        if vj1_lowers:
            # Raise the minimum reduced cost of the row to its subminimum
            v[j1] = vj1_new
        elif i0 >= 0:
            # Minimum and subminimum tie and j1 is taken, try j2 instead
            j1 = j2
            i0 = int(colsol[j2])

        rowsol[i] = j1
        colsol[j1] = i

        if i0 >= 0:
            if vj1_lowers:
                # Continue the augmenting path i - j1 with i0
                k -= 1
                free[k] = i0
            else:
                free[num_free] = i0
                num_free += 1

    return num_free


def _collect_minimum(
    d: NP.NDArray[np.floating], collist: NP.NDArray[np.intp], low: int
) -> T.Tuple[int, np.floating]:
    """
    Move all unscanned columns with the smallest distance to ``collist[low:up]``.
    """
    up = low
    dmin = d[collist[up]]
    up += 1

    start = up
    js = collist[start:].copy()
    vals = d[js]
    if vals.shape[0] == 0:
        return up, dmin

    # Only values at or below the running minimum move, every other column
    # stays in place.
    running = np.minimum(np.minimum.accumulate(vals), dmin)
    before = np.empty_like(vals)
    before[0] = dmin
    before[1:] = running[:-1]

    for t in np.flatnonzero(vals <= before):
        k = start + int(t)
        if vals[t] < dmin:
            up = low
            dmin = vals[t]
        collist[k] = collist[up]
        collist[up] = js[t]
        up += 1

    return up, dmin


def _relax(
    cost: NP.NDArray[np.floating],
    v: NP.NDArray[np.floating],
    colsol: NP.NDArray[np.intp],
    d: NP.NDArray[np.floating],
    pred: NP.NDArray[np.intp],
    collist: NP.NDArray[np.intp],
    i: int,
    h: np.floating,
    dmin: np.floating,
    up: int,
) -> T.Tuple[int, int]:
    """
    Update the distances of all unscanned columns through row ``i``. Returns the
    new end of the frontier and an unassigned column at the current minimum
    distance, if one was reached.
    """
    start = up
    js = collist[start:].copy()
    v2 = cost[i, js] - v[js] - h

    improved = v2 < d[js]
    tie_pos = np.flatnonzero(improved & (v2 == dmin))
    stop_pos = tie_pos[colsol[js[tie_pos]] < 0]
    limit = int(stop_pos[0]) if stop_pos.size > 0 else js.shape[0]

    upd = np.flatnonzero(improved[:limit])
    pred[js[upd]] = i
    d[js[upd]] = v2[upd]

    # Assigned columns found at the current minimum join the frontier
    for t in tie_pos[tie_pos < limit]:
        k = start + int(t)
        collist[k] = collist[up]
        collist[up] = js[t]
        up += 1

    if stop_pos.size > 0:
        j = int(js[limit])
        pred[j] = i
        return up, j
    return up, UNASSIGNED


def _augment(
    cost: NP.NDArray[np.floating],
    rowsol: NP.NDArray[np.intp],
    colsol: NP.NDArray[np.intp],
    v: NP.NDArray[np.floating],
    freerow: int,
) -> None:
    m = cost.shape[1]

    d = cost[freerow] - v
    pred = np.full(m, freerow, dtype=INDEX_DTYPE)
    collist = np.arange(m, dtype=INDEX_DTYPE)

    # Columns in collist[:low] are settled, collist[low:up] are at the current
    # minimum distance and collist[up:] are still to be scanned.
    low = 0
    up = 0
    last = 0
    dmin = d[0]
    endofpath = UNASSIGNED
    while endofpath < 0:
        if up == low:
            last = low - 1
            up, dmin = _collect_minimum(d, collist, low)

            frontier = collist[low:up]
            free_cols = frontier[colsol[frontier] < 0]
            if free_cols.size > 0:
                endofpath = int(free_cols[0])
                break

        j1 = int(collist[low])
        low += 1
        i = int(colsol[j1])
        h = cost[i, j1] - v[j1] - dmin
        up, endofpath = _relax(cost, v, colsol, d, pred, collist, i, h, dmin, up)

    # Update column prices
    settled = collist[: last + 1]
    v[settled] = v[settled] + d[settled] - dmin

    # Flip assignments along the alternating path
    while True:
        i = int(pred[endofpath])
        colsol[endofpath] = i
        j1 = endofpath
        endofpath = int(rowsol[i])
        rowsol[i] = j1
        if i == freerow:
            break


def jonker_volgenant(
    cost: NP.NDArray[np.floating], trace: T.Optional[Tracer] = None
) -> T.Tuple[
    NP.NDArray[np.intp],
    NP.NDArray[np.intp],
    NP.NDArray[np.floating],
    NP.NDArray[np.floating],
]:
    """
    Solve a normalized problem with N <= M rows and columns.

    Returns
    -------
        Column per row (N), row per column (M), row potentials ``u`` and column
        potentials ``v``.
    """
    n, m = cost.shape
    assert n <= m, (n, m)

    rowsol = unassigned(n)
    colsol = unassigned(m)
    v = np.zeros(m, dtype=cost.dtype)

    free = list(range(n))
    num_free = n
    for loop in range(2):
        num_free = _augmenting_row_reduction(cost, rowsol, colsol, v, free, num_free)
        if trace is not None:
            trace("row_reduction", solver="jv", loop=loop + 1, free=num_free)

    for f in range(num_free):
        if trace is not None:
            trace("augment", solver="jv", row=free[f], step=f + 1, free=num_free)
        _augment(cost, rowsol, colsol, v, free[f])

    rows = np.arange(n)
    u = cost[rows, rowsol] - v[rowsol]

    return rowsol, colsol, u, v
