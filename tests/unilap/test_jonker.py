r"""
Tests for ``unilap.solve_assignment``.
"""

from __future__ import annotations

import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from matrices import random_cost, reference_cost

import unilap
from unilap.solvers import gather_total_cost, is_dual_feasible


def check_consistent(rowsol: np.ndarray, colsol: np.ndarray) -> None:
    for i, j in enumerate(rowsol):
        if j >= 0:
            assert colsol[j] == i, (i, j)
    for j, i in enumerate(colsol):
        if i >= 0:
            assert rowsol[i] == j, (i, j)
    assert (rowsol >= 0).sum() == min(len(rowsol), len(colsol))


@settings(deadline=None, max_examples=60)
@given(
    nr=st.integers(1, 9),
    nc=st.integers(1, 9),
    seed=st.integers(0, 2**16),
    integer=st.booleans(),
)
def test_solution_structure(nr, nc, seed, integer):
    cost = random_cost(seed, (nr, nc), integer=integer)

    sol = unilap.solve_assignment(cost)

    assert sol.rowsol.shape == (nr,)
    assert sol.colsol.shape == (nc,)
    check_consistent(sol.rowsol, sol.colsol)
    assert sol.cost == pytest.approx(gather_total_cost(cost, sol.rowsol))
    assert sol.cost == pytest.approx(reference_cost(cost), abs=1e-9)


@settings(deadline=None, max_examples=40)
@given(
    nr=st.integers(1, 8),
    nc=st.integers(1, 8),
    seed=st.integers(0, 2**16),
    integer=st.booleans(),
)
def test_dual_certificate(nr, nc, seed, integer):
    cost = random_cost(seed, (nr, nc), integer=integer)

    sol = unilap.solve_assignment(cost)

    assert sol.u.shape == (nr,)
    assert sol.v.shape == (nc,)
    assert is_dual_feasible(cost, sol.rowsol, sol.u, sol.v)


def test_maximize_returns_maximum():
    cost = np.array([[4.0, 1.0, 3.0], [2.0, 0.0, 5.0], [3.0, 2.0, 2.0]])

    sol = unilap.solve_assignment(cost, maximize=True)

    assert sol.cost == 11.0
    assert sol.rowsol.tolist() == [0, 2, 1]
    assert sol.colsol.tolist() == [0, 2, 1]


def test_unassigned_sentinel():
    cost = random_cost(2, (5, 3))

    sol = unilap.solve_assignment(cost)

    assert (sol.rowsol == unilap.consts.UNASSIGNED).sum() == 2
    assert (sol.colsol >= 0).all()


def test_out_buffers():
    cost = random_cost(3, (3, 5))
    rowsol = np.empty(3, dtype=np.int32)
    colsol = np.empty(5, dtype=np.int64)

    sol = unilap.solve_assignment(cost, out=(rowsol, colsol))

    assert sol.rowsol is rowsol
    assert sol.colsol is colsol
    check_consistent(rowsol, colsol)


@pytest.mark.parametrize(
    "out",
    [
        (np.empty(2, dtype=np.intp), np.empty(3, dtype=np.intp)),
        (np.empty(3, dtype=np.intp), np.empty(2, dtype=np.intp)),
        (np.empty(3, dtype=np.float64), np.empty(3, dtype=np.intp)),
        (np.empty(3, dtype=np.uint32), np.empty(3, dtype=np.intp)),
        (np.empty((3, 1), dtype=np.intp), np.empty(3, dtype=np.intp)),
        ([0, 0, 0], np.empty(3, dtype=np.intp)),
        (np.empty(3, dtype=np.intp),),
    ],
)
def test_out_buffers_checked(out):
    with pytest.raises(unilap.PreconditionViolation):
        unilap.solve_assignment(np.ones((3, 3)), out=out)


@pytest.mark.parametrize("dtype", [np.float32, np.float64])
def test_precision(dtype):
    cost = random_cost(5, (6, 6), dtype=dtype)

    sol = unilap.solve_assignment(cost)

    assert isinstance(sol.cost, dtype)
    assert sol.u.dtype == dtype
    assert sol.v.dtype == dtype
    assert is_dual_feasible(cost, sol.rowsol, sol.u, sol.v, rtol=1e-4)


def test_forced_precision():
    cost = random_cost(6, (4, 4))

    sol = unilap.solve_assignment(cost, dtype=np.float32)

    assert sol.u.dtype == np.float32
    assert sol.cost == pytest.approx(reference_cost(cost), rel=1e-5, abs=1e-5)


def test_flat_buffer():
    cost = random_cost(4, (5, 3))

    flat = unilap.solve_assignment(cost.ravel(), shape=(5, 3))
    full = unilap.solve_assignment(cost)

    assert flat.cost == full.cost
    assert np.array_equal(flat.rowsol, full.rowsol)
    assert np.array_equal(flat.colsol, full.colsol)


def test_trace():
    events = []

    def tracer(event, **fields):
        events.append((event, fields))

    # Every row prefers column 0
    cost = np.array([[0.0, 1.0, 1.0], [0.0, 1.0, 1.0], [0.0, 1.0, 1.0]])
    sol = unilap.solve_assignment(cost, trace=tracer)

    names = [e for e, _ in events]
    assert names[:2] == ["row_reduction", "row_reduction"]
    assert names[-1] == "done"
    assert all(n == "augment" for n in names[2:-1])
    assert all(f["solver"] == "jv" for _, f in events)
    assert events[-1][1]["cost"] == sol.cost == 2.0


def forbidden_cost(seed, shape, integer):
    """
    Cost matrix with random ``+inf`` pairings that keeps a feasible full
    matching, some rows being left with a single allowed column.
    """
    rng = np.random.default_rng(seed)
    nr, nc = shape
    cost = random_cost(seed, shape, integer=integer)

    forbidden = rng.random(shape) < 0.5
    forbidden[rng.random(nr) < 0.3] = True
    forbidden[np.arange(nr), rng.permutation(nc)[:nr]] = False
    cost[forbidden] = np.inf
    return cost


@settings(deadline=None, max_examples=60)
@given(
    nr=st.integers(1, 8),
    extra=st.integers(0, 3),
    seed=st.integers(0, 2**16),
    integer=st.booleans(),
)
def test_forbidden_pairings(nr, extra, seed, integer):
    cost = forbidden_cost(seed, (nr, nr + extra), integer)

    sol = unilap.solve_assignment(cost)

    check_consistent(sol.rowsol, sol.colsol)
    assert (sol.rowsol >= 0).all()
    assert np.isfinite(cost[np.arange(nr), sol.rowsol]).all()
    assert sol.cost == pytest.approx(reference_cost(cost), abs=1e-9)


def test_forbidden_single_choice():
    cost = np.array(
        [
            [np.inf, 4.0, np.inf],
            [1.0, 2.0, 3.0],
            [np.inf, np.inf, 7.0],
        ]
    )

    sol = unilap.solve_assignment(cost)

    assert sol.rowsol.tolist() == [1, 0, 2]
    assert sol.cost == 12.0
