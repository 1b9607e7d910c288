r"""
Shared preprocessing of cost matrices.

Both solvers operate on a *normalized* problem where the number of rows never
exceeds the number of columns and where the objective is always minimization.
This module produces that problem from the caller's matrix and maps the
solution of the normalized problem back to the caller's orientation.
"""

from __future__ import annotations

import typing as T

import numpy as np
import numpy.typing as NP

from ..consts import COST_DTYPES, INDEX_DTYPE, UNASSIGNED
from ._status import PreconditionViolation

__all__ = [
    "NormalizedProblem",
    "as_cost_matrix",
    "normalize",
    "has_invalid_entries",
    "restore_dense",
    "restore_pairs",
    "check_output",
]


class NormalizedProblem(T.NamedTuple):
    """
    A cost matrix in solver orientation, i.e. ``cost.shape[0] <= cost.shape[1]``
    and negated when the caller asked for maximization.
    """

    cost: NP.NDArray[np.floating]
    shape: T.Tuple[int, int]
    transposed: bool

    @property
    def is_trivial(self) -> bool:
        return min(self.shape) == 0


def _cost_dtype(dtype: np.dtype) -> np.dtype:
    if dtype.kind == "f":
        return np.dtype(np.float32 if dtype.itemsize <= 4 else np.float64)
    if dtype.kind in "iub":
        return np.dtype(np.float64)
    raise PreconditionViolation(f"Unsupported cost matrix dtype: {dtype}")


def as_cost_matrix(
    cost: NP.ArrayLike,
    shape: T.Optional[T.Tuple[int, int]] = None,
    dtype: T.Optional[NP.DTypeLike] = None,
) -> NP.NDArray[np.floating]:
    """
    Interpret ``cost`` as a 2-D floating point cost matrix without copying where
    possible.

    Parameters
    ----------
    cost
        Cost matrix (N x M), or a flat row-major buffer of N * M entries when
        ``shape`` is given.
    shape, optional
        The dimensions ``(N, M)`` of a flat buffer.
    dtype, optional
        Element type to solve in, either ``float32`` or ``float64``. By default
        floating point inputs keep their precision and integer inputs are
        promoted to ``float64``.

    Returns
    -------
        Cost matrix (N x M).
    """

    arr = np.asarray(cost)

    if dtype is None:
        target = _cost_dtype(arr.dtype)
    else:
        target = np.dtype(dtype)
        if target not in COST_DTYPES:
            raise PreconditionViolation(
                f"Cost dtype must be float32 or float64, got {target}"
            )
    if arr.dtype != target:
        arr = arr.astype(target)

    if shape is not None:
        nr, nc = (int(s) for s in shape)
        if nr < 0 or nc < 0:
            raise PreconditionViolation(f"Invalid shape {shape}")
        if arr.size != nr * nc:
            raise PreconditionViolation(
                f"Buffer of {arr.size} entries does not match shape ({nr}, {nc})"
            )
        arr = arr.reshape(nr, nc)
    elif arr.ndim != 2:
        raise PreconditionViolation(
            f"Cost matrix must have 2 dimensions, got {arr.ndim}"
        )

    return arr


def normalize(cost: NP.NDArray[np.floating], maximize: bool) -> NormalizedProblem:
    """
    Transpose tall matrices and negate for maximization. The caller's matrix is
    only copied when one of these transforms applies.
    """
    nr, nc = cost.shape

    transposed = nr > nc
    if transposed:
        cost = np.ascontiguousarray(cost.T)
    if maximize:
        cost = np.negative(cost)

    return NormalizedProblem(cost, (nr, nc), transposed)


def has_invalid_entries(cost: NP.NDArray[np.floating]) -> bool:
    """
    Whether the matrix holds ``NaN`` or ``-inf``. Positive infinity is a
    forbidden pairing and thus valid.
    """
    return bool(np.isnan(cost).any() or np.isneginf(cost).any())


def restore_dense(
    problem: NormalizedProblem,
    rowsol: NP.NDArray[np.intp],
    colsol: NP.NDArray[np.intp],
    u: NP.NDArray[np.floating],
    v: NP.NDArray[np.floating],
) -> T.Tuple[
    NP.NDArray[np.intp],
    NP.NDArray[np.intp],
    NP.NDArray[np.floating],
    NP.NDArray[np.floating],
]:
    """
    Map a column-per-row / row-per-column solution of the normalized problem
    back to the caller's orientation.
    """
    if problem.transposed:
        return colsol, rowsol, v, u
    return rowsol, colsol, u, v


def restore_pairs(
    problem: NormalizedProblem, col4row: NP.NDArray[np.intp]
) -> T.Tuple[NP.NDArray[np.intp], NP.NDArray[np.intp]]:
    """
    Convert the column-per-row solution of the normalized problem into matched
    ``(row_ind, col_ind)`` pairs of the caller's matrix, sorted by row.
    """
    if problem.transposed:
        order = np.argsort(col4row, kind="stable").astype(INDEX_DTYPE)
        return col4row[order], order
    return np.arange(col4row.shape[0], dtype=INDEX_DTYPE), col4row


def check_output(
    out: T.Optional[T.Sequence[NP.NDArray[np.integer]]],
    sizes: T.Tuple[int, int],
) -> T.Optional[T.Tuple[NP.NDArray[np.integer], NP.NDArray[np.integer]]]:
    """
    Validate caller supplied output buffers, which must be two writable 1-D
    signed integer arrays with lengths ``sizes``.
    """
    if out is None:
        return None
    if len(out) != 2:
        raise PreconditionViolation(f"Expected two output buffers, got {len(out)}")

    for name, buf, size in zip(("rowsol", "colsol"), out, sizes):
        if not isinstance(buf, np.ndarray):
            raise PreconditionViolation(f"Output {name} must be a numpy array")
        if buf.ndim != 1 or buf.shape[0] != size:
            raise PreconditionViolation(
                f"Output {name} must have shape ({size},), got {buf.shape}"
            )
        if buf.dtype.kind != "i":
            raise PreconditionViolation(
                f"Output {name} must have a signed integer dtype, got {buf.dtype}"
            )
        if not buf.flags.writeable:
            raise PreconditionViolation(f"Output {name} is read-only")

    return out[0], out[1]


def unassigned(size: int) -> NP.NDArray[np.intp]:
    return np.full(size, UNASSIGNED, dtype=INDEX_DTYPE)
