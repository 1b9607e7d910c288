from __future__ import annotations

from typing import Tuple

import numpy as np
import torch
import torch.fx
import typing_extensions as TX

from ..solvers import solve_assignment
from ._base import Assignment
from ._utils import as_numpy, extend_cost, gate_cost, split_matches

__all__ = ["Jonker", "jonker_volgenant_assignment"]


class Jonker(Assignment):
    """
    Uses the Jonker-Volgenant algorithm to solve the linear assignment problem.
    """

    @TX.override
    def _assign(
        self, cost_matrix: torch.Tensor
    ) -> Tuple[torch.Tensor, torch.Tensor, torch.Tensor]:
        return jonker_volgenant_assignment(cost_matrix, self.threshold)


def jonker_volgenant_assignment(
    cost_matrix: torch.Tensor, threshold: float
) -> Tuple[torch.Tensor, torch.Tensor, torch.Tensor]:
    """
    Perform linear assignment. The Jonker-Volgenant solver requires a finite matrix
    with a complete assignment, so the problem is always solved in its extended
    form (see :func:`.extend_cost`).
    """

    device = cost_matrix.device
    cost = gate_cost(as_numpy(cost_matrix), threshold)
    n, _ = cost.shape

    solution = solve_assignment(extend_cost(cost, threshold))

    return split_matches(cost, np.arange(n), solution.rowsol[:n], device=device)


torch.fx.wrap("jonker_volgenant_assignment")
