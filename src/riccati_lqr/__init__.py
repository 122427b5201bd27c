# Copyright (C) 2025 Gil Benezer
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
riccati_lqr - Discrete-Time LQR Gains by Riccati Iteration

Computes the steady-state feedback gain of the discrete-time,
infinite-horizon LQR problem by fixed-point iteration of the discrete
algebraic Riccati equation.

>>> import numpy as np
>>> from riccati_lqr import RiccatiSolver
>>>
>>> solution = RiccatiSolver(convergence_threshold=1e-12).solve(A, B, Q, R)
>>> if solution['success']:
...     K = solution['gain']
"""

import logging

from riccati_lqr.control import (
    ControlSynthesis,
    ConvergenceError,
    RiccatiSolver,
    SingularMatrixError,
    analyze_stability,
    dare_residual,
    design_lqr,
    solve_discrete_riccati,
)
from riccati_lqr.utils.matrix_validator import (
    CostMatrixError,
    DimensionMismatchError,
    ValidationError,
)

__version__ = "0.1.0"
__author__ = "Gil Benezer"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "RiccatiSolver",
    "ControlSynthesis",
    "solve_discrete_riccati",
    "dare_residual",
    "design_lqr",
    "analyze_stability",
    "ValidationError",
    "DimensionMismatchError",
    "CostMatrixError",
    "SingularMatrixError",
    "ConvergenceError",
]
