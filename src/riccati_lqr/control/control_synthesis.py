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
Control Synthesis Wrapper

Thin wrapper around the discrete LQR functions.

Stores a backend and the Riccati solver settings once, then routes every
call to the pure functions in classical_control_functions.py and
riccati_solver.py with those settings.

Design Philosophy
-----------------
- Thin wrapper (settings only, no caching)
- Routes to pure functions
- Settings validated once, at construction

Usage
-----
>>> from riccati_lqr.control.control_synthesis import ControlSynthesis
>>> import numpy as np
>>>
>>> synthesis = ControlSynthesis(convergence_threshold=1e-12)
>>> Ad = np.array([[1, 0.1], [0, 1]])
>>> Bd = np.array([[0.005], [0.1]])
>>> Q = np.diag([10, 1])
>>> R = np.array([[0.1]])
>>>
>>> result = synthesis.design_lqr(Ad, Bd, Q, R)
>>> K = result['gain']
>>>
>>> # Non-raising variant
>>> solution = synthesis.solve_riccati(Ad, Bd, Q, R)
>>> solution['success']
True
"""

from typing import Optional

from riccati_lqr.control.classical_control_functions import design_lqr
from riccati_lqr.control.riccati_solver import RiccatiSolver
from riccati_lqr.types.backends import (
    DEFAULT_BACKEND,
    DEFAULT_CONVERGENCE_THRESHOLD,
    DEFAULT_COST_CHECK,
    DEFAULT_MAX_ITERATIONS,
    Backend,
    CostCheck,
    RiccatiSolverConfig,
)
from riccati_lqr.types.control_classical import LQRResult, RiccatiSolution
from riccati_lqr.types.core import CostMatrix, InputMatrix, StateMatrix


class ControlSynthesis:
    """
    Control synthesis wrapper holding backend and solver settings.

    Attributes
    ----------
    backend : Backend
        Backend of returned arrays ('numpy', 'torch', 'jax')
    solver : RiccatiSolver
        Configured solver; its settings are shared by every call

    Examples
    --------
    >>> synthesis = ControlSynthesis(backend='torch', max_iterations=5000)
    >>> result = synthesis.design_lqr(Ad, Bd, Q, R)
    >>> type(result['gain'])  # torch.Tensor
    """

    def __init__(
        self,
        backend: Backend = DEFAULT_BACKEND,
        convergence_threshold: float = DEFAULT_CONVERGENCE_THRESHOLD,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        cost_check: CostCheck = DEFAULT_COST_CHECK,
    ):
        """
        Initialize control synthesis wrapper.

        Args:
            backend: Backend of returned arrays
            convergence_threshold: Absolute threshold on max |P_next - P|
            max_iterations: Iteration cap
            cost_check: 'error', 'warn' or 'off'

        Raises:
            ValueError: If any setting is invalid
        """
        self.solver = RiccatiSolver(
            convergence_threshold=convergence_threshold,
            max_iterations=max_iterations,
            cost_check=cost_check,
            backend=backend,
        )
        self.backend = self.solver.backend

    @classmethod
    def from_config(cls, config: RiccatiSolverConfig) -> "ControlSynthesis":
        """
        Build from a configuration dictionary.

        Missing keys fall back to the module defaults.

        Examples
        --------
        >>> synthesis = ControlSynthesis.from_config({'max_iterations': 2000})
        >>> synthesis.solver.max_iterations
        2000
        """
        return cls(
            backend=config.get("backend", DEFAULT_BACKEND),
            convergence_threshold=config.get(
                "convergence_threshold", DEFAULT_CONVERGENCE_THRESHOLD
            ),
            max_iterations=config.get("max_iterations", DEFAULT_MAX_ITERATIONS),
            cost_check=config.get("cost_check", DEFAULT_COST_CHECK),
        )

    def design_lqr(
        self,
        A: StateMatrix,
        B: InputMatrix,
        Q: CostMatrix,
        R: CostMatrix,
        N: Optional[InputMatrix] = None,
    ) -> LQRResult:
        """
        Design discrete-time LQR controller.

        Routes to classical_control_functions.design_lqr() with the stored
        settings. Raises the solver's exceptions on failure.

        Args:
            A: State matrix (nx, nx)
            B: Input matrix (nx, nu)
            Q: State cost matrix (nx, nx), Q ≥ 0
            R: Control cost matrix (nu, nu), R > 0
            N: Cross-coupling matrix (nx, nu), optional

        Returns:
            LQRResult with gain, cost-to-go, eigenvalues, stability margin
        """
        return design_lqr(
            A,
            B,
            Q,
            R,
            N,
            convergence_threshold=self.solver.convergence_threshold,
            max_iterations=self.solver.max_iterations,
            cost_check=self.solver.cost_check,
            backend=self.backend,
        )

    def solve_riccati(
        self,
        A: StateMatrix,
        B: InputMatrix,
        Q: CostMatrix,
        R: CostMatrix,
        N: Optional[InputMatrix] = None,
    ) -> RiccatiSolution:
        """
        Solve for the LQR gain without raising.

        Routes to RiccatiSolver.solve(); failures are reported in the
        'success', 'status' and 'message' fields.
        """
        return self.solver.solve(A, B, Q, R, N)

    def __repr__(self) -> str:
        return f"ControlSynthesis(backend='{self.backend}', solver={self.solver!r})"
