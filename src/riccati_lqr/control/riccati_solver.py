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
Discrete Riccati Fixed-Point Solver

Computes the steady-state gain of the discrete-time, infinite-horizon LQR
problem by iterating the discrete algebraic Riccati equation (DARE) until
successive iterates stop changing.

Mathematical Background
-----------------------
System and cost:
    x[k+1] = A x[k] + B u[k]
    J = Σₖ (x'Qx + u'Ru + 2x'Nu)

Cross-term elimination (computed once):
    Â = A - B R⁻¹ N'
    Q̂ = Q - N R⁻¹ N'

Recurrence, starting from P₀ = Q:
    Pₖ₊₁ = Â'PₖÂ - Â'PₖB (R + B'PₖB)⁻¹ B'PₖÂ + Q̂

Convergence when max |Pₖ₊₁ - Pₖ| < threshold (absolute, element-wise).

Gain from the converged P, with the ORIGINAL A and N:
    K = (R + B'PB)⁻¹ (B'PA + N')

Two entry points:
- solve_discrete_riccati: pure function, raises on failure
- RiccatiSolver.solve: never raises for detectable failures, reports them
  through the 'success', 'status' and 'message' fields of the result

Usage
-----
>>> import numpy as np
>>> from riccati_lqr.control.riccati_solver import RiccatiSolver
>>>
>>> A = np.array([[1.0, 0.1], [0.0, 1.0]])
>>> B = np.array([[0.005], [0.1]])
>>> Q = np.eye(2)
>>> R = np.array([[1.0]])
>>>
>>> solution = RiccatiSolver(convergence_threshold=1e-12).solve(A, B, Q, R)
>>> if solution['success']:
...     K = solution['gain']
...     print(f"Converged in {solution['iterations']} iterations")
"""

import logging
from typing import List, Optional

import numpy as np
from scipy import linalg

from riccati_lqr.types.backends import (
    DEFAULT_BACKEND,
    DEFAULT_CONVERGENCE_THRESHOLD,
    DEFAULT_COST_CHECK,
    DEFAULT_DTYPE,
    DEFAULT_MAX_ITERATIONS,
    Backend,
    CostCheck,
    validate_backend,
    validate_cost_check,
    validate_solver_settings,
)
from riccati_lqr.types.control_classical import RiccatiSolution, SolveStatus
from riccati_lqr.types.core import CostMatrix, InputMatrix, StateMatrix
from riccati_lqr.utils.backend_utils import from_numpy, to_numpy
from riccati_lqr.utils.matrix_validator import (
    CostMatrixError,
    DimensionMismatchError,
    RiccatiProblemValidator,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Exceptions
# ============================================================================


class SingularMatrixError(np.linalg.LinAlgError):
    """
    Raised when a matrix that must be inverted is singular to working precision.

    Attributes
    ----------
    matrix_name : str
        Name of the offending matrix (e.g. "R" or "R + B'PB")
    rcond : float
        Reciprocal condition number (0.0 if singular or not computable)
    """

    def __init__(self, matrix_name: str, rcond: float):
        self.matrix_name = matrix_name
        self.rcond = rcond
        super().__init__(
            f"{matrix_name} is singular to working precision "
            f"(reciprocal condition number {rcond:.3e})"
        )


class ConvergenceError(RuntimeError):
    """
    Raised when the Riccati iteration does not converge.

    Either the iteration cap was reached or an iterate became non-finite.

    Attributes
    ----------
    iterations : int
        Steps performed before giving up
    final_delta : float
        max |P_next - P| of the last step
    delta_history : np.ndarray
        max |P_next - P| of every step
    """

    def __init__(self, message: str, iterations: int, delta_history: np.ndarray):
        self.iterations = iterations
        self.delta_history = delta_history
        self.final_delta = float(delta_history[-1]) if len(delta_history) else float("nan")
        super().__init__(message)


# ============================================================================
# Checked Linear Algebra
# ============================================================================


def _reciprocal_condition(matrix: np.ndarray) -> float:
    """Reciprocal 2-norm condition number, 0.0 for singular matrices."""
    try:
        cond = np.linalg.cond(matrix)
    except np.linalg.LinAlgError:
        return 0.0
    if not np.isfinite(cond) or cond == 0:
        return 0.0
    return float(1.0 / cond)


def checked_solve(matrix: np.ndarray, rhs: np.ndarray, name: str = "matrix") -> np.ndarray:
    """
    Solve matrix @ X = rhs after confirming matrix is non-singular.

    Equivalent to inv(matrix) @ rhs, without forming the inverse.

    Parameters
    ----------
    matrix : np.ndarray
        Square coefficient matrix
    rhs : np.ndarray
        Right-hand side
    name : str
        Name used in the error message

    Returns
    -------
    np.ndarray
        Solution X

    Raises
    ------
    SingularMatrixError
        If the reciprocal condition number is below machine epsilon,
        or the LU factorization finds an exact zero pivot

    Examples
    --------
    >>> checked_solve(np.array([[2.0]]), np.array([[4.0]]), "R")
    array([[2.]])
    >>> checked_solve(np.zeros((1, 1)), np.ones((1, 1)), "R")  # SingularMatrixError
    """
    rcond = _reciprocal_condition(matrix)
    if rcond < np.finfo(DEFAULT_DTYPE).eps:
        raise SingularMatrixError(name, rcond)
    try:
        return linalg.solve(matrix, rhs)
    except linalg.LinAlgError as e:
        raise SingularMatrixError(name, 0.0) from e


# ============================================================================
# Riccati Equation
# ============================================================================


def dare_residual(
    A: StateMatrix,
    B: InputMatrix,
    Q: CostMatrix,
    R: CostMatrix,
    P: StateMatrix,
    N: Optional[InputMatrix] = None,
) -> np.ndarray:
    """
    Residual of the discrete algebraic Riccati equation with cross term.

        A'PA - (A'PB + N)(R + B'PB)⁻¹(B'PA + N') + Q - P

    Zero (to rounding) at the solution. Useful for checking a solution
    without a reference solver.

    Raises
    ------
    SingularMatrixError
        If R + B'PB is singular
    """
    A, B, Q, R, P = (to_numpy(M) for M in (A, B, Q, R, P))
    N = np.zeros_like(B) if N is None else to_numpy(N)

    S = R + B.T @ P @ B
    gain_term = checked_solve(S, B.T @ P @ A + N.T, "R + B'PB")
    return A.T @ P @ A - (A.T @ P @ B + N) @ gain_term + Q - P


def _iterate_riccati(
    A: np.ndarray,
    B: np.ndarray,
    Q: np.ndarray,
    R: np.ndarray,
    N: np.ndarray,
    convergence_threshold: float,
    max_iterations: int,
):
    """
    Run the fixed-point recurrence.

    Returns
    -------
    (P, iterations, delta_history)
    """
    B_t = B.T
    R_inv_N_t = checked_solve(R, N.T, "R")
    A_hat = A - B @ R_inv_N_t
    A_hat_t = A_hat.T
    Q_hat = Q - N @ R_inv_N_t
    logger.debug(
        "Cross-term eliminated: max|A_hat - A| = %.3e, max|Q_hat - Q| = %.3e",
        float(np.max(np.abs(A_hat - A))),
        float(np.max(np.abs(Q_hat - Q))),
    )

    P = Q.copy()
    deltas: List[float] = []

    for iteration in range(1, max_iterations + 1):
        A_hat_t_P = A_hat_t @ P
        B_t_P = B_t @ P
        S = R + B_t_P @ B
        P_next = (
            A_hat_t_P @ A_hat
            - (A_hat_t_P @ B) @ checked_solve(S, B_t_P @ A_hat, "R + B'PB")
            + Q_hat
        )

        delta = float(np.max(np.abs(P_next - P)))
        deltas.append(delta)

        if not np.isfinite(delta):
            raise ConvergenceError(
                f"Riccati iteration diverged: non-finite iterate at step {iteration}",
                iteration,
                np.asarray(deltas),
            )
        if delta < convergence_threshold:
            return P_next, iteration, np.asarray(deltas)

        P = P_next

    raise ConvergenceError(
        f"Riccati iteration did not converge within {max_iterations} iterations "
        f"(last max|ΔP| = {deltas[-1]:.3e}, threshold {convergence_threshold:.1e})",
        max_iterations,
        np.asarray(deltas),
    )


def _as_matrix(arr, name: str) -> np.ndarray:
    """to_numpy, reporting ragged input as a dimension error"""
    try:
        return to_numpy(arr)
    except ValueError as e:
        raise DimensionMismatchError(
            "LQR problem validation failed: incompatible dimensions\n\n"
            f"Errors:\n  • {name} is not a rectangular numeric array ({e})"
        ) from e


def solve_discrete_riccati(
    A: StateMatrix,
    B: InputMatrix,
    Q: CostMatrix,
    R: CostMatrix,
    N: Optional[InputMatrix] = None,
    *,
    convergence_threshold: float = DEFAULT_CONVERGENCE_THRESHOLD,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    cost_check: CostCheck = DEFAULT_COST_CHECK,
) -> RiccatiSolution:
    """
    Solve the discrete algebraic Riccati equation by fixed-point iteration.

    Parameters
    ----------
    A : StateMatrix
        State transition matrix (nx, nx)
    B : InputMatrix
        Input matrix (nx, nu)
    Q : CostMatrix
        State cost (nx, nx)
    R : CostMatrix
        Control cost (nu, nu), must be invertible
    N : Optional[InputMatrix]
        Cross weight (nx, nu). Default is zero.
    convergence_threshold : float
        Absolute threshold on max |P_next - P|
    max_iterations : int
        Iteration cap
    cost_check : CostCheck
        'error', 'warn' or 'off' (see RiccatiProblemValidator)

    Returns
    -------
    RiccatiSolution
        Successful solution with NumPy arrays

    Raises
    ------
    ValueError
        If the solver settings are invalid
    DimensionMismatchError
        If the matrix shapes are incompatible
    CostMatrixError
        If entries are non-finite or cost weights are rejected
    SingularMatrixError
        If R or R + B'PB is singular
    ConvergenceError
        If the iteration cap is reached or the iterate diverges

    Notes
    -----
    The convergence test is absolute. When P has large entries, a tight
    threshold can sit below the floating-point resolution of P and the
    iteration then runs to the cap; loosen the threshold in that case.

    The iteration does not symmetrize P. The returned 'asymmetry' field
    reports max |P - P'|.
    """
    validate_solver_settings(convergence_threshold, max_iterations)

    A_np, B_np, Q_np, R_np = (
        _as_matrix(M, name) for M, name in ((A, "A"), (B, "B"), (Q, "Q"), (R, "R"))
    )
    N_np = None if N is None else _as_matrix(N, "N")

    RiccatiProblemValidator(A_np, B_np, Q_np, R_np, N_np, cost_check=cost_check).validate(
        raise_on_error=True,
    )

    if N_np is None:
        N_np = np.zeros_like(B_np)

    P, iterations, delta_history = _iterate_riccati(
        A_np, B_np, Q_np, R_np, N_np, convergence_threshold, max_iterations
    )

    # Gain uses the original A and N, not the cross-term-eliminated pair
    B_t_P = B_np.T @ P
    K = checked_solve(R_np + B_t_P @ B_np, B_t_P @ A_np + N_np.T, "R + B'PB")

    logger.info(
        "Riccati iteration converged in %d iterations (final max|ΔP| = %.3e)",
        iterations,
        delta_history[-1],
    )

    solution: RiccatiSolution = {
        "success": True,
        "status": "converged",
        "message": "converged",
        "gain": K,
        "cost_to_go": P,
        "iterations": iterations,
        "final_delta": float(delta_history[-1]),
        "delta_history": delta_history,
        "asymmetry": float(np.max(np.abs(P - P.T))),
    }
    return solution


# ============================================================================
# Solver Object
# ============================================================================


class RiccatiSolver:
    """
    Discrete-time LQR gain solver with a non-raising interface.

    Holds the solver settings and reports every detectable failure in the
    returned RiccatiSolution instead of raising it. The caller must check
    'success' before using 'gain'.

    Attributes
    ----------
    convergence_threshold : float
        Absolute threshold on max |P_next - P|
    max_iterations : int
        Iteration cap
    cost_check : CostCheck
        Cost-matrix checking mode
    backend : Backend
        Backend of returned arrays

    Examples
    --------
    >>> solver = RiccatiSolver(convergence_threshold=1e-12)
    >>> solution = solver.solve(A, B, Q, R)
    >>> solution['success'], solution['gain'].shape
    (True, (1, 2))
    >>>
    >>> # Mismatched R: failure is reported, not raised
    >>> solution = solver.solve(A, B, Q, np.eye(2))
    >>> solution['success'], solution['status']
    (False, 'dimension_mismatch')
    """

    def __init__(
        self,
        convergence_threshold: float = DEFAULT_CONVERGENCE_THRESHOLD,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        cost_check: CostCheck = DEFAULT_COST_CHECK,
        backend: Backend = DEFAULT_BACKEND,
    ):
        validate_solver_settings(convergence_threshold, max_iterations)
        self.convergence_threshold = float(convergence_threshold)
        self.max_iterations = int(max_iterations)
        self.cost_check = validate_cost_check(cost_check)
        self.backend = validate_backend(backend)

    def solve(
        self,
        A: StateMatrix,
        B: InputMatrix,
        Q: CostMatrix,
        R: CostMatrix,
        N: Optional[InputMatrix] = None,
    ) -> RiccatiSolution:
        """
        Solve for the steady-state LQR gain.

        Args:
            A: State transition matrix (nx, nx)
            B: Input matrix (nx, nu)
            Q: State cost (nx, nx)
            R: Control cost (nu, nu)
            N: Cross weight (nx, nu), optional

        Returns:
            RiccatiSolution; on failure 'gain' and 'cost_to_go' are None
        """
        try:
            solution = solve_discrete_riccati(
                A,
                B,
                Q,
                R,
                N,
                convergence_threshold=self.convergence_threshold,
                max_iterations=self.max_iterations,
                cost_check=self.cost_check,
            )
        except DimensionMismatchError as e:
            return self._failure("dimension_mismatch", e)
        except CostMatrixError as e:
            return self._failure("invalid_cost", e)
        except SingularMatrixError as e:
            return self._failure("singular_matrix", e)
        except ConvergenceError as e:
            return self._failure("not_converged", e, e.iterations, e.delta_history)

        solution["gain"] = from_numpy(solution["gain"], self.backend)
        solution["cost_to_go"] = from_numpy(solution["cost_to_go"], self.backend)
        return solution

    def _failure(
        self,
        status: SolveStatus,
        error: Exception,
        iterations: int = 0,
        delta_history: Optional[np.ndarray] = None,
    ) -> RiccatiSolution:
        """Build the failure result and report it to the log"""
        if delta_history is None:
            delta_history = np.array([], dtype=DEFAULT_DTYPE)
        logger.warning("Riccati solve failed (%s): %s", status, error)
        solution: RiccatiSolution = {
            "success": False,
            "status": status,
            "message": str(error),
            "gain": None,
            "cost_to_go": None,
            "iterations": iterations,
            "final_delta": float(delta_history[-1]) if len(delta_history) else float("nan"),
            "delta_history": delta_history,
            "asymmetry": float("nan"),
        }
        return solution

    def __repr__(self) -> str:
        return (
            f"RiccatiSolver(convergence_threshold={self.convergence_threshold:g}, "
            f"max_iterations={self.max_iterations}, cost_check='{self.cost_check}', "
            f"backend='{self.backend}')"
        )


__all__ = [
    "SingularMatrixError",
    "ConvergenceError",
    "checked_solve",
    "dare_residual",
    "solve_discrete_riccati",
    "RiccatiSolver",
]
