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
Classical Control Functions - Discrete-Time LQR

Pure stateless functions for discrete-time LQR design and analysis:

**Control Design:**
- Linear Quadratic Regulator (LQR) via Riccati fixed-point iteration

**System Analysis:**
- Stability analysis - eigenvalue-based (unit circle)

All functions are pure (no side effects, no state). Backend conversion is
handled internally.

Mathematical Background
-----------------------
LQR minimizes:
    J = Σₖ₌₀^∞ (x'Qx + u'Ru + 2x'Nu)

Solution via the discrete algebraic Riccati equation (DARE):
    P = A'PA - (A'PB + N)(R + B'PB)⁻¹(B'PA + N') + Q

Optimal gain: K = (R + B'PB)⁻¹(B'PA + N'), control law u = -Kx

Stability: all |λ(A - BK)| < 1 (inside unit circle)

Usage
-----
>>> from riccati_lqr.control.classical_control_functions import design_lqr
>>> import numpy as np
>>>
>>> Ad = np.array([[1, 0.1], [0, 1]])
>>> Bd = np.array([[0.005], [0.1]])
>>> Q = np.diag([10, 1])
>>> R = np.array([[0.1]])
>>>
>>> result = design_lqr(Ad, Bd, Q, R, convergence_threshold=1e-12)
>>> K = result['gain']
>>> print(f"Stability margin: {result['stability_margin']:.3f}")
"""

from typing import Optional

import numpy as np

from riccati_lqr.control.riccati_solver import solve_discrete_riccati
from riccati_lqr.types.backends import (
    DEFAULT_BACKEND,
    DEFAULT_CONVERGENCE_THRESHOLD,
    DEFAULT_COST_CHECK,
    DEFAULT_MAX_ITERATIONS,
    Backend,
    CostCheck,
    validate_backend,
)
from riccati_lqr.types.control_classical import LQRResult, StabilityInfo
from riccati_lqr.types.core import CostMatrix, InputMatrix, StateMatrix
from riccati_lqr.utils.backend_utils import from_numpy, to_numpy

# ============================================================================
# LQR - Linear Quadratic Regulator
# ============================================================================


def design_lqr(
    A: StateMatrix,
    B: InputMatrix,
    Q: CostMatrix,
    R: CostMatrix,
    N: Optional[InputMatrix] = None,
    *,
    convergence_threshold: float = DEFAULT_CONVERGENCE_THRESHOLD,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    cost_check: CostCheck = DEFAULT_COST_CHECK,
    backend: Backend = DEFAULT_BACKEND,
) -> LQRResult:
    """
    Design discrete-time Linear Quadratic Regulator (LQR) controller.

    Minimizes cost functional:
        J = Σₖ₌₀^∞ (x[k]'Qx[k] + u[k]'Ru[k] + 2x[k]'Nu[k])

    Solves the discrete algebraic Riccati equation by fixed-point iteration
    (see riccati_solver) and reports the closed-loop behaviour of u = -Kx.

    Parameters
    ----------
    A : StateMatrix
        State matrix (nx, nx)
    B : InputMatrix
        Input matrix (nx, nu)
    Q : CostMatrix
        State cost matrix (nx, nx), Q ≥ 0
    R : CostMatrix
        Control cost matrix (nu, nu), R > 0
    N : Optional[InputMatrix]
        Cross-coupling matrix (nx, nu), optional. Default is zero.
    convergence_threshold : float
        Absolute threshold on max |P_next - P|
    max_iterations : int
        Iteration cap
    cost_check : CostCheck
        'error', 'warn' or 'off'
    backend : Backend
        Backend of returned arrays ('numpy', 'torch', 'jax')

    Returns
    -------
    LQRResult
        Dictionary containing:
            - gain: Optimal feedback gain K (nu, nx)
            - cost_to_go: Riccati solution P (nx, nx)
            - closed_loop_eigenvalues: Eigenvalues of (A - BK)
            - stability_margin: 1 - max(|λ|) (positive = stable)
            - iterations: Riccati recurrence steps used

    Raises
    ------
    ValueError
        If backend or solver settings are invalid
    DimensionMismatchError
        If matrices have incompatible shapes
    CostMatrixError
        If cost matrices are rejected by the cost check
    SingularMatrixError
        If R or R + B'PB is singular
    ConvergenceError
        If the Riccati iteration does not converge

    Examples
    --------
    >>> Ad = np.array([[1, 0.1], [0, 1]])
    >>> Bd = np.array([[0.005], [0.1]])
    >>> Q = np.diag([10, 1])
    >>> R = np.array([[0.1]])
    >>>
    >>> result = design_lqr(Ad, Bd, Q, R, convergence_threshold=1e-12)
    >>> K = result['gain']
    >>>
    >>> # Apply control in simulation
    >>> x = np.array([1.0, 0.0])
    >>> for k in range(100):
    ...     u = -K @ x
    ...     x = Ad @ x + Bd @ u

    With cross-coupling term:

    >>> N = np.array([[0.05], [0.01]])
    >>> result = design_lqr(Ad, Bd, Q, R, N=N, convergence_threshold=1e-12)

    Notes
    -----
    - (A, B) should be stabilizable and (Q, A) detectable; neither is checked.
    - The convergence test is absolute, so problems with large cost-to-go
      entries may need a looser threshold than the default.
    """
    backend = validate_backend(backend)

    solution = solve_discrete_riccati(
        A,
        B,
        Q,
        R,
        N,
        convergence_threshold=convergence_threshold,
        max_iterations=max_iterations,
        cost_check=cost_check,
    )
    K = solution["gain"]
    P = solution["cost_to_go"]

    # Closed-loop system
    A_np = to_numpy(A)
    B_np = to_numpy(B)
    A_cl = A_np - B_np @ K
    eigenvalues = np.linalg.eigvals(A_cl)

    # Stability margin: 1 - max(|λ|), positive = stable (all |λ| < 1)
    stability_margin = 1.0 - np.max(np.abs(eigenvalues))

    # Convert back to target backend
    result: LQRResult = {
        "gain": from_numpy(K, backend),
        "cost_to_go": from_numpy(P, backend),
        "closed_loop_eigenvalues": from_numpy(eigenvalues, backend),
        "stability_margin": float(stability_margin),
        "iterations": solution["iterations"],
    }

    return result


# ============================================================================
# Stability Analysis
# ============================================================================


def analyze_stability(A: StateMatrix, tolerance: float = 1e-10) -> StabilityInfo:
    """
    Analyze discrete-time stability from eigenvalues.

    Stability criterion: all |λ| < 1 (inside unit circle)

    Args:
        A: System or closed-loop matrix (nx, nx)
        tolerance: Band around the unit circle treated as marginal

    Returns:
        StabilityInfo with eigenvalues, spectral radius and stability flags

    Raises:
        ValueError: If A is not a square matrix

    Examples
    --------
    >>> info = analyze_stability(np.array([[0.9, 0.1], [0, 0.8]]))
    >>> info['is_stable']
    True
    >>>
    >>> # Closed loop of an LQR design
    >>> result = design_lqr(Ad, Bd, Q, R, convergence_threshold=1e-12)
    >>> info = analyze_stability(Ad - Bd @ result['gain'])
    """
    A_np = to_numpy(A)

    if A_np.ndim != 2 or A_np.shape[0] != A_np.shape[1]:
        raise ValueError(f"A must be square matrix, got shape {A_np.shape}")

    eigenvalues = np.linalg.eigvals(A_np)
    magnitudes = np.abs(eigenvalues)
    spectral_radius = float(np.max(magnitudes))

    result: StabilityInfo = {
        "eigenvalues": eigenvalues,
        "magnitudes": magnitudes,
        "spectral_radius": spectral_radius,
        "is_stable": bool(spectral_radius < 1.0 - tolerance),
        "is_marginally_stable": bool(abs(spectral_radius - 1.0) <= tolerance),
        "is_unstable": bool(spectral_radius > 1.0 + tolerance),
    }

    return result
