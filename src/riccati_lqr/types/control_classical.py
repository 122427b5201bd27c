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
Classical Control Theory Types

Result types for discrete-time LQR design:
- Riccati fixed-point iteration (RiccatiSolution)
- Linear Quadratic Regulator (LQRResult)
- Stability analysis (StabilityInfo)

These types provide structured return values from the solver and the
design functions.

Mathematical Background
----------------------
Discrete-time LQR with cross weight N:
    Minimize: J = Σₖ (x'Qx + u'Ru + 2x'Nu)
    DARE:     P = A'PA - (A'PB + N)(R + B'PB)⁻¹(B'PA + N') + Q
    Gain:     K = (R + B'PB)⁻¹(B'PA + N')
    Control:  u[k] = -K x[k]

Usage
-----
>>> from riccati_lqr.types.control_classical import RiccatiSolution, LQRResult
>>>
>>> solution: RiccatiSolution = RiccatiSolver().solve(A, B, Q, R)
>>> if solution['success']:
...     K = solution['gain']
... else:
...     print(solution['message'])
"""

from typing import Optional

import numpy as np
from typing_extensions import Literal, TypedDict

from .core import CovarianceMatrix, GainMatrix

# ============================================================================
# Solver Outcome
# ============================================================================

SolveStatus = Literal[
    "converged",
    "dimension_mismatch",
    "invalid_cost",
    "singular_matrix",
    "not_converged",
]
"""
Outcome of one Riccati solve.

- 'converged': P stabilized below the threshold, gain computed
- 'dimension_mismatch': input shapes are incompatible
- 'invalid_cost': non-finite entries or cost matrices violating LQR assumptions
- 'singular_matrix': R or R + B'PB is singular to working precision
- 'not_converged': iteration cap reached or the iterate became non-finite
"""


# ============================================================================
# Riccati Iteration Result
# ============================================================================


class RiccatiSolution(TypedDict):
    """
    Result of the discrete Riccati fixed-point iteration.

    Fields
    ------
    success : bool
        True only when the iteration converged and the gain was computed
    status : SolveStatus
        Machine-readable outcome
    message : str
        Human-readable outcome ('converged' on success)
    gain : Optional[GainMatrix]
        Feedback gain K (nu, nx), None on failure
    cost_to_go : Optional[CovarianceMatrix]
        Converged Riccati solution P (nx, nx), None on failure
    iterations : int
        Number of recurrence steps consumed (0 if validation failed)
    final_delta : float
        max |P_next - P| of the last step (nan if no step ran)
    delta_history : np.ndarray
        max |P_next - P| for every step, in order
    asymmetry : float
        max |P - P'| of the converged solution (nan on failure).
        The iteration does not symmetrize P, so this records the drift.

    Examples
    --------
    >>> solution = RiccatiSolver(convergence_threshold=1e-12).solve(A, B, Q, R)
    >>> solution['success']
    True
    >>> solution['gain'].shape
    (1, 2)
    >>> solution['iterations']
    143
    """

    success: bool
    status: SolveStatus
    message: str
    gain: Optional[GainMatrix]
    cost_to_go: Optional[CovarianceMatrix]
    iterations: int
    final_delta: float
    delta_history: np.ndarray
    asymmetry: float


# ============================================================================
# Stability Analysis Types
# ============================================================================


class StabilityInfo(TypedDict):
    """
    Discrete-time stability analysis result.

    Stability criterion: all |λ| < 1 (inside unit circle)

    Fields
    ------
    eigenvalues : np.ndarray
        Eigenvalues of the system matrix (complex)
    magnitudes : np.ndarray
        Absolute values |λ|
    spectral_radius : float
        max |λ|
    is_stable : bool
        True if spectral_radius < 1 - tolerance
    is_marginally_stable : bool
        True if |spectral_radius - 1| <= tolerance
    is_unstable : bool
        True if spectral_radius > 1 + tolerance

    Examples
    --------
    >>> info: StabilityInfo = analyze_stability(np.array([[0.9, 0.1], [0, 0.8]]))
    >>> info['is_stable']
    True
    >>> info['spectral_radius']
    0.9
    """

    eigenvalues: np.ndarray
    magnitudes: np.ndarray
    spectral_radius: float
    is_stable: bool
    is_marginally_stable: bool
    is_unstable: bool


# ============================================================================
# Classical Control Design Result Types
# ============================================================================


class LQRResult(TypedDict):
    """
    Discrete-time Linear Quadratic Regulator (LQR) design result.

    LQR computes the state feedback gain K that minimizes:
        J = Σₖ₌₀^∞ (x'Qx + u'Ru + 2x'Nu)

    Optimal control law: u = -Kx

    Fields
    ------
    gain : GainMatrix
        Optimal feedback gain K of shape (nu, nx)
    cost_to_go : CovarianceMatrix
        Solution P to the discrete algebraic Riccati equation (nx, nx)
    closed_loop_eigenvalues : np.ndarray
        Eigenvalues of (A - BK)
    stability_margin : float
        1 - max|λ| (positive = stable)
    iterations : int
        Riccati recurrence steps used

    Examples
    --------
    >>> Ad = np.array([[1, 0.1], [0, 1]])
    >>> Bd = np.array([[0.005], [0.1]])
    >>> result: LQRResult = design_lqr(Ad, Bd, np.eye(2), np.array([[1.0]]))
    >>> result['gain'].shape
    (1, 2)
    >>> result['stability_margin'] > 0
    True
    """

    gain: GainMatrix
    cost_to_go: CovarianceMatrix
    closed_loop_eigenvalues: np.ndarray
    stability_margin: float
    iterations: int


__all__ = [
    "SolveStatus",
    "RiccatiSolution",
    "StabilityInfo",
    "LQRResult",
]
