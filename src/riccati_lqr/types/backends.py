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
Backend and Configuration Types

Defines types related to:
- Computational backends (NumPy, PyTorch, JAX)
- Riccati solver settings and their defaults
- Cost-matrix checking modes

All arithmetic runs in NumPy float64. The backend only decides which array
type results are returned in.

Usage
-----
>>> from riccati_lqr.types.backends import Backend, RiccatiSolverConfig
>>>
>>> config: RiccatiSolverConfig = {
...     'convergence_threshold': 1e-12,
...     'max_iterations': 5000,
... }
"""

from typing import Literal

import numpy as np
from typing_extensions import TypedDict

# ============================================================================
# Backend Types
# ============================================================================

Backend = Literal["numpy", "torch", "jax"]
"""
Backend identifier for returned arrays.

Valid values:
- 'numpy': NumPy arrays (always available)
- 'torch': PyTorch tensors (requires the ``torch`` extra)
- 'jax': JAX arrays (requires the ``jax`` extra)

Examples
--------
>>> backend: Backend = 'torch'
>>> result = design_lqr(A, B, Q, R, backend=backend)
>>> type(result['gain'])  # torch.Tensor
"""

CostCheck = Literal["error", "warn", "off"]
"""
How the solver treats cost matrices that violate LQR assumptions.

Checked properties: Q and R symmetric, Q positive semi-definite, R positive
definite, joint weight [[Q, N], [N', R]] positive semi-definite.

- 'error': reject the problem (CostMatrixError / status 'invalid_cost')
- 'warn': issue UserWarning and continue
- 'off': skip the checks, the caller is responsible
"""


class RiccatiSolverConfig(TypedDict, total=False):
    """
    Riccati solver configuration dictionary.

    All keys are optional; missing keys fall back to the module defaults.

    Attributes
    ----------
    convergence_threshold : float
        Absolute threshold on max |P_next - P| (default: 1e-15)
    max_iterations : int
        Iteration cap (default: 100_000)
    cost_check : CostCheck
        Cost-matrix checking mode (default: 'error')
    backend : Backend
        Backend of returned arrays (default: 'numpy')

    Examples
    --------
    >>> config: RiccatiSolverConfig = {'max_iterations': 2000}
    >>> synthesis = ControlSynthesis.from_config(config)
    """

    convergence_threshold: float
    max_iterations: int
    cost_check: CostCheck
    backend: Backend


# ============================================================================
# Constants - Valid Values and Defaults
# ============================================================================

VALID_BACKENDS = ("numpy", "torch", "jax")
"""Tuple of valid backend names."""

VALID_COST_CHECKS = ("error", "warn", "off")
"""Tuple of valid cost-check modes."""

DEFAULT_BACKEND: Backend = "numpy"
"""Default backend if not specified."""

DEFAULT_DTYPE = np.float64
"""
Working precision of the solver.

Float64 is required: the default convergence threshold (1e-15) is below
float32 resolution.
"""

DEFAULT_CONVERGENCE_THRESHOLD = 1e-15
"""
Default absolute threshold on the max-abs difference of successive iterates.

The criterion is absolute, so it is scale-sensitive: problems whose
cost-to-go entries are large may need a looser threshold.
"""

DEFAULT_MAX_ITERATIONS = 100_000
"""Default cap on Riccati recurrence steps."""

DEFAULT_COST_CHECK: CostCheck = "error"
"""Default cost-matrix checking mode."""


# ============================================================================
# Validation Utilities
# ============================================================================


def validate_backend(backend: str) -> Backend:
    """
    Validate and normalize backend string.

    Parameters
    ----------
    backend : str
        Backend name to validate

    Returns
    -------
    Backend
        Validated backend (typed)

    Raises
    ------
    ValueError
        If backend is not valid

    Examples
    --------
    >>> validate_backend('numpy')
    'numpy'
    >>> validate_backend('pytorch')  # ValueError
    """
    if backend not in VALID_BACKENDS:
        raise ValueError(f"Invalid backend '{backend}'. " f"Choose from: {VALID_BACKENDS}")
    return backend


def validate_cost_check(cost_check: str) -> CostCheck:
    """Validate cost-check mode, raising ValueError for unknown modes."""
    if cost_check not in VALID_COST_CHECKS:
        raise ValueError(
            f"Invalid cost_check '{cost_check}'. " f"Choose from: {VALID_COST_CHECKS}",
        )
    return cost_check


def validate_solver_settings(convergence_threshold: float, max_iterations: int) -> None:
    """
    Validate numeric solver settings.

    Raises
    ------
    ValueError
        If the threshold is not a positive finite number or the iteration
        cap is not a positive integer
    """
    if not np.isfinite(convergence_threshold) or convergence_threshold <= 0:
        raise ValueError(
            f"convergence_threshold must be positive and finite, got {convergence_threshold}",
        )
    if isinstance(max_iterations, bool) or not isinstance(max_iterations, (int, np.integer)):
        raise ValueError(f"max_iterations must be an integer, got {type(max_iterations).__name__}")
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")


# ============================================================================
# Export All
# ============================================================================

__all__ = [
    "Backend",
    "CostCheck",
    "RiccatiSolverConfig",
    "VALID_BACKENDS",
    "VALID_COST_CHECKS",
    "DEFAULT_BACKEND",
    "DEFAULT_DTYPE",
    "DEFAULT_CONVERGENCE_THRESHOLD",
    "DEFAULT_MAX_ITERATIONS",
    "DEFAULT_COST_CHECK",
    "validate_backend",
    "validate_cost_check",
    "validate_solver_settings",
]
