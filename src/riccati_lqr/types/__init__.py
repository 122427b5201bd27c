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
Types Module

Central import point for the type definitions of riccati_lqr.

Module Organization
------------------
- core: Array alias and semantic matrix types
- backends: Backend literal, solver settings and defaults
- control_classical: RiccatiSolution, LQRResult, StabilityInfo
"""

# ============================================================================
# Core Types
# ============================================================================

from .core import (
    ArrayLike,
    CostMatrix,
    CovarianceMatrix,
    GainMatrix,
    InputMatrix,
    StateMatrix,
)

# ============================================================================
# Backend and Configuration Types
# ============================================================================

from .backends import (
    DEFAULT_BACKEND,
    DEFAULT_CONVERGENCE_THRESHOLD,
    DEFAULT_COST_CHECK,
    DEFAULT_DTYPE,
    DEFAULT_MAX_ITERATIONS,
    VALID_BACKENDS,
    VALID_COST_CHECKS,
    Backend,
    CostCheck,
    RiccatiSolverConfig,
    validate_backend,
    validate_cost_check,
    validate_solver_settings,
)

# ============================================================================
# Control Result Types
# ============================================================================

from .control_classical import (
    LQRResult,
    RiccatiSolution,
    SolveStatus,
    StabilityInfo,
)

__all__ = [
    # core
    "ArrayLike",
    "StateMatrix",
    "InputMatrix",
    "CostMatrix",
    "GainMatrix",
    "CovarianceMatrix",
    # backends
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
    # control_classical
    "SolveStatus",
    "RiccatiSolution",
    "LQRResult",
    "StabilityInfo",
]
