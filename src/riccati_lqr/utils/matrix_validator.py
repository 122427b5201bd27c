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
Problem Validator for Discrete-Time LQR

Validates that the matrices (A, B, Q, R, N) describe a well-formed
discrete-time LQR problem before any arithmetic is attempted.

Checks:
- Every matrix is two-dimensional
- Dimension consistency (six independent shape relations)
- Finite entries (no NaN or inf)
- Cost matrix properties, depending on the cost-check mode:
  Q and R symmetric, Q ⪰ 0, R ≻ 0, [[Q, N], [N', R]] ⪰ 0

All problems are collected before reporting, so one validation run lists
every error at once.
"""

import warnings
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np

from riccati_lqr.types.backends import DEFAULT_COST_CHECK, CostCheck, validate_cost_check

# ============================================================================
# Exceptions
# ============================================================================


class ValidationError(ValueError):
    """Raised when LQR problem validation fails"""

    pass


class DimensionMismatchError(ValidationError):
    """Raised when matrix shapes are incompatible"""

    pass


class CostMatrixError(ValidationError):
    """Raised when matrix entries are non-finite or cost weights violate LQR assumptions"""

    pass


# ============================================================================
# Validation Result Container
# ============================================================================


@dataclass
class ValidationResult:
    """
    Container for validation results.

    Attributes
    ----------
    is_valid : bool
        True if the problem passed all validation checks
    dimension_errors : List[str]
        Shape and rank errors
    cost_errors : List[str]
        Non-finite entries and (in 'error' mode) cost property errors
    warnings : List[str]
        Non-fatal findings ('warn' mode)
    info : Dict
        Problem dimensions and characteristics
    """

    is_valid: bool
    dimension_errors: List[str] = field(default_factory=list)
    cost_errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    info: Dict[str, Any] = field(default_factory=dict)

    @property
    def errors(self) -> List[str]:
        """All errors, dimension errors first."""
        return self.dimension_errors + self.cost_errors


# ============================================================================
# Riccati Problem Validator
# ============================================================================


class RiccatiProblemValidator:
    """
    Validates discrete-time LQR problem data.

    Examples
    --------
    >>> validator = RiccatiProblemValidator(A, B, Q, R)
    >>> result = validator.validate(raise_on_error=False)
    >>>
    >>> if not result.is_valid:
    ...     print(f"Errors: {result.errors}")
    >>>
    >>> # Raise exception on error
    >>> try:
    ...     validator.validate()
    ... except DimensionMismatchError as e:
    ...     print(f"Validation failed: {e}")
    """

    def __init__(
        self,
        A: Any,
        B: Any,
        Q: Any,
        R: Any,
        N: Optional[Any] = None,
        cost_check: CostCheck = DEFAULT_COST_CHECK,
        symmetry_rtol: float = 1e-10,
        symmetry_atol: float = 1e-8,
        definiteness_tol: float = 1e-10,
    ):
        """
        Initialize validator with the problem matrices.

        Parameters
        ----------
        A, B, Q, R : array_like
            System and cost matrices
        N : array_like, optional
            Cross weight; None means zero
        cost_check : CostCheck
            'error', 'warn' or 'off'
        symmetry_rtol, symmetry_atol : float
            Tolerances for the symmetry test (np.allclose)
        definiteness_tol : float
            Eigenvalue tolerance, relative to the largest eigenvalue magnitude
        """
        self.A = np.asarray(A, dtype=float)
        self.B = np.asarray(B, dtype=float)
        self.Q = np.asarray(Q, dtype=float)
        self.R = np.asarray(R, dtype=float)
        self.N = None if N is None else np.asarray(N, dtype=float)
        self.cost_check = validate_cost_check(cost_check)
        self.symmetry_rtol = symmetry_rtol
        self.symmetry_atol = symmetry_atol
        self.definiteness_tol = definiteness_tol

        self._dimension_errors: List[str] = []
        self._cost_errors: List[str] = []
        self._warnings: List[str] = []

    # ========================================================================
    # Public API
    # ========================================================================

    def validate(self, raise_on_error: bool = True) -> ValidationResult:
        """
        Validate the problem.

        Parameters
        ----------
        raise_on_error : bool
            If True, raise on validation failure.
            If False, return ValidationResult with errors.

        Returns
        -------
        ValidationResult
            Validation results with errors, warnings, and info

        Raises
        ------
        DimensionMismatchError
            If any shape relation is violated and raise_on_error=True
        CostMatrixError
            If shapes are fine but entries or cost properties are invalid
            and raise_on_error=True
        """
        # Reset state
        self._dimension_errors = []
        self._cost_errors = []
        self._warnings = []

        # Shape checks first; later checks index into the matrices
        self._validate_ndim()
        if not self._dimension_errors:
            self._validate_dimensions()

        if not self._dimension_errors:
            self._validate_finite()
            if not self._cost_errors and self.cost_check != "off":
                self._validate_cost_properties()

        is_valid = not (self._dimension_errors or self._cost_errors)

        result = ValidationResult(
            is_valid=is_valid,
            dimension_errors=self._dimension_errors.copy(),
            cost_errors=self._cost_errors.copy(),
            warnings=self._warnings.copy(),
            info=self._build_info(),
        )

        # Issue warnings (even if valid)
        if result.warnings:
            self._issue_warnings(result.warnings)

        if not is_valid and raise_on_error:
            if self._dimension_errors:
                raise DimensionMismatchError(self._format_error_message())
            raise CostMatrixError(self._format_error_message())

        return result

    # ========================================================================
    # Validation Checks
    # ========================================================================

    def _validate_ndim(self):
        """Check that every matrix is two-dimensional"""
        for name, matrix in self._named_matrices():
            if matrix.ndim != 2:
                self._dimension_errors.append(
                    f"{name} must be a 2-D matrix, got {matrix.ndim}-D array "
                    f"of shape {matrix.shape}"
                )

    def _validate_dimensions(self):
        """Check the six shape relations between A, B, Q, R and N"""
        A, B, Q, R, N = self.A, self.B, self.Q, self.R, self.N
        nx = A.shape[0]
        nu = B.shape[1]

        if A.shape[0] != A.shape[1]:
            self._dimension_errors.append(f"A must be square, got shape {A.shape}")

        if B.shape[0] != nx:
            self._dimension_errors.append(
                f"B must have {nx} rows (rows of A), got {B.shape[0]}"
            )

        if Q.shape != (nx, nx):
            self._dimension_errors.append(f"Q must be ({nx}, {nx}), got {Q.shape}")

        if R.shape[0] != R.shape[1]:
            self._dimension_errors.append(f"R must be square, got shape {R.shape}")

        if R.shape[1] != nu:
            self._dimension_errors.append(
                f"R must have {nu} columns (columns of B), got {R.shape[1]}"
            )

        if N is not None and N.shape != (nx, nu):
            self._dimension_errors.append(f"N must be ({nx}, {nu}), got {N.shape}")

        if nx == 0 or nu == 0:
            self._dimension_errors.append(
                f"Problem must have at least one state and one input, got nx={nx}, nu={nu}"
            )

    def _validate_finite(self):
        """Check that no matrix contains NaN or inf"""
        for name, matrix in self._named_matrices():
            if not np.all(np.isfinite(matrix)):
                self._cost_errors.append(f"{name} contains non-finite entries (NaN or inf)")

    def _validate_cost_properties(self):
        """Check symmetry and definiteness of the cost weights"""
        findings: List[str] = []

        q_symmetric = self._is_symmetric(self.Q)
        r_symmetric = self._is_symmetric(self.R)
        if not q_symmetric:
            findings.append(f"Q is not symmetric (max |Q - Q'| = {self._asymmetry(self.Q):.3e})")
        if not r_symmetric:
            findings.append(f"R is not symmetric (max |R - R'| = {self._asymmetry(self.R):.3e})")

        # eigvalsh assumes symmetry, so definiteness is only checked on symmetric input
        if q_symmetric:
            min_eig, tol = self._min_eigenvalue(self.Q)
            if min_eig < -tol:
                findings.append(
                    f"Q must be positive semi-definite, min eigenvalue {min_eig:.3e}"
                )
        if r_symmetric:
            min_eig, tol = self._min_eigenvalue(self.R)
            if min_eig <= tol:
                findings.append(f"R must be positive definite, min eigenvalue {min_eig:.3e}")

        if q_symmetric and r_symmetric and self.N is not None and np.any(self.N != 0):
            joint = np.block([[self.Q, self.N], [self.N.T, self.R]])
            min_eig, tol = self._min_eigenvalue(joint)
            if min_eig < -tol:
                findings.append(
                    "Joint cost [[Q, N], [N', R]] must be positive semi-definite, "
                    f"min eigenvalue {min_eig:.3e}"
                )

        if self.cost_check == "error":
            self._cost_errors.extend(findings)
        else:
            self._warnings.extend(findings)

    # ========================================================================
    # Information Gathering
    # ========================================================================

    def _build_info(self) -> Dict[str, Any]:
        """Build problem information dictionary"""
        info: Dict[str, Any] = {}
        if self.A.ndim == 2:
            info["nx"] = int(self.A.shape[0])
        if self.B.ndim == 2:
            info["nu"] = int(self.B.shape[1])
        info["has_cross_term"] = self.N is not None and bool(np.any(self.N != 0))
        info["cost_check"] = self.cost_check
        return info

    # ========================================================================
    # Helper Methods
    # ========================================================================

    def _named_matrices(self):
        matrices = [("A", self.A), ("B", self.B), ("Q", self.Q), ("R", self.R)]
        if self.N is not None:
            matrices.append(("N", self.N))
        return matrices

    def _is_symmetric(self, matrix: np.ndarray) -> bool:
        return bool(
            np.allclose(matrix, matrix.T, rtol=self.symmetry_rtol, atol=self.symmetry_atol)
        )

    @staticmethod
    def _asymmetry(matrix: np.ndarray) -> float:
        return float(np.max(np.abs(matrix - matrix.T)))

    def _min_eigenvalue(self, matrix: np.ndarray):
        """Smallest eigenvalue of the symmetric part, and the scaled tolerance"""
        eigenvalues = np.linalg.eigvalsh(0.5 * (matrix + matrix.T))
        scale = max(1.0, float(np.max(np.abs(eigenvalues))))
        return float(np.min(eigenvalues)), self.definiteness_tol * scale

    def _issue_warnings(self, warnings_list: List[str]):
        """Issue Python warnings for validation warnings"""
        for warning in warnings_list:
            warnings.warn(f"LQR problem validation warning: {warning}", UserWarning)

    def _format_error_message(self) -> str:
        """Format error messages in a readable way"""
        if self._dimension_errors:
            msg = "LQR problem validation failed: incompatible dimensions\n\n"
        else:
            msg = "LQR problem validation failed: invalid matrix data\n\n"
        msg += "Errors:\n"
        msg += "\n".join(f"  • {error}" for error in self._dimension_errors + self._cost_errors)

        if self._warnings:
            msg += "\n\nWarnings:\n"
            msg += "\n".join(f"  • {warning}" for warning in self._warnings)
        return msg

    # ========================================================================
    # Convenience Methods
    # ========================================================================

    @staticmethod
    def validate_problem(
        A: Any,
        B: Any,
        Q: Any,
        R: Any,
        N: Optional[Any] = None,
        cost_check: CostCheck = DEFAULT_COST_CHECK,
        raise_on_error: bool = True,
    ) -> ValidationResult:
        """
        Static convenience method for one-off validation.

        Examples
        --------
        >>> result = RiccatiProblemValidator.validate_problem(A, B, Q, R)
        >>>
        >>> # Or without raising
        >>> result = RiccatiProblemValidator.validate_problem(
        ...     A, B, Q, R, raise_on_error=False
        ... )
        """
        validator = RiccatiProblemValidator(A, B, Q, R, N, cost_check=cost_check)
        return validator.validate(raise_on_error=raise_on_error)

    def __repr__(self) -> str:
        return (
            f"RiccatiProblemValidator(A={self.A.shape}, B={self.B.shape}, "
            f"cost_check='{self.cost_check}')"
        )
