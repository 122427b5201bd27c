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
Unit Tests for Backend and Configuration Types

Tests cover:
- Constants and default values
- Backend, cost-check and solver-setting validation
- Configuration TypedDict usage
"""

import numpy as np
import pytest

from riccati_lqr.types.backends import (
    DEFAULT_BACKEND,
    DEFAULT_CONVERGENCE_THRESHOLD,
    DEFAULT_COST_CHECK,
    DEFAULT_DTYPE,
    DEFAULT_MAX_ITERATIONS,
    VALID_BACKENDS,
    VALID_COST_CHECKS,
    RiccatiSolverConfig,
    validate_backend,
    validate_cost_check,
    validate_solver_settings,
)


class TestConstants:
    """Test constant values."""

    def test_valid_backends(self):
        assert VALID_BACKENDS == ("numpy", "torch", "jax")

    def test_valid_cost_checks(self):
        assert VALID_COST_CHECKS == ("error", "warn", "off")

    def test_defaults(self):
        assert DEFAULT_BACKEND == "numpy"
        assert DEFAULT_DTYPE is np.float64
        assert DEFAULT_CONVERGENCE_THRESHOLD == 1e-15
        assert DEFAULT_MAX_ITERATIONS == 100_000
        assert DEFAULT_COST_CHECK == "error"

    def test_defaults_are_valid(self):
        assert validate_backend(DEFAULT_BACKEND) == DEFAULT_BACKEND
        assert validate_cost_check(DEFAULT_COST_CHECK) == DEFAULT_COST_CHECK
        validate_solver_settings(DEFAULT_CONVERGENCE_THRESHOLD, DEFAULT_MAX_ITERATIONS)


class TestValidateBackend:
    @pytest.mark.parametrize("backend", ["numpy", "torch", "jax"])
    def test_valid(self, backend):
        assert validate_backend(backend) == backend

    @pytest.mark.parametrize("backend", ["pytorch", "NumPy", ""])
    def test_invalid(self, backend):
        with pytest.raises(ValueError, match="Invalid backend"):
            validate_backend(backend)


class TestValidateCostCheck:
    @pytest.mark.parametrize("mode", ["error", "warn", "off"])
    def test_valid(self, mode):
        assert validate_cost_check(mode) == mode

    def test_invalid(self):
        with pytest.raises(ValueError, match="Invalid cost_check"):
            validate_cost_check("ignore")


class TestValidateSolverSettings:
    def test_numpy_integer_cap_accepted(self):
        validate_solver_settings(1e-12, np.int64(500))

    @pytest.mark.parametrize("threshold", [0.0, -1.0, float("inf"), float("nan")])
    def test_bad_threshold(self, threshold):
        with pytest.raises(ValueError, match="convergence_threshold"):
            validate_solver_settings(threshold, 100)

    def test_bad_cap_type(self):
        with pytest.raises(ValueError, match="must be an integer"):
            validate_solver_settings(1e-12, 100.0)

    def test_bool_cap_rejected(self):
        with pytest.raises(ValueError, match="must be an integer"):
            validate_solver_settings(1e-12, True)

    def test_non_positive_cap(self):
        with pytest.raises(ValueError, match=">= 1"):
            validate_solver_settings(1e-12, 0)


class TestRiccatiSolverConfig:
    def test_partial_config(self):
        config: RiccatiSolverConfig = {"max_iterations": 2000}
        assert config["max_iterations"] == 2000
        assert "backend" not in config

    def test_full_config(self):
        config: RiccatiSolverConfig = {
            "convergence_threshold": 1e-12,
            "max_iterations": 5000,
            "cost_check": "warn",
            "backend": "numpy",
        }
        assert validate_cost_check(config["cost_check"]) == "warn"
        assert validate_backend(config["backend"]) == "numpy"
