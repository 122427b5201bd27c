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
Tests for backend_utils.py

Run with:
    pytest tests/unit/utils_unit_tests/backend_utils_test.py -v
"""

import numpy as np
import pytest
from numpy.testing import assert_array_equal

from riccati_lqr.utils.backend_utils import detect_backend, from_numpy, to_numpy

# Conditional imports
torch_available = False
jax_available = False

try:
    import torch

    torch_available = True
except ImportError:
    pass

try:
    import jax.numpy as jnp

    jax_available = True
except ImportError:
    pass


# ============================================================================
# Test: detect_backend()
# ============================================================================


class TestDetectBackend:
    """Test automatic backend detection from array types"""

    def test_detect_numpy_array(self):
        assert detect_backend(np.ones((3, 4))) == "numpy"

    def test_detect_unknown(self):
        assert detect_backend([[1.0, 2.0]]) == "unknown"

    @pytest.mark.skipif(not torch_available, reason="PyTorch not installed")
    def test_detect_torch_tensor(self):
        assert detect_backend(torch.ones(2, 2)) == "torch"

    @pytest.mark.skipif(not jax_available, reason="JAX not installed")
    def test_detect_jax_array(self):
        assert detect_backend(jnp.ones((2, 2))) == "jax"


# ============================================================================
# Test: to_numpy()
# ============================================================================


class TestToNumpy:
    """Test conversion into the solver's working representation"""

    def test_list_converted_to_float64(self):
        arr = to_numpy([[1, 2], [3, 4]])
        assert isinstance(arr, np.ndarray)
        assert arr.dtype == np.float64
        assert arr.shape == (2, 2)

    def test_integer_array_upcast(self):
        assert to_numpy(np.eye(2, dtype=int)).dtype == np.float64

    def test_float32_upcast(self):
        assert to_numpy(np.ones(3, dtype=np.float32)).dtype == np.float64

    def test_returns_copy(self):
        original = np.eye(2)
        converted = to_numpy(original)
        converted[0, 0] = 99.0
        assert original[0, 0] == 1.0

    @pytest.mark.skipif(not torch_available, reason="PyTorch not installed")
    def test_torch_tensor_with_grad(self):
        tensor = torch.ones(2, 2, requires_grad=True)
        arr = to_numpy(tensor)
        assert isinstance(arr, np.ndarray)
        assert arr.dtype == np.float64
        assert_array_equal(arr, np.ones((2, 2)))

    @pytest.mark.skipif(not jax_available, reason="JAX not installed")
    def test_jax_array(self):
        arr = to_numpy(jnp.eye(2))
        assert isinstance(arr, np.ndarray)
        assert_array_equal(arr, np.eye(2))


# ============================================================================
# Test: from_numpy()
# ============================================================================


class TestFromNumpy:
    """Test conversion of results to the requested backend"""

    def test_numpy_passthrough(self):
        arr = np.eye(2)
        assert from_numpy(arr, "numpy") is arr

    @pytest.mark.skipif(not torch_available, reason="PyTorch not installed")
    def test_to_torch(self):
        tensor = from_numpy(np.eye(2), "torch")
        assert isinstance(tensor, torch.Tensor)
        assert tensor.dtype == torch.float64

    @pytest.mark.skipif(not torch_available, reason="PyTorch not installed")
    def test_to_torch_non_contiguous(self):
        tensor = from_numpy(np.arange(6.0).reshape(2, 3).T, "torch")
        assert tuple(tensor.shape) == (3, 2)

    @pytest.mark.skipif(not jax_available, reason="JAX not installed")
    def test_to_jax(self):
        arr = from_numpy(np.eye(2), "jax")
        assert detect_backend(arr) == "jax"

    @pytest.mark.skipif(not torch_available, reason="PyTorch not installed")
    def test_torch_round_trip_keeps_backend(self):
        tensor = torch.eye(3, dtype=torch.float64)
        restored = from_numpy(to_numpy(tensor), detect_backend(tensor))
        assert isinstance(restored, torch.Tensor)
        assert torch.equal(restored, tensor)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
