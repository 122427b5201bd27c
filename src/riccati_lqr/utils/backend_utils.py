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
Backend conversion helpers.

The Riccati iteration always runs on NumPy float64 arrays. These helpers move
caller arrays (NumPy, PyTorch, JAX, nested lists) into that representation
and move results back. PyTorch and JAX are imported lazily so that neither is
a hard dependency.
"""

from typing import Any

import numpy as np

from riccati_lqr.types.backends import DEFAULT_DTYPE, Backend


def detect_backend(arr: Any) -> str:
    """
    Auto-detect backend from array type.

    Args:
        arr: Array-like object

    Returns:
        Backend name: 'torch', 'jax', 'numpy', or 'unknown'
    """
    # Check PyTorch
    try:
        import torch

        if isinstance(arr, torch.Tensor):
            return "torch"
    except ImportError:
        pass

    # Check JAX
    try:
        import jax.numpy as jnp

        if isinstance(arr, jnp.ndarray) or type(arr).__module__.startswith("jax"):
            return "jax"
    except ImportError:
        pass

    if isinstance(arr, np.ndarray):
        return "numpy"

    return "unknown"


def to_numpy(arr: Any) -> np.ndarray:
    """
    Convert array from any backend to a float64 NumPy array.

    Always returns a new array, so the solver never aliases caller memory.

    Args:
        arr: NumPy array, PyTorch tensor, JAX array, or nested sequence

    Returns:
        NumPy array of dtype float64
    """
    if hasattr(arr, "detach") and hasattr(arr, "cpu"):
        # PyTorch tensor
        arr = arr.detach().cpu().numpy()
    return np.array(arr, dtype=DEFAULT_DTYPE, copy=True)


def from_numpy(arr: np.ndarray, backend: Backend) -> Any:
    """
    Convert NumPy array to the target backend.

    Args:
        arr: NumPy array
        backend: Target backend

    Returns:
        Array in target backend
    """
    if backend == "numpy":
        return arr
    if backend == "torch":
        import torch

        return torch.from_numpy(np.ascontiguousarray(arr))
    if backend == "jax":
        import jax.numpy as jnp

        return jnp.asarray(arr)
    return arr
