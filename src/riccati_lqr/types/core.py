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
Core Types - Matrix Building Blocks

Defines the matrix types that appear in a discrete-time LQR problem:
- Multi-backend array type (NumPy, PyTorch, JAX)
- Semantic matrix types (system, input, cost, gain, cost-to-go)

Shapes follow the usual state-space conventions with nx states and
nu control inputs:

    x[k+1] = A x[k] + B u[k]
    J = Σₖ (x[k]'Q x[k] + u[k]'R u[k] + 2 x[k]'N u[k])

Usage
-----
>>> from riccati_lqr.types.core import StateMatrix, InputMatrix, GainMatrix
>>>
>>> def control(x, K: GainMatrix):
...     return -K @ x
"""

from typing import TYPE_CHECKING, Union

import numpy as np

if TYPE_CHECKING:
    import jax.numpy as jnp
    import torch


# ============================================================================
# Basic Array Types - Multi-Backend Support
# ============================================================================

ArrayLike = Union[np.ndarray, "torch.Tensor", "jnp.ndarray"]
"""
Array-like type supporting multiple backends.

Can be NumPy array, PyTorch tensor, or JAX array. Nested Python lists
are also accepted wherever an ArrayLike is converted with np.asarray.
"""


# ============================================================================
# Matrix Types - Semantic Naming by Role
# ============================================================================

StateMatrix = ArrayLike
"""
State matrix (nx, nx).

Uses:
- A: state transition matrix
- Q: state cost weight
- P: Riccati solution (cost-to-go)

Examples
--------
>>> A: StateMatrix = np.array([[1.0, 0.1], [0.0, 1.0]])
>>> Q: StateMatrix = np.diag([10.0, 1.0])
"""

InputMatrix = ArrayLike
"""
Input matrix B (nx, nu).

Maps the control vector into the next state:
    x[k+1] = A x[k] + B u[k]

Also used for the state/control cross weight N, which has the same shape.

Examples
--------
>>> B: InputMatrix = np.array([[0.005], [0.1]])
"""

CostMatrix = ArrayLike
"""
Cost/weight matrix for optimal control.

Types:
- Q: State cost (nx, nx), symmetric positive semi-definite
- R: Control cost (nu, nu), symmetric positive definite
- N: Cross cost (nx, nu), couples state and control

The joint weight [[Q, N], [N', R]] must be positive semi-definite for the
cost to be bounded below.

Examples
--------
>>> Q: CostMatrix = np.diag([10, 1])
>>> R: CostMatrix = 0.1 * np.eye(1)
>>> N: CostMatrix = np.zeros((2, 1))
"""

GainMatrix = ArrayLike
"""
State feedback gain K (nu, nx).

Control law: u[k] = -K x[k]

Examples
--------
>>> K: GainMatrix = np.array([[1.0, 0.5]])  # (nu=1, nx=2)
>>> u = -K @ x
"""

CovarianceMatrix = ArrayLike
"""
Symmetric positive semi-definite (nx, nx) matrix.

The LQR cost-to-go P has this structure at the fixed point:
    J*(x0) = x0' P x0
"""


__all__ = [
    "ArrayLike",
    "StateMatrix",
    "InputMatrix",
    "CostMatrix",
    "GainMatrix",
    "CovarianceMatrix",
]
