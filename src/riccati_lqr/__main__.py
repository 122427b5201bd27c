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
Demonstration: LQR gain of a 4-state, single-input reference system.

Run with:
    python -m riccati_lqr
"""

import sys

import numpy as np

from riccati_lqr.control.riccati_solver import RiccatiSolver


def reference_problem():
    """Return (A, B, Q, R, N) of the reference system."""
    A = np.array(
        [
            [0.9904, 0.04772, 0.004251, 0.0007791],
            [-0.3764, 0.9061, 0.167, 0.03211],
            [0.002975, -0.004629, 0.9985, 0.04999],
            [0.1309, -0.1814, -0.06348, 0.9982],
        ]
    )
    B = np.array([[-0.00241], [-0.09491], [-9.478e-05], [-0.0007852]])
    Q = np.zeros((4, 4))
    Q[2, 2] = 1.0
    R = np.array([[100.0]])
    N = np.zeros((4, 1))
    return A, B, Q, R, N


def format_matrix(matrix: np.ndarray, precision: int = 6) -> str:
    """Bracketed fixed-precision rendering of a matrix."""
    return np.array2string(
        np.asarray(matrix),
        precision=precision,
        floatmode="fixed",
        suppress_small=False,
        separator=", ",
    )


def main(convergence_threshold: float = 1e-9) -> int:
    """Solve the reference problem and print the gain."""
    A, B, Q, R, N = reference_problem()

    solver = RiccatiSolver(convergence_threshold=convergence_threshold)
    solution = solver.solve(A, B, Q, R, N)

    if not solution["success"]:
        print(f"ERROR: {solution['message']}", file=sys.stderr)
        return 1

    print(f"Converged in {solution['iterations']} iterations")
    print("K =")
    print(format_matrix(solution["gain"]))
    return 0


if __name__ == "__main__":
    sys.exit(main())
