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
Discrete-Time LQR Design
========================

Riccati fixed-point solver, LQR design and stability analysis.

Solver
------
>>> from riccati_lqr.control import RiccatiSolver, solve_discrete_riccati
>>>
>>> # Non-raising interface
>>> solution = RiccatiSolver(convergence_threshold=1e-12).solve(A, B, Q, R)
>>> if solution['success']:
...     K = solution['gain']
>>>
>>> # Raising interface
>>> solution = solve_discrete_riccati(A, B, Q, R, convergence_threshold=1e-12)

Control Synthesis
-----------------
>>> from riccati_lqr.control import ControlSynthesis, design_lqr, analyze_stability
>>>
>>> # Object-oriented interface
>>> synth = ControlSynthesis(convergence_threshold=1e-12)
>>> result = synth.design_lqr(A, B, Q, R)
>>>
>>> # Functional interface
>>> result = design_lqr(A, B, Q, R, convergence_threshold=1e-12)
>>> stability = analyze_stability(A - B @ result['gain'])

Authors
-------
Gil Benezer

License
-------
GNU Affero General Public License v3.0
"""

# Classes
from .control_synthesis import ControlSynthesis
from .riccati_solver import (
    ConvergenceError,
    RiccatiSolver,
    SingularMatrixError,
    checked_solve,
    dare_residual,
    solve_discrete_riccati,
)

# Functional interface
from .classical_control_functions import (
    analyze_stability,
    design_lqr,
)

# Export public API
__all__ = [
    # Classes
    "ControlSynthesis",
    "RiccatiSolver",
    # Exceptions
    "ConvergenceError",
    "SingularMatrixError",
    # Solver functions
    "solve_discrete_riccati",
    "dare_residual",
    "checked_solve",
    # Control design functions
    "design_lqr",
    # Analysis functions
    "analyze_stability",
]
