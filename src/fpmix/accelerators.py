# This file is part of fpmix.
#
# SPDX-Identifier: Apache-2.0
# Copyright (C) 2024 fpmix developers
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""
Accelerators
============

Convergence accelerators for fixed-point iterations :math:`x = f(x)`.

All accelerators share the same interface: given the problem and the current
state, :meth:`~fpmix.accelerators.Accelerator.advance` evaluates the update
operator once and returns the next iterate, which the caller writes back into
the state.

.. code-block:: python

    import torch
    from fpmix import DIIS, FunctionProblem, State

    problem = FunctionProblem(lambda x: 0.5 * x + 3.0)
    state = State(torch.tensor([0.0], dtype=torch.double))

    diis = DIIS(eta=0.5, depth=3, restart=10)
    for _ in range(10):
        state.input = diis.advance(problem, state)

Two accelerators are available:

- :class:`~fpmix.accelerators.LinearDamping`: simple mixing of the raw update
  with the input iterate.
- :class:`~fpmix.accelerators.DIIS`: Pulay extrapolation over a bounded
  history of iterates and residuals with a restart safeguard.

Accelerators can also be created from a configuration with
:func:`~fpmix.accelerators.new_accelerator`.
"""

from fpmix._src.accelerator import DIIS as DIIS
from fpmix._src.accelerator import Accelerator as Accelerator
from fpmix._src.accelerator import LinearDamping as LinearDamping
from fpmix._src.accelerator import error_measure as error_measure
from fpmix._src.accelerator import new_accelerator as new_accelerator
