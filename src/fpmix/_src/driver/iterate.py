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
Driver: Iterate
===============

Straightforward loop around an accelerator. The loop stops as soon as the
accelerator reports convergence or the maximum number of iterations is
reached.

Example
-------
.. code-block:: python

    import torch
    from fpmix import ConfigAccelerator, iterate

    config = ConfigAccelerator(mixer="diis", eta=0.5, depth=3, restart=10)
    result = iterate(lambda x: 0.5 * x + 3.0, torch.tensor([0.0]), config=config)
    print(result["x"], result["iterations"])
"""

from __future__ import annotations

import torch

from fpmix._src.accelerator import Accelerator, new_accelerator
from fpmix._src.config import ConfigAccelerator
from fpmix._src.io import OutputHandler
from fpmix._src.problem import FunctionProblem, Problem, State
from fpmix._src.timing.decorator import timer_decorator
from fpmix._src.typing import Callable, Tensor
from fpmix._src.typing.exceptions import ConvergenceError, ConvergenceWarning

from .result import IterationResult

__all__ = ["iterate"]


@timer_decorator("Iterations")
def iterate(
    problem: Problem | Callable[[Tensor], Tensor],
    guess: Tensor | float,
    accelerator: Accelerator | None = None,
    config: ConfigAccelerator | None = None,
) -> IterationResult:
    """
    Solve a fixed-point problem with convergence acceleration.

    Parameters
    ----------
    problem : Problem | Callable[[Tensor], Tensor]
        Fixed-point problem or plain update function.
    guess : Tensor | float
        Starting iterate.
    accelerator : Accelerator | None, optional
        Accelerator to use. Defaults to ``None``, i.e., the accelerator is
        created from the ``config``.
    config : ConfigAccelerator | None, optional
        Configuration of the accelerator and of the loop (``maxiter`` and
        ``force_convergence``). Defaults to ``None``, i.e., default settings.

    Returns
    -------
    IterationResult
        Last accepted iterate and convergence information.

    Raises
    ------
    ConvergenceError
        No convergence within ``maxiter`` iterations and
        ``force_convergence`` is set.
    """
    if config is None:
        config = ConfigAccelerator()

    OutputHandler.header()
    OutputHandler.write(config.info(), v=4)

    if accelerator is None:
        accelerator = new_accelerator(config)
    else:
        OutputHandler.write_stdout("Accelerator: %s", accelerator, v=4)

    if not isinstance(problem, Problem):
        problem = FunctionProblem(problem)

    state = State(guess)
    maxiter = config.maxiter

    OutputHandler.write_stdout(
        f"\n{'iter':<5} {'Delta x':<17}{'Residual':<17}{'Restarts':<8}", v=3
    )
    OutputHandler.write_stdout(48 * "-", v=3)

    converged = False
    niter = 0
    for niter in range(1, maxiter + 1):
        x_old = state.input
        state.input = accelerator.advance(problem, state)

        if OutputHandler.verbosity >= 3:
            dx = torch.linalg.vector_norm(state.input - x_old)
            OutputHandler.write_row(
                f"{niter:4}",
                [
                    f"{dx: .6E}",
                    f"{accelerator.delta_norm: .6E}",
                    f"{accelerator.nrestarts:4}",
                ],
            )

        if accelerator.converged:
            converged = True
            break
    else:
        msg = (
            f"\nIteration does not converge after {maxiter} cycles using "
            f"{accelerator.label} with a damping factor of "
            f"{getattr(accelerator, 'eta', None)}."
        )
        if config.force_convergence is True:
            raise ConvergenceError(msg)

        # only issue warning, return anyway
        OutputHandler.warn(msg, ConvergenceWarning)

    OutputHandler.write_stdout(48 * "-", v=3)
    OutputHandler.write_stdout("", v=3)

    return {
        "x": state.input,
        "iterations": niter,
        "converged": converged,
        "nrestarts": accelerator.nrestarts,
    }
