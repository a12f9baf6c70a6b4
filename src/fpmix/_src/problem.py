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
Problem and State
=================

The fixed-point problem and the iteration state that the accelerators work
on. Both are thin collaborators of the accelerators: the problem provides the
(possibly expensive) update operator and the state holds the iterate that is
currently accepted by the driver.

Example
-------
.. code-block:: python

    import torch
    from fpmix import FunctionProblem, LinearDamping, State

    problem = FunctionProblem(lambda x: 0.5 * x + 3.0)
    state = State(torch.tensor([0.0], dtype=torch.double))

    mixer = LinearDamping(eta=0.5)
    for _ in range(40):
        state.input = mixer.advance(problem, state)
"""

from __future__ import annotations

from tad_mctc.convert import any_to_tensor

from .constants import defaults
from .typing import Callable, Protocol, Tensor, runtime_checkable

__all__ = ["FunctionProblem", "Problem", "State"]


@runtime_checkable
class Problem(Protocol):
    """
    Fixed-point problem :math:`x = f(x)`.

    The only requirement is an ``update`` method that maps the current iterate
    onto the next (unaccelerated) iterate of the same shape.
    """

    def update(self, x: Tensor) -> Tensor:
        """
        Apply the update operator once.

        Parameters
        ----------
        x : Tensor
            Current iterate.

        Returns
        -------
        Tensor
            Next raw iterate with the same shape as ``x``.
        """
        ...  # pragma: no cover


class FunctionProblem:
    """
    Wrap a plain callable as a :class:`Problem`.
    """

    fcn: Callable[[Tensor], Tensor]
    """Update operator."""

    nevals: int
    """Number of evaluations of the update operator."""

    def __init__(self, fcn: Callable[[Tensor], Tensor]) -> None:
        if not callable(fcn):
            raise TypeError(
                f"The update operator must be callable, but '{type(fcn)}' was "
                "given."
            )

        self.fcn = fcn
        self.nevals = 0

    def update(self, x: Tensor) -> Tensor:
        self.nevals += 1
        return self.fcn(x)

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.fcn}, nevals={self.nevals})"

    def __repr__(self) -> str:
        return str(self)


class State:
    """
    State of the fixed-point iteration.

    The state wraps exactly one iterate. The driver reads it to seed the next
    accelerator step and overwrites it with the returned iterate.
    """

    input: Tensor
    """Currently accepted iterate."""

    def __init__(self, guess: Tensor | float | int) -> None:
        if isinstance(guess, Tensor):
            self.input = guess
        else:
            self.input = any_to_tensor(guess, dtype=defaults.TORCH_DTYPE)

        if not self.input.is_floating_point():
            raise TypeError(
                "The iterate must be a floating point tensor, but dtype "
                f"'{self.input.dtype}' was given."
            )

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(shape={tuple(self.input.shape)})"

    def __repr__(self) -> str:
        return str(self)
