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
Linear Damping
==============
"""

from __future__ import annotations

from fpmix._src.constants import defaults
from fpmix._src.problem import Problem, State
from fpmix._src.typing import Any, Tensor
from fpmix._src.utils import check_fraction

from .base import Accelerator

__all__ = ["LinearDamping"]


class LinearDamping(Accelerator):
    r"""
    Linear damping (simple mixing) of fixed-point iterations.

    Mixes the raw update with the input iterate via a simple linear
    combination:

    .. math::

        x_{n+1} = \eta f(x_n) + (1 - \eta) x_n

    With :math:`\eta = 1`, this is plain fixed-point iteration, and
    :math:`\eta = 0` does not move at all. Given a small enough damping
    fraction, linear damping converges for many problems where plain
    fixed-point iteration diverges. However, it tends to be significantly
    slower than :class:`~fpmix.DIIS`.

    Examples
    --------
    >>> import torch
    >>> from fpmix import FunctionProblem, LinearDamping, State
    >>>
    >>> problem = FunctionProblem(lambda x: 0.5 * x + 3.0)
    >>> state = State(torch.tensor([0.0]))
    >>> mixer = LinearDamping(eta=0.5)
    >>> for _ in range(50):
    >>>     state.input = mixer.advance(problem, state)
    >>> print(state.input)
    >>> # tensor([6.0000])
    """

    def __init__(
        self, eta: float = defaults.ETA, options: dict[str, Any] | None = None
    ) -> None:
        super().__init__(options)
        self._eta = check_fraction("eta", eta, allow_zero=True)

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(eta={self.eta}, {self.iter_step})"

    @property
    def eta(self) -> float:
        """Fraction of the raw update that is retained, ∈[0, 1]."""
        return self._eta

    def advance(self, problem: Problem, state: State) -> Tensor:
        x_old, x_new = self.evaluate(problem, state)
        return self.mix(x_new, x_old, self.eta)
