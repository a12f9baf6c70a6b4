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
ABC: Accelerator
================

This module contains the abstract base class for all convergence
accelerators.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import torch

from fpmix._src.constants import defaults
from fpmix._src.io import OutputHandler
from fpmix._src.problem import Problem, State
from fpmix._src.typing import Any, Tensor
from fpmix._src.typing.exceptions import ShapeMismatchError, ToleranceWarning

__all__ = ["Accelerator", "DEFAULT_OPTS"]


DEFAULT_OPTS = {"x_tol": defaults.X_TOL}


class Accelerator(ABC):
    """
    Abstract base class for convergence accelerators.

    An accelerator takes the fixed-point problem and the current state,
    evaluates the update operator exactly once and returns the next iterate.
    The driver writes the returned iterate back into the state.
    """

    label: str
    """Label for the Accelerator."""

    iter_step: int
    """Number of accelerated steps taken."""

    nrestarts: int
    """Number of restarts of the accelerator's history."""

    options: dict[str, Any]
    """Options for the accelerator (tolerances, ...)."""

    _delta: Tensor | None
    """Residual of the last step (raw update minus input)."""

    def __init__(self, options: dict[str, Any] | None = None) -> None:
        self.label = self.__class__.__name__

        opts = dict(DEFAULT_OPTS)
        if options is not None:
            opts.update(options)
        self.options = opts

        self.iter_step = 0
        self.nrestarts = 0
        self._delta = None

    def __str__(self) -> str:
        """Returns representative string."""
        return f"{self.__class__.__name__}({self.iter_step}, {self.options})"

    def __repr__(self) -> str:
        return str(self)

    @abstractmethod
    def advance(self, problem: Problem, state: State) -> Tensor:
        """
        Perform one accelerated step & return the new iterate.

        The update operator of the problem is evaluated exactly once. The
        state is not modified.

        Parameters
        ----------
        problem : Problem
            Fixed-point problem providing the update operator.
        state : State
            Iteration state holding the current iterate.

        Returns
        -------
        Tensor
            New iterate (a new tensor, not a view of the input).
        """

    def evaluate(self, problem: Problem, state: State) -> tuple[Tensor, Tensor]:
        """
        Evaluate the update operator and check its contract.

        Parameters
        ----------
        problem : Problem
            Fixed-point problem providing the update operator.
        state : State
            Iteration state holding the current iterate.

        Returns
        -------
        tuple[Tensor, Tensor]
            Input iterate and raw (unaccelerated) output of the update.

        Raises
        ------
        ShapeMismatchError
            The update operator changed the shape of the iterate.
        """
        x_old = state.input
        x_new = problem.update(x_old)

        if not isinstance(x_new, Tensor):
            raise TypeError(
                "The update operator must return a tensor, but "
                f"'{type(x_new)}' was returned."
            )
        if x_new.shape != x_old.shape:
            raise ShapeMismatchError(x_old.shape, x_new.shape)

        if self.iter_step == 0:
            self._check_tolerance(x_old.dtype)

        self.iter_step += 1
        self._delta = x_new - x_old

        return x_old, x_new

    def _check_tolerance(self, dtype: torch.dtype) -> None:
        """
        Clip tolerances that cannot be reached with the given precision.

        Parameters
        ----------
        dtype : torch.dtype
            Floating point type of the iterate.
        """
        tol_min = torch.finfo(dtype).resolution * defaults.TOL_FACTOR

        x_tol = self.options["x_tol"]
        if x_tol < tol_min:
            OutputHandler.warn(
                f"Tolerance x_tol={x_tol} is below the resolution of "
                f"'{dtype}' and is clipped to {tol_min}.",
                ToleranceWarning,
            )
            self.options["x_tol"] = tol_min

    @staticmethod
    def mix(x_new: Tensor, x_old: Tensor, eta: float) -> Tensor:
        r"""
        Linear combination of the raw update and the input iterate.

        .. math::

            x_\text{mix} = \eta x_\text{new} + (1 - \eta) x_\text{old}

        Parameters
        ----------
        x_new : Tensor
            Raw output of the update operator.
        x_old : Tensor
            Input iterate.
        eta : float
            Fraction of the raw update that is retained.

        Returns
        -------
        Tensor
            Mixed iterate.
        """
        return eta * x_new + (1.0 - eta) * x_old

    @property
    def delta(self) -> Tensor:
        """
        Residual of the last step, i.e., the difference between the raw update
        and the input iterate.
        """
        if self._delta is None:
            raise RuntimeError("Accelerator has not been started yet.")
        return self._delta

    @property
    def delta_norm(self) -> Tensor:
        """Norm of the residual of the last step."""
        return torch.linalg.vector_norm(self.delta)

    @property
    def converged(self) -> Tensor:
        """
        Convergence status of the iteration.

        The iteration is considered to have converged if the norm of the last
        residual is less than the ``x_tol`` value.
        """
        return self.delta_norm < self.options["x_tol"]

    def reset(self) -> None:
        """
        Resets the accelerator to its initial state.

        Any properties set during the initialisation process are retained.
        """
        self.iter_step = 0
        self.nrestarts = 0
        self._delta = None
