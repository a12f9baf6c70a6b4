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
DIIS
====

Direct inversion in the iterative subspace (DIIS), also known as Pulay
extrapolation, with damping of the extrapolated residual and a restart
safeguard against divergence.
"""

from __future__ import annotations

from collections import deque

import torch
from tad_mctc.math import einsum

from fpmix._src.constants import defaults
from fpmix._src.io import OutputHandler
from fpmix._src.problem import Problem, State
from fpmix._src.typing import Any, Tensor
from fpmix._src.typing.exceptions import SubspaceSolveError
from fpmix._src.utils import check_fraction, check_nonnegative, check_positive_int

from .base import Accelerator
from .utils import error_measure

__all__ = ["DIIS"]


class DIIS(Accelerator):
    r"""
    DIIS (Pulay) convergence accelerator.

    The accelerator keeps a sliding window of the last ``depth`` raw iterates
    :math:`f(x_i)` and their residuals :math:`r_i = f(x_i) - x_i`. Once the
    window is full, the coefficients :math:`c_i` that minimize the norm of
    :math:`\sum_i c_i r_i` under the constraint :math:`\sum_i c_i = 1` are
    obtained from the augmented linear system

    .. math::

        \begin{pmatrix}
            \mathbf{B} & -\mathbf{1} \\
            -\mathbf{1}^T & 0
        \end{pmatrix}
        \begin{pmatrix} \mathbf{c} \\ \lambda \end{pmatrix}
        =
        \begin{pmatrix} \mathbf{0} \\ -1 \end{pmatrix},
        \qquad B_{ij} = \langle r_i | r_j \rangle

    and the new iterate is

    .. math::

        x_{n+1} = \sum_i c_i f(x_i) + \eta \sum_i c_i r_i .

    Note
    ----
    Linear damping with the same ``eta`` is used until ``depth`` iterates
    have been collected (warm-up).

    If the error measure of an extrapolated iterate exceeds ``restart`` times
    the smallest error measure in the history, the extrapolation is
    discarded. The raw iterate of the step with the smallest error measure is
    returned instead and the history is cleared, i.e., the next step is a
    warm-up step again. This is a regular outcome, not an error.

    Warning
    -------
    With the default ``diagonal_offset=0.01``, the matrix is *not* the bare
    Pulay matrix: the diagonal of :math:`\mathbf{B}` is scaled by
    :math:`1 + \text{offset}^2`. This rescaling is what makes problems with
    linearly dependent residuals solvable at all. For a problem with a single
    element (or any ``depth`` larger than the number of elements),
    :math:`\mathbf{B}` has rank one and the bare system
    (``diagonal_offset=None``) is singular, e.g., the scalar contraction
    :math:`f(x) = 0.5 x + 3` with ``depth=3`` fails on its first
    extrapolation. A subspace that can not be solved raises a
    :class:`~fpmix.exceptions.SubspaceSolveError`.

    References
    ----------
    .. [Pulay] Pulay, P. (1980). Convergence acceleration of iterative
       sequences. The case of SCF iteration. Chemical Physics Letters, 73(2),
       393–398.
    """

    def __init__(
        self,
        eta: float = defaults.ETA,
        depth: int = defaults.DEPTH,
        restart: int = defaults.RESTART,
        diagonal_offset: float | None = defaults.DIAGONAL_OFFSET,
        options: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(options)

        self._eta = check_fraction("eta", eta)
        self._depth = check_positive_int("depth", depth)
        self._restart = check_positive_int("restart", restart)

        if diagonal_offset is not None:
            diagonal_offset = check_nonnegative("diagonal_offset", diagonal_offset)
        self._diagonal_offset = diagonal_offset

        # bounded sliding windows, appending evicts the oldest entry
        self._iterates: deque[Tensor] = deque(maxlen=self._depth)
        self._residuals: deque[Tensor] = deque(maxlen=self._depth)
        self._errors: deque[Tensor] = deque(maxlen=self._depth)

    def __str__(self) -> str:
        return (
            f"{self.__class__.__name__}(eta={self.eta}, depth={self.depth}, "
            f"restart={self.restart}, {self.iter_step})"
        )

    @property
    def eta(self) -> float:
        """Damping fraction of the (extrapolated) residual, ∈(0, 1]."""
        return self._eta

    @property
    def depth(self) -> int:
        """Size of the subspace."""
        return self._depth

    @property
    def restart(self) -> int:
        """Growth factor of the error measure that triggers a restart."""
        return self._restart

    @property
    def diagonal_offset(self) -> float | None:
        """Offset for the diagonal of the residual overlap matrix."""
        return self._diagonal_offset

    @property
    def history_length(self) -> int:
        """Number of entries in the history."""
        return len(self._iterates)

    @property
    def iterates(self) -> tuple[Tensor, ...]:
        """Raw iterates in the history (oldest first)."""
        return tuple(self._iterates)

    @property
    def residuals(self) -> tuple[Tensor, ...]:
        """Residuals in the history (oldest first)."""
        return tuple(self._residuals)

    @property
    def errors(self) -> tuple[Tensor, ...]:
        """Error measures in the history (oldest first)."""
        return tuple(self._errors)

    def advance(self, problem: Problem, state: State) -> Tensor:
        x_old, x_new = self.evaluate(problem, state)
        residual = x_new - x_old

        # warm-up: linear damping while the history is built up
        if len(self._iterates) < self.depth:
            x_mix = self.mix(x_new, x_old, self.eta)

            self._iterates.append(x_new)
            self._residuals.append(residual)
            self._errors.append(error_measure(x_old, x_mix))
            return x_mix

        x_mix = self.extrapolate()
        err = error_measure(x_old, x_mix)

        # The windows are not rotated yet, so index `i` refers to the same
        # step in all three buffers.
        errors = torch.stack(tuple(self._errors))
        idx = int(torch.argmin(errors))

        if err > self.restart * errors[idx]:
            OutputHandler.write_stdout(
                "%s: Error measure %.6e exceeds %d times the minimum %.6e in "
                "the subspace. Restarting.",
                self.label,
                err.item(),
                self.restart,
                errors[idx].item(),
                v=4,
            )
            x_mix = self._iterates[idx]

            self.clear()
            self.nrestarts += 1
            return x_mix

        self._iterates.append(x_new)
        self._residuals.append(residual)
        self._errors.append(err)

        return x_mix

    def extrapolate(self) -> Tensor:
        """
        Solve the DIIS subspace & return the extrapolated iterate.

        Returns
        -------
        Tensor
            Extrapolated iterate.

        Raises
        ------
        SubspaceSolveError
            The subspace matrix is singular or the coefficients are not
            finite.
        """
        n = len(self._iterates)
        if n == 0:
            raise RuntimeError("The subspace is empty. Nothing to extrapolate.")

        shape = self._iterates[0].shape

        iterates = torch.stack(tuple(self._iterates)).reshape(n, -1)
        residuals = torch.stack(tuple(self._residuals)).reshape(n, -1)

        # overlap of all residuals in the subspace
        b_mat = einsum("iv,jv->ij", residuals, residuals)

        # Rescale diagonal to prevent linear dependence of the residual
        # vectors by adding 1 + offset^2 to the diagonals.
        if self.diagonal_offset is not None and self.diagonal_offset > 0.0:
            eye = torch.eye(n, device=b_mat.device, dtype=b_mat.dtype)
            b_mat = b_mat * (1.0 + eye * self.diagonal_offset**2)

        # augment with the Lagrange multiplier of the constraint sum(c) = 1
        a = b_mat.new_full((n + 1, n + 1), -1.0)
        a[-1, -1] = 0.0
        a[:n, :n] = b_mat

        rhs = b_mat.new_zeros(n + 1)
        rhs[-1] = -1.0

        try:
            coeffs = torch.linalg.solve(a, rhs)
        except torch.linalg.LinAlgError as e:
            raise SubspaceSolveError(
                f"The DIIS subspace of dimension {n} could not be solved. "
                "The residuals are linearly dependent."
            ) from e

        if not torch.isfinite(coeffs).all():
            raise SubspaceSolveError(
                f"The DIIS subspace of dimension {n} yields non-finite "
                "coefficients. The residuals are linearly dependent."
            )

        # discard Lagrange multiplier
        c = coeffs[:-1]

        c_hist = einsum("h,hv->v", c, iterates)
        min_res = einsum("h,hv->v", c, residuals)

        return (c_hist + self.eta * min_res).reshape(shape)

    def clear(self) -> None:
        """Clear the history (all three buffers)."""
        self._iterates.clear()
        self._residuals.clear()
        self._errors.clear()

    def reset(self) -> None:
        """Reset accelerator to its initial state."""
        super().reset()
        self.clear()
