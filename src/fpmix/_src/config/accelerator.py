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
Config: Accelerator
===================

Configuration for the convergence accelerators and the iteration driver.
"""

from __future__ import annotations

from fpmix._src.constants import defaults, labels
from fpmix._src.typing import Any
from fpmix._src.typing.exceptions import AcceleratorConfigError
from fpmix._src.utils import check_fraction, check_nonnegative, check_positive_int

__all__ = ["ConfigAccelerator"]


class ConfigAccelerator:
    """
    Configuration for the accelerator and the iteration driver.
    """

    mixer: int
    """Convergence acceleration scheme (integer label)."""

    eta: float
    """Damping fraction of the raw update (or the extrapolated residual)."""

    depth: int
    """Size of the DIIS subspace."""

    restart: int
    """Growth factor of the error measure that triggers a DIIS restart."""

    diagonal_offset: float | None
    """Offset for the diagonal of the DIIS residual overlap matrix."""

    maxiter: int
    """Maximum number of iterations of the driver."""

    x_tol: float
    """Convergence threshold for the norm of the residual."""

    force_convergence: bool
    """Whether to raise an error if the iteration does not converge."""

    def __init__(
        self,
        *,
        mixer: str | int = defaults.MIXER,
        eta: float = defaults.ETA,
        depth: int = defaults.DEPTH,
        restart: int = defaults.RESTART,
        diagonal_offset: float | None = defaults.DIAGONAL_OFFSET,
        maxiter: int = defaults.MAXITER,
        x_tol: float = defaults.X_TOL,
        force_convergence: bool = defaults.FORCE_CONVERGENCE,
    ) -> None:
        if isinstance(mixer, str):
            if mixer.casefold() in labels.MIXER_LINEAR_STRS:
                self.mixer = labels.MIXER_LINEAR
            elif mixer.casefold() in labels.MIXER_DIIS_STRS:
                self.mixer = labels.MIXER_DIIS
            else:
                raise ValueError(
                    f"Unknown mixer '{mixer}'. Choose from "
                    f"'{', '.join(labels.MIXER_MAP)}'."
                )
        elif isinstance(mixer, int) and not isinstance(mixer, bool):
            if mixer not in (labels.MIXER_LINEAR, labels.MIXER_DIIS):
                raise ValueError(
                    f"Unknown mixer '{mixer}'. Choose from "
                    f"'{', '.join(labels.MIXER_MAP)}'."
                )

            self.mixer = mixer
        else:
            raise TypeError(
                "The mixer must be of type 'int' or 'str', but "
                f"'{type(mixer)}' was given."
            )

        # zero damping is only meaningful for linear damping
        self.eta = check_fraction(
            "eta", eta, allow_zero=self.mixer == labels.MIXER_LINEAR
        )
        self.depth = check_positive_int("depth", depth)
        self.restart = check_positive_int("restart", restart)
        self.maxiter = check_positive_int("maxiter", maxiter)

        if diagonal_offset is not None:
            diagonal_offset = check_nonnegative("diagonal_offset", diagonal_offset)
        self.diagonal_offset = diagonal_offset

        x_tol = check_nonnegative("x_tol", x_tol)
        if x_tol == 0.0:
            raise AcceleratorConfigError(
                f"The setting 'x_tol' must be positive, but {x_tol} was given."
            )
        self.x_tol = float(x_tol)

        if not isinstance(force_convergence, bool):
            raise TypeError(
                "The setting 'force_convergence' must be of type 'bool', but "
                f"'{type(force_convergence)}' was given."
            )
        self.force_convergence = force_convergence

    def info(self) -> dict[str, Any]:
        """
        Return a dictionary with the accelerator settings for printing.

        Returns
        -------
        dict[str, Any]
            Settings of the accelerator.
        """
        info: dict[str, Any] = {
            "Mixer": labels.MIXER_MAP[self.mixer],
            "Damping (eta)": self.eta,
        }
        if self.mixer == labels.MIXER_DIIS:
            info["Subspace depth"] = self.depth
            info["Restart factor"] = self.restart
            info["Diagonal offset"] = self.diagonal_offset

        info["Maximum iterations"] = self.maxiter
        info["Tolerance (x_tol)"] = self.x_tol
        info["Force convergence"] = self.force_convergence

        return {"Accelerator Settings": info}

    def __str__(self) -> str:  # pragma: no cover
        info = self.info()["Accelerator Settings"]
        info_str = ", ".join(f"{key}={value}" for key, value in info.items())
        return f"{self.__class__.__name__}({info_str})"

    def __repr__(self) -> str:  # pragma: no cover
        return str(self)
