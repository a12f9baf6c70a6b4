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
Typing: Exceptions
==================

Custom exceptions and warnings for fpmix.

The accelerators raise :class:`AcceleratorConfigError` during construction,
:class:`ShapeMismatchError` for a broken problem contract and
:class:`SubspaceSolveError` if the DIIS subspace cannot be solved. All of them
are fatal for the respective call. :class:`ConvergenceError` and
:class:`ConvergenceWarning` are only issued by the iteration driver.
"""

from __future__ import annotations

from torch import Size

__all__ = [
    "AcceleratorConfigError",
    "ConvergenceError",
    "ConvergenceWarning",
    "ShapeMismatchError",
    "SubspaceSolveError",
    "ToleranceWarning",
]


class AcceleratorConfigError(ValueError):
    def __init__(self, msg: str) -> None:
        self.message = msg
        super().__init__(self.message)


class SubspaceSolveError(RuntimeError):
    def __init__(self, msg: str) -> None:
        self.message = msg
        super().__init__(self.message)


class ShapeMismatchError(RuntimeError):
    def __init__(self, shape_in: Size, shape_out: Size) -> None:
        self.message = (
            f"The update operator changed the shape of the iterate from "
            f"{tuple(shape_in)} to {tuple(shape_out)}."
        )
        super().__init__(self.message)


class ConvergenceError(RuntimeError):
    def __init__(self, msg: str) -> None:
        self.message = msg
        super().__init__(self.message)


class ConvergenceWarning(RuntimeWarning):
    """
    Warning for failed convergence of the fixed-point iteration.
    """


class ToleranceWarning(UserWarning):
    """
    Warning for unreasonable tolerances.

    Tolerances below the resolution of the floating point type can never be
    reached and are clipped.
    """
