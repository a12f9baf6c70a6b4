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
Utility: Checks
===============

Validation of the accelerator settings. All checks raise an
:class:`~fpmix.exceptions.AcceleratorConfigError` for invalid values, such
that misconfigurations are reported at construction and not deep inside an
iteration.
"""

from __future__ import annotations

import math

from fpmix._src.typing import Any
from fpmix._src.typing.exceptions import AcceleratorConfigError

__all__ = ["check_fraction", "check_nonnegative", "check_positive_int"]


def _check_number(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise AcceleratorConfigError(
            f"The setting '{name}' must be a number, but '{type(value)}' was "
            "given."
        )
    return float(value)


def check_fraction(name: str, value: Any, allow_zero: bool = False) -> float:
    """
    Validate a mixing fraction.

    Parameters
    ----------
    name : str
        Name of the setting (for the error message).
    value : Any
        Value to check.
    allow_zero : bool, optional
        Whether zero is a valid fraction. Defaults to ``False``.

    Returns
    -------
    float
        The fraction as float.

    Raises
    ------
    AcceleratorConfigError
        The value is not a finite number in (0, 1] (or [0, 1]).
    """
    value = _check_number(name, value)

    if not math.isfinite(value) or not 0.0 <= value <= 1.0:
        invalid = True
    else:
        invalid = value == 0.0 and allow_zero is False

    if invalid:
        interval = "[0, 1]" if allow_zero else "(0, 1]"
        raise AcceleratorConfigError(
            f"The setting '{name}' must lie within {interval}, but {value} "
            "was given."
        )

    return value


def check_nonnegative(name: str, value: Any) -> float:
    """
    Validate a finite, non-negative number.

    Parameters
    ----------
    name : str
        Name of the setting (for the error message).
    value : Any
        Value to check.

    Returns
    -------
    float
        The validated number.

    Raises
    ------
    AcceleratorConfigError
        The value is negative or not finite.
    """
    value = _check_number(name, value)

    if not math.isfinite(value) or value < 0.0:
        raise AcceleratorConfigError(
            f"The setting '{name}' must be a non-negative number, but {value} "
            "was given."
        )

    return value


def check_positive_int(name: str, value: Any) -> int:
    """
    Validate a positive integer setting.

    Parameters
    ----------
    name : str
        Name of the setting (for the error message).
    value : Any
        Value to check.

    Returns
    -------
    int
        The validated integer.

    Raises
    ------
    AcceleratorConfigError
        The value is not an integer or smaller than one.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise AcceleratorConfigError(
            f"The setting '{name}' must be an integer, but '{type(value)}' was "
            "given."
        )

    if value < 1:
        raise AcceleratorConfigError(
            f"The setting '{name}' must be a positive integer, but {value} was "
            "given."
        )

    return value
