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
Accelerator: Utility
====================

Error measure of the DIIS restart safeguard.
"""

from __future__ import annotations

import torch

from fpmix._src.typing import Tensor

__all__ = ["error_measure"]


def error_measure(prev: Tensor, curr: Tensor) -> Tensor:
    r"""
    Cheap divergence signal of a step from ``prev`` to ``curr``.

    .. math::

        e = \frac{1}{N} \left( \sum_k (x^\text{curr}_k - x^\text{prev}_k) \right)^2

    Note
    ----
    The elementwise difference is summed *before* squaring. Hence, this is not
    a mean-square (or RMS) deviation and differences of opposite sign cancel.
    The measure is non-negative and exactly zero for identical inputs.

    Parameters
    ----------
    prev : Tensor
        Previous iterate.
    curr : Tensor
        Current iterate.

    Returns
    -------
    Tensor
        Scalar error measure.
    """
    return torch.sum(curr - prev) ** 2 / curr.numel()
