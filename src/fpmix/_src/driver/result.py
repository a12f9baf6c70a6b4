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
Driver: Result
==============

Result type of the iteration driver.
"""

from __future__ import annotations

from fpmix._src.typing import Tensor, TypedDict

__all__ = ["IterationResult"]


class IterationResult(TypedDict):
    """Collection of iteration result variables."""

    x: Tensor
    """Last accepted iterate."""

    iterations: int
    """Number of iterations (evaluations of the update operator)."""

    converged: bool
    """Whether the residual norm dropped below the tolerance."""

    nrestarts: int
    """Number of restarts of the accelerator's history."""
