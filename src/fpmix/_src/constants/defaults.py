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
Default Settings
================

This module contains the defaults for all `fpmix` accelerators and the
iteration driver.
"""

from __future__ import annotations

import torch

MIXER = "diis"
"""Convergence acceleration scheme."""

ETA = 0.5
"""Damping (mixing) fraction of the freshly computed update."""

DEPTH = 5
"""Size of the DIIS subspace, i.e., number of stored iterates."""

RESTART = 10
"""
Growth factor of the error measure (relative to the smallest one in the
history) that triggers a restart of the DIIS subspace.
"""

DIAGONAL_OFFSET = 0.01
"""
Offset for the diagonal of the DIIS residual overlap matrix. The diagonal is
scaled by ``1 + offset**2`` to avoid a linearly dependent subspace.
"""

MAXITER = 100
"""Maximum number of fixed-point iterations of the driver."""

X_TOL = 1.0e-5
"""Convergence threshold for the norm of the residual."""

TOL_FACTOR = 50
"""
Smallest allowed tolerance in multiples of the floating point resolution of
the iterate's dtype.
"""

FORCE_CONVERGENCE = False
"""Whether to raise an error for un-converged iterations."""

VERBOSITY = 5
"""Verbosity of printout."""

TORCH_DTYPE = torch.double
"""Default data type for floating point tensors."""

