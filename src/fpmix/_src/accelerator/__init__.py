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
Accelerator
===========

This module contains the convergence accelerators for fixed-point iterations.
"""

from .base import Accelerator
from .diis import DIIS
from .factory import new_accelerator
from .linear import LinearDamping
from .utils import error_measure
