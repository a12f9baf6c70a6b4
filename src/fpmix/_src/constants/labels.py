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
Labels
======

Labels for the accelerator options.
"""

MIXER_LINEAR = 0
"""Integer code for linear damping (simple mixing)."""

MIXER_LINEAR_STRS = ("linear", "l", "simple", "s", "damping")
"""String codes for linear damping (simple mixing)."""

MIXER_DIIS = 1
"""Integer code for DIIS (Pulay) extrapolation."""

MIXER_DIIS_STRS = ("diis", "d", "pulay", "p")
"""String codes for DIIS (Pulay) extrapolation."""

MIXER_MAP = ["Linear", "DIIS"]
"""String map (for printing) of accelerators."""
