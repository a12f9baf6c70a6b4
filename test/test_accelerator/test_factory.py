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
Test the creation of accelerators from the configuration.
"""

from __future__ import annotations

import pytest

from fpmix import DIIS, ConfigAccelerator, LinearDamping
from fpmix._src.constants import defaults
from fpmix.accelerators import new_accelerator


def test_default() -> None:
    mixer = new_accelerator()

    assert isinstance(mixer, DIIS)
    assert mixer.eta == defaults.ETA
    assert mixer.depth == defaults.DEPTH
    assert mixer.restart == defaults.RESTART
    assert mixer.diagonal_offset == defaults.DIAGONAL_OFFSET
    assert mixer.options["x_tol"] == defaults.X_TOL


@pytest.mark.parametrize("label", ["linear", "Simple", "damping", 0])
def test_linear(label: str | int) -> None:
    config = ConfigAccelerator(mixer=label, eta=0.2, x_tol=1e-7)
    mixer = new_accelerator(config)

    assert isinstance(mixer, LinearDamping)
    assert mixer.eta == 0.2
    assert mixer.options["x_tol"] == 1e-7


@pytest.mark.parametrize("label", ["diis", "Pulay", 1])
def test_diis(label: str | int) -> None:
    config = ConfigAccelerator(
        mixer=label, eta=0.3, depth=4, restart=5, diagonal_offset=None
    )
    mixer = new_accelerator(config)

    assert isinstance(mixer, DIIS)
    assert mixer.eta == 0.3
    assert mixer.depth == 4
    assert mixer.restart == 5
    assert mixer.diagonal_offset is None


def test_fail() -> None:
    config = ConfigAccelerator()
    config.mixer = 7

    with pytest.raises(ValueError):
        new_accelerator(config)
