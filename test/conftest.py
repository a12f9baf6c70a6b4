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
Setup for pytest.
"""

from __future__ import annotations

import pytest
import torch

from fpmix import OutputHandler
from fpmix._src.timing import timer

# avoid randomness and non-deterministic algorithms
torch.manual_seed(0)
torch.use_deterministic_algorithms(True)

torch.set_printoptions(precision=10)


def pytest_addoption(parser: pytest.Parser) -> None:
    """Set up additional command line options."""

    parser.addoption(
        "--with-timer",
        action="store_true",
        help=(
            "Run test with timer enabled. Due to missing teardowns, test "
            "pollution occurs for failing tests."
        ),
    )


def pytest_configure(config: pytest.Config) -> None:
    """Pytest configuration hook."""

    if config.getoption("--with-timer"):
        timer.enable()
    else:
        timer.disable()

    # register an additional marker
    config.addinivalue_line("markers", "cuda: mark test that require CUDA.")


def pytest_runtest_setup(item: pytest.Function) -> None:
    """Custom marker for tests requiring CUDA."""

    for _ in item.iter_markers(name="cuda"):
        if not torch.cuda.is_available():
            pytest.skip("Torch not compiled with CUDA or no CUDA device available.")


@pytest.fixture(autouse=True)
def quiet_output():
    """Silence the iteration printout and avoid pollution from warnings."""
    OutputHandler.clear_warnings()
    with OutputHandler.with_verbosity(0):
        yield
    OutputHandler.clear_warnings()
