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
Test independent and nested iteration sequences with the global timer enabled.
"""

from __future__ import annotations

import threading

import pytest
import torch

from fpmix import DIIS, FunctionProblem, LinearDamping, State, iterate
from fpmix._src.timing import timer
from fpmix._src.typing import Tensor


@pytest.fixture(autouse=True)
def enabled_timer():
    enabled = timer.enabled
    timer.enable()
    try:
        yield
    finally:
        if not enabled:
            timer.disable()


def contraction(x: Tensor) -> Tensor:
    return 0.5 * x + 3.0


def test_nested_advance() -> None:
    inner = LinearDamping(eta=0.5)

    def update(x: Tensor) -> Tensor:
        # inner fixed-point sequence of the same accelerator type
        state = State(x.clone())
        for _ in range(3):
            state.input = inner.advance(FunctionProblem(contraction), state)
        return state.input

    outer = LinearDamping(eta=0.5)
    state = State(torch.tensor([0.0], dtype=torch.double))
    for _ in range(3):
        state.input = outer.advance(FunctionProblem(update), state)

    assert outer.iter_step == 3
    assert inner.iter_step == 9


def test_nested_iterate() -> None:
    def update(x: Tensor) -> Tensor:
        # x -> 0.5 * g + 3 with g the fixed point of y -> 0.5 * y + 0.25 * x
        inner = iterate(
            lambda y: 0.5 * y + 0.25 * x,
            torch.zeros_like(x),
            accelerator=DIIS(eta=0.5, depth=3, restart=10),
        )
        return 0.5 * inner["x"] + 3.0

    result = iterate(
        update,
        torch.tensor([0.0], dtype=torch.double),
        accelerator=DIIS(eta=0.5, depth=3, restart=10),
    )

    # x = 0.5 * (0.5 * x) + 3
    assert result["converged"]
    assert pytest.approx(4.0, abs=1e-4) == result["x"].item()
    assert not timer.timers["Iterations"].is_running()


def test_threads() -> None:
    nthreads = 4
    barrier = threading.Barrier(nthreads)

    results: list[float] = []
    errors: list[BaseException] = []

    def run() -> None:
        try:
            mixer = DIIS(eta=0.5, depth=3, restart=10)
            problem = FunctionProblem(contraction)
            state = State(torch.zeros(2000, dtype=torch.double))

            barrier.wait(timeout=10)
            for _ in range(10):
                state.input = mixer.advance(problem, state)

            result = iterate(contraction, state.input, accelerator=mixer)
            results.append(result["x"].mean().item())
        except BaseException as e:  # pylint: disable=broad-except
            errors.append(e)

    threads = [threading.Thread(target=run) for _ in range(nthreads)]
    for th in threads:
        th.start()
    for th in threads:
        th.join()

    assert errors == []
    assert len(results) == nthreads
    assert pytest.approx([6.0] * nthreads, abs=1e-4) == results
    assert not timer.timers["Iterations"].is_running()
