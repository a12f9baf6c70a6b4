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
Test DIIS extrapolation and its restart safeguard.
"""

from __future__ import annotations

import pytest
import torch

from fpmix import DIIS, FunctionProblem, LinearDamping, State
from fpmix._src.typing import DD, Tensor
from fpmix.exceptions import AcceleratorConfigError, SubspaceSolveError


def contraction(x: Tensor) -> Tensor:
    return 0.5 * x + 3.0


def divergent(x: Tensor) -> Tensor:
    return 3.0 * x + 1.0


@pytest.mark.parametrize("dtype", [torch.float, torch.double])
def test_warmup(dtype: torch.dtype) -> None:
    dd: DD = {"device": None, "dtype": dtype}

    problem = FunctionProblem(contraction)
    state = State(torch.tensor([0.0], **dd))

    mixer = DIIS(eta=0.5, depth=3, restart=10)
    ref = LinearDamping(eta=0.5)

    x_ref = state.input
    for i in range(1, 4):
        state.input = mixer.advance(problem, state)
        x_ref = ref.advance(FunctionProblem(contraction), State(x_ref))

        # warm-up steps are identical to linear damping
        assert pytest.approx(x_ref.cpu()) == state.input.cpu()
        assert mixer.history_length == i

    assert pytest.approx([3.0, 3.75, 4.3125]) == [t.item() for t in mixer.iterates]
    assert pytest.approx([3.0, 2.25, 1.6875]) == [t.item() for t in mixer.residuals]
    assert pytest.approx([2.25, 1.265625, 0.7119140625]) == [
        t.item() for t in mixer.errors
    ]


def test_buffers_have_equal_length() -> None:
    problem = FunctionProblem(contraction)
    state = State(torch.tensor([0.0, 1.0, -2.0], dtype=torch.double))

    depth = 3
    mixer = DIIS(eta=0.5, depth=depth, restart=10)
    for _ in range(8):
        state.input = mixer.advance(problem, state)

        n = mixer.history_length
        assert n <= depth
        assert len(mixer.iterates) == n
        assert len(mixer.residuals) == n
        assert len(mixer.errors) == n


def test_extrapolation_contraction() -> None:
    problem = FunctionProblem(contraction)
    state = State(torch.tensor([0.0], dtype=torch.double))

    mixer = DIIS(eta=0.5, depth=3, restart=10)
    for _ in range(3):
        state.input = mixer.advance(problem, state)

    # first extrapolation jumps close to the fixed point
    state.input = mixer.advance(problem, state)
    assert pytest.approx(6.0, abs=1e-3) == state.input.item()
    assert mixer.nrestarts == 0

    # history keeps its size and drops the oldest entry
    assert mixer.history_length == 3
    assert pytest.approx([3.75, 4.3125, 4.734375]) == [
        t.item() for t in mixer.iterates
    ]

    state.input = mixer.advance(problem, state)
    assert pytest.approx(6.0, abs=1e-3) == state.input.item()
    assert mixer.nrestarts == 0


def test_faster_than_linear_damping() -> None:
    def steps_to_converge(mixer: LinearDamping | DIIS) -> int:
        problem = FunctionProblem(contraction)
        state = State(torch.tensor([0.0], dtype=torch.double))

        for i in range(1, 101):
            state.input = mixer.advance(problem, state)
            if abs(state.input.item() - 6.0) < 1e-3:
                return i

        return 101

    nlinear = steps_to_converge(LinearDamping(eta=0.5))
    ndiis = steps_to_converge(DIIS(eta=0.5, depth=3, restart=10))

    # 6 * 0.75**n < 1e-3
    assert nlinear == 31
    assert ndiis <= 5
    assert ndiis < nlinear


def test_restart() -> None:
    problem = FunctionProblem(divergent)
    state = State(torch.tensor([0.0], dtype=torch.double))

    mixer = DIIS(eta=0.5, depth=3, restart=10)

    outputs = []
    for _ in range(3):
        state.input = mixer.advance(problem, state)
        outputs.append(state.input.item())

    assert pytest.approx([0.5, 1.5, 3.5]) == outputs
    assert pytest.approx([0.25, 1.0, 4.0]) == [t.item() for t in mixer.errors]

    # extrapolation to -0.5 has an error measure of 16 > 10 * 0.25
    state.input = mixer.advance(problem, state)

    assert mixer.nrestarts == 1
    assert mixer.history_length == 0
    assert len(mixer.residuals) == 0
    assert len(mixer.errors) == 0

    # raw iterate of the step with the smallest error measure
    assert pytest.approx(1.0) == state.input.item()

    # the next step is a warm-up step again
    x_old = state.input
    state.input = mixer.advance(problem, state)
    assert pytest.approx(0.5 * divergent(x_old) + 0.5 * x_old) == state.input
    assert mixer.history_length == 1


def test_restart_multidim() -> None:
    problem = FunctionProblem(divergent)
    guess = torch.zeros((2, 3), dtype=torch.double)
    state = State(guess)

    mixer = DIIS(eta=0.5, depth=3, restart=10)
    for _ in range(4):
        state.input = mixer.advance(problem, state)

    assert mixer.nrestarts == 1
    assert state.input.shape == guess.shape
    assert pytest.approx(torch.ones_like(guess)) == state.input


def test_single_evaluation() -> None:
    problem = FunctionProblem(divergent)
    state = State(torch.tensor([0.0, 0.1], dtype=torch.double))

    mixer = DIIS(eta=0.5, depth=2, restart=10)
    for i in range(1, 8):
        state.input = mixer.advance(problem, state)
        assert problem.nevals == i
        assert mixer.iter_step == i


def test_singular_subspace() -> None:
    # constant residual makes all rows of the subspace matrix equal
    problem = FunctionProblem(lambda x: x + 1.0)
    state = State(torch.tensor([0.0], dtype=torch.double))

    mixer = DIIS(eta=0.5, depth=2, restart=10, diagonal_offset=None)
    for _ in range(2):
        state.input = mixer.advance(problem, state)

    with pytest.raises(SubspaceSolveError):
        mixer.advance(problem, state)


@pytest.mark.parametrize("offset", [None, 0.0])
def test_scalar_needs_diagonal_offset(offset: float | None) -> None:
    # all residuals of a scalar problem are parallel, B has rank one
    problem = FunctionProblem(contraction)
    state = State(torch.tensor([0.0], dtype=torch.double))

    mixer = DIIS(eta=0.5, depth=3, restart=10, diagonal_offset=offset)
    for _ in range(3):
        state.input = mixer.advance(problem, state)

    with pytest.raises(SubspaceSolveError):
        mixer.advance(problem, state)

    mixer = DIIS(eta=0.5, depth=3, restart=10)
    state = State(torch.tensor([0.0], dtype=torch.double))
    for _ in range(4):
        state.input = mixer.advance(problem, state)

    assert pytest.approx(6.0, abs=1e-3) == state.input.item()

def test_extrapolate_empty() -> None:
    mixer = DIIS()
    with pytest.raises(RuntimeError):
        mixer.extrapolate()


def test_reset() -> None:
    problem = FunctionProblem(divergent)
    state = State(torch.tensor([0.0], dtype=torch.double))

    mixer = DIIS(eta=0.5, depth=3, restart=10)
    for _ in range(4):
        state.input = mixer.advance(problem, state)

    assert mixer.nrestarts == 1
    mixer.advance(problem, state)
    assert mixer.history_length == 1

    mixer.reset()
    assert mixer.iter_step == 0
    assert mixer.nrestarts == 0
    assert mixer.history_length == 0

    # settings survive the reset
    assert mixer.eta == 0.5
    assert mixer.depth == 3
    assert mixer.restart == 10


@pytest.mark.parametrize("eta", [0.0, -0.1, 1.5, float("nan"), "0.5"])
def test_fail_eta(eta: float) -> None:
    with pytest.raises(AcceleratorConfigError):
        DIIS(eta=eta)


@pytest.mark.parametrize("depth", [0, -1, 2.5, True])
def test_fail_depth(depth: int) -> None:
    with pytest.raises(AcceleratorConfigError):
        DIIS(depth=depth)


@pytest.mark.parametrize("restart", [0, -3, 1.0])
def test_fail_restart(restart: int) -> None:
    with pytest.raises(AcceleratorConfigError):
        DIIS(restart=restart)


@pytest.mark.parametrize("offset", [-0.01, float("inf")])
def test_fail_diagonal_offset(offset: float) -> None:
    with pytest.raises(AcceleratorConfigError):
        DIIS(diagonal_offset=offset)
