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
Test the output handler.
"""

from __future__ import annotations

import logging
import warnings

import pytest

from fpmix import OutputHandler
from fpmix._src.timing.timer import _Timers
from fpmix.exceptions import ConvergenceWarning

COLUMNS = ["Objective", "Time (s)", "% Total"]


@pytest.fixture(name="console")
def fixture_console(caplog: pytest.LogCaptureFixture):
    """Capture the console logger (which does not propagate by default)."""
    logger = OutputHandler.console_logger
    logger.propagate = True
    try:
        with caplog.at_level(logging.INFO, logger=logger.name):
            yield caplog
    finally:
        logger.propagate = False


def test_verbosity() -> None:
    with OutputHandler.with_verbosity(7):
        assert OutputHandler.verbosity == 7

    # restored by the autouse fixture's context
    assert OutputHandler.verbosity == 0

    # `None` is ignored
    OutputHandler.verbosity = None
    assert OutputHandler.verbosity == 0

    with pytest.raises(TypeError):
        OutputHandler.verbosity = "high"  # type: ignore


def test_write_stdout(console: pytest.LogCaptureFixture) -> None:
    with OutputHandler.with_verbosity(5):
        OutputHandler.write_stdout("plain", v=5)
        OutputHandler.write_stdout("value %.2f", 1.2345, v=5)
        OutputHandler.write_stdout("hidden %s", "args", v=6)

    messages = [r.getMessage() for r in console.records]
    assert messages == ["plain", "value 1.23"]


def test_write_row(console: pytest.LogCaptureFixture) -> None:
    with OutputHandler.with_verbosity(3):
        OutputHandler.write_row("   1", ["a", "b"])
    OutputHandler.write_row("   2", ["c", "d"])

    messages = [r.getMessage() for r in console.records]
    assert messages == ["   1   a   b"]


def test_write(console: pytest.LogCaptureFixture) -> None:
    data = {"Settings": {"eta": 0.5}}

    OutputHandler.write(data, v=4)
    assert len(console.records) == 0

    with OutputHandler.with_verbosity(4):
        OutputHandler.write(data, v=4)

    assert len(console.records) == 1
    assert console.records[0].getMessage().startswith("Settings\n--------\n")


def test_header(console: pytest.LogCaptureFixture) -> None:
    with OutputHandler.with_verbosity(3):
        OutputHandler.header()

    messages = [r.getMessage() for r in console.records]
    assert len(messages) == 1
    assert messages[0].startswith("* fpmix version")

    console.clear()
    with OutputHandler.with_verbosity(5):
        OutputHandler.header()

    assert len(console.records) == 2
    assert console.records[0].getMessage().startswith(70 * "=")


def test_timing_table(console: pytest.LogCaptureFixture) -> None:
    t = _Timers(autostart=True)
    t.start("Iterations")
    t.start("DIIS", parent_uid="Iterations")
    t.stop("DIIS")
    t.stop("Iterations")

    data = t.get_times()

    with OutputHandler.with_verbosity(5):
        OutputHandler.write_table(data, "Timings", COLUMNS)

    table = console.records[0].getMessage()
    assert "Timings" in table
    assert "Iterations" in table
    assert "Total" in table

    # sub timers only with increased verbosity
    assert "DIIS" not in table

    console.clear()
    with OutputHandler.with_verbosity(6):
        OutputHandler.write_table(data, "Timings", COLUMNS)

    assert "- DIIS" in console.records[0].getMessage()


def test_warnings() -> None:
    assert len(OutputHandler.warnings) == 0

    # collected, not issued
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        OutputHandler.warn("Not converged.", ConvergenceWarning)

    assert OutputHandler.warnings == [("Not converged.", ConvergenceWarning)]

    OutputHandler.clear_warnings()
    assert len(OutputHandler.warnings) == 0


def test_format_for_console() -> None:
    out = OutputHandler.format_for_console(
        "Settings", {"eta": 0.5, "depth": 3, "list": [1, 2]}
    )

    assert out.startswith("Settings\n--------\n\n")
    assert "eta                 : 5.000e-01" in out
    assert "depth               : 3" in out
    assert "list                : 1 2" in out
