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
Timing: Timer Collection
========================

A collection of named wall-clock timers. Every timer accumulates the time
between its ``start`` and ``stop`` calls. Timers may be nested below a parent
timer, which only affects the printed table.

For developers
--------------
:meth:`_Timers.start` and :meth:`_Timers.stop` are strict: starting a running
timer or stopping an idle one raises a :class:`TimerError`. Code that may be
entered recursively or from several threads at once (e.g., a driver whose
problem runs another driver) must use :meth:`_Timers.enter` and
:meth:`_Timers.exit`, which count the open sections of a timer and only start
(stop) the clock for the first (last) one. The
:func:`~fpmix._src.timing.decorator.timer_decorator` does exactly that.
"""

from __future__ import annotations

import threading
import time

__all__ = ["timer", "TimerError"]


class TimerError(Exception):
    """
    Error for the incorrect use of a timer, i.e., starting a running timer,
    stopping an idle timer or accessing a timer that does not exist.
    """


class _Timers:
    """
    Collection of named timers.

    A reset clears all timers and starts the timer ``"total"``, which serves as
    reference for the percentages of the timing table.
    """

    class _Timer:
        """Single wall-clock timer."""

        label: str
        """Name of the timer (used for printing)."""

        elapsed_time: float
        """Accumulated time in seconds."""

        _start_time: float | None
        """Clock value of the last start, ``None`` if the timer is idle."""

        def __init__(self, label: str) -> None:
            self.label = label
            self.elapsed_time = 0.0
            self._start_time = None

        def start(self) -> None:
            if self._start_time is not None:
                raise TimerError(
                    f"Timer '{self.label}' is running. Use `.stop()` to stop it."
                )
            self._start_time = time.perf_counter()

        def stop(self) -> float:
            if self._start_time is None:
                raise TimerError(
                    f"Timer '{self.label}' is not running. Use .start() to start it."
                )

            self.elapsed_time += time.perf_counter() - self._start_time
            self._start_time = None
            return self.elapsed_time

        def is_running(self) -> bool:
            return self._start_time is not None

    timers: dict[str, _Timer]
    """Timers by their unique ID."""

    def __init__(self, autostart: bool = False) -> None:
        self.timers = {}
        self._enabled = True
        self._parents: dict[str, str] = {}

        # open sections per timer (see `enter` and `exit`)
        self._sections: dict[str, int] = {}
        self._lock = threading.Lock()

        if autostart is True:
            self.reset()

    @property
    def enabled(self) -> bool:
        """Whether the timers measure anything."""
        return self._enabled

    def enable(self) -> None:
        self._enabled = True

    def disable(self) -> None:
        self._enabled = False

    def start(self, uid: str, parent_uid: str | None = None) -> None:
        """
        Start the timer `uid`, creating it on first use.

        Parameters
        ----------
        uid : str
            Unique ID of the timer.
        parent_uid : str | None, optional
            ID of the parent timer. Only registered if the parent exists.

        Raises
        ------
        TimerError
            The timer is already running.
        """
        if not self._enabled:
            return

        if uid not in self.timers:
            self.timers[uid] = self._Timer(uid)
            if parent_uid is not None and parent_uid in self.timers:
                self._parents[uid] = parent_uid

        self.timers[uid].start()

    def stop(self, uid: str) -> float:
        """
        Stop the timer `uid`.

        Parameters
        ----------
        uid : str
            Unique ID of the timer.

        Returns
        -------
        float
            Accumulated time of the timer in seconds.

        Raises
        ------
        TimerError
            The timer does not exist or is not running.
        """
        if not self._enabled:
            return 0.0

        if uid not in self.timers:
            raise TimerError(f"Timer '{uid}' does not exist.")

        return self.timers[uid].stop()

    def enter(self, uid: str, parent_uid: str | None = None) -> None:
        """
        Open a (possibly nested or concurrent) section of the timer `uid`.

        Only the first open section starts the clock.

        Parameters
        ----------
        uid : str
            Unique ID of the timer.
        parent_uid : str | None, optional
            ID of the parent timer.
        """
        with self._lock:
            count = self._sections.get(uid, 0)
            if count == 0:
                self.start(uid, parent_uid=parent_uid)
            self._sections[uid] = count + 1

    def exit(self, uid: str) -> None:
        """
        Close a section of the timer `uid`.

        The clock stops when the last open section is closed. Timers that were
        not started (disabled collection) are left alone.

        Parameters
        ----------
        uid : str
            Unique ID of the timer.
        """
        with self._lock:
            count = self._sections.get(uid, 0) - 1
            if count > 0:
                self._sections[uid] = count
                return

            self._sections.pop(uid, None)
            t = self.timers.get(uid)
            if t is not None and t.is_running():
                t.stop()

    def stop_all(self) -> None:
        """Stop all running timers."""
        for t in self.timers.values():
            if t.is_running():
                t.stop()

    def reset(self) -> None:
        """Remove all timers and start the 'total' timer."""
        with self._lock:
            self.timers = {}
            self._parents = {}
            self._sections = {}

        self.start("total")

    def get_time(self, uid: str) -> float:
        """
        Accumulated time of the timer `uid` in seconds.

        Raises
        ------
        TimerError
            The timer does not exist.
        """
        if not self._enabled:
            return 0.0

        if uid not in self.timers:
            raise TimerError(f"Timer '{uid}' does not exist.")

        return self.timers[uid].elapsed_time

    def get_times(self) -> dict[str, dict]:
        """
        Collect the times of all timers for printing.

        Top-level timers carry their share of the 'total' time, sub timers
        their share of the parent's time. The 'total' timer is stopped.

        Returns
        -------
        dict[str, dict]
            ``{uid: {"value": seconds, "percentage": str, "sub": {...}}}``

        Raises
        ------
        TimerError
            The 'total' timer does not exist.
        """
        if "total" not in self.timers:
            raise TimerError("Timer 'total' does not exist. Use `.reset()`.")

        total = self.timers["total"]
        if total.is_running():
            total.stop()

        def share(part: float, whole: float) -> str:
            return f"{part / whole * 100 if whole > 0 else 0.0:.2f}"

        times: dict[str, dict] = {
            uid: {"value": t.elapsed_time, "sub": {}}
            for uid, t in self.timers.items()
            if uid not in self._parents
        }

        for uid, parent in self._parents.items():
            elapsed = self.timers[uid].elapsed_time
            times[parent]["sub"][uid] = {
                "value": elapsed,
                "percentage": share(elapsed, times[parent]["value"]),
            }

        for uid, details in times.items():
            if uid != "total":
                details["percentage"] = share(
                    details["value"], total.elapsed_time
                )

        return times

    def print(self, v: int = 5, precision: int = 3) -> None:
        """Print the timing table through the output handler."""
        if not self._enabled:
            return

        # pylint: disable=import-outside-toplevel
        from ..io import OutputHandler

        OutputHandler.write_table(
            self.get_times(),
            title="Timings",
            columns=["Objective", "Time (s)", "% Total"],
            v=v,
            precision=precision,
        )


timer = _Timers(autostart=True)
"""Global instance of the timer collection."""
