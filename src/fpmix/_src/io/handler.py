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
I/O: Output Handler
===================

The singleton :data:`OutputHandler` is the only place where fpmix writes to
the console. The accelerators and the iteration driver pass messages, tables
and warnings to the handler, which filters them by verbosity:

- ``v >= 3``: version line and iteration table,
- ``v >= 4``: accelerator settings and restarts of the DIIS subspace,
- ``v >= 5``: header logo and timings.

Warnings are collected instead of being issued, such that the caller decides
when (and whether) to show them.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager

from fpmix._src.constants import defaults
from fpmix._src.typing import Any, Generator

from .output import get_header, get_short_version

__all__ = ["OutputHandler"]


class _OutputHandler:
    """
    Verbosity-gated console output on top of a dedicated logger.
    """

    console_logger: logging.Logger
    """Logger ``fpmix.console`` that does not propagate to the root logger."""

    warnings: list[tuple[str, type[Warning]]]
    """Collected warnings (message and category)."""

    def __init__(self) -> None:
        self.warnings = []
        self._verbosity = defaults.VERBOSITY

        self.console_logger = logging.getLogger("fpmix.console")
        self.console_logger.propagate = False
        self.setup_console_logger()

    @property
    def verbosity(self) -> int:
        """Verbosity level (0: silent)."""
        return self._verbosity

    @verbosity.setter
    def verbosity(self, level: int | None) -> None:
        if level is None:
            return

        if not isinstance(level, int):
            raise TypeError("Verbosity level must be an integer.")
        self._verbosity = level

    @contextmanager
    def with_verbosity(self, level: int) -> Generator[None, Any, None]:
        """Temporarily change the verbosity level."""
        original_verbosity = self.verbosity
        self.verbosity = level
        try:
            yield
        finally:
            self.verbosity = original_verbosity

    def setup_console_logger(self, level: int = logging.INFO) -> None:
        """
        (Re-)attach the stream handler of the console logger.

        Parameters
        ----------
        level : int, optional
            The logging level. Defaults to `logging.INFO`.
        """
        for h in list(self.console_logger.handlers):
            self.console_logger.removeHandler(h)

        ch = logging.StreamHandler()
        ch.setLevel(level)
        ch.setFormatter(logging.Formatter("%(message)s"))
        self.console_logger.addHandler(ch)
        self.console_logger.setLevel(level)

    def write(self, data: dict[str, dict[str, Any]], v: int = 5) -> None:
        """
        Write sections of key-value pairs (e.g., settings) to the console.

        Parameters
        ----------
        data : dict[str, dict[str, Any]]
            Section titles and their key-value pairs.
        v : int, optional
            The verbosity level at which to write the data. Defaults to 5.
        """
        if self.verbosity < v:
            return

        for title, info in data.items():
            self.console_logger.info(self.format_for_console(title, info))

    def write_stdout(self, msg: str, *args: Any, v: int = 5) -> None:
        """
        Write a message to the console.

        Parameters
        ----------
        msg : str
            The message to write. A format string is only filled with the
            ``args`` if the message is actually written.
        v : int, optional
            The verbosity level at which to write the message. Defaults to 5.
        """
        if self.verbosity < v:
            return

        self.console_logger.info(msg % args if args else msg)

    def write_row(self, key: str, row: list[str], v: int = 3) -> None:
        """
        Write a single row of a table.

        Parameters
        ----------
        key : str
            Row identifier (e.g., the iteration number).
        row : list[str]
            Formatted entries of the row.
        v : int, optional
            The verbosity level at which to write the row. Defaults to 3.
        """
        if self.verbosity < v:
            return

        self.console_logger.info("   ".join([key] + row))

    def warn(self, msg: str, warning_type: type[Warning] = UserWarning) -> None:
        """
        Collect a warning.

        Parameters
        ----------
        msg : str
            The warning message.
        warning_type : type[Warning], optional
            The category of the warning. Defaults to `UserWarning`.
        """
        self.warnings.append((msg, warning_type))

    def clear_warnings(self) -> None:
        """Remove all collected warnings."""
        self.warnings = []

    @staticmethod
    def format_for_console(
        title: str,
        info: dict[str, Any],
        separator: str = ":",
        indent: int = 0,
        precision: int = 3,
    ) -> str:
        """
        Format a section of key-value pairs with an underlined title.

        Parameters
        ----------
        title : str
            Title of the section.
        info : dict[str, Any]
            Key-value pairs. Floats are written in scientific notation and
            lists are joined with spaces.

        Returns
        -------
        str
            The formatted section.
        """
        lines = [title, "-" * len(title), ""]
        for key, value in info.items():
            if isinstance(value, float):
                value = f"{value:.{precision}e}"
            elif isinstance(value, list):
                value = " ".join(str(i) for i in value)
            lines.append(f"{indent * ' '}{key.ljust(20)}{separator} {value}")

        return "\n".join(lines) + "\n"

    def header(self) -> None:
        """Print the logo (``v >= 5``) and the version line (``v >= 3``)."""
        if self.verbosity >= 5:
            self.console_logger.info(get_header())
        if self.verbosity >= 3:
            self.console_logger.info(get_short_version())

    def write_table(
        self,
        data: dict[str, dict[str, Any]],
        title: str,
        columns: list[str],
        v: int = 5,
        precision: int = 3,
    ) -> None:
        """
        Print a table of timings, i.e., main entries with sub entries that are
        only shown for a verbosity above `v`.

        Parameters
        ----------
        data : dict[str, dict[str, Any]]
            The timings as returned by ``timer.get_times()``. Requires a
            ``"total"`` entry.
        title : str
            Title of the table.
        columns : list[str]
            Column headers (three columns).
        v : int, optional
            The verbosity level at which to print the data. Defaults to 5.
        precision : int, optional
            The precision of the timings. Defaults to 3.
        """
        if self.verbosity < v:
            return

        row = "{:<22} {:>10} {:>14}"
        subrow = " - {:<19} {:>10} {:>14}"

        lines = [f"\n{title}", "-" * len(title), "", row.format(*columns), "-" * 48]
        for name, details in data.items():
            if name == "total":
                continue

            lines.append(
                row.format(
                    name,
                    f"{details['value']:.{precision}f}",
                    details.get("percentage", ""),
                )
            )

            if self.verbosity > v:
                for subname, sub in details.get("sub", {}).items():
                    lines.append(
                        subrow.format(
                            subname,
                            f"{sub['value']:.{precision}f}",
                            sub.get("percentage", ""),
                        )
                    )

        lines.append("-" * 48)
        lines.append(
            row.format("Total", f"{data['total']['value']:.{precision}f}", "100.00")
        )

        self.console_logger.info("\n".join(lines))


OutputHandler = _OutputHandler()
"""Global output handler."""
