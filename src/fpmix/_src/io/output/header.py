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
Print a fancy header.
"""

from __future__ import annotations

__all__ = ["get_header"]


WIDTH = 70


def get_header() -> str:
    logo = [
        r"   __                 _       ",
        r"  / _|_ __  _ __ ___ (_)_  __ ",
        r" | |_| '_ \| '_ ` _ \| \ \/ / ",
        r" |  _| |_) | | | | | | |>  <  ",
        r" |_| | .__/|_| |_| |_|_/_/\_\ ",
        r"     |_|                      ",
    ]

    centered_lines = [line.center(WIDTH) for line in logo]
    header = f"{WIDTH * '='}\n" + "\n".join(centered_lines) + f"\n{WIDTH * '='}\n"

    return header
