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
Typing: Built-ins
=================

Re-exports of the standard library typing helpers and PyTorch's tensor type,
such that all modules import their annotations from one place.
"""

from collections.abc import Callable, Generator, Iterable, Sequence
from typing import (
    TYPE_CHECKING,
    Any,
    Literal,
    Protocol,
    TypedDict,
    TypeVar,
    cast,
    overload,
    runtime_checkable,
)

from torch import Size, Tensor

__all__ = [
    "TYPE_CHECKING",
    "Any",
    "Callable",
    "Generator",
    "Iterable",
    "Literal",
    "Protocol",
    "Sequence",
    "Size",
    "Tensor",
    "TypedDict",
    "TypeVar",
    "cast",
    "overload",
    "runtime_checkable",
]
