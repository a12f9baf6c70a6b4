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
fpmix
=====

Convergence acceleration for fixed-point iterations with linear damping and
DIIS (Pulay) extrapolation, built on PyTorch.
"""

# import timer first to get correct total time
from fpmix._src.timing import timer

timer.start("Import")

from fpmix.__version__ import __version__

# order is important here
from fpmix._src.io import OutputHandler as OutputHandler
from fpmix._src.problem import FunctionProblem as FunctionProblem
from fpmix._src.problem import Problem as Problem
from fpmix._src.problem import State as State
from fpmix._src.accelerator import DIIS as DIIS
from fpmix._src.accelerator import Accelerator as Accelerator
from fpmix._src.accelerator import LinearDamping as LinearDamping
from fpmix._src.config import ConfigAccelerator as ConfigAccelerator
from fpmix._src.driver import IterationResult as IterationResult
from fpmix._src.driver import iterate as iterate

from fpmix import accelerators as accelerators
from fpmix import config as config
from fpmix import exceptions as exceptions
from fpmix import labels as labels
from fpmix import typing as typing

timer.stop("Import")

__all__ = [
    "Accelerator",
    "ConfigAccelerator",
    "DIIS",
    "FunctionProblem",
    "IterationResult",
    "LinearDamping",
    "OutputHandler",
    "Problem",
    "State",
    "accelerators",
    "config",
    "exceptions",
    "iterate",
    "labels",
    "timer",
    "typing",
    "__version__",
]
