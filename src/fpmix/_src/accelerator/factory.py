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
Accelerator: Factory
====================

Factory function for creating an accelerator from a configuration.
"""

from __future__ import annotations

from fpmix._src.config import ConfigAccelerator
from fpmix._src.constants import labels

from .base import Accelerator
from .diis import DIIS
from .linear import LinearDamping

__all__ = ["new_accelerator"]


def new_accelerator(config: ConfigAccelerator | None = None) -> Accelerator:
    """
    Create a new accelerator from the configuration.

    Parameters
    ----------
    config : ConfigAccelerator | None, optional
        Configuration of the accelerator. Defaults to ``None``, which uses
        the default settings.

    Returns
    -------
    Accelerator
        Instance of the configured accelerator.

    Raises
    ------
    ValueError
        Unknown mixer.
    """
    if config is None:
        config = ConfigAccelerator()

    options = {"x_tol": config.x_tol}

    if config.mixer == labels.MIXER_LINEAR:
        return LinearDamping(eta=config.eta, options=options)

    if config.mixer == labels.MIXER_DIIS:
        return DIIS(
            eta=config.eta,
            depth=config.depth,
            restart=config.restart,
            diagonal_offset=config.diagonal_offset,
            options=options,
        )

    raise ValueError(f"Unknown mixer '{config.mixer}'.")
