# -*- coding: utf-8 -*-
#
# Copyright (c) 2024 Dimitrios Kafetzis
#
# This file is part of the Queueing Network Simulator project.
# Licensed under the MIT License; you may not use this file except in compliance
# with the License. You may obtain a copy of the License at
#   https://opensource.org/licenses/MIT
#
# Author:  Dimitrios Kafetzis (dimitrioskafetzis@gmail.com)
# File:    src/algorithms/__init__.py
# Description:
#   Initializes the algorithms module, providing the routing policies
#   used by balancers to spread events over downstream stations.
#
# ---------------------------------------------------------------------------

"""
Initializes the algorithms subpackage, exposing the Distributor base class
and the round-robin, random and least-available routing policies.
"""

from .distributors import (
    Distributor,
    CachedDistributor,
    RoundRobin,
    Random,
    Smart,
    DISTRIBUTORS,
    create_distributor
)

# Version information
__version__ = '0.1.0'

# Define public interface
__all__ = [
    # Base classes
    'Distributor',
    'CachedDistributor',

    # Routing policies
    'RoundRobin',
    'Random',
    'Smart',

    # Factory
    'DISTRIBUTORS',
    'create_distributor',
]
