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
# File:    src/environment/__init__.py
# Description:
#   Initializes the environment module, providing duration generators and
#   the builder that assembles a component network from a definition.
#
# ---------------------------------------------------------------------------

"""
Initializes the environment subpackage. Includes the statistical generators
that drive arrivals and service times, and the ModelBuilder that wires
stations into a compiled Model.
"""

from .generators import (
    Generator,
    Constant,
    Uniform,
    Gaussian,
    Skewed,
    GENERATORS,
    create_generator
)

from .topology import (
    Model,
    ModelBuilder,
    build_graph
)

# Version information
__version__ = '0.1.0'

# Define public interface
__all__ = [
    # Generators
    'Generator',
    'Constant',
    'Uniform',
    'Gaussian',
    'Skewed',
    'GENERATORS',
    'create_generator',

    # Model assembly
    'Model',
    'ModelBuilder',
    'build_graph',
]

# Module level documentation
ModelBuilder.__doc__ = """
Checks a model definition, creates every station and links downstream
references, collecting problems as error strings instead of raising.
"""
