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
# File:    src/utils/__init__.py
# Description:
#   Initializes the utils module, providing model definition management,
#   structured logging and plotting for simulation results.
#
# ---------------------------------------------------------------------------

"""
Initializes the utility subpackage, providing model definition file
management, structured logging, and data visualization tools for
queueing network simulations.
"""


from .config import (
    ModelDefinition,
    ComponentConfig,
    FunctionConfig,
    DistributorConfig,
    RunConfig,
    ExperimentConfig,
    create_default_config,
    load_config,
    save_config,
    validate_config,
    collect_errors,
    merge_configs
)

from .logging import (
    setup_logging,
    SimulationLogger,
    NullLogger,
    LogLevel
)

from .visualization import (
    VisualizationManager,
    plot_all_results
)

# Version information
__version__ = '0.1.0'

# Define public interface
__all__ = [
    # Configuration management
    'ModelDefinition',
    'ComponentConfig',
    'FunctionConfig',
    'DistributorConfig',
    'RunConfig',
    'ExperimentConfig',
    'create_default_config',
    'load_config',
    'save_config',
    'validate_config',
    'collect_errors',
    'merge_configs',

    # Logging utilities
    'setup_logging',
    'SimulationLogger',
    'NullLogger',
    'LogLevel',

    # Visualization tools
    'VisualizationManager',
    'plot_all_results'
]

# Module level documentation
ModelDefinition.__doc__ = """
Definition of a queueing network model: experiment metadata, run window and
the list of stations with their functions and routing.
"""

SimulationLogger.__doc__ = """
Structured logging system for simulation events and metrics.
Provides different logging levels and output formats.
"""

VisualizationManager.__doc__ = """
Manages visualization and plotting utilities for simulation results.
Provides methods for creating plots and generating performance reports.
"""
