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
# File:    src/simulation/__init__.py
# Description:
#   Initializes the simulation module, providing the engine, the event
#   scheduler and the statistics monitor.
#
# ---------------------------------------------------------------------------

"""
Initializes the simulation subpackage, providing the simulation engine, the
event scheduler that replays events in completion order, and the Monitor that
turns station logs into wait, utilization and throughput statistics.
"""

from .engine import (
    SimulationEngine,
    SimulationState,
    SimulationConfig
)
from .scheduler import (
    EventScheduler,
    Reordering
)
from .metrics import (
    Monitor,
    SummaryStatistics,
    ComponentStatistics,
    EventStatistics,
    statistics_frame,
    events_frame,
    format_report
)

# Version information
__version__ = '0.1.0'

# Define public interface
__all__ = [
    # Simulation engine components
    'SimulationEngine',
    'SimulationState',
    'SimulationConfig',

    # Scheduler components
    'EventScheduler',
    'Reordering',

    # Statistics
    'Monitor',
    'SummaryStatistics',
    'ComponentStatistics',
    'EventStatistics',
    'statistics_frame',
    'events_frame',
    'format_report'
]

# Module level documentation
SimulationEngine.__doc__ = """
Main simulation engine. Seeds arrivals from every source up to the generation
horizon and runs the scheduler until every event has left the network.
"""

EventScheduler.__doc__ = """
Replays pending events one station at a time in order of completion, letting
higher-priority events run first where a station declares priorities.
"""

Monitor.__doc__ = """
Computes per-station and per-event statistics over a sampling window.
"""
