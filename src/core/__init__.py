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
# File:    src/core/__init__.py
# Description:
#   Initializes the core module, providing events, network stations, the
#   priority sequencer and the error types of the simulator.
#
# ---------------------------------------------------------------------------

"""
Initializes the core subpackage, exposing the Event record, the pending
EventQueue, the station classes that form the network and the Sequencer
that reorders events by source priority.
"""

from .errors import (
    ErrorKind,
    SimulationError,
    UnresolvedReferenceError,
    ModelCompilationError,
    InsufficientSampleError
)
from .sequencer import Sequencer
from .event import Event, EventQueue
from .component import Component, Source, Sink
from .processor import DEFAULT, Station, Processor, Throttle
from .balancer import Balancer

# Version information
__version__ = '0.1.0'

# Define what should be available when using "from core import *"
__all__ = [
    # Errors
    'ErrorKind',
    'SimulationError',
    'UnresolvedReferenceError',
    'ModelCompilationError',
    'InsufficientSampleError',

    # Event system
    'Event',
    'EventQueue',
    'Sequencer',

    # Stations
    'Component',
    'Source',
    'Sink',
    'Station',
    'Processor',
    'Throttle',
    'Balancer',
    'DEFAULT',
]

# Module level doc strings for key components
EventQueue.__doc__ = "Holds pending events in ascending order of completion."
Sequencer.__doc__ = "Decides whether a higher-priority pending event should run first."
