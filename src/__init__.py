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
# File:    src/__init__.py
# Description:
#   Top-level package of the Queueing Network Simulator.
#
# ---------------------------------------------------------------------------

"""
Logical-time replay of queueing networks: sources feed processing, routing
and throttling stations, and a scheduler replays every event in time order
to produce per-station wait, utilization and arrival statistics.
"""

__version__ = '0.1.0'
