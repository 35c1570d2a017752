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
# File:    src/simulation/engine.py
# Description:
#   Defines the SimulationEngine, which seeds arrivals from every source
#   and drives the scheduler until every event has left the network.
#
# ---------------------------------------------------------------------------

"""
Implements the main simulation engine. The engine refuses models that did
not compile or are not fully wired, resets the whole network, keeps one
pending arrival per source in the scheduler's buffer until the generation
horizon is reached, and runs scheduler ticks until the buffer drains.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional
import logging
import sys

from ..core import Event, Source, ModelCompilationError, SimulationError
from ..environment import Model
from ..utils.logging import SimulationLogger, get_logger
from .metrics import ComponentStatistics, EventStatistics, Monitor
from .scheduler import EventScheduler, Reordering


@dataclass
class SimulationConfig:
    """Configuration parameters for the simulation."""
    horizon: float
    start: float
    end: float
    seed: Optional[int] = None
    checkpoint_interval: int = 10000
    enable_logging: bool = True

    def __post_init__(self):
        if self.horizon <= 0:
            raise ValueError("horizon must be > 0")
        if not 0 <= self.start < self.end < self.horizon:
            raise ValueError("window must satisfy 0 <= start < end < horizon")
        if self.checkpoint_interval <= 0:
            raise ValueError("checkpoint_interval must be > 0")


@dataclass
class SimulationState:
    """Represents the current state of the simulation."""
    current_time: float = 0.0
    operations: int = 0
    reordered: int = 0
    is_running: bool = False


class SimulationEngine:
    """Main simulation engine for queueing network models."""

    def __init__(
        self,
        model: Model,
        config: SimulationConfig,
        sim_logger: Optional[SimulationLogger] = None
    ):
        self.model = model
        self.config = config
        self.state = SimulationState()
        self.scheduler = EventScheduler(on_reorder=self._on_reorder)
        self.sim_logger = get_logger(sim_logger)
        self._initialized = False

        # Latest not-yet-dispatched arrival per source label
        self._arrivals: Dict[str, Event] = {}
        self._sources: Dict[str, Source] = {}

        if self.config.enable_logging:
            logging.basicConfig(
                level=logging.INFO,
                format="%(asctime)s - %(levelname)s - %(message)s",
                stream=sys.stdout
            )
            self.logger = logging.getLogger(__name__)
        else:
            self.logger = None

    @property
    def completed(self) -> List[Event]:
        """Events that have left the network"""
        return self.scheduler.completed

    def initialize(self) -> None:
        """Check the model, reset the network and seed the first arrivals."""
        if not self.model.compiled:
            raise ModelCompilationError(self.model.errors)
        self.model.validate()

        self.model.reset()
        self.scheduler.clear()
        self.state = SimulationState()
        self._arrivals.clear()
        self._sources = {source.label: source for source in self.model.sources}

        for source in self.model.sources:
            self._seed(source)
        self._initialized = True

        if self.logger:
            self.logger.info(
                f"Simulation initialized with {len(self._sources)} source(s), "
                f"horizon {self.config.horizon:g}"
            )

    def run(self) -> List[Event]:
        """Run the simulation until no event is pending."""
        if not self._initialized:
            self.initialize()

        self.state.is_running = True
        if self.logger:
            self.logger.info("Starting simulation")

        try:
            while self.step():
                pass
        except SimulationError as e:
            self.state.is_running = False
            self.sim_logger.log_error(e.kind.value, str(e))
            raise

        self._initialized = False
        if self.logger:
            self.logger.info(f"Simulation complete: {self.state.operations} operations")
        self.sim_logger.log_run_summary({
            'seed': self.config.seed,
            'operations': self.state.operations,
            'reordered': self.state.reordered,
            'completed': len(self.completed),
            'current_time': self.state.current_time
        })
        return self.completed

    def step(self) -> bool:
        """
        Process the next pending event. Return True if the simulation
        continues, False otherwise.
        """
        if not self.state.is_running:
            return False

        event = self.scheduler.tick()
        if event is None:
            if self.logger:
                self.logger.info("No more events; simulation ending")
            self.state.is_running = False
            return False

        self.state.operations = self.scheduler.operations
        self.state.reordered = self.scheduler.reordered
        self.state.current_time = self.scheduler.event_queue.current_time

        # A dispatched arrival makes room for the next one from its source
        if self._arrivals.get(event.source) is event:
            del self._arrivals[event.source]
            self._seed(self._sources[event.source])

        if self.state.operations % self.config.checkpoint_interval == 0:
            self._log_checkpoint()
        return True

    def monitor(self) -> Monitor:
        return Monitor(self.config.start, self.config.end)

    def component_statistics(self) -> List[ComponentStatistics]:
        """Statistics for every monitored component."""
        monitor = self.monitor()
        results = []
        for component in self.model.monitored():
            stats = monitor.display_statistics(component)
            self.sim_logger.log_component_statistics(component.label, stats.to_dict())
            results.append(stats)
        return results

    def event_statistics(self) -> EventStatistics:
        return self.monitor().summarize_events(
            self.completed, multisource=len(self.model.sources) > 1
        )

    def _seed(self, source: Source) -> None:
        event = source.simulate(None)
        if event.started > self.config.horizon:
            return
        self._arrivals[source.label] = event
        self.scheduler.schedule(event)

    def _on_reorder(self, reordering: Reordering) -> None:
        self.sim_logger.log_reordering(
            reordering.time,
            f"{reordering.displaced.source}:{reordering.displaced.label}",
            f"{reordering.prioritized.source}:{reordering.prioritized.label}"
        )

    def _log_checkpoint(self) -> None:
        if self.logger:
            self.logger.info(
                f"Checkpoint at operation {self.state.operations}, "
                f"time {self.state.current_time:g}"
            )
        self.sim_logger.log_checkpoint(
            self.state.operations,
            self.state.current_time,
            len(self.scheduler.event_queue)
        )
