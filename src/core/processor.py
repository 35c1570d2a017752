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
# File:    src/core/processor.py
# Description:
#   Implements the single-server stations: the FIFO Processor and the
#   rate-limiting Throttle.
#
# ---------------------------------------------------------------------------

"""
Single-server stations. Both keep an availability instant that only moves
forward and pick the generator for an event by its source, falling back to
the wildcard "default" generator for unlisted sources. Each generator may
route to its own downstream station.
"""

from bisect import bisect_right
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

from .component import Component
from .errors import UnresolvedReferenceError
from .event import Event

if TYPE_CHECKING:
    from .sequencer import Sequencer
    from ..environment.generators import Generator

DEFAULT = "default"


class Station(Component):
    """Common state for stations served by per-source generators"""

    def __init__(
        self,
        label: str,
        generators: Sequence["Generator"],
        priority: Optional[Sequence[str]] = None,
        monitor: bool = False
    ):
        super().__init__(label, monitor)
        self.generators: Dict[str, "Generator"] = {}
        for generator in generators:
            self.generators[generator.source] = generator
        self.sources: List[str] = list(priority or [])
        self.available = 0.0
        # Completion times of logged events, non-decreasing
        self._completions: List[float] = []

    def generator_for(self, source: str) -> "Generator":
        """Generator serving events of `source`."""
        generator = self.generators.get(source, self.generators.get(DEFAULT))
        if generator is None:
            raise UnresolvedReferenceError([f"{self.label}: no function for source {source}"])
        return generator

    def get_available(self) -> float:
        return self.available

    def prioritize(self, sequencer: "Sequencer", exploring: bool) -> None:
        if exploring:
            self._classify(sequencer)
        else:
            sequencer.declare(self.sources)
            sequencer.paths.add(self)

    def connections(self) -> List[Component]:
        seen: List[Component] = []
        for generator in self.generators.values():
            if generator.next is not None and generator.next not in seen:
                seen.append(generator.next)
        return seen

    def unresolved(self) -> List[str]:
        missing = []
        if not self.generators:
            missing.append(f"{self.label}: no functions declared")
        for source, generator in self.generators.items():
            if generator.next is None:
                missing.append(f"{self.label}: function for {source} has no downstream component")
        return missing

    def description(self) -> str:
        functions = ", ".join(
            f"{source}={generator.characteristics()}"
            for source, generator in self.generators.items()
        )
        return f"{type(self).__name__.lower()} {self.label}: {functions}"

    def _record(self, event: Event, arrival: float) -> None:
        """Log a snapshot and the number of logged events still in flight."""
        in_flight = len(self._completions) - bisect_right(self._completions, arrival)
        self.depths.append(in_flight)
        self.log.append(event.snapshot())
        self._completions.append(event.completed)

    def _clear(self) -> None:
        self.available = 0.0
        self._completions.clear()


class Processor(Station):
    """FIFO single-concurrency server"""

    active = True

    def simulate(self, event: Optional[Event]) -> Optional[Event]:
        if event is None:
            return None

        generator = self.generator_for(event.source)
        arrival = event.completed
        self.available = max(self.available, arrival)
        completed = self.available + generator.generate()

        event.set_values(arrival, self.available, completed)
        event.elapsed += completed - arrival
        event.executed += completed - self.available
        self.available = completed

        self._record(event, arrival)
        event.component = generator.next
        return event


class Throttle(Station):
    """
    Rate gate. Admits an event as soon as the gate is free and then keeps
    the gate closed for the cooldown drawn for the event's source. The event
    itself spends no processing time here.
    """

    def simulate(self, event: Optional[Event]) -> Optional[Event]:
        if event is None:
            return None

        generator = self.generator_for(event.source)
        arrival = event.completed
        self.available = max(self.available, arrival)

        event.set_values(arrival, self.available, self.available)
        event.elapsed += self.available - arrival
        self.available += generator.generate()

        self._record(event, arrival)
        event.component = generator.next
        return event
