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
# File:    src/core/component.py
# Description:
#   Defines the Component base class for network stations together with the
#   Source and Sink stations at the edges of the network.
#
# ---------------------------------------------------------------------------

"""
Stations of the queueing network. Every station keeps a chronological log of
event snapshots, an optional series of queue-depth samples and whatever model
state it needs to compute event timings. Stations are wired together by the
model builder; an event's `component` points at the next station to visit.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional, Set

from .event import Event

if TYPE_CHECKING:
    from .sequencer import Sequencer
    from ..environment.generators import Generator


class Component(ABC):
    """Base class for every station in the network"""

    # Stations that consume processing time invalidate lookahead state
    active = False

    def __init__(self, label: str, monitor: bool = False):
        self.label = label
        self.monitor = monitor
        self.log: List[Event] = []
        self.depths: List[int] = []

    @abstractmethod
    def simulate(self, event: Optional[Event]) -> Optional[Event]:
        """
        Move an event through this station, updating its timing and binding
        the next station it should visit.
        """

    @abstractmethod
    def get_available(self) -> float:
        """Time at which this station can next accept an event."""

    @abstractmethod
    def prioritize(self, sequencer: "Sequencer", exploring: bool) -> None:
        """
        Take part in priority discovery. With `exploring` False this is the
        seed walk from the chosen event's station; with `exploring` True the
        station is being classified on behalf of a candidate event.
        """

    def connections(self) -> List["Component"]:
        """Downstream stations, in declared order."""
        return []

    def unresolved(self) -> List[str]:
        """Descriptions of every downstream reference that is not wired."""
        return []

    def description(self) -> str:
        return f"{type(self).__name__.lower()} {self.label}"

    def reset(self, visited: Optional[Set["Component"]] = None) -> None:
        """
        Clear the log and model state of this station and of every station
        reachable from it. Each station is reset once per traversal.
        """
        if visited is None:
            visited = set()
        if self in visited:
            return
        visited.add(self)

        self.log.clear()
        self.depths.clear()
        self._clear()

        for component in self.connections():
            component.reset(visited)

    def _clear(self) -> None:
        """Reset model-specific state."""

    def _classify(self, sequencer: "Sequencer") -> None:
        # Terminus of a classification walk
        if self in sequencer.paths:
            sequencer.promote()
        else:
            sequencer.exclude(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.label!r})"


class Source(Component):
    """
    Entry point of the network. Generates arrivals on a cumulative clock
    driven by its generator, or accepts externally supplied events.
    """

    def __init__(self, label: str, generator: "Generator", monitor: bool = False):
        super().__init__(label, monitor)
        self.generator = generator
        self.time = 0.0
        self.counter = 0

    def simulate(self, event: Optional[Event] = None) -> Event:
        if event is None:
            self.time += self.generator.generate()
            event = Event(source=self.label, label=str(self.counter), created=self.time)
            event.set_values(self.time, self.time, self.time)
            self.counter += 1
            self.log.append(event)
        else:
            self.log.append(event.snapshot())

        outgoing = self.log[-1].copy()
        outgoing.component = self.generator.next
        return outgoing

    def get_available(self) -> float:
        return self.time

    def prioritize(self, sequencer: "Sequencer", exploring: bool) -> None:
        if self.generator.next is not None:
            self.generator.next.prioritize(sequencer, exploring)

    def connections(self) -> List[Component]:
        return [self.generator.next] if self.generator.next is not None else []

    def unresolved(self) -> List[str]:
        if self.generator.next is None:
            return [f"{self.label}: function has no downstream component"]
        return []

    def description(self) -> str:
        return f"source {self.label}: {self.generator.characteristics()}"

    def _clear(self) -> None:
        self.time = 0.0
        self.counter = 0


class Sink(Component):
    """Terminal station; events that reach it leave the network"""

    def __init__(self, label: str, monitor: bool = False):
        super().__init__(label, monitor)
        self.time = 0.0

    def simulate(self, event: Optional[Event]) -> Optional[Event]:
        if event is None:
            return None
        self.log.append(event)
        self.time = event.completed
        event.component = None
        return event

    def get_available(self) -> float:
        return self.time

    def prioritize(self, sequencer: "Sequencer", exploring: bool) -> None:
        if exploring:
            self._classify(sequencer)
        else:
            # A sink never declares a priority order
            sequencer.declare([])
            sequencer.paths.add(self)

    def _clear(self) -> None:
        self.time = 0.0
