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
# File:    src/core/event.py
# Description:
#   Provides the Event record carried through the component network and
#   the EventQueue that holds pending events in order of completion.
#
# ---------------------------------------------------------------------------

"""
Defines the Event class, the unit of simulated traffic that moves from
station to station, and the EventQueue used by the scheduler as its pending
buffer. Events carry their own timing at the current station, cumulative
processing and lifetime figures, and a handle to the next station to visit.
"""

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, List, Optional, Sequence

from .sequencer import Sequencer

if TYPE_CHECKING:
    from .component import Component


@dataclass(eq=False)
class Event:
    """Represents one unit of traffic flowing through the network"""

    source: str
    label: str
    created: float

    # Timing at the current station
    arrived: float = 0.0
    started: float = 0.0
    completed: float = 0.0

    # Cumulative figures
    executed: float = 0.0
    elapsed: float = 0.0
    lifetime: float = 0.0

    # Next station to visit; None once the event has left the network
    component: Optional["Component"] = field(default=None, repr=False)
    last: Optional[str] = None

    sequencer: Sequencer = field(default_factory=Sequencer, repr=False)

    def set_values(self, arrived: float, started: float, completed: float) -> None:
        """Update the timing of the event at its current station."""
        self.arrived = arrived
        self.started = started
        self.completed = completed

    @property
    def terminal(self) -> bool:
        """True once the event has no further station to visit."""
        return self.component is None

    def copy(self) -> "Event":
        """
        Value copy of the event. The copy keeps the component handle but
        gets its own Sequencer.
        """
        return Event(
            source=self.source,
            label=self.label,
            created=self.created,
            arrived=self.arrived,
            started=self.started,
            completed=self.completed,
            executed=self.executed,
            elapsed=self.elapsed,
            lifetime=self.lifetime,
            component=self.component,
            last=self.last,
        )

    def snapshot(self) -> "Event":
        """Copy of the event suitable for a station log (no next station)."""
        current = self.copy()
        current.component = None
        return current

    def simulate(self) -> "Event":
        """
        Pass the event through its current component. The component updates
        the timing of the event and selects the next component to visit.
        """
        current = self.component
        if current is None:
            return self

        result = current.simulate(self)
        if result is not self:
            # Some stations hand back a copy rather than mutating in place
            self.component = None if result is None else result.component

        # Discovered paths only describe the branch after the previous station
        if current.active:
            self.sequencer.clear()

        if self.component is None:
            self.last = current.label
            self.lifetime = self.completed - self.created
        return self

    def prioritize(self, buffer: Sequence["Event"], locked: bool = False) -> "Event":
        """
        Select the event that should actually run next. When locked, the
        caller is mid-way through a chain of stations for the same tick and
        the event is returned unchanged.
        """
        if locked:
            return self
        return self.sequencer.prioritize(self, buffer)


class EventQueue:
    """Pending events in ascending order of completion"""

    def __init__(self, events: Optional[Sequence[Event]] = None):
        self.events: List[Event] = []
        self._keys: List[float] = []
        self.current_time = 0.0
        for event in events or []:
            self.schedule_event(event)

    def schedule_event(self, event: Event) -> None:
        """Insert an event after every pending event completing no later."""
        index = bisect_right(self._keys, event.completed)
        self.events.insert(index, event)
        self._keys.insert(index, event.completed)

    def get_next_event(self) -> Optional[Event]:
        """Remove and return the earliest-completing event."""
        if not self.events:
            return None
        event = self.pop(0)
        self.current_time = max(self.current_time, event.completed)
        return event

    def peek_next_time(self) -> Optional[float]:
        """Look at the completion time of the next event without removing it."""
        if not self.events:
            return None
        return self._keys[0]

    def pop(self, index: int = 0) -> Event:
        """Remove the event at a buffer position."""
        self._keys.pop(index)
        return self.events.pop(index)

    def insert(self, index: int, event: Event) -> None:
        """
        Put an event at a given position. Used to return a displaced event to
        the front of the buffer; the caller keeps the ordering valid.
        """
        self.events.insert(index, event)
        self._keys.insert(index, event.completed)

    def empty(self) -> bool:
        return not self.events

    def clear(self) -> None:
        self.events.clear()
        self._keys.clear()
        self.current_time = 0.0

    def __len__(self) -> int:
        return len(self.events)

    def __getitem__(self, index: int) -> Event:
        return self.events[index]

    def __iter__(self) -> Iterator[Event]:
        return iter(self.events)
