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
# File:    src/simulation/scheduler.py
# Description:
#   Provides the EventScheduler, which advances pending events one station
#   at a time in completion order, honoring source priorities.
#
# ---------------------------------------------------------------------------

"""
Contains the EventScheduler. Each tick takes the earliest-completing pending
event, lets it yield to a higher-priority pending event if its next station
declares one, moves the winner through one station and puts it back in the
pending buffer unless it has left the network.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..core import Event, EventQueue

logger = logging.getLogger(__name__)


@dataclass
class Reordering:
    """A tick where the earliest event yielded to another."""
    time: float
    displaced: Event
    prioritized: Event


class EventScheduler:
    """Runs pending events through the network in completion order."""

    def __init__(
        self,
        event_queue: Optional[EventQueue] = None,
        on_reorder: Optional[Callable[[Reordering], None]] = None
    ):
        self.event_queue = event_queue if event_queue is not None else EventQueue()
        self.completed: List[Event] = []
        self.operations = 0
        self.reordered = 0
        self.on_reorder = on_reorder

    def schedule(self, event: Event) -> None:
        """Add an event that still has a station to visit."""
        if event.terminal:
            raise ValueError(f"Event {event.source}:{event.label} has already left the network")
        self.event_queue.schedule_event(event)

    def tick(self) -> Optional[Event]:
        """
        Process one event through one station. Returns the event that ran,
        or None when nothing is pending.
        """
        selected = self.event_queue.get_next_event()
        if selected is None:
            return None

        event = selected.prioritize(self.event_queue, locked=False)
        if event is not selected:
            self.reordered += 1
            logger.debug(
                f"Event {event.source}:{event.label} runs ahead of "
                f"{selected.source}:{selected.label} at {selected.completed:.6f}"
            )
            if self.on_reorder is not None:
                self.on_reorder(Reordering(selected.completed, selected, event))

        event.simulate()
        self.operations += 1

        if event.terminal:
            self.completed.append(event)
        else:
            self.event_queue.schedule_event(event)
        return event

    def run(self) -> int:
        """Tick until nothing is pending. Returns the number of operations."""
        while self.tick() is not None:
            pass
        return self.operations

    def clear(self) -> None:
        self.event_queue.clear()
        self.completed = []
        self.operations = 0
        self.reordered = 0
