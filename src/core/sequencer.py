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
# File:    src/core/sequencer.py
# Description:
#   Implements the priority lookahead that lets the scheduler run a
#   higher-priority buffered event ahead of the chronologically earliest one.
#
# ---------------------------------------------------------------------------

"""
The Sequencer decides, for the event the scheduler picked, whether another
pending event of a higher-priority source should run first.

The decision has two discovery phases. The seed walk starts at the station
the picked event is about to visit and follows pass-through stations until
an active station (Processor or Throttle) or a Sink is reached; that station
declares the priority order and every station visited is marked as being on
the path. The classification phase then walks from the station of each
candidate event, collecting undecided pass-through stations as participants
until a station already known to be on the path (participants are promoted)
or a dead end (participants are excluded) is found.

Only candidates completing no later than the locked availability of the
picked event's station are considered.
"""

from typing import TYPE_CHECKING, Dict, List, MutableSequence, Optional, Set

if TYPE_CHECKING:
    from .component import Component
    from .event import Event
    from ..algorithms.distributors import Distributor

UNKNOWN = -1.0


class Sequencer:
    """Priority lookahead state for a single scheduling decision"""

    def __init__(self):
        self.available: float = UNKNOWN
        self.paths: Set["Component"] = set()
        self.exclusions: Set["Component"] = set()
        self.participants: Set["Component"] = set()
        self.intelligent: Set["Distributor"] = set()
        self.sources: List[str] = []
        self.priorities: Set[str] = set()

    def declare(self, sources: List[str]) -> None:
        """Fix the priority order, highest first."""
        self.sources = list(sources)
        self.priorities = set(sources)

    def promote(self) -> None:
        """Pending participants lead to the active station."""
        self.paths.update(self.participants)
        self.participants.clear()

    def exclude(self, component: Optional["Component"] = None) -> None:
        """Pending participants (and the dead end itself) are off the path."""
        self.exclusions.update(self.participants)
        self.participants.clear()
        if component is not None:
            self.exclusions.add(component)

    def prioritize(
        self,
        selected: "Event",
        buffer: MutableSequence["Event"]
    ) -> "Event":
        """
        Return the event to run instead of `selected`, or `selected` itself.

        `buffer` holds every other pending event in ascending order of
        completion. When a higher-priority event wins, it is removed from the
        buffer and `selected` is put back at the front.
        """
        component = selected.component
        if not buffer or component is None:
            return selected

        self.paths.clear()
        self.exclusions.clear()
        self.participants.clear()
        self.sources = []
        self.priorities = set()

        # Nothing can preempt beyond the time the station frees up
        self.available = component.get_available()

        # Seed walk
        component.prioritize(self, False)
        if not self.sources:
            return selected

        rank = self._rank(selected.source)
        if rank == 0:
            return selected

        horizon = self._horizon(buffer)
        self._classify(selected, buffer[:horizon])

        positions: Dict[int, int] = {}
        for index in range(horizon):
            candidate = buffer[index]
            if self._eligible(selected, candidate):
                candidate_rank = self._rank(candidate.source)
                if candidate_rank < rank and candidate_rank not in positions:
                    positions[candidate_rank] = index
            if 0 in positions:
                break

        if not positions:
            return selected

        prioritized = buffer.pop(positions[min(positions)])
        buffer.insert(0, selected)
        return prioritized

    def clear(self) -> None:
        """Forget discovered paths and any cached lookahead selections."""
        self.paths.clear()
        self.exclusions.clear()
        self.participants.clear()
        for distributor in self.intelligent:
            distributor.reset()
        self.intelligent.clear()

    def _rank(self, source: str) -> int:
        if source in self.priorities:
            return self.sources.index(source)
        return len(self.sources)

    def _horizon(self, buffer: MutableSequence["Event"]) -> int:
        for index, candidate in enumerate(buffer):
            if candidate.completed > self.available:
                return index
        return len(buffer)

    def _prefiltered(self, selected: "Event", candidate: "Event") -> bool:
        return (
            candidate.component is not None
            and candidate.source != selected.source
            and candidate.source in self.priorities
        )

    def _classify(self, selected: "Event", candidates: List["Event"]) -> None:
        """Sort the stations of in-horizon candidates into paths or exclusions."""
        for candidate in candidates:
            if not self._prefiltered(selected, candidate):
                continue
            component = candidate.component
            if component in self.paths or component in self.exclusions:
                continue
            self.participants.clear()
            component.prioritize(self, True)
            # Whatever is still undecided never reached the active station
            if self.participants:
                self.exclude()

    def _eligible(self, selected: "Event", candidate: "Event") -> bool:
        return (
            self._prefiltered(selected, candidate)
            and candidate.component in self.paths
        )
