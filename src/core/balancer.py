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
# File:    src/core/balancer.py
# Description:
#   Implements the Balancer, a zero-delay fan-out station that routes each
#   event through its distribution policy.
#
# ---------------------------------------------------------------------------

"""
The Balancer passes events straight through and lets its Distributor pick
the downstream station. During priority discovery it is a pass-through
node: it is placed on the path when reached by the seed walk and otherwise
waits, as a participant, for whatever the walk beyond it finds.
"""

from typing import TYPE_CHECKING, List, Optional

from .component import Component
from .event import Event

if TYPE_CHECKING:
    from .sequencer import Sequencer
    from ..algorithms.distributors import Distributor


class Balancer(Component):
    """Fan-out station with no service time"""

    def __init__(
        self,
        label: str,
        distributor: Optional["Distributor"] = None,
        monitor: bool = False
    ):
        super().__init__(label, monitor)
        self.distributor = distributor

    def simulate(self, event: Optional[Event]) -> Optional[Event]:
        if event is None:
            return None
        event.set_values(event.completed, event.completed, event.completed)
        self.log.append(event.snapshot())
        self.depths.append(0)
        return self.distributor.assign(event)

    def get_available(self) -> float:
        return self.distributor.available()

    def prioritize(self, sequencer: "Sequencer", exploring: bool) -> None:
        matched = False
        if self in sequencer.paths:
            sequencer.promote()
            matched = True
        elif self in sequencer.exclusions:
            sequencer.exclude()
            matched = True
        else:
            sequencer.participants.add(self)

        if not exploring:
            sequencer.paths.add(self)
            sequencer.participants.discard(self)

        if self.distributor.intelligent:
            sequencer.intelligent.add(self.distributor)

        if not matched:
            self.distributor.prioritize(sequencer, exploring)

    def connections(self) -> List[Component]:
        if self.distributor is None:
            return []
        return [component for component in self.distributor.connections() if component is not None]

    def unresolved(self) -> List[str]:
        if self.distributor is None:
            return [f"{self.label}: no distributor"]
        return [f"{self.label}: {reference} is not bound" for reference in self.distributor.unresolved()]

    def description(self) -> str:
        if self.distributor is None:
            return f"balancer {self.label}"
        return f"balancer {self.label}: {self.distributor.characteristics()}"

    def _clear(self) -> None:
        if self.distributor is not None:
            self.distributor.reset()
