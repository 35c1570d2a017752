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
# File:    src/algorithms/distributors.py
# Description:
#   Implements the routing policies used by balancers: round-robin,
#   uniform random and least-available ("smart") distribution.
#
# ---------------------------------------------------------------------------

"""
Defines the Distributor base class and the RoundRobin, Random and Smart
routing policies. A distributor owns an ordered list of downstream labels
and a slot per label that the model builder fills with the matching
component once the whole graph is known.

Random and Smart support a one-shot preview: calling `available()` (or
walking the distributor during priority discovery) fixes the choice, and the
next `assign()` honors it instead of choosing again.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional, Sequence

import numpy as np

if TYPE_CHECKING:
    from ..core.component import Component
    from ..core.event import Event
    from ..core.sequencer import Sequencer


class Distributor(ABC):
    """Base class for all routing policies"""

    # Policies whose preview depends on downstream state
    intelligent = False

    def __init__(self, references: Sequence[str]):
        self.references: List[str] = list(references)
        self.next: List[Optional["Component"]] = [None] * len(self.references)

    def add_next(self, component: "Component") -> None:
        """Bind `component` into every slot declared with its label."""
        for index, reference in enumerate(self.references):
            if reference == component.label:
                self.next[index] = component

    def connections(self) -> List[Optional["Component"]]:
        """Bound components in declared order."""
        return list(self.next)

    def unresolved(self) -> List[str]:
        """Declared labels with no bound component."""
        return [
            reference
            for reference, component in zip(self.references, self.next)
            if component is None
        ]

    def assign(self, event: "Event") -> "Event":
        """Bind the event to the chosen downstream component."""
        event.component = self.next[self._commit()]
        return event

    def available(self) -> float:
        """Availability of the component that would be chosen now."""
        return self.next[self._preview()].get_available()

    def prioritize(self, sequencer: "Sequencer", exploring: bool) -> None:
        """Continue priority discovery through the previewed choice."""
        self.next[self._preview()].prioritize(sequencer, exploring)

    @abstractmethod
    def _preview(self) -> int:
        """Index that the next assignment will use, without consuming it."""

    @abstractmethod
    def _commit(self) -> int:
        """Index for the current assignment."""

    @abstractmethod
    def reset(self) -> None:
        pass

    @abstractmethod
    def characteristics(self) -> str:
        pass


class RoundRobin(Distributor):
    """Cycles through the downstream components in declared order"""

    def __init__(self, references: Sequence[str]):
        super().__init__(references)
        self.index = 0

    def _preview(self) -> int:
        return self.index

    def _commit(self) -> int:
        index = self.index
        self.index = (self.index + 1) % len(self.next)
        return index

    def reset(self) -> None:
        self.index = 0

    def characteristics(self) -> str:
        return f"roundrobin over {', '.join(self.references)}"


class CachedDistributor(Distributor):
    """Keeps a previewed choice until the next assignment consumes it"""

    def __init__(self, references: Sequence[str]):
        super().__init__(references)
        self.peek: Optional[int] = None

    @abstractmethod
    def _choose(self) -> int:
        pass

    def _preview(self) -> int:
        if self.peek is None:
            self.peek = self._choose()
        return self.peek

    def _commit(self) -> int:
        index = self.peek if self.peek is not None else self._choose()
        self.peek = None
        return index

    def reset(self) -> None:
        self.peek = None


class Random(CachedDistributor):
    """Uniform random choice among the downstream components"""

    def __init__(
        self,
        references: Sequence[str],
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None
    ):
        super().__init__(references)
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def _choose(self) -> int:
        return int(self.rng.integers(len(self.next)))

    def characteristics(self) -> str:
        return f"random over {', '.join(self.references)}"


class Smart(CachedDistributor):
    """Routes to the downstream component that frees up first"""

    intelligent = True

    def _choose(self) -> int:
        # First encountered wins ties
        chosen = 0
        minimum = self.next[0].get_available()
        for index in range(1, len(self.next)):
            available = self.next[index].get_available()
            if available < minimum:
                chosen, minimum = index, available
        return chosen

    def characteristics(self) -> str:
        return f"smart over {', '.join(self.references)}"


DISTRIBUTORS = {
    'roundrobin': RoundRobin,
    'random': Random,
    'smart': Smart,
}


def create_distributor(
    kind: str,
    references: Sequence[str],
    rng: Optional[np.random.Generator] = None
) -> Distributor:
    """Create a distributor from its definition keyword."""
    try:
        cls = DISTRIBUTORS[kind.lower()]
    except KeyError:
        raise ValueError(f"Unknown distributor type: {kind}") from None
    if cls is Random:
        return Random(references, rng=rng)
    return cls(references)
