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
# File:    src/simulation/metrics.py
# Description:
#   Computes per-station and per-event statistics over a sampling window
#   and renders them as text reports or pandas DataFrames.
#
# ---------------------------------------------------------------------------

"""
Provides the Monitor, which restricts station logs and completed events to a
sampling window and computes arrival, wait, processing and visit statistics,
utilization, throughput and queue depth. Results are plain dataclasses that
convert to dictionaries and pandas DataFrames.
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, Iterable, List, Optional, Sequence
import numpy as np
import pandas as pd

from ..core import (
    Component, Event, Source, Processor, Throttle, InsufficientSampleError
)


@dataclass
class SummaryStatistics:
    """Descriptive statistics of one sample"""
    count: int = 0
    mean: Optional[float] = None
    std: Optional[float] = None
    median: Optional[float] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None

    @classmethod
    def from_values(cls, values: Iterable[float]) -> 'SummaryStatistics':
        data = np.asarray(list(values), dtype=float)
        if data.size == 0:
            return cls()
        return cls(
            count=int(data.size),
            mean=float(np.mean(data)),
            # Sample standard deviation; a single observation has no spread
            std=float(np.std(data, ddof=1)) if data.size > 1 else 0.0,
            median=float(np.median(data)),
            minimum=float(np.min(data)),
            maximum=float(np.max(data))
        )

    def to_dict(self) -> Dict:
        return asdict(self)

    def describe(self) -> str:
        if self.count == 0:
            return "no observations"
        return (
            f"mean={self.mean:.6f} std={self.std:.6f} "
            f"min={self.minimum:.6f} max={self.maximum:.6f}"
        )


@dataclass
class ComponentStatistics:
    """Statistics of one station over the sampling window"""
    label: str
    kind: str
    count: int
    arrivals: SummaryStatistics
    wait: Optional[SummaryStatistics] = None
    processing: Optional[SummaryStatistics] = None
    visit: Optional[SummaryStatistics] = None
    depth: Optional[SummaryStatistics] = None
    utilization: Optional[float] = None
    throughput: Optional[float] = None

    def to_dict(self) -> Dict:
        """Flat dictionary, one key per figure"""
        result: Dict = {
            'label': self.label,
            'kind': self.kind,
            'count': self.count,
            'utilization': self.utilization,
            'throughput': self.throughput,
        }
        for name in ('arrivals', 'wait', 'processing', 'visit', 'depth'):
            stats = getattr(self, name)
            if stats is None:
                continue
            result[f'{name}_mean'] = stats.mean
            result[f'{name}_std'] = stats.std
            result[f'{name}_min'] = stats.minimum
            result[f'{name}_max'] = stats.maximum
        return result


@dataclass
class EventStatistics:
    """Statistics of events that left the network within the window"""
    count: int
    throughput: Optional[float]
    ratio: Optional[float]
    lifetime: SummaryStatistics
    executed: SummaryStatistics
    by_source: Dict[str, 'EventStatistics'] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {
            'count': self.count,
            'throughput': self.throughput,
            'ratio': self.ratio,
            'lifetime': self.lifetime.to_dict(),
            'executed': self.executed.to_dict(),
            'by_source': {
                source: stats.to_dict() for source, stats in self.by_source.items()
            }
        }


class Monitor:
    """Computes statistics restricted to the window [start, end]"""

    def __init__(self, start: float, end: float):
        start, end = abs(start), abs(end)
        self.start = min(start, end)
        self.end = max(start, end)

    def window(self, component: Component) -> List[Event]:
        """Logged events that arrived and completed inside the window."""
        return [
            event for event in component.log
            if event.arrived >= self.start and event.completed <= self.end
        ]

    def _span(self, last: float, label: str) -> float:
        span = last - self.start
        if span <= 0:
            raise InsufficientSampleError(
                f"{label}: observation span {span:g} from {self.start:g} is empty"
            )
        return span

    def display_statistics(self, component: Component) -> ComponentStatistics:
        """
        Compute statistics for one station. Raises InsufficientSampleError when
        the window holds events but no elapsed time to divide by.
        """
        events = self.window(component)
        depths: List[int] = []
        if len(component.depths) == len(component.log):
            depths = [
                depth for depth, event in zip(component.depths, component.log)
                if event.arrived >= self.start and event.completed <= self.end
            ]

        by_arrival = isinstance(component, (Processor, Throttle))
        events.sort(key=(lambda e: e.arrived) if by_arrival else (lambda e: e.created))
        times = [e.arrived if by_arrival else e.created for e in events]

        stats = ComponentStatistics(
            label=component.label,
            kind=type(component).__name__.lower(),
            count=len(events),
            arrivals=SummaryStatistics.from_values(np.diff(times)) if len(times) > 1
            else SummaryStatistics()
        )
        if not events:
            return stats

        if isinstance(component, Source):
            stats.throughput = len(events) / self._span(times[-1], component.label)
            return stats

        stats.wait = SummaryStatistics.from_values(e.started - e.arrived for e in events)
        stats.processing = SummaryStatistics.from_values(e.completed - e.started for e in events)
        stats.visit = SummaryStatistics.from_values(e.completed - e.arrived for e in events)
        if depths:
            stats.depth = SummaryStatistics.from_values(depths)

        idle = 0.0
        last = self.start
        for event in events:
            idle += max(0.0, event.started - max(self.start, last))
            last = max(last, event.completed)
        span = self._span(last, component.label)
        stats.utilization = (span - idle) / span
        stats.throughput = len(events) / span
        return stats

    def summarize_events(
        self,
        events: Sequence[Event],
        multisource: bool = False
    ) -> EventStatistics:
        """Statistics of exited events created and completed inside the window"""
        sample = [
            event for event in events
            if event.terminal and event.created >= self.start and event.completed <= self.end
        ]
        stats = self._summarize(sample, "events")
        if multisource:
            sources: Dict[str, List[Event]] = {}
            for event in sample:
                sources.setdefault(event.source, []).append(event)
            stats.by_source = {
                source: self._summarize(items, source)
                for source, items in sorted(sources.items())
            }
        return stats

    def _summarize(self, sample: List[Event], label: str) -> EventStatistics:
        lifetime = SummaryStatistics.from_values(e.lifetime for e in sample)
        executed = SummaryStatistics.from_values(e.executed for e in sample)
        throughput = None
        ratio = None
        if sample:
            last = max(e.completed for e in sample)
            throughput = len(sample) / self._span(last, label)
            if lifetime.mean:
                ratio = executed.mean / lifetime.mean
        return EventStatistics(
            count=len(sample),
            throughput=throughput,
            ratio=ratio,
            lifetime=lifetime,
            executed=executed
        )


def statistics_frame(statistics: Iterable[ComponentStatistics]) -> pd.DataFrame:
    """One row per station"""
    frame = pd.DataFrame([stats.to_dict() for stats in statistics])
    if not frame.empty:
        frame = frame.set_index('label')
    return frame


def events_frame(events: Iterable[Event]) -> pd.DataFrame:
    """One row per event"""
    return pd.DataFrame([
        {
            'source': event.source,
            'label': event.label,
            'created': event.created,
            'arrived': event.arrived,
            'started': event.started,
            'completed': event.completed,
            'executed': event.executed,
            'elapsed': event.elapsed,
            'lifetime': event.lifetime,
            'last': event.last,
        }
        for event in events
    ], columns=[
        'source', 'label', 'created', 'arrived', 'started', 'completed',
        'executed', 'elapsed', 'lifetime', 'last'
    ])


def format_report(
    components: Sequence[ComponentStatistics],
    events: Optional[EventStatistics] = None,
    start: Optional[float] = None,
    end: Optional[float] = None
) -> str:
    """Render statistics as the text report printed after a run"""
    lines: List[str] = []
    if start is not None and end is not None:
        lines.append(f"Statistics for events that occurred between {start:g} and {end:g}")

    if events is not None:
        lines.append("Events")
        lines.append(f"  count:      {events.count}")
        if events.throughput is not None:
            lines.append(f"  throughput: {events.throughput:.6f}")
        if events.ratio is not None:
            lines.append(f"  processing in lifetime: {events.ratio:.2%}")
        lines.append(f"  lifetime:   {events.lifetime.describe()}")
        lines.append(f"  executed:   {events.executed.describe()}")
        for source, stats in events.by_source.items():
            lines.append(f"  source {source}: count={stats.count} lifetime {stats.lifetime.describe()}")

    for stats in components:
        lines.append(f"{stats.kind} {stats.label}")
        lines.append(f"  count:      {stats.count}")
        lines.append(f"  interval:   {stats.arrivals.describe()}")
        for name in ('wait', 'processing', 'visit', 'depth'):
            summary = getattr(stats, name)
            if summary is not None:
                lines.append(f"  {name + ':':<11} {summary.describe()}")
        if stats.utilization is not None:
            lines.append(f"  utilization: {stats.utilization:.2%}")
        if stats.throughput is not None:
            lines.append(f"  throughput: {stats.throughput:.6f}")
    return "\n".join(lines)
