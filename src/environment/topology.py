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
# File:    src/environment/topology.py
# Description:
#   Builds and links the component network described by a model
#   definition, producing the compiled Model consumed by the engine.
#
# ---------------------------------------------------------------------------

"""
Defines the Model bundle (entry sources, label lookup, error list and the
networkx graph of the wiring) and the ModelBuilder that turns a
ModelDefinition into one. Building runs in three passes: structural checks
on the definition, construction of every component, and linking of every
downstream reference. A model that fails any pass is returned with
`compiled` set to False and its errors listed.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Union
from pathlib import Path
import networkx as nx
import numpy as np

from ..core import (
    DEFAULT, Component, Source, Sink, Station, Processor, Throttle, Balancer,
    UnresolvedReferenceError
)
from ..algorithms import Distributor, create_distributor
from ..utils.config import (
    FUNCTION_PARAMETERS, ModelDefinition, ComponentConfig, collect_errors, load_config
)
from .generators import Generator, create_generator

logger = logging.getLogger(__name__)


@dataclass
class Model:
    """Compiled component network"""
    sources: List[Source]
    components: Dict[str, Component]
    errors: List[str] = field(default_factory=list)
    compiled: bool = False
    graph: nx.DiGraph = field(default_factory=nx.DiGraph)
    definition: Optional[ModelDefinition] = None

    @classmethod
    def from_components(cls, components: Iterable[Component]) -> 'Model':
        """
        Wrap components wired by hand. Sources keep their given order.
        """
        components = list(components)
        model = cls(
            sources=[component for component in components if isinstance(component, Source)],
            components={component.label: component for component in components},
            compiled=True
        )
        model.graph = build_graph(model.components.values())
        return model

    def validate(self) -> None:
        """
        Verify that every generator, distributor slot and balancer is wired,
        and that every station has a function for each source upstream of it.
        Raises UnresolvedReferenceError listing every missing reference.
        """
        missing: List[str] = []
        for component in self.components.values():
            missing.extend(component.unresolved())
        missing.extend(self.uncovered())
        if missing:
            raise UnresolvedReferenceError(missing)

    def uncovered(self) -> List[str]:
        """Stations reachable from a source they declare no function for."""
        sources = {source.label for source in self.sources}
        missing = []
        for label, component in self.components.items():
            if not isinstance(component, Station) or DEFAULT in component.generators:
                continue
            if label not in self.graph:
                continue
            upstream = nx.ancestors(self.graph, label) & sources
            for source in sorted(upstream - set(component.generators)):
                missing.append(f"{label}: no function for source {source}")
        return missing

    def reset(self) -> None:
        """Reset every component exactly once."""
        visited: Set[Component] = set()
        for source in self.sources:
            source.reset(visited)
        for component in self.components.values():
            component.reset(visited)

    def monitored(self) -> List[Component]:
        return [component for component in self.components.values() if component.monitor]

    def unreachable(self) -> List[str]:
        """Labels of components no source can reach."""
        reachable: Set[str] = set()
        for source in self.sources:
            if source.label in self.graph:
                reachable.add(source.label)
                reachable.update(nx.descendants(self.graph, source.label))
        return [label for label in self.components if label not in reachable]


def build_graph(components: Iterable[Component]) -> nx.DiGraph:
    """Directed graph of label -> downstream label edges."""
    graph = nx.DiGraph()
    components = list(components)
    for component in components:
        graph.add_node(component.label, type=type(component).__name__.lower())
    for component in components:
        for downstream in component.connections():
            graph.add_edge(component.label, downstream.label)
    return graph


class ModelBuilder:
    """Turns a ModelDefinition into a linked Model"""

    def __init__(
        self,
        definition: ModelDefinition,
        seed: Optional[int] = None
    ):
        self.definition = definition
        self.seed = seed if seed is not None else definition.experiment.seed
        self._seeds = np.random.SeedSequence(self.seed)
        self.errors: List[str] = []
        self.components: Dict[str, Component] = {}
        # (owner label, target label, generator or distributor) awaiting linking
        self._pending: List[tuple] = []

    @classmethod
    def from_file(cls, path: Union[str, Path], seed: Optional[int] = None) -> 'ModelBuilder':
        return cls(load_config(path), seed=seed)

    def _rng(self) -> np.random.Generator:
        # Independent stream per stochastic element, in declaration order
        return np.random.default_rng(self._seeds.spawn(1)[0])

    def build(self) -> Model:
        self.errors = collect_errors(self.definition)
        if self.errors:
            for error in self.errors:
                logger.error(error)
            return Model(sources=[], components={}, errors=list(self.errors),
                         definition=self.definition)

        for config in self.definition.components:
            self.components[config.name] = self._create(config)
        self._link()

        sources = [c for c in self.components.values() if isinstance(c, Source)]
        model = Model(
            sources=sources,
            components=dict(self.components),
            errors=list(self.errors),
            definition=self.definition
        )
        model.graph = build_graph(self.components.values())

        if not model.errors:
            try:
                model.validate()
            except UnresolvedReferenceError as e:
                model.errors.extend(e.references)
        model.compiled = not model.errors

        for label in model.unreachable():
            logger.warning(f"Component {label} is not reachable from any source")
        for error in model.errors:
            logger.error(error)
        return model

    def _generator(self, owner: str, function) -> Generator:
        params = {
            name: float(function.params[name])
            for name in FUNCTION_PARAMETERS[function.type]
        }
        generator = create_generator(
            function.type,
            source=function.source,
            reference=function.next,
            rng=self._rng(),
            **params
        )
        self._pending.append((owner, function.next, generator))
        return generator

    def _create(self, config: ComponentConfig) -> Component:
        if config.type == 'source':
            generator = self._generator(config.name, config.functions[0])
            return Source(config.name, generator, monitor=config.monitor)
        if config.type in ('processor', 'throttle'):
            generators = [self._generator(config.name, f) for f in config.functions]
            cls = Processor if config.type == 'processor' else Throttle
            return cls(config.name, generators, priority=config.priority, monitor=config.monitor)
        if config.type == 'balancer':
            distributor = create_distributor(
                config.distributor.type, config.distributor.next, rng=self._rng()
            )
            for reference in distributor.references:
                self._pending.append((config.name, reference, distributor))
            return Balancer(config.name, distributor, monitor=config.monitor)
        return Sink(config.name, monitor=config.monitor)

    def _link(self) -> None:
        for owner, reference, target in self._pending:
            component = self.components.get(reference)
            if component is None:
                self.errors.append(f"{owner}: undefined reference '{reference}'")
            elif isinstance(component, Source):
                self.errors.append(f"{owner}: source '{reference}' cannot be a downstream component")
            elif isinstance(target, Distributor):
                target.add_next(component)
            else:
                target.next = component
        self._pending.clear()
