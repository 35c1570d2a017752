import logging

import pytest
import networkx as nx

from src.algorithms import Smart
from src.core import (
    Balancer, Processor, Sink, Source, Throttle, UnresolvedReferenceError
)
from src.environment import Constant, Model, ModelBuilder, Uniform
from src.utils.config import ModelDefinition


def definition_dict(**overrides):
    """Source -> smart balancer -> two processors -> sink"""
    config = {
        'experiment': {'name': 'topology_test', 'seed': 42},
        'run': {'horizon': 100, 'start': 10, 'end': 90},
        'components': [
            {'type': 'source', 'name': 'arrivals', 'monitor': True,
             'function': {'type': 'uniform', 'minimum': 0.5, 'maximum': 1.5, 'next': 'front'}},
            {'type': 'balancer', 'name': 'front',
             'distributor': {'type': 'smart', 'next': ['left', 'right']}},
            {'type': 'processor', 'name': 'left', 'monitor': True, 'priority': ['arrivals'],
             'functions': [{'type': 'constant', 'period': 1.0, 'next': 'exit'}]},
            {'type': 'throttle', 'name': 'right',
             'functions': [{'type': 'gaussian', 'minimum': 0.5, 'maximum': 1.5, 'next': 'exit'}]},
            {'type': 'sink', 'name': 'exit'},
        ]
    }
    config.update(overrides)
    return config


@pytest.fixture
def definition():
    return ModelDefinition.from_dict(definition_dict())


@pytest.fixture
def model(definition):
    return ModelBuilder(definition).build()


class TestModelBuilder:
    def test_compiles_valid_definition(self, model):
        """Test that a well-formed definition yields a linked model"""
        assert model.compiled
        assert model.errors == []
        assert [source.label for source in model.sources] == ['arrivals']
        assert set(model.components) == {'arrivals', 'front', 'left', 'right', 'exit'}

    def test_component_types_and_wiring(self, model):
        """Test that every reference is bound to the matching component"""
        components = model.components
        assert isinstance(components['arrivals'], Source)
        assert isinstance(components['front'], Balancer)
        assert isinstance(components['left'], Processor)
        assert isinstance(components['right'], Throttle)
        assert isinstance(components['exit'], Sink)

        assert components['arrivals'].generator.next is components['front']
        assert isinstance(components['front'].distributor, Smart)
        assert components['front'].connections() == [components['left'], components['right']]
        assert components['left'].generator_for('arrivals').next is components['exit']
        assert components['left'].sources == ['arrivals']

    def test_generator_parameters(self, model):
        """Test that function parameters reach the generators"""
        generator = model.components['arrivals'].generator
        assert isinstance(generator, Uniform)
        assert generator.minimum == 0.5
        assert generator.maximum == 1.5
        assert model.components['left'].generator_for('arrivals').period == 1.0

    def test_monitor_flags(self, model):
        """Test that only flagged components are monitored"""
        assert sorted(component.label for component in model.monitored()) == ['arrivals', 'left']

    def test_graph_edges(self, model):
        """Test the networkx view of the wiring"""
        assert isinstance(model.graph, nx.DiGraph)
        assert set(model.graph.edges()) == {
            ('arrivals', 'front'), ('front', 'left'), ('front', 'right'),
            ('left', 'exit'), ('right', 'exit')
        }
        assert model.graph.nodes['front']['type'] == 'balancer'

    def test_same_seed_same_streams(self, definition):
        """Test that building twice with one seed gives identical draws"""
        first = ModelBuilder(definition).build().components['arrivals'].generator
        second = ModelBuilder(definition).build().components['arrivals'].generator
        assert [first.generate() for _ in range(5)] == [second.generate() for _ in range(5)]

    def test_seed_override(self, definition):
        """Test that an explicit seed replaces the experiment seed"""
        first = ModelBuilder(definition, seed=1).build().components['arrivals'].generator
        second = ModelBuilder(definition, seed=2).build().components['arrivals'].generator
        assert [first.generate() for _ in range(5)] != [second.generate() for _ in range(5)]

    def test_structural_errors_block_compilation(self):
        """Test that structural problems are reported without building"""
        config = definition_dict()
        config['components'][2]['type'] = 'router'
        model = ModelBuilder(ModelDefinition.from_dict(config)).build()

        assert not model.compiled
        assert model.components == {}
        assert any("unknown component type 'router'" in error for error in model.errors)

    def test_undefined_reference(self):
        """Test that a reference to a missing component is reported"""
        config = definition_dict()
        config['components'][0]['function']['next'] = 'nowhere'
        model = ModelBuilder(ModelDefinition.from_dict(config)).build()

        assert not model.compiled
        assert "arrivals: undefined reference 'nowhere'" in model.errors

    def test_source_cannot_be_downstream(self):
        """Test that routing into a source is rejected"""
        config = definition_dict()
        config['components'][2]['functions'][0]['next'] = 'arrivals'
        model = ModelBuilder(ModelDefinition.from_dict(config)).build()

        assert not model.compiled
        assert any("cannot be a downstream component" in error for error in model.errors)

    def test_station_without_function_for_upstream_source(self):
        """Test that a station must serve every source that can reach it"""
        config = definition_dict()
        config['components'][0]['function']['next'] = 'left'
        config['components'].insert(1, {
            'type': 'source', 'name': 'extra',
            'function': {'type': 'constant', 'period': 1.0, 'next': 'left'}
        })
        config['components'][3]['functions'][0]['source'] = 'arrivals'
        model = ModelBuilder(ModelDefinition.from_dict(config)).build()

        assert not model.compiled
        assert model.errors == ["left: no function for source extra"]

    def test_default_function_covers_every_source(self):
        """Test that a default function serves sources without their own"""
        config = definition_dict()
        config['components'].insert(1, {
            'type': 'source', 'name': 'extra',
            'function': {'type': 'constant', 'period': 1.0, 'next': 'front'}
        })
        model = ModelBuilder(ModelDefinition.from_dict(config)).build()

        assert model.compiled
        assert model.uncovered() == []

    def test_unreachable_component_warning(self, caplog):
        """Test that components no source reaches are flagged"""
        config = definition_dict()
        config['components'].append(
            {'type': 'processor', 'name': 'orphan',
             'functions': [{'type': 'constant', 'period': 1.0, 'next': 'exit'}]}
        )
        with caplog.at_level(logging.WARNING, logger='src.environment.topology'):
            model = ModelBuilder(ModelDefinition.from_dict(config)).build()

        assert model.compiled
        assert model.unreachable() == ['orphan']
        assert "orphan is not reachable" in caplog.text

    def test_from_file(self, tmp_path):
        """Test building straight from a YAML file"""
        path = tmp_path / 'model.yaml'
        path.write_text(
            "run: {horizon: 50, start: 5, end: 45}\n"
            "components:\n"
            "  - {type: source, name: s, function: {type: constant, period: 1, next: k}}\n"
            "  - {type: sink, name: k}\n"
        )
        model = ModelBuilder.from_file(path, seed=3).build()
        assert model.compiled
        assert model.definition.run.horizon == 50.0


class TestModel:
    @pytest.fixture
    def hand_wired(self):
        sink = Sink('exit')
        generator = Constant(1.0)
        generator.next = sink
        processor = Processor('server', [generator], monitor=True)
        arrivals = Constant(2.0)
        arrivals.next = processor
        source = Source('arrivals', arrivals)
        return Model.from_components([source, processor, sink])

    def test_from_components(self, hand_wired):
        """Test wrapping hand-wired components"""
        assert hand_wired.compiled
        assert [source.label for source in hand_wired.sources] == ['arrivals']
        assert set(hand_wired.graph.edges()) == {('arrivals', 'server'), ('server', 'exit')}
        hand_wired.validate()

    def test_validate_lists_missing_references(self):
        """Test that unwired generators are reported together"""
        processor = Processor('server', [Constant(1.0)])
        source = Source('arrivals', Constant(1.0))
        model = Model.from_components([source, processor])

        with pytest.raises(UnresolvedReferenceError) as info:
            model.validate()
        assert len(info.value.references) == 2

    def test_validate_reports_uncovered_sources(self):
        """Test that a source reaching a station without its function is reported"""
        sink = Sink('exit')
        served = Constant(1.0, source='a')
        served.next = sink
        cpu = Processor('cpu', [served])
        sources = []
        for label in ('a', 'b'):
            generator = Constant(1.0)
            generator.next = cpu
            sources.append(Source(label, generator))
        model = Model.from_components(sources + [cpu, sink])

        with pytest.raises(UnresolvedReferenceError) as info:
            model.validate()
        assert info.value.references == ["cpu: no function for source b"]

    def test_reset(self, hand_wired):
        """Test that model reset clears every component"""
        source = hand_wired.components['arrivals']
        processor = hand_wired.components['server']
        event = source.simulate(None)
        while not event.terminal:
            event.simulate()

        hand_wired.reset()

        assert source.time == 0.0
        assert processor.available == 0.0
        assert processor.log == []
        assert hand_wired.components['exit'].log == []
