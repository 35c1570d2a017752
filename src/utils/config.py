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
# File:    src/utils/config.py
# Description:
#   Provides functionality for loading, validating, and saving queueing
#   network model definitions in YAML or JSON format.
#
# ---------------------------------------------------------------------------

"""
Implements configuration management for the simulator. A model definition
describes the experiment, the run window and the list of stations with their
functions and routing. Definitions are loaded from YAML/JSON files into
dataclasses, checked for structural problems and saved back to disk.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union
import yaml
import json
from pathlib import Path

COMPONENT_TYPES = ('source', 'processor', 'throttle', 'balancer', 'sink')
DISTRIBUTOR_TYPES = ('roundrobin', 'random', 'smart')

# Mandatory numeric parameters per function type
FUNCTION_PARAMETERS = {
    'constant': ('period',),
    'uniform': ('minimum', 'maximum'),
    'gaussian': ('minimum', 'maximum'),
    'skewed': ('minimum', 'maximum', 'skew', 'bias'),
}

DEFAULT_SOURCE = "default"


def _as_flag(value: Any) -> bool:
    """Booleans as given; strings are true when they contain a 'y' ("yes", "y")."""
    if isinstance(value, str):
        return 'y' in value.lower()
    return bool(value)


@dataclass
class FunctionConfig:
    """Generator attached to a source or station"""
    type: str
    params: Dict[str, Any] = field(default_factory=dict)
    source: str = DEFAULT_SOURCE
    next: Optional[str] = None

    @classmethod
    def from_dict(cls, config_dict: Dict) -> 'FunctionConfig':
        params = {
            key: value for key, value in config_dict.items()
            if key not in ('type', 'source', 'next')
        }
        return cls(
            type=str(config_dict.get('type', '')).lower(),
            params=params,
            source=str(config_dict.get('source', DEFAULT_SOURCE)),
            next=config_dict.get('next')
        )

    def to_dict(self) -> Dict:
        result: Dict[str, Any] = {'type': self.type}
        result.update(self.params)
        if self.source != DEFAULT_SOURCE:
            result['source'] = self.source
        if self.next is not None:
            result['next'] = self.next
        return result


@dataclass
class DistributorConfig:
    """Routing policy of a balancer"""
    type: str
    next: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, config_dict: Dict) -> 'DistributorConfig':
        return cls(
            type=str(config_dict.get('type', '')).lower(),
            next=[str(reference) for reference in config_dict.get('next', [])]
        )

    def to_dict(self) -> Dict:
        return {'type': self.type, 'next': list(self.next)}


@dataclass
class ComponentConfig:
    """One station of the network"""
    type: str
    name: str
    monitor: bool = False
    priority: List[str] = field(default_factory=list)
    functions: List[FunctionConfig] = field(default_factory=list)
    distributor: Optional[DistributorConfig] = None

    @classmethod
    def from_dict(cls, config_dict: Dict) -> 'ComponentConfig':
        """
        Sources declare a single `function`; processors and throttles a list
        of `functions`. Both spellings are accepted for any component so the
        structural check can report misuse.
        """
        functions = []
        if 'function' in config_dict:
            functions.append(FunctionConfig.from_dict(config_dict['function']))
        for function in config_dict.get('functions', []) or []:
            functions.append(FunctionConfig.from_dict(function))

        distributor = config_dict.get('distributor')
        return cls(
            type=str(config_dict.get('type', '')).lower(),
            name=str(config_dict.get('name', '')),
            monitor=_as_flag(config_dict.get('monitor', False)),
            priority=[str(source) for source in config_dict.get('priority', []) or []],
            functions=functions,
            distributor=DistributorConfig.from_dict(distributor) if distributor else None
        )

    def to_dict(self) -> Dict:
        result: Dict[str, Any] = {
            'type': self.type,
            'name': self.name,
            'monitor': self.monitor
        }
        if self.priority:
            result['priority'] = list(self.priority)
        if self.type == 'source' and len(self.functions) == 1:
            result['function'] = self.functions[0].to_dict()
        elif self.functions:
            result['functions'] = [function.to_dict() for function in self.functions]
        if self.distributor is not None:
            result['distributor'] = self.distributor.to_dict()
        return result


@dataclass
class RunConfig:
    """Generation horizon and sampling window"""
    horizon: float = 1000.0
    start: float = 0.0
    end: float = 900.0


@dataclass
class ExperimentConfig:
    """Experiment configuration"""
    name: str
    description: str = ""
    seed: Optional[int] = None
    checkpoint_interval: int = 10000
    metrics_output_dir: str = "results"


@dataclass
class ModelDefinition:
    """Complete model definition"""
    experiment: ExperimentConfig
    run: RunConfig
    components: List[ComponentConfig]

    @classmethod
    def from_dict(cls, config_dict: Dict) -> 'ModelDefinition':
        """
        Create a ModelDefinition from a dictionary. Numeric run values are
        converted here; component values are kept as written and checked by
        collect_errors.
        """
        exp = config_dict.get('experiment', {}) or {}
        seed = exp.get('seed', None)
        experiment = ExperimentConfig(
            name=exp.get('name', 'unnamed'),
            description=exp.get('description', ''),
            seed=int(seed) if seed is not None else None,
            checkpoint_interval=int(exp.get('checkpoint_interval', 10000)),
            metrics_output_dir=exp.get('metrics_output_dir', 'results')
        )

        r = config_dict.get('run', {}) or {}
        run = RunConfig(
            horizon=float(r.get('horizon', 1000.0)),
            start=float(r.get('start', 0.0)),
            end=float(r.get('end', 900.0))
        )

        components = [
            ComponentConfig.from_dict(component)
            for component in config_dict.get('components', []) or []
        ]
        return cls(experiment=experiment, run=run, components=components)

    @classmethod
    def from_yaml(cls, config_path: Union[str, Path]) -> 'ModelDefinition':
        """
        Classmethod to load a YAML or JSON file, so you can do:
            definition = ModelDefinition.from_yaml("models/pipeline.yaml")
        """
        return load_config(config_path)

    def to_dict(self) -> Dict:
        """Convert configuration to dictionary"""
        return {
            'experiment': {
                'name': self.experiment.name,
                'description': self.experiment.description,
                'seed': self.experiment.seed,
                'checkpoint_interval': self.experiment.checkpoint_interval,
                'metrics_output_dir': self.experiment.metrics_output_dir
            },
            'run': {
                'horizon': self.run.horizon,
                'start': self.run.start,
                'end': self.run.end
            },
            'components': [component.to_dict() for component in self.components]
        }


def create_default_config() -> ModelDefinition:
    """Create default configuration: one source feeding one processor."""
    return ModelDefinition(
        experiment=ExperimentConfig(
            name="default_experiment",
            description="Single source, single processor pipeline"
        ),
        run=RunConfig(horizon=1000.0, start=0.0, end=900.0),
        components=[
            ComponentConfig(
                type='source',
                name='arrivals',
                monitor=True,
                functions=[FunctionConfig('constant', {'period': 1.0}, next='server')]
            ),
            ComponentConfig(
                type='processor',
                name='server',
                monitor=True,
                functions=[
                    FunctionConfig('uniform', {'minimum': 0.5, 'maximum': 1.0}, next='exit')
                ]
            ),
            ComponentConfig(type='sink', name='exit')
        ]
    )


def load_config(config_path: Union[str, Path]) -> ModelDefinition:
    """
    Load configuration from a YAML or JSON file, returning a ModelDefinition.
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r') as f:
        if config_path.suffix in ('.yaml', '.yml'):
            config_dict = yaml.safe_load(f)
        elif config_path.suffix == '.json':
            config_dict = json.load(f)
        else:
            raise ValueError("Configuration file must be .yaml or .json")

    return ModelDefinition.from_dict(config_dict or {})


def save_config(config: ModelDefinition, config_path: Union[str, Path]) -> None:
    """
    Save configuration to a file (YAML or JSON).
    """
    config_path = Path(config_path)
    config_dict = config.to_dict()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w') as f:
        if config_path.suffix in ('.yaml', '.yml'):
            yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)
        elif config_path.suffix == '.json':
            json.dump(config_dict, f, indent=2)
        else:
            raise ValueError("Configuration file must be .yaml or .json")


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    try:
        float(value)
    except (TypeError, ValueError):
        return False
    return True


def _function_errors(owner: str, function: FunctionConfig) -> List[str]:
    errors = []
    if function.type not in FUNCTION_PARAMETERS:
        errors.append(f"{owner}: unknown function type '{function.type}'")
        return errors
    for name in FUNCTION_PARAMETERS[function.type]:
        if name not in function.params:
            errors.append(f"{owner}: {function.type} function missing parameter '{name}'")
        elif not _is_number(function.params[name]):
            errors.append(f"{owner}: parameter '{name}' is not numeric: {function.params[name]!r}")
    if function.type == 'skewed' and _is_number(function.params.get('skew')) \
            and float(function.params['skew']) == 0:
        errors.append(f"{owner}: skewed function requires a non-zero skew")
    if function.next is None:
        errors.append(f"{owner}: function missing parameter 'next'")
    return errors


def collect_errors(config: ModelDefinition) -> List[str]:
    """
    Structural problems of a definition, as human readable strings.
    Downstream references are resolved later by the model builder.
    """
    errors: List[str] = []

    run = config.run
    if run.horizon <= 0:
        errors.append(f"run: horizon must be positive, got {run.horizon}")
    if not 0 <= run.start < run.end < run.horizon:
        errors.append(
            f"run: window must satisfy 0 <= start < end < horizon, "
            f"got start={run.start} end={run.end} horizon={run.horizon}"
        )
    if config.experiment.checkpoint_interval <= 0:
        errors.append("experiment: checkpoint_interval must be positive")

    if not config.components:
        errors.append("model declares no components")
    elif not any(component.type == 'source' for component in config.components):
        errors.append("model declares no source")

    names = set()
    for index, component in enumerate(config.components):
        owner = component.name or f"component #{index}"
        if not component.name:
            errors.append(f"{owner}: missing name")
        elif component.name in names:
            errors.append(f"{owner}: duplicate component name")
        names.add(component.name)

        if component.type not in COMPONENT_TYPES:
            errors.append(f"{owner}: unknown component type '{component.type}'")
            continue

        if component.type == 'source':
            if len(component.functions) != 1:
                errors.append(f"{owner}: source requires exactly one function")
            elif component.functions[0].type == 'constant' \
                    and _is_number(component.functions[0].params.get('period')) \
                    and float(component.functions[0].params['period']) == 0:
                # Arrivals would never pass the horizon
                errors.append(f"{owner}: source period must be non-zero")
        elif component.type in ('processor', 'throttle'):
            if not component.functions:
                errors.append(f"{owner}: {component.type} declares no function")
            sources = [function.source for function in component.functions]
            for source in set(sources):
                if sources.count(source) > 1:
                    errors.append(f"{owner}: more than one function for source '{source}'")
        elif component.functions:
            errors.append(f"{owner}: {component.type} does not take functions")

        for function in component.functions:
            errors.extend(_function_errors(owner, function))

        if component.type == 'balancer':
            distributor = component.distributor
            if distributor is None:
                errors.append(f"{owner}: balancer declares no distributor")
            elif distributor.type not in DISTRIBUTOR_TYPES:
                errors.append(f"{owner}: unknown distributor type '{distributor.type}'")
            elif not distributor.next:
                errors.append(f"{owner}: distributor declares no downstream component")
        elif component.distributor is not None:
            errors.append(f"{owner}: only a balancer takes a distributor")

    return errors


def validate_config(config: ModelDefinition) -> bool:
    """Validate configuration parameters"""
    try:
        return not collect_errors(config)
    except (AttributeError, TypeError, ValueError):
        return False


def merge_configs(base_config: ModelDefinition, override_config: Dict) -> ModelDefinition:
    """
    Merge base configuration with overrides from a dictionary.
    """
    base_dict = base_config.to_dict()

    def update_dict(d1: Dict, d2: Dict) -> Dict:
        for k, v in d2.items():
            if k in d1 and isinstance(d1[k], dict) and isinstance(v, dict):
                d1[k] = update_dict(d1[k], v)
            else:
                d1[k] = v
        return d1

    merged_dict = update_dict(base_dict, override_config)
    return ModelDefinition.from_dict(merged_dict)
