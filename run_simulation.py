#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# Copyright (c) 2024 Dimitrios Kafetzis
#
# This file is part of the Queueing Network Simulator project.
# Licensed under the MIT License; you may not use this file except in compliance
# with the License. You may obtain a copy of the License at
#   https://opensource.org/licenses/MIT
#
# Author: Dimitrios Kafetzis (dimitrioskafetzis@gmail.com)
# File: run_simulation.py
# Description:
#   This file provides the main entry-point for simulating a queueing
#   network. It parses command-line arguments, loads and links the model
#   definition, runs the simulation and reports the statistics.
#
# ---------------------------------------------------------------------------

"""
Example usage:
    ./run_simulation.py experiments/models/pipeline.yaml
    # override the run window and write CSV files and plots:
    ./run_simulation.py experiments/models/priority.yaml --horizon 2000 \
        --start 100 --end 1900 --output-dir results/ --plot
"""

import sys
from pathlib import Path
from typing import List, Optional
import argparse

import matplotlib
import yaml

from src.core import SimulationError, InsufficientSampleError
from src.environment import ModelBuilder
from src.simulation import (
    SimulationEngine, SimulationConfig, statistics_frame, events_frame, format_report
)
from src.utils import (
    LogLevel, NullLogger, VisualizationManager, load_config, merge_configs,
    plot_all_results, setup_logging
)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Simulate a queueing network model')
    parser.add_argument('model',
                        help='Model definition file (.yaml or .json)')
    parser.add_argument('--horizon', type=float,
                        help='Time after which sources stop generating events')
    parser.add_argument('--start', type=float,
                        help='Start of the sampling window')
    parser.add_argument('--end', type=float,
                        help='End of the sampling window')
    parser.add_argument('--seed', type=int,
                        help='Seed for every random generator in the model')
    parser.add_argument('--output-dir',
                        help='Directory for logs, CSV files and plots')
    parser.add_argument('--plot', action='store_true',
                        help='Save plots to the output directory')
    parser.add_argument('--verbose', action='store_true',
                        help='Log engine progress to the console')
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        definition = load_config(args.model)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Cannot read model definition: {e}", file=sys.stderr)
        return 1

    overrides = {
        'run': {
            key: value for key, value in (
                ('horizon', args.horizon), ('start', args.start), ('end', args.end)
            ) if value is not None
        }
    }
    if args.seed is not None:
        overrides['experiment'] = {'seed': args.seed}
    definition = merge_configs(definition, overrides)

    try:
        config = SimulationConfig(
            horizon=definition.run.horizon,
            start=definition.run.start,
            end=definition.run.end,
            seed=definition.experiment.seed,
            checkpoint_interval=definition.experiment.checkpoint_interval,
            enable_logging=args.verbose
        )
    except ValueError as e:
        print(f"Invalid run parameters: {e}", file=sys.stderr)
        return 1

    output_dir = Path(args.output_dir) if args.output_dir else None
    if output_dir is not None:
        logger = setup_logging(
            definition.experiment.name,
            output_dir / 'logs',
            console_level=LogLevel.WARNING,
            console_output=False
        )
    else:
        logger = NullLogger()

    try:
        model = ModelBuilder(definition, seed=config.seed).build()
        if not model.compiled:
            print("Model failed to compile:", file=sys.stderr)
            for error in model.errors:
                print(f"  {error}", file=sys.stderr)
                logger.log_error("compilation", error)
            return 1
        print(f"Compiled {len(model.components)} components from {args.model}")

        engine = SimulationEngine(model, config, sim_logger=logger)
        engine.run()
        print(f"Simulation operations: {engine.state.operations}")

        try:
            stations = engine.component_statistics()
            events = engine.event_statistics()
        except InsufficientSampleError as e:
            print(f"Insufficient sample in window: {e}", file=sys.stderr)
            return 1
        print(format_report(stations, events, config.start, config.end))

        if output_dir is not None:
            station_data = statistics_frame(stations)
            event_data = events_frame(engine.completed)
            station_data.to_csv(output_dir / 'stations.csv')
            event_data.to_csv(output_dir / 'events.csv', index=False)
            VisualizationManager(output_dir).create_performance_report(
                station_data, events.to_dict(), output_dir / 'summary.json'
            )
            if args.plot:
                matplotlib.use('Agg')
                plot_all_results(
                    station_data,
                    event_data[event_data['created'].between(config.start, config.end)],
                    model.graph,
                    output_dir / 'plots',
                    depths={c.label: list(c.depths) for c in model.monitored() if c.depths}
                )
        elif args.plot:
            print("--plot requires --output-dir; no plots written", file=sys.stderr)

        logger.log_event("complete", "Simulation completed successfully")
        return 0

    except SimulationError as e:
        logger.log_error(e.kind.value, str(e))
        print(f"Simulation failed: {e}", file=sys.stderr)
        return 1

    finally:
        logger.cleanup()


if __name__ == "__main__":
    sys.exit(main())
