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
# File:    src/utils/logging.py
# Description:
#   Offers structured logging for simulation runs: JSON-encoded run events
#   on console/file handlers and a background JSONL metrics writer.
#
# ---------------------------------------------------------------------------

"""
Offers structured logging facilities to capture run events, errors and
statistics. SimulationLogger writes JSON-encoded messages through the
standard logging machinery and streams metrics records to a JSONL file from a
background thread; NullLogger disables all of it.
"""

import logging
import sys
from enum import Enum
from typing import Dict, Optional, Union
from pathlib import Path
import json
import time
from datetime import datetime
import threading
from queue import Queue
import atexit


class LogLevel(Enum):
    """Log levels for simulation events"""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


class SimulationLogger:
    """Thread-safe logger for simulation events and metrics"""

    def __init__(
        self,
        name: str,
        log_dir: Union[str, Path],
        level: LogLevel = LogLevel.INFO,
        console_output: bool = True,
        file_output: bool = True
    ):
        self.name = name
        self.log_dir = Path(log_dir)
        self.level = level

        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.logger = logging.getLogger(name)
        self.logger.setLevel(level.value)
        self.logger.handlers.clear()

        if console_output:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(self._create_formatter())
            self.logger.addHandler(console_handler)

        if file_output:
            log_file = self.log_dir / f"{name}_{int(time.time())}.log"
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(self._create_formatter())
            self.logger.addHandler(file_handler)

        # Metrics go to a JSONL file written by a background thread
        self.metrics_file = self.log_dir / f"{name}_metrics.jsonl"
        self.metrics_queue: Queue = Queue()
        self._closed = False
        self.metrics_thread = threading.Thread(
            target=self._metrics_writer,
            daemon=True
        )
        self.metrics_thread.start()

        atexit.register(self.cleanup)

        self.logger.info(f"Logger initialized: {name}")

    def _create_formatter(self) -> logging.Formatter:
        """Create log formatter"""
        return logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    def _metrics_writer(self) -> None:
        """Background thread for writing metrics to file"""
        with open(self.metrics_file, 'a') as f:
            while True:
                metrics = self.metrics_queue.get()
                if metrics is None:  # Shutdown signal
                    break
                try:
                    json.dump(metrics, f, default=str)
                    f.write('\n')
                    f.flush()
                except (OSError, TypeError, ValueError) as e:
                    self.logger.error(f"Error writing metrics: {e}")

    def cleanup(self) -> None:
        """Flush pending metrics and stop the writer thread"""
        if self._closed:
            return
        self._closed = True
        self.metrics_queue.put(None)
        self.metrics_thread.join()
        for handler in self.logger.handlers:
            handler.flush()

    def log_event(
        self,
        event_type: str,
        message: str,
        level: LogLevel = LogLevel.INFO,
        **kwargs
    ) -> None:
        """Log a simulation event"""
        log_data = {
            'timestamp': datetime.now().isoformat(),
            'event_type': event_type,
            'message': message,
            **kwargs
        }

        self.logger.log(level.value, json.dumps(log_data, default=str))

    def log_metrics(self, metrics: Dict) -> None:
        """Log metrics data"""
        metrics_data = {
            'timestamp': datetime.now().isoformat(),
            'metrics': metrics
        }
        self.metrics_queue.put(metrics_data)

    def log_reordering(
        self,
        time_point: float,
        displaced: str,
        prioritized: str
    ) -> None:
        """Log an event running ahead of the earliest one because of priority"""
        self.log_event(
            'reordering',
            f"{prioritized} runs ahead of {displaced}",
            level=LogLevel.DEBUG,
            time=time_point,
            displaced=displaced,
            prioritized=prioritized
        )

    def log_checkpoint(
        self,
        operations: int,
        current_time: float,
        pending: int
    ) -> None:
        """Log scheduler progress"""
        self.log_metrics({
            'operations': operations,
            'checkpoint': {
                'current_time': current_time,
                'pending': pending
            }
        })

    def log_component_statistics(
        self,
        label: str,
        statistics: Dict
    ) -> None:
        """Log the statistics computed for one component"""
        self.log_metrics({
            'component': label,
            'statistics': statistics
        })

    def log_run_summary(
        self,
        summary: Dict
    ) -> None:
        """Log the outcome of a full run"""
        self.log_event(
            'run_summary',
            "Simulation run complete",
            level=LogLevel.INFO,
            **summary
        )
        self.log_metrics({'run_summary': summary})

    def log_error(
        self,
        error_type: str,
        message: str,
        **kwargs
    ) -> None:
        """Log error events"""
        self.log_event(
            'error',
            message,
            level=LogLevel.ERROR,
            error_type=error_type,
            **kwargs
        )

    def log_warning(
        self,
        warning_type: str,
        message: str,
        **kwargs
    ) -> None:
        """Log warning events"""
        self.log_event(
            'warning',
            message,
            level=LogLevel.WARNING,
            warning_type=warning_type,
            **kwargs
        )


def setup_logging(
    experiment_name: str,
    log_dir: Union[str, Path],
    console_level: LogLevel = LogLevel.INFO,
    file_level: LogLevel = LogLevel.DEBUG,
    console_output: bool = True
) -> SimulationLogger:
    """Set up logging for an experiment"""
    numeric_level = min(console_level.value, file_level.value)
    return SimulationLogger(
        name=experiment_name,
        log_dir=log_dir,
        level=LogLevel(numeric_level),
        console_output=console_output,
        file_output=True
    )


class NullLogger(SimulationLogger):
    """Null logger for testing or when logging is disabled"""

    def __init__(self):
        pass

    def log_event(self, *args, **kwargs) -> None:
        pass

    def log_metrics(self, *args, **kwargs) -> None:
        pass

    def cleanup(self) -> None:
        pass


def get_logger(logger: Optional[SimulationLogger]) -> SimulationLogger:
    """The given logger, or a NullLogger when none is configured."""
    return logger if logger is not None else NullLogger()
