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
# File:    src/core/errors.py
# Description:
#   Error kinds and exception types raised before and after a simulation
#   run: unresolved wiring, uncompiled models and statistics computed
#   over an empty observation span.
#
# ---------------------------------------------------------------------------

"""
Exception hierarchy of the simulator. Every error raised by the simulator
itself derives from SimulationError and carries an ErrorKind.
"""

from enum import Enum
from typing import Iterable, List, Optional


class ErrorKind(Enum):
    """Categories of simulator failures"""
    UNRESOLVED_REFERENCE = "unresolved_reference"
    INVALID_DEFINITION = "invalid_definition"
    NOT_COMPILED = "not_compiled"
    INSUFFICIENT_SAMPLE = "insufficient_sample"


class SimulationError(RuntimeError):
    """Base class for simulator errors"""

    kind: ErrorKind = ErrorKind.INVALID_DEFINITION

    def __init__(self, message: str, kind: Optional[ErrorKind] = None):
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class UnresolvedReferenceError(SimulationError):
    """One or more component references were never wired."""

    kind = ErrorKind.UNRESOLVED_REFERENCE

    def __init__(self, references: Iterable[str]):
        self.references: List[str] = list(references)
        super().__init__(
            "Unresolved references: " + "; ".join(self.references)
        )


class ModelCompilationError(SimulationError):
    """Raised when a model with definition errors is asked to run."""

    kind = ErrorKind.NOT_COMPILED

    def __init__(self, errors: Iterable[str]):
        self.errors: List[str] = list(errors)
        message = "Model is not compiled"
        if self.errors:
            message += ": " + "; ".join(self.errors)
        super().__init__(message)


class InsufficientSampleError(SimulationError):
    """An observation span used as a divisor is empty."""

    kind = ErrorKind.INSUFFICIENT_SAMPLE
