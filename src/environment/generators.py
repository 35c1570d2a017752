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
# File:    src/environment/generators.py
# Description:
#   Provides the statistical value generators that drive inter-arrival
#   periods, processing durations and cooldowns.
#
# ---------------------------------------------------------------------------

"""
Value generators. Each generator produces nonnegative durations and knows
which source it applies to and which downstream component events should
visit next. All randomness comes from an injected numpy Generator so runs
can be reproduced from a seed.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

import numpy as np

if TYPE_CHECKING:
    from ..core.component import Component

DEFAULT_SOURCE = "default"


class Generator(ABC):
    """Base class for duration generators"""

    def __init__(
        self,
        source: str = DEFAULT_SOURCE,
        reference: Optional[str] = None,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None
    ):
        self.source = source
        self.reference = reference
        self.next: Optional["Component"] = None
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    @abstractmethod
    def generate(self) -> float:
        """Produce the next duration."""

    @abstractmethod
    def characteristics(self) -> str:
        """Human readable description of the distribution."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.characteristics()})"


class Constant(Generator):
    """Always returns the same period"""

    def __init__(self, period: float, **kwargs):
        super().__init__(**kwargs)
        self.period = abs(float(period))

    def generate(self) -> float:
        return self.period

    def characteristics(self) -> str:
        return f"constant period={self.period:g}"


class Bounded(Generator):
    """Generator drawing values between two bounds"""

    def __init__(self, minimum: float, maximum: float, **kwargs):
        super().__init__(**kwargs)
        low, high = abs(float(minimum)), abs(float(maximum))
        self.minimum = min(low, high)
        self.maximum = max(low, high)


class Uniform(Bounded):
    """Uniform in [minimum, maximum)"""

    def generate(self) -> float:
        return float(self.rng.uniform(self.minimum, self.maximum))

    def characteristics(self) -> str:
        return f"uniform min={self.minimum:g} max={self.maximum:g}"


class Gaussian(Bounded):
    """
    Normal distribution centred between the bounds, with five standard
    deviations on either side, clipped to the bounds.
    """

    def __init__(self, minimum: float, maximum: float, **kwargs):
        super().__init__(minimum, maximum, **kwargs)
        self.deviation = (self.maximum - self.minimum) / 10
        self.offset = self.minimum + 5 * self.deviation

    def generate(self) -> float:
        value = self.rng.normal(self.offset, self.deviation) if self.deviation > 0 else self.offset
        return float(np.clip(value, self.minimum, self.maximum))

    def characteristics(self) -> str:
        return f"gaussian min={self.minimum:g} max={self.maximum:g}"


class Skewed(Bounded):
    """
    Log-normal style skewed distribution squeezed into (minimum, maximum).
    `skew` controls the spread and `bias` shifts mass towards either bound.
    """

    def __init__(self, minimum: float, maximum: float, skew: float = 1.0, bias: float = 0.0, **kwargs):
        super().__init__(minimum, maximum, **kwargs)
        if skew == 0:
            raise ValueError("skew must be non-zero")
        self.skew = abs(float(skew))
        self.bias = float(bias)
        self.middle = (self.minimum + self.maximum) / 2
        self.range = self.maximum - self.minimum
        self.factor = np.exp(self.bias)

    def generate(self) -> float:
        value = self.factor + np.exp(-self.rng.standard_normal() / self.skew)
        return float(self.middle + self.range * (self.factor / value - 0.5))

    def characteristics(self) -> str:
        return (
            f"skewed min={self.minimum:g} max={self.maximum:g} "
            f"skew={self.skew:g} bias={self.bias:g}"
        )


GENERATORS = {
    'constant': Constant,
    'uniform': Uniform,
    'gaussian': Gaussian,
    'skewed': Skewed,
}


def create_generator(kind: str, **params) -> Generator:
    """
    Create a generator from its definition keyword, e.g.
    create_generator('uniform', minimum=1, maximum=3, source='web').
    """
    try:
        cls = GENERATORS[kind.lower()]
    except KeyError:
        raise ValueError(f"Unknown function type: {kind}") from None
    return cls(**params)
