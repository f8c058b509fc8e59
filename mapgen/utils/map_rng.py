from __future__ import annotations

"""Seeded random source shared by the map generators.

Every generator in the package consumes a single :class:`MapRNG` stream.  The
order in which generators draw from it is part of their contract: the same
seed, configuration and grid size always reproduce the same map.  The class is
not thread-safe; give each concurrent generation its own instance.
"""

import json
import random
from dataclasses import dataclass, field
from typing import Any, Dict, MutableSequence, Optional, Sequence

import numpy as np


# ---------------------------------------------------------------------------
# Metrics collection
# ---------------------------------------------------------------------------


@dataclass
class MetricsCollector:
    """Count draws made from a :class:`MapRNG`."""

    metrics: Dict[str, int] = field(
        default_factory=lambda: {
            "integers_generated": 0,
            "floats_generated": 0,
            "booleans_generated": 0,
            "shuffles": 0,
        }
    )

    def update(self, metric: str, value: int = 1) -> None:
        if metric in self.metrics:
            self.metrics[metric] += value

    def get_metrics(self) -> Dict[str, int]:
        return dict(self.metrics)

    def clear(self) -> None:
        for key in self.metrics:
            self.metrics[key] = 0


# ---------------------------------------------------------------------------
# RNG implementation
# ---------------------------------------------------------------------------


class MapRNG:
    def __init__(self, seed: Optional[int] = None, metrics: bool = False) -> None:
        self.initial_seed = seed if seed is not None else random.randint(0, 2**32 - 1)
        self.rng = np.random.default_rng(self.initial_seed)
        self.metrics_enabled = metrics
        self.metrics = MetricsCollector() if metrics else None

    # ------------------------------------------------------------------
    # basic random helpers
    # ------------------------------------------------------------------
    def get_int(self, a: int, b: int) -> int:
        """Uniform integer in the inclusive range ``[a, b]``."""
        if a > b:
            raise ValueError("a <= b")
        val = int(self.rng.integers(a, b + 1))
        if self.metrics:
            self.metrics.update("integers_generated")
        return val

    def get_float(self, a: float = 0.0, b: float = 1.0) -> float:
        """Uniform float in ``[a, b)``."""
        if a > b:
            raise ValueError("a <= b")
        val = float(self.rng.random())
        if self.metrics:
            self.metrics.update("floats_generated")
        return a + (b - a) * val

    def get_bool(self, probability: float = 0.5) -> bool:
        if not 0.0 <= probability <= 1.0:
            raise ValueError("probability out of range")
        val = float(self.rng.random()) < probability
        if self.metrics:
            self.metrics.update("booleans_generated")
        return val

    def get_index(self, seq: Sequence[Any]) -> int:
        if not seq:
            raise ValueError("sequence empty")
        return self.get_int(0, len(seq) - 1)

    def choice(self, seq: Sequence[Any]) -> Any:
        """Return a random element from *seq*."""
        return seq[self.get_index(seq)]

    # ------------------------------------------------------------------
    # sequence utilities
    # ------------------------------------------------------------------
    def shuffle(self, seq: MutableSequence[Any]) -> None:
        """Shuffle *seq* in place (Fisher-Yates)."""
        self.rng.shuffle(seq)
        if self.metrics:
            self.metrics.update("shuffles")

    # ------------------------------------------------------------------
    # state management
    # ------------------------------------------------------------------
    def get_state(self) -> Dict[str, Any]:
        return {
            "random_state": self.rng.bit_generator.state,
            "initial_seed": self.initial_seed,
        }

    def set_state(self, state: Dict[str, Any]) -> None:
        if "random_state" in state:
            self.rng.bit_generator.state = state["random_state"]
        if "initial_seed" in state:
            self.initial_seed = state["initial_seed"]

    def save_state_to_file(self, filename: str) -> None:
        with open(filename, "w", encoding="utf-8") as f:
            json.dump(self.get_state(), f, indent=2)

    def load_state_from_file(self, filename: str) -> None:
        with open(filename, "r", encoding="utf-8") as f:
            state = json.load(f)
        self.set_state(state)

    def get_metrics(self) -> Optional[Dict[str, int]]:
        if not self.metrics_enabled or not self.metrics:
            return None
        return self.metrics.get_metrics()

    def reset(self, seed: Optional[int] = None) -> None:
        self.initial_seed = seed if seed is not None else random.randint(0, 2**32 - 1)
        self.rng = np.random.default_rng(self.initial_seed)
        if self.metrics:
            self.metrics.clear()


def ensure_rng(rng: Optional[MapRNG], seed: Optional[int] = None) -> MapRNG:
    """Return *rng* or a fresh :class:`MapRNG` seeded with *seed*."""
    if rng is not None:
        if not isinstance(rng, MapRNG):
            raise TypeError(f"Expected MapRNG, got {type(rng).__name__}")
        return rng
    return MapRNG(seed=seed)


__all__ = ["MapRNG", "MetricsCollector", "ensure_rng"]
