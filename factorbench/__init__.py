"""
factorbench - factorial experiments for micro-benchmarking.

Builds every input once, validates each (input, algorithm) treatment once
outside of timing, times it through a harness, and summarizes variants per input.
"""

from .benchmark import Expected, ExperimentRunner, Reporter, SimpleHarness
from .errors import ExperimentError, HarnessFailure, KeyTooLong, ValidationMismatch
from .experiments import Experiment
from .factors import FactorLevels, build_key, treatment_key, treatment_key_short

__version__ = "1.0.0"

__all__ = [
    "Expected",
    "Experiment",
    "ExperimentError",
    "ExperimentRunner",
    "FactorLevels",
    "HarnessFailure",
    "KeyTooLong",
    "Reporter",
    "SimpleHarness",
    "ValidationMismatch",
    "build_key",
    "treatment_key",
    "treatment_key_short",
]
