"""
Bundled factorial experiments.
Each experiment implements the Experiment interface.
"""

from ..errors import UnknownExperiment
from .base import Experiment
from .find_element import FindElementExperiment
from .two_sum import TwoSumExperiment

# Registry of available experiments
EXPERIMENTS = {
    "find_element": FindElementExperiment,
    "two_sum": TwoSumExperiment,
}


def get_experiment(name: str) -> Experiment:
    """
    Get an experiment instance by name.

    Args:
        name: Experiment name (e.g., 'find_element', 'two_sum')

    Returns:
        Experiment instance

    Raises:
        UnknownExperiment: If experiment is not found
    """
    experiment_class = EXPERIMENTS.get(name.lower())
    if not experiment_class:
        available = ", ".join(EXPERIMENTS.keys())
        raise UnknownExperiment(f"Unknown experiment: {name}. Available: {available}")

    return experiment_class()


def list_experiments() -> list:
    """List all available experiment names."""
    return list(EXPERIMENTS.keys())


__all__ = [
    "Experiment",
    "FindElementExperiment",
    "TwoSumExperiment",
    "get_experiment",
    "list_experiments",
    "EXPERIMENTS",
]
