"""
Experiment execution and reporting package.
"""

from .grid import GridPosition, InputBlock, TreatmentGrid
from .metrics import SampleCollector, SimpleHarness, TimingHarness, TimingStats
from .reporter import Reporter, SummaryAggregator, load_baseline
from .runner import ExperimentResult, ExperimentRunner, ResultRecord, RunnerConfig, TreatmentState
from .validation import Expected, ValidationOutcome, ValidationStatus, validate

__all__ = [
    "Expected",
    "ExperimentResult",
    "ExperimentRunner",
    "GridPosition",
    "InputBlock",
    "Reporter",
    "ResultRecord",
    "RunnerConfig",
    "SampleCollector",
    "SimpleHarness",
    "SummaryAggregator",
    "TimingHarness",
    "TimingStats",
    "TreatmentGrid",
    "TreatmentState",
    "ValidationOutcome",
    "ValidationStatus",
    "load_baseline",
    "validate",
]
