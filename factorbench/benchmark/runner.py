"""
Experiment runner executing the full factorial grid of treatments.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from ..config import Config
from ..errors import HarnessFailure, InvalidExpectedOutput, ValidationMismatch
from ..factors.keys import (
    factor_levels,
    factor_names,
    key_long,
    key_short,
    treatment_key,
    treatment_key_short,
)
from .grid import GridPosition, TreatmentGrid
from .metrics import SimpleHarness, TimingHarness, TimingStats
from .validation import Expected, validate

logger = logging.getLogger(__name__)


class TreatmentState(Enum):
    """Lifecycle of a single treatment inside the runner."""
    IDLE = "idle"
    INPUT_READY = "input_ready"
    VALIDATING = "validating"
    VALIDATED = "validated"
    VALIDATION_FAILED = "validation_failed"
    TIMING = "timing"
    COMPLETE = "complete"
    EXECUTION_FAILED = "execution_failed"


_TRANSITIONS = {
    TreatmentState.IDLE: {TreatmentState.INPUT_READY},
    TreatmentState.INPUT_READY: {TreatmentState.VALIDATING, TreatmentState.TIMING},
    TreatmentState.VALIDATING: {TreatmentState.VALIDATED, TreatmentState.VALIDATION_FAILED},
    TreatmentState.VALIDATED: {TreatmentState.TIMING},
    TreatmentState.TIMING: {TreatmentState.COMPLETE, TreatmentState.EXECUTION_FAILED},
}


@dataclass
class RunnerConfig:
    """Configuration for an experiment run."""
    max_key_length: Optional[int] = None  # default: Config.MAX_KEY_LENGTH
    validate: bool = True


@dataclass
class Treatment:
    """One (input-level, algorithm-level) pair being processed by the runner."""
    position: GridPosition
    key: str
    short_key: str
    state: TreatmentState = TreatmentState.IDLE

    def advance(self, state: TreatmentState) -> None:
        """Move to ``state``; raises RuntimeError on an illegal transition."""
        if state not in _TRANSITIONS.get(self.state, set()):
            raise RuntimeError(
                f"Illegal treatment transition {self.state.value} -> {state.value} for {self.key}"
            )
        logger.debug(f"{self.key}: {self.state.value} -> {state.value}")
        self.state = state


@dataclass(frozen=True)
class ResultRecord:
    """Timing result of one treatment. Never mutated after creation."""
    key: str
    short_key: str
    input_levels: Tuple[str, ...]
    alg_levels: Tuple[str, ...]
    stats: Optional[TimingStats] = None
    status: str = "ok"  # 'ok' | 'failed'
    input_names: Tuple[str, ...] = ()
    alg_names: Tuple[str, ...] = ()
    input_index: int = 0
    alg_index: int = 0

    @property
    def failed(self) -> bool:
        return self.status != "ok" or self.stats is None

    @property
    def estimate(self) -> Optional[float]:
        """Central timing estimate, None for failed treatments."""
        if self.failed:
            return None
        return self.stats.estimate

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "key": self.key,
            "short_key": self.short_key,
            "input_names": list(self.input_names),
            "input_levels": list(self.input_levels),
            "alg_names": list(self.alg_names),
            "alg_levels": list(self.alg_levels),
            "input_index": self.input_index,
            "alg_index": self.alg_index,
            "status": self.status,
            "stats": self.stats.to_dict() if self.stats else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResultRecord":
        stats = data.get("stats")
        return cls(
            key=data["key"],
            short_key=data.get("short_key", ""),
            input_levels=tuple(data.get("input_levels", ())),
            alg_levels=tuple(data.get("alg_levels", ())),
            stats=TimingStats.from_dict(stats) if stats else None,
            status=data.get("status", "ok"),
            input_names=tuple(data.get("input_names", ())),
            alg_names=tuple(data.get("alg_names", ())),
            input_index=int(data.get("input_index", 0)),
            alg_index=int(data.get("alg_index", 0)),
        )


@dataclass
class ExperimentResult:
    """Result of a complete experiment run."""
    name: str
    experiment: str = ""
    records: List[ResultRecord] = field(default_factory=list)
    input_names: List[str] = field(default_factory=list)
    alg_names: List[str] = field(default_factory=list)
    num_inputs: int = 0
    num_algs: int = 0
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def num_treatments(self) -> int:
        return self.num_inputs * self.num_algs

    @property
    def duration(self) -> float:
        """Wall time of the run in seconds."""
        if self.started_at and self.finished_at:
            return (self.finished_at - self.started_at).total_seconds()
        return 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "experiment": self.experiment,
            "input_names": self.input_names,
            "alg_names": self.alg_names,
            "num_inputs": self.num_inputs,
            "num_algs": self.num_algs,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "metadata": self.metadata,
            "records": [r.to_dict() for r in self.records],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExperimentResult":
        def _parse(value):
            return datetime.fromisoformat(value) if value else None

        return cls(
            name=data.get("name", ""),
            experiment=data.get("experiment", ""),
            records=[ResultRecord.from_dict(r) for r in data.get("records", [])],
            input_names=list(data.get("input_names", [])),
            alg_names=list(data.get("alg_names", [])),
            num_inputs=int(data.get("num_inputs", 0)),
            num_algs=int(data.get("num_algs", 0)),
            started_at=_parse(data.get("started_at")),
            finished_at=_parse(data.get("finished_at")),
            metadata=dict(data.get("metadata", {})),
        )


class ExperimentRunner:
    """
    Executes a factorial experiment over input-levels and algorithm-levels.

    Features:
        - Each input is built once and shared by all algorithm variants
        - One untimed validation per treatment, before timing
        - Strictly sequential treatments
        - Progress and result callbacks

    Example:
        runner = ExperimentRunner(FindElementExperiment())
        result = runner.run(input_levels, alg_levels)
    """

    def __init__(
        self,
        experiment: Any,
        harness: Optional[TimingHarness] = None,
        config: Optional[RunnerConfig] = None,
    ):
        """
        Initialize experiment runner.

        Args:
            experiment: Experiment providing input/execute/expected_output/validate_output
            harness: Timing harness (default: SimpleHarness with Config settings)
            config: Runner configuration
        """
        self.experiment = experiment
        self.harness = harness or SimpleHarness(**Config.harness_settings())
        self.config = config or RunnerConfig()

        # Callbacks
        self._on_progress: Optional[Callable[[int, int], None]] = None
        self._on_result: Optional[Callable[[ResultRecord], None]] = None

    def on_progress(self, callback: Callable[[int, int], None]) -> "ExperimentRunner":
        """
        Set progress callback.

        Args:
            callback: Function(completed, total) called after each treatment
        """
        self._on_progress = callback
        return self

    def on_result(self, callback: Callable[[ResultRecord], None]) -> "ExperimentRunner":
        """
        Set result callback.

        Args:
            callback: Function(record) called with each treatment's record
        """
        self._on_result = callback
        return self

    def run(
        self,
        input_levels: Sequence[Any],
        alg_levels: Sequence[Any],
        name: Optional[str] = None,
    ) -> ExperimentResult:
        """
        Run every treatment of the grid.

        Args:
            input_levels: Input factor levels, in declaration order
            alg_levels: Algorithm factor levels, in declaration order
            name: Benchmark name (default: experiment name)

        Returns:
            ExperimentResult with one record per treatment, in grid order

        Raises:
            KeyTooLong: A short treatment key exceeds the limit; nothing is run
            ValidationMismatch: A treatment's output failed validation
            InvalidExpectedOutput: expected_output returned an unwrapped value
            HarnessFailure: The timing harness raised for a treatment
        """
        grid = TreatmentGrid(input_levels, alg_levels)
        name = name or getattr(self.experiment, "name", "experiment")

        logger.info(
            f"# {name} benchmarks with {grid.num_inputs} data points and "
            f"{grid.num_algs} variants => {len(grid)} treatments"
        )

        result = ExperimentResult(
            name=name,
            experiment=getattr(self.experiment, "name", ""),
            input_names=factor_names(grid.input_levels[0]) if grid.input_levels else [],
            alg_names=factor_names(grid.alg_levels[0]) if grid.alg_levels else [],
            num_inputs=grid.num_inputs,
            num_algs=grid.num_algs,
        )

        short_keys = self._check_keys(grid)
        result.started_at = datetime.now()

        completed = 0
        total = len(grid)
        for block in grid.blocks():
            logger.info(f"## Data point {block.label}: {key_long(block.input_level)}")
            input_instance = self.experiment.input(block.input_level)

            for position in block:
                treatment = Treatment(
                    position=position,
                    key=treatment_key(position.input_level, position.alg_level),
                    short_key=short_keys[position.treatment_index - 1],
                )
                treatment.advance(TreatmentState.INPUT_READY)

                record = self._run_treatment(treatment, input_instance)
                result.records.append(record)

                if self._on_result:
                    self._on_result(record)

                completed += 1
                if self._on_progress:
                    self._on_progress(completed, total)

            # Drop the input before the next input-level is built
            input_instance = None

        result.finished_at = datetime.now()
        logger.info(f"{name}: {completed} treatments complete in {result.duration:.1f}s")
        return result

    def _check_keys(self, grid: TreatmentGrid) -> List[str]:
        """Build every short treatment key up front, so a too-long key aborts before any run."""
        return [
            treatment_key_short(
                position.input_level,
                position.alg_level,
                max_length=self.config.max_key_length,
            )
            for position in grid
        ]

    def _run_treatment(self, treatment: Treatment, input_instance: Any) -> ResultRecord:
        """Validate once, then time the treatment through the harness."""
        position = treatment.position
        logger.info(f"### {position.label}: {treatment.key}")

        if self.config.validate:
            self._validate(treatment, input_instance)

        treatment.advance(TreatmentState.TIMING)
        experiment = self.experiment
        alg_level = position.alg_level

        def thunk():
            return experiment.execute(alg_level, input_instance)

        try:
            stats = self.harness.run_timed(
                key_long(position.input_level),
                key_short(alg_level, max_length=self.config.max_key_length),
                thunk,
            )
        except Exception as e:
            treatment.advance(TreatmentState.EXECUTION_FAILED)
            logger.error(f"Timing failed for {treatment.key}: {e}")
            raise HarnessFailure(treatment.key, e) from e

        if stats is None:
            treatment.advance(TreatmentState.EXECUTION_FAILED)
            logger.warning(f"No timing statistic returned for {treatment.key}")
            status = "failed"
        else:
            treatment.advance(TreatmentState.COMPLETE)
            status = "ok"

        return ResultRecord(
            key=treatment.key,
            short_key=treatment.short_key,
            input_levels=tuple(factor_levels(position.input_level)),
            alg_levels=tuple(factor_levels(alg_level)),
            stats=stats,
            status=status,
            input_names=tuple(factor_names(position.input_level)),
            alg_names=tuple(factor_names(alg_level)),
            input_index=position.input_index,
            alg_index=position.alg_index,
        )

    def _validate(self, treatment: Treatment, input_instance: Any) -> None:
        """Single untimed execution followed by the oracle and hook checks."""
        position = treatment.position
        treatment.advance(TreatmentState.VALIDATING)

        output = self.experiment.execute(position.alg_level, input_instance)
        expected = self.experiment.expected_output(position.input_level, input_instance)
        if expected is not None and not isinstance(expected, Expected):
            treatment.advance(TreatmentState.VALIDATION_FAILED)
            raise InvalidExpectedOutput(treatment.key, expected)

        outcome = validate(
            expected,
            output,
            hook=self.experiment.validate_output,
            input_levels=position.input_level,
            input=input_instance,
        )

        if not outcome.passed:
            treatment.advance(TreatmentState.VALIDATION_FAILED)
            logger.error(f"Validation failed for {treatment.key}: {outcome.describe()}")
            raise ValidationMismatch(treatment.key, outcome)

        treatment.advance(TreatmentState.VALIDATED)
