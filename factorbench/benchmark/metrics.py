"""
Timing statistics and the default timing harness.
"""

import logging
import statistics
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)


@dataclass
class TimingStats:
    """
    Aggregated timing of one treatment.

    All durations are seconds per single call of the subject under test.
    """
    # Identification
    group: str = ""
    variant: str = ""

    # Sampling
    sample_size: int = 0
    iterations: int = 0       # Total calls timed across all samples
    samples: List[float] = field(default_factory=list)

    # Statistics (seconds per call)
    mean: float = 0.0
    median: float = 0.0
    min: float = 0.0
    max: float = 0.0
    std_dev: float = 0.0
    p95: float = 0.0

    @property
    def estimate(self) -> float:
        """Central estimate used to compare variants."""
        return self.mean

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "group": self.group,
            "variant": self.variant,
            "sample_size": self.sample_size,
            "iterations": self.iterations,
            "samples": self.samples,
            "mean": self.mean,
            "median": self.median,
            "min": self.min,
            "max": self.max,
            "std_dev": self.std_dev,
            "p95": self.p95,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TimingStats":
        """Rebuild from ``to_dict`` output."""
        return cls(
            group=data.get("group", ""),
            variant=data.get("variant", ""),
            sample_size=int(data.get("sample_size", 0)),
            iterations=int(data.get("iterations", 0)),
            samples=list(data.get("samples", [])),
            mean=float(data.get("mean", 0.0)),
            median=float(data.get("median", 0.0)),
            min=float(data.get("min", 0.0)),
            max=float(data.get("max", 0.0)),
            std_dev=float(data.get("std_dev", 0.0)),
            p95=float(data.get("p95", 0.0)),
        )


class SampleCollector:
    """
    Collects timing samples of one treatment.

    Usage:
        collector = SampleCollector("len:1024", "n:1_d:F")

        for _ in range(sample_size):
            start = time.perf_counter()
            for _ in range(iterations):
                thunk()
            collector.record(time.perf_counter() - start, iterations)

        stats = collector.calculate()
    """

    def __init__(self, group: str, variant: str):
        """
        Initialize sample collector.

        Args:
            group: Group label of the treatment
            variant: Variant label of the treatment
        """
        self.group = group
        self.variant = variant

        # Per-call durations, one per sample
        self.samples: List[float] = []
        self.iterations = 0

    def record(self, elapsed: float, iterations: int = 1) -> None:
        """
        Record one sample.

        Args:
            elapsed: Wall time of the sample in seconds
            iterations: Number of calls timed in the sample
        """
        if iterations < 1:
            raise ValueError(f"iterations must be positive, got {iterations}")
        self.samples.append(elapsed / iterations)
        self.iterations += iterations

    def calculate(self) -> TimingStats:
        """
        Calculate aggregated statistics.

        Returns:
            TimingStats with all calculated values
        """
        stats = TimingStats(
            group=self.group,
            variant=self.variant,
            sample_size=len(self.samples),
            iterations=self.iterations,
        )

        if self.samples:
            sorted_samples = sorted(self.samples)
            n = len(sorted_samples)

            stats.samples = list(self.samples)
            stats.mean = sum(sorted_samples) / n
            stats.median = statistics.median(sorted_samples)
            stats.min = sorted_samples[0]
            stats.max = sorted_samples[-1]
            stats.std_dev = statistics.stdev(sorted_samples) if n > 1 else 0.0
            stats.p95 = self._percentile(sorted_samples, 95)

        return stats

    def _percentile(self, sorted_data: List[float], percentile: int) -> float:
        """Calculate percentile value."""
        if not sorted_data:
            return 0.0

        n = len(sorted_data)
        index = int(n * percentile / 100)
        index = min(index, n - 1)

        return sorted_data[index]


class TimingHarness(Protocol):
    """Anything able to time a zero-argument callable for a treatment."""

    def run_timed(
        self,
        group_label: str,
        variant_label: str,
        thunk: Callable[[], Any],
    ) -> Optional[TimingStats]:
        ...


class SimpleHarness:
    """
    Default timing harness based on ``time.perf_counter``.

    The harness warms the subject up, calibrates how many calls fit into one
    sample so that all samples together take roughly ``measurement_time``,
    and then records ``sample_size`` samples.

    Example:
        harness = SimpleHarness(sample_size=10, measurement_time=0.5)
        stats = harness.run_timed("len:1024", "n:1", lambda: search(data))
    """

    def __init__(
        self,
        warmup_time: float = 0.5,
        measurement_time: float = 2.0,
        sample_size: int = 20,
        clock: Callable[[], float] = time.perf_counter,
    ):
        if sample_size < 1:
            raise ValueError(f"sample_size must be positive, got {sample_size}")
        self.warmup_time = warmup_time
        self.measurement_time = measurement_time
        self.sample_size = sample_size
        self.clock = clock

        # Every statistic produced, keyed by (group_label, variant_label)
        self.results: Dict[Tuple[str, str], TimingStats] = {}

    def run_timed(
        self,
        group_label: str,
        variant_label: str,
        thunk: Callable[[], Any],
    ) -> TimingStats:
        """
        Time ``thunk`` and return its statistics.

        Exceptions raised by ``thunk`` propagate to the caller.
        """
        per_call = self._warm_up(thunk)
        iterations = self._iterations_per_sample(per_call)
        logger.debug(
            f"{group_label}/{variant_label}: ~{per_call:.3e}s per call, "
            f"{self.sample_size} samples x {iterations} iterations"
        )

        collector = SampleCollector(group_label, variant_label)
        for _ in range(self.sample_size):
            start = self.clock()
            for _ in range(iterations):
                thunk()
            collector.record(self.clock() - start, iterations)

        stats = collector.calculate()
        self.results[(group_label, variant_label)] = stats
        return stats

    def _warm_up(self, thunk: Callable[[], Any]) -> float:
        """Call ``thunk`` for ``warmup_time`` seconds (at least once); return seconds per call."""
        calls = 0
        start = self.clock()
        elapsed = 0.0
        while calls == 0 or elapsed < self.warmup_time:
            thunk()
            calls += 1
            elapsed = self.clock() - start
        return elapsed / calls

    def _iterations_per_sample(self, per_call: float) -> int:
        budget = self.measurement_time / self.sample_size
        if per_call <= 0:
            return 1
        return max(1, int(budget / per_call))
