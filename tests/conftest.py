"""Pytest configuration, shared experiment doubles & custom summary hook.

Also ensures the project root is on sys.path so 'import factorbench' and
'import main' work without installation.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

_root = Path(__file__).resolve().parents[1]
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

from factorbench.benchmark.metrics import SampleCollector, TimingStats  # noqa: E402
from factorbench.benchmark.validation import Expected  # noqa: E402
from factorbench.experiments.base import Experiment  # noqa: E402
from factorbench.factors.base import FactorLevels  # noqa: E402


class RecordingHarness:
    """Harness double: calls the thunk ``repetitions`` times and returns canned timings."""

    def __init__(self, repetitions: int = 3, timings: Optional[Dict[str, float]] = None):
        self.repetitions = repetitions
        self.timings = timings or {}
        self.calls: List[Tuple[str, str]] = []

    def run_timed(self, group_label: str, variant_label: str, thunk: Callable[[], Any]) -> TimingStats:
        self.calls.append((group_label, variant_label))
        for _ in range(self.repetitions):
            thunk()
        per_call = self.timings.get(variant_label, 1e-6)
        collector = SampleCollector(group_label, variant_label)
        collector.record(per_call * self.repetitions, self.repetitions)
        return collector.calculate()


class SortExperiment(Experiment):
    """Sorts a reversed range; the ``noop`` method returns its input unchanged."""

    name = "sort"

    def __init__(self, oracle: bool = True, hook_error: Optional[str] = None):
        self.oracle = oracle
        self.hook_error = hook_error
        self.inputs_built: List[int] = []
        self.executions: List[str] = []
        self.hook_calls = 0

    def input(self, input_levels):
        width = input_levels["width"]
        self.inputs_built.append(width)
        return list(range(width, 0, -1))

    def execute(self, alg_levels, input):
        method = alg_levels["method"]
        self.executions.append(method)
        if method == "noop":
            return list(input)
        if method == "builtin":
            return sorted(input)
        output = list(input)
        output.sort()
        return output

    def expected_output(self, input_levels, input):
        if not self.oracle:
            return None
        return Expected(sorted(input))

    def validate_output(self, input_levels, input, output):
        self.hook_calls += 1
        if self.hook_error:
            raise AssertionError(self.hook_error)


def width(w: int) -> FactorLevels:
    return FactorLevels.from_mapping({"width": w}, short={"w": w})


def method(name: str) -> FactorLevels:
    return FactorLevels.from_mapping({"method": name}, short={"m": name[0]})


@pytest.fixture
def harness() -> RecordingHarness:
    return RecordingHarness()


@pytest.fixture
def experiment() -> SortExperiment:
    return SortExperiment()


@pytest.fixture
def levels():
    return [width(3), width(8)], [method("builtin"), method("inplace")]


def pytest_terminal_summary(
    terminalreporter: pytest.TerminalReporter,
    exitstatus: int,
    config: pytest.Config,
) -> None:  # noqa: D401
    """Append a compact custom summary at the end of test session."""
    stats = terminalreporter.stats
    passed = len(stats.get("passed", []))
    failed = len(stats.get("failed", []))
    errors = len(stats.get("error", []))
    skipped = len(stats.get("skipped", []))

    terminalreporter.section("Custom summary", sep="=")
    terminalreporter.write_line(
        f"Passed: {passed} | Failed: {failed} | Errors: {errors} | Skipped: {skipped}"
    )
    if failed:
        terminalreporter.write_line("Failed tests:")
        for rep in stats["failed"]:
            terminalreporter.write_line(f"  - {rep.nodeid}")
