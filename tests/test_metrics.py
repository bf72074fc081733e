import pytest

from factorbench.benchmark.metrics import SampleCollector, SimpleHarness, TimingStats


class StepClock:
    """Advances by a fixed step on every reading."""

    def __init__(self, step: float = 1e-3):
        self.step = step
        self.now = 0.0

    def __call__(self) -> float:
        self.now += self.step
        return self.now


def test_collector_statistics():
    collector = SampleCollector("len:8", "n:1")
    for elapsed in (4.0, 1.0, 3.0, 2.0):
        collector.record(elapsed)

    stats = collector.calculate()
    assert stats.sample_size == 4
    assert stats.iterations == 4
    assert stats.mean == pytest.approx(2.5)
    assert stats.median == pytest.approx(2.5)
    assert stats.min == 1.0
    assert stats.max == 4.0
    assert stats.p95 == 4.0
    assert stats.std_dev == pytest.approx(1.2909944)
    assert stats.samples == [4.0, 1.0, 3.0, 2.0]


def test_collector_divides_by_iterations():
    collector = SampleCollector("g", "v")
    collector.record(1.0, iterations=4)
    stats = collector.calculate()
    assert stats.mean == pytest.approx(0.25)
    assert stats.iterations == 4
    assert stats.std_dev == 0.0


def test_collector_rejects_zero_iterations():
    with pytest.raises(ValueError):
        SampleCollector("g", "v").record(1.0, iterations=0)


def test_empty_collector():
    stats = SampleCollector("g", "v").calculate()
    assert stats.sample_size == 0
    assert stats.mean == 0.0


def test_stats_dict_round_trip():
    stats = TimingStats(group="g", variant="v", sample_size=2, iterations=6, samples=[1.0, 2.0], mean=1.5)
    assert TimingStats.from_dict(stats.to_dict()) == stats
    assert stats.estimate == 1.5


def test_harness_calibrates_iterations():
    calls = []
    harness = SimpleHarness(
        warmup_time=0.0,
        measurement_time=0.0105,
        sample_size=5,
        clock=StepClock(1e-3),
    )

    stats = harness.run_timed("len:8", "n:1", lambda: calls.append(1))

    # one warm-up call measured at 1ms, then 5 samples of 2 calls each
    assert len(calls) == 1 + 5 * 2
    assert stats.sample_size == 5
    assert stats.iterations == 10
    assert stats.mean == pytest.approx(5e-4)
    assert harness.results[("len:8", "n:1")] is stats


def test_harness_propagates_thunk_errors():
    harness = SimpleHarness(warmup_time=0.0, measurement_time=0.0, sample_size=1)

    def boom():
        raise ZeroDivisionError("boom")

    with pytest.raises(ZeroDivisionError):
        harness.run_timed("g", "v", boom)


def test_harness_requires_samples():
    with pytest.raises(ValueError):
        SimpleHarness(sample_size=0)
