import csv
import json
import math
from pathlib import Path

import pytest
from rich.console import Console

from factorbench.benchmark.metrics import TimingStats
from factorbench.benchmark.reporter import (
    Reporter,
    SummaryAggregator,
    load_baseline,
    relative_change,
)
from factorbench.benchmark.runner import ExperimentResult, ResultRecord


def record(size, store, mean, status="ok"):
    stats = None
    if status == "ok":
        stats = TimingStats(
            group=f"len:{size}",
            variant=f"s:{store[0]}",
            sample_size=1,
            iterations=1,
            samples=[mean],
            mean=mean,
            median=mean,
            min=mean,
            max=mean,
        )
    return ResultRecord(
        key=f"len:{size}/store:{store}",
        short_key=f"l:{size}/s:{store[0]}",
        input_levels=(str(size),),
        alg_levels=(store,),
        stats=stats,
        status=status,
        input_names=("len",),
        alg_names=("store",),
    )


@pytest.fixture
def result():
    return ExperimentResult(
        name="two_sum",
        experiment="two_sum",
        records=[
            record(32, "Linear", 3e-6),
            record(32, "Sorted", 2e-6),
            record(32, "Dict", 1e-6),
            record(256, "Linear", 4e-5, status="failed"),
            record(256, "Sorted", 8e-6),
            record(256, "Dict", 8e-6),
        ],
        input_names=["len"],
        alg_names=["store"],
        num_inputs=2,
        num_algs=3,
    )


@pytest.fixture
def reporter(tmp_path):
    return Reporter(tmp_path)


def test_relative_change():
    assert relative_change(2.0, 3.0) == pytest.approx(50.0)
    assert relative_change(4.0, 3.0) == pytest.approx(-25.0)
    assert relative_change(0.0, 0.0) == 0.0
    assert math.isinf(relative_change(0.0, 1.0))


def test_groups_follow_first_appearance(result):
    groups = SummaryAggregator(result.records).groups
    assert [g.label for g in groups] == ["len:32", "len:256"]
    assert [len(g.records) for g in groups] == [3, 3]


def test_best_is_lowest_estimate(result):
    small, _ = SummaryAggregator(result.records).groups
    assert small.best.key == "len:32/store:Dict"
    assert small.relative_to_best(small.records[0]) == pytest.approx(200.0)


def test_tie_goes_to_first_declared_and_failed_is_skipped(result):
    _, large = SummaryAggregator(result.records).groups
    assert large.best.key == "len:256/store:Sorted"
    assert not large.is_best(large.records[2])
    assert large.relative_to_best(large.records[0]) is None


def test_group_with_only_failures_has_no_best():
    aggregator = SummaryAggregator([record(8, "Dict", 0.0, status="failed")])
    assert aggregator.groups[0].best is None


def test_markdown_report(reporter, result):
    path = Path(reporter.generate_markdown(result, filename="summary.md"))
    content = path.read_text(encoding="utf-8")

    assert path.parent == reporter.output_dir
    assert "# two_sum benchmark summary" in content
    assert "## [1/2] len:32" in content
    assert "| len | store | mean | median | min | max | vs best |" in content
    assert "| 32 | Dict | **1.00 µs** | 1.00 µs | 1.00 µs | 1.00 µs | **best** |" in content
    assert "| 32 | Linear | 3.00 µs | 3.00 µs | 3.00 µs | 3.00 µs | +200.0% |" in content
    assert "| 256 | Linear | failed | - | - | - | - |" in content
    assert "Fastest: `len:256/store:Sorted` (8.00 µs)" in content
    assert "vs baseline" not in content


def test_json_report_loads_as_baseline(reporter, result):
    path = reporter.generate_json(result, filename="results.json")
    data = json.loads(Path(path).read_text(encoding="utf-8"))

    assert set(data) == {"generated_at", "test_environment", "result"}
    assert data["result"]["records"][3]["status"] == "failed"

    baseline = load_baseline(path)
    assert baseline.records == result.records


def test_compare_with_baseline(reporter, result):
    faster = ExperimentResult(
        name="two_sum",
        records=[
            record(32, "Linear", 1.5e-6),
            record(32, "Dict", 1e-6),
            record(256, "Linear", 1e-5),
            record(512, "Dict", 1e-6),
        ],
        input_names=["len"],
        alg_names=["store"],
    )
    changes = reporter.compare_with_baseline(faster, result)

    assert changes == {
        "len:32/store:Linear": pytest.approx(-50.0),
        "len:32/store:Dict": pytest.approx(0.0),
    }

    content = Path(reporter.generate_markdown(faster, filename="b.md", baseline_changes=changes)).read_text(
        encoding="utf-8"
    )
    assert "| vs best | vs baseline |" in content
    assert "-50.0%" in content


def test_csv_summary(reporter, result):
    path = reporter.generate_csv(result)
    assert Path(path).name == "summary_two_sum.csv"

    with open(path, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))

    assert len(rows) == 6
    assert rows[0]["len"] == "32"
    assert rows[0]["store"] == "Linear"
    assert rows[0]["mean_ns"] == "3000.000"
    assert rows[0]["vs_best_pct"] == "200.00"
    assert [r["best"] for r in rows] == ["false", "false", "true", "false", "true", "false"]
    assert rows[3]["status"] == "failed"
    assert rows[3]["mean_ns"] == ""


def test_analysis_prompt(reporter, result):
    csv_path = reporter.generate_csv(result)
    prompt = Path(reporter.generate_ai_prompt(result, csv_path)).read_text(encoding="utf-8")

    assert csv_path in prompt
    assert "Input factors: len" in prompt
    assert "Algorithm factors: store" in prompt


def test_print_summary(reporter, result):
    console = Console(record=True, width=120)
    reporter.print_summary(result, console=console)
    text = console.export_text()

    assert "[1/2] len:32" in text
    assert "best" in text
    assert "failed" in text


def test_zero_best_estimate_renders_dash(reporter):
    zero = ExperimentResult(
        name="zero",
        records=[record(8, "Dict", 0.0), record(8, "Linear", 1e-6)],
        input_names=["len"],
        alg_names=["store"],
        num_inputs=1,
        num_algs=2,
    )

    content = Path(reporter.generate_markdown(zero, filename="zero.md")).read_text(encoding="utf-8")
    assert "| 8 | Linear | 1.00 µs | 1.00 µs | 1.00 µs | 1.00 µs | - |" in content
    assert "inf%" not in content

    with open(reporter.generate_csv(zero), newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert [r["vs_best_pct"] for r in rows] == ["0.00", ""]

    console = Console(record=True, width=120)
    reporter.print_summary(zero, console=console)
    assert "inf%" not in console.export_text()
