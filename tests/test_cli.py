import pytest
from click.testing import CliRunner

import main
from conftest import SortExperiment, method, width
from factorbench.config import Config
from factorbench.experiments import EXPERIMENTS


class BrokenSort(SortExperiment):
    name = "broken_sort"
    display_name = "Broken Sort"

    def default_levels(self):
        return [width(4)], [method("builtin"), method("noop")]


@pytest.fixture
def runner():
    return CliRunner()


def test_list_experiments(runner):
    result = runner.invoke(main.cli, ["list-experiments"])
    assert result.exit_code == 0
    assert "find_element" in result.output
    assert "two_sum" in result.output


def test_keys(runner):
    result = runner.invoke(main.cli, ["keys", "find_element"])
    assert result.exit_code == 0
    assert "All short keys fit" in result.output


def test_keys_over_limit_fails(runner):
    result = runner.invoke(main.cli, ["keys", "find_element", "--max-key-length", "10"])
    assert result.exit_code == 1
    assert "exceed 10 characters" in result.output


def test_run_writes_reports(runner, tmp_path):
    result = runner.invoke(
        main.cli,
        ["run", "two_sum", "-s", "1", "-w", "0", "-m", "0", "-o", str(tmp_path)],
    )
    assert result.exit_code == 0, result.output

    written = {p.suffix for p in tmp_path.rglob("*") if p.is_file()}
    assert written == {".md", ".json", ".csv"}
    assert "len:32" in result.output


def test_run_with_baseline(runner, tmp_path):
    args = ["run", "two_sum", "-s", "1", "-w", "0", "-m", "0", "-f", "json", "-o", str(tmp_path)]
    assert runner.invoke(main.cli, args).exit_code == 0
    baseline = next(tmp_path.rglob("results_two_sum_*.json"))

    result = runner.invoke(main.cli, args + ["--baseline", str(baseline)])
    assert result.exit_code == 0, result.output
    assert "Compared 9 treatments with baseline" in result.output


def test_run_unknown_experiment(runner):
    result = runner.invoke(main.cli, ["run", "bubble_sort"])
    assert result.exit_code == 1
    assert "Unknown experiment" in result.output


def test_run_stops_on_validation_failure(runner, tmp_path, monkeypatch):
    monkeypatch.setitem(EXPERIMENTS, "broken_sort", BrokenSort)

    result = runner.invoke(
        main.cli,
        ["run", "broken_sort", "-s", "1", "-w", "0", "-m", "0", "-o", str(tmp_path)],
    )
    assert result.exit_code == 1
    assert "Validation failed for run width:4/method:noop" in result.output
    assert not any(p.is_file() for p in tmp_path.rglob("*"))


def test_init_creates_only_report_dir(runner, tmp_path, monkeypatch):
    monkeypatch.setattr(Config, "REPORT_DIR", tmp_path / "reports")

    result = runner.invoke(main.cli, ["init"])

    assert result.exit_code == 0, result.output
    assert [p.name for p in tmp_path.iterdir()] == ["reports"]
    assert not hasattr(Config, "OUTPUT_DIR")
