"""
Summary aggregation and report generation for experiment results.
Supports Markdown, JSON, CSV and console output.
"""

import csv
import json
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from rich.console import Console
from rich.table import Table

from ..config import Config
from .runner import ExperimentResult, ResultRecord
from .utils import format_duration, format_percent, get_machine_info, get_report_subdir_name

logger = logging.getLogger(__name__)


def relative_change(old: float, new: float) -> float:
    """
    Percentage change from ``old`` to ``new``.

    Example:
        relative_change(2.0, 3.0) -> 50.0
    """
    if old == 0:
        return 0.0 if new == 0 else float("inf")
    return (new - old) / old * 100


@dataclass
class InputSummary:
    """All records of one input-level, in execution order."""
    input_names: Tuple[str, ...]
    input_levels: Tuple[str, ...]
    records: List[ResultRecord] = field(default_factory=list)

    @property
    def label(self) -> str:
        return "_".join(f"{n}:{v}" for n, v in zip(self.input_names, self.input_levels))

    @property
    def best(self) -> Optional[ResultRecord]:
        """
        Record with the lowest central estimate.

        Failed records are skipped; on ties the first executed record wins.
        """
        best = None
        for record in self.records:
            if record.failed:
                continue
            if best is None or record.estimate < best.estimate:
                best = record
        return best

    def is_best(self, record: ResultRecord) -> bool:
        return record is self.best

    def relative_to_best(self, record: ResultRecord) -> Optional[float]:
        """How much slower than the best record, as a percentage."""
        best = self.best
        if best is None or record.failed:
            return None
        return relative_change(best.estimate, record.estimate)


class SummaryAggregator:
    """
    Groups result records by input-level.

    Usage:
        aggregator = SummaryAggregator(result.records)
        for summary in aggregator.groups:
            print(summary.label, summary.best.key)
    """

    def __init__(self, records: Iterable[ResultRecord] = ()):
        self._groups: Dict[Tuple[str, ...], InputSummary] = {}
        for record in records:
            self.add(record)

    def add(self, record: ResultRecord) -> None:
        """Add a record to the group of its input-level."""
        group = self._groups.get(record.input_levels)
        if group is None:
            group = InputSummary(
                input_names=record.input_names,
                input_levels=record.input_levels,
            )
            self._groups[record.input_levels] = group
        group.records.append(record)

    @property
    def groups(self) -> List[InputSummary]:
        """Input summaries in the order their input-levels were first seen."""
        return list(self._groups.values())

    def __len__(self) -> int:
        return len(self._groups)


def load_baseline(path) -> ExperimentResult:
    """
    Load a previous run from a JSON file written by ``Reporter.generate_json``.

    Args:
        path: Path to the JSON results file

    Returns:
        ExperimentResult of the previous run
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return ExperimentResult.from_dict(data["result"] if "result" in data else data)


def _csv_percent(value: float) -> str:
    return f"{value:.2f}" if math.isfinite(value) else ""


class Reporter:
    """
    Generate experiment reports in various formats.

    Supports:
        - Markdown reports, one table per input-level
        - JSON data export (also usable as a baseline for later runs)
        - CSV summary table
        - Draft prompt for analyzing the CSV summary
        - Console output

    Reports are organized by date and host:
        reports/YYYYMMDD_hostname/

    Example:
        reporter = Reporter()
        reporter.generate_markdown(result)
        reporter.generate_json(result)
    """

    def __init__(self, output_dir: Optional[Path] = None):
        """
        Initialize reporter.

        Args:
            output_dir: Base directory for output files (default: Config.REPORT_DIR)
        """
        base_dir = Path(output_dir) if output_dir else Config.REPORT_DIR

        subdir_name = get_report_subdir_name()
        self.output_dir = base_dir / subdir_name
        self.output_dir.mkdir(parents=True, exist_ok=True)

        # Cache machine info for this reporter instance
        self._machine_info = get_machine_info()

    def compare_with_baseline(
        self,
        result: ExperimentResult,
        baseline: ExperimentResult,
    ) -> Dict[str, float]:
        """
        Relative change of each treatment against a previous run.

        Only treatments that succeeded in both runs are compared.

        Returns:
            Mapping of treatment key to percentage change of the central estimate
        """
        previous = {r.key: r for r in baseline.records if not r.failed}
        changes = {}
        for record in result.records:
            old = previous.get(record.key)
            if old is None or record.failed:
                continue
            changes[record.key] = relative_change(old.estimate, record.estimate)
        return changes

    def generate_markdown(
        self,
        result: ExperimentResult,
        filename: Optional[str] = None,
        baseline_changes: Optional[Dict[str, float]] = None,
    ) -> str:
        """
        Generate a Markdown summary report.

        Args:
            result: Experiment result to report
            filename: Output filename (optional)
            baseline_changes: Per-treatment change against a previous run (optional)

        Returns:
            Path to generated file
        """
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        file_timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

        if not filename:
            filename = f"summary_{result.name}_{file_timestamp}.md"

        output_path = self.output_dir / filename
        machine_info = self._machine_info

        lines = []
        lines.append(f"# {result.name} benchmark summary")
        lines.append(f"\n**Experiment:** {result.experiment or result.name}")
        lines.append(f"**Generated:** {timestamp}")
        lines.append(
            f"**Grid:** {result.num_inputs} data points x {result.num_algs} variants "
            f"=> {result.num_treatments} treatments"
        )
        lines.append(f"\n---\n")

        lines.append("## Environment\n")
        lines.append("| Item | Value |")
        lines.append("|------|-------|")
        lines.append(f"| Hostname | {machine_info['hostname']} |")
        lines.append(f"| Platform | {machine_info['platform']} |")
        lines.append(f"| Python | {machine_info['python']} |")
        lines.append(f"| Processor | {machine_info['processor']} |")
        lines.append(f"| CPUs | {machine_info['cpu_count']} |")
        lines.append(f"\n---\n")

        aggregator = SummaryAggregator(result.records)
        for i, summary in enumerate(aggregator.groups, start=1):
            lines.append(self._format_input_section(
                f"[{i}/{len(aggregator)}] {summary.label}",
                summary,
                result.alg_names,
                baseline_changes,
            ))

        content = "\n".join(lines)

        with open(output_path, "w", encoding="utf-8") as f:
            f.write(content)

        logger.info(f"Markdown summary written: {output_path}")
        return str(output_path)

    def _format_input_section(
        self,
        title: str,
        summary: InputSummary,
        alg_names: List[str],
        baseline_changes: Optional[Dict[str, float]] = None,
    ) -> str:
        """Format the table of one input-level for Markdown."""
        lines = []
        lines.append(f"\n## {title}\n")

        columns = list(summary.input_names) + list(alg_names)
        columns += ["mean", "median", "min", "max", "vs best"]
        if baseline_changes is not None:
            columns.append("vs baseline")

        lines.append("| " + " | ".join(columns) + " |")
        lines.append("|" + "|".join("------" for _ in columns) + "|")

        best = summary.best
        for record in summary.records:
            cells = list(record.input_levels) + list(record.alg_levels)
            if record.failed:
                cells += ["failed", "-", "-", "-", "-"]
            else:
                stats = record.stats
                mean = format_duration(stats.mean)
                if record is best:
                    mean = f"**{mean}**"
                cells += [
                    mean,
                    format_duration(stats.median),
                    format_duration(stats.min),
                    format_duration(stats.max),
                    "**best**" if record is best else format_percent(summary.relative_to_best(record)),
                ]
            if baseline_changes is not None:
                change = baseline_changes.get(record.key)
                cells.append(format_percent(change) if change is not None else "-")
            lines.append("| " + " | ".join(cells) + " |")

        if best is not None:
            lines.append(f"\nFastest: `{best.key}` ({format_duration(best.estimate)})")

        return "\n".join(lines)

    def generate_json(
        self,
        result: ExperimentResult,
        filename: Optional[str] = None,
    ) -> str:
        """
        Generate JSON results.

        Args:
            result: Experiment result to export
            filename: Output filename (optional)

        Returns:
            Path to generated file
        """
        file_timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

        if not filename:
            filename = f"results_{result.name}_{file_timestamp}.json"

        output_path = self.output_dir / filename

        data = {
            "generated_at": datetime.now().isoformat(),
            "test_environment": dict(self._machine_info),
            "result": result.to_dict(),
        }

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

        logger.info(f"JSON results written: {output_path}")
        return str(output_path)

    def generate_csv(
        self,
        result: ExperimentResult,
        filename: Optional[str] = None,
    ) -> str:
        """
        Generate a flat CSV summary, one row per treatment.

        Args:
            result: Experiment result to export
            filename: Output filename (optional)

        Returns:
            Path to generated file
        """
        if not filename:
            filename = f"summary_{result.name}.csv"

        output_path = self.output_dir / filename

        headers = list(result.input_names) + list(result.alg_names) + [
            "key",
            "short_key",
            "status",
            "mean_ns",
            "median_ns",
            "min_ns",
            "max_ns",
            "std_dev_ns",
            "vs_best_pct",
            "best",
        ]

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(headers)

            for summary in SummaryAggregator(result.records).groups:
                best = summary.best
                for record in summary.records:
                    row = list(record.input_levels) + list(record.alg_levels)
                    row += [record.key, record.short_key, record.status]
                    if record.failed:
                        row += ["", "", "", "", "", "", "false"]
                    else:
                        stats = record.stats
                        row += [
                            f"{stats.mean * 1e9:.3f}",
                            f"{stats.median * 1e9:.3f}",
                            f"{stats.min * 1e9:.3f}",
                            f"{stats.max * 1e9:.3f}",
                            f"{stats.std_dev * 1e9:.3f}",
                            _csv_percent(summary.relative_to_best(record)),
                            "true" if record is best else "false",
                        ]
                    writer.writerow(row)

        logger.info(f"CSV summary written: {output_path}")
        return str(output_path)

    def generate_ai_prompt(
        self,
        result: ExperimentResult,
        csv_path: str,
        filename: Optional[str] = None,
    ) -> str:
        """
        Generate a draft prompt asking for an analysis of the CSV summary.

        Args:
            result: Experiment result the CSV was generated from
            csv_path: Path to the CSV summary
            filename: Output filename (optional)

        Returns:
            Path to generated file
        """
        if not filename:
            filename = f"prompt_{result.name}.md"

        output_path = self.output_dir / filename

        lines = []
        lines.append(f"# Factorial analysis of `{result.name}`\n")
        lines.append(
            "The attached CSV file contains the results of a full-factorial "
            "micro-benchmark experiment."
        )
        lines.append(f"\n- Summary file: `{csv_path}`")
        lines.append(f"- Input factors: {', '.join(result.input_names) or '-'}")
        lines.append(f"- Algorithm factors: {', '.join(result.alg_names) or '-'}")
        lines.append(
            f"- Treatments: {result.num_inputs} data points x {result.num_algs} variants "
            f"= {result.num_treatments}"
        )
        lines.append(
            "- Timing columns are nanoseconds per call; `vs_best_pct` is the slowdown "
            "relative to the fastest variant of the same input."
        )
        lines.append("\nPlease analyze the results:\n")
        lines.append("1. Which algorithm factor levels perform best for each input, and why?")
        lines.append("2. How does each algorithm factor influence solution time across inputs?")
        lines.append("3. Are there interactions between input factors and algorithm factors?")
        lines.append("4. Which variant would you recommend as the default, and for which inputs would you switch?")

        with open(output_path, "w", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")

        return str(output_path)

    def print_summary(
        self,
        result: ExperimentResult,
        baseline_changes: Optional[Dict[str, float]] = None,
        console: Optional[Console] = None,
    ) -> None:
        """Print one table per input-level to the console."""
        console = console or Console()
        console.print(f"\n[bold]📊 {result.name}: {result.num_treatments} treatments[/bold]")

        aggregator = SummaryAggregator(result.records)
        for i, summary in enumerate(aggregator.groups, start=1):
            table = Table(title=f"[{i}/{len(aggregator)}] {summary.label}")
            for name in result.alg_names:
                table.add_column(name, style="cyan")
            table.add_column("Mean", justify="right")
            table.add_column("Median", justify="right")
            table.add_column("vs Best", justify="right")
            if baseline_changes is not None:
                table.add_column("vs Baseline", justify="right")

            best = summary.best
            for record in summary.records:
                cells = list(record.alg_levels)
                if record.failed:
                    cells += ["[red]failed[/red]", "-", "-"]
                elif record is best:
                    cells += [
                        f"[green]{format_duration(record.stats.mean)}[/green]",
                        format_duration(record.stats.median),
                        "[green]best[/green]",
                    ]
                else:
                    cells += [
                        format_duration(record.stats.mean),
                        format_duration(record.stats.median),
                        format_percent(summary.relative_to_best(record)),
                    ]
                if baseline_changes is not None:
                    change = baseline_changes.get(record.key)
                    cells.append(format_percent(change) if change is not None else "-")
                table.add_row(*cells)

            console.print(table)
