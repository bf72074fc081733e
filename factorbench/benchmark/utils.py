"""
Utility functions for benchmark module.
Separated to avoid circular imports.
"""

import math
import os
import platform
import socket
from datetime import datetime
from typing import Dict


def get_machine_info() -> Dict[str, str]:
    """
    Get machine information for report context.

    Returns:
        Dictionary with machine details including:
        - hostname: Machine hostname
        - platform: OS platform info
        - python: Python implementation and version
        - processor: Processor description
        - cpu_count: Number of logical CPUs
    """
    return {
        "hostname": socket.gethostname(),
        "platform": f"{platform.system()} {platform.release()}",
        "python": f"{platform.python_implementation()} {platform.python_version()}",
        "processor": platform.processor() or platform.machine() or "unknown",
        "cpu_count": str(os.cpu_count() or "unknown"),
    }


def get_report_subdir_name() -> str:
    """
    Generate report subdirectory name based on date and hostname.

    Format: YYYYMMDD_hostname
    Example: 20251224_bench-01

    Returns:
        Subdirectory name string
    """
    date_str = datetime.now().strftime("%Y%m%d")
    hostname = socket.gethostname().replace("_", "-").replace(" ", "-")
    return f"{date_str}_{hostname}"


def format_duration(seconds: float) -> str:
    """
    Format a duration with a unit suited to its magnitude.

    Example:
        format_duration(2.5e-7) -> "250.00 ns"
        format_duration(0.0125) -> "12.50 ms"
    """
    if seconds < 1e-6:
        return f"{seconds * 1e9:.2f} ns"
    if seconds < 1e-3:
        return f"{seconds * 1e6:.2f} µs"
    if seconds < 1:
        return f"{seconds * 1e3:.2f} ms"
    return f"{seconds:.2f} s"


def format_percent(value: float) -> str:
    """
    Format a relative change with an explicit sign, e.g. ``+12.5%``.

    Changes against a zero estimate are infinite and render as ``-``.
    """
    if not math.isfinite(value):
        return "-"
    return f"{value:+.1f}%"
