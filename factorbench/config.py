"""
Configuration management for factorbench.
Loads settings from environment variables and .env file.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file from project root
PROJECT_ROOT = Path(__file__).parent.parent
load_dotenv(PROJECT_ROOT / ".env")


class Config:
    """Central configuration management."""

    # ==========================================================================
    # Key Settings
    # ==========================================================================
    # Upper bound for short treatment keys; the harness uses them as path names.
    MAX_KEY_LENGTH: int = int(os.getenv("FACTORBENCH_MAX_KEY_LENGTH", "64"))

    # ==========================================================================
    # Timing Harness Settings
    # ==========================================================================
    WARMUP_TIME: float = float(os.getenv("FACTORBENCH_WARMUP_TIME", "0.5"))
    MEASUREMENT_TIME: float = float(os.getenv("FACTORBENCH_MEASUREMENT_TIME", "2.0"))
    SAMPLE_SIZE: int = int(os.getenv("FACTORBENCH_SAMPLE_SIZE", "20"))

    # Report directory
    REPORT_DIR: Path = PROJECT_ROOT / os.getenv("REPORT_DIR", "reports")

    @classmethod
    def harness_settings(cls) -> dict:
        """Get timing harness settings as keyword arguments."""
        return {
            "warmup_time": cls.WARMUP_TIME,
            "measurement_time": cls.MEASUREMENT_TIME,
            "sample_size": cls.SAMPLE_SIZE,
        }

    @classmethod
    def ensure_directories(cls):
        """Create the report directory if it doesn't exist."""
        cls.REPORT_DIR.mkdir(parents=True, exist_ok=True)
