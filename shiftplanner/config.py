"""Configuration module for constants, default tables, and settings."""

from typing import Dict, List, Optional
from pydantic_settings import BaseSettings


# Planning horizon
MIN_DAY = 1
MAX_DAY = 30
HORIZON_DAYS = MAX_DAY - MIN_DAY + 1


# Default shift values (net = cash in hand, gross = before deductions)
SHIFT_VALUES: Dict[str, Dict[str, float]] = {
    "large": {
        "net": 86.5,
        "gross": 94.5,
    },
    "medium": {
        "net": 67.5,
        "gross": 75.5,
    },
    "small": {
        "net": 56.0,
        "gross": 64.0,
    },
}

# Tier names used by the random generators and mutation, resolved against
# whatever shift table the host supplies
SHIFT_TIERS = ["small", "medium", "large"]


# Hard limits on host-supplied configuration (values outside are clamped)
MIN_POPULATION_SIZE = 10
MIN_GENERATIONS = 1


# Fitness penalty defaults
# Balance
FINAL_BALANCE_PENALTY = 100.0
OVERSHOOT_MULTIPLIER = 2.0
BALANCE_TOLERANCE = 5.0
VIOLATION_PENALTY = 5000.0
SHORTFALL_PENALTY = 100.0
CRITICAL_DAY_BUFFER = 200.0
NEAR_MINIMUM_PENALTY = 1.0
FIXED_BALANCE_PENALTY = 1000.0
# Work day distribution
WORK_DAY_DIFF_PENALTY = 200.0
CONSECUTIVE_DAY_PENALTY = 500.0
MAX_CONSECUTIVE_DAYS = 5
SMALL_GAP_PENALTY = 150.0
MIN_GAP_DAYS = 2
GAP_VARIANCE_WEIGHT = 150.0
# Clustering
CLUSTERING_WINDOW = 5
MAX_WORK_DAYS_IN_WINDOW = 3
CLUSTERING_PENALTY = 300.0


# Schedule checks and edits
BALANCE_MISMATCH_TOLERANCE = 0.01  # per-day balance chain check
FINAL_BALANCE_TARGET_RATIO = 0.1  # final balance may be off target by 10%
EARNINGS_MATCH_TOLERANCE = 1.0  # edited earnings -> shift combination


# Application settings
class Settings(BaseSettings):
    """Application configuration with environment variable support."""

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "optimizer.log"
    HISTORY_FILE: Optional[str] = None  # JSON lines of generation statistics

    # Default tables used when a start request omits them
    EXPENSES_CSV: Optional[str] = None
    DEPOSITS_CSV: Optional[str] = None
    SHIFT_TYPES_CSV: Optional[str] = None

    # Defaults offered to hosts that do not send GA sizing
    DEFAULT_POPULATION_SIZE: int = 200
    DEFAULT_GENERATIONS: int = 500
    GA_PRESET: str = "balanced"  # fast, balanced or thorough

    # HTTP
    CORS_ORIGINS: List[str] = ["*"]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }
