"""
Configuration for Team Capacity Planner

Settings come from config/config.yaml, overridden by environment variables.
"""

import os
from typing import Optional

import yaml

from .errors import ValidationError


DEFAULT_CONFIG_PATH = "config/config.yaml"


class Config:
    """Load configuration from config.yaml and environment."""

    DEFAULTS = {
        "capacity": {
            "days_per_week": 5,
            "standard_day_hours": 8,
        },
        "availability": {
            "healthy_threshold": 60,
            "at_risk_threshold": 20,
        },
        "leave": {
            "conflict_min_absent": 2,
        },
    }

    def __init__(self, config_path: Optional[str] = None, data: Optional[dict] = None):
        self.config = {section: dict(values) for section, values in self.DEFAULTS.items()}

        path = config_path or os.getenv("CAPACITY_CONFIG", DEFAULT_CONFIG_PATH)
        if data is None and os.path.exists(path):
            with open(path) as f:
                data = yaml.safe_load(f) or {}

        for section, values in (data or {}).items():
            self.config.setdefault(section, {}).update(values or {})

        # Override with environment variables
        self._load_env()
        self._validate()

    def _load_env(self):
        """Load configuration from environment variables."""
        env_mapping = {
            "CAPACITY_DAYS_PER_WEEK": ("capacity", "days_per_week"),
            "CAPACITY_STANDARD_DAY_HOURS": ("capacity", "standard_day_hours"),
            "CAPACITY_HEALTHY_THRESHOLD": ("availability", "healthy_threshold"),
            "CAPACITY_AT_RISK_THRESHOLD": ("availability", "at_risk_threshold"),
            "CAPACITY_CONFLICT_MIN_ABSENT": ("leave", "conflict_min_absent"),
        }

        for env_var, (section, key) in env_mapping.items():
            value = os.getenv(env_var)
            if value:
                try:
                    self.config.setdefault(section, {})[key] = float(value)
                except ValueError:
                    raise ValidationError(
                        f"{env_var} must be a number, got {value!r}",
                        field=key
                    ) from None

    def _validate(self):
        """Hour and day divisors must be positive numbers."""
        for section, key in (("capacity", "days_per_week"), ("capacity", "standard_day_hours")):
            value = self.get(section, key)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ValidationError(
                    f"{section}.{key} must be a positive number, got {value!r}",
                    field=key
                )

    def get(self, section: str, key: str, default=None):
        """Get configuration value."""
        return self.config.get(section, {}).get(key, default)

    @property
    def days_per_week(self) -> float:
        return self.get("capacity", "days_per_week")

    @property
    def standard_day_hours(self) -> float:
        return self.get("capacity", "standard_day_hours")

    @property
    def healthy_threshold(self) -> float:
        return self.get("availability", "healthy_threshold")

    @property
    def at_risk_threshold(self) -> float:
        return self.get("availability", "at_risk_threshold")

    @property
    def conflict_min_absent(self) -> int:
        return int(self.get("leave", "conflict_min_absent"))
