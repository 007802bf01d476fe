"""
Configuration management for the recommendation service.
Handles loading ranking defaults, scoring weights and logging settings from a
JSON file with environment variable overrides.
"""

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from .recommendations.signals import ScoringWeights
from .recommendations.types import (
    DEFAULT_DIVERSITY_FACTOR,
    DEFAULT_MAX_RESULTS,
    RecommendationOptions,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "recommendation_config.json"
WEIGHT_ENV_PREFIX = "RECO_WEIGHT_"


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    debug: bool


class ConfigManager:
    """Manages recommendation configuration loading and access."""

    def __init__(self, config_file: str = DEFAULT_CONFIG_FILE):
        self.config_file = Path(config_file)
        self._config: Optional[Dict[str, Any]] = None
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file and environment variables."""
        self._config = self._get_default_config()

        if self.config_file.exists():
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    file_config = json.load(f)
                if isinstance(file_config, dict):
                    self._merge_config(file_config)
                else:
                    logger.warning("Ignoring %s: top level is not an object", self.config_file)
            except (json.JSONDecodeError, OSError) as e:
                logger.warning("Ignoring unreadable config %s: %s", self.config_file, e)

        self._override_with_env()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "ranking": {
                "include_completed": False,
                "max_results": DEFAULT_MAX_RESULTS,
                "min_confidence": 0.0,
                "time_constraint": None,
                "diversity_factor": DEFAULT_DIVERSITY_FACTOR,
                "focus_on_prerequisites": False,
            },
            "weights": {f.name: f.default for f in fields(ScoringWeights)},
            "logging": {
                "debug": False,
            },
        }

    def _merge_config(self, file_config: Dict[str, Any]) -> None:
        """Merge file configuration with current config."""
        for section, values in file_config.items():
            if section in self._config and isinstance(values, dict):
                for key, value in values.items():
                    if key not in self._config[section]:
                        logger.warning("Unknown config key %s.%s ignored", section, key)
                        continue
                    self._config[section][key] = value
            else:
                logger.warning("Unknown config section %r ignored", section)

    def _override_with_env(self) -> None:
        """Override configuration with environment variables."""
        ranking = self._config["ranking"]

        if os.getenv("RECO_MAX_RESULTS"):
            ranking["max_results"] = _parse_number(os.getenv("RECO_MAX_RESULTS"), ranking["max_results"], int)

        if os.getenv("RECO_MIN_CONFIDENCE"):
            ranking["min_confidence"] = _parse_number(os.getenv("RECO_MIN_CONFIDENCE"), ranking["min_confidence"])

        if os.getenv("RECO_DIVERSITY_FACTOR"):
            ranking["diversity_factor"] = _parse_number(
                os.getenv("RECO_DIVERSITY_FACTOR"), ranking["diversity_factor"]
            )

        if os.getenv("RECO_INCLUDE_COMPLETED"):
            ranking["include_completed"] = os.getenv("RECO_INCLUDE_COMPLETED").lower() == "true"

        if os.getenv("RECO_DEBUG"):
            self._config["logging"]["debug"] = os.getenv("RECO_DEBUG").lower() == "true"

        weights = self._config["weights"]
        for name in weights:
            raw = os.getenv(f"{WEIGHT_ENV_PREFIX}{name.upper()}")
            if raw:
                weights[name] = _parse_number(raw, weights[name])

    def get_ranking_defaults(self) -> RecommendationOptions:
        """Get default ranking options (out-of-range values are clamped)."""
        return RecommendationOptions(**self._config["ranking"])

    def get_scoring_weights(self) -> ScoringWeights:
        """Get scoring weights."""
        defaults = ScoringWeights()
        return ScoringWeights(**{
            name: _parse_number(value, getattr(defaults, name))
            for name, value in self._config["weights"].items()
        })

    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration."""
        return LoggingConfig(debug=bool(self._config["logging"]["debug"]))

    def get_config(self) -> Dict[str, Any]:
        """Get raw configuration dictionary."""
        return json.loads(json.dumps(self._config))

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    def save_config(self) -> None:
        """Save current configuration to file."""
        with open(self.config_file, "w", encoding="utf-8") as f:
            json.dump(self._config, f, indent=2, ensure_ascii=False)


def _parse_number(raw: str, fallback, cast=float):
    try:
        return cast(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid numeric override %r, keeping %r", raw, fallback)
        return fallback


def get_ranking_defaults(config_file: str = DEFAULT_CONFIG_FILE) -> RecommendationOptions:
    """Get ranking defaults from a freshly loaded configuration."""
    return ConfigManager(config_file).get_ranking_defaults()


def get_scoring_weights(config_file: str = DEFAULT_CONFIG_FILE) -> ScoringWeights:
    """Get scoring weights from a freshly loaded configuration."""
    return ConfigManager(config_file).get_scoring_weights()
