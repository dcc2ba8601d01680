"""
Configuration Management System

Engine settings are small immutable models passed explicitly to each
component. ConfigManager loads them from YAML and JSON files with
dot-notation access and reload support.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, ValidationError, model_validator

from transit_intel.exceptions import ConfigurationError
from transit_intel.models._base import TransitModel

logger = logging.getLogger(__name__)


# ============================================
# Engine configuration models
# ============================================

class EnhancerConfig(TransitModel):
    """Settings for the vehicle enhancer"""
    tick_seconds: int = Field(default=15, gt=0)          # polling interval
    eta_min: int = Field(default=5, ge=0)                 # fallback ETA range (minutes)
    eta_max: int = Field(default=30, ge=0)
    eta_cap: int = Field(default=90, gt=0)                # upper bound on computed ETAs
    min_speed_for_eta: float = Field(default=1.0, ge=0.0) # mph
    fuel_burn_min: float = Field(default=4.0, ge=0.0)     # % per operating hour
    fuel_burn_max: float = Field(default=7.0, ge=0.0)
    service_day_start_hour: int = Field(default=5, ge=0, le=23)
    refuel_offset_max_minutes: int = Field(default=120, ge=0)
    placeholder_stop_count: int = Field(default=6, gt=0)

    @model_validator(mode="after")
    def _check_ranges(self):
        if self.eta_min > self.eta_max:
            raise ValueError("etaMin must not exceed etaMax")
        if self.fuel_burn_min > self.fuel_burn_max:
            raise ValueError("fuelBurnMin must not exceed fuelBurnMax")
        return self


class ForecastConfig(TransitModel):
    """Random walk settings for the traffic forecaster"""
    step_size: float = Field(default=0.15, ge=0.0, le=1.0)       # max walk step per hour
    mean_reversion: float = Field(default=0.1, ge=0.0, le=1.0)   # pull toward baseline
    default_baseline: float = Field(default=0.3, ge=0.0, le=1.0)
    baselines: Dict[str, float] = Field(default_factory=dict)

    def baseline_for(self, route_id: str) -> float:
        """Baseline congestion for a route, default when never sampled"""
        return self.baselines.get(route_id, self.default_baseline)


class RecommenderConfig(TransitModel):
    """Thresholds and cost factors for the route recommender"""
    medium_congestion_threshold: float = Field(default=0.4, ge=0.0, le=1.0)
    high_congestion_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    delay_threshold: float = Field(default=5.0, ge=0.0)           # minutes
    max_delay: float = Field(default=15.0, gt=0.0)                # delay at full severity
    fuel_cost_per_vehicle_minute: float = Field(default=4.0, ge=0.0)
    round_trip_minutes: float = Field(default=60.0, gt=0.0)
    volatility_weight: float = Field(default=50.0, ge=0.0)
    max_volatility_penalty: float = Field(default=10.0, ge=0.0)

    @model_validator(mode="after")
    def _check_thresholds(self):
        if self.medium_congestion_threshold >= self.high_congestion_threshold:
            raise ValueError("mediumCongestionThreshold must be below highCongestionThreshold")
        return self


class InsightConfig(TransitModel):
    """Trigger thresholds for actionable insights"""
    out_of_service_threshold: int = Field(default=2, gt=0)
    high_congestion_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    low_congestion_threshold: float = Field(default=0.4, ge=0.0, le=1.0)
    delay_threshold: float = Field(default=5.0, ge=0.0)
    overcrowded_occupancy: float = Field(default=0.85, ge=0.0, le=1.0)
    low_demand_occupancy: float = Field(default=0.25, ge=0.0, le=1.0)
    low_fuel_level: float = Field(default=15.0, ge=0.0, le=100.0)


class EngineConfig(TransitModel):
    """Complete engine configuration"""
    enhancer: EnhancerConfig = Field(default_factory=EnhancerConfig)
    forecast: ForecastConfig = Field(default_factory=ForecastConfig)
    recommender: RecommenderConfig = Field(default_factory=RecommenderConfig)
    insights: InsightConfig = Field(default_factory=InsightConfig)


# ============================================
# File-backed configuration
# ============================================

class ConfigManager:
    """
    Manage engine configuration from YAML and JSON files

    Provides:
    - Load all config files on construction
    - Dot notation access: config.get('engine.forecast.stepSize')
    - Hot reload capability
    - Default values for missing keys
    """

    def __init__(self, config_dir: str = None):
        """
        Initialize configuration manager

        Args:
            config_dir: Path to config directory (default: project_root/config)
        """
        if config_dir:
            self.config_dir = Path(config_dir)
        else:
            self.config_dir = Path(__file__).parent.parent / "config"

        self.configs: Dict[str, Any] = {}
        self._load_all_configs()

    def _load_all_configs(self):
        """Load all configuration files from config directory"""
        if not self.config_dir.exists():
            logger.warning(f"Config directory not found: {self.config_dir}, using defaults")
            return

        for yaml_file in sorted(self.config_dir.glob("*.yaml")):
            try:
                with open(yaml_file, 'r') as f:
                    self.configs[yaml_file.stem] = yaml.safe_load(f) or {}
                logger.debug(f"Loaded config: {yaml_file.name}")
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load {yaml_file.name}: {e}")

        for json_file in sorted(self.config_dir.glob("*.json")):
            try:
                with open(json_file, 'r') as f:
                    self.configs[json_file.stem] = json.load(f)
                logger.debug(f"Loaded config: {json_file.name}")
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Failed to load {json_file.name}: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot notation key

        Examples:
            config.get('engine.forecast.stepSize')
            config.get('engine.recommender.delayThreshold')

        Args:
            key: Dot-separated key path
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = self.configs
        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def set(self, key: str, value: Any):
        """
        Set a configuration value (runtime only, not persisted)

        Args:
            key: Dot-separated key path
            value: Value to set
        """
        keys = key.split('.')
        config = self.configs

        for k in keys[:-1]:
            if not isinstance(config.get(k), dict):
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def reload(self):
        """Reload all configuration files"""
        logger.info("Reloading configuration")
        self.configs.clear()
        self._load_all_configs()

    def load_engine_config(self, section: str = "engine") -> EngineConfig:
        """
        Build a validated EngineConfig from a loaded config file

        Args:
            section: Config file stem holding the engine settings

        Returns:
            EngineConfig (defaults for anything not configured)

        Raises:
            ConfigurationError: if the settings fail validation
        """
        raw = self.configs.get(section) or {}
        if not isinstance(raw, dict):
            raise ConfigurationError(f"Config section '{section}' must be a mapping", section=section)

        try:
            return EngineConfig.model_validate(raw)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid engine configuration: {e}", section=section) from e


# Global configuration instance (created on first use)
_config: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """Get the global configuration instance"""
    global _config
    if _config is None:
        _config = ConfigManager()
    return _config


def load_engine_config(config_dir: str = None) -> EngineConfig:
    """Load EngineConfig from a config directory (global manager by default)"""
    manager = ConfigManager(config_dir) if config_dir else get_config()
    return manager.load_engine_config()
