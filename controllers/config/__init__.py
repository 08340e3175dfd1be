"""Configuration loading for the altitude controller and autotuner."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from controllers.types import (
    EnvironmentConfig,
    GainBounds,
    InvalidConfig,
    PIDGains,
    TuningConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "altitude_pid.yaml"


@dataclass
class AltitudeTuningConfig:
    """Complete configuration: environment, active gains and search settings."""

    environment: EnvironmentConfig = field(default_factory=EnvironmentConfig)
    gains: PIDGains = field(default_factory=lambda: PIDGains(kp=5.0, ki=1.0, kd=2.0))
    tuning: TuningConfig = field(default_factory=TuningConfig)


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise InvalidConfig(f"Config section '{name}' must be a mapping")
    return section


def _parse_range(bounds: Dict[str, Any], name: str, default) -> tuple:
    if name not in bounds:
        return default
    value = bounds[name]
    try:
        low, high = (float(v) for v in value)
    except (TypeError, ValueError):
        raise InvalidConfig(f"bounds.{name} must be a [min, max] pair, got {value!r}")
    return (low, high)


def config_from_dict(data: Optional[Dict[str, Any]]) -> AltitudeTuningConfig:
    """Build a configuration from parsed YAML data.

    Missing keys fall back to the defaults.

    Args:
        data: Mapping with optional 'environment', 'gains' and 'tuning' sections

    Returns:
        AltitudeTuningConfig

    Raises:
        InvalidConfig: If a section is malformed or values are invalid
    """
    data = data or {}
    if not isinstance(data, dict):
        raise InvalidConfig("Config root must be a mapping")

    env_data = _section(data, "environment")
    defaults = EnvironmentConfig()
    try:
        environment = EnvironmentConfig(
            setpoint=float(env_data.get("setpoint", defaults.setpoint)),
            mass=float(env_data.get("mass", defaults.mass)),
            gravity=float(env_data.get("gravity", defaults.gravity)),
            disturbance_magnitude=float(
                env_data.get("disturbance_magnitude", defaults.disturbance_magnitude)
            ),
            dt=float(env_data.get("dt", defaults.dt)),
            horizon=float(env_data.get("horizon", defaults.horizon)),
        )
        gains = PIDGains.from_dict({"kp": 5.0, "ki": 1.0, "kd": 2.0, **_section(data, "gains")})
    except (TypeError, ValueError) as e:
        raise InvalidConfig(f"Invalid numeric value in config: {e}")
    environment.validate()

    tuning_data = _section(data, "tuning")
    tuning_defaults = TuningConfig()
    bounds_data = _section(tuning_data, "bounds")
    bounds = GainBounds(
        kp=_parse_range(bounds_data, "kp", tuning_defaults.bounds.kp),
        ki=_parse_range(bounds_data, "ki", tuning_defaults.bounds.ki),
        kd=_parse_range(bounds_data, "kd", tuning_defaults.bounds.kd),
    )
    bounds.validate()

    try:
        tuning = TuningConfig(
            sample_count=int(tuning_data.get("sample_count", tuning_defaults.sample_count)),
            horizon=float(tuning_data.get("horizon", tuning_defaults.horizon)),
            dt=float(tuning_data.get("dt", tuning_defaults.dt)),
            bounds=bounds,
            fallback_gains=PIDGains.from_dict({
                **tuning_defaults.fallback_gains.to_dict(),
                **_section(tuning_data, "fallback_gains"),
            }),
        )
    except (TypeError, ValueError) as e:
        raise InvalidConfig(f"Invalid numeric value in tuning config: {e}")
    if tuning.sample_count < 1:
        raise InvalidConfig(f"tuning.sample_count must be at least 1, got {tuning.sample_count}")
    environment.with_timing(tuning.horizon, tuning.dt).validate()

    return AltitudeTuningConfig(environment=environment, gains=gains, tuning=tuning)


def load_config_from_yaml(config_path: Optional[str] = None) -> AltitudeTuningConfig:
    """Load configuration from YAML file.

    Args:
        config_path: Path to YAML config file. If None, uses default.

    Returns:
        AltitudeTuningConfig loaded from YAML, or defaults if the file is missing
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
    else:
        config_path = Path(config_path)

    if not config_path.exists():
        logger.warning("Config file %s not found, using defaults", config_path)
        return AltitudeTuningConfig()

    with open(config_path, 'r') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise InvalidConfig(f"Config file {config_path} is not valid YAML: {e}") from e

    return config_from_dict(data)


def print_current_config(config: AltitudeTuningConfig):
    """Print current configuration in readable format.

    Args:
        config: Configuration to print
    """
    env = config.environment
    print("\n" + "="*60)
    print("CURRENT ALTITUDE PID CONFIG")
    print("="*60)

    print("\nGAINS:")
    print(f"  kp={config.gains.kp:.3f}, ki={config.gains.ki:.3f}, kd={config.gains.kd:.3f}")

    print("\nENVIRONMENT:")
    print(f"  Setpoint:     {env.setpoint:.2f} m")
    print(f"  Mass:         {env.mass:.2f} kg")
    print(f"  Gravity:      {env.gravity:.2f} m/s^2")
    print(f"  Wind:         {env.disturbance_magnitude:.2f} m/s^2")
    print(f"  Timestep:     {env.dt:.4f} s")
    print(f"  Horizon:      {env.horizon:.1f} s")

    tuning = config.tuning
    print("\nAUTOTUNE:")
    print(f"  Samples:      {tuning.sample_count}")
    print(f"  Horizon:      {tuning.horizon:.1f} s (dt={tuning.dt:.4f})")
    print(f"  kp range:     {tuning.bounds.kp}")
    print(f"  ki range:     {tuning.bounds.ki}")
    print(f"  kd range:     {tuning.bounds.kd}")
    print("="*60 + "\n")
