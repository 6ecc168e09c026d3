"""
Configuration management for the pafpose decoder

Central configuration system supporting:
- Dataclass-based configs
- YAML file loading
- Environment variable overrides
- Runtime modification
"""

import os
import yaml
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional, Dict, Any

from .constants import (
    DEFAULT_CONFIDENCE_THRESHOLD,
    DEFAULT_MIN_PEAKS_DISTANCE,
    DEFAULT_MID_POINTS_SCORE_THRESHOLD,
    DEFAULT_FOUND_MID_POINTS_RATIO_THRESHOLD,
    DEFAULT_MIN_SUBSET_SCORE,
    DEFAULT_MIN_JOINTS_NUMBER,
    DEFAULT_NUM_SAMPLE_POINTS,
)
from .exceptions import ConfigError

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "default.yaml"


@dataclass
class PeakConfig:
    """Configuration for heatmap peak extraction"""
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD
    min_peaks_distance: float = DEFAULT_MIN_PEAKS_DISTANCE
    refine: bool = True

    def __post_init__(self):
        """Validate configuration"""
        if self.min_peaks_distance < 0:
            raise ConfigError("min_peaks_distance must be >= 0")


@dataclass
class LimbConfig:
    """Configuration for PAF line-integral limb scoring"""
    mid_points_score_threshold: float = DEFAULT_MID_POINTS_SCORE_THRESHOLD
    found_mid_points_ratio_threshold: float = DEFAULT_FOUND_MID_POINTS_RATIO_THRESHOLD
    num_sample_points: int = DEFAULT_NUM_SAMPLE_POINTS

    def __post_init__(self):
        """Validate configuration"""
        if self.num_sample_points < 2:
            raise ConfigError("num_sample_points must be >= 2")
        if self.found_mid_points_ratio_threshold < 0 or self.found_mid_points_ratio_threshold > 1:
            raise ConfigError("found_mid_points_ratio_threshold must be between 0 and 1")


@dataclass
class AssemblyConfig:
    """Configuration for merging limb associations into poses"""
    min_subset_score: float = DEFAULT_MIN_SUBSET_SCORE
    min_joints_number: int = DEFAULT_MIN_JOINTS_NUMBER

    def __post_init__(self):
        """Validate configuration"""
        if self.min_joints_number < 1:
            raise ConfigError("min_joints_number must be >= 1")


@dataclass
class PAFPoseConfig:
    """Master configuration class combining all subconfigs"""
    peaks: PeakConfig = field(default_factory=PeakConfig)
    limbs: LimbConfig = field(default_factory=LimbConfig)
    assembly: AssemblyConfig = field(default_factory=AssemblyConfig)
    num_workers: Optional[int] = None  # None lets the executor decide, 0/1 runs inline

    def __post_init__(self):
        """Validate configuration"""
        if self.num_workers is not None and self.num_workers < 0:
            raise ConfigError("num_workers must be >= 0 or None")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PAFPoseConfig":
        """
        Build configuration from a nested dictionary

        Args:
            data: Dict with optional 'peaks', 'limbs', 'assembly' sections
                and a top-level 'num_workers'

        Returns:
            PAFPoseConfig instance

        Raises:
            ConfigError: If a section holds unknown keys
        """
        try:
            return cls(
                peaks=PeakConfig(**(data.get('peaks') or {})),
                limbs=LimbConfig(**(data.get('limbs') or {})),
                assembly=AssemblyConfig(**(data.get('assembly') or {})),
                num_workers=data.get('num_workers'),
            )
        except TypeError as e:
            raise ConfigError(f"Invalid configuration keys: {e}")

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "PAFPoseConfig":
        """
        Load configuration from YAML file

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            PAFPoseConfig instance

        Raises:
            FileNotFoundError: If YAML file not found
            ConfigError: If YAML format is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        try:
            with open(yaml_path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML format in {yaml_path}: {e}")

        return cls.from_dict(data)

    @classmethod
    def default(cls) -> "PAFPoseConfig":
        """Load the packaged default configuration"""
        return cls.from_yaml(str(DEFAULT_CONFIG_PATH))

    @classmethod
    def from_env(cls, base_config: Optional["PAFPoseConfig"] = None) -> "PAFPoseConfig":
        """
        Create config from environment variables

        Supports environment variables like:
        - PAFPOSE_CONFIDENCE_THRESHOLD
        - PAFPOSE_MIN_SUBSET_SCORE
        - PAFPOSE_NUM_WORKERS

        Args:
            base_config: Base configuration to override (default: new config)

        Returns:
            PAFPoseConfig instance with environment overrides

        Raises:
            ConfigError: If a variable cannot be parsed
        """
        if base_config is None:
            config = cls()
        else:
            config = base_config

        overrides = [
            ('PAFPOSE_CONFIDENCE_THRESHOLD', config.peaks, 'confidence_threshold', float),
            ('PAFPOSE_MIN_PEAKS_DISTANCE', config.peaks, 'min_peaks_distance', float),
            ('PAFPOSE_MID_POINTS_SCORE_THRESHOLD', config.limbs, 'mid_points_score_threshold', float),
            ('PAFPOSE_FOUND_MID_POINTS_RATIO_THRESHOLD', config.limbs,
             'found_mid_points_ratio_threshold', float),
            ('PAFPOSE_NUM_SAMPLE_POINTS', config.limbs, 'num_sample_points', int),
            ('PAFPOSE_MIN_SUBSET_SCORE', config.assembly, 'min_subset_score', float),
            ('PAFPOSE_MIN_JOINTS_NUMBER', config.assembly, 'min_joints_number', int),
            ('PAFPOSE_NUM_WORKERS', config, 'num_workers', int),
        ]
        for var_name, section, attr_name, cast in overrides:
            if var_name in os.environ:
                try:
                    setattr(section, attr_name, cast(os.environ[var_name]))
                except ValueError as e:
                    raise ConfigError(f"Invalid value for {var_name}: {e}")

        # Re-run validation on the modified sections
        for section in (config.peaks, config.limbs, config.assembly, config):
            section.__post_init__()

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary"""
        return asdict(self)

    def to_yaml(self, yaml_path: str) -> None:
        """
        Save configuration to YAML file

        Args:
            yaml_path: Path to save YAML configuration
        """
        yaml_path = Path(yaml_path)
        yaml_path.parent.mkdir(parents=True, exist_ok=True)

        with open(yaml_path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def __str__(self) -> str:
        """String representation of config"""
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)
