"""
Configuration management for livecontour.

Loads YAML configuration with sensible defaults for the cost field, the
livewire search, spline tessellation and tracing sessions.
"""

import os
from dataclasses import asdict, dataclass, field

import yaml


@dataclass
class LivewireConfig:
    """Configuration for the cost field and livewire path search."""
    connectivity: int = 8  # 4 or 8
    gradient_weight: float = 0.6
    zero_crossing_weight: float = 0.4
    lazy_expansion: bool = False


@dataclass
class SplineConfig:
    """Configuration for spline evaluation and tessellation."""
    spline_type: str = "catmull_rom"  # "catmull_rom", "cardinal", "linear", "bspline"
    resolution: int = 20
    scale: float = 0.5  # cardinal tension


@dataclass
class SessionConfig:
    """Configuration for interactive tracing sessions."""
    close_path_distance: float = 10.0  # pixels


@dataclass
class TracingConfig:
    """Configuration for runtime tracing."""
    enabled: bool = False
    level: str = "INFO"
    file_path: str = None
    json_output: bool = False


@dataclass
class ContourConfig:
    """Complete livecontour configuration."""
    livewire: LivewireConfig = field(default_factory=LivewireConfig)
    spline: SplineConfig = field(default_factory=SplineConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)


_SECTIONS = ("livewire", "spline", "session", "tracing")


def load_config(config_path=None):
    """
    Load configuration from YAML file.

    Falls back to defaults for any missing values.
    """
    config = ContourConfig()

    if config_path and os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        config = _merge_config(config, yaml_data)

    return config


def _merge_config(config, yaml_data):
    """Merge YAML data into config dataclass, ignoring unknown keys."""
    for section_name in _SECTIONS:
        section_data = yaml_data.get(section_name)
        if not isinstance(section_data, dict):
            continue

        section = getattr(config, section_name)
        for key, value in section_data.items():
            if hasattr(section, key):
                setattr(section, key, value)

    return config


def save_default_config(path):
    """Save default configuration to YAML file for reference."""
    config = ContourConfig()

    yaml_data = {name: asdict(getattr(config, name)) for name in _SECTIONS}
    # file_path has no meaningful default
    yaml_data["tracing"].pop("file_path", None)

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=False)
