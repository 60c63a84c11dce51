"""
SF3 Animation Configuration Module

Loads and provides access to codec and export settings from codec_config.yaml.
"""

import os
from typing import Optional
from dataclasses import dataclass, field

import yaml

from sf3anim.codec.options import CodecOptions
from sf3anim.codec.quaternion import RotationOrder


@dataclass
class CodecConfig:
    """Codec variant configuration."""
    rotation_order: str = RotationOrder.XYZW.value
    scan_limit: Optional[int] = None
    multiply_trailing_data: bool = True

    def to_options(self) -> CodecOptions:
        """Build the CodecOptions the reader and writer take."""
        return CodecOptions(
            rotation_order=RotationOrder(self.rotation_order.lower()),
            scan_limit=self.scan_limit,
            multiply_trailing_data=self.multiply_trailing_data,
        )


@dataclass
class ExportConfig:
    """CSV export configuration."""
    precision: int = 6
    frame_base: int = 1
    sort_by_bone_id: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "WARNING"


@dataclass
class Sf3AnimConfig:
    """Complete configuration."""
    codec: CodecConfig = field(default_factory=CodecConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Global config instance
_config: Optional[Sf3AnimConfig] = None


def get_config_path() -> str:
    """Get the path to the default config file."""
    return os.path.join(os.path.dirname(__file__), 'codec_config.yaml')


def load_config(config_path: Optional[str] = None) -> Sf3AnimConfig:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to config file (default: codec_config.yaml in this directory)

    Returns:
        Sf3AnimConfig instance
    """
    global _config

    if config_path is None:
        config_path = get_config_path()

    config = Sf3AnimConfig()

    if os.path.exists(config_path):
        with open(config_path, 'r') as f:
            data = yaml.safe_load(f) or {}
        _apply(config, data)

    _config = config
    return config


def get_config() -> Sf3AnimConfig:
    """
    Get the current configuration.

    Loads from file if not already loaded.
    """
    global _config
    if _config is None:
        load_config()
    return _config


def save_config(config: Optional[Sf3AnimConfig] = None, config_path: Optional[str] = None) -> bool:
    """
    Save configuration to a YAML file.

    Args:
        config: Sf3AnimConfig to save (uses global if None)
        config_path: Destination (default: get_config_path())

    Returns:
        True if saved successfully
    """
    if config is None:
        config = _config
    if config is None:
        return False

    if config_path is None:
        config_path = get_config_path()

    with open(config_path, 'w') as f:
        f.write("# SF3 animation codec configuration\n")
        f.write("#\n")
        f.write("# rotation_order: xyzw | wxyz\n")
        f.write("# scan_limit: null scans the whole file for the signature\n\n")
        yaml.dump(config_to_dict(config), f, default_flow_style=False, sort_keys=False)
    return True


def config_to_dict(config: Optional[Sf3AnimConfig] = None) -> dict:
    """
    Convert configuration to a dictionary.

    Args:
        config: Sf3AnimConfig to convert (uses global if None)
    """
    if config is None:
        config = get_config()

    return {
        'codec': {
            'rotation_order': config.codec.rotation_order,
            'scan_limit': config.codec.scan_limit,
            'multiply_trailing_data': config.codec.multiply_trailing_data,
        },
        'export': {
            'precision': config.export.precision,
            'frame_base': config.export.frame_base,
            'sort_by_bone_id': config.export.sort_by_bone_id,
        },
        'logging': {
            'level': config.logging.level,
        },
    }


def update_config_from_dict(data: dict) -> Sf3AnimConfig:
    """
    Update the global config from a dictionary.

    Args:
        data: Dictionary with config values (same shape as the YAML file)

    Returns:
        Updated Sf3AnimConfig
    """
    global _config

    if _config is None:
        _config = Sf3AnimConfig()

    _apply(_config, data)
    return _config


def _apply(config: Sf3AnimConfig, data: dict):
    """Copy recognised keys from data onto config, validating types."""
    codec = data.get('codec') or {}
    if 'rotation_order' in codec:
        order = str(codec['rotation_order']).lower()
        # Raises ValueError on anything but xyzw/wxyz
        RotationOrder(order)
        config.codec.rotation_order = order
    if 'scan_limit' in codec:
        config.codec.scan_limit = int(codec['scan_limit']) if codec['scan_limit'] is not None else None
    if 'multiply_trailing_data' in codec:
        config.codec.multiply_trailing_data = bool(codec['multiply_trailing_data'])

    export = data.get('export') or {}
    if 'precision' in export:
        config.export.precision = int(export['precision'])
    if 'frame_base' in export:
        config.export.frame_base = int(export['frame_base'])
    if 'sort_by_bone_id' in export:
        config.export.sort_by_bone_id = bool(export['sort_by_bone_id'])

    log = data.get('logging') or {}
    if 'level' in log:
        config.logging.level = str(log['level']).upper()


__all__ = [
    'Sf3AnimConfig',
    'CodecConfig',
    'ExportConfig',
    'LoggingConfig',
    'load_config',
    'get_config',
    'get_config_path',
    'save_config',
    'config_to_dict',
    'update_config_from_dict',
]
