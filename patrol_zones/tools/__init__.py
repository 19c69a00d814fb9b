"""Configuration tooling."""

from .config_loader import ConfigLoader, get_zone_config, zone_config_from_dict

__all__ = [
    "ConfigLoader",
    "get_zone_config",
    "zone_config_from_dict",
]
