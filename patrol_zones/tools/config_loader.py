"""
Configuration loader for zone profiles and environment variables.
"""

import os
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..spatial.hierarchy import ZoneConfig
from ..spatial.kmeans import KMeansConfig


class ConfigLoader:
    """Load and manage zone configuration from YAML files and environment."""

    CONFIG_DIR = Path(__file__).parent.parent.parent / "configs"
    DEFAULT_PROFILE = "default"
    ENV_VAR = "PATROL_ZONE_PROFILE"

    @classmethod
    def load_profile(cls, profile_name: str = DEFAULT_PROFILE) -> Dict[str, Any]:
        """
        Load a zone profile.

        Args:
            profile_name: Name of the profile (default, dense-urban, ...)

        Returns:
            Dictionary with configuration values

        Raises:
            FileNotFoundError: If profile doesn't exist
        """
        profile_path = cls.CONFIG_DIR / f"{profile_name}.yaml"

        if not profile_path.exists():
            available = sorted(f.stem for f in cls.CONFIG_DIR.glob("*.yaml"))
            raise FileNotFoundError(
                f"Profile '{profile_name}' not found. Available profiles: {', '.join(available)}"
            )

        with open(profile_path, "r") as f:
            return yaml.safe_load(f) or {}

    @classmethod
    def get_profile_from_env(cls) -> Optional[str]:
        """Get profile name from the PATROL_ZONE_PROFILE environment variable."""
        return os.getenv(cls.ENV_VAR)

    @classmethod
    def load_default_or_env_profile(cls) -> Dict[str, Any]:
        """Load the profile named in the environment, or the default one."""
        profile = cls.get_profile_from_env() or cls.DEFAULT_PROFILE
        return cls.load_profile(profile)


def _kmeans_config_from_dict(data: Optional[Dict[str, Any]]) -> KMeansConfig:
    known = {f.name for f in fields(KMeansConfig)}
    return KMeansConfig(**{k: v for k, v in (data or {}).items() if k in known})


def zone_config_from_dict(data: Dict[str, Any]) -> ZoneConfig:
    """
    Build a ZoneConfig from a profile dictionary.

    YAML Format:
        ```yaml
        alpha: 1.0
        min_boundary_points: 4
        secondary_exponent: 0.25
        max_workers: 4
        primary_kmeans:
          init: farthest
          max_iterations: 100
        secondary_kmeans:
          init: random
          seed: 7
        ```

    Unknown keys are ignored.
    """
    known = {f.name for f in fields(ZoneConfig)} - {"primary_kmeans", "secondary_kmeans"}
    kwargs = {k: v for k, v in data.items() if k in known}
    kwargs["primary_kmeans"] = _kmeans_config_from_dict(data.get("primary_kmeans"))
    kwargs["secondary_kmeans"] = _kmeans_config_from_dict(data.get("secondary_kmeans"))
    return ZoneConfig(**kwargs)


def get_zone_config(profile_name: Optional[str] = None) -> ZoneConfig:
    """Convenience function to get the current zone configuration."""
    if profile_name is None:
        data = ConfigLoader.load_default_or_env_profile()
    else:
        data = ConfigLoader.load_profile(profile_name)
    return zone_config_from_dict(data)
