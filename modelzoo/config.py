"""
Configuration management for ModelZoo.
"""

import os
from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any
from pathlib import Path
import yaml


MXNET_REPO_URL = "https://joule.s3.amazonaws.com/mlrepo/"
MXNET_REPO_NAME = "MxNet"
GROUP_ID = "org.apache.mxnet"

CACHE_DIR_ENV = "MODELZOO_CACHE_DIR"


def default_cache_dir() -> Path:
    """Cache location, overridable through MODELZOO_CACHE_DIR."""
    env_dir = os.environ.get(CACHE_DIR_ENV)
    if env_dir:
        return Path(env_dir).expanduser()
    return Path.home() / ".modelzoo" / "cache"


@dataclass
class RepositoryConfig:
    """Remote repository endpoint and download behaviour."""
    name: str = MXNET_REPO_NAME
    url: str = MXNET_REPO_URL
    cache_dir: Path = field(default_factory=default_cache_dir)
    timeout: float = 60.0  # seconds, per request
    verify_checksums: bool = True

    def __post_init__(self):
        self.cache_dir = Path(self.cache_dir).expanduser()


@dataclass
class ZooConfig:
    """Complete model zoo configuration."""
    repository: RepositoryConfig = field(default_factory=RepositoryConfig)
    group_id: str = GROUP_ID

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_yaml(cls, path: str) -> "ZooConfig":
        """Load configuration from YAML file."""
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ZooConfig":
        """Create config from dictionary."""
        repository = RepositoryConfig(**(data.get("repository") or {}))

        return cls(
            repository=repository,
            group_id=data.get("group_id", GROUP_ID),
            log_level=data.get("log_level", "INFO"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["repository"]["cache_dir"] = str(self.repository.cache_dir)
        return data

    def to_yaml(self, path: str) -> None:
        """Save configuration to YAML file."""
        with open(path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)


def load_config(path: Optional[str] = None) -> ZooConfig:
    """Load a config file, or the defaults when no path is given."""
    if path is None:
        return ZooConfig()
    return ZooConfig.from_yaml(path)
