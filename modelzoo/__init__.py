"""
ModelZoo - Pretrained model repository for MXNet model families

A registry of model loaders sharing a single remote repository.
"""

__version__ = "0.1.0"

import logging

from modelzoo.config import ZooConfig, RepositoryConfig, MXNET_REPO_URL, GROUP_ID
from modelzoo.models import ModelZoo, ModelFamily, ModelLoader, ZooModel, default_zoo
from modelzoo.repository import Repository


def setup_logging(level: str = "INFO"):
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


__all__ = [
    "ModelZoo",
    "ModelFamily",
    "ModelLoader",
    "ZooModel",
    "Repository",
    "ZooConfig",
    "RepositoryConfig",
    "MXNET_REPO_URL",
    "GROUP_ID",
    "default_zoo",
    "setup_logging",
]
