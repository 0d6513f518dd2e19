"""
Model registry and loaders.
"""

from modelzoo.models.registry import ModelZoo, default_zoo
from modelzoo.models.loaders import ModelFamily, ModelLoader, ZooModel

__all__ = [
    "ModelZoo",
    "default_zoo",
    "ModelFamily",
    "ModelLoader",
    "ZooModel",
]
