"""
Model repositories, metadata and the local artifact cache.
"""

from modelzoo.repository.repository import Repository, MRL
from modelzoo.repository.metadata import Metadata, Artifact, ArtifactFile
from modelzoo.repository.cache import ArtifactCache

__all__ = [
    "Repository",
    "MRL",
    "Metadata",
    "Artifact",
    "ArtifactFile",
    "ArtifactCache",
]
