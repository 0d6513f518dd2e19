"""
Model loaders, one per supported model family.
"""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Dict, Any, List, Union

import torch
from safetensors.torch import load_file

from modelzoo.config import GROUP_ID, default_cache_dir
from modelzoo.exceptions import ModelZooError, ModelNotFoundError, UnknownModelFamilyError
from modelzoo.repository import Repository, MRL, Metadata, Artifact, ArtifactCache
from modelzoo.repository.cache import ProgressCallback


logger = logging.getLogger(__name__)


class ModelFamily(Enum):
    """Closed set of model families published by the zoo."""
    SSD = ("cv/object_detection", "ssd", "Single Shot MultiBox Detector")
    RESNET = ("cv/image_classification", "resnet", "ResNet image classification")
    RESNEXT = ("cv/image_classification", "resnext", "ResNeXt image classification")
    SENET = ("cv/image_classification", "senet", "Squeeze-and-Excitation network")
    SE_RESNEXT = ("cv/image_classification", "se_resnext", "SE-ResNeXt image classification")
    SIMPLE_POSE = ("cv/pose_estimation", "simple_pose", "Simple baseline pose estimation")
    MASK_RCNN = ("cv/instance_segmentation", "mask_rcnn", "Mask R-CNN instance segmentation")
    ACTION_RECOGNITION = ("cv/action_recognition", "action_recognition", "Video action recognition")

    def __init__(self, application: str, artifact_id: str, description: str):
        self.application = application
        self.artifact_id = artifact_id
        self.description = description

    @classmethod
    def from_name(cls, name: Union[str, "ModelFamily"]) -> "ModelFamily":
        """
        Resolve a family from its enum member or name.

        Names are case insensitive and accept dashes, so "se-resnext",
        "SE_RESNEXT" and the artifact id "se_resnext" are equivalent.
        """
        if isinstance(name, cls):
            return name
        if not isinstance(name, str):
            raise UnknownModelFamilyError(f"Unknown model family: {name!r}")

        key = name.strip().upper().replace("-", "_")
        if key in cls.__members__:
            return cls.__members__[key]
        raise UnknownModelFamilyError(
            f"Unknown model family: {name}. Available: {[f.name for f in cls]}"
        )


# Parameter files are picked by key first, then by extension
PARAMETER_KEYS = ("parameters", "weights", "model")
SAFETENSORS_SUFFIXES = (".safetensors",)
TORCH_SUFFIXES = (".pt", ".pth", ".bin")


@dataclass
class ZooModel:
    """A downloaded pretrained model: its artifact and local files."""
    family: ModelFamily
    artifact: Artifact
    model_dir: Path
    files: Dict[str, Path] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.artifact.name

    @property
    def arguments(self) -> Dict[str, Any]:
        """Architecture arguments published with the artifact."""
        return self.artifact.arguments

    def parameter_file(self) -> Path:
        """Local path of the weights file."""
        for key in PARAMETER_KEYS:
            if key in self.files:
                return self.files[key]
        for path in self.files.values():
            if path.suffix in SAFETENSORS_SUFFIXES + TORCH_SUFFIXES:
                return path
        raise ModelZooError(f"Model {self.name} has no parameter file: {list(self.files)}")

    def load_parameters(self) -> Dict[str, torch.Tensor]:
        """
        Load the weights as a state dict on CPU.

        Returns:
            Mapping of parameter name to tensor
        """
        path = self.parameter_file()
        logger.info(f"Loading parameters from {path}")

        if path.suffix in SAFETENSORS_SUFFIXES:
            return load_file(str(path), device="cpu")
        if path.suffix in TORCH_SUFFIXES:
            return torch.load(str(path), map_location="cpu", weights_only=True)

        raise ModelZooError(f"Unsupported parameter format: {path.suffix} ({path})")


class ModelLoader:
    """
    Locates, downloads and materializes models of one family.

    Many loaders share one repository; a loader never modifies it.
    """

    def __init__(
        self,
        repository: Repository,
        family: Union[ModelFamily, str],
        group_id: str = GROUP_ID,
        cache: Optional[ArtifactCache] = None,
    ):
        """
        Initialize the loader.

        Args:
            repository: Shared repository to resolve artifacts from
            family: Model family served by this loader
            group_id: Namespace of the artifacts
            cache: Artifact cache (default: cache in the default cache dir)
        """
        if not isinstance(repository, Repository):
            raise TypeError(f"Expected a Repository, got {type(repository).__name__}")
        if not group_id:
            raise ValueError("group_id must not be empty")

        self._repository = repository
        self.family = ModelFamily.from_name(family)
        self.group_id = group_id
        self.cache = cache or ArtifactCache(default_cache_dir())

        self._metadata: Optional[Metadata] = None
        self._lock = threading.Lock()

    @property
    def repository(self) -> Repository:
        return self._repository

    @property
    def mrl(self) -> MRL:
        return MRL(
            application=self.family.application,
            group_id=self.group_id,
            artifact_id=self.family.artifact_id,
        )

    def describe(self) -> Dict[str, str]:
        """Observable configuration of the loader."""
        return {
            "family": self.family.name,
            "repository": self.repository.name,
            "url": self.repository.base_url,
            "group_id": self.group_id,
            "artifact_id": self.family.artifact_id,
            "application": self.family.application,
        }

    def get_metadata(self) -> Metadata:
        """Fetch the family's metadata once and reuse it."""
        with self._lock:
            if self._metadata is None:
                self._metadata = self.cache.fetch_metadata(self.repository, self.mrl)
            return self._metadata

    def list_artifacts(self) -> List[Artifact]:
        """All published artifacts, newest first."""
        return self.get_metadata().search()

    def match(self, criteria: Optional[Dict[str, Any]] = None) -> Artifact:
        """
        Find the newest artifact whose properties match the criteria.

        Raises:
            ModelNotFoundError: If nothing matches
        """
        found = self.get_metadata().search(criteria)
        if not found:
            raise ModelNotFoundError(
                f"No {self.family.name} model matches {criteria or {}} in {self.repository}"
            )
        return found[0]

    def load_model(
        self,
        criteria: Optional[Dict[str, Any]] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> ZooModel:
        """
        Download (or reuse from cache) the best matching model.

        Args:
            criteria: Artifact properties to match, e.g. {"layers": "50"}
            progress: Optional callback receiving download progress

        Returns:
            ZooModel with local file paths
        """
        artifact = self.match(criteria)
        logger.info(f"Loading {self.family.name} model: {artifact.summary()}")

        files = self.cache.download_artifact(self.repository, self.mrl, artifact, progress)
        return ZooModel(
            family=self.family,
            artifact=artifact,
            model_dir=self.cache.model_dir(self.repository, self.mrl, artifact),
            files=files,
        )

    def __repr__(self):
        return f"ModelLoader({self.family.name}, {self.repository}, group_id={self.group_id!r})"
