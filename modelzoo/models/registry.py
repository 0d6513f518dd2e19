"""
Model Zoo - registry of ready-to-use loaders bound to one repository.
"""

import logging
import threading
from types import MappingProxyType
from typing import Optional, Dict, Any, Iterator, List, Mapping, Union

from modelzoo.config import ZooConfig, MXNET_REPO_URL, GROUP_ID, default_cache_dir
from modelzoo.exceptions import UnknownModelFamilyError
from modelzoo.repository import Repository, ArtifactCache
from modelzoo.models.loaders import ModelFamily, ModelLoader, ZooModel


logger = logging.getLogger(__name__)


class ModelZoo:
    """
    Fixed, read-only table of model loaders.

    Every loader references the same Repository instance. Build one with
    ModelZoo.create(); construction failures propagate to the caller.

    Usage:
        zoo = ModelZoo.create()
        model = zoo.SSD.load_model({"backbone": "resnet50"})
    """

    def __init__(
        self,
        repository: Repository,
        loaders: Mapping[ModelFamily, ModelLoader],
        cache: Optional[ArtifactCache] = None,
    ):
        """
        Wrap an existing loader table. Prefer ModelZoo.create().

        Raises:
            ValueError: If a family has no loader or a loader uses another repository
        """
        missing = [f.name for f in ModelFamily if f not in loaders]
        if missing:
            raise ValueError(f"ModelZoo needs a loader for every family, missing: {missing}")
        for family, loader in loaders.items():
            if loader.repository is not repository:
                raise ValueError(f"Loader for {family.name} is bound to {loader.repository}, not {repository}")

        self._repository = repository
        self._cache = cache
        self._loaders = MappingProxyType(dict(loaders))

    @classmethod
    def create(cls, config: Optional[ZooConfig] = None) -> "ModelZoo":
        """
        Build the repository and one loader per model family.

        Args:
            config: Zoo configuration (default: the MxNet repository)

        Returns:
            Initialized ModelZoo

        Raises:
            InvalidRepositoryError: If the configured repository is malformed
        """
        config = config or ZooConfig()
        repo_config = config.repository

        repository = Repository.new_instance(repo_config.name, repo_config.url)
        cache = ArtifactCache(
            cache_dir=repo_config.cache_dir,
            timeout=repo_config.timeout,
            verify_checksums=repo_config.verify_checksums,
        )

        loaders = {
            family: ModelLoader(repository, family, group_id=config.group_id, cache=cache)
            for family in ModelFamily
        }

        logger.info(f"ModelZoo initialized: {len(loaders)} loaders on {repository}")
        return cls(repository, loaders, cache)

    @property
    def repository(self) -> Repository:
        return self._repository

    @property
    def cache(self) -> ArtifactCache:
        if self._cache is None:
            self._cache = ArtifactCache(default_cache_dir())
        return self._cache

    def get_loader(self, family: Union[ModelFamily, str]) -> ModelLoader:
        """
        Look up the loader of a model family.

        Args:
            family: ModelFamily member or its name (case insensitive)

        Raises:
            UnknownModelFamilyError: If the family is not in the zoo
        """
        key = ModelFamily.from_name(family)
        if key not in self._loaders:
            raise UnknownModelFamilyError(f"No loader registered for {key.name}")
        return self._loaders[key]

    def load_model(
        self,
        family: Union[ModelFamily, str],
        criteria: Optional[Dict[str, Any]] = None,
    ) -> ZooModel:
        """Shortcut for get_loader(family).load_model(criteria)."""
        return self.get_loader(family).load_model(criteria)

    def families(self) -> List[ModelFamily]:
        return list(self._loaders.keys())

    def loaders(self) -> Mapping[ModelFamily, ModelLoader]:
        """Read-only view of the loader table."""
        return self._loaders

    def __getitem__(self, family: Union[ModelFamily, str]) -> ModelLoader:
        return self.get_loader(family)

    def __getattr__(self, name: str) -> ModelLoader:
        # Only called for missing attributes: zoo.SSD, zoo.RESNET, ...
        if name.startswith("_") or name not in ModelFamily.__members__:
            raise AttributeError(f"{type(self).__name__} has no attribute {name!r}")
        return self.get_loader(ModelFamily[name])

    def __contains__(self, family) -> bool:
        try:
            return ModelFamily.from_name(family) in self._loaders
        except UnknownModelFamilyError:
            return False

    def __iter__(self) -> Iterator[ModelFamily]:
        return iter(self._loaders)

    def __len__(self) -> int:
        return len(self._loaders)

    def __repr__(self):
        return f"ModelZoo({self._repository}, families={[f.name for f in self._loaders]})"


_default_zoo: Optional[ModelZoo] = None
_default_lock = threading.Lock()


def default_zoo() -> ModelZoo:
    """Process-wide zoo on the default repository, created on first use."""
    global _default_zoo
    with _default_lock:
        if _default_zoo is None:
            _default_zoo = ModelZoo.create()
        return _default_zoo


__all__ = [
    "ModelZoo",
    "default_zoo",
    "MXNET_REPO_URL",
    "GROUP_ID",
]
