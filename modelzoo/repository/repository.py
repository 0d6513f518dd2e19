"""
Repository - a named, URL-addressed source of model artifacts.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

from modelzoo.exceptions import InvalidRepositoryError


logger = logging.getLogger(__name__)

SUPPORTED_SCHEMES = ("http", "https", "file")


@dataclass(frozen=True)
class Repository:
    """
    Immutable handle on a model repository.

    Identity is the pair (name, base_url). A single instance is shared
    read-only by every loader created against it.
    """
    name: str
    base_url: str

    @classmethod
    def new_instance(cls, name: str, url: str) -> "Repository":
        """
        Validate and create a repository.

        Args:
            name: Display name of the repository
            url: Base URL (http, https or file). A trailing slash is added
                if missing.

        Returns:
            Repository instance

        Raises:
            InvalidRepositoryError: If the name is empty or the URL is malformed
        """
        if not name or not name.strip():
            raise InvalidRepositoryError("Repository name must not be empty")
        if not url or not url.strip():
            raise InvalidRepositoryError(f"Repository {name} has no URL")

        url = url.strip()
        parsed = urlparse(url)
        if parsed.scheme not in SUPPORTED_SCHEMES:
            raise InvalidRepositoryError(
                f"Unsupported repository URL scheme '{parsed.scheme}' in {url}. "
                f"Supported: {list(SUPPORTED_SCHEMES)}"
            )
        if parsed.scheme in ("http", "https") and not parsed.netloc:
            raise InvalidRepositoryError(f"Repository URL has no host: {url}")
        if parsed.scheme == "file" and not parsed.path:
            raise InvalidRepositoryError(f"Repository URL has no path: {url}")

        if not url.endswith("/"):
            url += "/"

        logger.debug(f"Created repository {name} at {url}")
        return cls(name=name.strip(), base_url=url)

    @property
    def is_remote(self) -> bool:
        """True when resources are fetched over HTTP."""
        return urlparse(self.base_url).scheme in ("http", "https")

    def resolve(self, path: str) -> str:
        """Absolute URL of a resource path relative to the repository root."""
        return self.base_url + path.lstrip("/")

    def local_path(self, path: str) -> Path:
        """Filesystem location of a resource in a file:// repository."""
        if self.is_remote:
            raise InvalidRepositoryError(f"Repository {self.name} is not a local repository")
        return Path(url2pathname(urlparse(self.resolve(path)).path))

    def __str__(self):
        return f"{self.name} ({self.base_url})"


@dataclass(frozen=True)
class MRL:
    """Model resource locator: where a model family lives in a repository."""
    application: str
    group_id: str
    artifact_id: str

    @property
    def path(self) -> str:
        """Repository-relative directory of the model family."""
        group_path = self.group_id.replace(".", "/")
        return f"model/{self.application}/{group_path}/{self.artifact_id}"

    @property
    def metadata_path(self) -> str:
        return f"{self.path}/metadata.json"

    def __str__(self):
        return f"{self.group_id}:{self.artifact_id} [{self.application}]"
