"""
Local artifact cache with download and checksum verification.
"""

import hashlib
import json
import logging
import re
import shutil
from pathlib import Path
from typing import Optional, Dict, Callable, Iterator
from urllib.parse import urlparse
from urllib.request import url2pathname

import requests

from modelzoo.exceptions import DownloadError, ModelNotFoundError
from modelzoo.repository.metadata import Artifact, ArtifactFile, Metadata
from modelzoo.repository.repository import Repository, MRL


logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024

# (file key, bytes downloaded so far, total bytes or None)
ProgressCallback = Callable[[str, int, Optional[int]], None]


def sha1_file(path: Path) -> str:
    h = hashlib.sha1()
    with path.open('rb') as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b''):
            h.update(chunk)
    return h.hexdigest()


def _safe_name(name: str) -> str:
    return re.sub(r"[^A-Za-z0-9._-]", "_", name)


class ArtifactCache:
    """
    Downloads repository resources into a local directory.

    Layout: <cache_dir>/<repository>/<mrl path>/<version>/<artifact>/<file>.
    Files already present with a valid checksum are reused.
    """

    def __init__(
        self,
        cache_dir: Path,
        timeout: float = 60.0,
        verify_checksums: bool = True,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the cache.

        Args:
            cache_dir: Root directory for downloaded artifacts
            timeout: Per-request timeout in seconds
            verify_checksums: Check SHA-1 hashes published in metadata
            session: Optional requests session (shared connection pool)
        """
        self.cache_dir = Path(cache_dir)
        self.timeout = timeout
        self.verify_checksums = verify_checksums
        self.session = session or requests.Session()

    def model_dir(self, repository: Repository, mrl: MRL, artifact: Artifact) -> Path:
        """Cache directory of one artifact; versions are shared across artifacts."""
        return (
            self.cache_dir
            / _safe_name(repository.name)
            / mrl.path
            / _safe_name(artifact.version)
            / _safe_name(artifact.name or "default")
        )

    def fetch_metadata(self, repository: Repository, mrl: MRL) -> Metadata:
        """
        Fetch and parse the metadata document of a model family.

        Raises:
            ModelNotFoundError: If the repository has no metadata for the MRL
            DownloadError: On network failure or an unreadable document
        """
        url = repository.resolve(mrl.metadata_path)
        logger.info(f"Fetching metadata: {url}")

        if repository.is_remote:
            try:
                response = self.session.get(url, timeout=self.timeout)
            except requests.RequestException as e:
                raise DownloadError(f"Failed to fetch {url}: {e}") from e
            if response.status_code in (403, 404):
                raise ModelNotFoundError(f"No metadata for {mrl} in {repository}")
            try:
                response.raise_for_status()
                data = response.json()
            except (requests.RequestException, ValueError) as e:
                raise DownloadError(f"Invalid metadata response from {url}: {e}") from e
        else:
            path = repository.local_path(mrl.metadata_path)
            if not path.exists():
                raise ModelNotFoundError(f"No metadata for {mrl} in {repository}")
            try:
                with open(path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, ValueError) as e:
                raise DownloadError(f"Invalid metadata file {path}: {e}") from e

        try:
            return Metadata.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise DownloadError(f"Malformed metadata at {url}: {e}") from e

    def download_artifact(
        self,
        repository: Repository,
        mrl: MRL,
        artifact: Artifact,
        progress: Optional[ProgressCallback] = None,
    ) -> Dict[str, Path]:
        """
        Make every file of an artifact available locally.

        Returns:
            Mapping of file key to local path
        """
        target_dir = self.model_dir(repository, mrl, artifact)
        target_dir.mkdir(parents=True, exist_ok=True)

        files = {}
        for key, artifact_file in artifact.files.items():
            target = target_dir / _safe_name(artifact_file.file_name)
            self._download_file(repository, mrl, artifact_file, target, progress)
            files[key] = target

        logger.info(f"Artifact {artifact.name} v{artifact.version} ready in {target_dir}")
        return files

    def is_cached(self, target: Path, artifact_file: ArtifactFile) -> bool:
        if not target.exists():
            return False
        if self.verify_checksums and artifact_file.sha1_hash:
            return sha1_file(target) == artifact_file.sha1_hash.lower()
        return True

    def _source_url(self, repository: Repository, mrl: MRL, artifact_file: ArtifactFile) -> str:
        if urlparse(artifact_file.uri).scheme:
            return artifact_file.uri
        return repository.resolve(f"{mrl.path}/{artifact_file.uri}")

    def _download_file(
        self,
        repository: Repository,
        mrl: MRL,
        artifact_file: ArtifactFile,
        target: Path,
        progress: Optional[ProgressCallback],
    ) -> None:
        if self.is_cached(target, artifact_file):
            logger.debug(f"Cache hit: {target}")
            return

        url = self._source_url(repository, mrl, artifact_file)
        logger.info(f"Downloading {url} -> {target}")

        partial = target.with_name(target.name + ".part")
        digest = hashlib.sha1()
        downloaded = 0
        try:
            with open(partial, "wb") as f:
                for chunk in self._iter_chunks(url):
                    f.write(chunk)
                    digest.update(chunk)
                    downloaded += len(chunk)
                    if progress:
                        progress(artifact_file.key, downloaded, artifact_file.size)
        except (requests.RequestException, OSError) as e:
            partial.unlink(missing_ok=True)
            raise DownloadError(f"Failed to download {url}: {e}") from e

        if self.verify_checksums and artifact_file.sha1_hash:
            actual = digest.hexdigest()
            if actual != artifact_file.sha1_hash.lower():
                partial.unlink(missing_ok=True)
                raise DownloadError(
                    f"Checksum mismatch for {url}: expected {artifact_file.sha1_hash}, got {actual}"
                )

        partial.replace(target)

    def _iter_chunks(self, url: str) -> Iterator[bytes]:
        parsed = urlparse(url)
        if parsed.scheme in ("http", "https"):
            with self.session.get(url, stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        yield chunk
        else:
            with open(url2pathname(parsed.path), "rb") as f:
                for chunk in iter(lambda: f.read(CHUNK_SIZE), b''):
                    yield chunk

    def clear(self, repository: Optional[Repository] = None) -> None:
        """Remove cached files, for one repository or everything."""
        root = self.cache_dir / _safe_name(repository.name) if repository else self.cache_dir
        if root.exists():
            shutil.rmtree(root)
            logger.info(f"Cleared cache: {root}")
