"""
Parsed form of a model family's metadata.json document.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Tuple


def version_key(version: str) -> Tuple:
    """Sort key for dotted versions; numeric parts compare numerically."""
    parts = []
    for part in version.split("."):
        if part.isdigit():
            parts.append((0, int(part), ""))
        else:
            parts.append((1, 0, part))
    return tuple(parts)


@dataclass
class ArtifactFile:
    """One downloadable file of an artifact."""
    key: str
    uri: str
    sha1_hash: Optional[str] = None
    size: Optional[int] = None

    @property
    def file_name(self) -> str:
        return self.uri.rstrip("/").split("/")[-1]

    @classmethod
    def from_dict(cls, key: str, data: Dict[str, Any]) -> "ArtifactFile":
        size = data.get("size")
        return cls(
            key=key,
            uri=data["uri"],
            sha1_hash=data.get("sha1Hash"),
            size=int(size) if size is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"uri": self.uri}
        if self.sha1_hash:
            data["sha1Hash"] = self.sha1_hash
        if self.size is not None:
            data["size"] = self.size
        return data


@dataclass
class Artifact:
    """A concrete pretrained model: one version with its properties and files."""
    version: str
    name: str
    properties: Dict[str, str] = field(default_factory=dict)
    arguments: Dict[str, Any] = field(default_factory=dict)
    files: Dict[str, ArtifactFile] = field(default_factory=dict)
    snapshot: bool = False

    def matches(self, criteria: Optional[Dict[str, Any]]) -> bool:
        """True if every criteria entry equals the artifact property."""
        if not criteria:
            return True
        for key, value in criteria.items():
            if key not in self.properties:
                return False
            if str(self.properties[key]) != str(value):
                return False
        return True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Artifact":
        return cls(
            version=str(data.get("version", "0.0.0")),
            name=data.get("name", ""),
            properties={k: str(v) for k, v in (data.get("properties") or {}).items()},
            arguments=dict(data.get("arguments") or {}),
            files={
                key: ArtifactFile.from_dict(key, value)
                for key, value in (data.get("files") or {}).items()
            },
            snapshot=bool(data.get("snapshot", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "snapshot": self.snapshot,
            "name": self.name,
            "properties": dict(self.properties),
            "arguments": dict(self.arguments),
            "files": {key: f.to_dict() for key, f in self.files.items()},
        }

    def summary(self) -> str:
        props = ", ".join(f"{k}={v}" for k, v in sorted(self.properties.items()))
        return f"{self.name} v{self.version}" + (f" ({props})" if props else "")


@dataclass
class Metadata:
    """Everything a repository publishes about one model family."""
    group_id: str
    artifact_id: str
    name: str = ""
    description: str = ""
    website: str = ""
    metadata_version: str = "0.1"
    licenses: Dict[str, Any] = field(default_factory=dict)
    artifacts: List[Artifact] = field(default_factory=list)

    def search(self, criteria: Optional[Dict[str, Any]] = None) -> List[Artifact]:
        """Matching artifacts, newest version first."""
        found = [a for a in self.artifacts if a.matches(criteria)]
        return sorted(found, key=lambda a: version_key(a.version), reverse=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Metadata":
        """Create metadata from the repository's JSON document."""
        return cls(
            group_id=data["groupId"],
            artifact_id=data["artifactId"],
            name=data.get("name", ""),
            description=data.get("description", ""),
            website=data.get("website", ""),
            metadata_version=str(data.get("metadataVersion", "0.1")),
            licenses=dict(data.get("licenses") or {}),
            artifacts=[Artifact.from_dict(a) for a in data.get("artifacts", [])],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metadataVersion": self.metadata_version,
            "groupId": self.group_id,
            "artifactId": self.artifact_id,
            "name": self.name,
            "description": self.description,
            "website": self.website,
            "licenses": dict(self.licenses),
            "artifacts": [a.to_dict() for a in self.artifacts],
        }
