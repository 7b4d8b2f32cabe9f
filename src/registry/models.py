"""Package records served by the package index collaborators."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class VersionedRelease:
    """A published version of a package."""
    version: str
    expression_data: Any = None
    checksum: Optional[str] = None


@dataclass
class Package:
    """Package metadata as seen by the resolver."""
    name: str
    dependencies: Dict[str, str] = field(default_factory=dict)
    versions: List[VersionedRelease] = field(default_factory=list)
    title: Optional[str] = None
    description: Optional[str] = None

    @property
    def version_strings(self) -> List[str]:
        """Version strings in storage order."""
        return [release.version for release in self.versions]

    def get_version(self, version: str) -> Optional[VersionedRelease]:
        """Return the release with the exact version string, if any."""
        for release in self.versions:
            if release.version == version:
                return release
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Package":
        """Build a Package from an index document or API record.

        ``versions`` entries may be mappings with a ``version`` key or plain
        version strings. Missing ``dependencies`` means none.
        """
        releases = []
        for entry in data.get("versions") or []:
            if isinstance(entry, dict):
                releases.append(
                    VersionedRelease(
                        version=str(entry.get("version")),
                        expression_data=entry.get("expression_data"),
                        checksum=entry.get("checksum"),
                    )
                )
            else:
                releases.append(VersionedRelease(version=str(entry)))
        return cls(
            name=data["name"],
            dependencies=dict(data.get("dependencies") or {}),
            versions=releases,
            title=data.get("title"),
            description=data.get("description"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable view."""
        return {
            "name": self.name,
            "title": self.title,
            "description": self.description,
            "dependencies": dict(self.dependencies),
            "versions": [
                {
                    "version": r.version,
                    "expression_data": r.expression_data,
                    "checksum": r.checksum,
                }
                for r in self.versions
            ],
        }
