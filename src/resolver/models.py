"""Result models for dependency resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from errors import ResolveErrorKind

# Flat mapping of package name to its single chosen version.
ResolvedSet = Dict[str, str]


@dataclass(frozen=True)
class ErrorLeaf:
    """A dependency branch that could not be resolved while building a tree."""
    name: str
    requirement: Optional[str]
    kind: ResolveErrorKind
    message: str

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable view."""
        return {
            "name": self.name,
            "version_req": self.requirement,
            "error": self.message,
            "error_kind": self.kind.value,
        }


@dataclass
class DependencyTree:
    """Hierarchical view of a package and its dependencies, for display."""
    name: str
    version: str
    requirement: Optional[str] = None
    children: List[Union["DependencyTree", ErrorLeaf]] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """True if any branch below this node failed."""
        return any(
            isinstance(child, ErrorLeaf) or child.has_errors for child in self.children
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable view."""
        data: Dict[str, Any] = {"name": self.name, "version": self.version}
        if self.requirement is not None:
            data["version_req"] = self.requirement
        data["dependencies"] = [child.to_dict() for child in self.children]
        return data

    def render(self, indent: str = "  ") -> str:
        """Render the tree as indented text lines."""
        lines: List[str] = []
        self._render_into(lines, 0, indent)
        return "\n".join(lines)

    def _render_into(self, lines: List[str], level: int, indent: str) -> None:
        req = f" ({self.requirement})" if self.requirement else ""
        lines.append(f"{indent * level}{self.name} {self.version}{req}")
        for child in self.children:
            if isinstance(child, ErrorLeaf):
                req = f" ({child.requirement})" if child.requirement else ""
                lines.append(f"{indent * (level + 1)}{child.name}{req} !! {child.message}")
            else:
                child._render_into(lines, level + 1, indent)  # pylint: disable=protected-access
