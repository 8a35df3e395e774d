"""Project model: modules and path mappings."""

import os
from dataclasses import dataclass, field
from pathlib import Path


def normalize(path: Path) -> Path:
    """Collapse "." and ".." segments without touching the filesystem."""
    return Path(os.path.normpath(path))


@dataclass(frozen=True)
class Module:
    name: str
    content_roots: list[Path] = field(default_factory=list)  # first root hosts the build dir

    def content_root_for(self, path: Path) -> Path | None:
        """Return the (normalized) content root that contains `path`, or None."""
        path = normalize(path)
        for root in self.content_roots:
            root = normalize(root)
            if path.is_relative_to(root):
                return root
        return None


@dataclass(frozen=True)
class PathMapping:
    local_root: str
    remote_root: str
