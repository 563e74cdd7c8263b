"""
Static asset store.

Resolves request paths to files inside the assets directory and refuses
anything that would land outside of it.
"""

import os
from pathlib import Path

from ..errors import NotFound, PathTraversal

CONTENT_TYPES = {
    ".js": "application/javascript",
    ".css": "text/css",
    ".html": "text/html",
}
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def content_type_for(file_name: str) -> str:
    """Infer the content type from the file extension."""
    return CONTENT_TYPES.get(os.path.splitext(file_name)[1].lower(), DEFAULT_CONTENT_TYPE)


class AssetStore:
    """Read-only view of the built widget assets."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def exists(self) -> bool:
        return self.root.is_dir()

    def list_files(self):
        if not self.exists():
            return []
        return sorted(os.listdir(self.root))

    def _safe_path(self, file_name: str) -> str:
        """
        Resolve ``file_name`` under the root, following symlinks.

        The resolved path must stay strictly inside the root; anything else
        raises ``PathTraversal``.
        """
        safe_base = os.path.realpath(self.root)
        target_path = os.path.realpath(os.path.join(safe_base, file_name))

        if target_path == safe_base or safe_base != os.path.commonpath([safe_base, target_path]):
            raise PathTraversal(file_name)
        return target_path

    def resolve(self, file_name: str) -> str:
        """
        Return the absolute path of an existing asset file.

        Raises:
            PathTraversal: the path escapes the assets root (or is empty).
            NotFound: no regular file at that path.
        """
        if not file_name or ".." in Path(file_name).parts or os.path.isabs(file_name):
            raise PathTraversal(file_name)

        full_path = self._safe_path(file_name)
        if not os.path.isfile(full_path):
            raise NotFound(f"File not found: {file_name}")
        return full_path
