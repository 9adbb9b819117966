"""Path-keyed store of `Property` leaves.

Paths are POSIX-style and always normalised to absolute form, so
``"dboards/A/eeprom"`` and ``"/dboards/A/eeprom/"`` name the same leaf.
There is no global tree: whoever registers leaves is handed the tree
instance explicitly.
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Any, Callable, Optional

from loguru import logger

from rfplane.types import PropertyTreeError

from .property import NOVALUE, Property


def normalize_path(path: str) -> str:
    return str(PurePosixPath("/") / str(path))


def join_path(*parts: Any) -> str:
    return normalize_path("/".join(str(part) for part in parts))


class PropertyTree:
    """Hierarchical mapping of paths to properties."""

    def __init__(self):
        self._props: dict[str, Property] = {}

    def __contains__(self, path: str) -> bool:
        return self.exists(path)

    def __len__(self) -> int:
        return len(self._props)

    def create(
        self,
        path: str,
        value: Any = NOVALUE,
        *,
        coercer: Optional[Callable] = None,
        publisher: Optional[Callable] = None,
        read_only: bool = False,
    ) -> Property:
        """Create a leaf at `path`.

        Raises
        ------
        PropertyTreeError
            If the path already exists
        """
        path = normalize_path(path)
        if path in self._props:
            raise PropertyTreeError(f"Path {path} already exists")
        prop = Property(
            path, value, coercer=coercer, publisher=publisher, read_only=read_only
        )
        self._props[path] = prop
        logger.trace("Created property {}", path)
        return prop

    def access(self, path: str) -> Property:
        path = normalize_path(path)
        try:
            return self._props[path]
        except KeyError:
            raise PropertyTreeError(f"Path {path} not found in property tree")

    def exists(self, path: str) -> bool:
        return normalize_path(path) in self._props

    def get(self, path: str) -> Any:
        return self.access(path).get()

    def set(self, path: str, value: Any) -> Any:
        return self.access(path).set(value)

    def remove(self, path: str) -> int:
        """Remove the leaf at `path` and every leaf below it, return the count."""
        path = normalize_path(path)
        doomed = [p for p in self._props if p == path or p.startswith(path + "/")]
        if not doomed:
            raise PropertyTreeError(f"Path {path} not found in property tree")
        for p in doomed:
            del self._props[p]
        return len(doomed)

    def list(self, path: str = "/") -> list[str]:
        """Names of the direct children of `path`, sorted."""
        path = normalize_path(path)
        prefix = path.rstrip("/") + "/"
        children = set()
        for p in self._props:
            if p.startswith(prefix):
                children.add(p[len(prefix) :].split("/", 1)[0])
        return sorted(children)

    def walk(self, path: str = "/") -> list[str]:
        """All leaf paths at or below `path`, sorted."""
        path = normalize_path(path)
        prefix = path.rstrip("/") + "/"
        return sorted(p for p in self._props if p == path or p.startswith(prefix))
