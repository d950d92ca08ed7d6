"""
Inclusion test over module ids, evaluated before any parsing happens.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterable, Optional

import pathspec


def _compile(patterns: Iterable[str]) -> Optional[pathspec.PathSpec]:
    lines = list(patterns)
    return pathspec.PathSpec.from_lines("gitwildmatch", lines) if lines else None


@dataclass(frozen=True)
class SourceFilter:
    """
    Include/exclude filter using gitignore-style patterns.

    No include patterns means every id is included. Exclude always wins.
    Ids containing a NUL byte are virtual modules and never included.
    """
    include_spec: Optional[pathspec.PathSpec]
    exclude_spec: Optional[pathspec.PathSpec]
    root: Optional[Path] = None

    @classmethod
    def create(
        cls,
        include: Iterable[str] = (),
        exclude: Iterable[str] = (),
        root: Optional[Path] = None,
    ) -> SourceFilter:
        return cls(_compile(include), _compile(exclude), Path(root) if root else None)

    def _relative(self, source_id: str) -> str:
        path = Path(source_id)
        if self.root is not None and path.is_absolute():
            try:
                return path.relative_to(self.root).as_posix()
            except ValueError:
                pass
        return PurePosixPath(source_id.replace("\\", "/")).as_posix()

    def __call__(self, source_id: str) -> bool:
        if "\0" in source_id:
            return False

        rel = self._relative(source_id)
        if self.exclude_spec is not None and self.exclude_spec.match_file(rel):
            return False
        if self.include_spec is not None:
            return self.include_spec.match_file(rel)
        return True


__all__ = ["SourceFilter"]
