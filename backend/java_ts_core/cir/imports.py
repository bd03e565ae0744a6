from __future__ import annotations

from typing import List, Optional, Sequence

from ..cache import ResultCache, fingerprint
from .model import ImportStatement
from .type_system import TypeSystem


def directory_depth(location: str) -> int:
    """Number of path segments before the final '/' ("entity/customize/Foo" -> 2)."""
    if "/" not in location:
        return 0
    directory = location[: location.rindex("/")]
    return len(directory.split("/")) if directory else 0


def relative_import_path(current_location: Optional[str], target_location: str) -> str:
    """
    Purely syntactic: climb out of the current directory, then descend
    into the target's logical location.

      ("entity/customize/Foo", "utils/base/AbstractEntity")
          -> "../../utils/base/AbstractEntity"
    """
    if not current_location:
        return f"./{target_location}"
    return "../" * directory_depth(current_location) + target_location


class ImportResolver:
    """
    Dependency names -> import statements, memoized per
    (dependency list, current location).
    """

    def __init__(self, types: TypeSystem, cache: Optional[ResultCache] = None) -> None:
        self.types = types
        self.cache = cache if cache is not None else ResultCache("imports")

    def _cache_key(self, dependencies: Sequence[str], current_location: Optional[str]) -> str:
        return fingerprint(",".join(dependencies) + "\0" + (current_location or ""))

    def resolve(
        self,
        dependencies: Sequence[str],
        current_location: Optional[str] = None,
    ) -> List[ImportStatement]:
        key = self._cache_key(dependencies, current_location)
        cached = self.cache.get(key)
        if cached is not None:
            return list(cached)

        statements: List[ImportStatement] = []
        seen: set[str] = set()
        for dep in dependencies:
            if not dep or dep in seen or self.types.is_built_in(dep):
                continue
            seen.add(dep)

            target = self.types.location_of(dep)
            if target and current_location:
                path = relative_import_path(current_location, target)
            else:
                # unregistered, or nowhere to climb from: assume same directory
                path = f"./{dep}"
            statements.append(ImportStatement(name=dep, path=path))

        self.cache.put(key, tuple(statements))
        return statements
