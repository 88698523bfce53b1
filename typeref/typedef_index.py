"""
Module typedef index.

Maps a resolved module id to the union of typedef names declared by every file
that resolved to it, so bare type names can be qualified with their module.
"""

from typing import Dict, FrozenSet, Iterable, List, Optional, Set


class ModuleTypeDefIndex:
    """
    Append-only index of typedef names per module id.

    The empty module id ('') is a regular key holding typedefs of files
    without module scope.
    """

    def __init__(self):
        self._typedefs: Dict[str, Set[str]] = {}  # module_id -> {name, ...}

    def record_typedefs(self, module_id: str, names: Iterable[str]):
        """Union-merge names into the module's entry, creating it on first sight."""
        self._typedefs.setdefault(module_id, set()).update(names)

    def lookup(self, module_id: str) -> Optional[FrozenSet[str]]:
        """
        Get the typedef names known for a module.

        Returns:
            The names, or None when no file has resolved to module_id. An
            empty set means files were seen but declared no typedefs.
        """
        names = self._typedefs.get(module_id)
        if names is None:
            return None
        return frozenset(names)

    def module_ids(self) -> List[str]:
        return sorted(self._typedefs)

    def clear(self):
        self._typedefs.clear()

    def to_dict(self) -> Dict[str, List[str]]:
        """Convert to dictionary for JSON serialization."""
        return {module_id: sorted(names) for module_id, names in sorted(self._typedefs.items())}

    def __contains__(self, module_id: str) -> bool:
        return module_id in self._typedefs

    def __len__(self) -> int:
        return len(self._typedefs)
