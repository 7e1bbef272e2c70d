"""
Visitation set for cycle detection during include expansion
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Union


class VisitationSet:
    """
    Absolute paths currently being expanded on the active recursion path

    Insertion order is kept so that a cycle report can show the include
    chain from the root document down to the repeated file. One instance
    belongs to exactly one top-level document and is shared by reference
    through every recursive call for that document.
    """

    def __init__(self) -> None:
        self._paths: Dict[Path, None] = {}

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __len__(self) -> int:
        return len(self._paths)

    def __iter__(self) -> Iterator[Path]:
        return iter(list(self._paths))

    def chain(self) -> List[Path]:
        """Visited paths, outermost first"""
        return list(self._paths)

    @contextmanager
    def visiting(self, path: Union[str, Path]) -> Iterator[Path]:
        """
        Mark ``path`` as in flight for the duration of the block

        The path is released on exit whether the block succeeds or raises,
        so the same file may be expanded again from a sibling branch.

        Raises:
            CircularDependencyError: If ``path`` is already in flight
        """
        from ..lib.errors import CircularDependencyError

        key = Path(path)
        if key in self._paths:
            raise CircularDependencyError(key, self.chain())

        self._paths[key] = None
        try:
            yield key
        finally:
            self._paths.pop(key, None)
