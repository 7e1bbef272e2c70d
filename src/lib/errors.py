"""
Exceptions raised by content-factory

Only conditions that must abort the caller are exceptions; everything the
engine can recover from is reported through Diagnostics instead.
"""

from pathlib import Path
from typing import List, Sequence, Union


class CircularDependencyError(RuntimeError):
    """
    An include chain reached a file that is already being expanded

    Attributes:
        path: The file found already in flight
        chain: Absolute paths being expanded when the repeat was found,
               outermost first
    """

    def __init__(self, path: Union[str, Path], chain: Sequence[Union[str, Path]]) -> None:
        self.path = Path(path)
        self.chain: List[Path] = [Path(p) for p in chain]
        trail = " -> ".join(str(p) for p in [*self.chain, self.path])
        super().__init__(
            f"Circular dependency detected: {self.path} is already being processed.\n"
            f"Include chain: {trail}"
        )


class ConfigLoadError(RuntimeError):
    """The configuration module could not be located, imported or understood"""
