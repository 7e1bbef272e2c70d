"""
Path resolution for include directives and read requests

Three path literal forms are accepted:
    /abs/path.md      absolute, used verbatim
    @/partials/a.md   root-relative, resolved against the project root
    ./a.md, ../a.md   relative

A bare relative literal means different things depending on who asks:
inside an include directive it is relative to the including file's own
directory (path_resolve), while a top-level read request by name is
relative to the project root (path_resolveFromRoot).
"""

import os
import re
from pathlib import Path
from typing import List, Union

from ..config import appsettings

PathLike = Union[str, Path]

_SEPARATORS = re.compile(r"[\\/]")


def path_normalize(path: PathLike) -> Path:
    """Absolute, lexically normalized path (symlinks are not followed)"""
    return Path(os.path.abspath(os.fspath(path)))


def path_resolve(literal: str, root: PathLike, current_file: PathLike) -> Path:
    """
    Resolve a path literal found inside an include directive.

    Args:
        literal: Path exactly as written in the directive
        root: Project root
        current_file: Absolute path of the file containing the directive

    Returns:
        Absolute path of the referenced file

    Example:
        >>> path_resolve("./b.md", "/proj", "/proj/docs/a.md")
        PosixPath('/proj/docs/b.md')
        >>> path_resolve("@/b.md", "/proj", "/proj/docs/a.md")
        PosixPath('/proj/b.md')
    """
    if Path(literal).is_absolute():
        return Path(literal)

    if literal.startswith(appsettings.root_prefix):
        return path_normalize(Path(root) / literal[len(appsettings.root_prefix):])

    return path_normalize(Path(current_file).parent / literal)


def path_resolveFromRoot(literal: PathLike, root: PathLike) -> Path:
    """
    Resolve a path requested by name from outside any document.

    Bare relative literals are taken against the project root rather than
    against some including file.
    """
    literal = os.fspath(literal)
    if Path(literal).is_absolute():
        return Path(literal)

    if literal.startswith(appsettings.root_prefix):
        literal = literal[len(appsettings.root_prefix):]

    return path_normalize(Path(root) / literal)


def _segments(path: str) -> List[str]:
    return [segment for segment in _SEPARATORS.split(path) if segment]


def _leadingSlash_has(path: str) -> bool:
    return path.startswith("/") or path.startswith("\\")


def pathStartSegments_remove(path: str, count: int = 1) -> str:
    """
    Drop the first ``count`` segments of a path.

    Either separator is accepted on input; the result uses the platform
    separator and keeps a leading slash if the input had one.

    Example:
        >>> pathStartSegments_remove("src/rules/a.md")
        'rules/a.md'
        >>> pathStartSegments_remove("a/b", 2)
        ''
    """
    segments = _segments(path)
    if len(segments) <= count:
        return ""

    result = os.path.join(*segments[count:])
    if _leadingSlash_has(path):
        result = os.sep + result
    return result


def pathSegment_replace(path: str, match: str, replacement: str) -> str:
    """
    Replace the first run of segments equal to ``match`` with ``replacement``.

    When ``match`` does not occur the normalized input is returned.

    Example:
        >>> pathSegment_replace("src/rules/a.md", "rules", ".claude/rules")
        'src/.claude/rules/a.md'
    """
    segments = _segments(path)
    wanted = _segments(match)
    substitute = _segments(replacement)

    found = -1
    if wanted:
        for index in range(len(segments) - len(wanted) + 1):
            if segments[index:index + len(wanted)] == wanted:
                found = index
                break

    if found == -1:
        return os.path.normpath(path)

    joined = segments[:found] + substitute + segments[found + len(wanted):]
    result = os.path.join(*joined) if joined else ""
    if _leadingSlash_has(path) and not result.startswith(os.sep):
        result = os.sep + result
    return result
