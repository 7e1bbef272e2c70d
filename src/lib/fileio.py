"""
File system plumbing: discovery, raw reads, output writes and deletion
"""

import fnmatch
import os
import re
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from ..config import appsettings
from ..models.config import OutputFile
from ..models.diagnostics import DiagnosticKind
from .log import Diagnostics
from .paths import PathLike, path_normalize


def raw_read(path: PathLike) -> str:
    """
    Read a file's raw text.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    return Path(path).read_text(encoding=appsettings.encoding)


def _ignored(relative: str, ignore: Sequence[str]) -> bool:
    candidate = relative.replace(os.sep, "/")
    for pattern in ignore:
        if fnmatch.fnmatch(candidate, pattern) or fnmatch.fnmatch("/" + candidate, pattern):
            return True
        # "**/name/**" also covers a top-level "name/" directory
        if pattern.startswith("**/") and fnmatch.fnmatch(candidate, pattern[3:]):
            return True
    return False


_MAGIC = "*?["


def _segment_translate(segment: str) -> str:
    out = []
    i, n = 0, len(segment)
    while i < n:
        c = segment[i]
        i += 1
        if c == "*":
            out.append("[^/]*")
        elif c == "?":
            out.append("[^/]")
        elif c == "[":
            j = segment.find("]", i + 1 if i < n and segment[i] in "!^" else i)
            if j < 0 or j == i:
                out.append(re.escape(c))
                continue
            body = segment[i:j]
            i = j + 1
            if body[:1] in ("!", "^"):
                body = "^" + body[1:]
            out.append("[" + body.replace("\\", "\\\\") + "]")
        else:
            out.append(re.escape(c))
    return "".join(out)


def pattern_compile(pattern: str) -> re.Pattern:
    """
    Compile a relative glob pattern into a regex over posix paths.

    ``*``, ``?`` and ``[...]`` stay within one segment; a ``**`` segment
    spans any number of directories, including none.
    """
    segments = [s for s in pattern.replace(os.sep, "/").split("/") if s not in ("", ".")]
    parts = []
    for index, segment in enumerate(segments):
        last = index == len(segments) - 1
        if segment == "**":
            parts.append(".*" if last else "(?:[^/]+/)*")
        else:
            parts.append(_segment_translate(segment) + ("" if last else "/"))
    return re.compile("".join(parts) + r"\Z")


def pattern_split(pattern: str, base: Path) -> Tuple[Path, str]:
    """
    Split a glob pattern into the directory to walk and the pattern to
    match below it.

    Leading segments without wildcards are folded into the walk
    directory, so absolute patterns are walked from their own fixed
    prefix rather than from ``base``.
    """
    posix = pattern.replace(os.sep, "/")
    start = Path(posix).anchor if os.path.isabs(posix) else None
    segments = posix[len(start):].split("/") if start else posix.split("/")

    fixed = []
    while len(segments) > 1 and not any(c in segments[0] for c in _MAGIC):
        fixed.append(segments.pop(0))
    walk_root = Path(start) if start else base
    return path_normalize(walk_root.joinpath(*fixed)), "/".join(segments)


def files_find(
    patterns: Iterable[str],
    root: PathLike,
    ignore: Optional[Sequence[str]] = None,
    max_depth: Optional[int] = None,
) -> List[Path]:
    """
    Find files matching any of the glob patterns.

    Relative patterns are matched under ``root``; absolute ones are walked
    from their own fixed prefix. Dot files are matched. Directories matching
    ``ignore`` (see AppSettings.glob_ignore) are pruned during the walk, and
    the walk does not descend more than ``max_depth`` directories below
    root (below its own start for absolute patterns outside root).

    Returns:
        Sorted, de-duplicated absolute paths
    """
    base = path_normalize(root)
    ignore = appsettings.glob_ignore if ignore is None else ignore
    depth_limit = appsettings.glob_max_depth if max_depth is None else max_depth

    found = set()
    for pattern in patterns:
        walk_root, remainder = pattern_split(pattern, base)
        matcher = pattern_compile(remainder)
        # depth and ignore rules count from root whenever the walk starts inside it
        anchor = base if walk_root == base or base in walk_root.parents else walk_root
        for dirpath, dirnames, filenames in os.walk(walk_root):
            current = Path(dirpath)
            below_walk = current.relative_to(walk_root).as_posix()
            below_anchor = current.relative_to(anchor).as_posix()
            prefix = "" if below_walk == "." else below_walk + "/"
            anchored = "" if below_anchor == "." else below_anchor + "/"
            if anchored.count("/") >= depth_limit:
                dirnames[:] = []
            else:
                dirnames[:] = [d for d in dirnames if not _ignored(anchored + d + "/", ignore)]
            for name in filenames:
                if matcher.match(prefix + name) and not _ignored(anchored + name, ignore):
                    found.add(path_normalize(current / name))

    return sorted(found)


def files_write(
    files: Iterable[OutputFile],
    output_root: PathLike,
    diagnostics: Optional[Diagnostics] = None,
) -> List[Path]:
    """
    Write output files, creating parent directories as needed.

    Absolute paths are used as given; relative ones land under
    ``output_root``.

    Returns:
        Paths written, in order
    """
    written = []
    for output in files:
        destination = Path(output.path)
        if not destination.is_absolute():
            destination = path_normalize(Path(output_root) / destination)

        if diagnostics is not None:
            diagnostics.info(f"Writing file: {destination}")
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(output.content, encoding=appsettings.encoding)
        written.append(destination)
    return written


def files_delete(
    patterns: Sequence[str],
    root: PathLike,
    diagnostics: Optional[Diagnostics] = None,
) -> List[Path]:
    """
    Delete every file under ``root`` matching the glob patterns.

    A file that cannot be removed is reported and skipped.

    Returns:
        Paths actually deleted
    """
    if not patterns:
        return []

    targets = files_find(patterns, root, ignore=[], max_depth=1 << 16)
    if not targets:
        return []

    if diagnostics is not None:
        diagnostics.info(f"Deleting {len(targets)} files...")

    deleted = []
    for target in targets:
        try:
            target.unlink()
        except OSError as e:
            if diagnostics is not None:
                diagnostics.error(
                    DiagnosticKind.DELETE_FAILURE,
                    f"Failed to delete: {target} ({e})",
                    path=str(target),
                )
            continue
        deleted.append(target)
        if diagnostics is not None:
            diagnostics.info(f"  - Deleted: {target}")
    return deleted
