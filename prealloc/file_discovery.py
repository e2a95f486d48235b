"""File discovery: project root, exclusion matching, and Go package traversal."""

from __future__ import annotations

import fnmatch
import os
from pathlib import Path

__all__ = [
    "PRUNED_DIR_NAMES",
    "find_source_dirs",
    "get_project_root",
    "is_excluded",
    "matches_exclusion",
    "rel",
    "source_files_in",
]

# Directories the Go tool never treats as packages when expanding ``dir/...``.
PRUNED_DIR_NAMES = frozenset({"testdata", "vendor", "node_modules"})


def get_project_root() -> Path:
    """Return $PREALLOC_ROOT when set, else the current directory."""
    return Path(os.environ.get("PREALLOC_ROOT", Path.cwd())).resolve()


def matches_exclusion(rel_path: str, exclusion: str) -> bool:
    """Check if a relative path matches an exclusion pattern (path-component aware).

    Matches if exclusion is a path component (e.g. "gen" matches "gen/foo.go"
    or "pkg/gen/bar.go") or a directory prefix (e.g. "pkg/gen" matches
    "pkg/gen/bar.go"). Does NOT do substring matching: "gen" will NOT match
    "generator.go".

    Glob-style ``*`` is supported per component: ``*_mock.go`` matches any
    file ending in ``_mock.go``.
    """
    parts = Path(rel_path).parts
    if exclusion in parts:
        return True
    if "*" in exclusion:
        if any(fnmatch.fnmatch(part, exclusion) for part in parts):
            return True
    if "/" in exclusion or os.sep in exclusion:
        normalized = exclusion.rstrip("/").rstrip(os.sep)
        return rel_path.startswith(normalized + "/") or rel_path.startswith(
            normalized + os.sep
        )
    return False


def _normalize_path_separators(path: str) -> str:
    return path.replace("\\", "/")


def _safe_relpath(path: str | Path, start: str | Path) -> str:
    try:
        return os.path.relpath(str(path), str(start))
    except ValueError:
        return str(Path(path).resolve())


def rel(path: str | Path) -> str:
    root = get_project_root()
    resolved = Path(path).resolve()
    try:
        return _normalize_path_separators(str(resolved.relative_to(root)))
    except ValueError:
        return _normalize_path_separators(_safe_relpath(resolved, root))


def is_excluded(path: str | Path, exclusions: tuple[str, ...]) -> bool:
    if not exclusions:
        return False
    rel_path = rel(path)
    return any(matches_exclusion(rel_path, exclusion) for exclusion in exclusions)


def source_files_in(
    directory: str | Path,
    extension: str = ".go",
    *,
    skip_hidden: bool = False,
) -> list[Path]:
    """Source files directly inside ``directory``, sorted by name.

    ``skip_hidden`` drops names starting with ``.`` or ``_``, which the Go
    build tool ignores but a plain directory parse does not.
    """
    directory = Path(directory)
    files = []
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if not entry.is_file() or not entry.name.endswith(extension):
            continue
        if skip_hidden and entry.name.startswith((".", "_")):
            continue
        files.append(entry)
    return files


def _is_pruned_dir(name: str, rel_path: str, extra: tuple[str, ...]) -> bool:
    if name in PRUNED_DIR_NAMES or name.startswith((".", "_")):
        return True
    return bool(
        extra
        and any(
            matches_exclusion(rel_path, exclusion) or exclusion == name
            for exclusion in extra
        )
    )


def find_source_dirs(
    root: str | Path,
    extension: str = ".go",
    exclusions: tuple[str, ...] = (),
) -> list[Path]:
    """Every directory at or below ``root`` holding at least one source file.

    Uses os.walk and prunes during traversal; the result is sorted.
    """
    project_root = get_project_root()
    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = _normalize_path_separators(_safe_relpath(dirpath, project_root))
        dirnames[:] = sorted(
            d
            for d in dirnames
            if not _is_pruned_dir(d, rel_dir + "/" + d, exclusions)
        )
        if any(name.endswith(extension) for name in filenames):
            found.append(Path(dirpath))
    return sorted(found)
