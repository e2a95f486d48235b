"""Turn command-line arguments into the ordered list of Go files to analyze.

An argument is one of:

* ``dir/...``  every package directory below ``dir``
* a directory  the ``.go`` files directly inside it
* a ``.go`` file
* an import path (``example.com/mod/pkg`` or ``example.com/mod/...``),
  looked up in the enclosing module, then ``$GOPATH/src`` and ``$GOROOT/src``

No arguments means the current directory.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path

from prealloc.errors import SourceResolutionError
from prealloc.file_discovery import find_source_dirs, is_excluded, source_files_in

logger = logging.getLogger(__name__)

GO_EXTENSION = ".go"
RECURSIVE_SUFFIX = "/..."
_MODULE_RE = re.compile(r'^\s*module\s+"?([^\s"]+)"?', re.MULTILINE)


@dataclass(frozen=True)
class ResolvedFile:
    """A file to parse; ``from_package`` marks import-path resolution."""

    path: Path
    from_package: bool = False


def find_module(start: Path) -> tuple[str, Path] | None:
    """Return (module path, module dir) from the nearest go.mod above ``start``."""
    start = start.resolve()
    for directory in (start, *start.parents):
        go_mod = directory / "go.mod"
        if not go_mod.is_file():
            continue
        match = _MODULE_RE.search(go_mod.read_text(errors="replace"))
        return (match.group(1), directory) if match else None
    return None


def gopath_roots() -> list[Path]:
    roots: list[Path] = []
    gopath = os.environ.get("GOPATH") or str(Path.home() / "go")
    roots.extend(Path(entry) / "src" for entry in gopath.split(os.pathsep) if entry)
    goroot = os.environ.get("GOROOT")
    if goroot:
        roots.append(Path(goroot) / "src")
    return roots


def resolve_import_path(import_path: str, *, cwd: Path | None = None) -> Path:
    """Map an import path to its package directory."""
    module = find_module(cwd or Path.cwd())
    if module is not None:
        module_path, module_dir = module
        if import_path == module_path:
            return module_dir
        if import_path.startswith(module_path + "/"):
            candidate = module_dir / import_path[len(module_path) + 1 :]
            if candidate.is_dir():
                return candidate
    for root in gopath_roots():
        candidate = root / import_path
        if candidate.is_dir():
            return candidate
    raise SourceResolutionError(f"cannot find package {import_path!r}")


def _package_dirs(root: Path, exclusions: tuple[str, ...]) -> list[Path]:
    dirs = find_source_dirs(root, GO_EXTENSION, exclusions)
    logger.debug("%s/... expands to %d package dir(s)", root, len(dirs))
    return dirs


def _resolve_argument(arg: str, exclusions: tuple[str, ...]) -> list[ResolvedFile]:
    prefix = arg[: -len(RECURSIVE_SUFFIX)] if arg.endswith(RECURSIVE_SUFFIX) else None
    if prefix is not None and Path(prefix).is_dir():
        return [
            ResolvedFile(path)
            for directory in _package_dirs(Path(prefix), exclusions)
            for path in source_files_in(directory, GO_EXTENSION)
        ]

    path = Path(arg)
    if path.is_dir():
        return [ResolvedFile(p) for p in source_files_in(path, GO_EXTENSION)]
    if path.exists():
        if not arg.endswith(GO_EXTENSION):
            raise SourceResolutionError(f"invalid file {arg} specified")
        return [ResolvedFile(path)]

    if prefix is not None:
        directories = _package_dirs(resolve_import_path(prefix), exclusions)
    else:
        directories = [resolve_import_path(arg)]
    return [
        ResolvedFile(p, from_package=True)
        for directory in directories
        for p in source_files_in(directory, GO_EXTENSION, skip_hidden=True)
    ]


def resolve_inputs(
    args: list[str] | tuple[str, ...],
    *,
    exclusions: tuple[str, ...] = (),
) -> list[ResolvedFile]:
    """Resolve arguments in order; a file reached twice is kept once."""
    resolved: list[ResolvedFile] = []
    seen: set[Path] = set()
    for arg in args or ["."]:
        for item in _resolve_argument(arg, exclusions):
            key = item.path.resolve()
            if key in seen:
                continue
            if is_excluded(item.path, exclusions):
                logger.debug("excluded %s", item.path)
                continue
            seen.add(key)
            resolved.append(item)
    return resolved


__all__ = [
    "ResolvedFile",
    "find_module",
    "gopath_roots",
    "resolve_import_path",
    "resolve_inputs",
]
