"""Load every requested Go file, or fail before any analysis runs."""

from __future__ import annotations

import logging

from prealloc.languages.go.build_context import (
    BuildContext,
    default_context,
    matches_filename,
    satisfies_constraint,
)
from prealloc.languages.go.parsing import GoSourceFile, parse_file
from prealloc.languages.go.resolution import resolve_inputs

logger = logging.getLogger(__name__)


def belongs_to_package(source_file: GoSourceFile, context: BuildContext | None = None) -> bool:
    """Whether a file found by import path is part of the package proper.

    cgo files, external ``_test`` packages and files whose ``//go:build``
    line rules them out for ``context`` are left out.
    """
    if source_file.is_cgo:
        return False
    if source_file.package_name.endswith("_test"):
        return False
    context = context or default_context()
    return satisfies_constraint(source_file.source, context, filename=source_file.filename)


def load_sources(
    args: list[str] | tuple[str, ...],
    *,
    exclusions: tuple[str, ...] = (),
    context: BuildContext | None = None,
) -> list[GoSourceFile]:
    context = context or default_context()
    files: list[GoSourceFile] = []
    for resolved in resolve_inputs(args, exclusions=exclusions):
        if resolved.from_package and not matches_filename(resolved.path.name, context):
            logger.debug("skipping %s (not built for %s/%s)", resolved.path, context.goos, context.goarch)
            continue
        source_file = parse_file(resolved.path)
        if resolved.from_package and not belongs_to_package(source_file, context):
            logger.debug("skipping %s (not part of package build)", resolved.path)
            continue
        files.append(source_file)
    return files


__all__ = ["belongs_to_package", "load_sources"]
