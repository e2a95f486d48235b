"""Direct tests for resolving CLI arguments into Go files."""

from __future__ import annotations

from pathlib import Path

import pytest

from prealloc.errors import SourceResolutionError
from prealloc.languages.go.resolution import (
    find_module,
    resolve_import_path,
    resolve_inputs,
)
from prealloc.languages.go.sources import load_sources

_MAIN = "package main\n\nfunc main() {}\n"


def _write(root: Path, rel_path: str, content: str = _MAIN) -> Path:
    path = root / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


@pytest.fixture
def project(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PREALLOC_ROOT", str(tmp_path))
    monkeypatch.setenv("GOPATH", str(tmp_path / "gopath"))
    monkeypatch.delenv("GOROOT", raising=False)
    return tmp_path


def _paths(resolved) -> list[str]:
    return [item.path.as_posix() for item in resolved]


def test_no_arguments_means_current_directory(project):
    _write(project, "b.go")
    _write(project, "a.go")
    _write(project, "sub/c.go")
    assert _paths(resolve_inputs([])) == ["a.go", "b.go"]


def test_directory_argument_is_not_recursive(project):
    _write(project, "pkg/a.go")
    _write(project, "pkg/inner/b.go")
    _write(project, "pkg/notes.txt", "not go")
    assert _paths(resolve_inputs(["pkg"])) == ["pkg/a.go"]


def test_recursive_marker_walks_package_dirs(project):
    _write(project, "pkg/a.go")
    _write(project, "pkg/inner/b.go")
    _write(project, "pkg/testdata/fixture.go")
    _write(project, "pkg/_scratch/c.go")
    _write(project, "pkg/.hidden/d.go")
    _write(project, "pkg/vendor/dep/e.go")
    assert _paths(resolve_inputs(["pkg/..."])) == ["pkg/a.go", "pkg/inner/b.go"]


def test_explicit_file_and_invalid_file(project):
    _write(project, "one.go")
    _write(project, "README.md", "# readme")
    assert _paths(resolve_inputs(["one.go"])) == ["one.go"]
    with pytest.raises(SourceResolutionError, match="invalid file README.md specified"):
        resolve_inputs(["README.md"])


def test_duplicates_are_dropped_in_argument_order(project):
    _write(project, "pkg/a.go")
    _write(project, "pkg/b.go")
    assert _paths(resolve_inputs(["pkg/b.go", "pkg"])) == ["pkg/b.go", "pkg/a.go"]


def test_exclusions_apply_to_resolved_files(project):
    _write(project, "pkg/a.go")
    _write(project, "pkg/gen/b.go")
    _write(project, "pkg/c_mock.go")
    resolved = resolve_inputs(["pkg/..."], exclusions=("gen", "*_mock.go"))
    assert _paths(resolved) == ["pkg/a.go"]


def test_import_path_resolves_through_go_mod(project):
    _write(project, "go.mod", "module example.com/app\n\ngo 1.22\n")
    _write(project, "internal/store/store.go", "package store\n")
    assert find_module(project) == ("example.com/app", project.resolve())
    resolved = resolve_inputs(["example.com/app/internal/store"])
    assert [item.path.name for item in resolved] == ["store.go"]
    assert all(item.from_package for item in resolved)


def test_import_path_resolves_through_gopath(project):
    _write(project, "gopath/src/github.com/acme/lib/lib.go", "package lib\n")
    directory = resolve_import_path("github.com/acme/lib", cwd=project)
    assert directory == project / "gopath" / "src" / "github.com" / "acme" / "lib"


def test_import_path_pattern_expands_below_package(project):
    _write(project, "go.mod", "module example.com/app\n")
    _write(project, "cmd/one/main.go")
    _write(project, "cmd/two/main.go")
    resolved = resolve_inputs(["example.com/app/cmd/..."])
    assert [item.path.parent.name for item in resolved] == ["one", "two"]


def test_unknown_import_path_raises(project):
    with pytest.raises(SourceResolutionError, match="cannot find package"):
        resolve_inputs(["example.com/missing"])


def test_load_sources_skips_cgo_and_external_tests_for_packages(project):
    _write(project, "go.mod", "module example.com/app\n")
    _write(project, "lib/lib.go", "package lib\n")
    _write(project, "lib/lib_test.go", "package lib\n")
    _write(project, "lib/ext_test.go", "package lib_test\n")
    _write(project, "lib/native.go", 'package lib\n\nimport "C"\n')
    _write(project, "lib/_ignored.go", "package lib\n")
    files = load_sources(["example.com/app/lib"])
    assert sorted(Path(f.filename).name for f in files) == ["lib.go", "lib_test.go"]


def test_load_sources_keeps_every_file_of_a_directory(project):
    _write(project, "lib/lib.go", "package lib\n")
    _write(project, "lib/ext_test.go", "package lib_test\n")
    files = load_sources(["lib"])
    assert [Path(f.filename).name for f in files] == ["ext_test.go", "lib.go"]


def test_load_sources_aborts_on_first_parse_error(project):
    from prealloc.errors import SourceParseError

    _write(project, "ok.go")
    _write(project, "bad.go", "package main\n\nfunc (\n")
    with pytest.raises(SourceParseError, match="bad.go"):
        load_sources([])


def test_load_sources_applies_build_context_to_packages(project):
    from prealloc.languages.go.build_context import BuildContext

    _write(project, "go.mod", "module example.com/app\n")
    _write(project, "sys/sys.go", "package sys\n")
    _write(project, "sys/sys_linux.go", "package sys\n")
    _write(project, "sys/sys_windows.go", "package sys\n")
    _write(project, "sys/sys_linux_arm64.go", "package sys\n")
    _write(project, "sys/tagged.go", "//go:build windows\n\npackage sys\n")
    _write(project, "sys/unix.go", "//go:build unix && !plan9\n\npackage sys\n")
    linux = BuildContext("linux", "amd64")
    files = load_sources(["example.com/app/sys"], context=linux)
    assert sorted(Path(f.filename).name for f in files) == [
        "sys.go",
        "sys_linux.go",
        "unix.go",
    ]


def test_load_sources_does_not_parse_files_for_other_platforms(project):
    from prealloc.languages.go.build_context import BuildContext

    _write(project, "go.mod", "module example.com/app\n")
    _write(project, "sys/sys.go", "package sys\n")
    _write(project, "sys/sys_windows.go", "package sys\n\nfunc (\n")
    files = load_sources(["example.com/app/sys"], context=BuildContext("linux", "amd64"))
    assert [Path(f.filename).name for f in files] == ["sys.go"]


def test_directory_arguments_ignore_build_context(project):
    from prealloc.languages.go.build_context import BuildContext

    _write(project, "sys/sys_windows.go", "package sys\n")
    _write(project, "sys/tagged.go", "//go:build ignore\n\npackage sys\n")
    files = load_sources(["sys"], context=BuildContext("linux", "amd64"))
    assert [Path(f.filename).name for f in files] == ["sys_windows.go", "tagged.go"]
