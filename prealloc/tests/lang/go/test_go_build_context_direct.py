"""Direct tests for filename and //go:build filtering."""

from __future__ import annotations

import logging

import pytest

from prealloc.languages.go.build_context import (
    BuildContext,
    build_expression,
    default_context,
    evaluate_constraint,
    matches_filename,
    satisfies_constraint,
)

LINUX = BuildContext("linux", "amd64")
WINDOWS = BuildContext("windows", "arm64", cgo_enabled=False)


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("main.go", True),
        ("linux.go", True),
        ("io_linux.go", True),
        ("io_windows.go", False),
        ("io_amd64.go", True),
        ("io_arm64.go", False),
        ("io_linux_amd64.go", True),
        ("io_linux_arm64.go", False),
        ("io_windows_test.go", False),
        ("io_linux_test.go", True),
        ("io_other.go", True),
    ],
)
def test_matches_filename(filename, expected):
    assert matches_filename(filename, LINUX) is expected


def test_android_files_imply_linux():
    android = BuildContext("android", "arm64")
    assert matches_filename("x_linux.go", android) is True
    assert matches_filename("x_android.go", LINUX) is False


@pytest.mark.parametrize(
    ("expression", "linux", "windows"),
    [
        ("linux", True, False),
        ("!windows", True, False),
        ("linux || windows", True, True),
        ("linux && amd64", True, False),
        ("unix", True, False),
        ("(linux || darwin) && !cgo", False, False),
        ("cgo", True, False),
        ("go1.21", True, True),
        ("ignore", False, False),
        ("!(windows && arm64)", True, False),
    ],
)
def test_evaluate_constraint(expression, linux, windows):
    assert evaluate_constraint(expression, LINUX) is linux
    assert evaluate_constraint(expression, WINDOWS) is windows


def test_build_expression_reads_header_only():
    source = "// Copyright\n\n//go:build linux\n\npackage x\n"
    assert build_expression(source) == "linux"
    assert build_expression(b"package x\n\n//go:build linux\n") is None
    assert build_expression("/* header\n//go:build windows\n*/\npackage x\n") is None
    assert build_expression("//go:buildx linux\npackage x\n") is None


def test_missing_constraint_is_satisfied():
    assert satisfies_constraint(b"package x\n", WINDOWS) is True


def test_malformed_constraint_keeps_file(caplog):
    with caplog.at_level(logging.WARNING, logger="prealloc"):
        assert satisfies_constraint("//go:build linux &&\npackage x\n", WINDOWS, filename="x.go") is True
    assert "x.go" in caplog.text


def test_default_context_honors_environment(monkeypatch):
    monkeypatch.setenv("GOOS", "plan9")
    monkeypatch.setenv("GOARCH", "386")
    monkeypatch.setenv("CGO_ENABLED", "0")
    assert default_context() == BuildContext("plan9", "386", cgo_enabled=False)
