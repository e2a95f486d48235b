"""Decide which files of an import-path package the Go toolchain would build.

Two rules are applied, in the same way ``go build`` applies them for the
host (or ``$GOOS``/``$GOARCH``):

* filename suffixes such as ``_windows.go`` or ``_linux_arm64.go``
* a ``//go:build`` expression in the file header
"""

from __future__ import annotations

import logging
import os
import platform
import re
import sys
from dataclasses import dataclass

logger = logging.getLogger(__name__)

KNOWN_OS = frozenset({
    "aix", "android", "darwin", "dragonfly", "freebsd", "hurd", "illumos",
    "ios", "js", "linux", "nacl", "netbsd", "openbsd", "plan9", "solaris",
    "wasip1", "windows", "zos",
})

KNOWN_ARCH = frozenset({
    "386", "amd64", "amd64p32", "arm", "armbe", "arm64", "arm64be",
    "loong64", "mips", "mipsle", "mips64", "mips64le", "mips64p32",
    "mips64p32le", "ppc", "ppc64", "ppc64le", "riscv", "riscv64", "s390",
    "s390x", "sparc", "sparc64", "wasm",
})

UNIX_OS = frozenset({
    "aix", "android", "darwin", "dragonfly", "freebsd", "hurd", "illumos",
    "ios", "linux", "netbsd", "openbsd", "solaris",
})

_HOST_OS = {"win32": "windows", "cygwin": "windows", "emscripten": "js"}
_HOST_ARCH = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "arm",
    "armv6l": "arm",
    "ppc64le": "ppc64le",
    "s390x": "s390x",
    "riscv64": "riscv64",
}

# A GOOS that also satisfies its parent platform tag.
_IMPLIED_OS = {"android": "linux", "illumos": "solaris", "ios": "darwin"}

_TOKEN_RE = re.compile(r"\s*(&&|\|\||!|\(|\)|[A-Za-z0-9_.]+)")


@dataclass(frozen=True)
class BuildContext:
    goos: str
    goarch: str
    cgo_enabled: bool = True

    def matches_tag(self, tag: str) -> bool:
        if tag == self.goos or tag == self.goarch:
            return True
        if tag == "unix":
            return self.goos in UNIX_OS
        if tag == "cgo":
            return self.cgo_enabled
        if tag == "gc":
            return True
        if tag.startswith("go1."):
            # Release tags are satisfied by any current toolchain.
            return True
        return _IMPLIED_OS.get(self.goos) == tag


def default_context() -> BuildContext:
    goos = os.environ.get("GOOS") or _HOST_OS.get(sys.platform, sys.platform.rstrip("0123456789"))
    machine = platform.machine().lower()
    goarch = os.environ.get("GOARCH") or _HOST_ARCH.get(machine, machine)
    cgo_enabled = os.environ.get("CGO_ENABLED", "1") == "1"
    return BuildContext(goos, goarch, cgo_enabled)


def matches_filename(filename: str, context: BuildContext) -> bool:
    """Apply the ``name_GOOS_GOARCH.go`` convention."""
    stem = os.path.basename(filename)
    if stem.endswith(".go"):
        stem = stem[: -len(".go")]
    if stem.endswith("_test"):
        stem = stem[: -len("_test")]
    # The first element is the name itself, never a constraint.
    parts = stem.split("_")[1:]
    if len(parts) >= 2 and parts[-2] in KNOWN_OS and parts[-1] in KNOWN_ARCH:
        return context.matches_tag(parts[-2]) and context.matches_tag(parts[-1])
    if parts and parts[-1] in KNOWN_OS:
        return context.matches_tag(parts[-1])
    if parts and parts[-1] in KNOWN_ARCH:
        return context.matches_tag(parts[-1])
    return True


def build_expression(source: bytes | str) -> str | None:
    """Return the ``//go:build`` expression of the file header, if any."""
    text = source.decode("utf-8", errors="replace") if isinstance(source, bytes) else source
    in_block = False
    for raw in text.splitlines():
        line = raw.strip()
        if in_block:
            in_block = "*/" not in line
            continue
        if not line:
            continue
        if line.startswith("/*"):
            in_block = "*/" not in line[2:]
            continue
        if not line.startswith("//"):
            return None
        if line.startswith("//go:build"):
            rest = line[len("//go:build"):]
            if not rest or rest[0].isspace():
                return rest.strip()
    return None


class _ExpressionParser:
    """Recursive descent over ``||``, ``&&``, ``!``, parentheses and tags."""

    def __init__(self, expression: str, context: BuildContext):
        self.tokens = self._tokenize(expression)
        self.position = 0
        self.context = context

    @staticmethod
    def _tokenize(expression: str) -> list[str]:
        tokens: list[str] = []
        index = 0
        stripped = expression.rstrip()
        while index < len(stripped):
            match = _TOKEN_RE.match(stripped, index)
            if match is None:
                raise ValueError(f"unexpected character in {expression!r}")
            tokens.append(match.group(1))
            index = match.end()
        return tokens

    def _peek(self) -> str | None:
        return self.tokens[self.position] if self.position < len(self.tokens) else None

    def _take(self) -> str:
        token = self._peek()
        if token is None:
            raise ValueError("unexpected end of expression")
        self.position += 1
        return token

    def parse(self) -> bool:
        result = self._or()
        if self._peek() is not None:
            raise ValueError(f"unexpected token {self._peek()!r}")
        return result

    def _or(self) -> bool:
        result = self._and()
        while self._peek() == "||":
            self._take()
            # Both sides are parsed even when the left already holds.
            right = self._and()
            result = result or right
        return result

    def _and(self) -> bool:
        result = self._not()
        while self._peek() == "&&":
            self._take()
            right = self._not()
            result = result and right
        return result

    def _not(self) -> bool:
        if self._peek() == "!":
            self._take()
            return not self._not()
        return self._atom()

    def _atom(self) -> bool:
        token = self._take()
        if token == "(":
            result = self._or()
            if self._take() != ")":
                raise ValueError("missing )")
            return result
        if token in ("&&", "||", ")"):
            raise ValueError(f"unexpected token {token!r}")
        return self.context.matches_tag(token)


def evaluate_constraint(expression: str, context: BuildContext) -> bool:
    return _ExpressionParser(expression, context).parse()


def satisfies_constraint(source: bytes | str, context: BuildContext, *, filename: str = "") -> bool:
    """Whether the header's ``//go:build`` line (if any) holds for ``context``.

    A malformed expression keeps the file.
    """
    expression = build_expression(source)
    if expression is None:
        return True
    try:
        return evaluate_constraint(expression, context)
    except ValueError as exc:
        logger.warning("%s: ignoring malformed //go:build line: %s", filename or "<source>", exc)
        return True


__all__ = [
    "BuildContext",
    "KNOWN_ARCH",
    "KNOWN_OS",
    "build_expression",
    "default_context",
    "evaluate_constraint",
    "matches_filename",
    "satisfies_constraint",
]
