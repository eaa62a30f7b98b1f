"""
Go module lookup.

Reads the go.mod enclosing a package and maps import paths to the
directories holding their sources: the module itself, its vendor/
tree, local replacements, then the module cache at the required version.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path

_MODULE_PATTERN = re.compile(r"^module\s+(\S+)")
_REQUIRE_PATTERN = re.compile(r"^(\S+)\s+(v\S+)$")
_REPLACE_PATTERN = re.compile(r"^(\S+)(?:\s+v\S+)?\s+=>\s+(\S+)(?:\s+(v\S+))?$")


@dataclass
class GoModule:
    """A go.mod file and the requirements it declares."""

    root: Path
    path: str
    requires: dict[str, str] = field(default_factory=dict)  # module path -> version
    replaces: dict[str, tuple[str, str | None]] = field(default_factory=dict)  # old -> (new, version)

    def package_path(self, directory: Path) -> str:
        relative = directory.resolve().relative_to(self.root).as_posix()
        return self.path if relative == "." else f"{self.path}/{relative}"

    def locate(self, import_path: str) -> Path | None:
        """
        Find the source directory of an imported package.

        Returns:
            The package directory, or None if no candidate exists on disk
        """
        candidates = []
        if _within(import_path, self.path):
            candidates.append(self.root / _relative(import_path, self.path))
        candidates.append(self.root / "vendor" / import_path)

        module = _longest_prefix(import_path, [*self.replaces, *self.requires])
        if module is not None:
            rest = _relative(import_path, module)
            if module in self.replaces:
                target, version = self.replaces[module]
                if _is_local(target):
                    candidates.append((self.root / target).resolve() / rest)
                elif version:
                    candidates.append(module_cache_dir() / f"{escape_module_path(target)}@{version}" / rest)
            else:
                version = self.requires[module]
                candidates.append(module_cache_dir() / f"{escape_module_path(module)}@{version}" / rest)

        return next((c for c in candidates if c.is_dir()), None)


def find_module(directory: Path) -> GoModule | None:
    """The module whose go.mod is nearest above the directory, if any."""
    directory = directory.resolve()
    for parent in [directory, *directory.parents]:
        go_mod = parent / "go.mod"
        if go_mod.is_file():
            module = parse_go_mod(go_mod.read_text(encoding="utf-8"), parent)
            if module is not None:
                return module
    return None


def parse_go_mod(content: str, root: Path) -> GoModule | None:
    """Parse the module, require and replace directives of a go.mod file."""
    module = None
    block = None
    for raw in content.splitlines():
        line = raw.split("//", 1)[0].strip()
        if not line:
            continue

        if block is not None:
            if line == ")":
                block = None
            else:
                _add_directive(module, block, line)
            continue

        match = _MODULE_PATTERN.match(line)
        if match:
            module = GoModule(root=root, path=match.group(1).strip('"'))
            continue

        verb, _, rest = line.partition(" ")
        if verb in ("require", "replace") and module is not None:
            rest = rest.strip()
            if rest == "(":
                block = verb
            else:
                _add_directive(module, verb, rest)
    return module


def _add_directive(module: GoModule, verb: str, line: str) -> None:
    if verb == "require":
        match = _REQUIRE_PATTERN.match(line)
        if match:
            module.requires[match.group(1)] = match.group(2)
    elif verb == "replace":
        match = _REPLACE_PATTERN.match(line)
        if match:
            module.replaces[match.group(1)] = (match.group(2), match.group(3))


def module_cache_dir() -> Path:
    """GOMODCACHE, falling back to GOPATH/pkg/mod and then ~/go/pkg/mod."""
    cache = os.environ.get("GOMODCACHE")
    if cache:
        return Path(cache)
    gopath = os.environ.get("GOPATH")
    if gopath:
        return Path(gopath.split(os.pathsep)[0]) / "pkg" / "mod"
    return Path.home() / "go" / "pkg" / "mod"


def escape_module_path(path: str) -> str:
    """Case-encode a module path the way the module cache stores it ("Azure" -> "!azure")."""
    return re.sub(r"[A-Z]", lambda m: "!" + m.group(0).lower(), path)


def is_standard_library(import_path: str) -> bool:
    # Only standard library paths lack a dot in their first element
    return "." not in import_path.split("/", 1)[0]


def _within(import_path: str, module: str) -> bool:
    return import_path == module or import_path.startswith(module + "/")


def _relative(import_path: str, module: str) -> str:
    return import_path[len(module) :].lstrip("/")


def _longest_prefix(import_path: str, modules: list[str]) -> str | None:
    matches = [m for m in modules if _within(import_path, m)]
    return max(matches, key=len) if matches else None


def _is_local(target: str) -> bool:
    return target.startswith(("./", "../", "/"))
