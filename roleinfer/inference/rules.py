"""Weighted heuristics mapping path, filename, extension and header evidence to roles."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from typing import Optional, Tuple

from ..models import Role, Signal, TestKind
from .scoring import RoleScore

HEADER_PROBE_BYTES = 2048


@dataclass(frozen=True)
class PathRule:
    """Substring of the lowercased path that suggests a role."""

    fragment: str
    role: Role
    weight: float


@dataclass(frozen=True)
class FilenameRule:
    """Basename pattern matched by prefix, suffix or containment."""

    pattern: str
    match_type: str
    role: Role
    weight: float
    sub_role: Optional[TestKind] = None

    def matches(self, filename: str) -> bool:
        pattern = self.pattern.lower()
        if self.match_type == "suffix":
            return filename.endswith(pattern)
        if self.match_type == "prefix":
            return filename.startswith(pattern)
        if self.match_type == "contains":
            return pattern in filename
        return False


@dataclass(frozen=True)
class ExtensionRule:
    """Final or compound file extension."""

    ext: str
    role: Role
    weight: float


@dataclass(frozen=True)
class HeaderRule:
    """Case-sensitive marker searched for in the file header."""

    pattern: str
    role: Role
    weight: float


PATH_RULES: Tuple[PathRule, ...] = (
    PathRule("/test/", Role.TEST, 0.60),
    PathRule("/tests/", Role.TEST, 0.60),
    PathRule("/__tests__/", Role.TEST, 0.60),
    PathRule("/spec/", Role.TEST, 0.55),
    PathRule("/unit/", Role.TEST, 0.60),
    PathRule("/integration/", Role.TEST, 0.65),
    PathRule("/e2e/", Role.TEST, 0.70),
    PathRule("/infra/", Role.INFRA, 0.65),
    PathRule("/terraform/", Role.INFRA, 0.65),
    PathRule("/pulumi/", Role.INFRA, 0.65),
    PathRule("/helm/", Role.INFRA, 0.65),
    PathRule("/.github/workflows/", Role.INFRA, 0.70),
    PathRule("/.gitlab-ci/", Role.INFRA, 0.70),
    PathRule("/ci/", Role.INFRA, 0.60),
    PathRule("/deploy/", Role.INFRA, 0.65),
    PathRule("/docs/", Role.DOCS, 0.65),
    PathRule("/doc/", Role.DOCS, 0.65),
    PathRule("/site/", Role.DOCS, 0.60),
    PathRule("/config/", Role.CONFIG, 0.55),
    PathRule("/configs/", Role.CONFIG, 0.55),
    PathRule("/scripts/", Role.SCRIPTS, 0.55),
    PathRule("/tools/", Role.SCRIPTS, 0.55),
    PathRule("/bin/", Role.SCRIPTS, 0.55),
    PathRule("/hack/", Role.SCRIPTS, 0.50),
    PathRule("/examples/", Role.EXAMPLES, 0.55),
    PathRule("/samples/", Role.EXAMPLES, 0.55),
    PathRule("/demo/", Role.EXAMPLES, 0.55),
    # Vendored trees are the most reliable path signal.
    PathRule("/vendor/", Role.VENDOR, 0.90),
    PathRule("/third_party/", Role.VENDOR, 0.90),
    PathRule("/node_modules/", Role.VENDOR, 0.95),
    PathRule("/dist/", Role.GENERATED, 0.70),
    PathRule("/build/", Role.GENERATED, 0.70),
    PathRule("/gen/", Role.GENERATED, 0.80),
    PathRule("/generated/", Role.GENERATED, 0.80),
    PathRule("/pb/", Role.GENERATED, 0.80),
)

FILENAME_RULES: Tuple[FilenameRule, ...] = (
    FilenameRule("_test.", "contains", Role.TEST, 0.75, TestKind.UNIT),
    FilenameRule(".spec.", "contains", Role.TEST, 0.70, TestKind.UNIT),
    FilenameRule(".test.", "contains", Role.TEST, 0.70, TestKind.UNIT),
    FilenameRule("_spec.", "contains", Role.TEST, 0.70, TestKind.UNIT),
    FilenameRule(".e2e.", "contains", Role.TEST, 0.80, TestKind.E2E),
    FilenameRule("_e2e.", "contains", Role.TEST, 0.80, TestKind.E2E),
    FilenameRule(".integration.", "contains", Role.TEST, 0.80, TestKind.INTEGRATION),
    FilenameRule("_integration.", "contains", Role.TEST, 0.80, TestKind.INTEGRATION),
    FilenameRule("_fixture.", "contains", Role.TEST, 0.60, TestKind.FIXTURE),
    FilenameRule("_mock.", "contains", Role.TEST, 0.55, TestKind.FIXTURE),
    FilenameRule("_stub.", "contains", Role.TEST, 0.55, TestKind.FIXTURE),
    FilenameRule("_fake.", "contains", Role.TEST, 0.55, TestKind.FIXTURE),
    FilenameRule("dockerfile", "prefix", Role.INFRA, 0.85),
    FilenameRule("docker-compose", "prefix", Role.INFRA, 0.80),
    FilenameRule("makefile", "prefix", Role.INFRA, 0.65),
    FilenameRule("taskfile", "prefix", Role.INFRA, 0.65),
    FilenameRule("justfile", "prefix", Role.INFRA, 0.65),
    FilenameRule(".tf", "suffix", Role.INFRA, 0.90),
    FilenameRule(".tfvars", "suffix", Role.INFRA, 0.90),
    FilenameRule("helmfile", "prefix", Role.INFRA, 0.85),
    FilenameRule(".hcl", "suffix", Role.INFRA, 0.80),
    FilenameRule(".env", "prefix", Role.CONFIG, 0.85),
    FilenameRule("config.", "prefix", Role.CONFIG, 0.60),
    FilenameRule("settings.", "prefix", Role.CONFIG, 0.60),
    FilenameRule(".config.", "contains", Role.CONFIG, 0.55),
    FilenameRule(".conf", "suffix", Role.CONFIG, 0.55),
    FilenameRule("readme", "prefix", Role.DOCS, 0.80),
    FilenameRule("changelog", "prefix", Role.DOCS, 0.75),
    FilenameRule("contributing", "prefix", Role.DOCS, 0.75),
    FilenameRule("license", "prefix", Role.DOCS, 0.70),
)

EXTENSION_RULES: Tuple[ExtensionRule, ...] = (
    ExtensionRule(".md", Role.DOCS, 0.20),
    ExtensionRule(".mdx", Role.DOCS, 0.20),
    ExtensionRule(".rst", Role.DOCS, 0.20),
    ExtensionRule(".adoc", Role.DOCS, 0.20),
    # Config extensions are weak: plenty of yaml/json is not configuration.
    ExtensionRule(".yaml", Role.CONFIG, 0.15),
    ExtensionRule(".yml", Role.CONFIG, 0.15),
    ExtensionRule(".toml", Role.CONFIG, 0.15),
    ExtensionRule(".json", Role.CONFIG, 0.10),
    ExtensionRule(".ini", Role.CONFIG, 0.15),
    ExtensionRule(".lock", Role.GENERATED, 0.90),
    ExtensionRule(".sum", Role.GENERATED, 0.85),
    ExtensionRule(".pb.go", Role.GENERATED, 0.90),
    ExtensionRule(".pb.ts", Role.GENERATED, 0.90),
    ExtensionRule(".gen.go", Role.GENERATED, 0.85),
    ExtensionRule(".proto", Role.DOCS, 0.40),
)

HEADER_RULES: Tuple[HeaderRule, ...] = (
    HeaderRule("Code generated by", Role.GENERATED, 0.95),
    HeaderRule("DO NOT EDIT", Role.GENERATED, 0.90),
    HeaderRule("@generated", Role.GENERATED, 0.90),
    HeaderRule("AUTO-GENERATED", Role.GENERATED, 0.85),
    HeaderRule("This file was automatically generated", Role.GENERATED, 0.90),
    HeaderRule("This file is auto-generated", Role.GENERATED, 0.90),
    HeaderRule("terraform {", Role.INFRA, 0.80),
    HeaderRule('provider "', Role.INFRA, 0.75),
    HeaderRule("describe(", Role.TEST, 0.60),
    HeaderRule("test(", Role.TEST, 0.60),
    HeaderRule("func Test", Role.TEST, 0.70),
    HeaderRule("@Test", Role.TEST, 0.65),
    HeaderRule("#[test]", Role.TEST, 0.70),
    HeaderRule("def test_", Role.TEST, 0.65),
    HeaderRule("// Deprecated:", Role.DEPRECATED, 0.70),
    HeaderRule("// DEPRECATED", Role.DEPRECATED, 0.65),
    HeaderRule("@deprecated", Role.DEPRECATED, 0.70),
)


def apply_path_rules(path: str, score: RoleScore) -> None:
    lower_path = path.lower()
    for rule in PATH_RULES:
        if rule.fragment in lower_path:
            score.add(rule.role, rule.weight, Signal.PATH)


def apply_filename_rules(path: str, score: RoleScore) -> None:
    filename = posixpath.basename(path).lower()
    for rule in FILENAME_RULES:
        if rule.matches(filename):
            score.add_with_sub_role(rule.role, rule.sub_role, rule.weight, Signal.FILENAME)


def apply_extension_rules(path: str, score: RoleScore) -> None:
    """Match the final extension, and compound ones like ``.pb.go`` on the basename."""
    base = posixpath.basename(path).lower()
    ext = posixpath.splitext(base)[1]
    for rule in EXTENSION_RULES:
        if base.endswith(rule.ext) or ext == rule.ext:
            score.add(rule.role, rule.weight, Signal.EXTENSION)


def apply_header_rules(header: str, score: RoleScore) -> None:
    for rule in HEADER_RULES:
        if rule.pattern in header:
            score.add(rule.role, rule.weight, Signal.HEADER)


def read_header(path: str, max_bytes: int = HEADER_PROBE_BYTES) -> str:
    """Return up to ``max_bytes`` of the file decoded leniently.

    Raises ``OSError`` for unreadable files and ``ValueError`` for paths the OS
    rejects outright (such as paths holding a NUL byte).
    """
    with open(path, "rb") as handle:
        data = handle.read(max_bytes)
    return data.decode("utf-8", errors="ignore")


__all__ = [
    "EXTENSION_RULES",
    "ExtensionRule",
    "FILENAME_RULES",
    "FilenameRule",
    "HEADER_PROBE_BYTES",
    "HEADER_RULES",
    "HeaderRule",
    "PATH_RULES",
    "PathRule",
    "apply_extension_rules",
    "apply_filename_rules",
    "apply_header_rules",
    "apply_path_rules",
    "read_header",
]
