"""Tests for roleinfer.inference.rules."""

from __future__ import annotations

from pathlib import Path

import pytest

from roleinfer.inference import rules
from roleinfer.inference.rules import (
    FilenameRule,
    apply_extension_rules,
    apply_filename_rules,
    apply_header_rules,
    apply_path_rules,
    read_header,
)
from roleinfer.inference.scoring import RoleScore
from roleinfer.models import Role, Signal, TestKind


def test_rule_weights_stay_within_empirical_range() -> None:
    tables = (rules.PATH_RULES, rules.FILENAME_RULES, rules.EXTENSION_RULES, rules.HEADER_RULES)
    for table in tables:
        assert isinstance(table, tuple)
        for rule in table:
            assert 0.10 <= rule.weight <= 0.95


def test_only_test_filename_rules_carry_a_kind() -> None:
    for rule in rules.FILENAME_RULES:
        if rule.sub_role is not None:
            assert rule.role == Role.TEST


def test_path_rules_match_lowercased_path() -> None:
    score = RoleScore()
    apply_path_rules("/Project/Vendor/lib/errors.go", score)

    assert score.weights == {Role.VENDOR: pytest.approx(0.90)}
    assert score.signals[Role.VENDOR] == [Signal.PATH]


def test_path_rules_all_fire_additively() -> None:
    score = RoleScore()
    apply_path_rules("/repo/tests/unit/e2e/flow.py", score)

    assert score.weights[Role.TEST] == pytest.approx(0.60 + 0.60 + 0.70)
    assert len(score.signals[Role.TEST]) == 3


def test_path_rules_require_directory_boundaries() -> None:
    score = RoleScore()
    apply_path_rules("/repo/testing/contest.go", score)
    assert score.weights == {}


@pytest.mark.parametrize(
    ("match_type", "filename", "expected"),
    [
        ("prefix", "dockerfile.dev", True),
        ("prefix", "my.dockerfile", False),
        ("suffix", "main.tf", True),
        ("contains", "app.dockerfile.bak", True),
        ("unknown", "dockerfile", False),
    ],
)
def test_filename_rule_match_types(match_type: str, filename: str, expected: bool) -> None:
    pattern = ".tf" if match_type == "suffix" else "dockerfile"
    rule = FilenameRule(pattern, match_type, Role.INFRA, 0.5)
    assert rule.matches(filename) is expected


def test_filename_rules_use_basename_only() -> None:
    score = RoleScore()
    apply_filename_rules("/repo/readme_assets/logo_test.svg", score)

    assert Role.DOCS not in score.weights
    assert score.weights[Role.TEST] == pytest.approx(0.75)
    assert score.sub_roles[Role.TEST] == TestKind.UNIT


def test_filename_rules_are_case_insensitive() -> None:
    score = RoleScore()
    apply_filename_rules("/repo/README.md", score)
    assert score.weights == {Role.DOCS: pytest.approx(0.80)}


def test_extension_rules_detect_compound_suffix() -> None:
    score = RoleScore()
    apply_extension_rules("/repo/api/service.pb.go", score)

    assert score.weights == {Role.GENERATED: pytest.approx(0.90)}
    assert score.signals[Role.GENERATED] == [Signal.EXTENSION]


def test_extension_rules_match_final_extension() -> None:
    score = RoleScore()
    apply_extension_rules("/repo/deploy/values.YAML", score)
    assert score.weights == {Role.CONFIG: pytest.approx(0.15)}


def test_header_rules_are_case_sensitive() -> None:
    score = RoleScore()
    apply_header_rules("// code generated by hand\n", score)
    assert score.weights == {}

    apply_header_rules("// Code generated by protoc-gen-go. DO NOT EDIT.\n", score)
    assert score.weights[Role.GENERATED] == pytest.approx(0.95 + 0.90)
    assert score.signals[Role.GENERATED] == [Signal.HEADER, Signal.HEADER]


def test_read_header_is_bounded(tmp_path: Path) -> None:
    target = tmp_path / "big.go"
    target.write_text("x" * 5000 + "DO NOT EDIT", encoding="utf-8")

    header = read_header(str(target))

    assert len(header) == rules.HEADER_PROBE_BYTES
    assert "DO NOT EDIT" not in header


def test_read_header_tolerates_invalid_utf8(tmp_path: Path) -> None:
    target = tmp_path / "blob.go"
    target.write_bytes(b"\xff\xfe@generated\n")

    assert "@generated" in read_header(str(target))


def test_read_header_raises_for_missing_file(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        read_header(str(tmp_path / "missing.go"))
