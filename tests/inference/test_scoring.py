"""Tests for roleinfer.inference.scoring."""

from __future__ import annotations

import pytest

from roleinfer.inference.scoring import RoleScore, role_priority
from roleinfer.models import Role, Signal, TestKind


def test_add_accumulates_weight_and_signals() -> None:
    score = RoleScore()
    score.add(Role.TEST, 0.75, Signal.FILENAME)
    score.add(Role.TEST, 0.60, Signal.PATH)

    assert score.weights[Role.TEST] == pytest.approx(1.35)
    assert score.signals[Role.TEST] == [Signal.FILENAME, Signal.PATH]


def test_add_with_sub_role_records_kind() -> None:
    score = RoleScore()
    score.add_with_sub_role(Role.TEST, TestKind.INTEGRATION, 0.80, Signal.FILENAME)

    assert score.weights[Role.TEST] == pytest.approx(0.80)
    assert score.sub_roles[Role.TEST] == TestKind.INTEGRATION


def test_add_with_sub_role_ignores_missing_kind() -> None:
    score = RoleScore()
    score.add_with_sub_role(Role.INFRA, None, 0.80, Signal.FILENAME)

    assert Role.INFRA not in score.sub_roles
    assert score.weights[Role.INFRA] == pytest.approx(0.80)


def test_add_with_sub_role_keeps_first_kind() -> None:
    score = RoleScore()
    score.add_with_sub_role(Role.TEST, TestKind.E2E, 0.80, Signal.FILENAME)
    score.add_with_sub_role(Role.TEST, TestKind.UNIT, 0.75, Signal.FILENAME)

    assert score.sub_roles[Role.TEST] == TestKind.E2E


def test_resolve_empty_score_defaults_to_core() -> None:
    role, sub_role, confidence, signals = RoleScore().resolve()

    assert role == Role.CORE
    assert sub_role is None
    assert confidence == pytest.approx(0.30)
    assert signals == ()


def test_resolve_single_role_scales_by_agreement() -> None:
    score = RoleScore()
    score.add(Role.TEST, 0.75, Signal.FILENAME)
    score.add(Role.TEST, 0.60, Signal.PATH)

    resolution = score.resolve()

    assert resolution.role == Role.TEST
    assert resolution.signals == (Signal.FILENAME, Signal.PATH)
    assert resolution.confidence == pytest.approx(1.35 * 0.5)


def test_resolve_applies_ambiguity_penalty() -> None:
    score = RoleScore()
    score.add(Role.TEST, 0.75, Signal.FILENAME)
    score.add(Role.CORE, 0.70, Signal.PATH)

    resolution = score.resolve()

    # 0.75 * 0.8 (runner-up within 0.15) * 0.25 (one signal)
    assert resolution.role == Role.TEST
    assert resolution.confidence == pytest.approx(0.15)


def test_resolve_skips_penalty_for_clear_winner() -> None:
    score = RoleScore()
    score.add(Role.VENDOR, 0.90, Signal.PATH)
    score.add(Role.CONFIG, 0.55, Signal.PATH)

    assert score.resolve().confidence == pytest.approx(0.90 * 0.25)


@pytest.mark.parametrize(
    ("winner", "top", "runner_up", "second"),
    [
        (Role.DOCS, 0.75, Role.INFRA, 0.60),
        (Role.TEST, 0.70, Role.CONFIG, 0.55),
    ],
)
def test_resolve_gap_of_exactly_margin_is_not_penalised(
    winner: Role, top: float, runner_up: Role, second: float
) -> None:
    score = RoleScore()
    score.add(winner, top, Signal.FILENAME)
    score.add(runner_up, second, Signal.PATH)

    resolution = score.resolve()

    assert resolution.role == winner
    assert resolution.confidence == pytest.approx(top * 0.25)


def test_resolve_gap_just_inside_margin_is_penalised() -> None:
    score = RoleScore()
    score.add(Role.TEST, 0.70, Signal.FILENAME)
    score.add(Role.CONFIG, 0.56, Signal.PATH)

    assert score.resolve().confidence == pytest.approx(0.70 * 0.8 * 0.25)


@pytest.mark.parametrize(
    ("count", "expected"),
    [
        (1, 0.4 * 0.25),
        (2, 0.4 * 2 * 0.5),
        (3, 0.4 * 3 * 0.75),
    ],
)
def test_resolve_agreement_factor_grows_per_signal(count: int, expected: float) -> None:
    score = RoleScore()
    for _ in range(count):
        score.add(Role.DOCS, 0.4, Signal.PATH)

    assert score.resolve().confidence == pytest.approx(expected)


def test_resolve_agreement_saturates_at_four_signals() -> None:
    score = RoleScore()
    for _ in range(5):
        score.add(Role.SCRIPTS, 0.1, Signal.PATH)

    assert score.resolve().confidence == pytest.approx(0.5)


def test_resolve_clamps_confidence_to_one() -> None:
    score = RoleScore()
    for _ in range(4):
        score.add(Role.GENERATED, 0.9, Signal.HEADER)

    assert score.resolve().confidence == 1.0


@pytest.mark.parametrize(
    ("first", "second", "winner"),
    [
        (Role.VENDOR, Role.CORE, Role.VENDOR),
        (Role.GENERATED, Role.TEST, Role.GENERATED),
        (Role.CORE, Role.DEPRECATED, Role.CORE),
        (Role.EXAMPLES, Role.SCRIPTS, Role.SCRIPTS),
    ],
)
def test_resolve_breaks_ties_by_priority(first: Role, second: Role, winner: Role) -> None:
    score = RoleScore()
    score.add(first, 0.50, Signal.PATH)
    score.add(second, 0.50, Signal.PATH)

    assert score.resolve().role == winner


def test_resolve_attaches_recorded_test_kind() -> None:
    score = RoleScore()
    score.add_with_sub_role(Role.TEST, TestKind.E2E, 0.80, Signal.FILENAME)

    role, sub_role, _, _ = score.resolve()

    assert role == Role.TEST
    assert sub_role == TestKind.E2E


def test_resolve_defaults_test_kind_to_unit() -> None:
    score = RoleScore()
    score.add(Role.TEST, 0.80, Signal.PATH)

    assert score.resolve().sub_role == TestKind.UNIT


def test_resolve_leaves_sub_role_empty_for_other_roles() -> None:
    score = RoleScore()
    score.add_with_sub_role(Role.TEST, TestKind.FIXTURE, 0.30, Signal.FILENAME)
    score.add(Role.INFRA, 0.80, Signal.FILENAME)

    role, sub_role, _, _ = score.resolve()

    assert role == Role.INFRA
    assert sub_role is None


def test_max_weight() -> None:
    score = RoleScore()
    assert score.max_weight() == 0.0

    score.add(Role.TEST, 0.75, Signal.FILENAME)
    score.add(Role.CORE, 0.30, Signal.PATH)
    score.add(Role.CORE, 0.30, Signal.PATH)

    assert score.max_weight() == pytest.approx(0.75)


def test_role_priority_orders_known_roles() -> None:
    ordered = sorted(Role, key=role_priority)
    assert ordered[0] == Role.VENDOR
    assert ordered[-1] == Role.DEPRECATED
