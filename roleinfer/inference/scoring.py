"""Evidence accumulation and confidence calibration for a single file."""

from __future__ import annotations

from typing import Dict, List, NamedTuple, Optional, Tuple

from ..models import Role, Signal, TestKind

DEFAULT_CONFIDENCE = 0.30
AMBIGUITY_MARGIN = 0.15
AMBIGUITY_PENALTY = 0.8
AGREEMENT_STEP = 0.25

# Lower wins when two roles carry the same weight.
ROLE_PRIORITY: Dict[Role, int] = {
    Role.VENDOR: 1,
    Role.GENERATED: 2,
    Role.TEST: 3,
    Role.INFRA: 4,
    Role.CORE: 5,
    Role.DOCS: 6,
    Role.CONFIG: 7,
    Role.SCRIPTS: 8,
    Role.EXAMPLES: 9,
    Role.DEPRECATED: 10,
}
_UNLISTED_PRIORITY = 100


def role_priority(role: Role) -> int:
    return ROLE_PRIORITY.get(role, _UNLISTED_PRIORITY)


class Resolution(NamedTuple):
    role: Role
    sub_role: Optional[TestKind]
    confidence: float
    signals: Tuple[Signal, ...]


class RoleScore:
    """Accumulates weighted evidence per role for one file."""

    def __init__(self) -> None:
        self.weights: Dict[Role, float] = {}
        self.signals: Dict[Role, List[Signal]] = {}
        self.sub_roles: Dict[Role, TestKind] = {}

    def add(self, role: Role, weight: float, signal: Signal) -> None:
        self.weights[role] = self.weights.get(role, 0.0) + weight
        self.signals.setdefault(role, []).append(signal)

    def add_with_sub_role(
        self, role: Role, sub_role: Optional[TestKind], weight: float, signal: Signal
    ) -> None:
        self.add(role, weight, signal)
        if sub_role is not None:
            self.sub_roles.setdefault(role, sub_role)

    def max_weight(self) -> float:
        return max(self.weights.values(), default=0.0)

    def resolve(self) -> Resolution:
        """Pick the winning role and calibrate its confidence.

        Confidence starts at the winning weight, loses 20% when the runner-up
        is within ``AMBIGUITY_MARGIN``, and is scaled by 0.25 per corroborating
        signal (saturating at four) before clamping to [0, 1].
        """
        if not self.weights:
            return Resolution(Role.CORE, None, DEFAULT_CONFIDENCE, ())

        ranked = sorted(
            self.weights.items(),
            key=lambda item: (-item[1], role_priority(item[0])),
        )
        top_role, top_weight = ranked[0]
        confidence = top_weight

        # Gap compared at 1e-9 precision: 0.70 - 0.55 and 0.75 - 0.60 are both 0.15.
        if len(ranked) > 1 and round(top_weight - ranked[1][1], 9) < AMBIGUITY_MARGIN:
            confidence *= AMBIGUITY_PENALTY

        signals = tuple(self.signals.get(top_role, ()))
        confidence *= min(1.0, AGREEMENT_STEP * len(signals))
        confidence = min(1.0, max(0.0, confidence))

        sub_role: Optional[TestKind] = None
        if top_role == Role.TEST:
            sub_role = self.sub_roles.get(top_role, TestKind.UNIT)

        return Resolution(top_role, sub_role, confidence, signals)


__all__ = ["ROLE_PRIORITY", "Resolution", "RoleScore", "role_priority"]
