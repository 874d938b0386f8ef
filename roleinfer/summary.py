"""Role-level rollups of classified files."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from .models import FileRecord, Role, Signal, TestKind

HIGH_CONFIDENCE = 0.80


@dataclass
class Responsibility:
    """LOC and file totals for one role."""

    role: Role
    loc: int = 0
    files: int = 0
    confidence: float = 0.0
    breakdown: Dict[TestKind, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "role": self.role.value,
            "loc": self.loc,
            "files": self.files,
            "confidence": self.confidence,
        }
        if self.breakdown:
            payload["breakdown"] = {kind.value: share for kind, share in self.breakdown.items()}
        return payload


@dataclass
class Ratios:
    test_to_core: float = 0.0
    infra_to_core: float = 0.0
    docs_to_core: float = 0.0
    generated_to_core: float = 0.0
    config_to_core: float = 0.0


@dataclass
class ConfidenceInfo:
    """Share of LOC by how it was classified."""

    auto_classified: float = 0.0
    heuristic: float = 0.0
    override: float = 0.0


@dataclass
class Summary:
    responsibilities: List[Responsibility]
    ratios: Ratios
    confidence: ConfidenceInfo

    def to_dict(self) -> Dict[str, Any]:
        return {
            "responsibilities": [item.to_dict() for item in self.responsibilities],
            "ratios": vars(self.ratios).copy(),
            "confidence": vars(self.confidence).copy(),
        }


def compute_responsibilities(records: Sequence[FileRecord]) -> List[Responsibility]:
    """Group records by role; confidence is LOC-weighted, tests carry a kind breakdown."""
    by_role: Dict[Role, Responsibility] = {}
    confidence_sums: Dict[Role, float] = {}
    kind_loc: Dict[TestKind, int] = {}

    for record in records:
        entry = by_role.get(record.role)
        if entry is None:
            entry = by_role[record.role] = Responsibility(role=record.role)
            confidence_sums[record.role] = 0.0
        entry.loc += record.loc
        entry.files += 1
        confidence_sums[record.role] += record.confidence * record.loc

        if record.role == Role.TEST and record.sub_role is not None:
            kind_loc[record.sub_role] = kind_loc.get(record.sub_role, 0) + record.loc

    for role, entry in by_role.items():
        if entry.loc > 0:
            entry.confidence = confidence_sums[role] / entry.loc
        if role == Role.TEST and kind_loc and entry.loc > 0:
            entry.breakdown = {kind: loc / entry.loc for kind, loc in kind_loc.items()}

    return sorted(by_role.values(), key=lambda item: item.loc, reverse=True)


def compute_ratios(responsibilities: Sequence[Responsibility]) -> Ratios:
    loc_by_role = {item.role: item.loc for item in responsibilities}
    core_loc = loc_by_role.get(Role.CORE, 0) or 1
    return Ratios(
        test_to_core=loc_by_role.get(Role.TEST, 0) / core_loc,
        infra_to_core=loc_by_role.get(Role.INFRA, 0) / core_loc,
        docs_to_core=loc_by_role.get(Role.DOCS, 0) / core_loc,
        generated_to_core=loc_by_role.get(Role.GENERATED, 0) / core_loc,
        config_to_core=loc_by_role.get(Role.CONFIG, 0) / core_loc,
    )


def compute_confidence_info(records: Sequence[FileRecord]) -> ConfidenceInfo:
    total_loc = 0
    high_loc = 0
    override_loc = 0
    for record in records:
        total_loc += record.loc
        if record.confidence >= HIGH_CONFIDENCE:
            high_loc += record.loc
        if Signal.OVERRIDE in record.signals:
            override_loc += record.loc

    if total_loc == 0:
        return ConfidenceInfo()

    return ConfidenceInfo(
        auto_classified=high_loc / total_loc,
        heuristic=(total_loc - high_loc - override_loc) / total_loc,
        override=override_loc / total_loc,
    )


def summarize(records: Sequence[FileRecord]) -> Summary:
    responsibilities = compute_responsibilities(records)
    return Summary(
        responsibilities=responsibilities,
        ratios=compute_ratios(responsibilities),
        confidence=compute_confidence_info(records),
    )


__all__ = [
    "ConfidenceInfo",
    "Ratios",
    "Responsibility",
    "Summary",
    "compute_confidence_info",
    "compute_ratios",
    "compute_responsibilities",
    "summarize",
]
