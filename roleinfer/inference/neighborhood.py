"""Directory-level correction of weakly classified files."""

from __future__ import annotations

import posixpath
from collections import Counter
from dataclasses import replace
from typing import Dict, List, Sequence

from ..logging import get_logger
from ..models import FileRecord, Role, Signal

MIN_DIRECTORY_FILES = 3
MIN_CONFIDENT_VOTES = 2
CONFIDENT_THRESHOLD = 0.70
DOMINANCE_RATIO = 0.70
WEAK_THRESHOLD = 0.60
CONFIDENCE_BOOST = 0.40

_LOGGER = get_logger("neighborhood")


def apply_neighborhood(records: Sequence[FileRecord]) -> List[FileRecord]:
    """Return records with weak files pulled toward their directory's dominant role.

    Every decision is taken from the incoming records before any of them is
    replaced, so a reassigned file never votes in the same pass.
    """
    by_dir: Dict[str, List[int]] = {}
    for index, record in enumerate(records):
        directory = posixpath.dirname(record.path.replace("\\", "/"))
        by_dir.setdefault(directory, []).append(index)

    reassign: Dict[int, Role] = {}
    for directory, indices in by_dir.items():
        if len(indices) < MIN_DIRECTORY_FILES:
            continue

        votes: Counter[Role] = Counter()
        for index in indices:
            if records[index].confidence >= CONFIDENT_THRESHOLD:
                votes[records[index].role] += 1
        total = sum(votes.values())
        if total < MIN_CONFIDENT_VOTES:
            continue

        # Counter keeps first-seen order, and max() keeps the first of equal counts.
        dominant_role, dominant_count = max(votes.items(), key=lambda item: item[1])
        if dominant_count / total < DOMINANCE_RATIO:
            continue

        for index in indices:
            record = records[index]
            if record.confidence < WEAK_THRESHOLD and record.role != dominant_role:
                reassign[index] = dominant_role

    if not reassign:
        return list(records)

    _LOGGER.debug("Neighborhood pass reassigned %d of %d files", len(reassign), len(records))

    result: List[FileRecord] = []
    for index, record in enumerate(records):
        role = reassign.get(index)
        if role is None:
            result.append(record)
            continue
        result.append(
            replace(
                record,
                role=role,
                confidence=min(1.0, record.confidence + CONFIDENCE_BOOST),
                signals=record.signals + (Signal.NEIGHBORHOOD,),
            )
        )
    return result


__all__ = ["apply_neighborhood"]
