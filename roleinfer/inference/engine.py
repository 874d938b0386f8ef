"""Classification engine combining overrides, rule tables and the neighborhood pass."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from ..logging import get_logger
from ..models import FileRecord, RawFile, Role, Signal
from .neighborhood import apply_neighborhood
from .overrides import Overrides
from .rules import (
    HEADER_PROBE_BYTES,
    apply_extension_rules,
    apply_filename_rules,
    apply_header_rules,
    apply_path_rules,
    read_header,
)
from .scoring import RoleScore

OVERRIDE_WEIGHT = 1.0
EXTENSION_GATE = 0.50
HEADER_GATE = 0.80

HeaderReader = Callable[[str, int], str]


@dataclass
class EngineOptions:
    """Runtime switches for the classification engine."""

    header_probe: bool = False
    neighborhood: bool = False
    overrides: Optional[Dict[Role, List[str]]] = None
    max_workers: Optional[int] = None


class Engine:
    """Classifies raw files into roles."""

    def __init__(
        self,
        options: EngineOptions | None = None,
        *,
        header_reader: HeaderReader = read_header,
    ) -> None:
        self.options = options or EngineOptions()
        self.header_reader = header_reader
        self.logger = get_logger("engine")
        self.overrides: Optional[Overrides] = None
        if self.options.overrides is not None:
            self.overrides = Overrides(self.options.overrides)

    def infer(self, file: RawFile) -> FileRecord:
        score = RoleScore()

        if self.overrides is not None:
            override = self.overrides.match(file.path)
            if override is not None:
                self.logger.debug(
                    "Override %s -> %s for %s", override.pattern, override.role.value, file.path
                )
                score.add(override.role, OVERRIDE_WEIGHT, Signal.OVERRIDE)
                return self._build_record(file, score)

        apply_path_rules(file.path, score)
        apply_filename_rules(file.path, score)

        if score.max_weight() < EXTENSION_GATE:
            apply_extension_rules(file.path, score)

        if self.options.header_probe and score.max_weight() < HEADER_GATE:
            header = self._probe_header(file.path)
            if header:
                apply_header_rules(header, score)

        return self._build_record(file, score)

    def infer_batch(self, files: Sequence[RawFile]) -> List[FileRecord]:
        if not files:
            return []

        workers = self.options.max_workers or os.cpu_count() or 1
        workers = max(1, min(workers, len(files)))
        self.logger.debug("Classifying %d files with %d workers", len(files), workers)

        if workers == 1:
            records = [self.infer(file) for file in files]
        else:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="roleinfer") as pool:
                records = list(pool.map(self.infer, files))

        if self.options.neighborhood:
            records = apply_neighborhood(records)
        return records

    def _probe_header(self, path: str) -> str:
        try:
            return self.header_reader(path, HEADER_PROBE_BYTES)
        except (OSError, ValueError) as exc:
            self.logger.debug("Header probe skipped for %s: %s", path, exc)
            return ""

    def _build_record(self, file: RawFile, score: RoleScore) -> FileRecord:
        role, sub_role, confidence, signals = score.resolve()
        return FileRecord(
            path=file.path,
            loc=file.loc,
            lines=file.lines,
            language=file.language_hint,
            role=role,
            sub_role=sub_role,
            confidence=confidence,
            signals=signals,
            embedded=file.embedded,
        )


__all__ = ["Engine", "EngineOptions", "HeaderReader"]
