"""Core data models shared across roleinfer components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class Role(str, Enum):
    """Semantic role assigned to a file."""

    CORE = "core"
    TEST = "test"
    INFRA = "infra"
    DOCS = "docs"
    CONFIG = "config"
    GENERATED = "generated"
    VENDOR = "vendor"
    SCRIPTS = "scripts"
    EXAMPLES = "examples"
    DEPRECATED = "deprecated"


class TestKind(str, Enum):
    """Finer category for files classified as tests."""

    __test__ = False

    UNIT = "unit"
    INTEGRATION = "integration"
    E2E = "e2e"
    FIXTURE = "fixture"


class Signal(str, Enum):
    """Evidence channel that contributed to a classification."""

    OVERRIDE = "override"
    PATH = "path"
    FILENAME = "filename"
    EXTENSION = "extension"
    HEADER = "header"
    NEIGHBORHOOD = "neighborhood"


@dataclass(frozen=True)
class LineMetrics:
    """Line counts reported by the scanner."""

    total: int = 0
    blanks: int = 0
    comments: int = 0
    code: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "blanks": self.blanks,
            "comments": self.comments,
            "code": self.code,
        }


@dataclass(frozen=True)
class RawFile:
    """A discovered file before classification."""

    path: str
    loc: int = 0
    lines: LineMetrics = field(default_factory=LineMetrics)
    language_hint: str = ""
    embedded: Dict[str, LineMetrics] = field(default_factory=dict)


@dataclass(frozen=True)
class FileRecord:
    """A classified file."""

    path: str
    loc: int
    lines: LineMetrics
    language: str
    role: Role
    sub_role: Optional[TestKind] = None
    confidence: float = 0.0
    signals: Tuple[Signal, ...] = ()
    embedded: Dict[str, LineMetrics] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "path": self.path,
            "loc": self.loc,
            "lines": self.lines.to_dict(),
            "language": self.language,
            "role": self.role.value,
            "confidence": self.confidence,
            "signals": [signal.value for signal in self.signals],
        }
        if self.sub_role is not None:
            payload["sub_role"] = self.sub_role.value
        if self.embedded:
            payload["embedded"] = {
                language: metrics.to_dict() for language, metrics in self.embedded.items()
            }
        return payload


__all__ = ["FileRecord", "LineMetrics", "RawFile", "Role", "Signal", "TestKind"]
