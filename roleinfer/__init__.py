"""Semantic role classification for codebase files."""

from .inference import Engine, EngineOptions
from .models import FileRecord, LineMetrics, RawFile, Role, Signal, TestKind

__version__ = "0.1.0"

__all__ = [
    "Engine",
    "EngineOptions",
    "FileRecord",
    "LineMetrics",
    "RawFile",
    "Role",
    "Signal",
    "TestKind",
]
