"""Role inference: rule tables, override matching, scoring and batch correction."""

from __future__ import annotations

from .engine import Engine, EngineOptions
from .neighborhood import apply_neighborhood
from .overrides import OverrideMatch, Overrides, match_glob
from .scoring import Resolution, RoleScore

__all__ = [
    "Engine",
    "EngineOptions",
    "OverrideMatch",
    "Overrides",
    "Resolution",
    "RoleScore",
    "apply_neighborhood",
    "match_glob",
]
