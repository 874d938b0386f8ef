"""Reading scanner manifests and serialising classification results."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from .models import FileRecord, LineMetrics, RawFile


class ManifestError(RuntimeError):
    """Raised when a scanner manifest cannot be read."""


def load_raw_files(path: Path) -> List[RawFile]:
    """Read a JSON manifest holding a list of files or ``{"files": [...]}``."""
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ManifestError(f"Manifest not found: {path}") from exc
    except (OSError, ValueError) as exc:
        raise ManifestError(f"Failed to read manifest {path}: {exc}") from exc
    return parse_raw_files(payload)


def parse_raw_files(payload: Any) -> List[RawFile]:
    if isinstance(payload, dict):
        payload = payload.get("files")
    if not isinstance(payload, list):
        raise ManifestError("Manifest must be a list of files or an object with a 'files' list")
    return [raw_file_from_dict(entry, index) for index, entry in enumerate(payload)]


def raw_file_from_dict(entry: Any, index: int = 0) -> RawFile:
    if not isinstance(entry, dict):
        raise ManifestError(f"Manifest entry {index} is not an object")
    path = entry.get("path")
    if not isinstance(path, str) or not path:
        raise ManifestError(f"Manifest entry {index} has no path")

    embedded_data = entry.get("embedded")
    embedded: Dict[str, LineMetrics] = {}
    if isinstance(embedded_data, dict):
        for language, metrics in embedded_data.items():
            embedded[str(language)] = _line_metrics(metrics)

    language = entry.get("language_hint", entry.get("language"))
    return RawFile(
        path=path,
        loc=_as_int(entry.get("loc")),
        lines=_line_metrics(entry.get("lines")),
        language_hint=language if isinstance(language, str) else "",
        embedded=embedded,
    )


def filter_raw_files(
    files: Iterable[RawFile], excluded: Callable[[str], bool]
) -> List[RawFile]:
    """Drop files for which ``excluded(path)`` is true."""
    return [file for file in files if not excluded(file.path)]


def records_to_json(
    records: Sequence[FileRecord],
    summary: Optional[Mapping[str, Any]] = None,
    *,
    indent: Optional[int] = 2,
) -> str:
    payload: Dict[str, Any] = {"files": [record.to_dict() for record in records]}
    if summary is not None:
        payload["summary"] = dict(summary)
    return json.dumps(payload, indent=indent)


def _line_metrics(value: Any) -> LineMetrics:
    if not isinstance(value, dict):
        return LineMetrics()
    return LineMetrics(
        total=_as_int(value.get("total")),
        blanks=_as_int(value.get("blanks")),
        comments=_as_int(value.get("comments")),
        code=_as_int(value.get("code")),
    )


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    return 0


__all__ = [
    "ManifestError",
    "filter_raw_files",
    "load_raw_files",
    "parse_raw_files",
    "raw_file_from_dict",
    "records_to_json",
]
