"""CLI parser and command tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from roleinfer.cli import _build_parser, main


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "classify", "scan.json"])
    assert args.verbose is True
    assert args.command == "classify"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["classify", "scan.json", "--verbose"])
    assert args.verbose is True
    assert args.manifest == "scan.json"


def test_cli_classify_flags() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        [
            "classify",
            "scan.json",
            "--header-probe",
            "--no-neighborhood",
            "--summary",
            "--workers",
            "2",
            "-c",
            "roleinfer.yaml",
            "-o",
            "out.json",
        ]
    )
    assert args.header_probe is True
    assert args.no_neighborhood is True
    assert args.summary is True
    assert args.workers == 2
    assert args.config == "roleinfer.yaml"
    assert args.output == "out.json"


def test_cli_requires_command() -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args([])


def _write_manifest(tmp_path: Path) -> Path:
    manifest = tmp_path / "scan.json"
    manifest.write_text(
        json.dumps(
            [
                {"path": "src/main.go", "loc": 100, "language": "Go"},
                {"path": "src/main_test.go", "loc": 50, "language": "Go"},
                {"path": "vendor/lib/lib.go", "loc": 500, "language": "Go"},
                {"path": "ops/deploy.sh", "loc": 10, "language": "Shell"},
            ]
        ),
        encoding="utf-8",
    )
    return manifest


def test_cli_classify_prints_records(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    manifest = _write_manifest(tmp_path)

    main(["classify", str(manifest), "-c", str(tmp_path)])

    payload = json.loads(capsys.readouterr().out)
    roles = {item["path"]: item["role"] for item in payload["files"]}
    # vendor/** is excluded by default
    assert roles == {"src/main.go": "core", "src/main_test.go": "test", "ops/deploy.sh": "core"}
    assert "summary" not in payload


def test_cli_classify_applies_config_overrides(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    manifest = _write_manifest(tmp_path)
    (tmp_path / "roleinfer.yaml").write_text(
        "overrides:\n  infra:\n    - 'ops/**'\nexclude: []\n", encoding="utf-8"
    )

    main(["classify", str(manifest), "-c", str(tmp_path), "--summary"])

    payload = json.loads(capsys.readouterr().out)
    by_path = {item["path"]: item for item in payload["files"]}
    assert by_path["ops/deploy.sh"]["role"] == "infra"
    assert by_path["ops/deploy.sh"]["signals"] == ["override"]
    assert "vendor/lib/lib.go" in by_path
    assert payload["summary"]["confidence"]["override"] > 0


def test_cli_classify_writes_output_file(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    manifest = _write_manifest(tmp_path)
    target = tmp_path / "out.json"

    main(["classify", str(manifest), "-c", str(tmp_path), "-o", str(target)])

    assert "Wrote 3 records" in capsys.readouterr().out
    assert len(json.loads(target.read_text(encoding="utf-8"))["files"]) == 3


def test_cli_classify_reports_missing_manifest(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["classify", str(tmp_path / "missing.json"), "-c", str(tmp_path)])
    assert excinfo.value.code == 1


def test_cli_classify_reports_bad_config(tmp_path: Path) -> None:
    manifest = _write_manifest(tmp_path)
    (tmp_path / "roleinfer.yaml").write_text("overrides:\n  nope: ['x']\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["classify", str(manifest), "-c", str(tmp_path)])
    assert excinfo.value.code == 1


def test_cli_classify_logging_flags() -> None:
    args = _build_parser().parse_args(["classify", "scan.json", "-q", "--log-file", "run.log"])
    assert args.quiet is True
    assert args.log_file == "run.log"
