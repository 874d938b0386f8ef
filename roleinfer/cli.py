"""CLI entrypoints for roleinfer commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, RoleInferConfig, load_config
from .inference import Engine
from .logging import configure_logging, get_logger
from .manifest import ManifestError, filter_raw_files, load_raw_files, records_to_json
from .summary import summarize


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="roleinfer",
        description="Classify codebase files by semantic role.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    classify_parser = subparsers.add_parser(
        "classify",
        help="Classify the files listed in a scanner manifest (JSON).",
    )
    _add_verbose_option(classify_parser, suppress_default=True)
    classify_parser.add_argument(
        "manifest",
        help="Path to a JSON manifest of scanned files.",
    )
    classify_parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Config file or directory (defaults to the current directory).",
    )
    classify_parser.add_argument(
        "--header-probe",
        action="store_true",
        help="Read file headers to detect generated, test and deprecated markers.",
    )
    classify_parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log warnings and errors.",
    )
    classify_parser.add_argument(
        "--log-file",
        default=None,
        help="Also write DEBUG logs, including worker thread names, to this file.",
    )
    classify_parser.add_argument(
        "--no-neighborhood",
        action="store_true",
        help="Disable the directory neighborhood correction pass.",
    )
    classify_parser.add_argument(
        "--summary",
        action="store_true",
        help="Include role responsibilities, ratios and confidence shares.",
    )
    classify_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker threads for per-file classification (defaults to CPU count).",
    )
    classify_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write JSON to this file instead of stdout.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for roleinfer commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = getattr(args, "log_file", None)
    configure_logging(
        verbose=bool(args.verbose),
        quiet=bool(getattr(args, "quiet", False)),
        log_file=Path(log_file) if log_file else None,
    )
    logger = get_logger("cli")

    if args.command == "classify":
        try:
            config = _load_config(args.config)
            files = load_raw_files(Path(args.manifest))
        except (ConfigError, ManifestError) as exc:
            parser.exit(1, f"{exc}\n")

        if args.header_probe:
            config.options.header_probe = True
        if args.no_neighborhood:
            config.options.neighborhood = False

        kept = filter_raw_files(files, config.is_excluded)
        logger.info("Classifying %d files (%d excluded)", len(kept), len(files) - len(kept))

        engine = Engine(config.engine_options(max_workers=args.workers))
        records = engine.infer_batch(kept)
        summary = summarize(records).to_dict() if args.summary else None
        output = records_to_json(records, summary)

        if args.output:
            Path(args.output).write_text(output + "\n", encoding="utf-8")
            print(f"Wrote {len(records)} records to {_relativize(Path(args.output))}")
        else:
            print(output)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _load_config(value: str | None) -> RoleInferConfig:
    return load_config(Path(value) if value else Path.cwd())


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
