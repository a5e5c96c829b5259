"""Command-line entry point for running a single scan."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional

from .config import load_config
from .dispatch import ScanRequest, run_scan
from .errors import NoScannerRegisteredError, ScanError
from .registry import ScanMode, ScannerRegistry, default_registry
from .result import Result, format_summary_table

EXIT_OK = 0
EXIT_SCAN_FAILED = 1
EXIT_NO_SCANNER = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scanhub",
        description="Run a security scan through the engine registered for a language and mode",
    )
    parser.add_argument(
        "--workspace",
        "-w",
        required=True,
        help="Path to the project to scan.",
    )
    parser.add_argument(
        "--language",
        "-l",
        required=True,
        help="Source language of the workspace (e.g. java, python, go).",
    )
    parser.add_argument(
        "--mode",
        "-m",
        default=ScanMode.LITE.value,
        help="Scanning depth: lite, or max/deep for build-aware engines.",
    )
    parser.add_argument(
        "--id",
        dest="task_id",
        default="local",
        help="Correlation identifier echoed in the report.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="YAML file with engine settings (defaults to $SCANHUB_CONFIG).",
    )
    parser.add_argument(
        "--out",
        "--output",
        dest="output_path",
        type=str,
        default=None,
        help="Path to write the JSON report (e.g., artifacts/scan.json).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log engine commands and fallbacks.",
    )
    return parser


def write_output(result: Result, output_path: str | None) -> None:
    print(format_summary_table(result))

    payload = json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
    if output_path:
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(payload, encoding="utf-8")
        print(f"\nReport written to {output_path}")
    else:
        print("\nJSON Report")
        print(payload)


def main(argv: List[str] | None = None, registry: Optional[ScannerRegistry] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if registry is None:
        registry = default_registry(load_config(args.config))
    request = ScanRequest(
        task_id=args.task_id,
        language=args.language,
        mode=args.mode,
        workspace=args.workspace,
    )
    try:
        result = run_scan(registry, request)
    except NoScannerRegisteredError as exc:
        print(f"error: {exc}")
        return EXIT_NO_SCANNER
    except ScanError as exc:
        print(f"error: {exc}")
        return EXIT_SCAN_FAILED

    write_output(result, args.output_path)
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
