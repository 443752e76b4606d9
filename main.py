# main.py
"""
CLI entrypoint for building policy decisions.

- Reads a JSON document of verdicts, runs each through its check in the catalog,
  and applies the configured resource exceptions.
- Produces JSON, CSV, and HTML reports (raw encoding optional) and prints a colorful summary table.
"""

import argparse
import logging

from config import DEFAULT_REPORT_DIR
from decisions.checks import UnknownCheckError, decide_all_from_json
from utils import load_json_file, load_exception_params, save_report, print_summary_and_report_path

logger = logging.getLogger("policy_decisions")


def run(file_path: str, exceptions_path: str = None, report_dir: str = DEFAULT_REPORT_DIR,
        print_table: bool = False, raw: bool = False):
    """
    Build decisions from a local verdicts file and write reports.
    """
    logger.info("Building decisions from file: %s", file_path)
    data = load_json_file(file_path)
    if not isinstance(data, dict):
        raise ValueError(f"{file_path} must contain a JSON object")

    params = None
    extra = {"source_file": file_path}
    if exceptions_path:
        logger.info("Using resource exceptions from: %s", exceptions_path)
        params = load_exception_params(exceptions_path)
        extra["exceptions_file"] = exceptions_path

    decisions = decide_all_from_json(data, params=params)
    logger.info("Built %d decisions", len(decisions))

    report_paths = save_report(
        decisions,
        mode="offline",
        extra=extra,
        out_dir=report_dir,
        raw=raw,
    )
    for name, path in report_paths.items():
        logger.debug("Wrote %s report to %s", name, path)
    print_summary_and_report_path(
        decisions, report_paths, print_full_table=print_table
    )
    return decisions


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="Build policy decisions from compliance verdicts."
    )
    p.add_argument(
        "--file",
        required=True,
        help="Path to the verdicts JSON file",
    )
    p.add_argument(
        "--exceptions",
        help="Path to a JSON file with resource_exceptions (overrides params in --file)",
    )
    p.add_argument(
        "--report-dir",
        default=DEFAULT_REPORT_DIR,
        help=f"Directory to save reports (default: {DEFAULT_REPORT_DIR})",
    )
    p.add_argument(
        "--print-table",
        action="store_true",
        help="Print full decisions table to stdout",
    )
    p.add_argument(
        "--raw",
        action="store_true",
        help="Also write the raw (integer-coded) decisions",
    )
    p.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    try:
        run(
            args.file,
            exceptions_path=args.exceptions,
            report_dir=args.report_dir,
            print_table=args.print_table,
            raw=args.raw,
        )
    except UnknownCheckError as e:
        logger.error("Unknown check kind: %s", e.args[0])
        raise SystemExit(f"unknown check kind: {e.args[0]}")
    except (FileNotFoundError, ValueError) as e:
        # includes ResourceExceptionsError
        logger.error("%s", e)
        raise SystemExit(str(e))


if __name__ == "__main__":
    main()
