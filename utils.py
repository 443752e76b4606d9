# utils.py
"""
Utility helpers: JSON loading, report generation, and console output.

- Uses Rich for colorful, wrapped tables in the terminal.
- Saves JSON, CSV, and HTML reports, plus the raw encoding on request.
"""

from collections import Counter
from datetime import datetime, timezone
from html import escape
from typing import Any, Dict, List, Optional
import json
import csv
import os
import uuid
from json import JSONDecodeError

from rich.console import Console
from rich.table import Table
from rich.text import Text

from config import DEFAULT_REPORT_DIR, DEFAULT_SHOW_TOP, SEVERITY_RANK_ALERT, SEVERITY_RANK_WARNING
from decisions.core import validate_resource_exceptions
from decisions.raw import to_raw_decisions
from models import Decision, SEVERITIES, TYPE_DENY

_console = Console()


def load_json_file(path: str) -> dict:
    """
    Load JSON from a file and return a Python dict.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Input JSON file not found: {path}.")
    try:
        with open(path, "r", encoding="utf-8-sig") as fh:
            return json.load(fh)
    except JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e.msg} (line {e.lineno} column {e.colno})") from e


def load_exception_params(path: str) -> Dict[str, Any]:
    """
    Load a {"resource_exceptions": [...]} file and validate it.
    Raises ResourceExceptionsError if the list is not string[].
    """
    data = load_json_file(path)
    if not isinstance(data, dict):
        raise ValueError(f"Exception file {path} must contain a JSON object")
    return {"resource_exceptions": list(validate_resource_exceptions(data.get("resource_exceptions")))}


def ensure_reports_dir(path: str = DEFAULT_REPORT_DIR) -> str:
    os.makedirs(path, exist_ok=True)
    return path


def decisions_to_json(decisions: List[Decision]) -> str:
    return json.dumps([d.to_dict() for d in decisions], indent=2)


def decisions_to_table_rows(decisions: List[Decision]) -> List[List[str]]:
    rows: List[List[str]] = []
    for d in decisions:
        h = d.header
        rows.append([str(h.subject), str(h.kind), str(h.type), str(h.severity), str(h.locator or "")])
    return rows


def summarize(decisions: List[Decision]) -> Dict[str, Any]:
    """
    Count decisions overall, denied, and denied per severity.
    """
    denied = [d for d in decisions if d.header.type == TYPE_DENY]
    by_severity = Counter(d.header.severity for d in denied)
    return {
        "decisions_count": len(decisions),
        "denied_count": len(denied),
        "denied_by_severity": {s: by_severity.get(s, 0) for s in SEVERITIES},
    }


def save_report(decisions: List[Decision], mode: str, extra: dict = None,
                out_dir: str = DEFAULT_REPORT_DIR, raw: bool = False) -> Dict[str, str]:
    """
    Save JSON, CSV, and HTML reports (and the raw encoding if raw=True) and return their paths.
    """
    out_dir = ensure_reports_dir(out_dir)
    now = datetime.now(timezone.utc).replace(microsecond=0, tzinfo=None).isoformat() + "Z"
    report = {
        "scan_time": now,
        "mode": mode,
        "summary": summarize(decisions),
        "decisions": [d.to_dict() for d in decisions],
    }
    if extra:
        report["extra"] = extra

    # unique per run
    base_ts = f"{now.replace(':', '-')}-{uuid.uuid4().hex[:8]}"
    json_path = os.path.join(out_dir, f"decisions-{base_ts}-{mode}.json")
    csv_path = os.path.join(out_dir, f"decisions-{base_ts}-{mode}.csv")
    html_path = os.path.join(out_dir, f"decisions-{base_ts}-{mode}.html")
    paths = {"json": json_path, "csv": csv_path, "html": html_path}

    # JSON
    with open(json_path, "w", encoding="utf-8") as fh:
        json.dump(report, fh, indent=2)

    # CSV
    fieldnames = ["subject", "kind", "type", "severity", "locator"]
    with open(csv_path, "w", encoding="utf-8", newline="") as fh:
        writer = csv.DictWriter(fh, fieldnames=fieldnames)
        writer.writeheader()
        for d in report["decisions"]:
            writer.writerow({k: d["header"].get(k, "") for k in fieldnames})

    # HTML
    html_rows: List[str] = []
    html_rows.append("<!doctype html>")
    html_rows.append("<html><head><meta charset='utf-8'><title>Decision Report</title>")
    html_rows.append("<style>body{font-family:Arial,Helvetica,sans-serif;margin:20px}table{border-collapse:collapse;width:100%}th,td{border:1px solid #ddd;padding:8px}th{background:#f2f2f2;text-align:left}tr:nth-child(even){background:#fafafa}pre{white-space:pre-wrap;word-wrap:break-word}</style>")
    html_rows.append("</head><body>")
    html_rows.append(f"<h2>Decision Report - {now} - mode: {escape(mode)}</h2>")
    html_rows.append(f"<p>Total decisions: {report['summary']['decisions_count']} (denied: {report['summary']['denied_count']})</p>")
    if extra:
        html_rows.append("<div><strong>Metadata:</strong><ul>")
        for k, v in extra.items():
            html_rows.append(f"<li>{escape(str(k))}: {escape(str(v))}</li>")
        html_rows.append("</ul></div>")
    html_rows.append("<table><thead><tr><th>Subject</th><th>Kind</th><th>Type</th><th>Severity</th><th>Locator</th><th>Payload</th></tr></thead><tbody>")
    for d in report["decisions"]:
        h = d["header"]
        cells = [escape(str(h.get(k, ""))) for k in fieldnames]
        payload = escape(json.dumps(d.get("payload"), indent=2))
        html_rows.append("<tr>" + "".join(f"<td>{c}</td>" for c in cells) + f"<td><pre>{payload}</pre></td></tr>")
    html_rows.append("</tbody></table></body></html>")
    with open(html_path, "w", encoding="utf-8") as fh:
        fh.write("\n".join(html_rows))

    # Raw
    if raw:
        raw_path = os.path.join(out_dir, f"decisions-{base_ts}-{mode}.raw.json")
        with open(raw_path, "w", encoding="utf-8") as fh:
            json.dump(to_raw_decisions(decisions), fh, indent=2)
        paths["raw"] = raw_path

    return paths

# --- Console printing with color/wrapping ---

def _rich_severity_text(severity: str, decision_type: str):
    """
    Return a Rich Text object styled by severity. Allowed decisions are always green.
    """
    if decision_type != TYPE_DENY:
        return Text(severity, style="green")
    rank = SEVERITIES.index(severity) if severity in SEVERITIES else 0
    if rank >= SEVERITY_RANK_ALERT:
        return Text(severity, style="bold red")
    if rank >= SEVERITY_RANK_WARNING:
        return Text(severity, style="bold yellow")
    return Text(severity, style="cyan")


def print_summary_and_report_path(decisions: List[Decision], report_paths: Dict[str, str],
                                  show_top: int = DEFAULT_SHOW_TOP, print_full_table: bool = False,
                                  console: Optional[Console] = None):
    """
    Print a compact summary and a colorful table of decisions.
    Denied decisions are listed first, most severe at the top.
    """
    console = console or _console
    summary = summarize(decisions)
    console.print("\nDecision summary:")
    console.print(f"- Total decisions: {summary['decisions_count']}")
    console.print(f"- Denied: {summary['denied_count']}")
    if decisions:
        ordered = sorted(
            decisions,
            key=lambda d: (d.header.type != TYPE_DENY, -SEVERITIES.index(d.header.severity)),
        )
        rows = decisions_to_table_rows(ordered)
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Subject", style="cyan", overflow="fold")
        table.add_column("Kind", style="magenta")
        table.add_column("Type")
        table.add_column("Severity", justify="right")
        table.add_column("Locator", overflow="fold")
        for r in (rows if print_full_table else rows[:show_top]):
            table.add_row(r[0], r[1], r[2], _rich_severity_text(r[3], r[2]), r[4])
        console.print(table)
    console.print("\nSaved reports:")
    for name, path in report_paths.items():
        console.print(f"- {name.upper()}: {path}")
    console.print()
