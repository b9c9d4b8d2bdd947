"""Request time entry reports from a running report service.

Usage examples:

- Last week for two users:
    `redmine-report --user-id 5 --user-id 7 --from 2024-03-04 --to 2024-03-10`

- Save every report as ``<user_id>.md`` instead of only printing it:
    `redmine-report --user-id 5 --from 2024-03-01 --to 2024-03-31 --save-dir out/`

- Preview the request without sending it:
    `redmine-report --user-id 5 --from 2024-03-01 --to 2024-03-31 --dry-run`
"""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import requests
from rich import box
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

DEFAULT_BASE_URL = "http://localhost:8000"
CONSOLE = Console()


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch per-user time entry reports")
    parser.add_argument("--base-url", type=str, default=DEFAULT_BASE_URL, help="Report service URL")
    parser.add_argument("--user-id", type=int, action="append", required=True, dest="user_ids",
                        help="Redmine user id (repeat for several users)")
    parser.add_argument("--from", type=str, required=True, dest="from_", help="First day, YYYY-MM-DD")
    parser.add_argument("--to", type=str, required=True, help="Last day, YYYY-MM-DD")
    parser.add_argument("--save-dir", type=Path, default=None, help="Write <user_id>.md files here")
    parser.add_argument("--timeout", type=float, default=120.0, help="HTTP timeout in seconds")
    parser.add_argument("--dry-run", action="store_true", help="Print the request without sending")
    return parser.parse_args(argv)


def build_payload(user_ids: Sequence[int], from_: str, to: str) -> Dict[str, Any]:
    return {"userIds": list(user_ids), "from": from_, "to": to}


def request_reports(
    base_url: str,
    payload: Dict[str, Any],
    timeout: float,
    session: Optional[requests.Session] = None,
) -> List[Dict[str, Any]]:
    http = session or requests.Session()
    resp = http.post(f"{base_url.rstrip('/')}/reports", json=payload, timeout=timeout)
    resp.raise_for_status()
    return resp.json().get("reports", [])


def save_reports(reports: Sequence[Dict[str, Any]], directory: Path) -> List[Path]:
    directory.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for item in reports:
        path = directory / f"{item['userId']}.md"
        path.write_text(item["report"], encoding="utf-8")
        written.append(path)
    return written


def print_reports(reports: Sequence[Dict[str, Any]]) -> None:
    summary = Table(title="Reports", box=box.SIMPLE)
    summary.add_column("user")
    summary.add_column("issues", justify="right")
    for item in reports:
        issue_count = sum(1 for line in item["report"].splitlines() if line.startswith("* **#"))
        summary.add_row(str(item["userId"]), str(issue_count))
    CONSOLE.print(summary)
    for item in reports:
        body = Markdown(item["report"]) if item["report"] else "[dim]no time entries[/]"
        CONSOLE.print(Panel(body, title=f"User {item['userId']}", border_style="cyan"))


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    payload = build_payload(args.user_ids, args.from_, args.to)

    if args.dry_run:
        CONSOLE.print(Panel.fit(f"[DRY] POST {args.base_url}/reports\n{payload}", title="Dry Run", border_style="magenta"))
        return 0

    try:
        reports = request_reports(args.base_url, payload, args.timeout)
    except requests.HTTPError as exc:
        detail = exc.response.text if exc.response is not None else str(exc)
        CONSOLE.print(Panel(f"[red]Report request rejected:[/]\n{detail}", title="Error", border_style="red"))
        return 1
    except requests.RequestException as exc:
        CONSOLE.print(Panel(f"[red]Report service unreachable:[/]\n{exc}", title="Error", border_style="red"))
        return 1

    print_reports(reports)
    if args.save_dir is not None:
        for path in save_reports(reports, args.save_dir):
            CONSOLE.print(f"[green]✔ Saved {path}[/]")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
