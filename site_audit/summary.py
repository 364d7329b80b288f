"""Condensed summary of a run, read back from the files it produced."""

import argparse
import json
from collections.abc import Sequence
from pathlib import Path

from site_audit.layout import RunLayout
from site_audit.models.summary import UNKNOWN, Summary
from site_audit.parsing import (
    broken_link_count,
    pa11y_status,
    parse_lighthouse_scores,
    parse_security_fields,
    smoke_status,
)


def read_output(path: Path) -> str:
    """Contents of a check output file, empty when the check wrote nothing."""
    try:
        return path.read_text(errors="replace")
    except FileNotFoundError:
        return ""


def requested_url(layout: RunLayout) -> str | None:
    """URL recorded by Lighthouse in its JSON report."""
    try:
        report = json.loads(read_output(layout.lighthouse_json))
    except ValueError:
        return None
    url = report.get("requestedUrl") if isinstance(report, dict) else None
    return url if isinstance(url, str) else None


def build_summary(url: str, layout: RunLayout, *, security: bool) -> Summary:
    """Scrape every output file of a run into a Summary.

    Only reads files, so it can be repeated on the same directory.
    """
    security_fields = None
    if security and layout.security.is_file():
        security_fields = parse_security_fields(read_output(layout.security))

    return Summary(
        url=url,
        run_dir=layout.root,
        lighthouse=parse_lighthouse_scores(read_output(layout.lighthouse_json)),
        pa11y=pa11y_status(read_output(layout.pa11y)),
        broken_links=broken_link_count(read_output(layout.broken_links)),
        smoke=smoke_status(read_output(layout.smoke)),
        security=security_fields,
    )


def print_summary(summary: Summary) -> None:
    print()
    for line in summary.lines():
        print(line)


def main(argv: Sequence[str] | None = None) -> None:
    """Print the summary of an existing run directory."""
    parser = argparse.ArgumentParser(
        prog="site-audit-summary",
        description="Summarize the reports of a previous site-audit run",
    )
    parser.add_argument("run_dir", type=Path, help="Run directory to summarize")
    parser.add_argument("--url", help="URL to show (default: read from Lighthouse)")
    parser.add_argument(
        "--security", action="store_true", help="Include the security line"
    )
    args = parser.parse_args(argv)

    layout = RunLayout(args.run_dir)
    url = args.url or requested_url(layout) or UNKNOWN
    print_summary(build_summary(url, layout, security=args.security))


if __name__ == "__main__":  # pragma: no cover
    main()
