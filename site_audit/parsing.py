"""Pure functions extracting structured results from raw tool output."""

import json
import math
import re
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any, Literal, TypeAlias

from site_audit.models.summary import LighthouseScores, SecurityFields, Verdict

ScanStatus: TypeAlias = Literal["completed", "completed_with_findings", "issues_or_errors"]

SECONDS_PER_DAY = 86400
OPENSSL_DATE_FORMAT = "%b %d %H:%M:%S %Y GMT"
SCAN_FINDING_MARKERS = ("WARN-NEW:", "FAIL-NEW:")

BROKEN_LINKS_PATTERN = re.compile(r".* ([0-9]+) broken\.")
NOT_AFTER_PATTERN = re.compile(r"^notAfter=(.*)$", re.MULTILINE)
SMOKE_ISSUES_PATTERN = re.compile(r"^Issues found:", re.MULTILINE)


def find_missing_headers(header_dump: str, required: Sequence[str]) -> Sequence[str]:
    """Return the required header names with no ``<name>:`` line in the dump.

    Matching is case-insensitive and anchored at the start of a line, so a
    header mentioned inside another header's value does not count.
    """
    return [
        name
        for name in required
        if not re.search(
            rf"^{re.escape(name)}:", header_dump, re.IGNORECASE | re.MULTILINE
        )
    ]


def parse_not_after(cert_text: str) -> datetime | None:
    """Parse the ``notAfter=`` line of an openssl style certificate dump."""
    if (match := NOT_AFTER_PATTERN.search(cert_text)) is None:
        return None
    try:
        parsed = datetime.strptime(match.group(1).strip(), OPENSSL_DATE_FORMAT)
    except ValueError:
        return None
    return parsed.replace(tzinfo=UTC)


def cert_days_left(not_after: datetime, now: datetime) -> int:
    """Whole days until expiry, rounded toward negative infinity.

    An expired certificate gives a negative value: expiring 5 days ago exactly
    is -5, and one second later it is -6.
    """
    seconds = int(not_after.timestamp()) - int(now.timestamp())
    return seconds // SECONDS_PER_DAY


def classify_scan(returncode: int, output: str) -> ScanStatus:
    """Classify a ZAP run from its exit code and console output.

    ZAP exits non-zero both when it reports alerts and when it crashes; the
    ``WARN-NEW:``/``FAIL-NEW:`` markers only appear in the former case.
    """
    if returncode == 0:
        return "completed"
    if any(marker in output for marker in SCAN_FINDING_MARKERS):
        return "completed_with_findings"
    return "issues_or_errors"


def _percent(categories: dict[str, Any], key: str) -> int | None:
    category = categories.get(key)
    if not isinstance(category, dict):
        return None
    score = category.get("score")
    if not isinstance(score, int | float) or isinstance(score, bool):
        return None
    return math.floor(score * 100 + 0.5)


def parse_lighthouse_scores(report_json: str) -> LighthouseScores:
    """Extract the four category scores from a Lighthouse JSON report.

    Scores are in [0, 1] and are rounded half up to an integer percentage.
    Categories that are absent or have a null score stay unknown.
    """
    try:
        report = json.loads(report_json)
    except ValueError:
        return LighthouseScores()

    categories = report.get("categories") if isinstance(report, dict) else None
    if not isinstance(categories, dict):
        return LighthouseScores()

    return LighthouseScores(
        performance=_percent(categories, "performance"),
        accessibility=_percent(categories, "accessibility"),
        best_practices=_percent(categories, "best-practices"),
        seo=_percent(categories, "seo"),
    )


def pa11y_status(output: str) -> Verdict:
    """``PASS`` only when pa11y printed its no-issues message."""
    return "PASS" if "No issues found" in output else "ISSUES"


def broken_link_count(output: str) -> int:
    """Broken link count from the last ``... <N> broken.`` line, else 0."""
    count = 0
    for line in output.splitlines():
        if (match := BROKEN_LINKS_PATTERN.match(line)) is not None:
            count = int(match.group(1))
    return count


def smoke_status(output: str) -> Verdict:
    """``ISSUES`` when the smoke output has an ``Issues found:`` line."""
    return "ISSUES" if SMOKE_ISSUES_PATTERN.search(output) else "PASS"


def _last_value(text: str, key: str) -> str | None:
    values = re.findall(rf"^{re.escape(key)}: (.*)$", text, re.MULTILINE)
    return values[-1] if values else None


def parse_security_fields(report: str) -> SecurityFields:
    """Extract the summary fields from security.txt."""
    fields = {
        "missing_headers": _last_value(report, "missing_headers"),
        "cert_days_left": _last_value(report, "cert_days_left"),
        "zap": _last_value(report, "status"),
    }
    return SecurityFields(**{k: v for k, v in fields.items() if v})
