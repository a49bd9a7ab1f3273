"""Join a test run report with the title mapping into an Xray payload."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from xray_bridge.config import XraySettings
from xray_bridge.models.mapping import TitleKeyMapping
from xray_bridge.models.payload import TrackerInfo, TrackerPayload, TrackerTestResult
from xray_bridge.models.report import Spec, TestRunReport
from xray_bridge.status import normalize_status

log = logging.getLogger(__name__)

COMPLETED_COMMENT = "Test completed"


@dataclass(frozen=True, kw_only=True)
class Assembly:
    """Assembled payload plus the number of specs dropped for lack of a mapping."""

    payload: TrackerPayload
    unmapped: int


def to_iso(value: datetime) -> str:
    """Format a timestamp as UTC ISO-8601 with millisecond precision."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    utc = value.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_info(
    settings: XraySettings, report: TestRunReport, now: datetime
) -> TrackerInfo:
    """Build the info block from settings and the report's run stats.

    Falls back to ``now`` for both dates when the report has no stats.
    """
    start = finish = now
    stats = report.stats
    if stats is not None and stats.start_time is not None:
        start = stats.start_time
        finish = start + timedelta(milliseconds=stats.duration or 0)

    return TrackerInfo(
        summary=settings.summary,
        description=settings.description,
        user=settings.user,
        start_date=to_iso(start),
        finish_date=to_iso(finish),
    )


def build_comment(spec: Spec) -> str:
    if spec.status == "failed":
        return spec.error.message if spec.error else ""
    return COMPLETED_COMMENT


def assemble_payload(
    report: TestRunReport, mapping: TitleKeyMapping, info: TrackerInfo
) -> Assembly:
    """Convert every mapped spec into an Xray test result, in report order."""
    tests: list[TrackerTestResult] = []
    unmapped = 0

    for spec in report.iter_specs():
        test_key = mapping.get(spec.title)
        if not test_key:
            log.warning('Unmapped test skipped: "%s"', spec.title)
            unmapped += 1
            continue

        tests.append(
            TrackerTestResult(
                test_key=test_key,
                status=normalize_status(spec.status),
                start=to_iso(spec.start_time),
                finish=to_iso(spec.end_time),
                comment=build_comment(spec),
            )
        )

    if unmapped:
        log.warning("%d spec(s) skipped due to missing mappings", unmapped)

    return Assembly(payload=TrackerPayload(info=info, tests=tests), unmapped=unmapped)
