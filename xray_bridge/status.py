"""Translate runner statuses into the Xray status vocabulary."""

from collections.abc import Mapping

from xray_bridge.models.payload import XrayStatus

STATUS_MAP: Mapping[str, XrayStatus] = {
    "passed": "PASSED",
    "failed": "FAILED",
}


def normalize_status(status: str) -> XrayStatus:
    """Map a runner status to PASSED, FAILED or SKIPPED.

    Anything other than ``passed`` or ``failed`` is reported as SKIPPED,
    including ``timedOut`` and unknown values.
    """
    return STATUS_MAP.get(status, "SKIPPED")
