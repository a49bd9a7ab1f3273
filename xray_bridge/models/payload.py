"""Models for the Xray JSON import payload."""

from collections.abc import Sequence
from typing import Literal

from pydantic import Field

from xray_bridge.models.base import Model

type XrayStatus = Literal["PASSED", "FAILED", "SKIPPED"]


class TrackerInfo(Model):
    """Test execution metadata sent in the ``info`` block."""

    summary: str
    description: str
    user: str
    start_date: str = Field(..., alias="startDate", description="ISO-8601 run start")
    finish_date: str = Field(..., alias="finishDate", description="ISO-8601 run end")


class TrackerTestResult(Model):
    """One test result entry of the payload."""

    __test__ = False

    test_key: str = Field(..., alias="testKey", description="Xray test issue key")
    status: XrayStatus
    start: str = Field(..., description="ISO-8601 start timestamp")
    finish: str = Field(..., description="ISO-8601 finish timestamp")
    comment: str = ""


class TrackerPayload(Model):
    """Complete Xray import document."""

    info: TrackerInfo
    tests: Sequence[TrackerTestResult] = Field(default_factory=list)

    def to_json_dict(self) -> dict[str, object]:
        """Dump with wire (camelCase) names in declared field order."""
        return self.model_dump(by_alias=True, mode="json")
