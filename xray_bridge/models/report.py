"""Models for Playwright JSON test run reports."""

from collections.abc import Iterator, Sequence
from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from xray_bridge.models.base import Model


class SpecError(Model):
    """Error attached to a failed spec."""

    message: str = Field(default="", description="Error message reported by the runner")


class Spec(Model):
    """Result of a single test case."""

    title: str = Field(..., description="Test title, used as the mapping key")
    status: str = Field(
        ..., description="Runner status (passed, failed, skipped, timedOut, ...)"
    )
    start_time: datetime = Field(..., alias="startTime", description="Start timestamp")
    end_time: datetime = Field(..., alias="endTime", description="End timestamp")
    error: SpecError | None = Field(default=None, description="Failure details")

    @field_validator("error", mode="before")
    @classmethod
    def _coerce_error(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"message": value}
        return value


class Suite(Model):
    """Named grouping of specs, possibly nesting child suites."""

    title: str = Field(default="", description="Suite title")
    specs: Sequence[Spec] = Field(default_factory=list, description="Specs in order")
    suites: Sequence["Suite"] = Field(
        default_factory=list, description="Child suites in order"
    )

    def iter_specs(self) -> Iterator[Spec]:
        """Yield own specs first, then the specs of child suites depth-first."""
        yield from self.specs
        for child in self.suites:
            yield from child.iter_specs()


class RunStats(Model):
    """Run level metadata written by the reporter."""

    start_time: datetime | None = Field(default=None, alias="startTime")
    duration: float | None = Field(default=None, description="Run duration in ms")


class TestRunReport(Model):
    """Root of a test run report."""

    __test__ = False

    suites: Sequence[Suite] = Field(
        default_factory=list, description="Top level suites"
    )
    stats: RunStats | None = Field(default=None, description="Run metadata")

    def iter_specs(self) -> Iterator[Spec]:
        """Yield every spec in traversal order."""
        for suite in self.suites:
            yield from suite.iter_specs()
