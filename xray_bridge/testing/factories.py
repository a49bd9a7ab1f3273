"""Test factories for generating test data."""

from polyfactory import Use
from polyfactory.factories.pydantic_factory import ModelFactory

from xray_bridge.models.payload import TrackerInfo, TrackerTestResult
from xray_bridge.models.report import Spec, Suite, TestRunReport


class SpecFactory(ModelFactory[Spec]):
    """Factory for Spec."""

    status = Use(lambda: "passed")
    error = None


class SuiteFactory(ModelFactory[Suite]):
    """Factory for Suite."""

    specs = Use(list[Spec])
    suites = Use(list[Suite])


class TestRunReportFactory(ModelFactory[TestRunReport]):
    """Factory for TestRunReport."""

    __test__ = False

    suites = Use(list[Suite])
    stats = None


class TrackerInfoFactory(ModelFactory[TrackerInfo]):
    """Factory for TrackerInfo."""


class TrackerTestResultFactory(ModelFactory[TrackerTestResult]):
    """Factory for TrackerTestResult."""

    __test__ = False

    start = "2099-01-01T12:00:00.000Z"
    finish = "2099-01-01T12:00:05.000Z"
