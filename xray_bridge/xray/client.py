"""Client for the Xray cloud REST API."""

import logging
from collections.abc import AsyncGenerator, Awaitable, Callable, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

import aiohttp

from xray_bridge.config import XraySettings
from xray_bridge.errors import XrayApiError, XrayConfigError
from xray_bridge.retry import retry_with_backoff
from xray_bridge.xray.models import ImportResult

log = logging.getLogger(__name__)


def is_transient(error: Exception) -> bool:
    """Connection problems, throttling and 5xx answers are worth retrying."""
    if isinstance(error, XrayApiError):
        return error.retryable
    return isinstance(error, aiohttp.ClientConnectionError)


def build_import_document(
    payload: Mapping[str, Any],
    *,
    project_key: str | None = None,
    test_execution_key: str | None = None,
) -> dict[str, Any]:
    """Add the optional project and target execution to a results document."""
    document = dict(payload)
    if project_key:
        document["info"] = {**document.get("info", {}), "project": project_key}
    if test_execution_key:
        document["testExecutionKey"] = test_execution_key
    return document


@dataclass(kw_only=True)
class XrayClient:
    """Xray cloud client holding one session and a cached token."""

    settings: XraySettings
    session: aiohttp.ClientSession = field(repr=False)
    _token: str | None = field(default=None, repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, settings: XraySettings
    ) -> AsyncGenerator["XrayClient", None]:
        """Create client with managed session lifecycle."""
        # Relative request paths are joined onto base_url, which needs a trailing "/"
        async with aiohttp.ClientSession(
            base_url=settings.api_base_url.rstrip("/") + "/",
            headers={"Accept": "application/json"},
        ) as session:
            yield cls(settings=settings, session=session)

    async def authenticate(self) -> str:
        """Exchange client credentials for a bearer token.

        Raises:
            XrayConfigError: If credentials are not configured
            XrayApiError: If the API rejects the request

        """
        if self._token is not None:
            return self._token

        if not self.settings.has_credentials or self.settings.client_secret is None:
            raise XrayConfigError(
                "XRAY_CLIENT_ID and XRAY_CLIENT_SECRET environment variables "
                "must be set"
            )

        payload = {
            "client_id": self.settings.client_id,
            "client_secret": self.settings.client_secret.get_secret_value(),
        }
        log.info("Authenticating against %s", self.settings.api_base_url)

        async def request() -> str:
            async with self.session.post("authenticate", json=payload) as response:
                await self._raise_for_status(response)
                token = await response.json(content_type=None)
            return str(token)

        self._token = await self._with_retry(request)
        return self._token

    async def import_execution(
        self, payload: Mapping[str, Any], *, test_execution_key: str | None = None
    ) -> ImportResult:
        """Import an Xray JSON results document.

        Results are attached to ``test_execution_key`` when given, otherwise Xray
        creates a new test execution in the configured project.
        """
        document = build_import_document(
            payload,
            project_key=self.settings.project_key,
            test_execution_key=test_execution_key,
        )
        token = await self.authenticate()
        headers = {"Authorization": f"Bearer {token}"}

        log.info(
            "Importing %d test result(s) into Xray", len(document.get("tests", []))
        )

        async def request() -> ImportResult:
            async with self.session.post(
                "import/execution", json=document, headers=headers
            ) as response:
                await self._raise_for_status(response)
                data = await response.json(content_type=None)
            return ImportResult.model_validate(data)

        result = await self._with_retry(request)
        log.info("Test results uploaded to Xray: %s", result.key)
        return result

    async def _with_retry[T](self, operation: Callable[[], Awaitable[T]]) -> T:
        return await retry_with_backoff(
            operation,
            attempts=self.settings.max_retries,
            delay=self.settings.retry_delay,
            factor=self.settings.backoff_factor,
            retry_on=is_transient,
        )

    @staticmethod
    async def _raise_for_status(response: aiohttp.ClientResponse) -> None:
        if response.status >= 300:
            text = await response.text()
            raise XrayApiError(response.status, text)
