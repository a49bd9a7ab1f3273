"""Runtime configuration, built once from the environment."""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SecretStr, model_validator

DEFAULT_API_BASE_URL = "https://xray.cloud.getxray.app/api/v2"

# Settings field -> environment variables, first non-empty wins.
ENV_VARS: Mapping[str, tuple[str, ...]] = {
    "results_path": ("PW_RESULTS_PATH",),
    "mapping_path": ("TEST_MAPPING_PATH",),
    "output_path": ("XRAY_OUTPUT_PATH",),
    "summary": ("XRAY_SUMMARY",),
    "description": ("XRAY_DESCRIPTION",),
    "user": ("XRAY_USER",),
    "api_base_url": ("XRAY_API_URL",),
    "client_id": ("XRAY_CLIENT_ID",),
    "client_secret": ("XRAY_CLIENT_SECRET",),
    "project_key": ("XRAY_PROJECT_KEY", "JIRA_PROJECT_KEY"),
    "max_retries": ("MAX_RETRIES",),
    "backoff_factor": ("RETRY_BACKOFF_FACTOR",),
}


class XraySettings(BaseModel):
    """Configuration for generating and pushing Xray results."""

    model_config = ConfigDict(frozen=True)

    results_path: Path = Path("playwright-report/results.json")
    mapping_path: Path = Path("config/test-mapping.json")
    output_path: Path = Path("reports/xray-results.json")

    summary: str = "Playwright execution results"
    description: str = "Framework auto-generated Xray payload"
    user: str = "automation-bot"

    api_base_url: str = DEFAULT_API_BASE_URL
    client_id: str | None = None
    client_secret: SecretStr | None = None
    project_key: str | None = None

    max_retries: int = Field(default=3, ge=1)
    retry_delay: float = Field(
        default=1.0, ge=0, description="Initial delay in seconds"
    )
    backoff_factor: float = Field(default=2.0, ge=1)

    @model_validator(mode="before")
    @classmethod
    def _convert_retry_delay_ms(cls, data: Any) -> Any:
        """Accept 'retry_delay_ms' as an alternative to 'retry_delay' in seconds."""
        if isinstance(data, dict) and "retry_delay_ms" in data:
            data = dict(data)
            delay_ms = data.pop("retry_delay_ms")
            try:
                data["retry_delay"] = float(delay_ms) / 1000
            except (TypeError, ValueError) as e:
                msg = f"retry_delay_ms must be a number: {delay_ms!r}"
                raise ValueError(msg) from e
        return data

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "XraySettings":
        """Build settings from environment variables, ignoring empty values."""
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}

        for field_name, names in ENV_VARS.items():
            for name in names:
                if value := env.get(name, "").strip():
                    values[field_name] = value
                    break

        if delay_ms := env.get("RETRY_DELAY_MS", "").strip():
            values["retry_delay_ms"] = delay_ms

        return cls(**values)

    @property
    def has_credentials(self) -> bool:
        return bool(self.client_id and self.client_secret)
