"""Pydantic models for Xray cloud API responses."""

from pydantic import BaseModel, Field


class ImportResult(BaseModel):
    """Response from the execution import endpoint."""

    id: str
    key: str
    self_url: str | None = Field(default=None, alias="self")
