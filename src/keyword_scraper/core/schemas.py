"""Pydantic request schemas for the public API."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class ExtractRequest(BaseModel):
    """Body of ``POST /extract``.

    ``url`` is optional at the schema level so that a missing URL produces
    the service's own ``"URL is required"`` response rather than a generic
    validation error.  ``country`` is only echoed back, so any JSON scalar
    is accepted and stringified.
    """

    model_config = ConfigDict(extra="ignore")

    url: Optional[str] = None
    country: Optional[str] = "Unknown"

    @field_validator("country", mode="before")
    @classmethod
    def _stringify_country(cls, value: Any) -> Any:
        if isinstance(value, (bool, int, float)):
            return str(value)
        return value
