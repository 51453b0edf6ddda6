from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ResourceData(BaseModel):
    """A resource as carried inside the ``{"data": ...}`` envelope.

    Only the identity fields are typed; ``attributes`` and any unknown
    top-level keys pass through untouched.
    """

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    organisation_id: str | None = None
    type: str | None = None
    version: int | None = None
    attributes: dict[str, Any] = Field(default_factory=dict)


class DataEnvelope(BaseModel):
    data: ResourceData | None = None
