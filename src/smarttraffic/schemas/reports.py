"""Traffic report API schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class LocationModel(BaseModel):
    lat: float
    lng: float
    address: Optional[str] = None


class ReportRequest(BaseModel):
    city: Optional[str] = Field(default=None, description="Catalog city to report on.")
    lat: Optional[float] = Field(default=None, ge=-90, le=90)
    lng: Optional[float] = Field(default=None, ge=-180, le=180)
    address: Optional[str] = None
    radius_km: Optional[float] = Field(default=None, gt=0, le=50)
    persist: bool = True

    @model_validator(mode="after")
    def _require_location(self) -> "ReportRequest":
        if self.city is None and (self.lat is None or self.lng is None):
            raise ValueError("Provide either a city or both lat and lng.")
        return self


class ReportModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    content: str
    location: LocationModel
    source: str
    metrics: dict = Field(default_factory=dict)
    city: Optional[str] = None
    radius_km: Optional[float] = Field(None, alias="radiusKm")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
