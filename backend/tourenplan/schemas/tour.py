"""
Tourenplan Backend — Tour, Stop, Driver and Vehicle Schemas
=============================================================

What:  Pydantic models defining the JSON contract for the route tracker.
Why:   Strict input validation, automatic serialization, and OpenAPI docs.
How:   Response models read ORM objects directly (from_attributes=True).

Field names follow the persisted column names (`fahrer_id`, `reihenfolge`,
`foto_url`, ...) because the mobile client already speaks them.

Partial Updates:
    StopUpdate fields are all optional. The service reads
    `model_dump(exclude_unset=True)`, so a field that is absent is left
    alone while an explicit `null` clears it.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Drivers & Vehicles
# ══════════════════════════════════════════════════════════════════════════


class DriverCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("name must not be blank")
        return stripped


class DriverResponse(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class VehicleCreate(BaseModel):
    kennzeichen: str = Field(min_length=1, max_length=20, description="License plate")

    @field_validator("kennzeichen")
    @classmethod
    def normalize_plate(cls, v: str) -> str:
        stripped = " ".join(v.split()).upper()
        if not stripped:
            raise ValueError("kennzeichen must not be blank")
        return stripped


class VehicleResponse(BaseModel):
    id: int
    kennzeichen: str

    model_config = {"from_attributes": True}


# ══════════════════════════════════════════════════════════════════════════
# Stops
# ══════════════════════════════════════════════════════════════════════════


class StopCreate(BaseModel):
    """
    A new stop. `reihenfolge` is required: the caller decides the order,
    nothing is appended or renumbered automatically.
    """
    adresse: str = Field(min_length=1, description="Delivery address")
    lat: Optional[float] = Field(default=None, ge=-90, le=90)
    lng: Optional[float] = Field(default=None, ge=-180, le=180)
    reihenfolge: int = Field(description="Sequence index within the tour")
    kunde: Optional[str] = Field(default=None, description="Customer display name")
    kommission: Optional[str] = Field(default=None, description="Order/commission reference")
    telefon: Optional[str] = None
    hinweis: Optional[str] = Field(default=None, description="Free-text hint for the driver")


class StopUpdate(BaseModel):
    """Subset of {status, hinweis, telefon}; at least one must be supplied."""
    status: Optional[str] = Field(default=None, description="pending, arrived, done or skipped")
    hinweis: Optional[str] = None
    telefon: Optional[str] = None


class StopResponse(BaseModel):
    id: int
    tour_id: int
    adresse: str
    lat: Optional[float] = None
    lng: Optional[float] = None
    reihenfolge: int
    kunde: Optional[str] = None
    kommission: Optional[str] = None
    telefon: Optional[str] = None
    hinweis: Optional[str] = None
    status: str
    erledigt_am: Optional[datetime] = None
    foto_url: Optional[str] = None

    model_config = {"from_attributes": True}


class ReorderRequest(BaseModel):
    """The tour's complete list of stop ids in the desired order."""
    stopp_ids: List[int] = Field(description="Every stop id of the tour, each exactly once")


# ══════════════════════════════════════════════════════════════════════════
# Tours
# ══════════════════════════════════════════════════════════════════════════


class TourCreate(BaseModel):
    fahrer_id: int
    datum: date
    fahrzeug_id: Optional[int] = None
    bemerkung: Optional[str] = None
    stopps: List[StopCreate] = Field(
        default_factory=list,
        description="Stops created together with the tour",
    )


class TourResponse(BaseModel):
    id: int
    fahrer_id: int
    fahrzeug_id: Optional[int] = None
    datum: date
    bemerkung: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TourWithStops(BaseModel):
    """
    Result of the driver/date lookup. `tour` is null and `stopps` empty
    when the driver has no tour that day; that is not an error.
    """
    tour: Optional[TourResponse] = None
    stopps: List[StopResponse] = Field(default_factory=list)


# ══════════════════════════════════════════════════════════════════════════
# Photos & Demo
# ══════════════════════════════════════════════════════════════════════════


class PhotoUploadResponse(BaseModel):
    success: bool = True
    stoppId: int = Field(description="Stop the photo was attached to")
    foto_url: str = Field(description="Public path of the stored photo")
    filename: str = Field(description="Derived file name (customer + tour date)")


class SeedResponse(BaseModel):
    success: bool = True
    fahrer: DriverResponse
    fahrzeug: VehicleResponse
    tour: TourResponse
    stopps: List[StopResponse]
