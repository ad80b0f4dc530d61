"""Airport and airplane domain entities."""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from skyfront.domain.entities.common import pick, to_float, to_int


@dataclass
class Airport:
    """Domain entity representing an airport."""

    id: str
    code: str
    name: str
    city: str
    country: str
    timezone: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def label(self) -> str:
        return f"{self.code} - {self.city}"

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Airport":
        latitude = payload.get("latitude")
        longitude = payload.get("longitude")
        return cls(
            id=str(payload.get("id", "")),
            code=payload.get("code", ""),
            name=payload.get("name", ""),
            city=payload.get("city", ""),
            country=payload.get("country", ""),
            timezone=pick(payload, "timezone", "timeZone", default=""),
            latitude=to_float(latitude) if latitude is not None else None,
            longitude=to_float(longitude) if longitude is not None else None,
        )


class AirplaneCapacity(str, Enum):
    """Size category of an airplane."""

    SMALL = "SMALL"
    MEDIUM = "MEDIUM"
    LARGE = "LARGE"


@dataclass
class Airplane:
    """Domain entity representing an airplane and its cabin layout."""

    id: str
    model: str
    registration: str
    capacity: Optional[AirplaneCapacity] = None
    first_class_capacity: int = 0
    business_class_capacity: int = 0
    economy_class_capacity: int = 0
    total_seats: int = 0
    is_active: bool = True

    def __post_init__(self):
        if self.capacity is not None and not isinstance(self.capacity, AirplaneCapacity):
            self.capacity = AirplaneCapacity(str(self.capacity).upper())
        if not self.total_seats:
            self.total_seats = (
                self.first_class_capacity
                + self.business_class_capacity
                + self.economy_class_capacity
            )

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Airplane":
        return cls(
            id=str(payload.get("id", "")),
            model=payload.get("model", ""),
            registration=pick(payload, "registrationNumber", "registration", default=""),
            capacity=pick(payload, "size", "capacity"),
            first_class_capacity=to_int(pick(payload, "firstClassCapacity", "firstClassSeats")),
            business_class_capacity=to_int(pick(payload, "businessClassCapacity", "businessClassSeats")),
            economy_class_capacity=to_int(pick(payload, "economyClassCapacity", "economyClassSeats")),
            total_seats=to_int(pick(payload, "totalSeats", "totalCapacity")),
            is_active=bool(pick(payload, "active", "isActive", default=True)),
        )
