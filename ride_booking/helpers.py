# ride_booking/helpers.py
from dataclasses import dataclass
from datetime import date, datetime, time, timezone, tzinfo
from typing import List, Optional, Union

from .booking import VehicleClass


@dataclass(frozen=True)
class VehicleType:
    name: str
    description: str
    max_passengers: int

    @property
    def vehicle_class(self) -> VehicleClass:
        return vehicle_class_for(self.name)


VEHICLE_TYPES = (
    VehicleType("Business", "Mercedes E-Class or similar", 3),
    VehicleType("First Class", "Mercedes S-Class or similar", 3),
    VehicleType("XL", "Mercedes V-Class or similar", 6),
)


def vehicles_for_passengers(passengers: int) -> List[VehicleType]:
    return [v for v in VEHICLE_TYPES if v.max_passengers >= passengers]


def vehicle_class_for(name: str) -> VehicleClass:
    """
    Maps a free-text vehicle/model name to the booking API class:
    first class or S-Class -> first, XL or V-Class -> xl, anything else business.
    """
    lowered = (name or "").lower()
    if "first" in lowered or "s-class" in lowered:
        return VehicleClass.FIRST
    if "xl" in lowered or "v-class" in lowered:
        return VehicleClass.XL
    return VehicleClass.BUSINESS


def _internet_datetime(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def combine_date_time(
    day: Union[date, datetime],
    time_of_day: Union[time, datetime],
    tz: Optional[tzinfo] = None,
) -> str:
    """
    Builds one pickup instant from a calendar day and a separately chosen
    time of day (seconds zeroed), rendered in UTC as an internet date-time.
    `tz` is the zone the wall-clock values are meant in; when None, an aware
    `time_of_day` keeps its own offset and a naive one means local time.
    If the two cannot be combined, `day` alone is formatted; a `day` that is
    not a date raises TypeError.
    """
    zone = tz if tz is not None else getattr(time_of_day, "tzinfo", None)
    try:
        combined = datetime(day.year, day.month, day.day, time_of_day.hour, time_of_day.minute, 0,
                            tzinfo=zone)
    except (ValueError, TypeError, AttributeError):
        if not isinstance(day, date):
            raise TypeError(f"combine_date_time needs a date, got {type(day).__name__}")
        fallback = day if isinstance(day, datetime) else datetime(day.year, day.month, day.day)
        if fallback.tzinfo is None:
            fallback = fallback.replace(tzinfo=tz) if tz else fallback.astimezone()
        return _internet_datetime(fallback)

    if combined.tzinfo is None:
        combined = combined.astimezone()
    return _internet_datetime(combined)
