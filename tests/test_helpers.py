from datetime import date, datetime, time, timedelta, timezone

import pytest

from ride_booking.booking import VehicleClass
from ride_booking.helpers import (
    VEHICLE_TYPES,
    combine_date_time,
    vehicle_class_for,
    vehicles_for_passengers,
)


@pytest.mark.parametrize("name, expected", [
    ("Mercedes S-Class", VehicleClass.FIRST),
    ("Mercedes V-Class", VehicleClass.XL),
    ("Mercedes E-Class", VehicleClass.BUSINESS),
    ("FIRST CLASS", VehicleClass.FIRST),
    ("xl", VehicleClass.XL),
    ("", VehicleClass.BUSINESS),
])
def test_vehicle_class_for(name, expected):
    assert vehicle_class_for(name) is expected


def test_catalogue_classes_and_capacity():
    assert [v.vehicle_class for v in VEHICLE_TYPES] == [
        VehicleClass.BUSINESS, VehicleClass.FIRST, VehicleClass.XL,
    ]
    assert [v.name for v in vehicles_for_passengers(4)] == ["XL"]
    assert len(vehicles_for_passengers(1)) == 3


def test_combine_date_time_utc():
    assert combine_date_time(date(2025, 6, 1), time(14, 30), timezone.utc) == "2025-06-01T14:30:00Z"


def test_combine_date_time_converts_from_wall_clock_zone():
    cest = timezone(timedelta(hours=2))
    assert combine_date_time(date(2025, 6, 1), time(14, 30), cest) == "2025-06-01T12:30:00Z"


def test_combine_date_time_takes_only_relevant_parts():
    day = datetime(2025, 6, 1, 23, 59, 59)
    clock = datetime(1999, 1, 1, 14, 30, 45)
    assert combine_date_time(day, clock, timezone.utc) == "2025-06-01T14:30:00Z"


def test_combine_date_time_falls_back_to_day():
    day = datetime(2025, 6, 1, 8, 15, tzinfo=timezone.utc)
    assert combine_date_time(day, object(), timezone.utc) == "2025-06-01T08:15:00Z"


def test_combine_date_time_keeps_offset_of_aware_time():
    clock = time(14, 30, tzinfo=timezone(timedelta(hours=2)))
    assert combine_date_time(date(2025, 6, 1), clock) == "2025-06-01T12:30:00Z"


def test_combine_date_time_explicit_zone_wins_over_time_offset():
    clock = time(14, 30, tzinfo=timezone(timedelta(hours=2)))
    assert combine_date_time(date(2025, 6, 1), clock, timezone.utc) == "2025-06-01T14:30:00Z"


def test_combine_date_time_rejects_non_date_day():
    with pytest.raises(TypeError):
        combine_date_time("2025-06-01", time(14, 30), timezone.utc)
