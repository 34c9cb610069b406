# ride_booking/config.py
from dataclasses import dataclass
from typing import Tuple
import os

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    api_key: str

    # Google Places (New) endpoints
    autocomplete_url: str = "https://places.googleapis.com/v1/places:autocomplete"
    place_details_url: str = "https://places.googleapis.com/v1/places"

    # Booking backend
    booking_url: str = "https://veramo.ch/.netlify/functions/trip-request"
    booking_timeout_sec: int = 30

    # Autocomplete behaviour
    autocomplete_timeout_sec: int = 10
    debounce_sec: float = 0.3
    region_code: str = "ch"
    included_regions: Tuple[str, ...] = ("ch",)
    fallback_language: str = "en"

    # Pickup times are entered as local Swiss wall-clock time
    booking_timezone: str = "Europe/Zurich"


def load_settings() -> Settings:
    load_dotenv()
    key = os.getenv("GOOGLE_PLACES_API_KEY", "").strip()

    if not key:
        raise ValueError(
            "Missing GOOGLE_PLACES_API_KEY.\n"
            "Add it to a .env file locally or export it before starting the app.\n"
            "Example (local): export GOOGLE_PLACES_API_KEY='YOUR_KEY'"
        )

    overrides = {}
    booking_url = os.getenv("BOOKING_URL", "").strip()
    if booking_url:
        overrides["booking_url"] = booking_url

    region = os.getenv("PLACES_REGION_CODE", "").strip().lower()
    if region:
        overrides["region_code"] = region
        overrides["included_regions"] = (region,)

    return Settings(api_key=key, **overrides)
