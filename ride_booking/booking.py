# ride_booking/booking.py
import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import requests

from .config import Settings
from .http_client import HttpClient

logger = logging.getLogger(__name__)


# -------------------------
# Errors
# -------------------------
class BookingError(Exception):
    pass


class InvalidEndpointError(BookingError):
    def __init__(self, url: str):
        super().__init__(f"Invalid booking endpoint configuration: {url!r}")
        self.url = url


class EncodingFailureError(BookingError):
    def __init__(self, cause: Exception):
        super().__init__("Failed to encode request data")
        self.cause = cause


class ServerRejectedError(BookingError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class TransportError(BookingError):
    def __init__(self, cause: Exception):
        super().__init__(f"Network error: {cause}")
        self.cause = cause


class MalformedResponseError(BookingError):
    def __init__(self, detail: str = ""):
        super().__init__("An unexpected error occurred" + (f": {detail}" if detail else ""))


# -------------------------
# Payload / envelope
# -------------------------
class VehicleClass(str, Enum):
    BUSINESS = "business"
    FIRST = "first"
    XL = "xl"


@dataclass(frozen=True)
class Customer:
    name: str
    email: str
    phone: str


@dataclass(frozen=True)
class LocationRef:
    description: str
    place_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"description": self.description}
        if self.place_id is not None:
            out["place_id"] = self.place_id
        return out


@dataclass(frozen=True)
class TripDetails:
    pickup: LocationRef
    destination: LocationRef
    when_iso8601: str
    vehicle_class: VehicleClass
    passengers: Optional[int] = None
    flight_number: Optional[str] = None


@dataclass(frozen=True)
class BookingPayload:
    customer: Customer
    trip: TripDetails

    def to_dict(self) -> Dict[str, Any]:
        trip: Dict[str, Any] = {
            "pickup": self.trip.pickup.to_dict(),
            "destination": self.trip.destination.to_dict(),
            "dateTime": self.trip.when_iso8601,
        }
        if self.trip.passengers is not None:
            trip["passengers"] = self.trip.passengers
        if self.trip.flight_number is not None:
            trip["flightNumber"] = self.trip.flight_number
        trip["vehicleClass"] = VehicleClass(self.trip.vehicle_class).value
        return {
            "customer": {
                "name": self.customer.name,
                "email": self.customer.email,
                "phone": self.customer.phone,
            },
            "trip": trip,
        }


def _optional(data: Dict[str, Any], key: str, kind) -> Any:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise MalformedResponseError(f"field {key!r} has unexpected type {type(value).__name__}")
    return value


@dataclass(frozen=True)
class BookingResult:
    success: Optional[bool] = None
    request_id: Optional[int] = None
    message: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "BookingResult":
        if not isinstance(data, dict):
            raise MalformedResponseError("response body is not an object")
        return cls(
            success=_optional(data, "success", bool),
            request_id=_optional(data, "requestId", int),
            message=_optional(data, "message", str),
            error=_optional(data, "error", str),
        )


# -------------------------
# Submitter
# -------------------------
class BookingSubmitter:
    def __init__(self, client: HttpClient, settings: Settings):
        self.client = client
        self.settings = settings

    def _endpoint(self) -> str:
        url = self.settings.booking_url
        parsed = urlparse(url or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise InvalidEndpointError(url)
        return url

    def submit(self, payload: BookingPayload) -> BookingResult:
        """
        POST the booking once. Returns the server envelope on success and
        raises a BookingError subclass otherwise; retrying is up to the caller.
        """
        url = self._endpoint()

        try:
            body = json.dumps(payload.to_dict(), allow_nan=False)
        except (TypeError, ValueError) as e:
            raise EncodingFailureError(e) from e

        logger.info("Submitting trip request to %s", url)
        logger.debug("Trip request body: %s", body)

        try:
            resp = self.client.post(
                url,
                data=body,
                headers={"Content-Type": "application/json"},
                timeout=self.settings.booking_timeout_sec,
            )
        except requests.RequestException as e:
            logger.warning("Trip request transport failure: %s", e)
            raise TransportError(e) from e

        status = resp.status_code
        ok_status = 200 <= status <= 299
        logger.debug("Trip request response %s: %s", status, resp.text)

        try:
            result = BookingResult.from_dict(resp.json())
        except ValueError as e:
            raise MalformedResponseError(f"body is not valid JSON (status {status})") from e

        if result.error is not None:
            logger.warning("Trip request rejected (%s): %s", status, result.error)
            raise ServerRejectedError(result.error, status)

        if not ok_status:
            logger.warning("Trip request rejected with status %s", status)
            raise ServerRejectedError(f"Server returned status {status}", status)

        logger.info("Trip request accepted (request id %s)", result.request_id)
        return result
