# app.py
import logging
from datetime import date, time, timedelta
from zoneinfo import ZoneInfo

import streamlit as st

from ride_booking.aggregator import ROUND_ERRORS, AutocompleteAggregator
from ride_booking.autocomplete import get_place_details
from ride_booking.booking import (
    BookingError,
    BookingPayload,
    BookingSubmitter,
    Customer,
    LocationRef,
    TripDetails,
)
from ride_booking.config import load_settings
from ride_booking.helpers import combine_date_time, vehicles_for_passengers
from ride_booking.http_client import HttpClient

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# -------------------------
# Streamlit page setup
# -------------------------
st.set_page_config(page_title="Book a Ride", layout="centered")
st.title("Book a Ride")

# Validate API key early
try:
    settings = load_settings()
except ValueError as e:
    st.error(str(e))
    st.stop()

client = HttpClient(timeout_sec=settings.autocomplete_timeout_sec)


# One aggregator per browser session
if "aggregator" not in st.session_state:
    st.session_state.aggregator = AutocompleteAggregator(client, settings)

aggregator = st.session_state.aggregator
submitter = BookingSubmitter(client, settings)


# -------------------------
# Helpers: location field with autocomplete
# -------------------------
def location_field(label: str, key: str) -> LocationRef:
    """Text input + suggestion selectbox. Falls back to the raw text."""
    user_input = st.text_input(label, key=f"{key}_input").strip()
    if len(user_input) < 3:
        return LocationRef(description=user_input)

    try:
        suggestions = aggregator.search(user_input)
    except ROUND_ERRORS as e:
        st.warning(f"Autocomplete unavailable (the typed address will be used): {e}")
        return LocationRef(description=user_input)

    if not suggestions:
        st.caption("No matching places found.")
        return LocationRef(description=user_input)

    selected = st.selectbox(
        f"Select {label.lower()}",
        options=suggestions,
        format_func=lambda s: s.full_text,
        key=f"{key}_select",
    )
    place = selected.as_localized_place()

    try:
        details = get_place_details(client, settings, selected.place_id, aggregator.language_code)
        if details.get("formatted_address"):
            st.caption(f"Resolved address: {details['formatted_address']}")
    except ROUND_ERRORS as e:
        st.caption(f"Could not resolve selection: {e}")

    # Backend always stores the English name
    return LocationRef(description=place.database_name, place_id=place.place_id)


# -------------------------
# UI Inputs
# -------------------------
st.subheader("Trip")
pickup = location_field("Pickup", "pickup")
destination = location_field("Destination", "destination")

col_date, col_time = st.columns(2)
with col_date:
    pickup_date = st.date_input("Date", value=date.today() + timedelta(days=1), min_value=date.today())
with col_time:
    pickup_time = st.time_input("Time", value=time(9, 0), step=timedelta(minutes=5))

passengers = st.number_input("Passengers", min_value=1, max_value=6, value=1, step=1)
vehicles = vehicles_for_passengers(int(passengers))
vehicle = st.radio(
    "Vehicle",
    options=vehicles,
    format_func=lambda v: f"{v.name}: {v.description} (up to {v.max_passengers})",
)
flight_number = st.text_input("Flight number (optional)").strip()

st.subheader("Contact")
name = st.text_input("Full name").strip()
email = st.text_input("Email").strip()
phone = st.text_input("Phone").strip()

submit_btn = st.button("Request Booking")

# -------------------------
# Submit
# -------------------------
if submit_btn:
    missing = [label for label, value in (
        ("pickup", pickup.description),
        ("destination", destination.description),
        ("name", name),
        ("email", email),
        ("phone", phone),
    ) if not value]
    if missing:
        st.error(f"Please fill in: {', '.join(missing)}")
        st.stop()

    payload = BookingPayload(
        customer=Customer(name=name, email=email, phone=phone),
        trip=TripDetails(
            pickup=pickup,
            destination=destination,
            when_iso8601=combine_date_time(pickup_date, pickup_time, ZoneInfo(settings.booking_timezone)),
            vehicle_class=vehicle.vehicle_class,
            passengers=int(passengers),
            flight_number=flight_number or None,
        ),
    )

    with st.spinner("Sending trip request..."):
        try:
            result = submitter.submit(payload)
        except BookingError as e:
            st.error(f"Booking failed: {e}")
            st.stop()

    st.success(result.message or "Trip request received.")
    if result.request_id is not None:
        st.info(f"Request ID: {result.request_id}")
