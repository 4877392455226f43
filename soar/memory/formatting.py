"""
Memory text formatting.

Turns trips and flight bookings into the natural-language text stored
in the memory store, and turns search results back into text for the
chat reply. Each stored text starts with a temporal marker
(PAST / CURRENT / UPCOMING TRIP or FLIGHT) computed against "now", so
the LLM can answer "upcoming" vs "past" questions from memory alone.
Travel preferences are stored as several short memories plus a summary.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Sequence

from soar.models.memory import MemoryRecord
from soar.models.travel import Flight, FlightBooking, TravelPreference, Trip

TOP_MEMORY_LIMIT = 3
FALLBACK_HEADER = "Based on your travel information:"


class TemporalLabel(str, Enum):
    """Position of a trip or flight relative to now."""
    PAST = "PAST"
    CURRENT = "CURRENT"
    UPCOMING = "UPCOMING"


def _as_utc(value: datetime) -> datetime:
    # Naive datetimes from the app are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_long_date(value: datetime) -> str:
    """Format as 'October 19, 2026'."""
    return f"{value:%B} {value.day}, {value.year}"


def format_long_datetime(value: datetime) -> str:
    """Format as 'October 19, 2026 at 3:45 PM'."""
    hour = value.hour % 12 or 12
    return f"{format_long_date(value)} at {hour}:{value:%M %p}"


def temporal_label(start: datetime, end: datetime, now: Optional[datetime] = None) -> TemporalLabel:
    """
    Classify the interval [start, end] against now.

    PAST when it ended before now, UPCOMING when it starts after now,
    CURRENT otherwise (boundaries count as current).
    """
    now = _as_utc(now or datetime.now(timezone.utc))
    if _as_utc(end) < now:
        return TemporalLabel.PAST
    if _as_utc(start) > now:
        return TemporalLabel.UPCOMING
    return TemporalLabel.CURRENT


def describe_flight(flight: Flight) -> str:
    """Three-line description: route line, departure, arrival."""
    airline = f" ({flight.airline})" if flight.airline else ""
    return (
        f"Flight {flight.number}{airline}: From {flight.departure_name} ({flight.departure_code}) "
        f"to {flight.arrival_name} ({flight.arrival_code})\n"
        f"  Departure: {format_long_datetime(flight.departure_date)}\n"
        f"  Arrival: {format_long_datetime(flight.arrival_date)}"
    )


def describe_trip(trip: Trip, now: Optional[datetime] = None) -> str:
    """
    Detailed memory text for a trip.

    Contains the temporal marker, the name and date range, and one
    bullet line per flight and per accommodation, in trip order.
    """
    start = format_long_date(trip.start_date)
    end = format_long_date(trip.end_date)
    label = temporal_label(trip.start_date, trip.end_date, now)

    if label is TemporalLabel.PAST:
        time_context = f"PAST TRIP: This trip has already concluded as of {end}."
    elif label is TemporalLabel.UPCOMING:
        time_context = f"UPCOMING TRIP: This trip is scheduled for the future, starting on {start}."
    else:
        time_context = f"CURRENT TRIP: This trip is currently in progress (from {start} to {end})."

    flight_lines = ["Flights:"]
    for flight in trip.flights:
        flight_lines.append(f"• {describe_flight(flight)}")
    if not trip.flights:
        flight_lines.append("• None booked")

    stay_lines = ["Accommodations:"]
    for stay in trip.accommodations:
        stay_lines.append(
            f"• Stay at {stay.name} ({stay.agent})\n"
            f"  Address: {stay.address}\n"
            f"  Check-in: {format_long_date(stay.check_in_date)}\n"
            f"  Check-out: {format_long_date(stay.check_out_date)}"
        )
    if not trip.accommodations:
        stay_lines.append("• None booked")

    return "\n\n".join([
        time_context,
        f"Trip to {trip.name} from {start} to {end}.",
        "\n".join(flight_lines),
        "\n".join(stay_lines),
    ])


def describe_flight_booking(booking: FlightBooking, now: Optional[datetime] = None) -> str:
    """Memory text for a flight booking, with its temporal marker and trip context."""
    flight = booking.flight
    label = temporal_label(flight.departure_date, flight.arrival_date, now)

    time_context = {
        TemporalLabel.PAST: "PAST FLIGHT: This flight has already completed.",
        TemporalLabel.UPCOMING: "UPCOMING FLIGHT: This flight is scheduled for the future.",
        TemporalLabel.CURRENT: "CURRENT FLIGHT: This flight is currently in progress.",
    }[label]

    airline = f" ({flight.airline})" if flight.airline else ""
    lines = [
        f"Flight booking: {flight.number}{airline}",
        f"From: {flight.departure_name} ({flight.departure_code})",
        f"To: {flight.arrival_name} ({flight.arrival_code})",
        f"Departure: {format_long_datetime(flight.departure_date)}",
        f"Arrival: {format_long_datetime(flight.arrival_date)}",
    ]
    if booking.is_part_of_trip:
        lines.append(f"This flight is part of your {booking.trip_id or 'existing'} trip.")
    else:
        lines.append("This is a standalone flight booking (not part of a trip).")

    return time_context + "\n\n" + "\n".join(lines)


def describe_preferences(preferences: TravelPreference) -> List[str]:
    """
    Memory texts for a user's travel preferences.

    One short memory per non-empty category, one for budget and travel
    style, and one summary holding everything.

    Example:
        >>> describe_preferences(prefs)[0]
        'My preferred destination types: Beach, City'
    """
    categories = [
        ("Destination Types", preferences.preferred_destination_types),
        ("Destinations", preferences.preferred_destinations),
        ("Accommodation", preferences.accommodation_preferences),
        ("Activities", preferences.activity_preferences),
        ("Dietary Restrictions", preferences.dietary_restrictions),
        ("Seasonal Preferences", preferences.seasonal_preferences),
    ]

    texts = [
        f"My preferred {category.lower()}: {', '.join(items)}"
        for category, items in categories
        if items
    ]
    texts.append(
        f"My travel style: Budget range: {preferences.budget_range}, "
        f"Planning style: {preferences.travel_style}"
    )

    summary = [
        "Travel Preferences Summary:",
        f"- Destination Types: {', '.join(preferences.preferred_destination_types)}",
        f"- Destinations: {', '.join(preferences.preferred_destinations)}",
        f"- Accommodation: {', '.join(preferences.accommodation_preferences)}",
        f"- Budget Range: {preferences.budget_range}",
        f"- Travel Style: {preferences.travel_style}",
        f"- Activities: {', '.join(preferences.activity_preferences)}",
        f"- Dietary Restrictions: {', '.join(preferences.dietary_restrictions)}",
        f"- Seasonal Preferences: {', '.join(preferences.seasonal_preferences)}",
    ]
    texts.append("\n".join(summary))
    return texts


def select_top_memories(records: Sequence[MemoryRecord], limit: int = TOP_MEMORY_LIMIT) -> List[MemoryRecord]:
    """
    Highest-scoring records first, at most `limit`.

    Missing scores rank as 0. sorted() is stable, so ties keep the
    order the store returned them in.
    """
    return sorted(records, key=lambda r: r.score_or_zero, reverse=True)[:limit]


def build_fallback_response(records: Sequence[MemoryRecord]) -> str:
    """Plain bullet list of memory texts, used when the LLM reply fails."""
    bullets = "\n\n".join(f"• {record.text}" for record in records)
    return f"{FALLBACK_HEADER}\n\n{bullets}"
