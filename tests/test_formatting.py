# FILE: tests/test_formatting.py

from datetime import datetime, timedelta, timezone

from soar.memory.formatting import (
    TemporalLabel,
    build_fallback_response,
    describe_flight,
    describe_flight_booking,
    describe_preferences,
    describe_trip,
    format_long_date,
    format_long_datetime,
    select_top_memories,
    temporal_label,
)


def test_long_date_formats():
    assert format_long_date(datetime(2026, 10, 19)) == "October 19, 2026"
    assert format_long_datetime(datetime(2026, 10, 30, 11, 5)) == "October 30, 2026 at 11:05 AM"
    assert format_long_datetime(datetime(2026, 10, 30, 15, 45)) == "October 30, 2026 at 3:45 PM"
    assert format_long_datetime(datetime(2026, 10, 30, 0, 0)) == "October 30, 2026 at 12:00 AM"


def test_temporal_label(now):
    day = timedelta(days=1)
    assert temporal_label(now - 5 * day, now - day, now) is TemporalLabel.PAST
    assert temporal_label(now + day, now + 5 * day, now) is TemporalLabel.UPCOMING
    assert temporal_label(now - day, now + day, now) is TemporalLabel.CURRENT


def test_temporal_label_boundaries_are_current(now):
    assert temporal_label(now, now + timedelta(days=1), now) is TemporalLabel.CURRENT
    assert temporal_label(now - timedelta(days=1), now, now) is TemporalLabel.CURRENT


def test_temporal_label_treats_naive_as_utc(now):
    naive_now = now.replace(tzinfo=None)
    assert temporal_label(naive_now + timedelta(hours=1), naive_now + timedelta(hours=2), now) is TemporalLabel.UPCOMING


def test_describe_flight(make_flight):
    text = describe_flight(make_flight())

    assert text.splitlines() == [
        "Flight NH106 (ANA): From Los Angeles (LAX) to Tokyo Haneda (HND)",
        "  Departure: October 30, 2026 at 11:05 AM",
        "  Arrival: October 30, 2026 at 11:05 PM",
    ]


def test_describe_upcoming_trip(make_trip, now):
    text = describe_trip(make_trip(), now=now)

    assert text.startswith("UPCOMING TRIP: This trip is scheduled for the future, starting on October 30, 2026.")
    assert "Trip to Tokyo from October 30, 2026 to November 8, 2026." in text
    assert "Flights:\n• Flight NH106 (ANA): From Los Angeles (LAX) to Tokyo Haneda (HND)" in text
    assert "Accommodations:\n• Stay at Park Hyatt Tokyo (Booking.com)" in text
    assert "  Address: 3-7-1-2 Nishi-Shinjuku, Tokyo" in text
    assert "  Check-in: October 31, 2026" in text
    assert "  Check-out: November 7, 2026" in text


def test_describe_past_and_current_trip(make_trip, now):
    past = make_trip(start=datetime(2026, 3, 1), end=datetime(2026, 3, 10))
    current = make_trip(start=datetime(2026, 10, 15), end=datetime(2026, 10, 25))

    assert describe_trip(past, now=now).startswith(
        "PAST TRIP: This trip has already concluded as of March 10, 2026."
    )
    assert describe_trip(current, now=now).startswith(
        "CURRENT TRIP: This trip is currently in progress (from October 15, 2026 to October 25, 2026)."
    )


def test_describe_trip_keeps_flight_order(make_trip, make_flight, now):
    outbound = make_flight(number="NH106")
    inbound = make_flight(number="NH105", departure=datetime(2026, 11, 8, 17, 0))
    text = describe_trip(make_trip(flights=[outbound, inbound]), now=now)

    assert text.index("• Flight NH106") < text.index("• Flight NH105")


def test_trip_text_has_one_bullet_per_booking(make_trip, make_flight, now):
    flights = [make_flight(number="NH106"), make_flight(number="NH105", departure=datetime(2026, 11, 8, 17, 0))]
    trip = make_trip(flights=flights)
    text = describe_trip(trip, now=now)

    bullets = [line for line in text.splitlines() if line.startswith("• ")]
    assert len(bullets) == len(trip.flights) + len(trip.accommodations)
    assert "Tokyo" in text
    assert "October 30, 2026" in text
    assert "November 8, 2026" in text


def test_describe_trip_without_bookings(make_trip, now):
    text = describe_trip(make_trip(flights=[], accommodations=[]), now=now)

    assert "Flights:\n• None booked" in text
    assert "Accommodations:\n• None booked" in text


def test_describe_standalone_booking(make_booking, now):
    text = describe_flight_booking(make_booking(), now=now)

    assert text.startswith("UPCOMING FLIGHT: This flight is scheduled for the future.")
    assert "Flight booking: NH106 (ANA)" in text
    assert "From: Los Angeles (LAX)" in text
    assert "To: Tokyo Haneda (HND)" in text
    assert "Departure: October 30, 2026 at 11:05 AM" in text
    assert text.endswith("This is a standalone flight booking (not part of a trip).")


def test_describe_booking_in_trip(make_booking, now):
    text = describe_flight_booking(make_booking(trip_id="t1"), now=now)
    assert text.endswith("This flight is part of your t1 trip.")


def test_describe_past_booking(make_booking):
    later = datetime(2027, 1, 1, tzinfo=timezone.utc)
    assert describe_flight_booking(make_booking(), now=later).startswith("PAST FLIGHT:")


def test_describe_preferences_skips_empty_categories(make_preferences):
    texts = describe_preferences(make_preferences())

    assert texts[:5] == [
        "My preferred destination types: Beach, City",
        "My preferred destinations: Japan",
        "My preferred accommodation: Boutique hotels",
        "My preferred activities: Food tours, Hiking",
        "My preferred seasonal preferences: Autumn",
    ]
    assert texts[5] == "My travel style: Budget range: Mid-range, Planning style: Planner"
    assert len(texts) == 7


def test_describe_preferences_summary_lists_every_category(make_preferences):
    summary = describe_preferences(make_preferences())[-1]

    assert summary.splitlines() == [
        "Travel Preferences Summary:",
        "- Destination Types: Beach, City",
        "- Destinations: Japan",
        "- Accommodation: Boutique hotels",
        "- Budget Range: Mid-range",
        "- Travel Style: Planner",
        "- Activities: Food tours, Hiking",
        "- Dietary Restrictions: ",
        "- Seasonal Preferences: Autumn",
    ]


def test_describe_preferences_with_only_budget_and_style(make_preferences):
    prefs = make_preferences(
        preferred_destination_types=[],
        preferred_destinations=[],
        accommodation_preferences=[],
        activity_preferences=[],
        seasonal_preferences=[],
    )

    texts = describe_preferences(prefs)

    assert len(texts) == 2
    assert texts[0].startswith("My travel style:")
    assert texts[1].startswith("Travel Preferences Summary:")


def test_select_top_memories_orders_by_score(make_record):
    records = [
        make_record("low", 0.1),
        make_record("high", 0.9),
        make_record("none"),
        make_record("mid", 0.5),
    ]

    top = select_top_memories(records)

    assert [r.text for r in top] == ["high", "mid", "low"]


def test_select_top_memories_is_stable_for_ties(make_record):
    records = [make_record("a", 0.5), make_record("b", 0.5), make_record("c", 0.5), make_record("d", 0.5)]

    assert [r.text for r in select_top_memories(records)] == ["a", "b", "c"]


def test_build_fallback_response(make_record):
    records = [make_record("Trip to Tokyo"), make_record("Flight NH106")]

    assert build_fallback_response(records) == (
        "Based on your travel information:\n\n• Trip to Tokyo\n\n• Flight NH106"
    )
