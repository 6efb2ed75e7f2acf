"""Tests for the parameter normalizer."""

from datetime import date

import pytest

from trip_request.domain.errors import ParameterError
from trip_request.domain.models import (
    Endpoint,
    GeoLocation,
    OptimizeType,
    TravelMode,
    TriangleWeights,
    TripRequest,
)
from trip_request.services.normalizer import (
    ParameterNormalizer,
    is_placeholder,
    parse_arrive_by,
    parse_location,
    parse_query_string,
)

TODAY = date(2024, 6, 15)


@pytest.fixture
def normalizer():
    return ParameterNormalizer(today=lambda: TODAY)


class TestLocations:
    def test_coordinate_text_is_parsed(self, normalizer):
        patch = normalizer.normalize({"fromPlace": "45.5,-122.6"})

        hint = patch.location(Endpoint.ORIGIN)
        assert hint.text == "45.5,-122.6"
        assert hint.coordinate == GeoLocation(45.5, -122.6)

    def test_place_name_with_comma_stays_text(self, normalizer):
        patch = normalizer.normalize({"toPlace": "Portland, OR"})

        hint = patch.location(Endpoint.DESTINATION)
        assert hint.text == "Portland, OR"
        assert hint.coordinate is None

    def test_first_alias_wins(self, normalizer):
        patch = normalizer.normalize(
            {"fromPlace": "Union Station", "from": "Airport", "Orig": "Zoo"}
        )
        assert patch.location(Endpoint.ORIGIN).text == "Zoo"

    def test_placeholder_falls_through_to_next_alias(self, normalizer):
        patch = normalizer.normalize({"Orig": "true", "from": "Main St"})
        assert patch.location(Endpoint.ORIGIN).text == "Main St"

    def test_rejected_placeholder_carries_raw_value(self):
        with pytest.raises(ParameterError) as excinfo:
            parse_location("true")

        assert excinfo.value.value == "true"
        assert not hasattr(excinfo.value, "key")

    def test_autocomplete_label_is_ignored(self, normalizer):
        patch = normalizer.normalize({"toPlace": "Address, intersection, or Stop ID"})
        assert patch.location(Endpoint.DESTINATION) is None

    def test_blank_value_is_skipped(self, normalizer):
        patch = normalizer.normalize({"Orig": "   ", "fromPlace": "Library"})
        assert patch.location(Endpoint.ORIGIN).text == "Library"

    def test_coordinate_override_keeps_text(self, normalizer):
        patch = normalizer.normalize({"fromPlace": "Home", "fromCoord": "45.1,-122.2"})

        hint = patch.location(Endpoint.ORIGIN)
        assert hint.text == "Home"
        assert hint.coordinate == GeoLocation(45.1, -122.2)

    def test_blank_coordinate_override_is_ignored(self, normalizer):
        patch = normalizer.normalize({"toPlace": "Work", "toCoord": "0.0,0.0"})

        hint = patch.location(Endpoint.DESTINATION)
        assert hint.text == "Work"
        assert hint.coordinate is None


class TestDateAndTime:
    def test_date_is_normalized(self, normalizer):
        assert normalizer.normalize({"date": "12/25/2024"}).date == "12/25/2024"

    def test_month_day_in_current_year(self, normalizer):
        patch = normalizer.normalize({"month": "August", "day": "15"})
        assert patch.date == "08/15/2024"

    def test_earlier_month_rolls_to_next_year(self, normalizer):
        patch = normalizer.normalize({"month": "3", "day": "5"})
        assert patch.date == "03/05/2025"

    def test_abbreviated_month_and_single_digit_day(self, normalizer):
        patch = normalizer.normalize({"month": "Oct", "day": "7"})
        assert patch.date == "10/07/2024"

    def test_bare_number_is_not_a_date(self, normalizer):
        assert normalizer.normalize({"date": "7"}).date is None

    def test_impossible_day_is_skipped(self, normalizer):
        patch = normalizer.normalize({"month": "2", "day": "30"})
        assert patch.date is None

    def test_after_means_depart(self, normalizer):
        patch = normalizer.normalize({"after": "7:02 p.m.", "time": "9:00 am"})
        assert patch.time == "7:02 pm"
        assert patch.arrive_by is False

    def test_by_means_arrive(self, normalizer):
        patch = normalizer.normalize({"by": "8:15 am"})
        assert patch.time == "8:15 am"
        assert patch.arrive_by is True

    def test_plain_time_leaves_arrive_by_alone(self, normalizer):
        patch = normalizer.normalize({"time": "19:02"})
        assert patch.time == "7:02 pm"
        assert patch.arrive_by is None

    def test_hour_minute_ampm(self, normalizer):
        patch = normalizer.normalize({"Hour": "7", "Minute": "05", "AmPm": "P.M."})
        assert patch.time == "7:05 pm"

    def test_unparseable_time_is_skipped(self, normalizer):
        assert normalizer.normalize({"time": "half past"}).time is None


class TestArriveBy:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("Arrive", True),
            ("arriving soon", True),
            ("true", True),
            ("Depart", False),
            ("departing", False),
            ("false", False),
        ],
    )
    def test_markers(self, value, expected):
        assert parse_arrive_by(value) is expected

    def test_unknown_value_falls_through(self, normalizer):
        patch = normalizer.normalize({"arrParam": "whenever", "arr": "Depart"})
        assert patch.arrive_by is False

    def test_first_alias_wins_over_conflicting_later_one(self, normalizer):
        patch = normalizer.normalize({"arrParam": "arrive", "arr": "departing"})
        assert patch.arrive_by is True

    def test_capitalised_alias(self, normalizer):
        assert normalizer.normalize({"Arr": "Depart"}).arrive_by is False


class TestOptions:
    def test_mode_by_name(self, normalizer):
        assert normalizer.normalize({"mode": "bicycle"}).mode is TravelMode.BICYCLE

    def test_mode_by_wire_value(self, normalizer):
        assert normalizer.normalize({"mode": "TRANSIT,WALK"}).mode is TravelMode.TRANSIT

    def test_unknown_mode_is_skipped(self, normalizer):
        assert normalizer.normalize({"mode": "teleport"}).mode is None

    def test_optimize_alias(self, normalizer):
        patch = normalizer.normalize({"opt": "bogus", "min": "safe"})
        assert patch.optimize is OptimizeType.SAFE

    def test_triangle_applied_only_with_triangle_optimize(self, normalizer):
        params = {
            "opt": "TRIANGLE",
            "triangleSafetyFactor": "1",
            "triangleSlopeFactor": "1",
            "triangleTimeFactor": "2",
        }
        request = TripRequest()
        normalizer.normalize(params).apply_to(request)

        assert request.optimize is OptimizeType.TRIANGLE
        assert request.triangle == TriangleWeights(0.25, 0.25, 0.5)

        params["opt"] = "QUICK"
        request = TripRequest()
        normalizer.normalize(params).apply_to(request)
        assert request.triangle == TriangleWeights()

    def test_max_walk_distance(self, normalizer):
        assert normalizer.normalize({"maxWalkDistance": "1200"}).max_walk_distance == 1200.0
        assert normalizer.normalize({"maxWalkDistance": "-5"}).max_walk_distance is None

    def test_router_id(self, normalizer):
        assert normalizer.normalize({"routerId": "trimet"}).router_id == "trimet"

    def test_wheelchair(self, normalizer):
        assert normalizer.normalize({"wheelchair": "true"}).wheelchair_accessible is True

    def test_wheelchair_ignored_when_disabled(self):
        normalizer = ParameterNormalizer(today=lambda: TODAY, wheelchair_enabled=False)
        assert normalizer.normalize({"wheelchair": "true"}).wheelchair_accessible is None

    def test_unknown_keys_are_ignored(self, normalizer):
        patch = normalizer.normalize({"utm_source": "mail", "mode": "WALK"})
        assert patch.resolved_groups == {"mode"}


def test_apply_to_leaves_unset_fields():
    request = TripRequest(date="01/02/2024", time="9:00 am", router_id="a")
    ParameterNormalizer(today=lambda: TODAY).normalize({"mode": "WALK"}).apply_to(request)

    assert request.mode is TravelMode.WALK
    assert request.date == "01/02/2024"
    assert request.time == "9:00 am"
    assert request.router_id == "a"


def test_is_placeholder():
    assert is_placeholder("true")
    assert is_placeholder("Address, Intersection, or Stop ID")
    assert not is_placeholder("True North Cafe")


def test_parse_query_string_keeps_first_occurrence():
    params = parse_query_string("?fromPlace=A&fromPlace=B&to=Pioneer+Square")
    assert params == {"fromPlace": "A", "to": "Pioneer Square"}
