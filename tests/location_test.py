from __future__ import annotations

import itertools

import pytest

from factories import NOMINATIM_URL, make_candidate
from weatherdash.entities import CanonicalPlace, Coordinates, GeocodeCandidate
from weatherdash.providers.base import NotFound, ServiceError
from weatherdash.providers.nominatim import NominatimGeocoder
from weatherdash.services.location import LocationResolver, choose_candidate, format_label


class GeocoderStub:
    def __init__(self, candidates=None, reverse_result=None, error=None) -> None:
        self.candidates = candidates or []
        self.reverse_result = reverse_result
        self.error = error
        self.queries = []

    def search(self, query):
        self.queries.append(query)
        if self.error:
            raise self.error
        return self.candidates

    def reverse(self, latitude, longitude):
        if self.error:
            raise self.error
        return self.reverse_result


# Candidate selection ----------------------------------------------------
def test_type_match_wins_regardless_of_order():
    typed = make_candidate(1, 1, type="Town", address={"town": "Typed"})
    others = [
        make_candidate(2, 2, type="administrative", address={"city": "Addressed"}),
        make_candidate(3, 3, type="river"),
    ]
    for ordering in itertools.permutations([typed, *others]):
        assert choose_candidate(list(ordering)) is typed


def test_first_type_match_in_input_order():
    village = make_candidate(1, 1, type="village")
    city = make_candidate(2, 2, type="city")
    assert choose_candidate([village, city]) is village


def test_address_match_when_no_type_matches():
    first = make_candidate(1, 1, type="administrative", address={"county": "Somewhere"})
    hamlet = make_candidate(2, 2, type="locality", address={"hamlet": "Tiny"})
    assert choose_candidate([first, hamlet]) is hamlet


def test_falls_back_to_first_candidate():
    first = make_candidate(1, 1, type="peak", address={"state": "Alps"})
    second = make_candidate(2, 2, type="river")
    assert choose_candidate([first, second]) is first


def test_non_string_type_from_payload_is_comparable():
    odd = GeocodeCandidate.from_payload({"lat": "1", "lon": "1", "type": 12})
    town = GeocodeCandidate.from_payload({"lat": "2", "lon": "2", "type": "Town"})
    assert choose_candidate([odd, town]) is town


def test_from_payload_requires_coordinates():
    with pytest.raises(ValueError):
        GeocodeCandidate.from_payload({"lon": "1", "type": "city"})


def test_choose_candidate_requires_results():
    with pytest.raises(NotFound):
        choose_candidate([])


# Label formatting -------------------------------------------------------
def test_city_preferred_over_state():
    label = format_label(make_candidate(address={"state": "X", "city": "Y"}))
    assert "Y" in label
    assert "X" not in label
    assert format_label(make_candidate(address={"city": "Y", "state": "X"})) == label


def test_place_and_country_from_address():
    candidate = make_candidate(address={"city": "Paris", "country": "France"})
    assert format_label(candidate) == "Paris, France"


def test_place_key_priority():
    candidate = make_candidate(address={"county": "Kent", "village": "Chilham", "country": "United Kingdom"})
    assert format_label(candidate) == "Chilham, United Kingdom"


def test_name_used_when_address_has_no_place():
    candidate = make_candidate(name="Mont Blanc", address={"country": "France"})
    assert format_label(candidate) == "Mont Blanc, France"


def test_display_name_segments_as_fallback():
    candidate = make_candidate(display_name="Mysuru, Mysuru taluk, Karnataka, 570001,  India ")
    assert format_label(candidate) == "Mysuru, India"


def test_only_country_resolves():
    assert format_label(make_candidate(address={"country": "Iceland"})) == "Iceland"


def test_only_place_resolves():
    assert format_label(make_candidate(address={"town": "Hill Valley"})) == "Hill Valley"


def test_nothing_resolves():
    assert format_label(make_candidate()) is None
    assert format_label(None) is None


def test_blank_values_are_skipped():
    candidate = make_candidate(address={"city": "  ", "town": "Realtown", "country": ""}, display_name="A, B")
    assert format_label(candidate) == "Realtown, B"


def test_label_formatting_is_idempotent():
    candidate = make_candidate(address={"city": "Paris", "country": "France"})
    assert format_label(candidate) == format_label(candidate)


# Resolver ---------------------------------------------------------------
def test_resolve_by_search_paris():
    geocoder = GeocoderStub(
        candidates=[make_candidate(48.85, 2.35, type="administrative", address={"city": "Paris", "country": "France"})]
    )
    place = LocationResolver(geocoder).resolve_by_search("  Paris ")

    assert place == CanonicalPlace(label="Paris, France", coordinates=Coordinates(48.85, 2.35))
    assert geocoder.queries == ["Paris"]


def test_resolve_by_search_not_found():
    with pytest.raises(NotFound):
        LocationResolver(GeocoderStub(candidates=[])).resolve_by_search("Atlantis")


def test_resolve_by_search_propagates_service_error():
    with pytest.raises(ServiceError):
        LocationResolver(GeocoderStub(error=ServiceError("HTTP 500"))).resolve_by_search("Paris")


def test_resolve_by_search_rejects_blank_query():
    geocoder = GeocoderStub()
    with pytest.raises(ValueError):
        LocationResolver(geocoder).resolve_by_search("   ")
    assert geocoder.queries == []


def test_resolve_by_search_coordinate_label_fallback():
    geocoder = GeocoderStub(candidates=[make_candidate(10.5, -20.25)])
    place = LocationResolver(geocoder).resolve_by_search("somewhere")
    assert place.label == "10.5, -20.25"


def test_resolve_by_coordinates_uses_reverse_label():
    geocoder = GeocoderStub(reverse_result=make_candidate(address={"city": "Mysuru", "country": "India"}))
    place = LocationResolver(geocoder).resolve_by_coordinates(12.2958, 76.6394)

    assert place.label == "Mysuru, India"
    assert place.coordinates == Coordinates(12.2958, 76.6394)


def test_resolve_by_coordinates_swallows_errors(caplog):
    geocoder = GeocoderStub(error=ServiceError("HTTP 502"))
    place = LocationResolver(geocoder).resolve_by_coordinates(12.2958, 76.6394)

    assert place.label == "12.30, 76.64"
    assert "Reverse geocoding failed" in caplog.text


def test_resolve_by_coordinates_without_name():
    geocoder = GeocoderStub(reverse_result=make_candidate())
    place = LocationResolver(geocoder).resolve_by_coordinates(-33.8688, 151.2093)
    assert place.label == "-33.87, 151.21"


def test_search_end_to_end_with_nominatim(requests_mock, paris_search_payload):
    resolver = LocationResolver(NominatimGeocoder(base_url=NOMINATIM_URL))
    requests_mock.get(f"{NOMINATIM_URL}/search", json=paris_search_payload)

    place = resolver.resolve_by_search("Paris")

    # the Texas town is typed, the French capital is only "administrative"
    assert place.label == "Paris, United States"
    assert place.coordinates.lat == pytest.approx(33.6617962)


def test_reverse_end_to_end_with_http_failure(requests_mock):
    resolver = LocationResolver(NominatimGeocoder(base_url=NOMINATIM_URL))
    requests_mock.get(f"{NOMINATIM_URL}/reverse", status_code=500)

    place = resolver.resolve_by_coordinates(51.5074, -0.1278)

    assert place.label == "51.51, -0.13"
