import pytest

from trip_request.adapters.rendering import FoliumMapOverlay
from trip_request.domain.errors import RenderingError
from trip_request.domain.models import Endpoint, GeoLocation

HOME = GeoLocation(45.52, -122.68)
ZOO = GeoLocation(45.51, -122.71)


@pytest.fixture
def overlay():
    overlay = FoliumMapOverlay()
    overlay.set_endpoint(Endpoint.ORIGIN, HOME, "Home")
    overlay.set_endpoint(Endpoint.DESTINATION, ZOO, "Zoo")
    return overlay


def test_reverse_styles_swaps_markers(overlay):
    overlay.reverse_styles()

    assert overlay.markers[Endpoint.ORIGIN] == (ZOO, "Zoo")
    assert overlay.markers[Endpoint.DESTINATION] == (HOME, "Home")
    assert overlay.reversed_styles
    assert overlay.color(Endpoint.ORIGIN) == "green"


def test_clear_trip_keeps_endpoint_markers(overlay):
    overlay.clear_trip()

    assert overlay.markers == {
        Endpoint.ORIGIN: (HOME, "Home"),
        Endpoint.DESTINATION: (ZOO, "Zoo"),
    }


def test_render_writes_html(overlay, tmp_path):
    output = overlay.render(tmp_path / "maps" / "trip.html")

    assert output.exists()
    assert "leaflet" in output.read_text(encoding="utf-8").lower()


def test_render_without_markers(tmp_path):
    with pytest.raises(RenderingError) as excinfo:
        FoliumMapOverlay().render(tmp_path / "empty.html")

    assert excinfo.value.renderer_type == "folium"
