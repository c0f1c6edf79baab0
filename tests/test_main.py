"""
Tests for the command-line option wiring.
"""

import pytest

from portrait_studio.data.constants import CUSTOM_MARKER, AspectKey
from portrait_studio.main import build_parser, configure_session
from portrait_studio.services.exceptions import StudioError
from portrait_studio.services.studio_session import StudioSession

from .conftest import make_jpeg, make_png


@pytest.fixture
def session(fake_client, memory_history):
    return StudioSession(fake_client, memory_history, locale="en")


@pytest.fixture
def photos(tmp_path):
    me = tmp_path / "me.png"
    me.write_bytes(make_png())
    dress = tmp_path / "dress.jpg"
    dress.write_bytes(make_jpeg())
    return me, dress


class TestConfigureSession:

    def test_aspects_enabled_from_flags(self, session, photos):
        me, dress = photos
        args = build_parser().parse_args([
            "-c", str(me),
            "--background", "tropical_beach",
            "--clothing", "business_suit",
            "--clothing-image", str(dress),
            "--clothing-request", "no tie",
            "--weather", "snowfall",
            "-r", "golden hour",
            "--makeup",
        ])

        configure_session(session, args)

        options = session.options
        assert [image.name for image in session.character_images] == ["me.png"]
        assert options.aspect(AspectKey.BACKGROUND).value == "tropical_beach"
        clothing = options.aspect(AspectKey.CLOTHING)
        assert clothing.enabled
        assert clothing.value == CUSTOM_MARKER
        assert [image.name for image in clothing.custom_files] == ["dress.jpg"]
        assert clothing.custom_request == "no tie"
        assert options.aspect(AspectKey.WEATHER).value == "snowfall"
        assert not options.aspect(AspectKey.VEHICLE).enabled
        assert options.additional_request == "golden hour"
        assert options.apply_makeup and not options.adjust_skin_tone

    def test_request_only_enables_aspect(self, session, photos):
        args = build_parser().parse_args(["-c", str(photos[0]), "--vehicle-request", "red convertible"])

        configure_session(session, args)

        vehicle = session.options.aspect(AspectKey.VEHICLE)
        assert vehicle.enabled
        assert vehicle.value == ""
        assert vehicle.custom_request == "red convertible"

    def test_suggest_fills_request(self, session, photos):
        args = build_parser().parse_args(["-c", str(photos[0]), "--weather", "snowfall", "--suggest"])

        configure_session(session, args)

        assert session.options.additional_request.startswith("A scene with 1 character(s).")

    def test_weather_has_no_image_flag(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--weather-image", "sky.png"])

    def test_missing_character_file_is_a_studio_error(self, session, tmp_path):
        args = build_parser().parse_args(["-c", str(tmp_path / "missing.png")])

        with pytest.raises(StudioError):
            configure_session(session, args)
