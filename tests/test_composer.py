"""
Tests for prompt composition: clause order, aspect handling, angle variants.
"""

from portrait_studio.data.constants import ANGLE_VARIANTS, AspectKey
from portrait_studio.dto.options import OptionSet, ReferenceImage
from portrait_studio.services.prompting import templates
from portrait_studio.services.prompting.composer import (
    collect_custom_images,
    compose_base_prompt,
    compose_prompt,
    compose_variants,
)


def _image(name: str) -> ReferenceImage:
    return ReferenceImage.from_bytes(b"data-" + name.encode(), name=name, mime_type="image/png")


class TestBasePrompt:
    """Tests for compose_base_prompt."""

    def test_empty_options_only_identity_and_closing(self):
        prompt = compose_base_prompt(OptionSet())

        assert prompt == templates.IDENTITY_PRESERVATION + templates.CLOSING_CLAUSE

    def test_identity_clause_always_first(self):
        options = OptionSet(additional_request="make it fun", apply_makeup=True)
        options.aspect(AspectKey.CLOTHING).set_enabled(True)
        options.aspect(AspectKey.CLOTHING).select_preset("business_suit")

        prompt = compose_base_prompt(options)

        assert prompt.startswith(templates.IDENTITY_PRESERVATION)
        assert prompt.endswith(templates.CLOSING_CLAUSE)

    def test_cosmetic_clauses_follow_toggles(self):
        skin_only = compose_base_prompt(OptionSet(adjust_skin_tone=True))
        both = compose_base_prompt(OptionSet(adjust_skin_tone=True, apply_makeup=True))

        assert templates.SKIN_TONE_CLAUSE in skin_only
        assert templates.MAKEUP_CLAUSE not in skin_only
        assert both.index(templates.SKIN_TONE_CLAUSE) < both.index(templates.MAKEUP_CLAUSE)

    def test_disabled_aspect_emits_nothing(self):
        options = OptionSet()
        clothing = options.aspect(AspectKey.CLOTHING)
        clothing.select_preset("business_suit")
        clothing.set_custom_request("with a tie")

        assert compose_base_prompt(options) == compose_base_prompt(OptionSet())

    def test_preset_clause_uses_template_and_label(self):
        options = OptionSet()
        background = options.aspect(AspectKey.BACKGROUND)
        background.set_enabled(True)
        background.select_preset("tropical_beach")

        prompt = compose_base_prompt(options)

        assert "The background should be a: Tropical beach at sunset. " in prompt

    def test_custom_images_override_preset(self):
        options = OptionSet()
        vehicle = options.aspect(AspectKey.VEHICLE)
        vehicle.set_enabled(True)
        vehicle.select_preset("yacht")
        vehicle.add_custom_files([_image("car.png")])

        prompt = compose_base_prompt(options)

        assert "For the vehicle, use the provided custom image(s) as a reference. " in prompt
        assert "luxury yacht" not in prompt

    def test_weather_never_announces_unsent_reference(self):
        options = OptionSet()
        weather = options.aspect(AspectKey.WEATHER)
        weather.set_enabled(True)
        weather.select_preset("snowfall")
        weather.custom_files = [_image("sky.png")]

        prompt = compose_base_prompt(options)

        assert "For the weather, use the provided custom image" not in prompt
        assert collect_custom_images(options) == []

    def test_refinement_is_quoted_and_scoped(self):
        options = OptionSet()
        celebrity = options.aspect(AspectKey.CELEBRITY)
        celebrity.set_enabled(True)
        celebrity.set_custom_request("  standing on the left  ")

        prompt = compose_base_prompt(options)

        assert 'Specific request for the celebrity: "standing on the left". ' in prompt
        assert "Add a:" not in prompt

    def test_aspects_follow_fixed_order(self):
        options = OptionSet()
        for key, preset in [
            (AspectKey.WEATHER, "snowfall"),
            (AspectKey.CLOTHING, "winter_coat"),
            (AspectKey.VEHICLE, "motorbike"),
        ]:
            options.aspect(key).set_enabled(True)
            options.aspect(key).select_preset(preset)

        prompt = compose_base_prompt(options)

        clothing_at = prompt.index("Subjects should be dressed in")
        vehicle_at = prompt.index("Include a")
        weather_at = prompt.index("The weather and atmosphere should be")
        assert clothing_at < vehicle_at < weather_at

    def test_additional_request_before_closing(self):
        prompt = compose_base_prompt(OptionSet(additional_request="golden retriever nearby"))

        clause = 'Overall additional user request: "golden retriever nearby". '
        assert prompt.endswith(clause + templates.CLOSING_CLAUSE)

    def test_blank_additional_request_ignored(self):
        assert compose_base_prompt(OptionSet(additional_request="   ")) == compose_base_prompt(OptionSet())

    def test_deterministic(self):
        options = OptionSet(adjust_skin_tone=True, additional_request="x")
        options.aspect(AspectKey.WEATHER).set_enabled(True)
        options.aspect(AspectKey.WEATHER).select_preset("foggy")

        assert compose_base_prompt(options) == compose_base_prompt(options)


class TestVariants:
    """Tests for angle variants."""

    def test_four_variants_in_angle_order(self):
        composed = compose_prompt(OptionSet())

        assert len(composed.variants) == 4
        assert composed.angles == list(ANGLE_VARIANTS)
        for angle, variant in zip(ANGLE_VARIANTS, composed.variants):
            assert variant == f"{composed.base} The camera perspective should be a {angle}."

    def test_custom_angle_list(self):
        assert compose_variants("base", ["top shot"]) == ["base The camera perspective should be a top shot."]


class TestCustomImageCollection:
    """Tests for collect_custom_images."""

    def test_enabled_aspects_in_table_order(self):
        options = OptionSet()
        celebrity_image, clothing_image = _image("star.png"), _image("dress.png")
        options.aspect(AspectKey.CELEBRITY).set_enabled(True)
        options.aspect(AspectKey.CELEBRITY).add_custom_files([celebrity_image])
        options.aspect(AspectKey.CLOTHING).set_enabled(True)
        options.aspect(AspectKey.CLOTHING).add_custom_files([clothing_image])

        assert collect_custom_images(options) == [clothing_image, celebrity_image]

    def test_disabled_aspect_images_excluded(self):
        options = OptionSet()
        options.aspect(AspectKey.BACKGROUND).add_custom_files([_image("bg.png")])

        assert collect_custom_images(options) == []


class TestBackgroundRemovalPrompt:
    def test_fixed_instruction(self):
        prompt = templates.BACKGROUND_REMOVAL_PROMPT

        assert "transparent" in prompt
        assert "alpha channel" in prompt
        assert "Do not add any new elements" in prompt
