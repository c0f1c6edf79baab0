# portrait_studio/data/presets.py
from pydantic import BaseModel

from portrait_studio.data.constants import AspectKey


class Preset(BaseModel):
    """A predefined, named value for an aspect."""
    id: str
    label: str  # Display label, also the text inserted into the instruction


def _catalog(*items: tuple[str, str]) -> dict[str, Preset]:
    return {preset_id: Preset(id=preset_id, label=label) for preset_id, label in items}


# SINGLE SOURCE OF TRUTH for the selectable presets, keyed by aspect.
PRESET_CATALOG: dict[AspectKey, dict[str, Preset]] = {
    AspectKey.CLOTHING: _catalog(
        ("business_suit", "Business suit (tailored, dark navy)"),
        ("evening_gown", "Evening gown (floor-length, elegant)"),
        ("ao_dai", "Ao dai (traditional Vietnamese dress)"),
        ("casual_streetwear", "Casual streetwear"),
        ("wedding_attire", "Wedding attire (white gown and tuxedo)"),
        ("sportswear", "Sportswear"),
        ("winter_coat", "Winter coat and scarf"),
        ("superhero_costume", "Superhero costume"),
    ),
    AspectKey.BACKGROUND: _catalog(
        ("paris_eiffel", "Paris street with the Eiffel Tower"),
        ("tropical_beach", "Tropical beach at sunset"),
        ("city_rooftop", "City rooftop at night"),
        ("photo_studio", "Professional photo studio (seamless grey backdrop)"),
        ("cherry_blossom_park", "Cherry blossom park"),
        ("snowy_mountain", "Snowy mountain peak"),
        ("luxury_hotel_lobby", "Luxury hotel lobby"),
        ("red_carpet", "Red carpet event"),
    ),
    AspectKey.VEHICLE: _catalog(
        ("sports_car", "red sports car"),
        ("vintage_convertible", "vintage convertible (1960s)"),
        ("motorbike", "classic motorbike"),
        ("yacht", "luxury yacht"),
        ("private_jet", "private jet"),
        ("horse_carriage", "horse-drawn carriage"),
    ),
    AspectKey.CELEBRITY: _catalog(
        ("hollywood_actor", "famous Hollywood actor"),
        ("pop_star", "international pop star"),
        ("football_star", "world-famous football player"),
        ("supermodel", "supermodel"),
        ("tech_entrepreneur", "well-known tech entrepreneur"),
    ),
    AspectKey.WEATHER: _catalog(
        ("sunny", "sunny with clear blue skies"),
        ("golden_hour", "warm golden hour light"),
        ("light_rain", "light rain with reflections on the ground"),
        ("snowfall", "gentle snowfall"),
        ("foggy", "misty and foggy"),
        ("stormy", "dramatic stormy sky"),
    ),
}


def get_presets(aspect: AspectKey) -> list[Preset]:
    """Returns the presets of an aspect in catalog order."""
    return list(PRESET_CATALOG[aspect].values())


def find_preset(aspect: AspectKey, preset_id: str) -> Preset | None:
    return PRESET_CATALOG[aspect].get(preset_id)
