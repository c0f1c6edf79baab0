# portrait_studio/data/aspects.py
from pydantic import BaseModel

from portrait_studio.data.constants import AspectKey


class AspectDefinition(BaseModel):
    """Describes how one aspect contributes to the instruction."""
    key: AspectKey
    name: str  # Used in "For the {name}, ..." clauses
    description_template: str  # Prefix joined with the preset label
    allows_custom_upload: bool = True


# Order matters: clauses are emitted in this order.
ASPECTS: tuple[AspectDefinition, ...] = (
    AspectDefinition(
        key=AspectKey.CLOTHING,
        name="clothing",
        description_template="Subjects should be dressed in",
    ),
    AspectDefinition(
        key=AspectKey.BACKGROUND,
        name="background",
        description_template="The background should be a",
    ),
    AspectDefinition(
        key=AspectKey.VEHICLE,
        name="vehicle",
        description_template="Include a",
    ),
    AspectDefinition(
        key=AspectKey.CELEBRITY,
        name="celebrity",
        description_template="Add a",
    ),
    AspectDefinition(
        key=AspectKey.WEATHER,
        name="weather",
        description_template="The weather and atmosphere should be",
        allows_custom_upload=False,
    ),
)

ASPECTS_BY_KEY: dict[AspectKey, AspectDefinition] = {aspect.key: aspect for aspect in ASPECTS}
