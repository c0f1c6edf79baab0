# portrait_studio/services/__init__.py
from .image_generation_service import (
    generate_single_image,
    generate_variants,
)

__all__ = [
    "generate_single_image",
    "generate_variants",
]
