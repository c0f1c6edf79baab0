# portrait_studio/services/prompting/templates.py

IDENTITY_PRESERVATION = (
    "The absolute highest priority is to perfectly preserve the face and identity of the "
    "person/people in the uploaded image(s). You MUST NOT alter their facial features, "
    "expression (unless requested), age, or ethnicity. The person in the final image must be "
    "instantly recognizable as the same person from the source photo. This is a "
    "non-negotiable instruction.\n"
    "With that primary instruction in mind, create a professional, realistic, high-resolution, "
    "and seamlessly blended composite photograph.\n"
    "The main subjects are the people from the provided image(s). Place them in the scene "
    "naturally.\n"
)

SKIN_TONE_CLAUSE = (
    "Subtly even out any uneven skin tone on the subjects for a smooth, natural look. "
    "Avoid making it look airbrushed or fake. "
)

MAKEUP_CLAUSE = (
    "If any of the subjects are female, apply light, natural-looking makeup (foundation, "
    "subtle eyeliner, mascara, neutral lipstick) that enhances their features without being "
    "overly dramatic. "
)

CUSTOM_REFERENCE_CLAUSE = "For the {name}, use the provided custom image(s) as a reference. "
PRESET_CLAUSE = "{description}: {label}. "
ASPECT_REQUEST_CLAUSE = 'Specific request for the {name}: "{request}". '
ADDITIONAL_REQUEST_CLAUSE = 'Overall additional user request: "{request}". '

CLOSING_CLAUSE = (
    "Ensure the final image is photorealistic and all elements are blended perfectly with "
    "correct lighting, shadows, and perspective."
)

ANGLE_CLAUSE = " The camera perspective should be a {angle}."

BACKGROUND_REMOVAL_PROMPT = """
Your task is to perform professional-grade background removal.
Identify the primary subject(s) in the image and isolate them perfectly.
Remove the entire background, making it transparent.
The output must be a PNG image with an alpha channel for transparency.
Do not add any new elements, text, or watermarks.
Only return the image of the isolated subject(s).
""".strip()
