import re

STYLE_DESCRIPTIONS: dict[str, str] = {
    "dreamcore": "dreamlike, surreal, ethereal atmosphere",
    "realism": "photorealistic, highly detailed, professional photography",
    "anime": "anime style, vibrant colors, detailed illustration",
    "editorial": "editorial photography, high fashion, professional lighting",
}

# The provider only renders three shapes, so 4:5 and 9:11 both come out tall.
DIMENSION_SHAPES: dict[str, str] = {
    "1:1": "square",
    "4:5": "tall",
    "9:11": "tall",
    "16:9": "wide",
}

SHAPE_SIZES: dict[str, str] = {
    "square": "1024x1024",
    "tall": "1024x1792",
    "wide": "1792x1024",
}

_MARKUP_CHARACTERS = re.compile(r"[<>]")


def sanitize_text(text: str) -> str:
    """Strips characters that could be read as markup, then surrounding whitespace."""
    return _MARKUP_CHARACTERS.sub("", text).strip()


def describe_style(style: str) -> str:
    return STYLE_DESCRIPTIONS.get(style, style)


def size_for_dimension(dimension: str) -> str:
    return SHAPE_SIZES[DIMENSION_SHAPES.get(dimension, "square")]


def compose_prompt(
    prompt: str,
    style: str,
    refinement: str | None = None,
    style_description: str | None = None,
) -> str:
    """
    Builds the text sent to the provider:
    prompt, learned style description, refinement, then the base style phrase.
    """
    parts = [prompt]
    if style_description:
        parts.append(style_description)
    if refinement:
        parts.append(refinement)
    parts.append(describe_style(style))
    return ", ".join(parts)
