"""Shapes of each generation result."""

from domain.models import PRICE_RANGES
from domain.shapes import (
    Choice,
    Field,
    Integer,
    Nested,
    SequenceOf,
    String,
    optional,
    shape,
)


__all__ = ["MENU", "MENU_DESIGN", "MENU_IMAGE", "MENU_ITEM", "PRICE_RANGES", "RECIPE"]


RECIPE = shape(
    "recipe",
    Field("name", String()),
    Field("description", String()),
    Field("difficulty", String()),
    Field("prepTime", String()),
    Field("cookTime", String()),
    Field("totalTime", String()),
    Field("servings", Integer()),
    Field("ingredients", SequenceOf(String()), description="With quantities."),
    Field("instructions", SequenceOf(String())),
    optional("tips", SequenceOf(String())),
    optional("nutrition", String()),
)


MENU_ITEM = shape(
    "menu_item",
    Field("name", String()),
    Field("description", String()),
    Field("price", String()),
)


MENU = shape(
    "menu",
    Field("restaurantName", String()),
    Field("tagline", String(), description="Catchy restaurant tagline or slogan"),
    Field("appetizers", SequenceOf(MENU_ITEM)),
    Field("mains", SequenceOf(MENU_ITEM)),
    Field("desserts", SequenceOf(MENU_ITEM)),
    Field("beverages", SequenceOf(MENU_ITEM)),
    optional(
        "specialties",
        SequenceOf(MENU_ITEM),
        description="Signature dishes or chef's specials",
    ),
    Field("funFact", String(), description="An amusing fact about the restaurant"),
    Field(
        "ambiance",
        String(),
        description="Description of the restaurant's atmosphere and decor",
    ),
)


PALETTE = shape(
    "palette",
    Field("primary", String(), description="Hex colour"),
    Field("secondary", String(), description="Hex colour"),
    Field("accent", String(), description="Hex colour"),
    Field("background", String(), description="Hex colour"),
)


TYPOGRAPHY = shape(
    "typography",
    Field("headings", String()),
    Field("body", String()),
)


MENU_DESIGN = shape(
    "menu_design",
    Field("style", String(), description="Overall visual style of the menu card"),
    Field("palette", Nested(PALETTE)),
    Field("typography", Nested(TYPOGRAPHY)),
    Field("layout", String()),
    Field("illustrations", SequenceOf(String())),
    Field(
        "imagePrompt",
        String(),
        description="A self-contained prompt for an image model to draw the card",
    ),
)


MENU_IMAGE = shape(
    "menu_image",
    Field("imageBase64", String()),
    Field("mimeType", Choice("image/png", "image/jpeg", "image/webp")),
    optional("revisedPrompt", String()),
)
