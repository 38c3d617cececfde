import asyncio
import base64
from typing import Any, Callable

import pytest

from domain.models import RestaurantInput
from domain.pipeline import GenerationRequest
from domain.shapes import ExpectedShape


HANG = object()


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"not really a png"


class StubClient:
    """Answers by shape name and remembers every call."""

    def __init__(self, responses: dict[str, Any]) -> None:
        self.responses = responses
        self.calls: list[str] = []
        self.requests: list[GenerationRequest] = []
        self.cancelled: list[str] = []

    async def generate(self, request: GenerationRequest, shape: ExpectedShape) -> Any:
        self.calls.append(shape.name)
        self.requests.append(request)
        response = self.responses.get(shape.name)
        if response is HANG:
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                self.cancelled.append(shape.name)
                raise
        if isinstance(response, BaseException):
            raise response
        return response


@pytest.fixture
def stub_client() -> Callable[[dict[str, Any]], StubClient]:
    return StubClient


def menu_items(prefix: str, n: int = 4) -> list[dict[str, str]]:
    return [
        {
            "name": f"{prefix} {i}",
            "description": f"A {prefix.lower()} worth ordering twice.",
            "price": f"${12 + i}",
        }
        for i in range(n)
    ]


@pytest.fixture
def zen_garden() -> dict[str, str]:
    return {
        "name": "Zen Garden Bistro",
        "theme": "minimalist zen garden",
        "cuisineType": "Japanese fusion",
        "priceRange": "fine-dining",
        "atmosphere": "peaceful and serene",
    }


@pytest.fixture
def zen_restaurant(zen_garden: dict[str, str]) -> RestaurantInput:
    return RestaurantInput.from_dict(zen_garden)


@pytest.fixture
def menu_payload() -> dict[str, Any]:
    return {
        "restaurantName": "Zen Garden Bistro",
        "tagline": "Raked gravel, raw fish, inner peace.",
        "appetizers": menu_items("Moss Roll"),
        "mains": menu_items("Koi Pond Udon"),
        "desserts": menu_items("Bonsai Mochi"),
        "beverages": menu_items("Still Water Sencha"),
        "funFact": "The chef has never once raised their voice.",
        "ambiance": "Low tables, paper lanterns and a trickling stone fountain.",
    }


@pytest.fixture
def design_payload() -> dict[str, Any]:
    return {
        "style": "washi paper with sumi ink brushwork",
        "palette": {
            "primary": "#2F3E46",
            "secondary": "#84A98C",
            "accent": "#C1121F",
            "background": "#F4F1DE",
        },
        "typography": {"headings": "Shippori Mincho", "body": "Noto Sans JP"},
        "layout": "single column, sections separated by brush strokes",
        "illustrations": ["raked gravel", "maple leaf"],
        "imagePrompt": "A calm printed menu card on washi paper.",
    }


@pytest.fixture
def image_payload() -> dict[str, Any]:
    return {
        "imageBase64": base64.b64encode(PNG_BYTES).decode("utf-8"),
        "mimeType": "image/png",
        "revisedPrompt": None,
    }


@pytest.fixture
def recipe_payload() -> dict[str, Any]:
    return {
        "name": "Pasta Carbonara",
        "description": "Roman pasta with egg, pecorino and guanciale.",
        "difficulty": "medium",
        "prepTime": "10 minutes",
        "cookTime": "15 minutes",
        "totalTime": "25 minutes",
        "servings": 4,
        "ingredients": ["400 g spaghetti", "150 g guanciale", "4 egg yolks"],
        "instructions": ["Boil the pasta.", "Crisp the guanciale.", "Toss off the heat."],
        "tips": ["Keep some pasta water back."],
        "nutrition": "About 650 kcal per serving.",
    }
