from pathlib import Path
from typing import Any, Mapping

from domain.errors import ValidationError


PRICE_RANGES = ("budget", "mid-range", "upscale", "fine-dining")


def _text(data: Mapping[str, Any], key: str, *, required: bool = False) -> str:
    value = data.get(key)
    if value is None:
        value = ""
    if not isinstance(value, str):
        raise ValidationError(key, "should be a string")
    value = value.strip()
    if required and not value:
        raise ValidationError(key)
    return value


class FoodInput:
    def __init__(
        self,
        *,
        food_name: str,
        dietary_restrictions: str = "none",
        difficulty: str = "medium",
        serving_size: int = 4,
    ) -> None:
        self.food_name = food_name
        self.dietary_restrictions = dietary_restrictions
        self.difficulty = difficulty
        self.serving_size = serving_size

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FoodInput":
        """Build from the camelCase request body, filling blank values."""
        servings = data.get("servingSize") or 0
        if isinstance(servings, bool) or not isinstance(servings, int):
            raise ValidationError("servingSize", "should be an integer")
        if servings < 0:
            raise ValidationError("servingSize", "should not be negative")
        return cls(
            food_name=_text(data, "foodName", required=True),
            dietary_restrictions=_text(data, "dietaryRestrictions") or "none",
            difficulty=_text(data, "difficulty") or "medium",
            serving_size=servings or 4,
        )

    def __repr__(self) -> str:
        return f"<FoodInput(food_name={self.food_name})>"

    def to_dict(self) -> dict[str, Any]:
        return {
            "foodName": self.food_name,
            "dietaryRestrictions": self.dietary_restrictions,
            "difficulty": self.difficulty,
            "servingSize": self.serving_size,
        }


class RestaurantInput:
    def __init__(
        self,
        *,
        name: str,
        theme: str,
        cuisine_type: str,
        price_range: str,
        atmosphere: str,
        special_feature: str | None = None,
    ) -> None:
        if price_range not in PRICE_RANGES:
            raise ValidationError("priceRange", f"should be one of: {', '.join(PRICE_RANGES)}")
        self.name = name
        self.theme = theme
        self.cuisine_type = cuisine_type
        self.price_range = price_range
        self.atmosphere = atmosphere
        self.special_feature = special_feature

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RestaurantInput":
        return cls(
            name=_text(data, "name", required=True),
            theme=_text(data, "theme", required=True),
            cuisine_type=_text(data, "cuisineType", required=True),
            price_range=_text(data, "priceRange", required=True),
            atmosphere=_text(data, "atmosphere", required=True),
            special_feature=_text(data, "specialFeature") or None,
        )

    def __repr__(self) -> str:
        return f"<RestaurantInput(name={self.name})>"

    def to_dict(self) -> dict[str, Any]:
        d = {
            "name": self.name,
            "theme": self.theme,
            "cuisineType": self.cuisine_type,
            "priceRange": self.price_range,
            "atmosphere": self.atmosphere,
        }
        if self.special_feature:
            d["specialFeature"] = self.special_feature
        return d


class MenuCard:
    """A generated menu, plus its design and image when those were asked for."""

    def __init__(
        self,
        *,
        menu: dict[str, Any],
        design: dict[str, Any] | None = None,
        image_path: Path | None = None,
        mime_type: str | None = None,
    ) -> None:
        self.menu = menu
        self.design = design
        self.image_path = image_path
        self.mime_type = mime_type

    def __repr__(self) -> str:
        return f"<MenuCard(restaurant={self.menu.get('restaurantName')})>"

    def to_dict(self) -> dict[str, Any]:
        if self.design is None:
            return self.menu
        d: dict[str, Any] = {"menu": self.menu, "design": self.design}
        if self.image_path is not None:
            d["image"] = {"path": str(self.image_path), "mimeType": self.mime_type}
        return d
