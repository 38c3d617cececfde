from typing import Any

import pytest

from domain.errors import ValidationError
from domain.models import FoodInput, RestaurantInput


def test_food_defaults() -> None:
    food = FoodInput.from_dict(
        {"foodName": "  Pasta Carbonara ", "dietaryRestrictions": "", "servingSize": 0}
    )
    assert food.food_name == "Pasta Carbonara"
    assert food.dietary_restrictions == "none"
    assert food.difficulty == "medium"
    assert food.serving_size == 4


@pytest.mark.parametrize(
    "body,field",
    (
        ({}, "foodName"),
        ({"foodName": "   "}, "foodName"),
        ({"foodName": 12}, "foodName"),
        ({"foodName": "Soup", "servingSize": "four"}, "servingSize"),
        ({"foodName": "Soup", "servingSize": -2}, "servingSize"),
        ({"foodName": "Soup", "servingSize": True}, "servingSize"),
    ),
)
def test_food_rejects(body: dict[str, Any], field: str) -> None:
    with pytest.raises(ValidationError) as info:
        FoodInput.from_dict(body)
    assert info.value.field == field
    assert info.value.status_code == 400


def test_restaurant_from_dict(zen_garden: dict[str, str]) -> None:
    restaurant = RestaurantInput.from_dict(zen_garden)
    assert restaurant.cuisine_type == "Japanese fusion"
    assert restaurant.special_feature is None
    assert restaurant.to_dict() == zen_garden


@pytest.mark.parametrize(
    "field", ["name", "theme", "cuisineType", "priceRange", "atmosphere"]
)
def test_restaurant_requires(zen_garden: dict[str, str], field: str) -> None:
    del zen_garden[field]
    with pytest.raises(ValidationError) as info:
        RestaurantInput.from_dict(zen_garden)
    assert info.value.field == field


def test_restaurant_price_range_is_case_sensitive(zen_garden: dict[str, str]) -> None:
    zen_garden["priceRange"] = "Budget"
    with pytest.raises(ValidationError) as info:
        RestaurantInput.from_dict(zen_garden)
    assert info.value.field == "priceRange"
