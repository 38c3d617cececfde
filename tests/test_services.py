import asyncio
import base64
from pathlib import Path
from typing import Any

import pytest

from conftest import PNG_BYTES
from domain.errors import EmptyResult, ShapeMismatch, UpstreamError
from domain.models import FoodInput
from domain.services import create_menu, create_recipe, menu_pipeline


@pytest.mark.asyncio
async def test_create_recipe(stub_client, recipe_payload: dict[str, Any]) -> None:
    client = stub_client({"recipe": recipe_payload})
    food = FoodInput.from_dict({"foodName": "Pasta Carbonara", "servingSize": 4})

    recipe = await create_recipe(food, client=client)

    assert recipe == recipe_payload
    assert client.calls == ["recipe"]
    prompt = client.requests[0].prompt
    assert 'recipe for "Pasta Carbonara"' in prompt
    assert "Difficulty level: medium" in prompt
    assert "Dietary restrictions: none" in prompt


@pytest.mark.asyncio
async def test_create_recipe_fills_name_and_servings(
    stub_client, recipe_payload: dict[str, Any]
) -> None:
    recipe_payload["name"] = ""
    del recipe_payload["servings"]
    client = stub_client({"recipe": recipe_payload})
    food = FoodInput.from_dict({"foodName": "Shakshuka", "servingSize": 6})

    recipe = await create_recipe(food, client=client)

    assert recipe["name"] == "Shakshuka"
    assert recipe["servings"] == 6
    assert "servings" not in recipe_payload


@pytest.mark.asyncio
async def test_create_recipe_raises_tagged_error(
    stub_client, recipe_payload: dict[str, Any]
) -> None:
    recipe_payload["ingredients"] = "everything"
    client = stub_client({"recipe": recipe_payload})
    with pytest.raises(ShapeMismatch) as info:
        await create_recipe(FoodInput(food_name="Soup"), client=client)
    assert info.value.field == "ingredients"
    assert info.value.step == "recipe"


@pytest.mark.asyncio
async def test_create_menu_without_image(stub_client, zen_restaurant, menu_payload) -> None:
    client = stub_client({"menu": menu_payload})
    card = await create_menu(zen_restaurant, client=client)
    assert card.to_dict() == menu_payload
    assert card.image_path is None
    assert client.calls == ["menu"]


@pytest.mark.asyncio
async def test_create_menu_with_image(
    stub_client,
    zen_restaurant,
    menu_payload,
    design_payload,
    image_payload,
    tmp_path: Path,
) -> None:
    client = stub_client(
        {"menu": menu_payload, "menu_design": design_payload, "menu_image": image_payload}
    )
    output_dir = tmp_path / "cards"

    card = await create_menu(
        zen_restaurant, client=client, with_image=True, output_dir=output_dir
    )

    assert client.calls == ["menu", "menu_design", "menu_image"]
    assert card.design == design_payload
    assert card.image_path is not None
    assert card.image_path.parent == output_dir
    assert card.image_path.name.startswith("zen-garden-bistro_")
    assert card.image_path.suffix == ".png"
    assert card.image_path.read_bytes() == PNG_BYTES
    body = card.to_dict()
    assert body["image"] == {"path": str(card.image_path), "mimeType": "image/png"}

    design_prompt = client.requests[1].prompt
    assert "Raked gravel, raw fish, inner peace." in design_prompt
    assert "Moss Roll 0" in design_prompt
    image_request = client.requests[2]
    assert image_request.output == "image"
    assert "#C1121F" in image_request.prompt
    assert "A calm printed menu card on washi paper." in image_request.prompt


@pytest.mark.asyncio
async def test_menu_image_failure_writes_nothing(
    stub_client, zen_restaurant, menu_payload, design_payload, tmp_path: Path
) -> None:
    client = stub_client(
        {"menu": menu_payload, "menu_design": design_payload, "menu_image": None}
    )
    with pytest.raises(EmptyResult) as info:
        await create_menu(
            zen_restaurant, client=client, with_image=True, output_dir=tmp_path / "out"
        )
    assert info.value.step == "image"
    assert not (tmp_path / "out").exists()


@pytest.mark.asyncio
async def test_menu_design_failure_skips_image(
    stub_client, zen_restaurant, menu_payload
) -> None:
    client = stub_client({"menu": menu_payload, "menu_design": RuntimeError("quota")})
    result = await menu_pipeline(client, with_image=True).run(zen_restaurant)
    assert isinstance(result.error, UpstreamError)
    assert result.failed_step == "design"
    assert client.calls == ["menu", "menu_design"]
    assert list(result.outputs) == ["menu"]


@pytest.mark.asyncio
async def test_concurrent_menu_cards_keep_their_own_image(
    stub_client,
    zen_restaurant,
    menu_payload,
    design_payload,
    tmp_path: Path,
) -> None:
    def client_drawing(data: bytes):
        image = {"imageBase64": base64.b64encode(data).decode(), "mimeType": "image/png"}
        return stub_client(
            {"menu": menu_payload, "menu_design": design_payload, "menu_image": image}
        )

    first, second = await asyncio.gather(
        create_menu(
            zen_restaurant,
            client=client_drawing(b"first"),
            with_image=True,
            output_dir=tmp_path,
        ),
        create_menu(
            zen_restaurant,
            client=client_drawing(b"second"),
            with_image=True,
            output_dir=tmp_path,
        ),
    )

    assert first.image_path != second.image_path
    assert first.image_path is not None and second.image_path is not None
    assert first.image_path.read_bytes() == b"first"
    assert second.image_path.read_bytes() == b"second"
